from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .buildpack_config import DEFAULT_CONFIG_PATH, load_component_config
from .component import ComponentContext
from .droplet import BUILDPACK_DIR, BUILDPACK_LOG, Application, Droplet
from .lib.download import DownloadCache
from .logging_utils import configure_logging, resolve_level
from .pipeline import build_components, run_compile, run_detect, run_release

logger = logging.getLogger(__name__)

RESOURCES_DIR = Path(__file__).resolve().parent / "resources"
SANDBOX_ID = "tomcat"


def build_context(
    *,
    build_dir: str,
    cache_dir: Optional[str] = None,
    config_path: str = DEFAULT_CONFIG_PATH,
) -> ComponentContext:
    root = Path(build_dir).resolve()
    if not root.is_dir():
        raise NotADirectoryError(build_dir)

    cfg = load_component_config(config_path)
    cache_root = Path(cache_dir) if cache_dir else root / BUILDPACK_DIR / "cache"

    return ComponentContext(
        application=Application(root),
        configuration=cfg,
        droplet=Droplet(root=root, component_id=SANDBOX_ID, resources=RESOURCES_DIR / SANDBOX_ID),
        cache=DownloadCache(cache_root, timeout_s=cfg.download_timeout),
    )


def run(
    command: str,
    *,
    build_dir: str,
    cache_dir: Optional[str] = None,
    config_path: str = DEFAULT_CONFIG_PATH,
    log_path: Optional[str] = None,
    debug: bool = False,
) -> Any:
    """Run one lifecycle phase over the registered components.

    Returns the detect tags, the compiled component ids, or the release
    document, depending on command.
    """

    configure_logging(
        log_path=log_path or str(Path(build_dir) / BUILDPACK_LOG),
        level=resolve_level(debug),
    )

    try:
        context = build_context(build_dir=build_dir, cache_dir=cache_dir, config_path=config_path)
        components = build_components(context)

        if command == "detect":
            return run_detect(components)
        if command == "compile":
            return run_compile(components)
        if command == "release":
            return run_release(components)
        raise ValueError(f"Unknown command: {command}")
    except Exception:
        logger.exception("Buildpack %s failed", command)
        raise


def _render_release(release: Dict[str, Any]) -> str:
    return yaml.safe_dump(release, default_flow_style=False, sort_keys=False)


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="tomcat-buildpack")
    p.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to component configuration (yaml)")
    p.add_argument("--log", default=None, help="Path to buildpack log (default: BUILD_DIR/.java-buildpack.log)")
    p.add_argument("--debug", action="store_true", help="Log at debug level")

    sub = p.add_subparsers(dest="command", required=True)

    detect = sub.add_parser("detect", help="Report which components apply")
    detect.add_argument("build_dir")

    compile_ = sub.add_parser("compile", help="Install Tomcat and the application into the droplet")
    compile_.add_argument("build_dir")
    compile_.add_argument("cache_dir")

    release = sub.add_parser("release", help="Print the release document")
    release.add_argument("build_dir")

    args = p.parse_args(argv)

    result = run(
        args.command,
        build_dir=args.build_dir,
        cache_dir=getattr(args, "cache_dir", None),
        config_path=args.config,
        log_path=args.log,
        debug=bool(args.debug),
    )

    if args.command == "detect":
        if not result:
            return 1
        sys.stdout.write(" ".join(result) + "\n")
    elif args.command == "release":
        sys.stdout.write(_render_release(result))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
