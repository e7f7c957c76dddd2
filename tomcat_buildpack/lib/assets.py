from __future__ import annotations

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def copy_tree(src: str | Path, dst: str | Path) -> list[Path]:
    """Overlay every file under src onto dst, replacing files that exist.

    Returns the destination paths written.
    """

    s = Path(src)
    d = Path(dst)
    if not s.exists():
        raise FileNotFoundError(str(s))

    written: list[Path] = []
    d.mkdir(parents=True, exist_ok=True)
    for item in sorted(s.rglob("*")):
        out = d / item.relative_to(s)
        if item.is_dir():
            out.mkdir(parents=True, exist_ok=True)
            continue
        out.parent.mkdir(parents=True, exist_ok=True)
        if out.is_symlink():
            out.unlink()
        shutil.copy2(item, out)
        written.append(out)

    logger.debug("Copied %d file(s) %s -> %s", len(written), str(s), str(d))
    return written
