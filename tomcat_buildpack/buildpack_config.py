from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = str(Path(__file__).resolve().parent / "config" / "tomcat.yml")
DEFAULT_ENV_VAR = "JBP_CONFIG_TOMCAT"


@dataclass(frozen=True)
class ComponentConfig:
    raw: Dict[str, Any]

    def get(self, key: str, default: Any = None) -> Any:
        return self.raw.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.raw.get(key)

    @property
    def version(self) -> str:
        return str(self.raw.get("version") or "8.0.+")

    @property
    def repository_root(self) -> str:
        root = self.raw.get("repository_root")
        if not root:
            raise ValueError("repository_root is not configured")
        return str(root)

    @property
    def context_path(self) -> Optional[str]:
        value = self.raw.get("context_path")
        return str(value) if value else None

    @property
    def download_timeout(self) -> float:
        return float(self.raw.get("download_timeout") or 300)


def _load_mapping(text: str, source: str) -> Dict[str, Any]:
    raw = yaml.safe_load(text) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{source} must contain a mapping/object")
    return raw


def load_component_config(path: str = DEFAULT_CONFIG_PATH, env_var: str = DEFAULT_ENV_VAR) -> ComponentConfig:
    """Load a component's YAML configuration, applying an environment override.

    The override is a YAML mapping (e.g. JBP_CONFIG_TOMCAT='{version: 7.0.+}')
    whose keys replace those from the file.
    """

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("component config must be YAML")

    raw = _load_mapping(p.read_text(encoding="utf-8"), str(p))

    override = os.environ.get(env_var)
    if override:
        raw.update(_load_mapping(override, env_var))
        logger.info("Applied configuration override from %s", env_var)

    return ComponentConfig(raw=raw)
