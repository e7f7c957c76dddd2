from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Tuple

import yaml

from .download import DownloadCache
from .version import TokenizedVersion, resolve_version

logger = logging.getLogger(__name__)

INDEX_FILE = "index.yml"


@dataclass(frozen=True)
class RepositoryIndex:
    """Versions available under a repository root, mapped to archive URIs."""

    root: str
    items: Dict[str, str]

    @classmethod
    def load(cls, repository_root: str, cache: DownloadCache) -> "RepositoryIndex":
        root = repository_root.rstrip("/")
        index_path = cache.get(f"{root}/{INDEX_FILE}")

        raw = yaml.safe_load(index_path.read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Repository index must be a mapping: {root}/{INDEX_FILE}")

        items = {str(k): str(v) for k, v in raw.items()}
        logger.debug("Repository %s lists %d version(s)", root, len(items))
        return cls(root=root, items=items)

    def find_item(self, candidate: str) -> Tuple[TokenizedVersion, str]:
        version = resolve_version(candidate, self.items.keys())
        if version is None:
            raise LookupError(
                f"No version resolvable for '{candidate}' in {sorted(self.items)} ({self.root}/{INDEX_FILE})"
            )
        uri = self.items[version.raw]
        logger.info("Resolved %s to %s (%s)", candidate, version, uri)
        return version, uri
