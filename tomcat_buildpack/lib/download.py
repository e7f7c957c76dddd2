from __future__ import annotations

import hashlib
import logging
import os
import shutil
from pathlib import Path
from urllib.parse import unquote, urlparse

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 300.0
CHUNK_SIZE = 1024 * 1024


class DownloadCache:
    """Download-once cache for repository indexes and archives.

    Each URI maps to <cache_root>/<sha256(uri)>.cached. Entries are never
    expired; a fresh build starts from an empty cache directory.
    """

    def __init__(self, cache_root: str | Path, *, timeout_s: float = DEFAULT_TIMEOUT_S):
        self.cache_root = Path(cache_root)
        self.timeout_s = timeout_s

    def cached_path(self, uri: str) -> Path:
        digest = hashlib.sha256(uri.encode("utf-8")).hexdigest()
        return self.cache_root / f"{digest}.cached"

    def get(self, uri: str) -> Path:
        """Return a local copy of uri, fetching it on first use."""

        target = self.cached_path(uri)
        if target.exists():
            logger.info("Using cached copy of %s", uri)
            return target

        self.cache_root.mkdir(parents=True, exist_ok=True)
        partial = target.with_suffix(".part")

        scheme = urlparse(uri).scheme
        if scheme == "file":
            self._copy_file(uri, partial)
        elif scheme in {"http", "https"}:
            self._fetch_http(uri, partial)
        else:
            raise ValueError(f"Unsupported URI scheme for download: {uri}")

        os.replace(partial, target)
        logger.info("Cached %s (%d bytes)", uri, target.stat().st_size)
        return target

    def _copy_file(self, uri: str, dst: Path) -> None:
        src = Path(unquote(urlparse(uri).path))
        if not src.exists():
            raise FileNotFoundError(str(src))
        shutil.copyfile(src, dst)

    def _fetch_http(self, uri: str, dst: Path) -> None:
        logger.debug("GET %s (timeout=%ss)", uri, self.timeout_s)
        with requests.get(uri, stream=True, timeout=self.timeout_s) as r:
            r.raise_for_status()
            with open(dst, "wb") as f:
                for chunk in r.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
