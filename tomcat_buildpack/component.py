from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Optional

from .buildpack_config import ComponentConfig
from .droplet import Application, Droplet
from .lib.download import DownloadCache
from .lib.repository import RepositoryIndex
from .lib.version import TokenizedVersion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComponentContext:
    application: Application
    configuration: ComponentConfig
    droplet: Droplet
    cache: DownloadCache


class VersionedDependencyComponent:
    """Base for components that install one versioned artifact from a repository.

    The configured candidate version (e.g. 8.0.+) is resolved against the
    repository index when the component is created, so detect() can report
    the concrete version before anything is downloaded.
    """

    component_name = "Component"
    component_id = "component"

    def __init__(
        self,
        context: ComponentContext,
        version_validator: Optional[Callable[[TokenizedVersion], None]] = None,
    ):
        self._application = context.application
        self._configuration = context.configuration
        self._droplet = context.droplet
        self._cache = context.cache

        index = RepositoryIndex.load(self._configuration.repository_root, self._cache)
        self._version, self._uri = index.find_item(self._configuration.version)
        if version_validator is not None:
            version_validator(self._version)

    @property
    def version(self) -> TokenizedVersion:
        return self._version

    @property
    def uri(self) -> str:
        return self._uri

    def supports(self) -> bool:
        raise NotImplementedError

    def detect(self) -> Optional[str]:
        return f"{self.component_id}={self._version}" if self.supports() else None

    def compile(self) -> None:
        raise NotImplementedError

    def release(self) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    @contextmanager
    def download(self, version: TokenizedVersion, uri: str, name: Optional[str] = None) -> Iterator[Path]:
        logger.info("Downloading %s %s from %s", name or self.component_name, version, uri)
        yield self._cache.get(uri)
