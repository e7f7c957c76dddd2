from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List

from .lib.assets import copy_tree

logger = logging.getLogger(__name__)

BUILDPACK_DIR = ".java-buildpack"
BUILDPACK_LOG = ".java-buildpack.log"


def link_to(sources: Iterable[Path], destination: Path) -> List[Path]:
    """Symlink each source into destination, using paths relative to destination."""

    destination.mkdir(parents=True, exist_ok=True)
    links: List[Path] = []
    for source in sources:
        link = destination / source.name
        if link.is_symlink():
            link.unlink()
        target = os.path.relpath(source, destination)
        link.symlink_to(target)
        logger.debug("Linked %s -> %s", str(link), target)
        links.append(link)
    return links


class AdditionalLibraries(list):
    """Jars shared by every component of a build, in insertion order."""

    def append(self, path: Path) -> None:
        if path not in self:
            super().append(path)

    def link_to(self, destination: Path) -> List[Path]:
        return link_to(self, destination)


@dataclass
class Droplet:
    root: Path
    component_id: str
    resources: Path
    additional_libraries: AdditionalLibraries = field(default_factory=AdditionalLibraries)

    @property
    def buildpack_dir(self) -> Path:
        return self.root / BUILDPACK_DIR

    @property
    def sandbox(self) -> Path:
        return self.buildpack_dir / self.component_id

    def copy_resources(self) -> None:
        if not self.resources.exists():
            logger.debug("No resources for %s under %s", self.component_id, str(self.resources))
            return
        copy_tree(self.resources, self.sandbox)


class Application:
    """The files a user pushed, as they were before the build started."""

    def __init__(self, root: Path):
        self.root = Path(root)
        self.children: List[Path] = sorted(
            p for p in self.root.iterdir() if p.name not in {BUILDPACK_DIR, BUILDPACK_LOG}
        )
