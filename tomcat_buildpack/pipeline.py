from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence

from .component import ComponentContext
from .tomcat_instance import TomcatInstance

logger = logging.getLogger(__name__)


class Component(Protocol):
    """A buildpack component driven through detect, compile and release."""

    component_id: str

    def detect(self) -> Optional[str]:
        ...

    def compile(self) -> None:
        ...

    def release(self) -> Optional[Dict[str, Any]]:
        ...


def build_components(context: ComponentContext) -> List[Component]:
    return [
        TomcatInstance(context),
    ]


def run_detect(components: Sequence[Component]) -> List[str]:
    tags: List[str] = []
    for component in components:
        tag = component.detect()
        if tag:
            logger.info("Detected %s", tag)
            tags.append(tag)
        else:
            logger.debug("%s does not apply", component.component_id)
    return tags


def run_compile(components: Sequence[Component]) -> List[str]:
    """Compile every detected component in registration order."""

    compiled: List[str] = []
    for component in components:
        if not component.detect():
            logger.info("Skipping %s (not detected)", component.component_id)
            continue
        logger.info("Compiling %s", component.component_id)
        component.compile()
        compiled.append(component.component_id)
    return compiled


def run_release(components: Sequence[Component]) -> Dict[str, Any]:
    release: Dict[str, Any] = {"addons": [], "config_vars": {}, "default_process_types": {}}
    for component in components:
        if not component.detect():
            continue
        contribution = component.release()
        if not contribution:
            continue
        release["addons"].extend(contribution.get("addons") or [])
        release["config_vars"].update(contribution.get("config_vars") or {})
        release["default_process_types"].update(contribution.get("default_process_types") or {})
    return release
