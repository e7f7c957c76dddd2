from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Set, Union

from lxml import etree

from .component import ComponentContext, VersionedDependencyComponent
from .droplet import link_to
from .lib.command import run_cmd
from .lib.version import TokenizedVersion
from .lib.xml_utils import read_xml, write_xml
from .logging_utils import timed

logger = logging.getLogger(__name__)

TOMCAT_8 = TokenizedVersion("8.0.0")

JASPER_LISTENER = "org.apache.catalina.core.JasperListener"
DATASOURCE_JAR = "tomcat-jdbc.jar"


class TomcatInstance(VersionedDependencyComponent):
    """Downloads Tomcat into the droplet sandbox and deploys the application into it."""

    component_name = "Tomcat Instance"
    component_id = "tomcat-instance"

    def __init__(self, context: ComponentContext):
        super().__init__(context, version_validator=lambda v: v.check_size(3))

    def supports(self) -> bool:
        return True

    def compile(self) -> None:
        logger.debug("Compiling %s %s into %s", self.component_name, self.version, str(self._droplet.sandbox))
        with self.download(self.version, self.uri) as file:
            self.expand(file)
        self.process_wars()
        link_to(self._application.children, self.root())
        if self.tomcat_datasource_jar.exists():
            self._droplet.additional_libraries.append(self.tomcat_datasource_jar)
        self._droplet.additional_libraries.link_to(self.web_inf_lib)

    def release(self) -> Optional[Dict[str, Any]]:
        return None

    @property
    def tomcat_7_compatible(self) -> bool:
        return self.version < TOMCAT_8

    # Layout of the expanded distribution.

    @property
    def tomcat_webapps(self) -> Path:
        return self._droplet.sandbox / "webapps"

    @property
    def tomcat_lib(self) -> Path:
        return self._droplet.sandbox / "lib"

    @property
    def context_xml(self) -> Path:
        return self._droplet.sandbox / "conf" / "context.xml"

    @property
    def server_xml(self) -> Path:
        return self._droplet.sandbox / "conf" / "server.xml"

    @property
    def tomcat_datasource_jar(self) -> Path:
        return self.tomcat_lib / DATASOURCE_JAR

    @property
    def web_inf_lib(self) -> Path:
        return self._droplet.root / "WEB-INF" / "lib"

    def root(self) -> Path:
        """Directory the application's files are linked into.

        context_path is resolved for the log only; the application always
        lands in webapps itself.
        """

        context_path = re.sub(r"^/", "", self._configuration.context_path or "ROOT").replace("/", "#")
        logger.debug("Context path %s not applied; root is %s", context_path, str(self.tomcat_webapps))
        return self.tomcat_webapps

    def expand(self, file: Path) -> None:
        sandbox = self._droplet.sandbox
        with timed(f"Expanding {self.component_name} to {sandbox.relative_to(self._droplet.root)}", logger):
            sandbox.mkdir(parents=True, exist_ok=True)
            self._untar(file)

            self._droplet.copy_resources()
            self.configure_linking()
            self.configure_jasper()

    def configure_linking(self) -> None:
        document = read_xml(self.context_xml)
        context = _first(document, "/Context", self.context_xml)

        if self.tomcat_7_compatible:
            context.set("allowLinking", "true")
        else:
            etree.SubElement(context, "Resources", allowLinking="true")

        write_xml(self.context_xml, document)
        logger.info("Enabled symlink following in %s", str(self.context_xml))

    def configure_jasper(self) -> None:
        if not self.tomcat_7_compatible:
            return

        document = read_xml(self.server_xml)
        _first(document, "/Server", self.server_xml)
        service = _first(document, "//Service", self.server_xml)

        listener = etree.Element("Listener", className=JASPER_LISTENER)
        service.addprevious(listener)

        write_xml(self.server_xml, document)
        logger.info("Added %s to %s", JASPER_LISTENER, str(self.server_xml))

    def application_wars(self, files: Iterable[Union[str, Path]]) -> Set[Union[str, Path]]:
        wars = set()
        for file in files:
            is_war = os.path.splitext(str(file))[1] == ".war"
            logger.debug("Checking %s for .war extension: %s", file, is_war)
            if is_war:
                wars.add(file)
        return wars

    def expand_war(self, file: Path) -> None:
        war_dir = self._droplet.root / Path(file).stem
        logger.debug("Making directory %s", str(war_dir))
        war_dir.mkdir(parents=True, exist_ok=True)
        # Contents go to the sandbox, not war_dir.
        logger.info("Extracting %s into %s", Path(file).name, str(self._droplet.sandbox))
        self._untar(file)

    def process_wars(self) -> None:
        for file in sorted(self.application_wars(self._application.children)):
            self.expand_war(file)

    def _untar(self, file: Path) -> None:
        run_cmd(
            [
                "tar",
                "xzf",
                str(file),
                "-C",
                str(self._droplet.sandbox),
                "--strip",
                "1",
                "--exclude",
                "webapps",
            ]
        )


def _first(document: etree._ElementTree, xpath: str, path: Path) -> etree._Element:
    found = document.xpath(xpath)
    if not found:
        raise ValueError(f"{path} has no element matching {xpath}")
    return found[0]
