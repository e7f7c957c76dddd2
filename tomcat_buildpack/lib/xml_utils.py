from __future__ import annotations

from pathlib import Path

from lxml import etree


def read_xml(path: str | Path) -> etree._ElementTree:
    """Parse an XML file, keeping comments and dropping formatting whitespace."""

    parser = etree.XMLParser(remove_blank_text=True, remove_comments=False)
    return etree.parse(str(path), parser)


def write_xml(path: str | Path, document: etree._ElementTree) -> None:
    document.write(str(path), encoding="utf-8", xml_declaration=True, pretty_print=True)
