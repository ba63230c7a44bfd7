"""xcsg XML output tree built on ElementTree."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

XCSG_VERSION = "1.0"

PropertyValue = str | bool | int | float


def format_property(value: PropertyValue) -> str:
    """Stringify a property value the way xcsg expects it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        text = f"{value:.15g}"
        return "0" if text == "-0" else text
    return str(value)


class OutputNode:
    """Append-only handle on one element of the output tree."""

    __slots__ = ("element",)

    def __init__(self, element: ET.Element):
        self.element = element

    @property
    def tag(self) -> str:
        return self.element.tag

    def add_child(self, tag: str) -> OutputNode:
        return OutputNode(ET.SubElement(self.element, tag))

    def add_property(self, name: str, value: PropertyValue) -> None:
        self.element.set(name, format_property(value))


class XcsgDocument(OutputNode):
    """Root ``<xcsg>`` element of a converted model."""

    __slots__ = ()

    def __init__(self) -> None:
        super().__init__(ET.Element("xcsg", {"version": XCSG_VERSION}))

    def to_string(self) -> str:
        """Serialize with an XML declaration and two-space indentation."""
        tree = ET.ElementTree(self.element)
        ET.indent(tree, space="  ")
        body = ET.tostring(self.element, encoding="unicode")
        return '<?xml version="1.0" encoding="utf-8"?>\n' + body + "\n"

    def write(self, path: Path) -> None:
        path.write_text(self.to_string(), encoding="utf-8")
