"""Render an ``EmlDocument`` graph to an XML string.

A pure structural transform with no business logic:

  - dataclass fields marked ``attribute`` become XML attributes
  - a field marked ``text`` becomes the element's character data
  - every other field becomes a child element, in declaration order
  - lists become repeated sibling elements
  - None children are omitted, unless declared ``keep_empty``

Output is a UTF-8 XML declaration followed by the tree indented two
spaces per level.
"""

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import fields, is_dataclass
from decimal import Decimal

from src.eml.document import EmlDocument

logger = logging.getLogger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'

_SNAKE_PART = re.compile(r"_([a-zA-Z0-9])")


def element_name(field_name: str) -> str:
    """Convert a snake_case field name to its camelCase EML element name."""
    return _SNAKE_PART.sub(lambda m: m.group(1).upper(), field_name)


def format_value(value) -> str:
    """Render a leaf value as element text."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, float) and value.is_integer():
        # Whole-number coordinates render without a trailing ".0"
        return str(int(value))
    return str(value)


def _append(parent: ET.Element, tag: str, value, keep_empty: bool) -> None:
    if value is None:
        if keep_empty:
            ET.SubElement(parent, tag)
        return
    if isinstance(value, list):
        for item in value:
            _append(parent, tag, item, keep_empty)
        return
    if is_dataclass(value):
        parent.append(to_element(value, tag))
        return
    ET.SubElement(parent, tag).text = format_value(value)


def to_element(node, tag: str) -> ET.Element:
    """Build an ElementTree element for a document dataclass."""
    elem = ET.Element(tag)
    for f in fields(node):
        value = getattr(node, f.name)
        role = f.metadata.get("xml", "element")
        name = f.metadata.get("xml_name") or element_name(f.name)
        if role == "attribute":
            if value is not None:
                elem.set(name, format_value(value))
        elif role == "text":
            if value is not None:
                elem.text = format_value(value)
        else:
            _append(elem, name, value, f.metadata.get("keep_empty", False))
    return elem


def serialize(document: EmlDocument) -> str:
    """Render the document as an XML string.

    Args:
        document: Fully assembled EML document.

    Returns:
        XML text beginning with the XML declaration.
    """
    root = to_element(document, document.xml_tag)
    ET.indent(root, space="  ")
    body = ET.tostring(root, encoding="unicode")
    xml = f"{XML_DECLARATION}\n{body}"
    logger.debug("Serialized EML document (%d characters)", len(xml))
    return xml
