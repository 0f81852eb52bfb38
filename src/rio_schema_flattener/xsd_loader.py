"""Load the RIO XSD into lookup tables for the reducer.

The loader normalizes the parsed document so that the reducer only ever sees
unqualified tag names and no documentation nodes:

* ``{http://www.w3.org/2001/XMLSchema}complexType`` becomes ``complexType``
  (attribute keys are unqualified the same way; attribute *values* such as
  ``xs:string`` are left untouched).
* Every ``annotation`` node is removed, wherever it is nested. Annotations
  inside a complex type would otherwise be counted as its structural child.

Two tables are built from the top level of the schema:

* the raw complex type registry, name -> unresolved ``complexType`` node;
* the element type map, element name -> declared type name, used to resolve
  ``ref`` elements of abstract types.

Example:
        from pathlib import Path
        from rio_schema_flattener.xsd_loader import load_schema

        index = load_schema(Path("DUO_RIO_Beheren_OnderwijsOrganisatie_V4.xsd"))
        print(len(index.complex_types), "complex types")
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from .errors import MissingNameError, SchemaShapeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchemaIndex:
    """Read-only lookup tables built from one schema document.

    Attributes:
        complex_types: Top-level complex type name -> raw node, in document order.
        element_types: Top-level element name -> declared type name.
        source: Path the schema was read from (``None`` for in-memory trees).
    """

    complex_types: Dict[str, ET.Element] = field(default_factory=dict)
    element_types: Dict[str, str] = field(default_factory=dict)
    source: Optional[Path] = None


def load_schema(xsd_path: Path) -> SchemaIndex:
    """Parse an XSD file and index its complex types and elements.

    Args:
        xsd_path: Path to the schema file.

    Returns:
        The :class:`SchemaIndex` for the document.

    Raises:
        xml.etree.ElementTree.ParseError: If the file is not well-formed XML.
        MissingNameError: If a top-level complex type has no name.
        SchemaShapeError: If the document root is not ``schema``.
    """
    xsd_path = Path(xsd_path)
    logger.debug("Loading schema from %s", xsd_path)
    root = ET.parse(xsd_path).getroot()
    return build_index(root, source=xsd_path)


def build_index(root: ET.Element, source: Optional[Path] = None) -> SchemaIndex:
    """Normalize ``root`` in place and build the lookup tables."""
    strip_namespaces(root)
    remove_annotations(root)
    if root.tag != "schema":
        raise SchemaShapeError(f"Expected a schema document, found <{root.tag}>")

    complex_types: Dict[str, ET.Element] = {}
    element_types: Dict[str, str] = {}
    for node in root:
        if node.tag == "complexType":
            name = node.get("name")
            if not name:
                raise MissingNameError("Top-level complexType without a name", node)
            complex_types[name] = node
        elif node.tag == "element":
            name = node.get("name")
            type_name = node.get("type")
            if not name or not type_name:
                # Inline-typed elements are never the target of a ref we expand
                logger.debug("Skipping element %r without a declared type", name)
                continue
            element_types[name] = type_name

    logger.debug(
        "Indexed %d complex types and %d elements",
        len(complex_types),
        len(element_types),
    )
    return SchemaIndex(
        complex_types=complex_types, element_types=element_types, source=source
    )


def strip_namespaces(root: ET.Element) -> None:
    """Drop ``{namespace}`` qualifiers from tags and attribute keys."""
    for node in root.iter():
        if not isinstance(node.tag, str):
            continue
        node.tag = _unqualified(node.tag)
        if any(key.startswith("{") for key in node.attrib):
            attrib = {_unqualified(key): value for key, value in node.attrib.items()}
            node.attrib.clear()
            node.attrib.update(attrib)


def remove_annotations(root: ET.Element) -> None:
    """Remove every ``annotation`` node below ``root``."""
    for parent in list(root.iter()):
        for child in list(parent):
            if child.tag == "annotation":
                parent.remove(child)


def local_name(value: Optional[str]) -> Optional[str]:
    """Return a QName value without its prefix (``xs:string`` -> ``string``)."""
    if value is None:
        return None
    if ":" in value:
        return value.split(":", 1)[1]
    return value


def _unqualified(tag: str) -> str:
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag
