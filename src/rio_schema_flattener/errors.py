"""Exceptions raised while flattening a RIO schema.

All failures are fatal for the run: the conversion is deterministic, so a
schema that fails once will fail again. Expected absence (a type name that is
not in the registry) is not an error and never raises.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Optional


class SchemaFlattenError(ValueError):
    """Base class for schema conversion failures.

    Args:
        message: Human readable description of the problem.
        node: Offending schema node; serialized into ``node_xml`` so the
            failing fragment can be inspected without a debugger.
    """

    def __init__(self, message: str, node: Optional[ET.Element] = None) -> None:
        self.node_xml = _serialize(node) if node is not None else None
        if self.node_xml:
            message = f"{message}:\n{self.node_xml}"
        super().__init__(message)


class SchemaShapeError(SchemaFlattenError):
    """A node does not have the structure this schema family uses."""


class MissingNameError(SchemaFlattenError):
    """A top-level complex type lacks its ``name`` attribute."""


class CyclicTypeError(SchemaFlattenError):
    """A complex type was requested again while it was still being reduced."""

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(f"Complex type '{type_name}' inherits from itself")


def _serialize(node: ET.Element) -> str:
    return ET.tostring(node, encoding="unicode").strip()
