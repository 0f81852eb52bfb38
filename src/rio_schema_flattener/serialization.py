"""Render the flattened entity mapping as JSON or EDN.

JSON is the default and mirrors :meth:`Field.to_dict` and friends. EDN is what
the Clojure mapper reads: descriptor keys and cardinalities become keywords
(``{:name "code" :kenmerk false :cardinality :required :type "xs:string"}``),
entity names stay strings, pass-through ``(min, max)`` pairs become vectors.

Example:
        from rio_schema_flattener.serialization import dumps

        print(dumps(mapping, "edn"))
"""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping

import edn_format
from edn_format import Keyword

from .models import (
    AttributeDescriptor,
    AttributeList,
    Cardinality,
    CardinalityValue,
    Literal,
    attribute_list_to_primitive,
    cardinality_to_primitive,
)


def to_primitive(mapping: Mapping[str, AttributeList]) -> Dict[str, Any]:
    """Convert the mapping to plain dicts, lists and strings."""
    return {name: attribute_list_to_primitive(attrs) for name, attrs in mapping.items()}


def to_json(mapping: Mapping[str, AttributeList], indent: int = 2) -> str:
    return json.dumps(to_primitive(mapping), indent=indent, ensure_ascii=False)


def to_edn(mapping: Mapping[str, AttributeList]) -> str:
    """Serialize the mapping as an EDN map keyed by entity name."""
    value = {name: [_edn_descriptor(d) for d in attrs] for name, attrs in mapping.items()}
    return edn_format.dumps(value)


def dumps(mapping: Mapping[str, AttributeList], output_format: str = "json") -> str:
    """Serialize ``mapping`` in ``output_format`` (``json`` or ``edn``).

    Raises:
        ValueError: For an unknown format.
    """
    if output_format == "json":
        return to_json(mapping)
    if output_format == "edn":
        return to_edn(mapping)
    raise ValueError(f"Unknown output format '{output_format}'")


def _edn_descriptor(descriptor: AttributeDescriptor) -> Any:
    if isinstance(descriptor, Literal):
        return descriptor.xml
    edn: Dict[Keyword, Any] = {}
    for key, value in descriptor.to_dict().items():
        if key == "cardinality":
            value = _edn_cardinality(descriptor.cardinality)  # type: ignore[union-attr]
        elif key == "choice":
            value = [_edn_descriptor(o) for o in descriptor.options]  # type: ignore[union-attr]
        edn[Keyword(key)] = value
    return edn


def _edn_cardinality(cardinality: CardinalityValue) -> Any:
    if isinstance(cardinality, Cardinality):
        return Keyword(cardinality.value)
    return cardinality_to_primitive(cardinality)
