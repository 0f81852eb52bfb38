"""Attribute descriptors produced by the schema flattener.

The reducer turns every complex type of the RIO schema into an ordered list
of descriptors. Each descriptor is a small frozen dataclass so that lists can
be cached safely and deduplicated by value.

Overview:
        * ``Field`` is a named attribute with a declared type and cardinality.
        * ``Choice`` groups mutually exclusive descriptors.
        * ``Reference`` points at another top-level element instead of
            inlining it (only used inside abstract types).
        * ``KenmerkPlaceholder`` marks where the characteristics of the owning
            entity belong; it is replaced during flattening.
        * ``Literal`` carries a sequence child the flattener does not model
            (for example ``xs:any``) as its serialized XML.

Typical construction::

        from rio_schema_flattener.models import Cardinality, Field

        code = Field(name="code", kenmerk=False,
                     cardinality=Cardinality.REQUIRED, type="xs:string")
        code.to_dict()
        # {'name': 'code', 'kenmerk': False, 'cardinality': 'required', 'type': 'xs:string'}
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Tuple, Union


class Cardinality(Enum):
    """Normalized occurrence range of a field."""

    OPTIONAL = "optional"
    REQUIRED = "required"
    ZERO_OR_MORE = "zero_or_more"
    ONE_OR_MORE = "one_or_more"


# A (min, max) pair outside the known table; non-numeric bounds such as
# "unbounded" are kept as strings.
OccursPair = Tuple[Union[int, str], Union[int, str]]

# ``None`` means the element declares no occurrence bounds at all.
CardinalityValue = Optional[Union[Cardinality, OccursPair]]

NOT_APPLICABLE = "N/A"


def cardinality_to_primitive(cardinality: CardinalityValue) -> Any:
    """Render a cardinality as a JSON-friendly value.

    Returns:
        The enum value string, a ``[min, max]`` list for pass-through pairs,
        or ``"N/A"`` when no bounds were declared.
    """
    if cardinality is None:
        return NOT_APPLICABLE
    if isinstance(cardinality, Cardinality):
        return cardinality.value
    return list(cardinality)


@dataclass(frozen=True)
class Field:
    """A single named attribute of an entity.

    Attributes:
        name: Element name (``None`` for a non-abstract ``ref`` element).
        kenmerk: True when the field comes from a ``Kenmerkwaardenbereik_``
            type, i.e. it is a characteristic of the entity.
        cardinality: Normalized occurrence range.
        type: Declared type name, verbatim from the schema.
    """

    name: Optional[str]
    kenmerk: bool
    cardinality: CardinalityValue
    type: Optional[str]

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "kenmerk": self.kenmerk,
            "cardinality": cardinality_to_primitive(self.cardinality),
            "type": self.type,
        }


@dataclass(frozen=True)
class Choice:
    """Alternative group: exactly one of ``options`` applies per instance."""

    options: Tuple["AttributeDescriptor", ...]

    def to_dict(self) -> dict:
        return {"choice": [descriptor_to_primitive(o) for o in self.options]}


@dataclass(frozen=True)
class Reference:
    """Reference to a top-level element, kept by name rather than expanded."""

    cardinality: CardinalityValue
    type: Optional[str]
    ref: str

    def to_dict(self) -> dict:
        return {
            "cardinality": cardinality_to_primitive(self.cardinality),
            "type": self.type,
            "ref": self.ref,
        }


@dataclass(frozen=True)
class KenmerkPlaceholder:
    """Stand-in for the full characteristic set of the owning type."""

    def to_dict(self) -> dict:
        return {"kenmerklist": True}


@dataclass(frozen=True)
class Literal:
    """Sequence child passed through without interpretation."""

    xml: str

    def to_dict(self) -> str:
        return self.xml


AttributeDescriptor = Union[Field, Choice, Reference, KenmerkPlaceholder, Literal]
AttributeList = List[AttributeDescriptor]


def descriptor_to_primitive(descriptor: AttributeDescriptor) -> Any:
    """Return the primitive (dict or str) form of any descriptor."""
    return descriptor.to_dict()


def attribute_list_to_primitive(attributes: AttributeList) -> List[Any]:
    """Convert a whole attribute list for JSON encoding."""
    return [descriptor_to_primitive(d) for d in attributes]
