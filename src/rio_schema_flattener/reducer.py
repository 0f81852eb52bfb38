"""Reduce RIO complex types to flat attribute lists.

This is the core of the flattener. Three mutually recursive functions walk the
schema:

* :func:`resolve` looks a type up by name, memoizing results in the
  :class:`~rio_schema_flattener.cache.ResolvedTypeCache`;
* :func:`reduce_complex_type` handles one ``complexType`` node: a plain
  ``sequence`` or a ``complexContent/extension`` of a base type;
* :func:`simplify_sequence_element` turns one sequence child into an
  attribute descriptor.

Only the shapes used by the RIO schema are supported. Anything else raises
:class:`~rio_schema_flattener.errors.SchemaShapeError` carrying the offending
node, so an unexpected schema revision fails loudly instead of producing a
partial mapping.

Inheritance ordering:
    For ``<extension base="Base">`` the resulting list is the base type's
    attributes, then the attributes of the companion characteristic type
    ``Kenmerkwaardenbereik_<Name>`` (if the schema defines one), then the
    extension's own sequence.

Example:
        from pathlib import Path
        from rio_schema_flattener.reducer import ResolutionContext, resolve
        from rio_schema_flattener.xsd_loader import load_schema

        ctx = ResolutionContext(load_schema(Path("rio.xsd")))
        for descriptor in resolve(ctx, "HoOpleidingPeriode"):
                print(descriptor)
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Dict, Optional

from .cache import ResolvedTypeCache
from .conventions import CARDINALITIES, KENMERK_RANGE_PREFIX, KENMERK_TYPE, REQUEST_SUFFIX
from .errors import MissingNameError, SchemaShapeError
from .models import (
    AttributeDescriptor,
    AttributeList,
    CardinalityValue,
    Choice,
    Field,
    KenmerkPlaceholder,
    Literal,
    Reference,
)
from .xsd_loader import SchemaIndex, local_name

logger = logging.getLogger(__name__)


@dataclass
class ResolutionContext:
    """Everything a resolution pass needs, passed explicitly.

    Attributes:
        index: Read-only tables from the loader.
        cache: Resolved types; grows during the pass.
    """

    index: SchemaIndex
    cache: ResolvedTypeCache = field(default_factory=ResolvedTypeCache)


def resolve(ctx: ResolutionContext, type_name: str) -> AttributeList:
    """Return the attributes of ``type_name``, reducing it on first use.

    Unknown names resolve to an empty list; the schema references types (and
    the assembler asks for entity variants) that carry no structure.

    The returned list is shared with the cache and must not be mutated.
    """
    name = local_name(type_name) or type_name
    cached = ctx.cache.get(name)
    if cached is not None:
        return cached

    node = ctx.index.complex_types.get(name)
    if node is None:
        logger.debug("No complex type named %s; treating as empty", name)
        return []

    with ctx.cache.reducing(name):
        attributes = reduce_complex_type(ctx, node)
    ctx.cache.set(name, attributes)
    return attributes


def resolve_all(ctx: ResolutionContext) -> Dict[str, AttributeList]:
    """Resolve every registered complex type, in document order.

    Surfaces a shape violation anywhere in the schema, not only in the types
    reachable from the requested entities.
    """
    return {name: resolve(ctx, name) for name in ctx.index.complex_types}


def reduce_complex_type(ctx: ResolutionContext, node: ET.Element) -> AttributeList:
    """Reduce a raw ``complexType`` node to its attribute list.

    Raises:
        MissingNameError: If the node has no ``name``.
        SchemaShapeError: If the node is not a single ``sequence`` or a
            ``complexContent/extension`` wrapper.
    """
    name = node.get("name")
    if not name:
        raise MissingNameError("complexType without a name", node)
    if name.endswith(REQUEST_SUFFIX):
        return []

    children = list(node)
    if len(children) > 1:
        raise SchemaShapeError(f"complexType '{name}' has more than one child", node)
    if not children:
        return []

    kenmerk = name.startswith(KENMERK_RANGE_PREFIX)
    abstract = node.get("abstract") == "true"
    child = children[0]

    if child.tag == "sequence":
        return _reduce_sequence(ctx, child, name, kenmerk, abstract)
    if child.tag == "complexContent":
        return _reduce_extension(ctx, child, name, kenmerk, abstract)
    raise SchemaShapeError(f"Unsupported content <{child.tag}> in '{name}'", child)


def _reduce_extension(
    ctx: ResolutionContext,
    complex_content: ET.Element,
    name: str,
    kenmerk: bool,
    abstract: bool,
) -> AttributeList:
    wrapped = list(complex_content)
    if len(wrapped) != 1 or wrapped[0].tag != "extension":
        raise SchemaShapeError(
            f"complexContent of '{name}' must hold exactly one extension",
            complex_content,
        )
    extension = wrapped[0]
    base = extension.get("base")
    if not base:
        raise SchemaShapeError(f"extension in '{name}' has no base", extension)

    # Copy: the base list lives in the cache
    attributes = list(resolve(ctx, base))
    attributes.extend(resolve(ctx, KENMERK_RANGE_PREFIX + name))

    own = list(extension)
    if len(own) > 1:
        raise SchemaShapeError(f"extension in '{name}' has more than one child", extension)
    if own:
        sequence = own[0]
        if sequence.tag != "sequence":
            raise SchemaShapeError(f"extension in '{name}' must hold a sequence", sequence)
        attributes.extend(_reduce_sequence(ctx, sequence, name, kenmerk, abstract))
    return attributes


def _reduce_sequence(
    ctx: ResolutionContext,
    sequence: ET.Element,
    name: str,
    kenmerk: bool,
    abstract: bool,
) -> AttributeList:
    attributes: AttributeList = []
    for child in sequence:
        descriptor = simplify_sequence_element(
            ctx, child, owner=name, kenmerk=kenmerk, abstract=abstract
        )
        if descriptor is not None:
            attributes.append(descriptor)
    return attributes


def simplify_sequence_element(
    ctx: ResolutionContext,
    node: ET.Element,
    owner: str,
    kenmerk: bool,
    abstract: bool,
) -> Optional[AttributeDescriptor]:
    """Turn one sequence child into an attribute descriptor.

    Args:
        ctx: Resolution context (only the element type map is consulted).
        node: Child of a ``sequence`` or ``choice``.
        owner: Name of the enclosing complex type.
        kenmerk: Whether the enclosing type is a characteristic range.
        abstract: Whether the enclosing type is declared abstract.

    Returns:
        The descriptor, or None for an element removed from the schema
        (no name, no type, ``maxOccurs="0"``).
    """
    if node.tag == "choice":
        options = (
            simplify_sequence_element(ctx, child, owner, kenmerk, abstract)
            for child in node
        )
        return Choice(tuple(o for o in options if o is not None))

    if node.tag != "element":
        return Literal(ET.tostring(node, encoding="unicode").strip())

    type_name = node.get("type")
    if local_name(type_name) == KENMERK_TYPE:
        return KenmerkPlaceholder()

    cardinality = derive_cardinality(node.get("minOccurs"), node.get("maxOccurs"))
    name = node.get("name")
    if name is None and type_name is None and node.get("maxOccurs") == "0":
        logger.debug("Dropping removed element in %s", owner)
        return None

    ref = node.get("ref")
    if ref and abstract:
        return Reference(
            cardinality=cardinality,
            type=ctx.index.element_types.get(local_name(ref) or ref),
            ref=ref,
        )
    return Field(name=name, kenmerk=kenmerk, cardinality=cardinality, type=type_name)


def derive_cardinality(
    min_occurs: Optional[str], max_occurs: Optional[str]
) -> CardinalityValue:
    """Map raw ``minOccurs``/``maxOccurs`` values to a cardinality.

    Without ``maxOccurs`` the cardinality is not applicable, even when
    ``minOccurs`` is given. A missing ``minOccurs`` next to ``maxOccurs`` takes
    the XSD default of 1. Pairs missing from the known table come back as a
    ``(min, max)`` tuple rather than being coerced.

    Example:
        >>> derive_cardinality("0", "1")
        <Cardinality.OPTIONAL: 'optional'>
        >>> derive_cardinality("2", "5")
        (2, 5)
        >>> derive_cardinality("0", None) is None
        True
    """
    if max_occurs is None:
        return None
    pair = (_parse_occurs(min_occurs), _parse_occurs(max_occurs))
    known = CARDINALITIES.get(pair)  # type: ignore[arg-type]
    if known is not None:
        return known
    return pair


def _parse_occurs(value: Optional[str]):
    if value is None:
        return 1
    value = value.strip()
    if value.isdigit():
        return int(value)
    return value
