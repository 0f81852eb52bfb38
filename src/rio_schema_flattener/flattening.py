"""Substitute characteristic placeholders in a resolved attribute list."""

from __future__ import annotations

import logging
from typing import List

from .models import AttributeList, Choice, Field, KenmerkPlaceholder

logger = logging.getLogger(__name__)


def apply_kenmerken(attributes: AttributeList) -> AttributeList:
    """Expand every :class:`KenmerkPlaceholder` into the characteristic fields.

    Characteristic fields (``Field.kenmerk``) are pulled out of the list and
    only re-emitted where a placeholder stands; without a placeholder they
    contribute nothing. Placeholders nested in a :class:`Choice` are expanded
    inside that choice. The result is deduplicated by value, keeping the
    first occurrence.

    Example:
        >>> from rio_schema_flattener.models import Cardinality
        >>> x = Field("x", True, Cardinality.OPTIONAL, "xs:string")
        >>> code = Field("code", False, Cardinality.REQUIRED, "xs:string")
        >>> apply_kenmerken([code, x, KenmerkPlaceholder()]) == [code, x]
        True
    """
    kenmerken: List[Field] = []
    rest: AttributeList = []
    for descriptor in attributes:
        if isinstance(descriptor, Field) and descriptor.kenmerk:
            kenmerken.append(descriptor)
        else:
            rest.append(descriptor)

    flattened = _substitute(rest, kenmerken)
    unique = list(dict.fromkeys(flattened))
    if len(unique) != len(flattened):
        logger.debug("Removed %d duplicate attributes", len(flattened) - len(unique))
    return unique


def _substitute(attributes: AttributeList, kenmerken: List[Field]) -> AttributeList:
    result: AttributeList = []
    for descriptor in attributes:
        if isinstance(descriptor, KenmerkPlaceholder):
            result.extend(kenmerken)
        elif isinstance(descriptor, Choice):
            options = _substitute(list(descriptor.options), kenmerken)
            result.append(Choice(tuple(dict.fromkeys(options))))
        else:
            result.append(descriptor)
    return result
