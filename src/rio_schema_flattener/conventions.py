"""Naming conventions of the DUO RIO schema.

None of these are XSD semantics; they are how the RIO schema authors encode
characteristics (kenmerken) and request wrappers. They hold for the V4
release of ``DUO_RIO_Beheren_OnderwijsOrganisatie``; newer releases may
change them.
"""

from __future__ import annotations

from typing import Dict, Tuple

from .models import Cardinality

# Types named ``Kenmerkwaardenbereik_<Type>`` hold the characteristics of
# ``<Type>``; their fields are flagged ``kenmerk`` and injected after the base
# type's attributes.
KENMERK_RANGE_PREFIX = "Kenmerkwaardenbereik_"

# SOAP request wrappers; they carry no entity data.
REQUEST_SUFFIX = "_request"

# Element type marking "all characteristics of the owning entity go here".
KENMERK_TYPE = "Kenmerk"

# (minOccurs, maxOccurs) pairs observed in the schema. Anything else is passed
# through verbatim.
CARDINALITIES: Dict[Tuple[int, int], Cardinality] = {
    (0, 1): Cardinality.OPTIONAL,
    (1, 1): Cardinality.REQUIRED,
    (0, 99): Cardinality.ZERO_OR_MORE,
    (0, 999): Cardinality.ZERO_OR_MORE,
    (1, 999): Cardinality.ONE_OR_MORE,
}
