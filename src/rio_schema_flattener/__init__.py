"""RIO Schema Flattener
====================

Converts the DUO RIO ``Beheren OnderwijsOrganisatie`` XML schema into a flat,
denormalized attribute model: a mapping from entity name (``HoOpleiding``,
``AangebodenHOOpleidingPeriode``, ...) to the ordered list of attributes an
instance of that entity can carry.

Key capabilities
----------------
- Index the XSD's complex types and top-level elements, ignoring namespaces
  and documentation.
- Reduce each complex type once, merging inherited (extension base)
  attributes, injected characteristics (``Kenmerkwaardenbereik_*`` types) and
  the type's own sequence.
- Normalize occurrence constraints to a small cardinality vocabulary.
- Expand characteristic placeholders and emit JSON or EDN.

Minimal quick start
-------------------
>>> from rio_schema_flattener import flatten_schema, dumps
>>> mapping = flatten_schema('resources/DUO_RIO_Beheren_OnderwijsOrganisatie_V4.xsd')
>>> print(dumps(mapping, 'edn'))

Public surface
--------------
Only a curated subset is exported at the package level; the reducer and
loader can be imported explicitly for finer control.
"""

__version__ = "0.1.0"

from .assembler import EntityGroup, FlattenerConfig, flatten_schema
from .errors import SchemaFlattenError
from .models import Cardinality, Choice, Field, Reference
from .serialization import dumps

__all__ = [
    "Cardinality",
    "Choice",
    "EntityGroup",
    "Field",
    "FlattenerConfig",
    "Reference",
    "SchemaFlattenError",
    "dumps",
    "flatten_schema",
]
