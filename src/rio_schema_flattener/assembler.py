"""Assemble the entity -> attributes mapping handed to the RIO mapper.

The downstream application only needs a handful of entities, each in a few
variants distinguished by a name suffix (``HoOpleiding``,
``HoOpleidingPeriode``, ...). :class:`FlattenerConfig` lists them;
:func:`assemble` resolves and flattens each combined name.

Typical usage:
        from pathlib import Path
        from rio_schema_flattener.assembler import EntityGroup, FlattenerConfig, flatten_schema

        mapping = flatten_schema(Path("DUO_RIO_Beheren_OnderwijsOrganisatie_V4.xsd"))
        print(sorted(mapping))

        # Only the periods of one entity, without reducing the whole schema
        config = FlattenerConfig(
                entities=(EntityGroup(("HoOpleiding",), ("Periode",)),),
                resolve_all=False,
        )
        mapping = flatten_schema(Path("rio.xsd"), config=config)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, Optional, Tuple

from .flattening import apply_kenmerken
from .models import AttributeList
from .reducer import ResolutionContext, resolve, resolve_all
from .xsd_loader import load_schema

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_PATH = Path("resources/DUO_RIO_Beheren_OnderwijsOrganisatie_V4.xsd")
OUTPUT_FORMATS = ("json", "edn")


@dataclass(frozen=True)
class EntityGroup:
    """Entity base names that share the same set of name suffixes."""

    bases: Tuple[str, ...]
    suffixes: Tuple[str, ...] = ("",)

    def names(self) -> Iterator[str]:
        for base in self.bases:
            for suffix in self.suffixes:
                yield base + suffix


DEFAULT_ENTITIES: Tuple[EntityGroup, ...] = (
    EntityGroup(
        bases=(
            "AangebodenHOOpleiding",
            "AangebodenHOOpleidingsonderdeel",
            "AangebodenParticuliereOpleiding",
        ),
        suffixes=("", "Periode", "Cohort"),
    ),
    EntityGroup(
        bases=(
            "HoOpleiding",
            "HoOnderwijseenhedencluster",
            "HoOnderwijseenheid",
            "ParticuliereOpleiding",
        ),
        suffixes=("", "Periode"),
    ),
)


@dataclass
class FlattenerConfig:
    """Configuration for one flattening run.

    Args:
        schema_path: XSD to read.
        entities: Entity groups to emit, in output order.
        resolve_all: Reduce every complex type before assembling, so a shape
            violation anywhere in the schema aborts the run.
        output_format: ``json`` or ``edn``.
    """

    schema_path: Path = DEFAULT_SCHEMA_PATH
    entities: Tuple[EntityGroup, ...] = DEFAULT_ENTITIES
    resolve_all: bool = True
    output_format: str = "json"

    def __post_init__(self) -> None:
        self.schema_path = Path(self.schema_path)
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Unknown output format '{self.output_format}', "
                f"expected one of {', '.join(OUTPUT_FORMATS)}"
            )

    @classmethod
    def from_env(cls) -> "FlattenerConfig":
        """Create configuration from environment variables."""
        return cls(
            schema_path=Path(os.getenv("RIO_XSD_PATH", str(DEFAULT_SCHEMA_PATH))),
            resolve_all=os.getenv("RIO_RESOLVE_ALL", "true").lower() == "true",
            output_format=os.getenv("RIO_OUTPUT_FORMAT", "json").lower(),
        )

    def entity_names(self) -> Iterator[str]:
        for group in self.entities:
            yield from group.names()


def assemble(ctx: ResolutionContext, names: Iterable[str]) -> Dict[str, AttributeList]:
    """Resolve and flatten each entity name.

    Names absent from the schema map to an empty list; not every entity has
    every variant.
    """
    mapping: Dict[str, AttributeList] = {}
    for name in names:
        mapping[name] = apply_kenmerken(resolve(ctx, name))
        logger.debug("%s: %d attributes", name, len(mapping[name]))
    return mapping


def flatten_schema(
    xsd_path: Optional[Path] = None, config: Optional[FlattenerConfig] = None
) -> Dict[str, AttributeList]:
    """Load a schema and return the flattened entity mapping.

    Convenience wrapper around :func:`load_schema`, :func:`resolve_all` and
    :func:`assemble`.

    Args:
        xsd_path: Schema to read; overrides ``config.schema_path``.
        config: Run configuration (defaults to :class:`FlattenerConfig`).

    Returns:
        Entity name -> flattened attribute list, in configured order.

    Raises:
        SchemaFlattenError: On the first shape violation in the schema.
    """
    config = config or FlattenerConfig()
    path = Path(xsd_path) if xsd_path is not None else config.schema_path
    ctx = ResolutionContext(load_schema(path))
    if config.resolve_all:
        resolve_all(ctx)
    mapping = assemble(ctx, config.entity_names())
    logger.info(
        "Flattened %d entities from %s (%d complex types resolved)",
        len(mapping),
        path,
        len(ctx.cache),
    )
    logger.debug("Type cache: %s", ctx.cache.stats.to_dict())
    return mapping
