"""
CLI for flattening the RIO schema into an entity attribute mapping.
"""

import argparse
import logging
import sys
import xml.etree.ElementTree as ET
from pathlib import Path

from .assembler import OUTPUT_FORMATS, EntityGroup, FlattenerConfig, flatten_schema
from .errors import SchemaFlattenError
from .serialization import dumps

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def build_config(args) -> FlattenerConfig:
    """Environment defaults overridden by command line flags."""
    config = FlattenerConfig.from_env()
    if args.schema:
        config.schema_path = Path(args.schema)
    if args.format:
        config.output_format = args.format
    if args.lazy:
        config.resolve_all = False
    if args.entity:
        config.entities = (EntityGroup(bases=tuple(args.entity)),)
    return config


def cmd_flatten(args):
    """Flatten the schema and print the mapping to stdout."""
    setup_logging(args.verbose)
    try:
        config = build_config(args)
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    if not config.schema_path.exists():
        logger.error("Schema not found: %s", config.schema_path)
        return 1

    try:
        mapping = flatten_schema(config=config)
    except (SchemaFlattenError, ET.ParseError) as e:
        logger.error("Failed to flatten %s: %s", config.schema_path, e)
        return 1

    print(dumps(mapping, config.output_format))
    return 0


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Flatten the DUO RIO XSD into an entity attribute mapping",
        prog="rio-xsd-flatten",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--schema",
        help="Path to the RIO XSD (default: $RIO_XSD_PATH or the bundled resources path)"
    )
    parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        help="Output format (default: $RIO_OUTPUT_FORMAT or json)"
    )
    parser.add_argument(
        "--lazy",
        action="store_true",
        help="Only reduce the types reachable from the requested entities"
    )
    parser.add_argument(
        "--entity",
        action="append",
        metavar="NAME",
        help="Emit only this entity (full name including suffix); repeatable"
    )
    parser.set_defaults(func=cmd_flatten)

    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
