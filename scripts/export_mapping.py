#!/usr/bin/env python
"""Export the flattened RIO entity mapping as JSON and EDN artifacts.

Usage:
    python scripts/export_mapping.py --schema resources/DUO_RIO_Beheren_OnderwijsOrganisatie_V4.xsd --out-dir build/mapping

Outputs:
    rio_entities.json         Entity -> attributes, JSON
    rio_entities.edn          Entity -> attributes, EDN (read by the mapper)
"""
from __future__ import annotations

import argparse
from pathlib import Path

from rio_schema_flattener.assembler import DEFAULT_SCHEMA_PATH, flatten_schema
from rio_schema_flattener.serialization import to_edn, to_json


def export_json(mapping, out_dir: Path) -> Path:
    path = out_dir / "rio_entities.json"
    path.write_text(to_json(mapping), encoding="utf-8")
    return path


def export_edn(mapping, out_dir: Path) -> Path:
    path = out_dir / "rio_entities.edn"
    path.write_text(to_edn(mapping), encoding="utf-8")
    return path


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--schema", default=str(DEFAULT_SCHEMA_PATH), help="RIO XSD path")
    parser.add_argument("--out-dir", default="build/mapping", help="Output directory")
    args = parser.parse_args()

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    mapping = flatten_schema(Path(args.schema))
    json_path = export_json(mapping, out_dir)
    edn_path = export_edn(mapping, out_dir)

    print(f"Exported JSON -> {json_path}")
    print(f"Exported EDN -> {edn_path}")


if __name__ == "__main__":  # pragma: no cover
    main()
