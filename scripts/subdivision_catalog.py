#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from subdivisions.catalog import run_catalog  # noqa: E402
from subdivisions.utils import split_csv_arg  # noqa: E402


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Walk predefined subdivisions and build a flat subdivision catalog.")
    p.add_argument("--config", default=str(ROOT / "config" / "subdivisions.yaml"), help="Path to YAML config.")
    p.add_argument(
        "--definition-path",
        default=None,
        help="Directory holding <group>.json definition files (default: from config).",
    )
    p.add_argument(
        "--catalog-parquet",
        default=str(ROOT / "data" / "processed" / "subdivision_catalog.parquet"),
        help="Output parquet for machine-readable catalog.",
    )
    p.add_argument(
        "--catalog-markdown",
        default=str(ROOT / "docs" / "subdivision_catalog.md"),
        help="Output markdown catalog.",
    )
    p.add_argument(
        "--countries",
        default="auto",
        help="Comma-separated country codes (default: auto, every configured country with subdivisions).",
    )
    p.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return p.parse_args()


def main() -> int:
    args = parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    countries = None if args.countries == "auto" else split_csv_arg(args.countries)
    df = run_catalog(
        config_path=Path(args.config),
        catalog_parquet=Path(args.catalog_parquet),
        catalog_markdown=Path(args.catalog_markdown),
        countries=countries,
        definition_path=Path(args.definition_path) if args.definition_path else None,
    )
    print(f"Catalog complete. subdivision rows={len(df)}")
    print(f"Wrote: {Path(args.catalog_parquet)}")
    print(f"Wrote: {Path(args.catalog_markdown)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
