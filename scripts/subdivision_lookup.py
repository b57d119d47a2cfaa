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

from subdivisions.config import build_repository  # noqa: E402
from subdivisions.utils import split_csv_arg  # noqa: E402


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="List predefined subdivisions for a parent chain.")
    p.add_argument(
        "parents",
        help="Comma-separated parent chain: country code, then subdivision ids (e.g. 'CN,Heilongjiang Sheng').",
    )
    p.add_argument("--id", default=None, help="Show a single subdivision and its ancestors instead of the list.")
    p.add_argument("--locale", default=None, help="Requested locale; local names are used when it matches.")
    p.add_argument("--config", default=str(ROOT / "config" / "subdivisions.yaml"), help="Path to YAML config.")
    p.add_argument("--definition-path", default=None, help="Directory holding <group>.json definition files.")
    p.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = p.parse_args(argv)
    args.parents = split_csv_arg(args.parents)
    if not args.parents:
        p.error("parents must contain at least the country code")
    args.parents[0] = args.parents[0].upper()
    return args


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    repository = build_repository(
        Path(args.config),
        definition_path=Path(args.definition_path) if args.definition_path else None,
    )

    if args.id is not None:
        subdivision = repository.get(args.id, args.parents)
        if subdivision is None:
            print(f"Unknown subdivision {args.id!r} for parents {args.parents}")
            return 1
        node = subdivision
        depth = 0
        while node is not None:
            print(f"{'  ' * depth}{node.id}: {node.name} (code={node.code})")
            node = node.parent
            depth += 1
        if subdivision.children is not None:
            print(f"Children: {len(subdivision.children)}")
        return 0

    items = repository.get_list(args.parents, locale=args.locale)
    if not items:
        print(f"No predefined subdivisions for parents {args.parents}")
        return 0
    for subdivision_id, name in items.items():
        print(f"{subdivision_id}\t{name}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
