from __future__ import annotations

from pathlib import Path
from typing import Any, Iterator

import pandas as pd

from .config import build_repository, load_settings
from .group import build_group
from .models import Subdivision
from .repository import SubdivisionRepository
from .utils import (
    DEFAULT_CONFIG_PATH,
    REPO_ROOT,
    dataframe_to_parquet,
    ensure_dir,
    isoformat_utc,
    utc_now,
)


CATALOG_COLUMNS = [
    "country_code",
    "level",
    "group",
    "parent_id",
    "id",
    "code",
    "name",
    "local_name",
    "local_code",
    "iso_code",
    "postal_code_pattern",
    "has_children",
]


def iter_subdivisions(
    repository: SubdivisionRepository,
    country_code: str,
) -> Iterator[tuple[list[str], Subdivision]]:
    """Depth-first walk over every predefined subdivision of a country.

    Yields (parents, subdivision) pairs, parents being the chain the
    subdivision was loaded with.
    """
    root = [country_code]
    stack: list[tuple[list[str], Iterator[Subdivision]]] = [(root, iter(repository.get_all(root).values()))]
    while stack:
        parents, siblings = stack[-1]
        subdivision = next(siblings, None)
        if subdivision is None:
            stack.pop()
            continue
        yield parents, subdivision
        if subdivision.children is not None:
            stack.append((list(subdivision.children.parents), iter(subdivision.children.values())))


def _catalog_row(parents: list[str], subdivision: Subdivision) -> dict[str, Any]:
    return {
        "country_code": subdivision.country_code,
        "level": len(parents),
        "group": build_group(parents),
        "parent_id": subdivision.parent.id if subdivision.parent is not None else None,
        "id": subdivision.id,
        "code": subdivision.code,
        "name": subdivision.name,
        "local_name": subdivision.local_name,
        "local_code": subdivision.local_code,
        "iso_code": subdivision.iso_code,
        "postal_code_pattern": subdivision.postal_code_pattern,
        "has_children": subdivision.has_children,
    }


def build_subdivision_catalog_dataframe(
    repository: SubdivisionRepository,
    country_codes: list[str],
) -> pd.DataFrame:
    rows: list[dict[str, Any]] = []
    for country_code in country_codes:
        for parents, subdivision in iter_subdivisions(repository, country_code):
            rows.append(_catalog_row(parents, subdivision))
    df = pd.DataFrame(rows, columns=CATALOG_COLUMNS)
    if not df.empty:
        # Stable sort keeps the declared display order inside each group.
        df = df.sort_values(["country_code", "level", "group"], kind="stable").reset_index(drop=True)
    return df


def write_subdivision_catalog_markdown(path: Path, catalog_df: pd.DataFrame) -> None:
    ensure_dir(path.parent)
    lines: list[str] = []
    lines.append("# Subdivision Catalog")
    lines.append("")
    lines.append(f"- Generated at: `{isoformat_utc(utc_now())}`")
    if catalog_df.empty:
        lines.append("- No predefined subdivisions found.")
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return

    lines.append(f"- Countries with subdivisions: `{catalog_df['country_code'].nunique()}`")
    lines.append(f"- Subdivisions: `{len(catalog_df)}`")
    lines.append(f"- Groups: `{catalog_df['group'].nunique()}`")
    lines.append("")
    lines.append("## Subdivisions per Level")
    lines.append("")
    lines.append("| Country Code | Level | Subdivisions | With Children |")
    lines.append("|---|---:|---:|---:|")
    counts = (
        catalog_df.groupby(["country_code", "level"], sort=True)
        .agg(n=("id", "size"), with_children=("has_children", "sum"))
        .reset_index()
    )
    for _, row in counts.iterrows():
        lines.append(f"| {row['country_code']} | {row['level']} | {row['n']} | {int(row['with_children'])} |")
    lines.append("")
    lines.append("## Sample Rows (first 20)")
    lines.append("")
    lines.append("| country_code | level | id | code | name | local_name | parent_id |")
    lines.append("|---|---:|---|---|---|---|---|")
    for _, row in catalog_df.head(20).iterrows():
        vals = [
            "" if pd.isna(row[c]) else str(row[c])
            for c in ["country_code", "level", "id", "code", "name", "local_name", "parent_id"]
        ]
        lines.append("| " + " | ".join(vals) + " |")
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


def run_catalog(
    *,
    config_path: Path = DEFAULT_CONFIG_PATH,
    catalog_parquet: Path = REPO_ROOT / "data" / "processed" / "subdivision_catalog.parquet",
    catalog_markdown: Path = REPO_ROOT / "docs" / "subdivision_catalog.md",
    countries: list[str] | None = None,
    definition_path: Path | None = None,
) -> pd.DataFrame:
    settings = load_settings(config_path)
    repository = build_repository(config_path, definition_path=definition_path)
    if countries:
        country_codes = sorted({c.upper() for c in countries})
    else:
        country_codes = [c["code"] for c in settings.countries if c["subdivision_depth"] > 0]

    catalog_df = build_subdivision_catalog_dataframe(repository, country_codes)
    dataframe_to_parquet(catalog_df, catalog_parquet)
    write_subdivision_catalog_markdown(catalog_markdown, catalog_df)
    return catalog_df
