from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from subdivisions.definitions import FileDefinitionStorage


class DepthProvider:
    def __init__(self, depths: dict[str, int]) -> None:
        self.depths = depths
        self.calls: list[str] = []

    def get_subdivision_depth(self, country_code: str) -> int:
        self.calls.append(country_code)
        return self.depths.get(country_code, 0)


class CountingStorage:
    """Wraps a storage backend and records every group read."""

    def __init__(self, inner: Any) -> None:
        self.inner = inner
        self.reads: list[str] = []

    def read(self, group: str) -> str:
        self.reads.append(group)
        return self.inner.read(group)


class DictStorage:
    def __init__(self, files: dict[str, str]) -> None:
        self.files = files

    def read(self, group: str) -> str:
        if group not in self.files:
            raise FileNotFoundError(group)
        return self.files[group]


class FailingStorage:
    def read(self, group: str) -> str:
        pytest.fail(f"Unexpected definition read for group {group!r}")


def write_definitions(definition_dir: Path, group: str, payload: dict[str, Any]) -> Path:
    path = definition_dir / f"{group}.json"
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def definition_dir(tmp_path: Path) -> Path:
    """US has a single state with children (CA -> LA, SF); FR has a localized list."""
    d = tmp_path / "subdivision"
    d.mkdir()
    write_definitions(
        d,
        "US",
        {
            "country_code": "US",
            "subdivisions": {
                "CA": {"name": "California", "code": "CA", "has_children": True},
                "NV": {"name": "Nevada", "code": "NV"},
                "OR": {"name": "Oregon", "code": "OR"},
            },
        },
    )
    write_definitions(
        d,
        "US-CA",
        {
            "country_code": "US",
            "parents": ["US", "CA"],
            "subdivisions": {
                "LA": {"name": "Los Angeles"},
                "SF": {"name": "San Francisco"},
            },
        },
    )
    write_definitions(
        d,
        "FR",
        {
            "country_code": "FR",
            "locale": "fr",
            "subdivisions": {
                "BRE": {"name": "Brittany", "local_name": "Bretagne"},
                "NOR": {"name": "Normandy", "local_name": "Normandie", "local_code": "NORM"},
                "COR": {"name": "Corsica"},
            },
        },
    )
    return d


@pytest.fixture
def storage(definition_dir: Path) -> CountingStorage:
    return CountingStorage(FileDefinitionStorage(definition_dir))


@pytest.fixture
def metadata() -> DepthProvider:
    return DepthProvider({"US": 2, "FR": 1, "AD": 0})
