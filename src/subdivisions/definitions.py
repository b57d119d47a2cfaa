from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Protocol, Sequence

from .address_format import CountryMetadataProvider
from .group import build_group
from .utils import DEFAULT_DEFINITION_PATH


logger = logging.getLogger(__name__)


class DefinitionStorage(Protocol):
    def read(self, group: str) -> str:
        """Return the raw JSON text for a group, raising OSError when absent."""
        ...


class FileDefinitionStorage:
    def __init__(self, definition_path: Path = DEFAULT_DEFINITION_PATH) -> None:
        self.definition_path = Path(definition_path)

    def path_for(self, group: str) -> Path:
        return self.definition_path / f"{group}.json"

    def read(self, group: str) -> str:
        return self.path_for(group).read_text(encoding="utf-8")


def process_definitions(definitions: dict[str, Any]) -> dict[str, Any]:
    """Fill in the keys that definition files omit for brevity.

    Returns an empty dict when the group has no subdivisions.
    """
    subdivisions = definitions.get("subdivisions")
    if not subdivisions or not isinstance(subdivisions, dict):
        return {}

    country_code = definitions.get("country_code")
    locale = definitions.get("locale")
    processed: dict[str, dict[str, Any]] = {}
    for subdivision_id, raw in subdivisions.items():
        definition = dict(raw) if isinstance(raw, dict) else {}
        definition["country_code"] = country_code
        definition["id"] = subdivision_id
        if locale:
            definition["locale"] = locale
        if definition.get("name") is None:
            definition["name"] = subdivision_id
        # code and local_code are only stored when they differ from the names.
        if definition.get("code") is None:
            definition["code"] = definition["name"]
        if definition.get("local_code") is None and definition.get("local_name") is not None:
            definition["local_code"] = definition["local_name"]
        processed[subdivision_id] = definition

    out = dict(definitions)
    out["subdivisions"] = processed
    return out


class DefinitionLoader:
    """Loads and caches subdivision definitions, one group at a time.

    Results (including empty ones) are cached per group key for the lifetime of
    the loader; definition files are read at most once.
    """

    def __init__(
        self,
        metadata: CountryMetadataProvider,
        storage: DefinitionStorage | None = None,
    ) -> None:
        self.metadata = metadata
        self.storage = storage if storage is not None else FileDefinitionStorage()
        self._definitions: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def loaded_groups(self) -> list[str]:
        with self._lock:
            return list(self._definitions)

    def cached(self, group: str) -> dict[str, Any] | None:
        with self._lock:
            return self._definitions.get(group)

    def has_data(self, parents: Sequence[str]) -> bool:
        """Check whether predefined subdivisions may exist for the given parents.

        Never performs I/O. The parent's own definition is the most precise
        answer; when it hasn't been loaded yet, fall back to the country depth.
        """
        country_code = parents[0]
        depth = self.metadata.get_subdivision_depth(country_code)
        if depth == 0:
            return False
        # At least the first level has data.
        if len(parents) == 1:
            return True

        grandparents = list(parents[:-1])
        parent_id = parents[-1]
        parent_definitions = self.cached(build_group(grandparents)) or {}
        parent = (parent_definitions.get("subdivisions") or {}).get(parent_id)
        if parent is not None:
            return bool(parent.get("has_children"))
        return len(parents) <= depth

    def _read(self, group: str, country_code: str) -> dict[str, Any]:
        try:
            raw = self.storage.read(group)
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("No readable subdivision definitions for group %s: %s", group, exc)
            return {}
        try:
            data = json.loads(raw)
        except ValueError as exc:
            logger.debug("Malformed subdivision definitions for group %s: %s", group, exc)
            return {}
        if not isinstance(data, dict):
            logger.debug(
                "Unexpected JSON root type for group %s: %s", group, type(data).__name__
            )
            return {}
        data.setdefault("country_code", country_code)
        return process_definitions(data)

    def load(self, parents: Sequence[str]) -> dict[str, Any]:
        group = build_group(parents)
        cached = self.cached(group)
        if cached is not None:
            logger.debug("Using cached subdivision definitions for group %s", group)
            return cached

        definitions: dict[str, Any] = {}
        if self.has_data(parents):
            definitions = self._read(group, parents[0])
        else:
            logger.debug("Skipping group %s, no predefined subdivisions expected", group)

        with self._lock:
            # A concurrent load of the same group may have finished first.
            return self._definitions.setdefault(group, definitions)
