from __future__ import annotations

import threading
from typing import Any, Sequence

from .address_format import CountryMetadataProvider
from .definitions import DefinitionLoader, DefinitionStorage
from .group import build_group
from .locale import LocaleMatcher, match_candidates
from .models import LazySubdivisionCollection, Subdivision


class SubdivisionRepository:
    """Lookup of predefined subdivisions by parent chain.

    ``parents`` is always the country code followed by the ids of the
    enclosing subdivisions, e.g. ``["BR"]`` for states or
    ``["CN", "Heilongjiang Sheng"]`` for the cities of one province.
    """

    def __init__(
        self,
        metadata: CountryMetadataProvider,
        storage: DefinitionStorage | None = None,
        locale_matcher: LocaleMatcher = match_candidates,
        loader: DefinitionLoader | None = None,
    ) -> None:
        self.loader = loader if loader is not None else DefinitionLoader(metadata, storage)
        self.locale_matcher = locale_matcher
        # Only parents are cached, keyed by (parent group, parent id), so that
        # siblings share one parent instance without duplicating definitions.
        self._parents: dict[tuple[str, str], Subdivision | None] = {}
        self._lock = threading.Lock()
        self._resolving = threading.local()

    def load_definitions(self, parents: Sequence[str]) -> dict[str, Any]:
        return self.loader.load(parents)

    def get(self, id: str, parents: Sequence[str]) -> Subdivision | None:
        definitions = self.load_definitions(parents)
        return self._create_subdivision(id, definitions)

    def get_all(self, parents: Sequence[str]) -> dict[str, Subdivision]:
        definitions = self.load_definitions(parents)
        if not definitions:
            return {}
        subdivisions: dict[str, Subdivision] = {}
        for subdivision_id in definitions["subdivisions"]:
            subdivision = self._create_subdivision(subdivision_id, definitions)
            if subdivision is not None:
                subdivisions[subdivision_id] = subdivision
        return subdivisions

    def get_list(self, parents: Sequence[str], locale: str | None = None) -> dict[str, str]:
        definitions = self.load_definitions(parents)
        if not definitions:
            return {}
        use_local_name = self.locale_matcher(locale, definitions.get("locale") or "")
        out: dict[str, str] = {}
        for subdivision_id, definition in definitions["subdivisions"].items():
            if use_local_name and definition.get("local_name"):
                out[subdivision_id] = definition["local_name"]
            else:
                out[subdivision_id] = definition["name"]
        return out

    def _get_parent(self, parents: list[str]) -> Subdivision | None:
        grandparents = parents[:-1]
        parent_id = parents[-1]
        key = (build_group(grandparents), parent_id)
        with self._lock:
            if key in self._parents:
                return self._parents[key]
        # A "parents" chain pointing back into a group still being resolved
        # would never terminate; the innermost node is left without a parent.
        resolving = self._resolving.__dict__.setdefault("keys", set())
        if key in resolving:
            return None
        resolving.add(key)
        try:
            # Resolved outside the lock, the parent's own parent goes through here too.
            parent = self.get(parent_id, grandparents)
        finally:
            resolving.discard(key)
        with self._lock:
            return self._parents.setdefault(key, parent)

    def _create_subdivision(self, id: str, definitions: dict[str, Any]) -> Subdivision | None:
        subdivisions = definitions.get("subdivisions") or {}
        if id not in subdivisions:
            return None

        definition = subdivisions[id]
        # "parents" is omitted from the file when it holds just the country code.
        parents = list(definitions.get("parents") or [definitions["country_code"]])
        parent = self._get_parent(parents) if len(parents) > 1 else None

        children = None
        if definition.get("has_children"):
            children = LazySubdivisionCollection(parents + [id], repository=self)

        return Subdivision(
            id=definition["id"],
            country_code=definition["country_code"],
            name=definition["name"],
            code=definition["code"],
            locale=definition.get("locale"),
            local_name=definition.get("local_name"),
            local_code=definition.get("local_code"),
            iso_code=definition.get("iso_code"),
            postal_code_pattern=definition.get("postal_code_pattern"),
            parent=parent,
            children=children,
        )
