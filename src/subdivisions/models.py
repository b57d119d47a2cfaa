from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .repository import SubdivisionRepository


class LazySubdivisionCollection(Mapping[str, "Subdivision"]):
    """Children of a subdivision, loaded on first access.

    Behaves like a read-only ``dict`` of id -> Subdivision in display order.
    The repository is queried once; later accesses reuse the result.
    """

    def __init__(
        self,
        parents: Sequence[str],
        repository: SubdivisionRepository | None = None,
    ) -> None:
        self.parents: tuple[str, ...] = tuple(parents)
        self._repository = repository
        self._collection: dict[str, Subdivision] | None = None

    def set_repository(self, repository: SubdivisionRepository) -> None:
        self._repository = repository

    @property
    def is_initialized(self) -> bool:
        return self._collection is not None

    def _initialize(self) -> dict[str, Subdivision]:
        if self._collection is None:
            if self._repository is None:
                raise RuntimeError(f"No repository bound to the children of {list(self.parents)}")
            self._collection = self._repository.get_all(list(self.parents))
        return self._collection

    def __getitem__(self, key: str) -> Subdivision:
        return self._initialize()[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._initialize())

    def __len__(self) -> int:
        return len(self._initialize())

    def __contains__(self, key: object) -> bool:
        return key in self._initialize()

    def __repr__(self) -> str:
        state = "loaded" if self.is_initialized else "not loaded"
        return f"LazySubdivisionCollection(parents={list(self.parents)!r}, {state})"


@dataclass(frozen=True)
class Subdivision:
    id: str
    country_code: str
    name: str
    code: str
    locale: str | None = None
    local_name: str | None = None
    local_code: str | None = None
    iso_code: str | None = None
    postal_code_pattern: str | None = None
    parent: Subdivision | None = None
    # Excluded from eq/hash/repr so comparing or printing never loads children.
    children: LazySubdivisionCollection | None = field(default=None, compare=False, repr=False)

    @property
    def has_children(self) -> bool:
        return self.children is not None

    def display_name(self, use_local: bool = False) -> str:
        if use_local and self.local_name:
            return self.local_name
        return self.name
