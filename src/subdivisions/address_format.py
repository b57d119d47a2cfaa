from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Protocol


class CountryMetadataProvider(Protocol):
    def get_subdivision_depth(self, country_code: str) -> int:
        """Maximum nesting depth of predefined subdivisions (0 means none)."""
        ...


@dataclass(frozen=True)
class AddressFormat:
    country_code: str
    name: str
    subdivision_depth: int = 0


class AddressFormatRepository:
    """Per-country address format metadata, keyed by ISO 3166-1 alpha-2 code.

    Countries without an entry get the generic format, which defines no
    subdivisions.
    """

    def __init__(self, formats: Iterable[AddressFormat] = ()) -> None:
        self._formats: dict[str, AddressFormat] = {}
        for fmt in formats:
            self._formats[fmt.country_code.upper()] = fmt

    @classmethod
    def from_countries(cls, countries: Iterable[dict[str, Any]]) -> "AddressFormatRepository":
        return cls(
            AddressFormat(
                country_code=str(row["code"]),
                name=str(row.get("name") or row["code"]),
                subdivision_depth=int(row.get("subdivision_depth") or 0),
            )
            for row in countries
        )

    def get(self, country_code: str) -> AddressFormat:
        code = str(country_code).upper()
        fmt = self._formats.get(code)
        if fmt is None:
            return AddressFormat(country_code=code, name=code, subdivision_depth=0)
        return fmt

    def get_subdivision_depth(self, country_code: str) -> int:
        return self.get(country_code).subdivision_depth

    def country_codes(self) -> list[str]:
        return sorted(self._formats)
