from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .address_format import AddressFormatRepository
from .definitions import FileDefinitionStorage
from .locale import match_candidates
from .repository import SubdivisionRepository
from .utils import DEFAULT_CONFIG_PATH, DEFAULT_DEFINITION_PATH, load_yaml, resolve_repo_path


@dataclass(frozen=True)
class Settings:
    definition_path: Path = DEFAULT_DEFINITION_PATH
    countries: list[dict[str, Any]] = field(default_factory=list)


def parse_countries_from_config(config: dict[str, Any]) -> list[dict[str, Any]]:
    countries = config.get("countries") or []
    if not isinstance(countries, list):
        raise ValueError("config.countries must be a list")
    out: list[dict[str, Any]] = []
    for item in countries:
        if not isinstance(item, dict):
            continue
        code = str(item.get("code", "")).upper().strip()
        if not code:
            continue
        try:
            depth = int(item.get("subdivision_depth") or 0)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"config.countries[{code}].subdivision_depth must be an integer") from exc
        if depth < 0:
            raise ValueError(f"config.countries[{code}].subdivision_depth must be >= 0, got {depth}")
        out.append(
            {
                "code": code,
                "name": item.get("name") or code,
                "subdivision_depth": depth,
            }
        )
    return out


def load_settings(config_path: Path = DEFAULT_CONFIG_PATH) -> Settings:
    config = load_yaml(config_path)
    definition_path = config.get("definition_path")
    return Settings(
        definition_path=resolve_repo_path(definition_path) if definition_path else DEFAULT_DEFINITION_PATH,
        countries=parse_countries_from_config(config),
    )


def build_repository(
    config_path: Path = DEFAULT_CONFIG_PATH,
    *,
    definition_path: Path | None = None,
) -> SubdivisionRepository:
    settings = load_settings(config_path)
    return SubdivisionRepository(
        AddressFormatRepository.from_countries(settings.countries),
        FileDefinitionStorage(definition_path or settings.definition_path),
        locale_matcher=match_candidates,
    )
