from __future__ import annotations

from pathlib import Path

import pytest

from subdivisions.address_format import AddressFormat, AddressFormatRepository
from subdivisions.config import build_repository, load_settings, parse_countries_from_config
from subdivisions.utils import REPO_ROOT, load_yaml


def test_parse_countries_normalizes_entries():
    countries = parse_countries_from_config(
        {
            "countries": [
                {"code": "us", "name": "United States", "subdivision_depth": 1},
                {"code": "AD"},
                {"name": "no code"},
                "junk",
            ]
        }
    )
    assert countries == [
        {"code": "US", "name": "United States", "subdivision_depth": 1},
        {"code": "AD", "name": "AD", "subdivision_depth": 0},
    ]


def test_parse_countries_rejects_bad_values():
    with pytest.raises(ValueError):
        parse_countries_from_config({"countries": {"US": 1}})
    with pytest.raises(ValueError):
        parse_countries_from_config({"countries": [{"code": "US", "subdivision_depth": -1}]})
    with pytest.raises(ValueError):
        parse_countries_from_config({"countries": [{"code": "US", "subdivision_depth": "deep"}]})


def test_load_yaml_requires_mapping(tmp_path: Path):
    path = tmp_path / "bad.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_yaml(path)


def test_load_settings_resolves_paths(tmp_path: Path):
    path = tmp_path / "subdivisions.yaml"
    path.write_text(
        f"definition_path: {tmp_path / 'defs'}\ncountries:\n  - code: BR\n    subdivision_depth: 2\n",
        encoding="utf-8",
    )
    settings = load_settings(path)
    assert settings.definition_path == tmp_path / "defs"
    assert settings.countries == [{"code": "BR", "name": "BR", "subdivision_depth": 2}]

    path.write_text("definition_path: some/dir\n", encoding="utf-8")
    assert load_settings(path).definition_path == (REPO_ROOT / "some" / "dir").resolve()


def test_address_format_repository():
    repo = AddressFormatRepository.from_countries(
        [{"code": "BR", "name": "Brazil", "subdivision_depth": 2}, {"code": "AD", "subdivision_depth": 0}]
    )
    assert repo.get("br") == AddressFormat(country_code="BR", name="Brazil", subdivision_depth=2)
    assert repo.get_subdivision_depth("BR") == 2
    assert repo.get_subdivision_depth("AD") == 0
    assert repo.get_subdivision_depth("ZZ") == 0
    assert repo.country_codes() == ["AD", "BR"]


def test_build_repository_from_shipped_config():
    repository = build_repository(REPO_ROOT / "config" / "subdivisions.yaml")
    assert repository.get_list(["US"])["CA"] == "California"
    assert repository.get_all(["AD"]) == {}
