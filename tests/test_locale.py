from __future__ import annotations

import pytest

from subdivisions.locale import canonicalize, get_candidates, match_candidates


@pytest.mark.parametrize(
    "value,expected",
    [
        ("zh_hant_tw", "zh-Hant-TW"),
        ("EN-us", "en-US"),
        ("es-419", "es-419"),
        ("fr", "fr"),
        ("", ""),
        (None, ""),
    ],
)
def test_canonicalize(value, expected):
    assert canonicalize(value) == expected


def test_get_candidates():
    assert get_candidates("zh-Hant-TW") == ["zh-Hant-TW", "zh-Hant", "zh"]
    assert get_candidates("fr") == ["fr"]
    assert get_candidates(None) == []


def test_match_candidates():
    assert match_candidates("fr", "fr")
    assert match_candidates("fr_CA", "fr")
    assert match_candidates("zh-Hans", "zh-hans-cn")
    assert not match_candidates("en", "fr")
    assert not match_candidates(None, "fr")
    assert not match_candidates("fr", "")
