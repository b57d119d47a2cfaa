"""Locale helpers used to pick between base and local subdivision names."""
from __future__ import annotations

from typing import Callable


LocaleMatcher = Callable[[str | None, str | None], bool]


def canonicalize(locale: str | None) -> str:
    """Normalize a locale id: ``zh_hant_tw`` -> ``zh-Hant-TW``."""
    if not locale:
        return ""
    parts = [p for p in locale.replace("_", "-").split("-") if p]
    if not parts:
        return ""
    out = [parts[0].lower()]
    for part in parts[1:]:
        if len(part) == 4 and part.isalpha():
            out.append(part.title())
        elif (len(part) == 2 and part.isalpha()) or (len(part) == 3 and part.isdigit()):
            out.append(part.upper())
        else:
            out.append(part)
    return "-".join(out)


def get_candidates(locale: str | None) -> list[str]:
    """Return the locale followed by its progressively less specific parents."""
    canonical = canonicalize(locale)
    if not canonical:
        return []
    parts = canonical.split("-")
    return ["-".join(parts[:i]) for i in range(len(parts), 0, -1)]


def match_candidates(first_locale: str | None, second_locale: str | None) -> bool:
    if not first_locale or not second_locale:
        return False
    first = get_candidates(first_locale)
    second = set(get_candidates(second_locale))
    return any(candidate in second for candidate in first)
