"""Group keys for subdivision definitions.

A group is the set of sibling subdivisions sharing one parent chain. Its key
names both the cache slot and the definition file (``<group>.json``).
"""
from __future__ import annotations

import hashlib
from typing import Sequence


GROUP_DELIMITER = "-"
ISO_CODE_MAX_LENGTH = 3
GROUP_DIGEST_SIZE = 16


def _hash_parents(parents: Sequence[str]) -> str:
    # Short, fast and ASCII safe. Rare collisions are acceptable for a cache key.
    joined = GROUP_DELIMITER.join(parents)
    return hashlib.blake2b(joined.encode("utf-8"), digest_size=GROUP_DIGEST_SIZE).hexdigest()


def build_group(parents: Sequence[str]) -> str:
    """Build the group key for the given parents (country code, subdivision ids).

    ``["US"]`` -> ``"US"``, ``["US", "CA"]`` -> ``"US-CA"``. Longer chains, or a
    second parent that is not an ISO-like code, become the country code followed
    by one delimiter per remaining parent and a hex digest of those parents,
    e.g. ``"CN--<32 hex chars>"``.
    """
    if not parents:
        raise ValueError("The parents argument must not be empty.")

    parents = [str(p) for p in parents]
    if len(parents) == 1:
        return parents[0]
    # Byte length, so short non-ASCII ids are hashed too.
    if len(parents) == 2 and len(parents[1].encode("utf-8")) <= ISO_CODE_MAX_LENGTH:
        return GROUP_DELIMITER.join(parents)

    country_code, rest = parents[0], parents[1:]
    # One delimiter per level lets the depth be read back from the key.
    return country_code + GROUP_DELIMITER * len(rest) + _hash_parents(rest)


def group_depth(group: str) -> int:
    """Return the length of the parent chain a group key was built from."""
    if not group:
        raise ValueError("The group argument must not be empty.")
    if GROUP_DELIMITER not in group:
        return 1
    _, _, tail = group.partition(GROUP_DELIMITER)
    # "US-CA" and "CN-<digest>" both carry a single marker.
    markers = 1 + len(tail) - len(tail.lstrip(GROUP_DELIMITER))
    return markers + 1
