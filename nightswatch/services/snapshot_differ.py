"""
Snapshot Differ - decides whether two listings of the same resource differ.

Two tiers, cheapest first:
1. Different cardinality means something was added or removed.
2. Same cardinality: any previously seen identifier missing from the new
   listing means a replacement (delete + add, including rename).

Identifiers are full paths, so any path mutation shows up as "old path absent".
"""

from typing import AbstractSet, Collection


def has_changed(previous: Collection[str], current: Collection[str]) -> bool:
    current_set: AbstractSet[str] = (
        current if isinstance(current, (set, frozenset)) else frozenset(current)
    )
    previous_set: AbstractSet[str] = (
        previous if isinstance(previous, (set, frozenset)) else frozenset(previous)
    )

    if len(previous_set) != len(current_set):
        return True

    for identifier in previous_set:
        if identifier not in current_set:
            return True

    return False
