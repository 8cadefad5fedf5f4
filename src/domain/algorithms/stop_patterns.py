from __future__ import annotations

from typing import Mapping, Sequence


def canonical_stop_sequence(patterns: Mapping[tuple[str, ...], int]) -> list[str]:
    """Merge the stop patterns of a route/direction into one ordered stop list.

    ``patterns`` maps each distinct stop pattern to the number of trips using it.
    The longest (then most frequent) pattern is the base; stops only served by
    other patterns are inserted right after their nearest preceding stop that
    is already part of the merge, or at the front when none is.
    """

    if not patterns:
        return []

    # sorted() is stable, so equal patterns keep first-seen order.
    ordered = sorted(patterns, key=lambda p: (-len(p), -patterns[p]))
    merged = list(ordered[0])

    for pattern in ordered[1:]:
        _merge_pattern(merged, pattern)

    return merged


def _merge_pattern(merged: list[str], pattern: Sequence[str]) -> None:
    for i, stop_id in enumerate(pattern):
        if stop_id in merged:
            continue

        insert_at = 0
        for prev in reversed(pattern[:i]):
            if prev in merged:
                insert_at = merged.index(prev) + 1
                break
        merged.insert(insert_at, stop_id)
