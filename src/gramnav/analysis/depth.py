# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Depth and fan-out statistics per node kind.

A kind's depth is the length of the longest path down the child relation that never repeats
a kind: a leaf has depth 1, and a path that re-enters a kind already on it stops there
(contributing 0) without cutting short its sibling branches. Fan-out is the number of
distinct kinds that can appear directly under a kind.

These numbers are advisory. They help pick a navigation depth cap; nothing depends on them
for correctness.
"""

from __future__ import annotations

import logging

from collections.abc import Iterable, Mapping, Sequence
from typing import Annotated

from pydantic import Field, NonNegativeInt

from gramnav._common import FrozenModel, iter_sorted


logger = logging.getLogger(__name__)


class DepthProfile(FrozenModel):
    """Depth and fan-out of one node kind."""

    max_depth: Annotated[
        NonNegativeInt,
        Field(description="Longest non-repeating path below and including this kind."),
    ]
    fan_out: Annotated[NonNegativeInt, Field(description="Number of direct child kinds.")]
    truncated: Annotated[
        bool,
        Field(description="Whether the depth search hit its limit, so `max_depth` is a floor."),
    ] = False


class DepthTable(FrozenModel):
    """Depth profiles for every named kind, with grammar-wide summaries."""

    entries: Annotated[
        dict[str, DepthProfile], Field(description="Profile per kind, sorted by kind.")
    ]
    depth_limit: Annotated[
        NonNegativeInt, Field(description="The recursion limit the profiles were computed with.")
    ]

    @property
    def max_depth(self) -> int:
        """The deepest profile in the table."""
        return max((entry.max_depth for entry in self.entries.values()), default=0)

    @property
    def average_fan_out(self) -> float:
        """Mean fan-out over kinds that have children, rounded to 4 places."""
        fan_outs = [entry.fan_out for entry in self.entries.values() if entry.fan_out]
        return round(sum(fan_outs) / len(fan_outs), 4) if fan_outs else 0.0

    @property
    def truncated_kinds(self) -> tuple[str, ...]:
        """Sorted kinds whose depth search was cut off."""
        return tuple(kind for kind, entry in self.entries.items() if entry.truncated)


class _DepthSearch:
    """Longest-simple-path search over a child relation, memoized where it is sound to.

    The depth below a kind depends only on which already-visited kinds it can reach, so
    results are keyed on that intersection and on the remaining depth budget.
    """

    def __init__(self, child_map: Mapping[str, Sequence[str]], limit: int) -> None:
        self.child_map = child_map
        self.limit = limit
        self._reach: dict[str, frozenset[str]] = {}
        self._memo: dict[tuple[str, frozenset[str], int], tuple[int, bool]] = {}

    def reach(self, kind: str) -> frozenset[str]:
        """Every kind reachable from `kind`, itself included."""
        if (found := self._reach.get(kind)) is not None:
            return found
        seen = {kind}
        stack = [kind]
        while stack:
            for child in self.child_map.get(stack.pop(), ()):
                if child not in seen:
                    seen.add(child)
                    stack.append(child)
        self._reach[kind] = frozenset(seen)
        return self._reach[kind]

    def depth(self, kind: str, visited: frozenset[str], remaining: int) -> tuple[int, bool]:
        if kind in visited:
            return 0, False
        children = self.child_map.get(kind, ())
        if not children:
            return 1, False
        if remaining <= 1:
            return 1, True
        key = (kind, visited & self.reach(kind), remaining)
        if (cached := self._memo.get(key)) is not None:
            return cached
        branch_visited = visited | {kind}
        deepest = 0
        truncated = False
        for child in children:
            child_depth, child_truncated = self.depth(child, branch_visited, remaining - 1)
            deepest = max(deepest, child_depth)
            truncated = truncated or child_truncated
        self._memo[key] = (deepest + 1, truncated)
        return self._memo[key]


def profile_depths(
    kinds: Iterable[str], child_map: Mapping[str, Sequence[str]], *, depth_limit: int = 64
) -> DepthTable:
    """Profile each kind in `kinds` against the child relation.

    Args:
        kinds: The kinds to profile, normally every named kind.
        child_map: Parent kind to child kinds.
        depth_limit: Longest path followed before a profile is marked truncated.
    """
    if depth_limit < 1:
        raise ValueError("depth_limit must be at least 1")
    search = _DepthSearch(child_map, depth_limit)
    entries: dict[str, DepthProfile] = {}
    for kind in iter_sorted(kinds):
        depth, truncated = search.depth(kind, frozenset(), depth_limit)
        entries[kind] = DepthProfile(
            max_depth=depth, fan_out=len(set(child_map.get(kind, ()))), truncated=truncated
        )
    table = DepthTable(entries=entries, depth_limit=depth_limit)
    if truncated_kinds := table.truncated_kinds:
        logger.warning(
            "Depth search hit its limit of %d for %d kinds: %s",
            depth_limit,
            len(truncated_kinds),
            ", ".join(truncated_kinds[:5]),
        )
    return table


__all__ = ("DepthProfile", "DepthTable", "profile_depths")
