# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Find cycles in the child relation: recursive constructs like nested selection sets."""

from __future__ import annotations

import logging

from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Annotated

from pydantic import Field

from gramnav._common import FrozenModel, iter_sorted


logger = logging.getLogger(__name__)


class GrammarCycle(FrozenModel):
    """A closed path through the child relation."""

    kinds: Annotated[
        tuple[str, ...],
        Field(
            description="The path from the first occurrence of the repeated kind to its repeat, inclusive. The first and last kinds are equal.",
            min_length=2,
        ),
    ]

    @property
    def edges(self) -> tuple[tuple[str, str], ...]:
        """Each parent → child step of the cycle, in order."""
        return tuple(zip(self.kinds, self.kinds[1:], strict=False))

    @property
    def members(self) -> tuple[str, ...]:
        """The distinct kinds on the cycle, sorted."""
        return iter_sorted(self.kinds)

    def __str__(self) -> str:
        return " -> ".join(self.kinds)


def find_cycles(child_map: Mapping[str, Sequence[str]]) -> tuple[GrammarCycle, ...]:
    """Walk the child relation depth first, recording every cycle closed along the way.

    Start kinds and children are visited in sorted order, so the result is deterministic.
    Each kind is expanded once; a kind met again while still on the current path closes a
    cycle.
    """
    visited: set[str] = set()
    cycles: list[GrammarCycle] = []
    for start in sorted(child_map):
        if start in visited:
            continue
        visited.add(start)
        path = [start]
        on_path = {start}
        pending: list[Iterator[str]] = [iter(sorted(child_map.get(start, ())))]
        while pending:
            child = next(pending[-1], None)
            if child is None:
                pending.pop()
                on_path.discard(path.pop())
                continue
            if child in on_path:
                cycles.append(GrammarCycle(kinds=(*path[path.index(child) :], child)))
            elif child not in visited:
                visited.add(child)
                path.append(child)
                on_path.add(child)
                pending.append(iter(sorted(child_map.get(child, ()))))
    logger.debug("Found %d cycles", len(cycles))
    return tuple(cycles)


def cyclic_kinds(cycles: Iterable[GrammarCycle]) -> tuple[str, ...]:
    """Sorted kinds that lie on at least one cycle."""
    return iter_sorted(kind for cycle in cycles for kind in cycle.kinds)


__all__ = ("GrammarCycle", "cyclic_kinds", "find_cycles")
