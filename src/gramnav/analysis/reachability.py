# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Navigation reachability: which kinds a cursor can land on from each kind.

For every named kind and every navigation primitive the synthesizer reports the exact set of
kinds one application of the primitive can reach, or `None` when the primitive never applies
from that kind:

| Primitive | Reaches |
|---|---|
| `first_child` | kinds that can be the first named child |
| `next_sibling` / `previous_sibling` | kinds that can directly follow / precede it under some parent |
| `parent` | kinds it can appear under |
| `indexed_child` | per named-child index, the kinds that can sit there |

Where a parent's sequence layout accounts for all of its named children, the layout decides
positions and adjacency. Otherwise any child of the parent can come first or sit next to any
other.

Transitive questions ("what is reachable within N steps") walk a relation that is often
cyclic, so they stop after at most `max_depth` steps. A walk that has not saturated by then is
reported as unresolved, and its kind set carries the `ANY_KIND` placeholder.
"""

from __future__ import annotations

import logging

from collections import Counter
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Annotated, assert_never

from pydantic import Field, PositiveInt

from gramnav._common import BaseEnum, FrozenModel, iter_sorted
from gramnav.analysis.sequences import SequenceLayout
from gramnav.config.settings import DEFAULT_MAX_DEPTH
from gramnav.exceptions import ConfigurationError
from gramnav.grammar.document import GrammarDocument
from gramnav.grammar.predicates import sub_rules
from gramnav.grammar.rules import Repeat1Rule, RepeatRule, Rule, SymbolRule


logger = logging.getLogger(__name__)

ANY_KIND = "*"
"""Placeholder for "any kind not yet enumerated" in an unresolved reachability set."""

type Step = Callable[[str], Sequence[str] | None]


class NavigationPrimitive(BaseEnum):
    """A single cursor movement."""

    FIRST_CHILD = "first_child"
    NEXT_SIBLING = "next_sibling"
    PREVIOUS_SIBLING = "previous_sibling"
    PARENT = "parent"
    INDEXED_CHILD = "indexed_child"


class Reachability(FrozenModel):
    """The kinds reachable from a kind within a bounded number of steps."""

    kinds: Annotated[
        tuple[str, ...],
        Field(description="Sorted reachable kinds. Contains `ANY_KIND` when unresolved."),
    ] = ()
    depth: Annotated[PositiveInt, Field(description="The number of steps explored.")]
    unresolved: Annotated[
        bool,
        Field(description="Whether more kinds were still reachable when the walk stopped."),
    ] = False

    @property
    def resolved_kinds(self) -> tuple[str, ...]:
        """The enumerated kinds, without the placeholder."""
        return tuple(kind for kind in self.kinds if kind != ANY_KIND)


class TruncationEvent(FrozenModel):
    """A transitive walk that was cut off at the depth cap."""

    kind: str
    relation: str
    depth: PositiveInt


class NavigationEntry(FrozenModel):
    """Everything reachable from one kind."""

    first_child: tuple[str, ...] | None = None
    next_sibling: tuple[str, ...] | None = None
    previous_sibling: tuple[str, ...] | None = None
    parent: tuple[str, ...] | None = None
    indexed_child: Annotated[
        dict[int, tuple[str, ...]] | None,
        Field(
            description="Named-child index to the kinds that can occupy it. None when the kind's children have no fixed positions."
        ),
    ] = None
    descendants: Reachability
    ancestors: Reachability

    def reachable(self, primitive: NavigationPrimitive) -> tuple[str, ...] | None:
        """The one-step result for `primitive`. Indexed children are flattened to one set."""
        match primitive:
            case NavigationPrimitive.FIRST_CHILD:
                return self.first_child
            case NavigationPrimitive.NEXT_SIBLING:
                return self.next_sibling
            case NavigationPrimitive.PREVIOUS_SIBLING:
                return self.previous_sibling
            case NavigationPrimitive.PARENT:
                return self.parent
            case NavigationPrimitive.INDEXED_CHILD:
                if self.indexed_child is None:
                    return None
                return iter_sorted(kind for kinds in self.indexed_child.values() for kind in kinds)
            case _:
                assert_never(primitive)


class NavigationTable(FrozenModel):
    """The synthesized navigation data for a whole grammar."""

    max_depth: PositiveInt
    entries: Annotated[
        dict[str, NavigationEntry], Field(description="One entry per named kind, sorted.")
    ]
    parent_kinds: Annotated[
        tuple[str, ...], Field(description="Kinds that can have named children.")
    ] = ()
    child_kinds: Annotated[
        tuple[str, ...], Field(description="Kinds that can appear under another kind.")
    ] = ()
    sibling_kinds: Annotated[
        tuple[str, ...], Field(description="Kinds that can share a parent with another kind.")
    ] = ()
    truncations: tuple[TruncationEvent, ...] = ()


def _repeated_symbols(rule: Rule) -> set[str]:
    """Symbols that may occur more than once in a node built from `rule`."""
    counts: Counter[str] = Counter()
    repeated: set[str] = set()

    def walk(node: Rule, in_repeat: bool) -> None:
        if isinstance(node, SymbolRule):
            counts[node.name] += 1
            if in_repeat:
                repeated.add(node.name)
            return
        in_repeat = in_repeat or isinstance(node, RepeatRule | Repeat1Rule)
        for child in sub_rules(node):
            walk(child, in_repeat)

    walk(rule, False)
    return repeated | {name for name, count in counts.items() if count > 1}


class NavigationSynthesizer:
    """Answers reachability questions over one grammar's relation maps."""

    def __init__(
        self,
        document: GrammarDocument,
        child_map: Mapping[str, Sequence[str]],
        parent_map: Mapping[str, Sequence[str]],
        sibling_map: Mapping[str, Sequence[str]],
        sequences: Mapping[str, SequenceLayout],
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        if max_depth < 1:
            raise ConfigurationError(
                "max_depth must be at least 1",
                details={"max_depth": max_depth},
                suggestions=["Use the default navigation depth of 8"],
            )
        self.document = document
        self.child_map = child_map
        self.parent_map = parent_map
        self.sibling_map = sibling_map
        self.sequences = sequences
        self.max_depth = max_depth
        self._truncations: list[TruncationEvent] = []
        self._repeats: dict[str, frozenset[str]] = {}

    # ------------------------------------------------------------------
    # one-step primitives
    # ------------------------------------------------------------------

    def layout(self, kind: str) -> SequenceLayout | None:
        """The sequence layout of `kind`, if it fixes the positions of all its named children."""
        layout = self.sequences.get(kind)
        if layout is None or not layout.positional or not layout.members:
            return None
        if {member.name for member in layout.members} != set(self.child_map.get(kind, ())):
            return None
        return layout

    def may_repeat(self, parent: str, kind: str) -> bool:
        """Whether `kind` can occur more than once directly under `parent`.

        A kind that fills two single-valued slots, like the `left` and `right` fields of a
        binary expression, repeats as much as one declared `multiple`.
        """
        node_type = self.document.node_type_map.get(parent)
        if node_type is not None and node_type.has_structure:
            descriptors = [node_type.children] if node_type.children else []
            descriptors.extend((node_type.fields or {}).values())
            holding = [info for info in descriptors if kind in info.named_types]
            return len(holding) > 1 or any(info.multiple for info in holding)
        if parent not in self._repeats:
            rule = self.document.rules.get(parent)
            self._repeats[parent] = frozenset(_repeated_symbols(rule)) if rule else frozenset()
        return kind in self._repeats[parent]

    def first_child(self, kind: str) -> tuple[str, ...] | None:
        if layout := self.layout(kind):
            return layout.index_slots().get(0)
        return tuple(self.child_map[kind]) if self.child_map.get(kind) else None

    def _adjacent(self, kind: str, *, forward: bool) -> tuple[str, ...] | None:
        found: set[str] = set()
        for parent in self.parent_map.get(kind, ()):
            if layout := self.layout(parent):
                members = layout.members
                for position, member in enumerate(members):
                    if member.name != kind:
                        continue
                    neighbors = members[position + 1 :] if forward else members[:position][::-1]
                    for neighbor in neighbors:
                        found.add(neighbor.name)
                        if not neighbor.optional:
                            break
                continue
            found.update(child for child in self.child_map.get(parent, ()) if child != kind)
            if self.may_repeat(parent, kind):
                found.add(kind)
        return iter_sorted(found) or None

    def next_sibling(self, kind: str) -> tuple[str, ...] | None:
        return self._adjacent(kind, forward=True)

    def previous_sibling(self, kind: str) -> tuple[str, ...] | None:
        return self._adjacent(kind, forward=False)

    def parent(self, kind: str) -> tuple[str, ...] | None:
        return tuple(self.parent_map[kind]) if self.parent_map.get(kind) else None

    def indexed_child(self, kind: str) -> dict[int, tuple[str, ...]] | None:
        if layout := self.layout(kind):
            return layout.index_slots() or None
        return None

    def step(self, kind: str, primitive: NavigationPrimitive) -> tuple[str, ...] | None:
        """Apply one primitive from `kind`."""
        match primitive:
            case NavigationPrimitive.FIRST_CHILD:
                return self.first_child(kind)
            case NavigationPrimitive.NEXT_SIBLING:
                return self.next_sibling(kind)
            case NavigationPrimitive.PREVIOUS_SIBLING:
                return self.previous_sibling(kind)
            case NavigationPrimitive.PARENT:
                return self.parent(kind)
            case NavigationPrimitive.INDEXED_CHILD:
                slots = self.indexed_child(kind)
                if slots is None:
                    return None
                return iter_sorted(found for kinds in slots.values() for found in kinds)
            case _:
                assert_never(primitive)

    # ------------------------------------------------------------------
    # depth-bounded transitive walks
    # ------------------------------------------------------------------

    def _bounded_depth(self, depth: int | None) -> int:
        if depth is None:
            return self.max_depth
        if depth < 1:
            raise ValueError("depth must be at least 1")
        if depth > self.max_depth:
            logger.debug("Requested depth %d capped at %d", depth, self.max_depth)
        return min(depth, self.max_depth)

    def _walk(self, start: str, step: Step, relation: str, depth: int | None) -> Reachability:
        limit = self._bounded_depth(depth)
        seen: set[str] = set()
        frontier = {start}
        for _ in range(limit):
            reached = {found for kind in frontier for found in step(kind) or ()}
            frontier = reached - seen
            seen |= reached
            if not frontier:
                break
        unresolved = any(
            found not in seen for kind in frontier for found in step(kind) or ()
        )
        if unresolved:
            self._truncations.append(TruncationEvent(kind=start, relation=relation, depth=limit))
            seen.add(ANY_KIND)
        return Reachability(kinds=iter_sorted(seen), depth=limit, unresolved=unresolved)

    def transitive(
        self, kind: str, primitive: NavigationPrimitive, depth: int | None = None
    ) -> Reachability:
        """Kinds reachable by applying `primitive` repeatedly, at most `depth` times."""
        return self._walk(
            kind, lambda current: self.step(current, primitive), primitive.value, depth
        )

    def descendants(self, kind: str, depth: int | None = None) -> Reachability:
        """Kinds reachable through at most `depth` child steps."""
        return self._walk(kind, self.child_map.get, "descendants", depth)

    def ancestors(self, kind: str, depth: int | None = None) -> Reachability:
        """Kinds reachable through at most `depth` parent steps."""
        return self._walk(kind, self.parent_map.get, "ancestors", depth)

    # ------------------------------------------------------------------
    # path queries
    # ------------------------------------------------------------------

    def can_navigate(self, source: str, target: str) -> bool:
        """Whether `target` can appear directly under `source`."""
        return target in self.child_map.get(source, ())

    def resolve_path(self, start: str, path: Iterable[str]) -> str | None:
        """Follow a chain of child kinds from `start`.

        Returns the last kind of the path (or `start` for an empty path), or None if some
        step is not a possible child of the kind before it.
        """
        current = start
        for kind in path:
            if not self.can_navigate(current, kind):
                return None
            current = kind
        return current

    @property
    def truncations(self) -> tuple[TruncationEvent, ...]:
        """Every walk cut off at the depth cap so far, in the order they happened."""
        return tuple(self._truncations)

    def entry(self, kind: str) -> NavigationEntry:
        return NavigationEntry(
            first_child=self.first_child(kind),
            next_sibling=self.next_sibling(kind),
            previous_sibling=self.previous_sibling(kind),
            parent=self.parent(kind),
            indexed_child=self.indexed_child(kind),
            descendants=self.descendants(kind),
            ancestors=self.ancestors(kind),
        )

    def synthesize(self, kinds: Iterable[str] | None = None) -> NavigationTable:
        """Build the navigation table for `kinds` (every named kind by default)."""
        already_truncated = len(self._truncations)
        selected = self.document.named_kinds if kinds is None else kinds
        entries = {kind: self.entry(kind) for kind in iter_sorted(selected)}
        table = NavigationTable(
            max_depth=self.max_depth,
            entries=entries,
            parent_kinds=iter_sorted(kind for kind, children in self.child_map.items() if children),
            child_kinds=iter_sorted(
                child for children in self.child_map.values() for child in children
            ),
            sibling_kinds=iter_sorted(
                kind for kind, siblings in self.sibling_map.items() if siblings
            ),
            truncations=self.truncations[already_truncated:],
        )
        if table.truncations:
            logger.warning(
                "%d reachability walks in %s did not settle within %d steps",
                len(table.truncations),
                self.document.name,
                self.max_depth,
            )
        return table


__all__ = (
    "ANY_KIND",
    "NavigationEntry",
    "NavigationPrimitive",
    "NavigationSynthesizer",
    "NavigationTable",
    "Reachability",
    "TruncationEvent",
)
