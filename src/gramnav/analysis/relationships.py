# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Child, parent and sibling relations between node kinds.

Relations only hold between named kinds. For a kind with a node type entry, that metadata is
authoritative, since it reflects the tree shape after hidden rules are inlined and aliases
applied. An entry without `children` or `fields` is a leaf. Kinds without an entry fall back
to the SYMBOL references in their rule body. Every relation map has sorted keys and sorted
tuple values, and omits empty entries.
"""

from __future__ import annotations

import logging
import re

from collections.abc import Iterable, Mapping
from typing import Annotated

from pydantic import Field

from gramnav._common import FrozenModel, iter_sorted
from gramnav.grammar.document import GrammarDocument
from gramnav.grammar.node_types import NodeType
from gramnav.grammar.predicates import is_terminal, iter_rule_tree
from gramnav.grammar.rules import Rule, SymbolRule


logger = logging.getLogger(__name__)

type RelationMap = dict[str, tuple[str, ...]]
"""Node kind to a sorted tuple of related kinds."""


def extract_child_types(rule: Rule) -> tuple[str, ...]:
    """Every SYMBOL name directly referenced in a rule body, in first-seen order.

    Referenced rules are not expanded.
    """
    return tuple(
        dict.fromkeys(node.name for node in iter_rule_tree(rule) if isinstance(node, SymbolRule))
    )


def find_symbol_references(rules: Mapping[str, Rule], name: str) -> tuple[str, ...]:
    """Sorted names of the rules whose body references `name`."""
    return iter_sorted(
        rule_name for rule_name, rule in rules.items() if name in extract_child_types(rule)
    )


def terminal_rules(rules: Mapping[str, Rule]) -> tuple[str, ...]:
    """Sorted names of the rules that are a bare STRING or PATTERN."""
    return iter_sorted(name for name, rule in rules.items() if is_terminal(rule))


def possible_child_types(kind: str, rules: Mapping[str, Rule]) -> tuple[str, ...]:
    """Every kind referenced by `kind`'s rule body, named or not, in first-seen order."""
    if (rule := rules.get(kind)) is None:
        return ()
    return extract_child_types(rule)


def _child_kinds_of(document: GrammarDocument, kind: str) -> Iterable[str]:
    node_type = document.node_type_map.get(kind)
    if node_type is not None:
        # leaves and supertypes (whose subtypes are alternatives) have no children
        return node_type.named_child_types if node_type.has_structure else ()
    if (rule := document.rules.get(kind)) is None:
        return ()
    return (name for name in extract_child_types(rule) if document.is_named_kind(name))


def build_child_map(document: GrammarDocument) -> RelationMap:
    """Map each named kind to the named kinds that can appear directly under it."""
    child_map: RelationMap = {}
    for kind in document.named_kinds:
        if children := iter_sorted(_child_kinds_of(document, kind)):
            child_map[kind] = children
    logger.debug("Child map for %s: %d parents", document.name, len(child_map))
    return child_map


def build_parent_map(child_map: Mapping[str, Iterable[str]]) -> RelationMap:
    """Invert a child map: each child kind to every kind it can appear under."""
    parents: dict[str, set[str]] = {}
    for parent, children in child_map.items():
        for child in children:
            parents.setdefault(child, set()).add(parent)
    return {child: iter_sorted(found) for child, found in sorted(parents.items())}


def build_sibling_map(
    child_map: Mapping[str, Iterable[str]], parent_map: Mapping[str, Iterable[str]]
) -> RelationMap:
    """Map each kind to the kinds that can share a parent with it.

    A kind is never its own sibling.
    """
    sibling_map: RelationMap = {}
    for kind, parents in sorted(parent_map.items()):
        siblings = {
            sibling
            for parent in parents
            for sibling in child_map.get(parent, ())
            if sibling != kind
        }
        if siblings:
            sibling_map[kind] = iter_sorted(siblings)
    return sibling_map


class AnonymousNodeCategories(FrozenModel):
    """Anonymous (literal token) kinds sorted into coarse lexical categories."""

    punctuation: Annotated[
        tuple[str, ...], Field(description="Single non-alphanumeric characters, like `{`.")
    ] = ()
    operators: Annotated[
        tuple[str, ...], Field(description="Runs of non-alphanumeric characters, like `...`.")
    ] = ()
    keywords: Annotated[
        tuple[str, ...], Field(description="Lowercase words, like `query`.")
    ] = ()
    other: tuple[str, ...] = ()


_SYMBOLIC = re.compile(r"[^a-zA-Z0-9]+")
_KEYWORD = re.compile(r"[a-z]+")


def categorize_anonymous_nodes(nodes: Iterable[NodeType | str]) -> AnonymousNodeCategories:
    """Sort anonymous kinds into punctuation, operators, keywords and everything else."""
    buckets: dict[str, list[str]] = {
        "punctuation": [],
        "operators": [],
        "keywords": [],
        "other": [],
    }
    for node in nodes:
        kind = node if isinstance(node, str) else node.type
        if _SYMBOLIC.fullmatch(kind):
            buckets["punctuation" if len(kind) == 1 else "operators"].append(kind)
        elif _KEYWORD.fullmatch(kind):
            buckets["keywords"].append(kind)
        else:
            buckets["other"].append(kind)
    return AnonymousNodeCategories(**{key: iter_sorted(kinds) for key, kinds in buckets.items()})


__all__ = (
    "AnonymousNodeCategories",
    "RelationMap",
    "build_child_map",
    "build_parent_map",
    "build_sibling_map",
    "categorize_anonymous_nodes",
    "extract_child_types",
    "find_symbol_references",
    "possible_child_types",
    "terminal_rules",
)
