# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""The grammar analysis artifact and the entry points that build it.

`analyze_grammar` runs every analysis over one `GrammarDocument` and returns a frozen
`GrammarAnalysis`. Every set in it is a sorted tuple and every map has sorted keys, so
`GrammarAnalysis.model_dump_json()` is byte-stable for a given input: code generated from it
diffs cleanly between runs.
"""

from __future__ import annotations

import logging

from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from typing import Annotated, Any

from pydantic import Field, PositiveInt

from gramnav._common import FrozenModel
from gramnav.analysis.cycles import GrammarCycle, find_cycles
from gramnav.analysis.depth import DepthTable, profile_depths
from gramnav.analysis.groupings import analyze_choice_rules, find_semantic_groupings
from gramnav.analysis.nullability import find_nullable_rules
from gramnav.analysis.reachability import NavigationSynthesizer, NavigationTable
from gramnav.analysis.relationships import (
    AnonymousNodeCategories,
    build_child_map,
    build_parent_map,
    build_sibling_map,
    categorize_anonymous_nodes,
)
from gramnav.analysis.sequences import SequenceLayout, extract_sequences
from gramnav.config.settings import AnalysisSettings, get_settings
from gramnav.grammar.document import GrammarDocument
from gramnav.grammar.node_types import NodeType
from gramnav.grammar.rules import Rule


logger = logging.getLogger(__name__)


class GrammarAnalysis(FrozenModel):
    """Everything derived from one grammar document. Built once; read-only."""

    grammar_name: str
    root_rule: Annotated[str, Field(description="The rule a parse of this grammar starts from.")]
    named_nodes: Annotated[tuple[str, ...], Field(description="Sorted named node kinds.")]
    anonymous_nodes: Annotated[
        tuple[str, ...], Field(description="Sorted anonymous (literal token) kinds.")
    ]
    anonymous_categories: AnonymousNodeCategories
    rule_names: Annotated[tuple[str, ...], Field(description="Sorted rule-table keys.")]
    node_type_map: Annotated[
        dict[str, NodeType], Field(description="Node-type metadata by kind, sorted by kind.")
    ]
    child_map: Annotated[
        dict[str, tuple[str, ...]],
        Field(description="Parent kind to the named kinds that can appear directly under it."),
    ]
    parent_map: Annotated[
        dict[str, tuple[str, ...]],
        Field(description="Child kind to the kinds it can appear under. Inverse of `child_map`."),
    ]
    sibling_map: Annotated[
        dict[str, tuple[str, ...]],
        Field(description="Kind to the kinds that can share a parent with it."),
    ]
    rules: Annotated[
        dict[str, Rule], Field(description="The rule table, in declaration order.")
    ]
    semantic_groupings: dict[str, tuple[str, ...]]
    choice_rules: dict[str, tuple[str, ...]]
    nullable_rules: tuple[str, ...]
    cycles: tuple[GrammarCycle, ...]
    depth_profile: DepthTable
    sequences: dict[str, SequenceLayout]
    navigation: NavigationTable
    max_depth: Annotated[
        PositiveInt, Field(description="The depth cap transitive navigation was computed with.")
    ]

    def children_of(self, kind: str) -> tuple[str, ...]:
        return self.child_map.get(kind, ())

    def parents_of(self, kind: str) -> tuple[str, ...]:
        return self.parent_map.get(kind, ())

    def siblings_of(self, kind: str) -> tuple[str, ...]:
        return self.sibling_map.get(kind, ())

    def is_nullable(self, rule: str) -> bool:
        return rule in self.nullable_rules

    def summary(self) -> dict[str, Any]:
        """Headline counts, for logs and the CLI."""
        return {
            "grammar": self.grammar_name,
            "root_rule": self.root_rule,
            "rules": len(self.rule_names),
            "named_nodes": len(self.named_nodes),
            "anonymous_nodes": len(self.anonymous_nodes),
            "semantic_groupings": len(self.semantic_groupings),
            "nullable_rules": len(self.nullable_rules),
            "cycles": len(self.cycles),
            "max_structural_depth": self.depth_profile.max_depth,
            "average_fan_out": self.depth_profile.average_fan_out,
            "truncations": len(self.navigation.truncations),
        }


def analyze_grammar(
    document: GrammarDocument,
    settings: AnalysisSettings | None = None,
    *,
    max_depth: int | None = None,
) -> GrammarAnalysis:
    """Run every analysis over `document`.

    Args:
        document: The grammar to analyze.
        settings: Analysis settings. Defaults to `get_settings()`.
        max_depth: Overrides `settings.max_depth` for transitive navigation.

    Raises:
        NoRootRuleError: If the grammar has no rules.
        UnresolvedReferenceError: If `strict_references` is on and a symbol does not resolve.
        ConfigurationError: If `max_depth` is less than 1.
    """
    settings = settings or get_settings()
    depth_cap = settings.max_depth if max_depth is None else max_depth
    if settings.strict_references:
        document.check_references()
    root_rule = document.root_rule_name(settings.root_rule_candidates)

    child_map = build_child_map(document)
    parent_map = build_parent_map(child_map)
    sibling_map = build_sibling_map(child_map, parent_map)
    sequences = extract_sequences(document.rules, document.is_named_kind)
    navigation = NavigationSynthesizer(
        document, child_map, parent_map, sibling_map, sequences, max_depth=depth_cap
    ).synthesize()

    analysis = GrammarAnalysis(
        grammar_name=document.name,
        root_rule=root_rule,
        named_nodes=document.named_kinds,
        anonymous_nodes=document.anonymous_kinds,
        anonymous_categories=categorize_anonymous_nodes(document.anonymous_kinds),
        rule_names=document.rule_names,
        node_type_map=document.node_type_map,
        child_map=child_map,
        parent_map=parent_map,
        sibling_map=sibling_map,
        rules=document.rules,
        semantic_groupings=find_semantic_groupings(document.rules),
        choice_rules=analyze_choice_rules(document.rules),
        nullable_rules=find_nullable_rules(document.rules),
        cycles=find_cycles(child_map),
        depth_profile=profile_depths(
            document.named_kinds, child_map, depth_limit=settings.profile_depth_limit
        ),
        sequences=sequences,
        navigation=navigation,
        max_depth=depth_cap,
    )
    logger.info("Analyzed grammar %s: %s", document.name, analysis.summary())
    return analysis


def analyze_grammars(
    documents: Iterable[GrammarDocument],
    settings: AnalysisSettings | None = None,
    *,
    max_workers: int | None = None,
) -> list[GrammarAnalysis]:
    """Analyze independent grammars in parallel, returning results in input order.

    The first failure propagates once all submitted work has finished.
    """
    settings = settings or get_settings()
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="gramnav") as executor:
        futures = [executor.submit(analyze_grammar, document, settings) for document in documents]
        return [future.result() for future in futures]


__all__ = ("GrammarAnalysis", "analyze_grammar", "analyze_grammars")
