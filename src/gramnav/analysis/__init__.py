# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Structural analyses over a grammar document."""

from __future__ import annotations

from gramnav.analysis.cycles import GrammarCycle, find_cycles
from gramnav.analysis.depth import DepthProfile, DepthTable, profile_depths
from gramnav.analysis.grammar_analysis import GrammarAnalysis, analyze_grammar, analyze_grammars
from gramnav.analysis.groupings import analyze_choice_rules, find_semantic_groupings
from gramnav.analysis.nullability import find_nullable_rules
from gramnav.analysis.reachability import (
    ANY_KIND,
    NavigationEntry,
    NavigationPrimitive,
    NavigationSynthesizer,
    NavigationTable,
    Reachability,
)
from gramnav.analysis.relationships import (
    build_child_map,
    build_parent_map,
    build_sibling_map,
    extract_child_types,
)
from gramnav.analysis.sequences import SequenceLayout, SequenceMember, extract_sequences


__all__ = (
    "ANY_KIND",
    "DepthProfile",
    "DepthTable",
    "GrammarAnalysis",
    "GrammarCycle",
    "NavigationEntry",
    "NavigationPrimitive",
    "NavigationSynthesizer",
    "NavigationTable",
    "Reachability",
    "SequenceLayout",
    "SequenceMember",
    "analyze_choice_rules",
    "analyze_grammar",
    "analyze_grammars",
    "build_child_map",
    "build_parent_map",
    "build_sibling_map",
    "extract_child_types",
    "extract_sequences",
    "find_cycles",
    "find_nullable_rules",
    "find_semantic_groupings",
    "profile_depths",
)
