# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""The grammar model: rules, node types and the grammar document."""

from __future__ import annotations

from gramnav.grammar.build import CompiledGrammar, TreeSitterCompiler
from gramnav.grammar.document import GrammarDocument
from gramnav.grammar.node_types import ChildrenInfo, NodeType, NodeTypeRef, parse_node_types
from gramnav.grammar.rules import Rule, RuleType, dump_rule, parse_rule


__all__ = (
    "ChildrenInfo",
    "CompiledGrammar",
    "GrammarDocument",
    "NodeType",
    "NodeTypeRef",
    "Rule",
    "RuleType",
    "TreeSitterCompiler",
    "dump_rule",
    "parse_node_types",
    "parse_rule",
)
