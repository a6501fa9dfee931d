# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Unit tests for semantic grouping detection."""

from __future__ import annotations

import pytest

from gramnav.analysis.groupings import (
    analyze_choice_rules,
    find_semantic_groupings,
    grouping_members,
)
from gramnav.grammar.document import GrammarDocument
from gramnav.grammar.dsl import blank, choice, seq, string, sym


@pytest.mark.unit
class TestGroupingMembers:
    """Tests for recognizing a single grouping rule."""

    def test_all_symbol_choice(self) -> None:
        assert grouping_members(choice(sym("b"), sym("a"))) == ("b", "a")

    def test_single_symbol_is_an_alias(self) -> None:
        assert grouping_members(choice(sym("a"))) is None

    def test_mixed_branches_are_not_a_grouping(self) -> None:
        assert grouping_members(choice(sym("a"), string("x"))) is None
        assert grouping_members(choice(sym("a"), blank())) is None

    def test_non_choice(self) -> None:
        assert grouping_members(seq(sym("a"), sym("b"))) is None


@pytest.mark.unit
class TestFindSemanticGroupings:
    """Tests for the grouping table over a whole grammar."""

    def test_graphql_value(self, graphql_document: GrammarDocument) -> None:
        groupings = find_semantic_groupings(graphql_document.rules)

        assert groupings["value"] == (
            "variable",
            "string_value",
            "int_value",
            "float_value",
            "boolean_value",
            "null_value",
            "enum_value",
            "list_value",
            "object_value",
        )

    def test_graphql_table(self, graphql_document: GrammarDocument) -> None:
        groupings = find_semantic_groupings(graphql_document.rules)

        assert list(groupings) == ["definition", "selection", "value"]
        assert groupings["definition"] == ("operation_definition", "fragment_definition")
        assert groupings["selection"] == ("field", "fragment_spread")

    def test_string_choices_are_skipped(self, graphql_document: GrammarDocument) -> None:
        groupings = find_semantic_groupings(graphql_document.rules)

        assert "operation_type" not in groupings
        assert "boolean_value" not in groupings


@pytest.mark.unit
class TestAnalyzeChoiceRules:
    """Tests for listing the symbol branches of every CHOICE rule."""

    def test_keeps_partial_choices(self) -> None:
        rules = {
            "optional_name": choice(sym("name"), blank()),
            "keyword": choice(string("a"), string("b")),
            "pair": choice(sym("left"), sym("right")),
        }

        assert analyze_choice_rules(rules) == {
            "optional_name": ("name",),
            "pair": ("left", "right"),
        }
