# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Unit tests for navigation reachability synthesis."""

from __future__ import annotations

import logging

import pytest

from gramnav.analysis.reachability import (
    ANY_KIND,
    NavigationPrimitive,
    NavigationSynthesizer,
)
from gramnav.analysis.relationships import build_child_map, build_parent_map, build_sibling_map
from gramnav.analysis.sequences import extract_sequences
from gramnav.exceptions import ConfigurationError
from gramnav.grammar.document import GrammarDocument
from gramnav.grammar.dsl import choice, field, pattern, prec_left, repeat, seq, string, sym
from gramnav.grammar.node_types import parse_node_types


def make_synthesizer(document: GrammarDocument, *, max_depth: int = 8) -> NavigationSynthesizer:
    child_map = build_child_map(document)
    parent_map = build_parent_map(child_map)
    return NavigationSynthesizer(
        document,
        child_map,
        parent_map,
        build_sibling_map(child_map, parent_map),
        extract_sequences(document.rules, document.is_named_kind),
        max_depth=max_depth,
    )


def chain_document(length: int) -> GrammarDocument:
    """`k0 := seq(k1)`, `k1 := seq(k2)`, ... ending in a literal."""
    rules = {f"k{i}": seq(sym(f"k{i + 1}")) for i in range(length)}
    rules[f"k{length}"] = string("x")
    return GrammarDocument(name="chain", rules=rules)


@pytest.fixture
def graphql(graphql_document: GrammarDocument) -> NavigationSynthesizer:
    return make_synthesizer(graphql_document)


@pytest.mark.unit
class TestOneStepPrimitives:
    """Tests for single navigation steps over the GraphQL fixture."""

    def test_first_child_from_layout(self, graphql: NavigationSynthesizer) -> None:
        assert graphql.first_child("field") == ("alias", "name")
        assert graphql.first_child("fragment_definition") == ("name",)

    def test_first_child_without_layout(self, graphql: NavigationSynthesizer) -> None:
        assert graphql.first_child("selection_set") == ("selection",)
        assert graphql.first_child("value")[0] == "boolean_value"

    def test_leaf_has_no_children(self, graphql: NavigationSynthesizer) -> None:
        assert graphql.first_child("name") is None
        assert graphql.indexed_child("name") is None

    def test_siblings_follow_layouts(self, graphql: NavigationSynthesizer) -> None:
        assert graphql.next_sibling("name") == ("arguments", "named_type", "selection_set", "value")
        assert graphql.previous_sibling("name") == ("alias", "operation_type")
        assert graphql.next_sibling("alias") == ("name",)
        assert graphql.previous_sibling("alias") is None

    def test_repeated_child_is_its_own_sibling(self, graphql: NavigationSynthesizer) -> None:
        assert graphql.next_sibling("selection") == ("selection",)
        assert graphql.previous_sibling("argument") == ("argument",)

    def test_parent(self, graphql: NavigationSynthesizer) -> None:
        assert graphql.parent("document") is None
        assert graphql.parent("selection_set") == (
            "field",
            "fragment_definition",
            "operation_definition",
        )

    def test_indexed_child(self, graphql: NavigationSynthesizer) -> None:
        assert graphql.indexed_child("field") == {
            0: ("alias", "name"),
            1: ("arguments", "name", "selection_set"),
            2: ("arguments", "selection_set"),
            3: ("selection_set",),
        }
        assert graphql.indexed_child("arguments") is None

    def test_step_dispatch(self, graphql: NavigationSynthesizer) -> None:
        assert graphql.step("field", NavigationPrimitive.FIRST_CHILD) == ("alias", "name")
        assert graphql.step("field", NavigationPrimitive.INDEXED_CHILD) == (
            "alias",
            "arguments",
            "name",
            "selection_set",
        )
        assert graphql.step("document", NavigationPrimitive.PARENT) is None

    def test_minimal_grammar(self, minimal_document: GrammarDocument) -> None:
        synthesizer = make_synthesizer(minimal_document)

        assert synthesizer.first_child("source_file") == ("a",)
        assert synthesizer.parent("a") == ("source_file",)
        assert synthesizer.next_sibling("a") is None
        assert synthesizer.previous_sibling("a") is None

    def test_layout_must_cover_every_child(self) -> None:
        """Node types naming a child the rule body never mentions disable the layout."""
        document = GrammarDocument(
            name="g",
            rules={"pair": seq(sym("key"), ":", sym("value"))},
            node_types=parse_node_types([
                {
                    "type": "pair",
                    "named": True,
                    "children": {
                        "multiple": True,
                        "required": True,
                        "types": [
                            {"type": "comment", "named": True},
                            {"type": "key", "named": True},
                            {"type": "value", "named": True},
                        ],
                    },
                },
            ]),
        )
        synthesizer = make_synthesizer(document)

        assert synthesizer.layout("pair") is None
        assert synthesizer.indexed_child("pair") is None
        assert synthesizer.first_child("pair") == ("comment", "key", "value")
        assert synthesizer.next_sibling("key") == ("comment", "key", "value")


BINARY_NODE_TYPES = [
    {
        "type": "binary_expression",
        "named": True,
        "fields": {
            "left": {
                "multiple": False,
                "required": True,
                "types": [{"type": "expression", "named": True}],
            },
            "operator": {
                "multiple": False,
                "required": True,
                "types": [{"type": "+", "named": False}, {"type": "-", "named": False}],
            },
            "right": {
                "multiple": False,
                "required": True,
                "types": [{"type": "expression", "named": True}],
            },
        },
    },
    {"type": "expression", "named": True},
]


def binary_document(*, separated: bool = False) -> GrammarDocument:
    """`binary_expression` with the same kind in its `left` and `right` fields.

    With `separated`, a repeated separator sits between the operands so the body has no
    positional layout.
    """
    middle = repeat(",") if separated else field("operator", choice("+", "-"))
    return GrammarDocument(
        name="arith",
        rules={
            "binary_expression": prec_left(
                1,
                seq(field("left", sym("expression")), middle, field("right", sym("expression"))),
            ),
            "expression": pattern("[0-9]+"),
        },
        node_types=parse_node_types(BINARY_NODE_TYPES),
    )


@pytest.mark.unit
class TestRepeatedFieldKinds:
    """A kind filling two single-valued fields is its own sibling."""

    def test_may_repeat(self) -> None:
        synthesizer = make_synthesizer(binary_document())

        assert synthesizer.may_repeat("binary_expression", "expression")
        assert not synthesizer.may_repeat("binary_expression", "binary_expression")

    def test_siblings_from_layout(self) -> None:
        synthesizer = make_synthesizer(binary_document())

        assert synthesizer.layout("binary_expression") is not None
        assert synthesizer.first_child("binary_expression") == ("expression",)
        assert synthesizer.next_sibling("expression") == ("expression",)
        assert synthesizer.previous_sibling("expression") == ("expression",)
        assert synthesizer.indexed_child("binary_expression") == {
            0: ("expression",),
            1: ("expression",),
        }

    def test_siblings_without_layout(self) -> None:
        synthesizer = make_synthesizer(binary_document(separated=True))

        assert synthesizer.layout("binary_expression") is None
        assert synthesizer.next_sibling("expression") == ("expression",)
        assert synthesizer.previous_sibling("expression") == ("expression",)


@pytest.mark.unit
class TestTransitiveWalks:
    """Tests for depth-bounded transitive reachability."""

    def test_descendants_settle(self, graphql: NavigationSynthesizer) -> None:
        result = graphql.descendants("selection_set")

        assert not result.unresolved
        assert len(result.kinds) == 19
        assert ANY_KIND not in result.kinds
        assert "selection_set" in result.kinds
        assert graphql.truncations == ()

    def test_shallow_walk_is_unresolved(self, graphql: NavigationSynthesizer) -> None:
        result = graphql.descendants("selection_set", depth=3)

        assert result.unresolved
        assert result.depth == 3
        assert ANY_KIND in result.kinds
        assert result.resolved_kinds == (
            "alias",
            "arguments",
            "field",
            "fragment_spread",
            "name",
            "selection",
            "selection_set",
        )
        assert graphql.truncations[-1].relation == "descendants"

    def test_ancestors(self, graphql: NavigationSynthesizer) -> None:
        result = graphql.ancestors("operation_type")

        assert result.kinds == ("definition", "document", "operation_definition")
        assert not result.unresolved

    def test_depth_is_capped(self) -> None:
        synthesizer = make_synthesizer(chain_document(12))
        result = synthesizer.descendants("k0", depth=50)

        assert result.depth == 8
        assert result.unresolved
        assert result.resolved_kinds == tuple(f"k{i}" for i in range(1, 9))
        assert synthesizer.truncations[0].kind == "k0"

    def test_deeper_cap_resolves(self) -> None:
        synthesizer = make_synthesizer(chain_document(12), max_depth=20)
        result = synthesizer.descendants("k0")

        assert not result.unresolved
        assert len(result.kinds) == 12

    def test_transitive_primitive(self, graphql: NavigationSynthesizer) -> None:
        result = graphql.transitive("name", NavigationPrimitive.PARENT, depth=1)

        assert result.unresolved
        assert "field" in result.resolved_kinds

    def test_invalid_depth(self, graphql: NavigationSynthesizer) -> None:
        with pytest.raises(ValueError, match="at least 1"):
            graphql.descendants("field", depth=0)

    def test_invalid_max_depth(self, graphql_document: GrammarDocument) -> None:
        with pytest.raises(ConfigurationError, match="max_depth"):
            make_synthesizer(graphql_document, max_depth=0)


@pytest.mark.unit
class TestPathQueries:
    """Tests for direct-child checks and path resolution."""

    def test_can_navigate(self, graphql: NavigationSynthesizer) -> None:
        assert graphql.can_navigate("selection_set", "selection")
        assert not graphql.can_navigate("selection_set", "field")
        assert not graphql.can_navigate("name", "name")

    def test_resolve_path(self, graphql: NavigationSynthesizer) -> None:
        assert graphql.resolve_path("selection_set", ["selection", "field", "name"]) == "name"
        assert graphql.resolve_path("selection_set", ["field"]) is None
        assert graphql.resolve_path("document", []) == "document"


@pytest.mark.unit
class TestSynthesize:
    """Tests for the full navigation table."""

    def test_table(self, graphql: NavigationSynthesizer) -> None:
        table = graphql.synthesize()

        assert table.max_depth == 8
        assert list(table.entries) == sorted(table.entries)
        assert len(table.entries) == 25
        assert "selection" in table.child_kinds
        assert "document" not in table.child_kinds
        assert "name" not in table.parent_kinds
        entry = table.entries["field"]
        assert entry.reachable(NavigationPrimitive.FIRST_CHILD) == ("alias", "name")
        assert entry.reachable(NavigationPrimitive.INDEXED_CHILD) == (
            "alias",
            "arguments",
            "name",
            "selection_set",
        )
        assert table.entries["name"].reachable(NavigationPrimitive.INDEXED_CHILD) is None

    def test_kinds_only_referenced_by_node_types(self) -> None:
        """A child kind with no node type or rule of its own still gets an entry."""
        document = GrammarDocument(
            name="g",
            rules={"call": seq(sym("identifier"), "(", ")"), "identifier": pattern("x")},
            node_types=parse_node_types([
                {
                    "type": "call",
                    "named": True,
                    "children": {"types": [{"type": "argument_list", "named": True}]},
                },
            ]),
        )
        table = make_synthesizer(document).synthesize()

        assert "argument_list" in table.child_kinds
        assert table.entries["argument_list"].parent == ("call",)
        assert table.entries["argument_list"].first_child is None

    def test_deep_walks_are_flagged(self, graphql: NavigationSynthesizer) -> None:
        table = graphql.synthesize()
        events = {(event.kind, event.relation) for event in table.truncations}

        assert ("document", "descendants") in events
        assert ("boolean_value", "ancestors") in events
        assert table.entries["document"].descendants.unresolved
        assert not table.entries["operation_definition"].descendants.unresolved

    def test_large_cap_settles(self, graphql_document: GrammarDocument) -> None:
        table = make_synthesizer(graphql_document, max_depth=32).synthesize()

        assert table.truncations == ()
        assert ANY_KIND not in table.entries["document"].descendants.kinds

    def test_truncations_are_reported_per_call(self, caplog: pytest.LogCaptureFixture) -> None:
        synthesizer = make_synthesizer(chain_document(12))
        with caplog.at_level(logging.WARNING, logger="gramnav.analysis.reachability"):
            table = synthesizer.synthesize(["k0", "k1"])
        second = synthesizer.synthesize(["k6"])

        assert [event.kind for event in table.truncations] == ["k0", "k1"]
        assert second.truncations == ()
        assert len(synthesizer.truncations) == 2
        assert "did not settle within 8 steps" in caplog.text
