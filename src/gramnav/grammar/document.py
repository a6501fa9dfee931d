# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""The grammar document: a rule table plus the node types the compiled grammar produces.

A `GrammarDocument` is the single input of an analysis pass. It is read from the two files
`tree-sitter generate` writes (`src/grammar.json` and `src/node-types.json`), from their raw
bytes, or from already-parsed objects. Anything that does not fit the rule and node-type
shapes is rejected here with `MalformedGrammarError`, before any analysis runs.
"""

from __future__ import annotations

import logging

from collections.abc import Iterable, Mapping, Sequence
from functools import cached_property
from pathlib import Path
from typing import Annotated, Any

from pydantic import ConfigDict, Field, ValidationError
from pydantic_core import from_json

from gramnav._common import FrozenModel, iter_sorted
from gramnav.config.settings import DEFAULT_ROOT_RULE_CANDIDATES
from gramnav.exceptions import MalformedGrammarError, NoRootRuleError, UnresolvedReferenceError
from gramnav.grammar.node_types import NodeType
from gramnav.grammar.predicates import iter_rule_tree
from gramnav.grammar.rules import Rule, SymbolRule


logger = logging.getLogger(__name__)


class GrammarDocument(FrozenModel):
    """An immutable tree-sitter grammar: its rule table and node-type metadata."""

    model_config = FrozenModel.model_config | ConfigDict(extra="ignore")

    name: Annotated[str, Field(description="The grammar's name, e.g. `graphql`.")]
    rules: Annotated[
        dict[str, Rule],
        Field(description="Rule name to rule body, in declaration order."),
    ]
    node_types: Annotated[
        tuple[NodeType, ...],
        Field(description="One entry per node kind the compiled grammar can produce."),
    ] = ()

    # Carried from grammar.json but not analyzed.
    extras: tuple[Rule, ...] = ()
    externals: tuple[Rule, ...] = ()
    supertypes: tuple[str, ...] = ()
    inline: tuple[str, ...] = ()
    conflicts: tuple[tuple[str, ...], ...] = ()
    word: str | None = None

    @classmethod
    def from_parts(
        cls, grammar: Mapping[str, Any], node_types: Sequence[Any] | None = None
    ) -> GrammarDocument:
        """Build a document from a parsed `grammar.json` object and `node-types.json` list.

        Raises:
            MalformedGrammarError: If either part does not have the expected shape.
        """
        if not isinstance(grammar, Mapping):
            raise MalformedGrammarError(
                "Grammar document must be a JSON object",
                details={"received": type(grammar).__name__},
            )
        data = dict(grammar)
        if node_types is not None:
            data["node_types"] = node_types
        try:
            document = cls.model_validate(data)
        except ValidationError as e:
            raise MalformedGrammarError(
                "Grammar document does not match the rule/node-type shapes",
                details={
                    "grammar": grammar.get("name", "<unnamed>"),
                    "errors": e.errors(include_url=False, include_input=False),
                },
                suggestions=[
                    "Check that grammar.json and node-types.json come from `tree-sitter generate`",
                    "Every rule object needs a known `type` tag and its required keys",
                ],
            ) from e
        logger.debug(
            "Loaded grammar %s: %d rules, %d node types",
            document.name,
            len(document.rules),
            len(document.node_types),
        )
        return document

    @classmethod
    def from_json(
        cls, grammar_json: bytes | str, node_types_json: bytes | str | None = None
    ) -> GrammarDocument:
        """Build a document from raw `grammar.json` and `node-types.json` content.

        Raises:
            MalformedGrammarError: If either document is not valid JSON or has the wrong shape.
        """
        try:
            grammar = from_json(grammar_json)
            node_types = from_json(node_types_json) if node_types_json is not None else None
        except ValueError as e:
            raise MalformedGrammarError(
                "Grammar input is not valid JSON", details={"error": str(e)}
            ) from e
        if node_types is not None and not isinstance(node_types, list):
            raise MalformedGrammarError(
                "node-types document must be a JSON list",
                details={"received": type(node_types).__name__},
            )
        return cls.from_parts(grammar, node_types)

    @classmethod
    def load(
        cls, grammar_path: str | Path, node_types_path: str | Path | None = None
    ) -> GrammarDocument:
        """Read a document from `grammar.json` and (optionally) `node-types.json` files.

        Raises:
            MalformedGrammarError: If a file cannot be read or its content is malformed.
        """
        paths = [Path(grammar_path)]
        if node_types_path is not None:
            paths.append(Path(node_types_path))
        contents: list[bytes] = []
        for path in paths:
            try:
                contents.append(path.read_bytes())
            except OSError as e:
                raise MalformedGrammarError(
                    f"Could not read {path.name}",
                    details={"path": str(path), "error": str(e)},
                    suggestions=["Run `tree-sitter generate` to produce src/grammar.json"],
                ) from e
        return cls.from_json(*contents)

    @property
    def rule_names(self) -> tuple[str, ...]:
        """Every rule name, sorted."""
        return iter_sorted(self.rules)

    @cached_property
    def node_type_map(self) -> dict[str, NodeType]:
        """Node types by kind name, sorted by name.

        When a name is declared both named and anonymous (a keyword that is also a rule, say),
        the named entry wins.
        """
        found: dict[str, NodeType] = {}
        for node_type in self.node_types:
            if node_type.type not in found or node_type.named:
                found[node_type.type] = node_type
        return dict(sorted(found.items()))

    def is_named_kind(self, kind: str) -> bool:
        """Whether `kind` produces a named node.

        Node-type metadata decides when present; otherwise rules whose names start with `_`
        are hidden, as tree-sitter does.
        """
        if (node_type := self.node_type_map.get(kind)) is not None:
            return node_type.named
        return not kind.startswith("_")

    @cached_property
    def named_kinds(self) -> tuple[str, ...]:
        """Sorted names of every named node kind, from node types and visible rules.

        Named kinds that node types only mention as a child, field or subtype count too.
        """
        declared = (node_type.type for node_type in self.node_types if node_type.named)
        referenced = (
            ref.type
            for node_type in self.node_types
            for ref in (*node_type.iter_child_refs(), *(node_type.subtypes or ()))
            if ref.named
        )
        visible = (name for name in self.rules if self.is_named_kind(name))
        return iter_sorted((*declared, *referenced, *visible))

    @cached_property
    def anonymous_kinds(self) -> tuple[str, ...]:
        """Sorted names of every anonymous (literal token) node kind."""
        return iter_sorted(
            node_type.type
            for node_type in self.node_types
            if not node_type.named and node_type.type not in self.named_kinds
        )

    def root_rule_name(self, candidates: Iterable[str] = DEFAULT_ROOT_RULE_CANDIDATES) -> str:
        """Find the grammar's root rule.

        Conventional root names are tried in order, then the first declared rule.

        Raises:
            NoRootRuleError: If the rule table is empty.
        """
        for candidate in candidates:
            if candidate in self.rules:
                return candidate
        if first := next(iter(self.rules), None):
            return first
        raise NoRootRuleError(
            "Grammar has no rules",
            details={"grammar": self.name},
            suggestions=["Define at least one rule in the grammar's `rules` table"],
        )

    def unresolved_references(self) -> dict[str, tuple[str, ...]]:
        """Map each rule to the SYMBOL names in its body that are missing from the rule table.

        Symbols declared as `externals` count as resolved. Only rules with missing references
        appear, in sorted order.
        """
        known = set(self.rules)
        known.update(rule.name for rule in self.externals if isinstance(rule, SymbolRule))
        missing: dict[str, tuple[str, ...]] = {}
        for name in self.rule_names:
            unresolved = iter_sorted(
                node.name
                for node in iter_rule_tree(self.rules[name])
                if isinstance(node, SymbolRule) and node.name not in known
            )
            if unresolved:
                missing[name] = unresolved
        return missing

    def check_references(self) -> None:
        """Verify every SYMBOL resolves in the rule table.

        Raises:
            UnresolvedReferenceError: Naming the first rule (by name) with a dangling symbol.
        """
        if not (missing := self.unresolved_references()):
            return
        rule, symbols = next(iter(missing.items()))
        raise UnresolvedReferenceError(
            f"Rule references undefined symbol {symbols[0]!r}",
            details={
                "grammar": self.name,
                "rule": rule,
                "symbol": symbols[0],
                "unresolved": missing,
            },
            suggestions=["Define the missing rule or declare it in `externals`"],
        )


__all__ = ("GrammarDocument",)
