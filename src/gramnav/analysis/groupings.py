# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Detect semantic groupings: CHOICE rules whose every branch names another rule.

In a GraphQL grammar, `value` is a choice between `variable`, `string_value`, `int_value` and
six more kinds. Downstream code turns such a rule into a named union ("any value").
"""

from __future__ import annotations

from collections.abc import Mapping

from gramnav.grammar.predicates import symbol_member_names
from gramnav.grammar.rules import ChoiceRule, Rule, SymbolRule


def grouping_members(rule: Rule) -> tuple[str, ...] | None:
    """The member kinds of `rule` if it is a grouping, else None.

    A CHOICE of a single symbol is a plain alias, not a grouping.
    """
    if not isinstance(rule, ChoiceRule) or len(rule.members) < 2:
        return None
    if not all(isinstance(member, SymbolRule) for member in rule.members):
        return None
    return symbol_member_names(rule)


def find_semantic_groupings(rules: Mapping[str, Rule]) -> dict[str, tuple[str, ...]]:
    """Grouping rule name (sorted) to its member kinds in declaration order."""
    return {
        name: members
        for name in sorted(rules)
        if (members := grouping_members(rules[name])) is not None
    }


def analyze_choice_rules(rules: Mapping[str, Rule]) -> dict[str, tuple[str, ...]]:
    """Every CHOICE rule with at least one SYMBOL branch, mapped to those branch names."""
    return {
        name: members
        for name in sorted(rules)
        if isinstance(rule := rules[name], ChoiceRule) and (members := symbol_member_names(rule))
    }


__all__ = ("analyze_choice_rules", "find_semantic_groupings", "grouping_members")
