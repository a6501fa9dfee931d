# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Find the rules that can match empty input.

The nullable set is computed as a least fixpoint: every pass re-tests the rules not yet known
to be nullable against the set found so far, until a pass adds nothing. The result does not
depend on rule order, and rules that are nullable only through each other are found.
A rule that could only derive empty through an endless chain of references is not nullable.
"""

from __future__ import annotations

import logging

from collections.abc import Container, Mapping
from typing import assert_never

from gramnav._common import iter_sorted
from gramnav.grammar.rules import (
    AliasRule,
    BlankRule,
    ChoiceRule,
    FieldRule,
    ImmediateTokenRule,
    PatternRule,
    PrecDynamicRule,
    PrecLeftRule,
    PrecRightRule,
    PrecRule,
    Repeat1Rule,
    RepeatRule,
    Rule,
    SeqRule,
    StringRule,
    SymbolRule,
    TokenRule,
)


logger = logging.getLogger(__name__)


def derives_empty(rule: Rule, nullable: Container[str]) -> bool:
    """Whether `rule` can match empty input, given the names already known to be nullable.

    SYMBOLs are nullable only if their name is in `nullable`, so an unresolved symbol never is.
    """
    match rule:
        case BlankRule() | RepeatRule():
            return True
        case StringRule() | PatternRule():
            return False
        case SymbolRule(name=name):
            return name in nullable
        case ChoiceRule(members=members):
            return any(derives_empty(member, nullable) for member in members)
        case SeqRule(members=members):
            return all(derives_empty(member, nullable) for member in members)
        case (
            AliasRule()
            | FieldRule()
            | ImmediateTokenRule()
            | PrecRule()
            | PrecDynamicRule()
            | PrecLeftRule()
            | PrecRightRule()
            | Repeat1Rule()
            | TokenRule()
        ):
            return derives_empty(rule.content, nullable)
        case _:
            assert_never(rule)


def find_nullable_rules(rules: Mapping[str, Rule]) -> tuple[str, ...]:
    """Sorted names of every rule that can match empty input."""
    nullable: set[str] = set()
    passes = 0
    changed = True
    while changed:
        passes += 1
        changed = False
        for name, rule in rules.items():
            if name not in nullable and derives_empty(rule, nullable):
                nullable.add(name)
                changed = True
    logger.debug("Nullability settled after %d passes: %d nullable rules", passes, len(nullable))
    return iter_sorted(nullable)


__all__ = ("derives_empty", "find_nullable_rules")
