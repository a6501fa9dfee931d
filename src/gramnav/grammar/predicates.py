# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Shape tests and small extractions over `Rule` values.

All functions are pure. Malformed rules are rejected when the grammar document is built, so
nothing here raises.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TypeGuard, assert_never

from gramnav.grammar.rules import (
    AliasRule,
    BlankRule,
    ChoiceRule,
    ContentRule,
    FieldRule,
    ImmediateTokenRule,
    MembersRule,
    PatternRule,
    PrecDynamicRule,
    PrecedenceRule,
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


def has_members(rule: Rule) -> TypeGuard[MembersRule]:
    """Check if a rule has members (CHOICE or SEQ)."""
    return isinstance(rule, ChoiceRule | SeqRule)


def has_content(rule: Rule) -> TypeGuard[ContentRule]:
    """Check if a rule wraps a single `content` rule."""
    return isinstance(
        rule,
        AliasRule
        | FieldRule
        | ImmediateTokenRule
        | PrecRule
        | PrecDynamicRule
        | PrecLeftRule
        | PrecRightRule
        | RepeatRule
        | Repeat1Rule
        | TokenRule,
    )


def is_precedence(rule: Rule) -> TypeGuard[PrecedenceRule]:
    """Check if a rule is any precedence annotation."""
    return isinstance(rule, PrecRule | PrecDynamicRule | PrecLeftRule | PrecRightRule)


def is_terminal(rule: Rule) -> TypeGuard[StringRule | PatternRule]:
    """Check if a rule is a STRING or PATTERN terminal."""
    return isinstance(rule, StringRule | PatternRule)


def is_simple_alias(rule: Rule) -> TypeGuard[SymbolRule]:
    """Check if a rule just references another rule."""
    return isinstance(rule, SymbolRule)


def is_optional_wrapper(rule: Rule) -> TypeGuard[ChoiceRule]:
    """Check if a rule is optional content: a CHOICE of exactly two members, one of them BLANK."""
    if not isinstance(rule, ChoiceRule):
        return False
    return len(rule.members) == 2 and any(isinstance(m, BlankRule) for m in rule.members)


def optional_content(rule: Rule) -> Rule | None:
    """Get the non-blank member of an optional wrapper, or None if `rule` is not one."""
    if not is_optional_wrapper(rule):
        return None
    return next((member for member in rule.members if not isinstance(member, BlankRule)), None)


def symbol_members(rule: ChoiceRule) -> tuple[SymbolRule, ...]:
    """Get all SYMBOL members of a CHOICE rule."""
    return tuple(member for member in rule.members if isinstance(member, SymbolRule))


def symbol_member_names(rule: ChoiceRule) -> tuple[str, ...]:
    """Get the names of all SYMBOL members of a CHOICE rule."""
    return tuple(member.name for member in symbol_members(rule))


def unwrap_precedence(rule: Rule) -> Rule:
    """Strip any precedence annotations around a rule."""
    while is_precedence(rule):
        rule = rule.content
    return rule


def sub_rules(rule: Rule) -> tuple[Rule, ...]:
    """Get the immediate sub-rules of a rule."""
    match rule:
        case ChoiceRule() | SeqRule():
            return rule.members
        case (
            AliasRule()
            | FieldRule()
            | ImmediateTokenRule()
            | PrecRule()
            | PrecDynamicRule()
            | PrecLeftRule()
            | PrecRightRule()
            | RepeatRule()
            | Repeat1Rule()
            | TokenRule()
        ):
            return (rule.content,)
        case BlankRule() | PatternRule() | StringRule() | SymbolRule():
            return ()
        case _:
            assert_never(rule)


def iter_rule_tree(rule: Rule) -> Iterator[Rule]:
    """Yield `rule` and every rule nested inside it, depth first, in declaration order."""
    stack = [rule]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(sub_rules(current)))


__all__ = (
    "has_content",
    "has_members",
    "is_optional_wrapper",
    "is_precedence",
    "is_simple_alias",
    "is_terminal",
    "iter_rule_tree",
    "optional_content",
    "sub_rules",
    "symbol_member_names",
    "symbol_members",
    "unwrap_precedence",
)
