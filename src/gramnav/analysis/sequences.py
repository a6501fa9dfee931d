# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Ordered member layouts of sequence rules.

For `field := seq(optional($.alias), $.name, optional($.arguments))` the layout is
`alias?`, `name`, `arguments?`: the member kinds in declaration order, each marked optional
or required, with its field name when the member is a field. Literal tokens are skipped.
Accessors by name and by position are built from these layouts.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import Annotated

from pydantic import Field, NonNegativeInt

from gramnav._common import FrozenModel, iter_sorted
from gramnav.grammar.predicates import is_optional_wrapper, optional_content, unwrap_precedence
from gramnav.grammar.rules import (
    BlankRule,
    ChoiceRule,
    FieldRule,
    ImmediateTokenRule,
    PatternRule,
    Rule,
    SeqRule,
    StringRule,
    SymbolRule,
    TokenRule,
)


type KindFilter = Callable[[str], bool]


def _not_hidden(name: str) -> bool:
    return not name.startswith("_")


class SequenceMember(FrozenModel):
    """One child slot of a sequence rule."""

    name: Annotated[str, Field(description="The node kind that fills this slot.")]
    optional: Annotated[bool, Field(description="Whether the slot may be empty.")] = False
    field: Annotated[
        str | None, Field(description="The field name, when the slot is a named field.")
    ] = None
    index: Annotated[
        NonNegativeInt, Field(description="Position of the member in the rule's member list.")
    ]


class SequenceLayout(FrozenModel):
    """The member layout of one sequence rule."""

    rule: str
    members: tuple[SequenceMember, ...] = ()
    positional: Annotated[
        bool,
        Field(
            description="Whether every named child comes from one of `members`, so named-child indices can be resolved from the layout."
        ),
    ] = False

    @property
    def required(self) -> tuple[SequenceMember, ...]:
        return tuple(member for member in self.members if not member.optional)

    def by_field(self, field: str) -> SequenceMember | None:
        """The member filling field `field`, if any."""
        return next((member for member in self.members if member.field == field), None)

    def index_slots(self) -> dict[int, tuple[str, ...]]:
        """Map each named-child index to the kinds that can occupy it.

        A member can sit anywhere between the count of required members before it and the
        count of all members before it. Empty unless the layout is positional.
        """
        if not self.positional:
            return {}
        slots: dict[int, set[str]] = {}
        required_before = 0
        for position, member in enumerate(self.members):
            for index in range(required_before, position + 1):
                slots.setdefault(index, set()).add(member.name)
            if not member.optional:
                required_before += 1
        return {index: iter_sorted(kinds) for index, kinds in sorted(slots.items())}


def sequence_body(rule: Rule) -> SeqRule | None:
    """The SEQ at the top of `rule`, looking through precedence annotations."""
    body = unwrap_precedence(rule)
    return body if isinstance(body, SeqRule) else None


def _member_for(member: Rule, index: int) -> SequenceMember | None:
    match member:
        case SymbolRule(name=name):
            return SequenceMember(name=name, index=index)
        case FieldRule(name=field, content=SymbolRule(name=name)):
            return SequenceMember(name=name, field=field, index=index)
        case ChoiceRule() if is_optional_wrapper(member):
            match optional_content(member):
                case SymbolRule(name=name):
                    return SequenceMember(name=name, optional=True, index=index)
                case FieldRule(name=field, content=SymbolRule(name=name)):
                    return SequenceMember(name=name, optional=True, field=field, index=index)
                case _:
                    return None
        case _:
            return None


def extract_sequence_members(rule: SeqRule) -> tuple[SequenceMember, ...]:
    """The symbol members of a sequence, in declaration order.

    Symbols, fields holding a symbol, and optional wrappers around either produce members.
    Everything else (literal strings included) is skipped.
    """
    return tuple(
        found
        for index, member in enumerate(rule.members)
        if (found := _member_for(member, index)) is not None
    )


def _is_anonymous_member(member: Rule) -> bool:
    match member:
        case StringRule() | PatternRule() | BlankRule() | TokenRule() | ImmediateTokenRule():
            return True
        case FieldRule(content=content):
            # an operator slot such as `field("operator", choice("+", "-"))`
            return _is_anonymous_member(content)
        case ChoiceRule(members=members):
            return bool(members) and all(_is_anonymous_member(option) for option in members)
        case _:
            return False


def _is_fixed_member(member: Rule, is_named: KindFilter) -> bool:
    if _is_anonymous_member(member):
        return True
    if is_optional_wrapper(member) and (inner := optional_content(member)) is not None:
        if _is_anonymous_member(inner):
            return True
        member = inner
    match member:
        case SymbolRule(name=name) | FieldRule(content=SymbolRule(name=name)):
            return is_named(name)
        case _:
            return False


def _iter_layouts(rules: Mapping[str, Rule], is_named: KindFilter) -> Iterator[SequenceLayout]:
    for name in sorted(rules):
        if (body := sequence_body(rules[name])) is None:
            continue
        yield SequenceLayout(
            rule=name,
            members=extract_sequence_members(body),
            positional=all(_is_fixed_member(member, is_named) for member in body.members),
        )


def extract_sequences(
    rules: Mapping[str, Rule], is_named: KindFilter | None = None
) -> dict[str, SequenceLayout]:
    """Layouts for every sequence rule, keyed by rule name in sorted order.

    Args:
        rules: The rule table.
        is_named: Decides whether a kind produces a named node. Hidden (`_`-prefixed) kinds
            are unnamed by default.
    """
    return {layout.rule: layout for layout in _iter_layouts(rules, is_named or _not_hidden)}


__all__ = (
    "SequenceLayout",
    "SequenceMember",
    "extract_sequence_members",
    "extract_sequences",
    "sequence_body",
)
