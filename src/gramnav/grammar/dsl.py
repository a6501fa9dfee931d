# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Builders for writing rule trees in Python, after tree-sitter's `grammar.js` DSL.

```python
from gramnav.grammar.dsl import field, optional, seq, sym

rule = seq(optional(sym("alias")), field("name", sym("name")), "(", ")")
```

Bare strings become `STRING` terminals.
"""

from __future__ import annotations

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


type RuleLike = Rule | str


def _coerce(value: RuleLike) -> Rule:
    return StringRule(value=value) if isinstance(value, str) else value


def blank() -> BlankRule:
    return BlankRule()


def sym(name: str) -> SymbolRule:
    return SymbolRule(name=name)


def string(value: str) -> StringRule:
    return StringRule(value=value)


def pattern(value: str, flags: str | None = None) -> PatternRule:
    return PatternRule(value=value, flags=flags)


def seq(*members: RuleLike) -> SeqRule:
    return SeqRule(members=tuple(_coerce(member) for member in members))


def choice(*members: RuleLike) -> ChoiceRule:
    return ChoiceRule(members=tuple(_coerce(member) for member in members))


def optional(value: RuleLike) -> ChoiceRule:
    """`value` or nothing, encoded as `CHOICE(value, BLANK)` like tree-sitter does."""
    return ChoiceRule(members=(_coerce(value), BlankRule()))


def repeat(value: RuleLike) -> RepeatRule:
    return RepeatRule(content=_coerce(value))


def repeat1(value: RuleLike) -> Repeat1Rule:
    return Repeat1Rule(content=_coerce(value))


def field(name: str, value: RuleLike) -> FieldRule:
    return FieldRule(name=name, content=_coerce(value))


def alias(value: RuleLike, name: str | SymbolRule) -> AliasRule:
    """Rename the node `value` produces.

    Aliasing to a symbol yields a named node; aliasing to a plain string yields an anonymous
    one.
    """
    if isinstance(name, SymbolRule):
        return AliasRule(content=_coerce(value), named=True, value=name.name)
    return AliasRule(content=_coerce(value), named=False, value=name)


def token(value: RuleLike) -> TokenRule:
    return TokenRule(content=_coerce(value))


def immediate_token(value: RuleLike) -> ImmediateTokenRule:
    return ImmediateTokenRule(content=_coerce(value))


def prec(value: int | str, rule: RuleLike) -> PrecRule:
    return PrecRule(value=value, content=_coerce(rule))


def prec_left(value: int | str, rule: RuleLike) -> PrecLeftRule:
    return PrecLeftRule(value=value, content=_coerce(rule))


def prec_right(value: int | str, rule: RuleLike) -> PrecRightRule:
    return PrecRightRule(value=value, content=_coerce(rule))


def prec_dynamic(value: int, rule: RuleLike) -> PrecDynamicRule:
    return PrecDynamicRule(value=value, content=_coerce(rule))


__all__ = (
    "RuleLike",
    "alias",
    "blank",
    "choice",
    "field",
    "immediate_token",
    "optional",
    "pattern",
    "prec",
    "prec_dynamic",
    "prec_left",
    "prec_right",
    "repeat",
    "repeat1",
    "seq",
    "string",
    "sym",
    "token",
)
