# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""The closed set of tree-sitter grammar rule variants.

A grammar's rule table maps each rule name to a tree of `Rule` values. The serialized form
is tree-sitter's `grammar.json`: every rule is an object tagged by its `type` key, so the
variants form a pydantic discriminated union on that tag.

| `type` | Shape | Meaning |
|---|---|---|
| `ALIAS` | `content`, `named`, `value` | Renames the node produced by `content` |
| `BLANK` | | Matches empty input |
| `CHOICE` | `members` | Ordered alternatives |
| `FIELD` | `name`, `content` | Names a child slot |
| `IMMEDIATE_TOKEN` / `TOKEN` | `content` | Atomic lexical unit |
| `PATTERN` | `value` | Regular expression terminal |
| `PREC` / `PREC_LEFT` / `PREC_RIGHT` / `PREC_DYNAMIC` | `value`, `content` | Precedence annotation (structurally transparent) |
| `REPEAT` / `REPEAT1` | `content` | Zero-or-more / one-or-more |
| `SEQ` | `members` | Ordered sequence |
| `STRING` | `value` | Literal terminal |
| `SYMBOL` | `name` | Reference to another rule |

Code that dispatches on rules matches on the variant classes and ends in
`typing.assert_never`, so adding a variant here is flagged everywhere it must be handled.
"""

from __future__ import annotations

from typing import Annotated, Any, ClassVar, Literal

from pydantic import ConfigDict, Field, TypeAdapter

from gramnav._common import BaseEnum, FrozenModel


class RuleType(BaseEnum):
    """The `type` tag of each rule variant."""

    ALIAS = "ALIAS"
    BLANK = "BLANK"
    CHOICE = "CHOICE"
    FIELD = "FIELD"
    IMMEDIATE_TOKEN = "IMMEDIATE_TOKEN"
    PATTERN = "PATTERN"
    PREC = "PREC"
    PREC_DYNAMIC = "PREC_DYNAMIC"
    PREC_LEFT = "PREC_LEFT"
    PREC_RIGHT = "PREC_RIGHT"
    REPEAT = "REPEAT"
    REPEAT1 = "REPEAT1"
    SEQ = "SEQ"
    STRING = "STRING"
    SYMBOL = "SYMBOL"
    TOKEN = "TOKEN"


class _RuleBase(FrozenModel):
    """Shared configuration for rule variants."""

    model_config = FrozenModel.model_config | ConfigDict(extra="ignore")

    _rule_type: ClassVar[RuleType]

    @property
    def rule_type(self) -> RuleType:
        """The variant tag as a `RuleType`."""
        return self._rule_type


class AliasRule(_RuleBase):
    """Gives the node produced by `content` another name."""

    type: Literal["ALIAS"] = "ALIAS"
    content: Rule
    named: bool
    value: str

    _rule_type: ClassVar[RuleType] = RuleType.ALIAS


class BlankRule(_RuleBase):
    """Matches the empty input."""

    type: Literal["BLANK"] = "BLANK"

    _rule_type: ClassVar[RuleType] = RuleType.BLANK


class ChoiceRule(_RuleBase):
    """Ordered alternatives."""

    type: Literal["CHOICE"] = "CHOICE"
    members: tuple[Rule, ...]

    _rule_type: ClassVar[RuleType] = RuleType.CHOICE


class FieldRule(_RuleBase):
    """Names the child slot filled by `content`."""

    type: Literal["FIELD"] = "FIELD"
    name: str
    content: Rule

    _rule_type: ClassVar[RuleType] = RuleType.FIELD


class ImmediateTokenRule(_RuleBase):
    """A token that must follow the previous token without intervening extras."""

    type: Literal["IMMEDIATE_TOKEN"] = "IMMEDIATE_TOKEN"
    content: Rule

    _rule_type: ClassVar[RuleType] = RuleType.IMMEDIATE_TOKEN


class PatternRule(_RuleBase):
    """A regular expression terminal."""

    type: Literal["PATTERN"] = "PATTERN"
    value: str
    flags: str | None = None

    _rule_type: ClassVar[RuleType] = RuleType.PATTERN


class PrecRule(_RuleBase):
    """Plain precedence annotation."""

    type: Literal["PREC"] = "PREC"
    value: int | str
    content: Rule

    _rule_type: ClassVar[RuleType] = RuleType.PREC


class PrecDynamicRule(_RuleBase):
    """Dynamic (runtime conflict resolution) precedence annotation."""

    type: Literal["PREC_DYNAMIC"] = "PREC_DYNAMIC"
    value: int
    content: Rule

    _rule_type: ClassVar[RuleType] = RuleType.PREC_DYNAMIC


class PrecLeftRule(_RuleBase):
    """Left-associative precedence annotation."""

    type: Literal["PREC_LEFT"] = "PREC_LEFT"
    value: int | str
    content: Rule

    _rule_type: ClassVar[RuleType] = RuleType.PREC_LEFT


class PrecRightRule(_RuleBase):
    """Right-associative precedence annotation."""

    type: Literal["PREC_RIGHT"] = "PREC_RIGHT"
    value: int | str
    content: Rule

    _rule_type: ClassVar[RuleType] = RuleType.PREC_RIGHT


class RepeatRule(_RuleBase):
    """Zero or more repetitions of `content`."""

    type: Literal["REPEAT"] = "REPEAT"
    content: Rule

    _rule_type: ClassVar[RuleType] = RuleType.REPEAT


class Repeat1Rule(_RuleBase):
    """One or more repetitions of `content`."""

    type: Literal["REPEAT1"] = "REPEAT1"
    content: Rule

    _rule_type: ClassVar[RuleType] = RuleType.REPEAT1


class SeqRule(_RuleBase):
    """An ordered sequence of members."""

    type: Literal["SEQ"] = "SEQ"
    members: tuple[Rule, ...]

    _rule_type: ClassVar[RuleType] = RuleType.SEQ


class StringRule(_RuleBase):
    """A literal terminal."""

    type: Literal["STRING"] = "STRING"
    value: str

    _rule_type: ClassVar[RuleType] = RuleType.STRING


class SymbolRule(_RuleBase):
    """A reference to another rule by name."""

    type: Literal["SYMBOL"] = "SYMBOL"
    name: str

    _rule_type: ClassVar[RuleType] = RuleType.SYMBOL


class TokenRule(_RuleBase):
    """Collapses `content` into a single lexical token."""

    type: Literal["TOKEN"] = "TOKEN"
    content: Rule

    _rule_type: ClassVar[RuleType] = RuleType.TOKEN


Rule = Annotated[
    AliasRule
    | BlankRule
    | ChoiceRule
    | FieldRule
    | ImmediateTokenRule
    | PatternRule
    | PrecRule
    | PrecDynamicRule
    | PrecLeftRule
    | PrecRightRule
    | RepeatRule
    | Repeat1Rule
    | SeqRule
    | StringRule
    | SymbolRule
    | TokenRule,
    Field(discriminator="type"),
]
"""Any rule variant, discriminated on its `type` tag."""

type ContentRule = (
    AliasRule
    | FieldRule
    | ImmediateTokenRule
    | PrecRule
    | PrecDynamicRule
    | PrecLeftRule
    | PrecRightRule
    | RepeatRule
    | Repeat1Rule
    | TokenRule
)

type MembersRule = ChoiceRule | SeqRule

type PrecedenceRule = PrecRule | PrecDynamicRule | PrecLeftRule | PrecRightRule

RULE_VARIANTS: tuple[type[_RuleBase], ...] = (
    AliasRule,
    BlankRule,
    ChoiceRule,
    FieldRule,
    ImmediateTokenRule,
    PatternRule,
    PrecRule,
    PrecDynamicRule,
    PrecLeftRule,
    PrecRightRule,
    RepeatRule,
    Repeat1Rule,
    SeqRule,
    StringRule,
    SymbolRule,
    TokenRule,
)

for _variant in RULE_VARIANTS:
    _variant.model_rebuild()

_rule_adapter: TypeAdapter[Rule] = TypeAdapter(Rule)


def parse_rule(data: Any) -> Rule:
    """Validate a serialized rule (a `grammar.json` rule object) into a `Rule`.

    Raises:
        pydantic.ValidationError: If `data` is not a well-formed rule.
    """
    return _rule_adapter.validate_python(data)


def dump_rule(rule: Rule) -> dict[str, Any]:
    """Serialize a rule back to its `grammar.json` form."""
    return _rule_adapter.dump_python(rule, mode="json", exclude_none=True)


__all__ = (
    "RULE_VARIANTS",
    "AliasRule",
    "BlankRule",
    "ChoiceRule",
    "ContentRule",
    "FieldRule",
    "ImmediateTokenRule",
    "MembersRule",
    "PatternRule",
    "PrecDynamicRule",
    "PrecLeftRule",
    "PrecRightRule",
    "PrecRule",
    "PrecedenceRule",
    "Repeat1Rule",
    "RepeatRule",
    "Rule",
    "RuleType",
    "SeqRule",
    "StringRule",
    "SymbolRule",
    "TokenRule",
    "dump_rule",
    "parse_rule",
)
