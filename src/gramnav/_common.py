# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Foundational model and enum classes shared across gramnav."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum, unique
from typing import Any, Self, cast

import textcase

from pydantic import BaseModel, ConfigDict
from pydantic.fields import ComputedFieldInfo, FieldInfo


def _generate_title(model: type[Any]) -> str:
    """Generate a title for a model."""
    model_name = model.__name__ if hasattr(model, "__name__") else str(model)
    return textcase.title(model_name.replace("Model", ""))


def _generate_field_title(name: str, info: FieldInfo | ComputedFieldInfo) -> str:
    """Generate a title for a model field."""
    if titled := info.title:
        return titled
    if aliased := info.alias:
        return textcase.sentence(aliased)
    return textcase.sentence(name)


class BasedModel(BaseModel):
    """A baser `BaseModel` for all models in gramnav.

    Whitespace is never stripped: grammar literals such as `" "` are significant.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        cache_strings="all",
        field_title_generator=_generate_field_title,
        model_title_generator=_generate_title,
        serialize_by_alias=True,
        use_attribute_docstrings=True,
        validate_by_alias=True,
        validate_by_name=True,
    )


class FrozenModel(BasedModel):
    """An immutable `BasedModel`."""

    model_config = BasedModel.model_config | ConfigDict(frozen=True)


@unique
class BaseEnum(Enum):
    """An enum class that provides common functionality for all enums in gramnav.

    Members must be unique and either all strings or all integers. `from_string` accepts the
    member value or name in any common case style (`first_child`, `first-child`, `FirstChild`).
    """

    @staticmethod
    def _deconstruct_string(value: str) -> list[str]:
        """Deconstruct a string into its component parts."""
        value = textcase.snake(value.strip())
        return [v for v in value.split("_") if v]

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Convert a string to the corresponding enum member."""
        if cls._value_type() is int and str(value).isdigit():
            return cls(int(value))
        if literal_value := next(
            (
                member
                for member in cls
                if str(member.value).lower() == str(value).lower()
                or member.name.lower() == str(value).lower()
            ),
            None,
        ):
            return cast(Self, literal_value)
        value_parts = cls._deconstruct_string(str(value))
        if found_member := next(
            (
                member
                for member in cls
                if cls._deconstruct_string(member.name) == value_parts
                or cls._deconstruct_string(str(member.value)) == value_parts
            ),
            None,
        ):
            return found_member
        raise ValueError(f"{value} is not a valid {cls.__qualname__} member")

    @classmethod
    def _value_type(cls) -> type[int | str]:
        """Return the type of the enum values."""
        if all(isinstance(member.value, str) for member in cls.__members__.values()):
            return str
        if all(isinstance(member.value, int) for member in cls.__members__.values()):
            return int
        raise TypeError(
            f"All members of {cls.__qualname__} must have the same value type and must be either str or int."
        )


def iter_sorted(values: Iterable[str]) -> tuple[str, ...]:
    """Materialize a collection of names as a sorted, de-duplicated tuple."""
    return tuple(sorted(set(values)))


__all__ = ("BaseEnum", "BasedModel", "FrozenModel", "iter_sorted")
