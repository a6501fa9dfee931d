# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""
Analysis settings.

Configuration sources (priority order):
1. Explicit keyword arguments
2. Environment variables
3. Defaults

Environment Variables:
    GRAMNAV_MAX_DEPTH: Cap for transitive navigation expansion (default: 8)
    GRAMNAV_PROFILE_DEPTH_LIMIT: Recursion cap for the depth profiler (default: 64)
    GRAMNAV_ROOT_RULE_CANDIDATES: JSON list of conventional root rule names
    GRAMNAV_STRICT_REFERENCES: Fail on unresolved symbols before analysis (default: false)
    GRAMNAV_LOG_LEVEL: Log level for the gramnav logger (default: WARNING)
"""

from __future__ import annotations

from functools import cache
from typing import Annotated, Any

from pydantic import Field, PositiveInt, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gramnav.common.logging import resolve_level
from gramnav.exceptions import ConfigurationError


DEFAULT_MAX_DEPTH = 8

DEFAULT_ROOT_RULE_CANDIDATES = ("source_file", "program", "document")


class AnalysisSettings(BaseSettings):
    """Settings that tune a grammar analysis run."""

    model_config = SettingsConfigDict(
        env_prefix="GRAMNAV_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    max_depth: Annotated[
        PositiveInt,
        Field(
            default=DEFAULT_MAX_DEPTH,
            description="Maximum number of navigation steps expanded transitively before a result is reported as unresolved.",
        ),
    ]

    profile_depth_limit: Annotated[
        PositiveInt,
        Field(
            default=64,
            description="Recursion cap for the depth/fan-out profiler. Profiles that hit it are flagged as truncated.",
        ),
    ]

    root_rule_candidates: Annotated[
        tuple[str, ...],
        Field(
            default=DEFAULT_ROOT_RULE_CANDIDATES,
            description="Conventional root rule names, tried in order before falling back to the first declared rule.",
        ),
    ]

    strict_references: Annotated[
        bool,
        Field(
            default=False,
            description="Check that every SYMBOL resolves in the rule table before analyzing.",
        ),
    ]

    log_level: Annotated[
        str, Field(default="WARNING", description="Log level for the `gramnav` logger.")
    ]

    @field_validator("root_rule_candidates", mode="after")
    @classmethod
    def _validate_candidates(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if any(not name.strip() for name in value):
            raise ValueError("Root rule candidates must be non-empty names")
        return value

    @field_validator("log_level", mode="after")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        resolve_level(value)
        return value.strip().upper()


def make_settings(**overrides: Any) -> AnalysisSettings:
    """Build settings, wrapping validation failures in `ConfigurationError`."""
    try:
        return AnalysisSettings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid analysis settings",
            details={"errors": e.errors(include_url=False)},
            suggestions=[
                "max_depth and profile_depth_limit must be positive integers",
                "log_level must be a standard level name such as DEBUG, INFO or WARNING",
            ],
        ) from e


@cache
def get_settings() -> AnalysisSettings:
    """Get cached analysis settings built from the environment."""
    return make_settings()


__all__ = (
    "DEFAULT_MAX_DEPTH",
    "DEFAULT_ROOT_RULE_CANDIDATES",
    "AnalysisSettings",
    "get_settings",
    "make_settings",
)
