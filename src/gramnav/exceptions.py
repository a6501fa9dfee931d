# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Unified exception hierarchy for gramnav.

All gramnav exceptions inherit from `GramnavError`. Structural findings about a grammar
(nullable rules, cycles, depth truncation) are reported data and never raised.
"""

from __future__ import annotations

from typing import Any


class GramnavError(Exception):
    """Base exception for all gramnav errors.

    Provides structured error information including details and suggestions
    for resolution.
    """

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
        suggestions: list[str] | None = None,
    ) -> None:
        """Initialize a gramnav error.

        Args:
            message: Human-readable error message
            details: Additional context about the error
            suggestions: Actionable suggestions for resolving the error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.suggestions = suggestions or []

    def __str__(self) -> str:
        """Return descriptive error message with context details."""
        parts = [self.message]
        if self.details:
            detail_parts = [
                f"{key.replace('_', ' ')}: {self.details[key]}"
                for key in ("grammar", "rule", "symbol", "path", "exit_code")
                if key in self.details
            ]
            if detail_parts:
                parts.append(f"({', '.join(detail_parts)})")
        return " ".join(parts)


class MalformedGrammarError(GramnavError):
    """The rule table or node-type list could not be read into the grammar model.

    Raised before any analysis runs; no partial results are produced.
    """


class UnresolvedReferenceError(GramnavError):
    """A `SYMBOL` rule names a rule that is not in the grammar's rule table."""


class NoRootRuleError(GramnavError):
    """The grammar has no rule that could serve as its root."""


class GrammarCompilationError(GramnavError):
    """The external grammar compiler failed or could not be found."""


class ConfigurationError(GramnavError):
    """Invalid analysis settings."""


__all__ = (
    "ConfigurationError",
    "GrammarCompilationError",
    "GramnavError",
    "MalformedGrammarError",
    "NoRootRuleError",
    "UnresolvedReferenceError",
)
