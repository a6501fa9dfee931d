# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""gramnav: derive AST navigation data from tree-sitter grammars."""

from gramnav._version import __version__
from gramnav.analysis.grammar_analysis import GrammarAnalysis, analyze_grammar, analyze_grammars
from gramnav.exceptions import (
    ConfigurationError,
    GrammarCompilationError,
    GramnavError,
    MalformedGrammarError,
    NoRootRuleError,
    UnresolvedReferenceError,
)
from gramnav.grammar.document import GrammarDocument


__all__ = (
    "ConfigurationError",
    "GrammarAnalysis",
    "GrammarCompilationError",
    "GrammarDocument",
    "GramnavError",
    "MalformedGrammarError",
    "NoRootRuleError",
    "UnresolvedReferenceError",
    "__version__",
    "analyze_grammar",
    "analyze_grammars",
)
