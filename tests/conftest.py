# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Global pytest configuration and fixtures for gramnav tests."""

from __future__ import annotations

import os

from collections.abc import Iterator
from pathlib import Path

import pytest

from gramnav.analysis.grammar_analysis import GrammarAnalysis, analyze_grammar
from gramnav.config.settings import AnalysisSettings, get_settings
from gramnav.grammar.document import GrammarDocument
from gramnav.grammar.dsl import choice, optional, repeat1, seq, string, sym


FIXTURES = Path(__file__).parent / "fixtures"


# ===========================================================================
# *                            Settings isolation
# ===========================================================================


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Keep `GRAMNAV_*` variables and `.env` files from leaking into tests."""
    for key in [key for key in os.environ if key.startswith("GRAMNAV_")]:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> AnalysisSettings:
    return AnalysisSettings()


# ===========================================================================
# *                               Grammars
# ===========================================================================


@pytest.fixture
def graphql_paths() -> tuple[Path, Path]:
    """Paths to the GraphQL `grammar.json` and `node-types.json` fixtures."""
    directory = FIXTURES / "graphql"
    return directory / "grammar.json", directory / "node-types.json"


@pytest.fixture
def graphql_document(graphql_paths: tuple[Path, Path]) -> GrammarDocument:
    return GrammarDocument.load(*graphql_paths)


@pytest.fixture
def graphql_analysis(
    graphql_document: GrammarDocument, settings: AnalysisSettings
) -> GrammarAnalysis:
    return analyze_grammar(graphql_document, settings)


@pytest.fixture
def minimal_document() -> GrammarDocument:
    """`source_file := seq(a)`, `a := "x"`, with node types for both kinds."""
    return GrammarDocument.from_parts(
        {
            "name": "minimal",
            "rules": {
                "source_file": {"type": "SEQ", "members": [{"type": "SYMBOL", "name": "a"}]},
                "a": {"type": "STRING", "value": "x"},
            },
        },
        [
            {
                "type": "source_file",
                "named": True,
                "children": {"types": [{"type": "a", "named": True}]},
            },
            {"type": "a", "named": True},
        ],
    )


@pytest.fixture
def selection_document() -> GrammarDocument:
    """A rules-only grammar where selection sets nest through fields."""
    return GrammarDocument(
        name="selections",
        rules={
            "selection_set": seq("{", repeat1(sym("selection")), "}"),
            "selection": choice(sym("field"), sym("fragment_spread")),
            "field": seq(sym("name"), optional(sym("selection_set"))),
            "fragment_spread": seq("...", sym("name")),
            "name": string("n"),
        },
    )
