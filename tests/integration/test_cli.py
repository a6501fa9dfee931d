# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Integration tests for the `gramnav` command line."""

from __future__ import annotations

import json

from pathlib import Path

import pytest

from gramnav.cli.app import app


def run_cli(*tokens: str) -> int:
    """Parse and run a command, returning its exit code."""
    try:
        command, bound, _ = app.parse_args(list(tokens), exit_on_error=False)
        command(*bound.args, **bound.kwargs)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 0
    return 0


@pytest.mark.integration
class TestAnalyzeCommand:
    """Tests for `gramnav analyze`."""

    def test_json_output(
        self, graphql_paths: tuple[Path, Path], capsys: pytest.CaptureFixture[str]
    ) -> None:
        grammar, node_types = graphql_paths
        exit_code = run_cli("analyze", str(grammar), str(node_types), "--output-format", "json")

        payload = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert payload["grammar_name"] == "graphql"
        assert payload["root_rule"] == "document"
        assert payload["max_depth"] == 8

    def test_max_depth_option(
        self, graphql_paths: tuple[Path, Path], capsys: pytest.CaptureFixture[str]
    ) -> None:
        grammar, node_types = graphql_paths
        run_cli("analyze", str(grammar), str(node_types), "-o", "json", "-d", "32")

        payload = json.loads(capsys.readouterr().out)
        assert payload["max_depth"] == 32
        assert payload["navigation"]["truncations"] == []

    def test_table_output(
        self, graphql_paths: tuple[Path, Path], capsys: pytest.CaptureFixture[str]
    ) -> None:
        exit_code = run_cli("analyze", *map(str, graphql_paths))

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "graphql" in out
        assert "Semantic Groupings" in out
        assert "selection_set -> selection" in out

    def test_grammar_without_node_types(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        grammar = tmp_path / "grammar.json"
        grammar.write_text(
            json.dumps({
                "name": "tiny",
                "rules": {"source_file": {"type": "SYMBOL", "name": "a"}, "a": {"type": "BLANK"}},
            }),
            encoding="utf-8",
        )
        exit_code = run_cli("analyze", str(grammar), "-o", "json")

        payload = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert payload["child_map"] == {"source_file": ["a"]}
        assert payload["nullable_rules"] == ["a", "source_file"]

    def test_malformed_grammar(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        grammar = tmp_path / "grammar.json"
        grammar.write_text('{"name": "broken", "rules": {"a": {"type": "NOPE"}}}', encoding="utf-8")

        exit_code = run_cli("analyze", str(grammar))

        assert exit_code == 1
        assert "Error:" in capsys.readouterr().out

    def test_missing_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        exit_code = run_cli("analyze", str(tmp_path / "nope.json"))

        assert exit_code == 1
        assert "Could not read" in capsys.readouterr().out

    def test_invalid_log_level(
        self,
        graphql_paths: tuple[Path, Path],
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("GRAMNAV_LOG_LEVEL", "verbose")

        exit_code = run_cli("analyze", *map(str, graphql_paths))

        out = capsys.readouterr().out
        assert exit_code == 1
        assert "Invalid analysis settings" in out
        assert "log_level" in out


@pytest.mark.integration
class TestNavigateCommand:
    """Tests for `gramnav navigate`."""

    def test_known_kind(
        self, graphql_paths: tuple[Path, Path], capsys: pytest.CaptureFixture[str]
    ) -> None:
        exit_code = run_cli("navigate", *map(str, graphql_paths), "field")

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "first child" in out
        assert "child [0]" in out
        assert "alias, name" in out

    def test_unknown_kind(
        self, graphql_paths: tuple[Path, Path], capsys: pytest.CaptureFixture[str]
    ) -> None:
        exit_code = run_cli("navigate", *map(str, graphql_paths), "no_such_kind")

        assert exit_code == 1
        assert "Unknown node kind: no_such_kind" in capsys.readouterr().out
