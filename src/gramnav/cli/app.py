# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""The `gramnav` command line: analyze a generated grammar and inspect its navigation data."""

from __future__ import annotations

import sys

from pathlib import Path
from typing import Annotated, NoReturn

import cyclopts

from cyclopts import App, Parameter
from rich.console import Console
from rich.table import Table

from gramnav import __version__
from gramnav._common import BaseEnum
from gramnav.analysis.grammar_analysis import GrammarAnalysis, analyze_grammar
from gramnav.common.logging import setup_logger
from gramnav.config.settings import get_settings, make_settings
from gramnav.exceptions import GramnavError
from gramnav.grammar.document import GrammarDocument


console = Console(markup=True, emoji=False)
app = App(
    "gramnav",
    help="Derive AST navigation data from tree-sitter grammars.",
    default_parameter=Parameter(negative=()),
    version=__version__,
    console=console,
)


class OutputFormat(BaseEnum):
    """How `analyze` prints its result."""

    TABLE = "table"
    JSON = "json"


def _fail(error: GramnavError) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {error}")
    for suggestion in error.suggestions:
        console.print(f"  [dim]•[/dim] {suggestion}")
    sys.exit(1)


def _run_analysis(
    grammar: Path, node_types: Path | None, max_depth: int | None
) -> GrammarAnalysis:
    settings = get_settings() if max_depth is None else make_settings(max_depth=max_depth)
    setup_logger(level=settings.log_level)
    document = GrammarDocument.load(grammar, node_types)
    return analyze_grammar(document, settings)


def _format_kinds(kinds: tuple[str, ...] | None) -> str:
    return ", ".join(kinds) if kinds else "[dim]none[/dim]"


def _summary_table(analysis: GrammarAnalysis) -> Table:
    table = Table(
        show_header=True, header_style="bold blue", title=f"Grammar: {analysis.grammar_name}"
    )
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    for key, value in analysis.summary().items():
        table.add_row(key.replace("_", " ").title(), str(value))
    return table


def _groupings_table(analysis: GrammarAnalysis) -> Table:
    table = Table(show_header=True, header_style="bold blue", title="Semantic Groupings")
    table.add_column("Grouping", style="cyan", no_wrap=True)
    table.add_column("Members", style="white")
    for name, members in analysis.semantic_groupings.items():
        table.add_row(name, ", ".join(members))
    return table


@app.command
def analyze(
    grammar: Annotated[Path, cyclopts.Parameter(help="Path to src/grammar.json")],
    node_types: Annotated[
        Path | None, cyclopts.Parameter(help="Path to src/node-types.json")
    ] = None,
    *,
    max_depth: Annotated[
        int | None,
        cyclopts.Parameter(
            name=["--max-depth", "-d"], help="Cap for transitive navigation (default: 8)"
        ),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        cyclopts.Parameter(name=["--output-format", "-o"], help="table or json"),
    ] = OutputFormat.TABLE,
) -> None:
    """Analyze a grammar and print a summary, or the full analysis as JSON."""
    try:
        analysis = _run_analysis(grammar, node_types, max_depth)
    except GramnavError as e:
        _fail(e)
    if output_format is OutputFormat.JSON:
        # plain print so rich does not wrap or highlight the payload
        print(analysis.model_dump_json(indent=2))
        return
    console.print(_summary_table(analysis))
    if analysis.semantic_groupings:
        console.print(_groupings_table(analysis))
    if analysis.cycles:
        console.print("[bold]Cycles[/bold]")
        for cycle in analysis.cycles:
            console.print(f"  {cycle}")


@app.command
def navigate(
    grammar: Annotated[Path, cyclopts.Parameter(help="Path to src/grammar.json")],
    node_types: Annotated[Path, cyclopts.Parameter(help="Path to src/node-types.json")],
    kind: Annotated[str, cyclopts.Parameter(help="The node kind to inspect")],
    *,
    max_depth: Annotated[
        int | None,
        cyclopts.Parameter(
            name=["--max-depth", "-d"], help="Cap for transitive navigation (default: 8)"
        ),
    ] = None,
) -> None:
    """Show where a cursor can move from one node kind."""
    try:
        analysis = _run_analysis(grammar, node_types, max_depth)
    except GramnavError as e:
        _fail(e)
    entry = analysis.navigation.entries.get(kind)
    if entry is None:
        console.print(f"[red]Unknown node kind: {kind}[/red]")
        console.print(f"Named kinds: {', '.join(analysis.named_nodes)}")
        sys.exit(1)

    table = Table(show_header=True, header_style="bold blue", title=f"Navigation from {kind}")
    table.add_column("Move", style="cyan", no_wrap=True)
    table.add_column("Reaches", style="white")
    table.add_row("first child", _format_kinds(entry.first_child))
    table.add_row("next sibling", _format_kinds(entry.next_sibling))
    table.add_row("previous sibling", _format_kinds(entry.previous_sibling))
    table.add_row("parent", _format_kinds(entry.parent))
    for index, kinds in (entry.indexed_child or {}).items():
        table.add_row(f"child [{index}]", _format_kinds(kinds))
    for label, reach in (("descendants", entry.descendants), ("ancestors", entry.ancestors)):
        marker = " [yellow](unresolved)[/yellow]" if reach.unresolved else ""
        table.add_row(f"{label} ≤{reach.depth}", _format_kinds(reach.kinds) + marker)
    console.print(table)


def main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()


__all__ = ("OutputFormat", "analyze", "app", "main", "navigate")
