# SPDX-FileCopyrightText: 2025 Knitli Inc.
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Boundary to the external `tree-sitter` CLI that compiles a grammar source.

gramnav never compiles grammars itself. `TreeSitterCompiler` places a `grammar.js` source in
a target directory, runs `tree-sitter generate` there and reports where the two documents an
analysis needs were written.
"""

from __future__ import annotations

# ruff: noqa: S603
import logging
import shutil
import subprocess

from pathlib import Path
from typing import Annotated

from pydantic import Field

from gramnav._common import FrozenModel
from gramnav.exceptions import GrammarCompilationError
from gramnav.grammar.document import GrammarDocument


logger = logging.getLogger(__name__)


class CompiledGrammar(FrozenModel):
    """Paths to the artifacts of one `tree-sitter generate` run."""

    grammar_json: Annotated[Path, Field(description="The rule table, `src/grammar.json`.")]
    node_types: Annotated[Path, Field(description="The node-type list, `src/node-types.json`.")]
    wasm: Annotated[
        Path | None, Field(description="The compiled parser, when a wasm build was requested.")
    ] = None

    def load(self) -> GrammarDocument:
        """Read the generated documents into a `GrammarDocument`."""
        return GrammarDocument.load(self.grammar_json, self.node_types)


class TreeSitterCompiler:
    """Runs the `tree-sitter` executable."""

    def __init__(self, executable: str = "tree-sitter", *, build_wasm: bool = False) -> None:
        self.executable = executable
        self.build_wasm = build_wasm

    def _resolve_executable(self) -> str:
        if found := shutil.which(self.executable):
            return found
        raise GrammarCompilationError(
            f"Could not find the `{self.executable}` executable",
            suggestions=[
                "Install the tree-sitter CLI (`npm install -g tree-sitter-cli` or `cargo install tree-sitter-cli`)",
                "Or pass the full path to the executable",
            ],
        )

    def _run(self, args: list[str], cwd: Path) -> None:
        logger.debug("Running %s in %s", " ".join(args), cwd)
        try:
            result = subprocess.run(args, cwd=cwd, capture_output=True, text=True, check=False)
        except OSError as e:
            raise GrammarCompilationError(
                f"Could not run {args[0]}", details={"path": str(cwd), "error": str(e)}
            ) from e
        if result.returncode != 0:
            raise GrammarCompilationError(
                f"`{' '.join(args[1:])}` failed",
                details={
                    "path": str(cwd),
                    "exit_code": result.returncode,
                    "stderr": result.stderr.strip(),
                },
                suggestions=["Check the grammar source for errors reported by tree-sitter"],
            )

    def compile(self, source: str | Path, target_dir: str | Path) -> CompiledGrammar:
        """Compile a grammar source into `target_dir`.

        Args:
            source: A `Path` to a `grammar.js` file, or the source text itself.
            target_dir: Directory the grammar is generated in. Created if missing.

        Raises:
            GrammarCompilationError: If the executable is missing, it fails, or it does not
                write the expected documents.
        """
        executable = self._resolve_executable()
        target = Path(target_dir)
        target.mkdir(parents=True, exist_ok=True)
        grammar_file = target / "grammar.js"
        if isinstance(source, Path):
            if source.resolve() != grammar_file.resolve():
                shutil.copyfile(source, grammar_file)
        else:
            grammar_file.write_text(source, encoding="utf-8")

        self._run([executable, "generate"], target)
        wasm: Path | None = None
        if self.build_wasm:
            self._run([executable, "build", "--wasm"], target)
            wasm = next(iter(sorted(target.glob("*.wasm"))), None)

        compiled = CompiledGrammar(
            grammar_json=target / "src" / "grammar.json",
            node_types=target / "src" / "node-types.json",
            wasm=wasm,
        )
        for artifact in (compiled.grammar_json, compiled.node_types):
            if not artifact.is_file():
                raise GrammarCompilationError(
                    f"tree-sitter did not produce {artifact.name}",
                    details={"path": str(artifact)},
                )
        logger.info("Generated grammar in %s", target)
        return compiled


__all__ = ("CompiledGrammar", "TreeSitterCompiler")
