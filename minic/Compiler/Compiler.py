from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from minic.SyntacticAnalysis.Ast import ProgramAst
from minic.SyntacticAnalysis.AstBuilder import ast_to_json
from minic.SemanticAnalysis.SemanticAnalysis import AnalysisResult, analyse
from minic.Compiler.Printer import (
    Style, format_ast, format_diagnostics, format_statistics, format_summary, format_symbol_table, save_json)


log = logging.getLogger(__name__)


@dataclass
class CompilerOptions:
    colour: bool = True
    dump_dir: Optional[Path] = None
    show_ast: bool = False

    @staticmethod
    def from_environment() -> CompilerOptions:
        # NO_COLOR disables colour whatever its value; MINIC_DUMP_DIR turns on the JSON dumps
        dump_dir = os.environ.get("MINIC_DUMP_DIR")
        return CompilerOptions(
            colour="NO_COLOR" not in os.environ,
            dump_dir=Path(dump_dir) if dump_dir else None)


class Compiler:
    _ast: ProgramAst
    _options: CompilerOptions
    _result: AnalysisResult

    def __init__(self, ast: ProgramAst, options: Optional[CompilerOptions] = None):
        self._ast = ast
        self._options = options or CompilerOptions()

        # Analyse the program. Errors are collected on the result, not raised.
        self._result = analyse(ast)

        # Dump the tree and the finished symbol table for inspection.
        if self._options.dump_dir is not None:
            save_json(ast_to_json(ast), self._options.dump_dir / "ast.json")
            save_json(self._result.symbol_table.json(), self._options.dump_dir / "symbol_table.json")
            log.info(f"Wrote ast.json and symbol_table.json to {self._options.dump_dir}")

    @property
    def result(self) -> AnalysisResult:
        return self._result

    @property
    def exit_code(self) -> int:
        # The program is rejected as a whole if there was any error; warnings never reject it
        return 1 if self._result.has_errors else 0

    def report(self) -> str:
        style = Style(self._options.colour)
        sections = []

        if self._options.show_ast:
            sections.append("\n".join([style.heading("=== AST STRUCTURE ==="), format_ast(self._ast)]))

        diagnostics = format_diagnostics(self._result, style)
        if diagnostics:
            sections.append(diagnostics)

        sections.append(format_symbol_table(self._result.symbol_table, style))
        sections.append(format_statistics(self._result.symbol_table, style))
        sections.append(format_summary(self._result, style))

        if self._result.has_errors:
            sections.append("\n".join([
                style.error("=== COMPILATION FAILED ==="),
                "The program contains semantic errors and cannot be executed."]))
        else:
            sections.append("\n".join([
                style.success("=== COMPILATION SUCCESSFUL ==="),
                "The program is semantically correct and ready for execution."]))

        return "\n\n".join(sections)
