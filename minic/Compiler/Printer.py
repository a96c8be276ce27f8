from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import colorama
from multimethod import multimethod

from minic.SyntacticAnalysis import Ast
from minic.SemanticAnalysis.SemanticAnalysis import AnalysisResult
from minic.SemanticAnalysis.SymbolTable import Scope, SymbolTable


def save_json(json_dict: dict[str, Any], file_path: str | Path) -> None:
    Path(file_path).parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, "w") as file:
        json.dump(json_dict, file, indent=1)


class Style:
    """
    Colour codes for the report. With colour turned off every code is the empty string, so the formatting code never
    has to check whether it is colouring or not.
    """

    def __init__(self, colour: bool = True):
        self.colour = colour

    def _wrap(self, codes: str, text: str) -> str:
        return f"{codes}{text}{colorama.Style.RESET_ALL}" if self.colour else text

    def heading(self, text: str) -> str:
        return self._wrap(colorama.Fore.WHITE + colorama.Style.BRIGHT, text)

    def error(self, text: str) -> str:
        return self._wrap(colorama.Fore.RED + colorama.Style.BRIGHT, text)

    def warning(self, text: str) -> str:
        return self._wrap(colorama.Fore.YELLOW, text)

    def success(self, text: str) -> str:
        return self._wrap(colorama.Fore.GREEN + colorama.Style.BRIGHT, text)

    def dim(self, text: str) -> str:
        return self._wrap(colorama.Style.DIM, text)


def _position(line: int, column: int) -> str:
    if line < 0:
        return ""
    return f" (line {line}" + (f", column {column}" if column >= 0 else "") + ")"


def _indent(lines: list[str], indent_size: int = 2) -> list[str]:
    return [" " * indent_size + line for line in lines]


def _inline(prefix: str, lines: list[str]) -> list[str]:
    # Put the first line of a nested node after a label, keeping the rest of it indented underneath.
    return [prefix + lines[0]] + lines[1:]


class AstPrinter:
    """
    Prints a syntax tree as an indented outline. Each visit returns the lines for its node, unindented; the parent
    indents the lines of its children. Expressions are printed inline after the label of the node that holds them,
    and a binary operation lists its operands on "Left:" and "Right:" lines underneath.
    """

    def print(self, ast: Ast.Ast) -> str:
        return "\n".join(ast.accept(self))

    @multimethod
    def visit(self, ast: Ast.ProgramAst) -> list[str]:
        return ["Program"] + _indent(ast.function.accept(self))

    @multimethod
    def visit(self, ast: Ast.FunctionDefAst) -> list[str]:
        lines = [f"FunctionDef: {ast.return_type} {ast.identifier}"]
        if ast.parameters:
            lines += _indent(["Parameters:"] + _indent(sum([p.accept(self) for p in ast.parameters], [])))
        lines += _indent(["Statements:"] + _indent(sum([s.accept(self) for s in ast.statements], [])))
        return lines

    @multimethod
    def visit(self, ast: Ast.ParamAst) -> list[str]:
        return [f"Parameter: {ast.type} {ast.identifier}"]

    @multimethod
    def visit(self, ast: Ast.DeclarationAst) -> list[str]:
        return [f"Declaration: {ast.type}"] + _indent(sum([v.accept(self) for v in ast.variables], []))

    @multimethod
    def visit(self, ast: Ast.VarDeclAst) -> list[str]:
        if not ast.has_initial_value:
            return [f"Variable: {ast.identifier}"]
        return _inline(f"Variable: {ast.identifier} = ", ast.initial_value.accept(self))

    @multimethod
    def visit(self, ast: Ast.AssignmentAst) -> list[str]:
        return _inline(f"Assignment: {ast.identifier} = ", ast.value.accept(self))

    @multimethod
    def visit(self, ast: Ast.ReturnStatementAst) -> list[str]:
        if not ast.has_value:
            return ["Return (void)"]
        return _inline("Return: ", ast.value.accept(self))

    @multimethod
    def visit(self, ast: Ast.ExpressionStatementAst) -> list[str]:
        return _inline("ExpressionStatement: ", ast.value.accept(self))

    @multimethod
    def visit(self, ast: Ast.BinaryOpAst) -> list[str]:
        return [f"BinaryOp: {ast.op.name.lower()}"] + _indent(
            _inline("Left: ", ast.lhs.accept(self)) + _inline("Right: ", ast.rhs.accept(self)))

    @multimethod
    def visit(self, ast: Ast.NumberLiteralAst) -> list[str]:
        return [f"Number: {ast.value}"]

    @multimethod
    def visit(self, ast: Ast.BoolLiteralAst) -> list[str]:
        return [f"Boolean: {str(ast.value).lower()}"]

    @multimethod
    def visit(self, ast: Ast.VariableAst) -> list[str]:
        return [f"Variable: {ast.identifier}"]


def format_ast(ast: Ast.ProgramAst) -> str:
    return AstPrinter().print(ast)


def format_symbol_table(table: SymbolTable, style: Style = Style(False)) -> str:
    def inner(scope: Scope, depth: int) -> list[str]:
        lines = ["  " * depth + style.heading(f"Scope: {scope.name}")]
        lines += ["  " * depth + "  " + str(entry) for entry in scope.symbols]
        for child in scope.child_scopes:
            lines += inner(child, depth + 1)
        return lines

    return "\n".join([style.heading("=== SYMBOL TABLE ===")] + inner(table.global_scope, 0))


def format_statistics(table: SymbolTable, style: Style = Style(False)) -> str:
    return "\n".join([
        style.heading("=== SYMBOL TABLE STATISTICS ==="),
        f"Total scopes: {table.count_scopes()}",
        f"Total symbols: {table.count_symbols()}",
        f"Current scope: {table.current_scope.name}"])


def format_diagnostics(result: AnalysisResult, style: Style = Style(False)) -> str:
    lines = []
    if result.errors:
        lines.append(style.heading("=== SEMANTIC ERRORS FOUND ==="))
        lines += [style.error("ERROR: ") + str(e) + style.dim(_position(e.line, e.column)) for e in result.errors]
    if result.warnings:
        lines += [""] if lines else []
        lines.append(style.heading("=== SEMANTIC WARNINGS ==="))
        lines += [style.warning("WARNING: ") + str(w) + style.dim(_position(w.line, w.column)) for w in result.warnings]
    return "\n".join(lines)


def format_summary(result: AnalysisResult, style: Style = Style(False)) -> str:
    verdict = (style.error("Semantic analysis FAILED due to errors.") if result.has_errors
               else style.success("Semantic analysis PASSED successfully!"))
    return "\n".join([
        style.heading("=== SEMANTIC ANALYSIS SUMMARY ==="),
        f"Errors: {len(result.errors)}",
        f"Warnings: {len(result.warnings)}",
        "",
        verdict])
