"""
The parser lives outside this project, so syntax trees cross the boundary as JSON documents. Every node becomes an
object with a "kind" discriminator plus its fields; source positions are optional and default to -1:

    {"kind": "Program", "function": {"kind": "FunctionDef", "return_type": "int", "name": "main",
     "parameters": [{"kind": "Param", "type": "int", "name": "a"}],
     "statements": [{"kind": "Return", "value": {"kind": "BinaryOp", "op": "+",
                     "left": {"kind": "Variable", "name": "a"}, "right": {"kind": "Number", "value": 1}}}]}}
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

from multimethod import multimethod

from minic.SyntacticAnalysis import Ast


class AstFormatError(ValueError):
    ...


OPERATORS = {operator.value: operator for operator in Ast.Operator}
TYPES = {kind.value: kind for kind in Ast.TypeKind if kind != Ast.TypeKind.Error}


def operator_from_string(symbol: str) -> Ast.Operator:
    try:
        return OPERATORS[symbol]
    except KeyError:
        raise ValueError(f"Unknown operator: {symbol}") from None


def _position(ast: Ast.Ast) -> dict[str, int]:
    return {k: v for k, v in (("line", ast.line), ("column", ast.column)) if v != -1}


@multimethod
def ast_to_json(ast: Ast.ProgramAst) -> dict:
    return {"kind": "Program", "function": ast_to_json(ast.function), **_position(ast)}


@multimethod
def ast_to_json(ast: Ast.FunctionDefAst) -> dict:
    return {
        "kind": "FunctionDef",
        "return_type": ast.return_type.value,
        "name": ast.identifier,
        "parameters": [ast_to_json(parameter) for parameter in ast.parameters],
        "statements": [ast_to_json(statement) for statement in ast.statements],
        **_position(ast)}


@multimethod
def ast_to_json(ast: Ast.ParamAst) -> dict:
    return {"kind": "Param", "type": ast.type.value, "name": ast.identifier, **_position(ast)}


@multimethod
def ast_to_json(ast: Ast.DeclarationAst) -> dict:
    return {
        "kind": "Declaration",
        "type": ast.type.value,
        "variables": [ast_to_json(variable) for variable in ast.variables],
        **_position(ast)}


@multimethod
def ast_to_json(ast: Ast.VarDeclAst) -> dict:
    initial_value = ast_to_json(ast.initial_value) if ast.has_initial_value else None
    return {"kind": "VarDecl", "name": ast.identifier, "initial_value": initial_value, **_position(ast)}


@multimethod
def ast_to_json(ast: Ast.AssignmentAst) -> dict:
    return {"kind": "Assignment", "name": ast.identifier, "value": ast_to_json(ast.value), **_position(ast)}


@multimethod
def ast_to_json(ast: Ast.ReturnStatementAst) -> dict:
    value = ast_to_json(ast.value) if ast.has_value else None
    return {"kind": "Return", "value": value, **_position(ast)}


@multimethod
def ast_to_json(ast: Ast.ExpressionStatementAst) -> dict:
    return {"kind": "ExprStmt", "value": ast_to_json(ast.value), **_position(ast)}


@multimethod
def ast_to_json(ast: Ast.BinaryOpAst) -> dict:
    return {
        "kind": "BinaryOp",
        "left": ast_to_json(ast.lhs),
        "op": ast.op.value,
        "right": ast_to_json(ast.rhs),
        **_position(ast)}


@multimethod
def ast_to_json(ast: Ast.NumberLiteralAst) -> dict:
    return {"kind": "Number", "value": ast.value, **_position(ast)}


@multimethod
def ast_to_json(ast: Ast.BoolLiteralAst) -> dict:
    return {"kind": "Boolean", "value": ast.value, **_position(ast)}


@multimethod
def ast_to_json(ast: Ast.VariableAst) -> dict:
    return {"kind": "Variable", "name": ast.identifier, **_position(ast)}


class _Reader:
    # Field access with errors that say which node was being read.
    def __init__(self, document: Any):
        if not isinstance(document, dict):
            raise AstFormatError(f"Expected a node object, got {type(document).__name__}")
        self.document = document
        self.kind = document.get("kind")

    def get(self, key: str, expected: type | tuple[type, ...], optional: bool = False) -> Any:
        if key not in self.document or self.document[key] is None:
            if optional:
                return None
            raise AstFormatError(f"{self.kind} node is missing the '{key}' field")
        value = self.document[key]
        if not isinstance(value, expected):
            raise AstFormatError(f"{self.kind} node field '{key}' has the wrong type {type(value).__name__}")
        return value

    def type_kind(self, key: str) -> Ast.TypeKind:
        name = self.get(key, str)
        if name not in TYPES:
            raise AstFormatError(f"{self.kind} node has unknown type '{name}'")
        return TYPES[name]

    def integer(self, key: str) -> int:
        value = self.get(key, int)
        if isinstance(value, bool):
            raise AstFormatError(f"{self.kind} node field '{key}' must be an integer, not a boolean")
        return value

    def position(self) -> dict[str, int]:
        return {k: self.document[k] for k in ("line", "column") if isinstance(self.document.get(k), int)}


def _program(r: _Reader) -> Ast.ProgramAst:
    function = ast_from_json(r.get("function", dict))
    if not isinstance(function, Ast.FunctionDefAst):
        raise AstFormatError("Program node must own a FunctionDef")
    return Ast.ProgramAst(function, **r.position())


def _function_def(r: _Reader) -> Ast.FunctionDefAst:
    parameters = [ast_from_json(p) for p in r.get("parameters", list, optional=True) or []]
    statements = [ast_from_json(s) for s in r.get("statements", list)]
    if not all(isinstance(p, Ast.ParamAst) for p in parameters):
        raise AstFormatError("FunctionDef parameters must be Param nodes")
    if not all(isinstance(s, Ast.StatementAst) for s in statements):
        raise AstFormatError("FunctionDef statements must be statement nodes")
    return Ast.FunctionDefAst(r.type_kind("return_type"), r.get("name", str), parameters, statements, **r.position())


def _param(r: _Reader) -> Ast.ParamAst:
    return Ast.ParamAst(r.type_kind("type"), r.get("name", str), **r.position())


def _declaration(r: _Reader) -> Ast.DeclarationAst:
    variables = [ast_from_json(v) for v in r.get("variables", list)]
    if not variables or not all(isinstance(v, Ast.VarDeclAst) for v in variables):
        raise AstFormatError("Declaration must hold at least one VarDecl node")
    return Ast.DeclarationAst(r.type_kind("type"), variables, **r.position())


def _var_decl(r: _Reader) -> Ast.VarDeclAst:
    initial_value = r.get("initial_value", dict, optional=True)
    return Ast.VarDeclAst(r.get("name", str), _expression(initial_value) if initial_value is not None else None, **r.position())


def _assignment(r: _Reader) -> Ast.AssignmentAst:
    return Ast.AssignmentAst(r.get("name", str), _expression(r.get("value", dict)), **r.position())


def _return(r: _Reader) -> Ast.ReturnStatementAst:
    value = r.get("value", dict, optional=True)
    return Ast.ReturnStatementAst(_expression(value) if value is not None else None, **r.position())


def _expression_statement(r: _Reader) -> Ast.ExpressionStatementAst:
    return Ast.ExpressionStatementAst(_expression(r.get("value", dict)), **r.position())


def _binary_op(r: _Reader) -> Ast.BinaryOpAst:
    try:
        op = operator_from_string(r.get("op", str))
    except ValueError as e:
        raise AstFormatError(str(e)) from None
    return Ast.BinaryOpAst(_expression(r.get("left", dict)), op, _expression(r.get("right", dict)), **r.position())


def _number(r: _Reader) -> Ast.NumberLiteralAst:
    return Ast.NumberLiteralAst(r.integer("value"), **r.position())


def _boolean(r: _Reader) -> Ast.BoolLiteralAst:
    return Ast.BoolLiteralAst(r.get("value", bool), **r.position())


def _variable(r: _Reader) -> Ast.VariableAst:
    return Ast.VariableAst(r.get("name", str), **r.position())


BUILDERS: dict[str, Callable[[_Reader], Ast.Ast]] = {
    "Program": _program,
    "FunctionDef": _function_def,
    "Param": _param,
    "Declaration": _declaration,
    "VarDecl": _var_decl,
    "Assignment": _assignment,
    "Return": _return,
    "ExprStmt": _expression_statement,
    "BinaryOp": _binary_op,
    "Number": _number,
    "Boolean": _boolean,
    "Variable": _variable,
}


def ast_from_json(document: Any) -> Ast.Ast:
    r = _Reader(document)
    if r.kind not in BUILDERS:
        raise AstFormatError(f"Unknown node kind '{r.kind}'")
    return BUILDERS[r.kind](r)


def _expression(document: Any) -> Ast.ExpressionAst:
    ast = ast_from_json(document)
    if not isinstance(ast, Ast.ExpressionAst):
        raise AstFormatError(f"Expected an expression node, got '{_Reader(document).kind}'")
    return ast


def program_from_json(document: Any) -> Ast.ProgramAst:
    ast = ast_from_json(document)
    if not isinstance(ast, Ast.ProgramAst):
        raise AstFormatError(f"Expected a Program node at the root, got '{_Reader(document).kind}'")
    return ast


def load_program(file_path: str | Path) -> Ast.ProgramAst:
    # Nesting deeper than the interpreter's recursion limit is reported as a format error too
    with open(file_path, "r", encoding="utf-8") as file:
        try:
            document = json.load(file)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise AstFormatError(f"{file_path} is not valid JSON: {e}") from None
        except RecursionError:
            raise AstFormatError(f"{file_path} is nested too deeply to read") from None
    try:
        return program_from_json(document)
    except RecursionError:
        raise AstFormatError(f"{file_path} is nested too deeply to read") from None
