"""
Semantic analysis module
- Scopes
    - The function gets its own scope, nested in the global scope, holding its parameters and local variables
    - Check variables and parameters are not declared twice in the same scope (shadowing outer scopes is allowed)
    - Check variables exist before they are assigned to or read
- Type checking
    - Initializers and assigned values must have exactly the declared type (no int <-> bool conversion)
    - Arithmetic operands must both be int
    - A function with a non-void return type must contain a return statement
- Initialization
    - Warn about variables declared without a value, and about reads of variables that have no value yet
- Constant folding
    - Fold literals, variables holding known constants and arithmetic on them, to record declared values in the symbol
      table, and report division by zero

Every problem is recorded and analysis carries on with a placeholder (the "error" type, a zero value, a skipped
declaration), so a single pass reports everything wrong with the program.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from multimethod import multimethod

from minic.SyntacticAnalysis import Ast
from minic.SemanticAnalysis.CommonTypes import CommonTypes, Value
from minic.SemanticAnalysis.Exceptions import (
    SemanticError, SemanticWarning, DuplicateDeclarationError, DuplicateParameterError, UndeclaredVariableError,
    TypeMismatchError, NonIntegerArithmeticError, MissingReturnError, DivisionByZeroError, CannotExitGlobalScopeError,
    UninitializedDeclarationWarning, UninitializedUseWarning)
from minic.SemanticAnalysis.SymbolTable import SymbolTable


log = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisOutcome:
    # The static type and the folded value are independent: an expression can type-check while its value is unknown.
    static_type: Ast.TypeKind
    constant_value: Value = None


@dataclass
class AnalysisResult:
    symbol_table: SymbolTable
    errors: list[SemanticError] = field(default_factory=list)
    warnings: list[SemanticWarning] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0


class SemanticAnalyser:
    _symbol_table: SymbolTable
    _errors: list[SemanticError]
    _warnings: list[SemanticWarning]

    def __init__(self):
        self._symbol_table = SymbolTable()
        self._errors = []
        self._warnings = []

    @property
    def symbol_table(self) -> SymbolTable:
        return self._symbol_table

    @property
    def errors(self) -> list[SemanticError]:
        return self._errors

    @property
    def warnings(self) -> list[SemanticWarning]:
        return self._warnings

    def has_errors(self) -> bool:
        return len(self._errors) > 0

    def analyse(self, ast: Ast.ProgramAst) -> AnalysisResult:
        ast.accept(self)
        return AnalysisResult(self._symbol_table, self._errors, self._warnings)

    def _error(self, error: SemanticError) -> None:
        log.debug(f"Error: {error}")
        self._errors.append(error)

    def _warning(self, warning: SemanticWarning) -> None:
        log.debug(f"Warning: {warning}")
        self._warnings.append(warning)

    @multimethod
    def visit(self, ast: Ast.Ast) -> AnalysisOutcome:
        raise TypeError(f"Unknown node {type(ast).__name__} being analysed. Report as bug.")

    @multimethod
    def visit(self, ast: Ast.ProgramAst) -> AnalysisOutcome:
        log.info("Semantic analysis started")
        ast.function.accept(self)
        log.info(f"Semantic analysis completed with {len(self._errors)} error(s) and {len(self._warnings)} warning(s)")
        return AnalysisOutcome(CommonTypes.void())

    @multimethod
    def visit(self, ast: Ast.FunctionDefAst) -> AnalysisOutcome:
        log.debug(f"Analysing function {ast.identifier} ({ast.return_type})")

        # Parameters and locals live in the function's own scope. The scope is closed even if analysing the body
        # failed part of the way through, so the table is left pointing at the global scope.
        self._symbol_table.enter_scope("function_" + ast.identifier)
        try:
            for parameter in ast.parameters:
                parameter.accept(self)
            for statement in ast.statements:
                statement.accept(self)

            # Only the function's own statement list is searched: one return anywhere in it is enough.
            has_return = any([isinstance(statement, Ast.ReturnStatementAst) for statement in ast.statements])
            if ast.return_type != CommonTypes.void() and not has_return:
                self._error(MissingReturnError(ast.identifier, ast.return_type, ast.line, ast.column))
        finally:
            scope = self._symbol_table.current_scope
            if not self._symbol_table.exit_scope():
                raise CannotExitGlobalScopeError(scope.name)

        return AnalysisOutcome(ast.return_type)

    @multimethod
    def visit(self, ast: Ast.ParamAst) -> AnalysisOutcome:
        if self._symbol_table.exists_local(ast.identifier):
            self._error(DuplicateParameterError(ast.identifier, ast.line, ast.column))
            return AnalysisOutcome(ast.type)

        # Parameters always hold a value, so they start out as the default of their type.
        value = CommonTypes.default_value(ast.type)
        self._symbol_table.declare(ast.identifier, ast.type, ast.line, ast.column, value=value, initialized=True)
        log.debug(f"Declared parameter {ast.identifier} of type {ast.type}")
        return AnalysisOutcome(ast.type, value)

    @multimethod
    def visit(self, ast: Ast.DeclarationAst) -> AnalysisOutcome:
        for variable in ast.variables:
            self._declare_variable(ast.type, variable)
        return AnalysisOutcome(CommonTypes.void())

    @multimethod
    def visit(self, ast: Ast.VarDeclAst) -> AnalysisOutcome:
        # The declared type lives on the enclosing declaration, which handles its variables itself.
        return AnalysisOutcome(CommonTypes.void())

    def _declare_variable(self, type: Ast.TypeKind, ast: Ast.VarDeclAst) -> None:
        # A duplicate skips this variable only; the rest of the declaration is still processed.
        if self._symbol_table.exists_local(ast.identifier):
            self._error(DuplicateDeclarationError(ast.identifier, ast.line, ast.column))
            return

        if not ast.has_initial_value:
            self._symbol_table.declare(ast.identifier, type, ast.line, ast.column, initialized=False)
            self._warning(UninitializedDeclarationWarning(ast.identifier, ast.line, ast.column))
            log.debug(f"Declared uninitialized variable {ast.identifier} of type {type}")
            return

        # A mismatched initializer is reported, but the variable is still declared so later uses of it resolve.
        outcome = ast.initial_value.accept(self)
        if not CommonTypes.compatible(type, outcome.static_type):
            self._error(TypeMismatchError.assignment(ast.identifier, type, outcome.static_type, ast.line, ast.column))

        self._symbol_table.declare(ast.identifier, type, ast.line, ast.column, value=outcome.constant_value, initialized=True)
        log.debug(f"Declared and initialized variable {ast.identifier} = {outcome.constant_value}")

    @multimethod
    def visit(self, ast: Ast.AssignmentAst) -> AnalysisOutcome:
        entry = self._symbol_table.lookup(ast.identifier)
        if entry is None:
            self._error(UndeclaredVariableError(ast.identifier, ast.line, ast.column))
            return AnalysisOutcome(CommonTypes.error())

        # The value is stored even when the types disagree.
        outcome = ast.value.accept(self)
        if not CommonTypes.compatible(entry.type, outcome.static_type):
            self._error(TypeMismatchError.assignment(ast.identifier, entry.type, outcome.static_type, ast.line, ast.column))

        self._symbol_table.assign(ast.identifier, outcome.constant_value)
        log.debug(f"Assigned {ast.identifier} = {outcome.constant_value}")
        return AnalysisOutcome(entry.type, outcome.constant_value)

    @multimethod
    def visit(self, ast: Ast.ReturnStatementAst) -> AnalysisOutcome:
        if not ast.has_value:
            log.debug("Void return statement")
            return AnalysisOutcome(CommonTypes.void())

        outcome = ast.value.accept(self)
        log.debug(f"Return statement with value {outcome.constant_value} (type {outcome.static_type})")
        return outcome

    @multimethod
    def visit(self, ast: Ast.ExpressionStatementAst) -> AnalysisOutcome:
        return ast.value.accept(self)

    @multimethod
    def visit(self, ast: Ast.BinaryOpAst) -> AnalysisOutcome:
        lhs = ast.lhs.accept(self)
        rhs = ast.rhs.accept(self)
        return AnalysisOutcome(self._binary_type(ast, lhs, rhs), self._fold(ast, lhs.constant_value, rhs.constant_value))

    def _binary_type(self, ast: Ast.BinaryOpAst, lhs: AnalysisOutcome, rhs: AnalysisOutcome) -> Ast.TypeKind:
        if not CommonTypes.compatible(lhs.static_type, rhs.static_type):
            self._error(TypeMismatchError.binary_operands(lhs.static_type, rhs.static_type, ast.line, ast.column))
            return CommonTypes.error()

        if lhs.static_type != CommonTypes.int():
            self._error(NonIntegerArithmeticError(lhs.static_type, ast.line, ast.column))
            return CommonTypes.error()

        return CommonTypes.int()

    def _fold(self, ast: Ast.BinaryOpAst, lhs: Value, rhs: Value) -> Value:
        # Anything that is not a known integer on both sides leaves the result unknown.
        if not (CommonTypes.is_integer(lhs) and CommonTypes.is_integer(rhs)):
            return None

        match ast.op:
            case Ast.Operator.PLUS: return lhs + rhs
            case Ast.Operator.MINUS: return lhs - rhs
            case Ast.Operator.TIMES: return lhs * rhs
            case Ast.Operator.DIVIDE:
                if rhs == 0:
                    self._error(DivisionByZeroError(ast.line, ast.column))
                    return 0

                # Integer division truncates toward zero, unlike Python's floor division.
                quotient = abs(lhs) // abs(rhs)
                return quotient if (lhs < 0) == (rhs < 0) else -quotient

    @multimethod
    def visit(self, ast: Ast.NumberLiteralAst) -> AnalysisOutcome:
        return AnalysisOutcome(CommonTypes.int(), ast.value)

    @multimethod
    def visit(self, ast: Ast.BoolLiteralAst) -> AnalysisOutcome:
        return AnalysisOutcome(CommonTypes.bool(), ast.value)

    @multimethod
    def visit(self, ast: Ast.VariableAst) -> AnalysisOutcome:
        entry = self._symbol_table.lookup(ast.identifier)
        if entry is None:
            self._error(UndeclaredVariableError(ast.identifier, ast.line, ast.column))
            return AnalysisOutcome(CommonTypes.error())

        if not entry.is_initialized:
            self._warning(UninitializedUseWarning(ast.identifier, ast.line, ast.column))

        return AnalysisOutcome(entry.type, entry.value)


def analyse(ast: Ast.ProgramAst) -> AnalysisResult:
    return SemanticAnalyser().analyse(ast)
