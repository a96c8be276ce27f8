from __future__ import annotations

from minic.SyntacticAnalysis.Ast import TypeKind


class SemanticError(Exception):
    """
    A semantic error is recorded by the analyser rather than raised, so one pass can report every problem in the
    program. The message is prefixed with the error's code; the position is -1 when the parser did not supply one.
    """
    code: str = "0000"

    def __init__(self, message: str, line: int = -1, column: int = -1):
        Exception.__init__(self, f"[{self.code}] {message}")
        self.line = line
        self.column = column


class DuplicateDeclarationError(SemanticError):
    code = "0001"

    def __init__(self, name: str, line: int = -1, column: int = -1):
        SemanticError.__init__(self, f"Variable '{name}' is already declared in this scope", line, column)
        self.name = name


class DuplicateParameterError(DuplicateDeclarationError):
    code = "0002"

    def __init__(self, name: str, line: int = -1, column: int = -1):
        SemanticError.__init__(self, f"Parameter '{name}' is already declared in this scope", line, column)
        self.name = name


class UndeclaredVariableError(SemanticError):
    code = "0003"

    def __init__(self, name: str, line: int = -1, column: int = -1):
        SemanticError.__init__(self, f"Variable '{name}' is not declared", line, column)
        self.name = name


class TypeMismatchError(SemanticError):
    code = "0004"

    @staticmethod
    def assignment(name: str, target_type: TypeKind, value_type: TypeKind, line: int = -1, column: int = -1) -> TypeMismatchError:
        return TypeMismatchError(f"Cannot assign {value_type} to variable '{name}' of type {target_type}", line, column)

    @staticmethod
    def binary_operands(lhs_type: TypeKind, rhs_type: TypeKind, line: int = -1, column: int = -1) -> TypeMismatchError:
        return TypeMismatchError(f"Type mismatch in binary operation: {lhs_type} and {rhs_type}", line, column)


class NonIntegerArithmeticError(TypeMismatchError):
    code = "0005"

    def __init__(self, operand_type: TypeKind, line: int = -1, column: int = -1):
        SemanticError.__init__(self, f"Arithmetic operations are only supported for int type, got: {operand_type}", line, column)


class MissingReturnError(SemanticError):
    code = "0006"

    def __init__(self, function: str, return_type: TypeKind, line: int = -1, column: int = -1):
        SemanticError.__init__(self, f"Function '{function}' with return type '{return_type}' must have a return statement", line, column)


class DivisionByZeroError(SemanticError):
    code = "0007"

    def __init__(self, line: int = -1, column: int = -1):
        SemanticError.__init__(self, "Division by zero", line, column)


class CannotExitGlobalScopeError(SemanticError):
    code = "0008"

    def __init__(self, scope: str):
        SemanticError.__init__(self, f"Cannot exit the global scope (active scope '{scope}')")


class SemanticWarning(UserWarning):
    def __init__(self, message: str, line: int = -1, column: int = -1):
        UserWarning.__init__(self, message)
        self.line = line
        self.column = column


class UninitializedVariableWarning(SemanticWarning):
    def __init__(self, message: str, name: str, line: int = -1, column: int = -1):
        SemanticWarning.__init__(self, message, line, column)
        self.name = name


class UninitializedDeclarationWarning(UninitializedVariableWarning):
    def __init__(self, name: str, line: int = -1, column: int = -1):
        UninitializedVariableWarning.__init__(self, f"Variable '{name}' declared but not initialized", name, line, column)


class UninitializedUseWarning(UninitializedVariableWarning):
    def __init__(self, name: str, line: int = -1, column: int = -1):
        UninitializedVariableWarning.__init__(self, f"Variable '{name}' is used before being initialized", name, line, column)
