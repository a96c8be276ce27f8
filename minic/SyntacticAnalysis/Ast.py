from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class TypeKind(Enum):
    Int = "int"
    Bool = "bool"
    Void = "void"

    # Only produced by the analyser, never written in a program.
    Error = "error"

    def __str__(self):
        return self.value


class Operator(Enum):
    PLUS = "+"
    MINUS = "-"
    TIMES = "*"
    DIVIDE = "/"

    def __str__(self):
        return self.value


class Ast:
    """
    Base of every node. The only behaviour a node has is handing itself to a visitor: "accept" forwards to the
    visitor's "visit" method, which is a multimethod keyed on the node class, so the visitor decides what to do with
    each variant. Nodes are frozen dataclasses; sequences are stored as tuples so a built tree cannot change.
    """

    def accept(self, visitor: Any) -> Any:
        return visitor.visit(self)

    def _freeze(self, *field_names: str) -> None:
        for field_name in field_names:
            object.__setattr__(self, field_name, tuple(getattr(self, field_name)))


@dataclass(frozen=True)
class NumberLiteralAst(Ast):
    value: int
    line: int = -1
    column: int = -1

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class BoolLiteralAst(Ast):
    value: bool
    line: int = -1
    column: int = -1

    def __str__(self):
        return "true" if self.value else "false"


@dataclass(frozen=True)
class VariableAst(Ast):
    identifier: str
    line: int = -1
    column: int = -1

    def __str__(self):
        return self.identifier


@dataclass(frozen=True)
class BinaryOpAst(Ast):
    lhs: ExpressionAst
    op: Operator
    rhs: ExpressionAst
    line: int = -1
    column: int = -1

    def __str__(self):
        return "(" + str(self.lhs) + " " + str(self.op) + " " + str(self.rhs) + ")"


@dataclass(frozen=True)
class VarDeclAst(Ast):
    identifier: str
    initial_value: Optional[ExpressionAst] = None
    line: int = -1
    column: int = -1

    @property
    def has_initial_value(self) -> bool:
        return self.initial_value is not None

    def __str__(self):
        return self.identifier + (" = " + str(self.initial_value) if self.has_initial_value else "")


@dataclass(frozen=True)
class DeclarationAst(Ast):
    type: TypeKind
    variables: tuple[VarDeclAst, ...]
    line: int = -1
    column: int = -1

    def __post_init__(self):
        self._freeze("variables")

    def __str__(self):
        return str(self.type) + " " + ", ".join([str(variable) for variable in self.variables]) + ";"


@dataclass(frozen=True)
class AssignmentAst(Ast):
    identifier: str
    value: ExpressionAst
    line: int = -1
    column: int = -1

    def __str__(self):
        return self.identifier + " = " + str(self.value) + ";"


@dataclass(frozen=True)
class ReturnStatementAst(Ast):
    value: Optional[ExpressionAst] = None
    line: int = -1
    column: int = -1

    @property
    def has_value(self) -> bool:
        return self.value is not None

    def __str__(self):
        return "return" + (" " + str(self.value) if self.has_value else "") + ";"


@dataclass(frozen=True)
class ExpressionStatementAst(Ast):
    value: ExpressionAst
    line: int = -1
    column: int = -1

    def __str__(self):
        return str(self.value) + ";"


@dataclass(frozen=True)
class ParamAst(Ast):
    type: TypeKind
    identifier: str
    line: int = -1
    column: int = -1

    def __str__(self):
        return str(self.type) + " " + self.identifier


@dataclass(frozen=True)
class FunctionDefAst(Ast):
    return_type: TypeKind
    identifier: str
    parameters: tuple[ParamAst, ...]
    statements: tuple[StatementAst, ...]
    line: int = -1
    column: int = -1

    def __post_init__(self):
        self._freeze("parameters", "statements")

    def __str__(self):
        s = str(self.return_type) + " " + self.identifier
        s += "(" + ", ".join([str(parameter) for parameter in self.parameters]) + ") {\n"
        s += "".join(["    " + str(statement) + "\n" for statement in self.statements])
        s += "}"
        return s


@dataclass(frozen=True)
class ProgramAst(Ast):
    function: FunctionDefAst
    line: int = -1
    column: int = -1

    def __str__(self):
        return str(self.function)


ExpressionAst = BinaryOpAst | NumberLiteralAst | BoolLiteralAst | VariableAst
StatementAst = DeclarationAst | AssignmentAst | ReturnStatementAst | ExpressionStatementAst
