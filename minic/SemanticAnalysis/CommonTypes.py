"""
Common types are the type tags the analyser reasons with. Literals get "int" or "bool", functions may also be "void",
and "error" marks an expression whose type could not be worked out, so that one mistake does not have to be reported
again by every expression built on top of it. There is no conversion between "int" and "bool".
"""

from __future__ import annotations

from typing import Optional

from minic.SyntacticAnalysis.Ast import TypeKind


Value = Optional[int | bool]


class CommonTypes:
    @staticmethod
    def int() -> TypeKind:
        return TypeKind.Int

    @staticmethod
    def bool() -> TypeKind:
        return TypeKind.Bool

    @staticmethod
    def void() -> TypeKind:
        return TypeKind.Void

    @staticmethod
    def error() -> TypeKind:
        return TypeKind.Error

    @staticmethod
    def compatible(lhs: Optional[TypeKind], rhs: Optional[TypeKind]) -> bool:
        if lhs is None or rhs is None:
            return False
        if CommonTypes.error() in (lhs, rhs):
            return False
        return lhs == rhs

    @staticmethod
    def default_value(type: TypeKind) -> Value:
        # Parameters start out holding the zero value of their type
        match type:
            case TypeKind.Int: return 0
            case TypeKind.Bool: return False
            case _: return None

    @staticmethod
    def is_integer(value: Value) -> bool:
        # bool is a subclass of int, but "true" is not an integer constant in this language
        return isinstance(value, int) and not isinstance(value, bool)
