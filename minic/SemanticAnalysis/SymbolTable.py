from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from minic.SyntacticAnalysis.Ast import TypeKind
from minic.SemanticAnalysis.CommonTypes import Value


log = logging.getLogger(__name__)


@dataclass
class SymbolEntry:
    """
    A symbol entry records one declared identifier. The type is fixed at declaration; the value and the initialized
    flag only change through assignment. The value is None while it is unknown, either because nothing has been
    assigned yet or because the assigned expression could not be folded to a constant.
    """
    name: str
    type: TypeKind
    value: Value = None
    is_initialized: bool = False
    line: int = -1
    column: int = -1

    def set_value(self, value: Value) -> None:
        self.value = value
        self.is_initialized = True

    def json(self) -> dict:
        return {
            "name": self.name,
            "type": str(self.type),
            "value": self.value,
            "initialized": self.is_initialized,
            "line": self.line,
            "column": self.column
        }

    def __str__(self):
        value = "null" if self.value is None else str(self.value).lower()
        return (f"Symbol{{name='{self.name}', type='{self.type}', value={value}, "
                f"initialized={str(self.is_initialized).lower()}, line={self.line}, col={self.column}}}")


class Scope:
    """
    A scope is one lexical region: its own symbols, a link to the scope it is nested in, and the scopes nested inside
    it. Children are never removed, so the whole tree is still there to print once analysis has finished.
    """
    _name: str
    _symbols: dict[str, SymbolEntry]
    _parent_scope: Optional[Scope]
    _child_scopes: list[Scope]

    def __init__(self, name: str, parent_scope: Optional[Scope] = None):
        self._name = name
        self._symbols = {}
        self._parent_scope = parent_scope
        self._child_scopes = []
        if self._parent_scope is not None:
            self._parent_scope._child_scopes.append(self)

    def declare(self, entry: SymbolEntry) -> bool:
        if entry.name in self._symbols:
            return False
        self._symbols[entry.name] = entry
        return True

    def lookup(self, name: str) -> Optional[SymbolEntry]:
        return self._symbols.get(name, None)

    @property
    def name(self) -> str:
        return self._name

    @property
    def symbols(self) -> list[SymbolEntry]:
        return list(self._symbols.values())

    @property
    def symbol_names(self) -> list[str]:
        return list(self._symbols.keys())

    @property
    def parent_scope(self) -> Optional[Scope]:
        return self._parent_scope

    @property
    def child_scopes(self) -> list[Scope]:
        return self._child_scopes

    def json(self) -> dict:
        return {
            "name": self._name,
            "symbols": {name: entry.json() for name, entry in self._symbols.items()},
            "child_scopes": [scope.json() for scope in self._child_scopes]
        }

    def __repr__(self):
        return f"Scope({self._name}, symbols={len(self._symbols)})"


class SymbolTable:
    """
    The symbol table owns the global scope and tracks the active one. Entering a scope nests a new scope under the
    active one, named after the label and a counter ("function_main_1"), and exiting moves back to the parent. The
    global scope can never be exited.
    """
    _global_scope: Scope
    _current_scope: Scope
    _scope_counter: int

    def __init__(self):
        self.clear()

    def clear(self) -> None:
        self._global_scope = Scope("global")
        self._current_scope = self._global_scope
        self._scope_counter = 0

    def enter_scope(self, label: str) -> Scope:
        self._scope_counter += 1
        self._current_scope = Scope(f"{label}_{self._scope_counter}", self._current_scope)
        log.debug(f"Entered scope {self._current_scope.name}")
        return self._current_scope

    def exit_scope(self) -> bool:
        if self._current_scope.parent_scope is None:
            return False
        log.debug(f"Exited scope {self._current_scope.name}")
        self._current_scope = self._current_scope.parent_scope
        return True

    def declare(self, name: str, type: TypeKind, line: int = -1, column: int = -1, value: Value = None, initialized: Optional[bool] = None) -> bool:
        # Without an explicit flag a symbol counts as initialized exactly when it was given a value
        is_initialized = value is not None if initialized is None else initialized
        return self._current_scope.declare(SymbolEntry(name, type, value, is_initialized, line, column))

    def lookup(self, name: str) -> Optional[SymbolEntry]:
        scope = self._current_scope
        while scope is not None:
            entry = scope.lookup(name)
            if entry is not None:
                return entry
            scope = scope.parent_scope
        return None

    def lookup_local(self, name: str) -> Optional[SymbolEntry]:
        return self._current_scope.lookup(name)

    def exists(self, name: str) -> bool:
        return self.lookup(name) is not None

    def exists_local(self, name: str) -> bool:
        return self.lookup_local(name) is not None

    def assign(self, name: str, value: Value) -> bool:
        entry = self.lookup(name)
        if entry is None:
            return False
        entry.set_value(value)
        return True

    def get_value(self, name: str) -> Value:
        entry = self.lookup(name)
        return entry.value if entry is not None else None

    def get_type(self, name: str) -> Optional[TypeKind]:
        entry = self.lookup(name)
        return entry.type if entry is not None else None

    def is_initialized(self, name: str) -> bool:
        entry = self.lookup(name)
        return entry is not None and entry.is_initialized

    @property
    def global_scope(self) -> Scope:
        return self._global_scope

    @property
    def current_scope(self) -> Scope:
        return self._current_scope

    def count_scopes(self) -> int:
        def inner(scope: Scope) -> int:
            return 1 + sum([inner(child) for child in scope.child_scopes])
        return inner(self._global_scope)

    def count_symbols(self) -> int:
        def inner(scope: Scope) -> int:
            return len(scope.symbols) + sum([inner(child) for child in scope.child_scopes])
        return inner(self._global_scope)

    def json(self) -> dict:
        return self._global_scope.json()
