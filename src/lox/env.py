"""Lexical scopes: a chain of name → value maps."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .errors import LoxRuntimeFault

if TYPE_CHECKING:
    from .runtime import Value
    from .tokens import Token


class Environment:
    """One scope. The enclosing scope is referenced, never owned.

    A child that something else still references keeps its whole parent
    chain alive, so scopes captured by a callable survive the block that
    created them.
    """

    def __init__(self, enclosing: Environment | None = None) -> None:
        self.values: dict[str, Value] = {}
        self.enclosing: Environment | None = enclosing

    def enclose(self) -> Environment:
        return Environment(self)

    def is_declared(self, name: str) -> bool:
        return name in self.values

    def define(self, name: str, value: Value) -> None:
        # Redeclaring in the same scope simply overwrites.
        self.values[name] = value

    def get(self, name: Token) -> Value:
        scope: Environment | None = self
        while scope is not None:
            if name.lexeme in scope.values:
                return scope.values[name.lexeme]
            scope = scope.enclosing
        raise LoxRuntimeFault(f"Undefined variable '{name.lexeme}'.", name)

    def assign(self, name: Token, value: Value) -> None:
        scope: Environment | None = self
        while scope is not None:
            if name.lexeme in scope.values:
                scope.values[name.lexeme] = value
                return
            scope = scope.enclosing
        raise LoxRuntimeFault(f"Undefined variable '{name.lexeme}'.", name)
