"""Lox runtime error types."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .tokens import Token


class LoxError(Exception):
    """Base error for Lox evaluation."""

    def __init__(self, msg: str, token: Token | None = None):
        if token is None:
            super().__init__(msg)
        else:
            super().__init__(f"{msg} at line {token.line}")
        self.msg = msg
        self.token = token


class LoxRuntimeFault(LoxError):
    """Runtime fault (undefined variable, bad operand, bad call, etc.)."""


class ZeroDivisionFault(LoxRuntimeFault):
    """Division with a zero right operand."""
