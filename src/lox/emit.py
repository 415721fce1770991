"""Render parsed Lox statements back into source text.

This is "total" over the closed `Expr` / `Stmt` unions in `lox/ast.py`: a
variant missing here fails the type check at the `assert_never` calls.
`for` loops come back out in their desugared `while` form.
"""

from __future__ import annotations

from decimal import Decimal
import math
from typing import assert_never

from .ast import (
    Assign,
    Binary,
    Block,
    Call,
    Expr,
    ExprStmt,
    Grouping,
    IfStmt,
    Literal,
    Logical,
    PrintStmt,
    Stmt,
    Unary,
    Variable,
    VarStmt,
    WhileStmt,
)
from .runtime import stringify


# Digit string the scanner reads back as +inf
_INF_DIGITS: str = "1" + "0" * 309


def _number_literal(value: float) -> str:
    """Render a number as digits the scanner accepts (no exponent, no inf)."""
    if value == math.inf:
        return _INF_DIGITS
    text = stringify(value)
    if "e" in text:
        return format(Decimal(text), "f")
    return text


def to_source(stmts: list[Stmt]) -> str:
    """Render statements back into Lox source text."""
    return _Emitter().emit_program(stmts)


class _Emitter:
    _INDENT: str = "    "

    # Expression precedence (higher binds tighter)
    _PREC_ASSIGN: int = 1
    _PREC_OR: int = 2
    _PREC_AND: int = 3
    _PREC_EQUALITY: int = 4
    _PREC_COMPARE: int = 5
    _PREC_SUM: int = 6
    _PREC_PRODUCT: int = 7
    _PREC_UNARY: int = 8
    _PREC_CALL: int = 9
    _PREC_PRIMARY: int = 10

    _BIN_PREC: dict[str, int] = {
        "or": _PREC_OR,
        "and": _PREC_AND,
        "==": _PREC_EQUALITY,
        "!=": _PREC_EQUALITY,
        "<": _PREC_COMPARE,
        "<=": _PREC_COMPARE,
        ">": _PREC_COMPARE,
        ">=": _PREC_COMPARE,
        "+": _PREC_SUM,
        "-": _PREC_SUM,
        "*": _PREC_PRODUCT,
        "/": _PREC_PRODUCT,
    }

    def __init__(self) -> None:
        self._lines: list[str] = []
        self._indent_level: int = 0

    # ── Public ──────────────────────────────────────────────

    def emit_program(self, stmts: list[Stmt]) -> str:
        self._lines = []
        self._indent_level = 0
        for stmt in stmts:
            self._emit_stmt(stmt)
        text = "\n".join(self._lines)
        if text == "":
            return ""
        return text + "\n"

    # ── Lines / Blocks ──────────────────────────────────────

    def _emit_line(self, line: str) -> None:
        self._lines.append(self._INDENT * self._indent_level + line)

    def _emit_stmt_block(self, stmts: list[Stmt]) -> None:
        self._indent_level += 1
        for stmt in stmts:
            self._emit_stmt(stmt)
        self._indent_level -= 1

    def _emit_headed(self, header: str, body: Stmt) -> None:
        """Emit `header { ... }` for a block body, else the body indented."""
        if isinstance(body, Block):
            self._emit_line(header + " {")
            self._emit_stmt_block(body.stmts)
            self._emit_line("}")
            return
        self._emit_line(header)
        self._emit_stmt_block([body])

    # ── Stmts ───────────────────────────────────────────────

    def _emit_stmt(self, stmt: Stmt) -> None:
        if isinstance(stmt, ExprStmt):
            self._emit_line(self._render_expr(stmt.expr, self._PREC_ASSIGN) + ";")
            return
        if isinstance(stmt, PrintStmt):
            self._emit_line(
                "print " + self._render_expr(stmt.expr, self._PREC_ASSIGN) + ";"
            )
            return
        if isinstance(stmt, VarStmt):
            line = "var " + stmt.name.lexeme
            if stmt.initializer is not None:
                line += " = " + self._render_expr(stmt.initializer, self._PREC_ASSIGN)
            self._emit_line(line + ";")
            return
        if isinstance(stmt, Block):
            self._emit_line("{")
            self._emit_stmt_block(stmt.stmts)
            self._emit_line("}")
            return
        if isinstance(stmt, IfStmt):
            cond = self._render_expr(stmt.cond, self._PREC_ASSIGN)
            self._emit_headed("if (" + cond + ")", stmt.then_branch)
            if stmt.else_branch is not None:
                self._emit_headed("else", stmt.else_branch)
            return
        if isinstance(stmt, WhileStmt):
            cond = self._render_expr(stmt.cond, self._PREC_ASSIGN)
            self._emit_headed("while (" + cond + ")", stmt.body)
            return
        assert_never(stmt)

    # ── Exprs ───────────────────────────────────────────────

    def _expr_prec(self, expr: Expr) -> int:
        if isinstance(expr, Assign):
            return self._PREC_ASSIGN
        if isinstance(expr, (Binary, Logical)):
            return self._BIN_PREC[expr.op.lexeme]
        if isinstance(expr, Unary):
            return self._PREC_UNARY
        if isinstance(expr, Call):
            return self._PREC_CALL
        return self._PREC_PRIMARY

    def _render_expr(self, expr: Expr, parent_prec: int, side: str = "") -> str:
        prec = self._expr_prec(expr)
        text = self._render_expr_inner(expr)
        # Binary operators are left-associative: a right operand of equal
        # precedence needs parens to keep its grouping.
        if prec < parent_prec or (
            prec == parent_prec and side == "right" and prec != self._PREC_ASSIGN
        ):
            return f"({text})"
        return text

    def _render_expr_inner(self, expr: Expr) -> str:
        if isinstance(expr, Literal):
            if isinstance(expr.value, str):
                return '"' + expr.value + '"'
            if isinstance(expr.value, float):
                return _number_literal(expr.value)
            return stringify(expr.value)
        if isinstance(expr, Variable):
            return expr.name.lexeme
        if isinstance(expr, Grouping):
            return "(" + self._render_expr(expr.inner, self._PREC_ASSIGN) + ")"
        if isinstance(expr, Assign):
            value = self._render_expr(expr.value, self._PREC_ASSIGN)
            return f"{expr.name.lexeme} = {value}"
        if isinstance(expr, Unary):
            operand = self._render_expr(expr.operand, self._PREC_UNARY)
            return f"{expr.op.lexeme}{operand}"
        if isinstance(expr, (Binary, Logical)):
            op_prec = self._BIN_PREC[expr.op.lexeme]
            left = self._render_expr(expr.left, op_prec, "left")
            right = self._render_expr(expr.right, op_prec, "right")
            return f"{left} {expr.op.lexeme} {right}"
        if isinstance(expr, Call):
            callee = self._render_expr(expr.callee, self._PREC_CALL, "left")
            args: list[str] = []
            for a in expr.args:
                args.append(self._render_expr(a, self._PREC_ASSIGN))
            return f"{callee}({', '.join(args)})"
        assert_never(expr)
