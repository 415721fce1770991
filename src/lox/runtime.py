"""Tree-walking evaluator for Lox statements and expressions."""

from __future__ import annotations

from dataclasses import dataclass
import sys
import time
from typing import Callable, Iterable, TextIO, assert_never

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
from .diagnostics import Diagnostics
from .env import Environment
from .errors import LoxRuntimeFault, ZeroDivisionFault
from .tokens import Token


# ============================================================
# Values
# ============================================================


class LoxCallable:
    """A value that can appear as the callee of a call expression."""

    def arity(self) -> int:
        raise NotImplementedError

    def call(self, interpreter: Interpreter, args: list[Value]) -> Value:
        raise NotImplementedError


Value = bool | float | str | LoxCallable | None


@dataclass(eq=False)
class NativeFunction(LoxCallable):
    name: str
    params: int
    fn: Callable[[list[Value]], Value]

    def arity(self) -> int:
        return self.params

    def call(self, interpreter: Interpreter, args: list[Value]) -> Value:
        return self.fn(args)

    def __str__(self) -> str:
        return f"<native fn {self.name}>"


def _clock(args: list[Value]) -> Value:
    return time.time()


NATIVES: list[NativeFunction] = [
    NativeFunction("clock", 0, _clock),
]


def is_truthy(value: Value) -> bool:
    # nil and 0 are falsy
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return value != 0.0
    return True


def values_equal(a: Value, b: Value) -> bool:
    # Tagged equality: no coercion between kinds, so true != 1.
    if type(a) is not type(b):
        return False
    if isinstance(a, LoxCallable):
        return a is b
    return a == b


def stringify(value: Value) -> str:
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


# ============================================================
# Interpreter
# ============================================================


class Interpreter:
    """Executes statements against a chain of Environments.

    `environment` is the current scope handle. It is swapped on block entry
    and always restored on exit, even when the block raises.
    """

    def __init__(self, diagnostics: Diagnostics, *, stdout: TextIO | None = None):
        self.diagnostics = diagnostics
        self.stdout = stdout
        self.globals = Environment()
        self.environment = self.globals
        for native in NATIVES:
            self.globals.define(native.name, native)

    # ---- Running -----------------------------------------------------------

    def interpret(self, stmts: Iterable[Stmt]) -> None:
        """Run top-level statements; a fault only abandons its own statement."""
        for st in stmts:
            try:
                self.execute(st)
            except LoxRuntimeFault as e:
                self.diagnostics.report_runtime(e.token, e.msg, type(e).__name__)
            except RecursionError as e:
                # Only reachable from trees deeper than the parser allows.
                self.diagnostics.report_runtime(
                    None, "Program nested too deeply to run.", type(e).__name__
                )

    def _write(self, text: str) -> None:
        out = self.stdout if self.stdout is not None else sys.stdout
        out.write(text)

    # ---- Statements --------------------------------------------------------

    def execute(self, st: Stmt) -> None:
        if isinstance(st, ExprStmt):
            self.evaluate(st.expr)
            return

        if isinstance(st, PrintStmt):
            value = self.evaluate(st.expr)
            self._write(stringify(value) + "\n")
            return

        if isinstance(st, VarStmt):
            value: Value = None
            if st.initializer is not None:
                value = self.evaluate(st.initializer)
            self.environment.define(st.name.lexeme, value)
            return

        if isinstance(st, Block):
            self.execute_block(st.stmts, self.environment.enclose())
            return

        if isinstance(st, IfStmt):
            if is_truthy(self.evaluate(st.cond)):
                self.execute(st.then_branch)
            elif st.else_branch is not None:
                self.execute(st.else_branch)
            return

        if isinstance(st, WhileStmt):
            while is_truthy(self.evaluate(st.cond)):
                self.execute(st.body)
            return

        assert_never(st)

    def execute_block(self, stmts: list[Stmt], env: Environment) -> None:
        previous = self.environment
        try:
            self.environment = env
            for st in stmts:
                self.execute(st)
        finally:
            self.environment = previous

    # ---- Expressions -------------------------------------------------------

    def evaluate(self, expr: Expr) -> Value:
        if isinstance(expr, Literal):
            return expr.value

        if isinstance(expr, Grouping):
            return self.evaluate(expr.inner)

        if isinstance(expr, Variable):
            return self.environment.get(expr.name)

        if isinstance(expr, Assign):
            value = self.evaluate(expr.value)
            self.environment.assign(expr.name, value)
            return value

        if isinstance(expr, Unary):
            operand = self.evaluate(expr.operand)
            if expr.op.lexeme == "!":
                return not is_truthy(operand)
            if not isinstance(operand, float):
                raise LoxRuntimeFault("Operand of '-' must be a number.", expr.op)
            return -operand

        if isinstance(expr, Binary):
            left = self.evaluate(expr.left)
            right = self.evaluate(expr.right)
            return self._eval_binary(expr.op, left, right)

        if isinstance(expr, Logical):
            left = self.evaluate(expr.left)
            if expr.op.lexeme == "or":
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(expr.right)

        if isinstance(expr, Call):
            return self._eval_call(expr)

        assert_never(expr)

    def _eval_call(self, expr: Call) -> Value:
        callee = self.evaluate(expr.callee)
        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeFault("Can only call functions and classes.", expr.paren)
        args = [self.evaluate(a) for a in expr.args]
        if len(args) != callee.arity():
            raise LoxRuntimeFault(
                f"Expected {callee.arity()} arguments but got {len(args)}.",
                expr.paren,
            )
        return callee.call(self, args)

    def _eval_binary(self, op: Token, left: Value, right: Value) -> Value:
        o = op.lexeme

        if o == "==":
            return values_equal(left, right)
        if o == "!=":
            return not values_equal(left, right)

        if o == "+":
            if isinstance(left, float) and isinstance(right, float):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxRuntimeFault(
                "Operands of '+' must be two numbers or two strings.", op
            )

        if not isinstance(left, float) or not isinstance(right, float):
            raise LoxRuntimeFault(f"Operands of '{o}' must be numbers.", op)

        if o == "-":
            return left - right
        if o == "*":
            return left * right
        if o == "/":
            if right == 0.0:
                raise ZeroDivisionFault("Division by zero.", op)
            return left / right
        if o == ">":
            return left > right
        if o == ">=":
            return left >= right
        if o == "<":
            return left < right
        if o == "<=":
            return left <= right

        raise LoxRuntimeFault(f"Unknown operator '{o}'.", op)
