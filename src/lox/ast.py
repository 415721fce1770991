"""Syntax tree node types for Lox programs.

`Expr` and `Stmt` are closed unions. Consumers dispatch over them with an
isinstance chain ending in `assert_never`, so a type checker flags any
consumer that misses a variant.
"""

from __future__ import annotations

from dataclasses import dataclass

from .tokens import Token


# ============================================================
# EXPRESSIONS
# ============================================================


@dataclass
class Assign:
    """name = value."""

    name: Token
    value: Expr


@dataclass
class Binary:
    """left op right, for arithmetic, comparison, and equality."""

    left: Expr
    op: Token
    right: Expr


@dataclass
class Call:
    """callee(args). paren is the closing ')' used for error lines."""

    callee: Expr
    paren: Token
    args: list[Expr]


@dataclass
class Grouping:
    """( inner )."""

    inner: Expr


@dataclass
class Literal:
    """Number, string, true, false, or nil."""

    value: float | str | bool | None


@dataclass
class Unary:
    """op operand, where op is '!' or '-'."""

    op: Token
    operand: Expr


@dataclass
class Variable:
    """Bare name reference."""

    name: Token


@dataclass
class Logical:
    """left and|or right, short-circuiting."""

    left: Expr
    op: Token
    right: Expr


Expr = Assign | Binary | Call | Grouping | Literal | Unary | Variable | Logical


# ============================================================
# STATEMENTS
# ============================================================


@dataclass
class ExprStmt:
    """Bare expression as statement."""

    expr: Expr


@dataclass
class PrintStmt:
    """print expr;"""

    expr: Expr


@dataclass
class VarStmt:
    """var name = initializer;  (initializer optional)"""

    name: Token
    initializer: Expr | None


@dataclass
class Block:
    """{ stmts }."""

    stmts: list[Stmt]


@dataclass
class IfStmt:
    """if (cond) then_branch else else_branch."""

    cond: Expr
    then_branch: Stmt
    else_branch: Stmt | None


@dataclass
class WhileStmt:
    """while (cond) body. Also the target of `for` desugaring."""

    cond: Expr
    body: Stmt


Stmt = ExprStmt | PrintStmt | VarStmt | Block | IfStmt | WhileStmt
