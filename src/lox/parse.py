"""Recursive-descent parser for Lox with statement-level error recovery."""

from __future__ import annotations

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
from .tokens import TK_EOF, TK_IDENT, TK_NUMBER, TK_STRING, Token

MAX_ARGS = 255

# Combined nesting of statements, expressions, and unary operators. Each
# level costs up to a dozen Python frames, so this keeps parse() well inside
# the default recursion limit.
MAX_NESTING = 64

EQUALITY_OPS: set[str] = {"==", "!="}

COMPARE_OPS: set[str] = {">", ">=", "<", "<="}

# Tokens a statement can start with; synchronize() stops before these
STMT_KEYWORDS: set[str] = {
    "class",
    "fun",
    "var",
    "for",
    "if",
    "while",
    "print",
    "return",
}


class ParseError(Exception):
    """Parse error at a token."""

    def __init__(self, msg: str, token: Token):
        self.msg: str = msg
        self.token: Token = token
        super().__init__(msg + " at line " + str(token.line))


class Parser:
    """Recursive descent parser for Lox.

    Syntax errors raise ParseError, which the declaration loop catches,
    records, and recovers from, so parse() itself never raises.
    """

    def __init__(self, tokens: list[Token], diagnostics: Diagnostics):
        self.tokens: list[Token] = tokens
        self.diagnostics: Diagnostics = diagnostics
        self.pos: int = 0
        self.depth: int = 0

    # ── Helpers ──────────────────────────────────────────────

    def current(self) -> Token:
        return self.tokens[self.pos]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if tok.kind != TK_EOF:
            self.pos += 1
        return tok

    def at_end(self) -> bool:
        return self.current().kind == TK_EOF

    def at(self, lexeme: str) -> bool:
        tok = self.current()
        return tok.kind != TK_STRING and tok.lexeme == lexeme

    def at_any(self, lexemes: set[str]) -> bool:
        tok = self.current()
        return tok.kind != TK_STRING and tok.lexeme in lexemes

    def expect(self, lexeme: str, msg: str) -> Token:
        if not self.at(lexeme):
            raise self.error(msg)
        return self.advance()

    def expect_ident(self, msg: str) -> Token:
        if self.current().kind != TK_IDENT:
            raise self.error(msg)
        return self.advance()

    def error(self, msg: str) -> ParseError:
        return ParseError(msg, self.current())

    def nest(self, what: str) -> None:
        if self.depth >= MAX_NESTING:
            raise self.error(what + " nesting too deep.")
        self.depth += 1

    def report(self, token: Token, msg: str) -> None:
        """Record a syntax error that does not abort the current statement."""
        self.diagnostics.report_static(token.line, msg)

    def synchronize(self) -> None:
        """Discard tokens up to a likely statement boundary."""
        self.advance()
        while not self.at_end():
            if self.previous().lexeme == ";":
                return
            if self.current().kind in STMT_KEYWORDS:
                return
            self.advance()

    # ── Top Level ────────────────────────────────────────────

    def parse(self) -> list[Stmt]:
        stmts: list[Stmt] = []
        while not self.at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                stmts.append(stmt)
        return stmts

    def parse_declaration(self) -> Stmt | None:
        try:
            if self.at("var"):
                return self.parse_var_decl()
            return self.parse_stmt()
        except ParseError as e:
            self.report(e.token, e.msg)
            self.synchronize()
            return None

    def parse_var_decl(self) -> VarStmt:
        self.expect("var", "Expect 'var'.")
        name = self.expect_ident("Expect variable name.")
        initializer: Expr | None = None
        if self.at("="):
            self.advance()
            initializer = self.parse_expr()
        self.expect(";", "Expect ';' after variable declaration.")
        return VarStmt(name, initializer)

    # ── Statements ───────────────────────────────────────────

    def parse_stmt(self) -> Stmt:
        self.nest("Statement")
        try:
            tok = self.current()
            if tok.kind == "for":
                return self.parse_for_stmt()
            if tok.kind == "if":
                return self.parse_if_stmt()
            if tok.kind == "print":
                return self.parse_print_stmt()
            if tok.kind == "while":
                return self.parse_while_stmt()
            if self.at("{"):
                return Block(self.parse_block())
            return self.parse_expr_stmt()
        finally:
            self.depth -= 1

    def parse_for_stmt(self) -> Stmt:
        """Desugar `for (init; cond; incr) body` into a while loop."""
        self.expect("for", "Expect 'for'.")
        self.expect("(", "Expect '(' after 'for'.")

        initializer: Stmt | None
        if self.at(";"):
            self.advance()
            initializer = None
        elif self.at("var"):
            initializer = self.parse_var_decl()
        else:
            initializer = self.parse_expr_stmt()

        cond: Expr = Literal(True)
        if not self.at(";"):
            cond = self.parse_expr()
        self.expect(";", "Expect ';' after loop condition.")

        increment: Expr | None = None
        if not self.at(")"):
            increment = self.parse_expr()
        self.expect(")", "Expect ')' after for clauses.")

        body = self.parse_stmt()
        if increment is not None:
            body = Block([body, ExprStmt(increment)])
        loop: Stmt = WhileStmt(cond, body)
        if initializer is not None:
            loop = Block([initializer, loop])
        return loop

    def parse_if_stmt(self) -> IfStmt:
        self.expect("if", "Expect 'if'.")
        self.expect("(", "Expect '(' after 'if'.")
        cond = self.parse_expr()
        self.expect(")", "Expect ')' after if condition.")
        then_branch = self.parse_stmt()
        else_branch: Stmt | None = None
        if self.at("else"):
            self.advance()
            else_branch = self.parse_stmt()
        return IfStmt(cond, then_branch, else_branch)

    def parse_print_stmt(self) -> PrintStmt:
        self.expect("print", "Expect 'print'.")
        expr = self.parse_expr()
        self.expect(";", "Expect ';' after value.")
        return PrintStmt(expr)

    def parse_while_stmt(self) -> WhileStmt:
        self.expect("while", "Expect 'while'.")
        self.expect("(", "Expect '(' after 'while'.")
        cond = self.parse_expr()
        self.expect(")", "Expect ')' after condition.")
        body = self.parse_stmt()
        return WhileStmt(cond, body)

    def parse_block(self) -> list[Stmt]:
        self.expect("{", "Expect '{' before block.")
        stmts: list[Stmt] = []
        while not self.at("}") and not self.at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                stmts.append(stmt)
        self.expect("}", "Expect '}' after block.")
        return stmts

    def parse_expr_stmt(self) -> ExprStmt:
        expr = self.parse_expr()
        self.expect(";", "Expect ';' after expression.")
        return ExprStmt(expr)

    # ── Expressions ──────────────────────────────────────────

    def parse_expr(self) -> Expr:
        self.nest("Expression")
        try:
            return self.parse_assignment()
        finally:
            self.depth -= 1

    def parse_assignment(self) -> Expr:
        """Assignment = IDENT '=' Assignment | Or"""
        expr = self.parse_or()
        if self.at("="):
            equals = self.advance()
            value = self.parse_assignment()
            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            self.report(equals, "Invalid assignment target.")
        return expr

    def parse_or(self) -> Expr:
        """Or = And ( 'or' And )*"""
        left = self.parse_and()
        while self.at("or"):
            op = self.advance()
            right = self.parse_and()
            left = Logical(left, op, right)
        return left

    def parse_and(self) -> Expr:
        """And = Equality ( 'and' Equality )*"""
        left = self.parse_equality()
        while self.at("and"):
            op = self.advance()
            right = self.parse_equality()
            left = Logical(left, op, right)
        return left

    def parse_equality(self) -> Expr:
        """Equality = Compare ( ( '==' | '!=' ) Compare )*"""
        left = self.parse_compare()
        while self.at_any(EQUALITY_OPS):
            op = self.advance()
            right = self.parse_compare()
            left = Binary(left, op, right)
        return left

    def parse_compare(self) -> Expr:
        """Compare = Sum ( ( '>' | '>=' | '<' | '<=' ) Sum )*"""
        left = self.parse_sum()
        while self.at_any(COMPARE_OPS):
            op = self.advance()
            right = self.parse_sum()
            left = Binary(left, op, right)
        return left

    def parse_sum(self) -> Expr:
        """Sum = Product ( ( '+' | '-' ) Product )*"""
        left = self.parse_product()
        while self.at("+") or self.at("-"):
            op = self.advance()
            right = self.parse_product()
            left = Binary(left, op, right)
        return left

    def parse_product(self) -> Expr:
        """Product = Unary ( ( '*' | '/' ) Unary )*"""
        left = self.parse_unary()
        while self.at("*") or self.at("/"):
            op = self.advance()
            right = self.parse_unary()
            left = Binary(left, op, right)
        return left

    def parse_unary(self) -> Expr:
        """Unary = ( '!' | '-' ) Unary | Call"""
        if self.at("!") or self.at("-"):
            self.nest("Expression")
            try:
                op = self.advance()
                operand = self.parse_unary()
            finally:
                self.depth -= 1
            return Unary(op, operand)
        return self.parse_call()

    def parse_call(self) -> Expr:
        """Call = Primary ( '(' ArgList? ')' )*"""
        expr = self.parse_primary()
        while self.at("("):
            self.advance()
            args = self.parse_arg_list()
            paren = self.expect(")", "Expect ')' after arguments.")
            expr = Call(expr, paren, args)
        return expr

    def parse_arg_list(self) -> list[Expr]:
        """ArgList = Expr ( ',' Expr )*"""
        args: list[Expr] = []
        if self.at(")"):
            return args
        args.append(self.parse_expr())
        while self.at(","):
            self.advance()
            if len(args) >= MAX_ARGS:
                self.report(
                    self.current(),
                    "Can't have more than " + str(MAX_ARGS) + " arguments.",
                )
            args.append(self.parse_expr())
        return args

    def parse_primary(self) -> Expr:
        """Parse a primary expression."""
        tok = self.current()

        # Literals
        if tok.kind == TK_NUMBER or tok.kind == TK_STRING:
            self.advance()
            return Literal(tok.literal)
        if tok.kind == "true":
            self.advance()
            return Literal(True)
        if tok.kind == "false":
            self.advance()
            return Literal(False)
        if tok.kind == "nil":
            self.advance()
            return Literal(None)

        if tok.kind == TK_IDENT:
            self.advance()
            return Variable(tok)

        if self.at("("):
            self.advance()
            inner = self.parse_expr()
            self.expect(")", "Expect ')' after expression.")
            return Grouping(inner)

        raise self.error("Expect expression.")
