"""Lox: a small tree-walking interpreter."""

from __future__ import annotations

from typing import TextIO

from .ast import Expr as Expr, Stmt
from .diagnostics import Diagnostic as Diagnostic, Diagnostics as Diagnostics
from .emit import to_source
from .errors import LoxRuntimeFault as LoxRuntimeFault
from .parse import ParseError as ParseError, Parser
from .runtime import Interpreter as Interpreter, LoxCallable as LoxCallable
from .tokens import Token, tokenize

STAGE_SCANNING = "scanning"
STAGE_PARSING = "parsing"
STAGE_EXECUTING = "executing"


def scan(source: str, diagnostics: Diagnostics) -> list[Token]:
    """Tokenize Lox source, recording errors in diagnostics."""
    diagnostics.set_stage(STAGE_SCANNING)
    return tokenize(source, diagnostics)


def parse(source: str, diagnostics: Diagnostics) -> list[Stmt]:
    """Scan and parse Lox source into statements."""
    tokens = scan(source, diagnostics)
    diagnostics.set_stage(STAGE_PARSING)
    return Parser(tokens, diagnostics).parse()


def run(
    source: str, interpreter: Interpreter, *, trace: TextIO | None = None
) -> bool:
    """Scan, parse, and execute source. Returns False if anything was reported.

    Errors go to the interpreter's diagnostics. Parsing is skipped after a
    scanning error, and nothing is executed after any static error. With
    `trace`, the tokens and the parsed statements are dumped there first.
    """
    diagnostics = interpreter.diagnostics
    tokens = scan(source, diagnostics)
    if trace is not None:
        trace.write("---Tokens---\n")
        for tok in tokens:
            trace.write(repr(tok) + "\n")
    if diagnostics.has_static_errors():
        return False
    diagnostics.set_stage(STAGE_PARSING)
    stmts = Parser(tokens, diagnostics).parse()
    if trace is not None:
        trace.write("---Statements---\n")
        trace.write(to_source(stmts))
    if diagnostics.has_static_errors():
        return False
    diagnostics.set_stage(STAGE_EXECUTING)
    interpreter.interpret(stmts)
    return not diagnostics.has_runtime_errors()
