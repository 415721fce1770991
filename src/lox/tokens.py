"""Scanner turning Lox source text into tokens."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .diagnostics import Diagnostics


# Token type constants. Reserved words use the word itself as their type.
TK_NUMBER = "NUMBER"
TK_STRING = "STRING"
TK_IDENT = "IDENT"
TK_OP = "OP"
TK_EOF = "EOF"

KEYWORDS: set[str] = {
    "and",
    "class",
    "else",
    "false",
    "for",
    "fun",
    "if",
    "nil",
    "or",
    "print",
    "return",
    "super",
    "this",
    "true",
    "var",
    "while",
}

# Two-character operators; only ever a one-character lookahead past the first
MULTI_OPS: list[str] = [
    "!=",
    "==",
    "<=",
    ">=",
]

SINGLE_OPS: set[str] = {
    "(",
    ")",
    "{",
    "}",
    ",",
    ".",
    "-",
    "+",
    ";",
    "*",
    "/",
    "!",
    "=",
    "<",
    ">",
}


@dataclass(frozen=True)
class Token:
    """A token with kind, exact source slice, parsed literal, and line."""

    kind: str
    lexeme: str
    literal: float | str | None
    line: int

    def __repr__(self) -> str:
        return (
            "Token("
            + self.kind
            + ", "
            + repr(self.lexeme)
            + ", "
            + repr(self.literal)
            + ", "
            + str(self.line)
            + ")"
        )


def _is_digit(c: str) -> bool:
    return c >= "0" and c <= "9"


def _is_alpha(c: str) -> bool:
    return c.isalpha() or c == "_"


def _is_alnum(c: str) -> bool:
    return _is_alpha(c) or _is_digit(c)


def tokenize(source: str, diagnostics: Diagnostics) -> list[Token]:
    """Tokenize Lox source into a flat list ending with TK_EOF.

    Never raises: bad input is recorded as a static diagnostic and scanning
    carries on with the next character.
    """
    tokens: list[Token] = []
    pos = 0
    line = 1
    length = len(source)

    while pos < length:
        c = source[pos]

        # Newlines
        if c == "\n":
            pos += 1
            line += 1
            continue

        # Whitespace
        if c == " " or c == "\t" or c == "\r":
            pos += 1
            continue

        # Line comment: //
        if c == "/" and pos + 1 < length and source[pos + 1] == "/":
            while pos < length and source[pos] != "\n":
                pos += 1
            continue

        start_pos = pos

        # String literal: "..." (may span lines, no escapes)
        if c == '"':
            pos += 1
            start_line = line
            while pos < length and source[pos] != '"':
                if source[pos] == "\n":
                    line += 1
                pos += 1
            if pos >= length:
                diagnostics.report_static(line, "Unterminated string.")
                continue
            pos += 1  # skip closing "
            raw = source[start_pos:pos]
            tokens.append(Token(TK_STRING, raw, raw[1:-1], start_line))
            continue

        # Number: digits ( '.' digits )?
        if _is_digit(c):
            while pos < length and _is_digit(source[pos]):
                pos += 1
            if (
                pos + 1 < length
                and source[pos] == "."
                and _is_digit(source[pos + 1])
            ):
                pos += 1
                while pos < length and _is_digit(source[pos]):
                    pos += 1
            raw = source[start_pos:pos]
            tokens.append(Token(TK_NUMBER, raw, float(raw), line))
            continue

        # Identifier or keyword
        if _is_alpha(c):
            while pos < length and _is_alnum(source[pos]):
                pos += 1
            word = source[start_pos:pos]
            if word in KEYWORDS:
                tokens.append(Token(word, word, None, line))
            else:
                tokens.append(Token(TK_IDENT, word, None, line))
            continue

        # Two-character operators
        matched = False
        for op in MULTI_OPS:
            if source[pos : pos + 2] == op:
                tokens.append(Token(TK_OP, op, None, line))
                pos += 2
                matched = True
                break
        if matched:
            continue

        # Single-character operators
        if c in SINGLE_OPS:
            tokens.append(Token(TK_OP, c, None, line))
            pos += 1
            continue

        diagnostics.report_static(line, "Unexpected character " + repr(c) + ".")
        pos += 1

    tokens.append(Token(TK_EOF, "", None, line))
    return tokens
