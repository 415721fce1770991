"""Tests for the Lox parser."""

from lox.ast import (
    Assign,
    Binary,
    Block,
    Call,
    ExprStmt,
    Grouping,
    IfStmt,
    Literal,
    Logical,
    PrintStmt,
    Unary,
    Variable,
    VarStmt,
    WhileStmt,
)
from lox.diagnostics import Diagnostics
from lox.parse import ParseError, Parser
from lox.tokens import tokenize


def _parse(source: str):
    """Parse source. Returns (statements, diagnostics)."""
    diagnostics = Diagnostics()
    tokens = tokenize(source, diagnostics)
    stmts = Parser(tokens, diagnostics).parse()
    return stmts, diagnostics


def _expr(source: str):
    stmts, diagnostics = _parse(source + ";")
    assert diagnostics.static == [], [str(d) for d in diagnostics.static]
    assert isinstance(stmts[0], ExprStmt)
    return stmts[0].expr


def test_precedence_product_over_sum():
    expr = _expr("1 + 2 * 3")
    assert isinstance(expr, Binary)
    assert expr.op.lexeme == "+"
    assert expr.left == Literal(1.0)
    assert isinstance(expr.right, Binary)
    assert expr.right.op.lexeme == "*"


def test_binary_is_left_associative():
    expr = _expr("1 - 2 - 3")
    assert isinstance(expr, Binary)
    assert isinstance(expr.left, Binary)
    assert expr.right == Literal(3.0)


def test_assignment_is_right_associative():
    expr = _expr("a = b = 1")
    assert isinstance(expr, Assign)
    assert expr.name.lexeme == "a"
    assert isinstance(expr.value, Assign)
    assert expr.value.name.lexeme == "b"


def test_logical_precedence():
    expr = _expr("a or b and c")
    assert isinstance(expr, Logical)
    assert expr.op.lexeme == "or"
    assert isinstance(expr.right, Logical)
    assert expr.right.op.lexeme == "and"


def test_equality_binds_looser_than_comparison():
    expr = _expr("1 < 2 == true")
    assert isinstance(expr, Binary)
    assert expr.op.lexeme == "=="
    assert isinstance(expr.left, Binary)
    assert expr.left.op.lexeme == "<"


def test_unary_nests():
    expr = _expr("!-x")
    assert isinstance(expr, Unary)
    assert expr.op.lexeme == "!"
    assert isinstance(expr.operand, Unary)
    assert isinstance(expr.operand.operand, Variable)


def test_grouping_and_literals():
    expr = _expr('("s")')
    assert expr == Grouping(Literal("s"))
    assert _expr("nil") == Literal(None)
    assert _expr("true") == Literal(True)
    assert _expr("false") == Literal(False)


def test_call_chains():
    expr = _expr("f(1)(2, 3)()")
    assert isinstance(expr, Call)
    assert expr.args == []
    inner = expr.callee
    assert isinstance(inner, Call)
    assert len(inner.args) == 2
    assert isinstance(inner.callee, Call)
    assert inner.callee.args == [Literal(1.0)]
    assert expr.paren.lexeme == ")"


def test_too_many_arguments_is_reported_but_parsed():
    args = ", ".join(["1"] * 256)
    stmts, diagnostics = _parse("f(" + args + ");")
    assert [d.message for d in diagnostics.static] == [
        "Can't have more than 255 arguments."
    ]
    call = stmts[0].expr
    assert isinstance(call, Call)
    assert len(call.args) == 256


def test_var_decl():
    stmts, diagnostics = _parse("var a; var b = 2;")
    assert diagnostics.static == []
    assert isinstance(stmts[0], VarStmt)
    assert stmts[0].initializer is None
    assert isinstance(stmts[1], VarStmt)
    assert stmts[1].initializer == Literal(2.0)


def test_if_else_and_block():
    stmts, _ = _parse("if (x) { print 1; } else print 2;")
    st = stmts[0]
    assert isinstance(st, IfStmt)
    assert isinstance(st.then_branch, Block)
    assert isinstance(st.else_branch, PrintStmt)


def test_for_desugars_to_while():
    stmts, diagnostics = _parse("for (var i = 0; i < 3; i = i + 1) print i;")
    assert diagnostics.static == []
    outer = stmts[0]
    assert isinstance(outer, Block)
    init, loop = outer.stmts
    assert isinstance(init, VarStmt)
    assert isinstance(loop, WhileStmt)
    assert isinstance(loop.body, Block)
    body, incr = loop.body.stmts
    assert isinstance(body, PrintStmt)
    assert isinstance(incr, ExprStmt)
    assert isinstance(incr.expr, Assign)


def test_for_without_clauses():
    stmts, diagnostics = _parse("for (;;) print 1;")
    assert diagnostics.static == []
    loop = stmts[0]
    assert isinstance(loop, WhileStmt)
    assert loop.cond == Literal(True)
    assert isinstance(loop.body, PrintStmt)


def test_invalid_assignment_target_keeps_parsing():
    stmts, diagnostics = _parse("a + b = c; print 1;")
    assert [d.message for d in diagnostics.static] == ["Invalid assignment target."]
    assert len(stmts) == 2
    assert isinstance(stmts[0], ExprStmt)
    assert isinstance(stmts[0].expr, Binary)


def test_error_messages_name_the_expectation():
    _, diagnostics = _parse("print 1")
    assert [d.message for d in diagnostics.static] == ["Expect ';' after value."]
    _, diagnostics = _parse("print (1;")
    assert [d.message for d in diagnostics.static] == [
        "Expect ')' after expression."
    ]
    _, diagnostics = _parse("var 1;")
    assert [d.message for d in diagnostics.static] == ["Expect variable name."]
    _, diagnostics = _parse("{ print 1;")
    assert [d.message for d in diagnostics.static] == ["Expect '}' after block."]


def test_synchronize_reports_once_per_statement():
    stmts, diagnostics = _parse("print ; 1 + ; print 3;")
    assert len(diagnostics.static) == 2
    assert len(stmts) == 1
    assert isinstance(stmts[0], PrintStmt)


def test_synchronize_stops_at_statement_keyword():
    stmts, diagnostics = _parse("1 2 3 print 4;")
    assert len(diagnostics.static) == 1
    assert len(stmts) == 1
    assert isinstance(stmts[0], PrintStmt)


def test_error_inside_block_recovers_inside_block():
    stmts, diagnostics = _parse("{ print ; print 2; } print 3;")
    assert len(diagnostics.static) == 1
    assert len(stmts) == 2
    block = stmts[0]
    assert isinstance(block, Block)
    assert len(block.stmts) == 1


def test_diagnostic_line_is_offending_token_line():
    _, diagnostics = _parse("print 1;\nprint 2 3;\nprint 4;")
    assert len(diagnostics.static) == 1
    assert diagnostics.static[0].line == 2


def test_parse_is_deterministic():
    diagnostics = Diagnostics()
    tokens = tokenize("var a = 1; { print a + 2; } a = a * 3;", diagnostics)
    first = Parser(tokens, diagnostics).parse()
    second = Parser(tokens, diagnostics).parse()
    assert first == second


def test_parse_error_carries_token():
    diagnostics = Diagnostics()
    tokens = tokenize(";", diagnostics)
    parser = Parser(tokens, diagnostics)
    try:
        parser.parse_expr()
    except ParseError as e:
        assert e.msg == "Expect expression."
        assert e.token.lexeme == ";"
    else:
        raise AssertionError("expected ParseError")


def test_deep_grouping_is_reported_not_raised():
    src = "print " + "(" * 500 + "1" + ")" * 500 + ";\nprint 2;"
    stmts, diagnostics = _parse(src)
    assert [d.message for d in diagnostics.static] == ["Expression nesting too deep."]
    assert diagnostics.static[0].line == 1
    assert stmts == [PrintStmt(Literal(2.0))]


def test_nesting_within_limit_parses():
    stmts, diagnostics = _parse("print " + "(" * 40 + "1" + ")" * 40 + ";")
    assert diagnostics.static == []
    expr = stmts[0].expr
    depth = 0
    while isinstance(expr, Grouping):
        expr = expr.inner
        depth += 1
    assert depth == 40
    assert expr == Literal(1.0)


def test_deep_unary_chain_is_reported():
    _, diagnostics = _parse("print " + "!" * 500 + "true;")
    assert [d.message for d in diagnostics.static] == ["Expression nesting too deep."]


def test_deep_blocks_are_reported_not_raised():
    _, diagnostics = _parse("{" * 500 + "}" * 500)
    assert diagnostics.static[0].message == "Statement nesting too deep."


def test_nesting_depth_resets_after_an_error():
    deep = "print " + "(" * 500 + "1" + ")" * 500 + ";\n"
    ok = "print " + "(" * 40 + "1" + ")" * 40 + ";\n"
    stmts, diagnostics = _parse(deep + ok)
    assert len(diagnostics.static) == 1
    assert len(stmts) == 1
