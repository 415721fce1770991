"""Tests for the diagnostics collector."""

from lox.diagnostics import RUNTIME, STATIC, Diagnostic, Diagnostics
from lox.tokens import TK_IDENT, Token


def test_static_and_runtime_are_separate():
    d = Diagnostics()
    assert not d.has_static_errors()
    assert not d.has_runtime_errors()
    d.report_static(3, "bad")
    assert d.has_static_errors()
    assert not d.has_runtime_errors()
    d.report_runtime(Token(TK_IDENT, "x", None, 5), "worse")
    assert d.has_runtime_errors()
    assert d.static == [Diagnostic(STATIC, "initial", 3, "bad")]
    assert d.runtime == [Diagnostic(RUNTIME, "initial", 5, "worse")]


def test_stage_is_recorded_per_diagnostic():
    d = Diagnostics()
    d.set_stage("scanning")
    d.report_static(1, "a")
    d.set_stage("parsing")
    d.report_static(2, "b")
    assert [x.stage for x in d.static] == ["scanning", "parsing"]


def test_runtime_without_token():
    d = Diagnostics()
    d.report_runtime(None, "lost")
    assert d.runtime[0].line is None
    assert str(d.runtime[0]) == "[line ?] Error: lost (stage initial)"


def test_rendering():
    d = Diagnostics()
    d.set_stage("executing")
    d.report_static(7, "Expect expression.")
    assert str(d.static[0]) == "[line 7] Error: Expect expression. (stage executing)"


def test_clear_is_explicit():
    d = Diagnostics()
    d.report_static(1, "a")
    d.report_runtime(None, "b")
    d.set_stage("parsing")
    d.report_static(2, "c")
    assert len(d.static) == 2
    d.clear()
    assert not d.has_static_errors()
    assert not d.has_runtime_errors()
    assert d.stage == "parsing"


def test_runtime_diagnostic_keeps_fault_name():
    d = Diagnostics()
    d.report_runtime(None, "Division by zero.", "ZeroDivisionFault")
    d.report_static(1, "bad")
    assert d.runtime[0].fault == "ZeroDivisionFault"
    assert d.static[0].fault is None
    assert str(d.runtime[0]) == "[line ?] Error: Division by zero. (stage initial)"
