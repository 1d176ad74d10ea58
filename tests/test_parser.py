from __future__ import annotations

import pytest

from scopa.parser import ParseError, lex_source, parse_source, unescape_string
from scopa.runner import Interpreter
from scopa.tree import (
    Assign,
    Call,
    Define,
    If,
    Lambda,
    Let,
    Literal,
    Sequence,
    Span,
    Variable,
)
from scopa.types import FALSE, TRUE, UNIT, ScpNumber, ScpString


def num(n: float) -> Literal:
    return Literal(ScpNumber(float(n)))


def var(name: str) -> Variable:
    return Variable(name)


PARSE_CASES = [
    pytest.param("x", var("x"), id="variable"),
    pytest.param("42", num(42), id="number"),
    pytest.param("3.25", num(3.25), id="decimal"),
    pytest.param('"hi"', Literal(ScpString("hi")), id="string"),
    pytest.param("true", Literal(TRUE), id="true"),
    pytest.param("false", Literal(FALSE), id="false"),
    pytest.param("unit", Literal(UNIT), id="unit"),
    pytest.param("f(1, 2)", Call(var("f"), (num(1), num(2))), id="call"),
    pytest.param("f()", Call(var("f"), ()), id="call-no-args"),
    pytest.param("f(1)(2)", Call(Call(var("f"), (num(1),)), (num(2),)), id="curried-call"),
    pytest.param("1 + 2", Call(var("+"), (num(1), num(2))), id="infix-desugars"),
    pytest.param("-x", Call(var("neg"), (var("x"),)), id="unary-minus"),
    pytest.param("not x", Call(var("not"), (var("x"),)), id="not"),
    pytest.param("a and b", If(var("a"), var("b"), Literal(FALSE)), id="and"),
    pytest.param("a or b", If(var("a"), Literal(TRUE), var("b")), id="or"),
    pytest.param("let x = 1 in x", Let("x", num(1), var("x")), id="let"),
    pytest.param("lambda (a, b) a", Lambda(("a", "b"), var("a")), id="lambda"),
    pytest.param("fn () 1", Lambda((), num(1)), id="fn-no-params"),
    pytest.param(
        "if c then 1 else 2",
        If(var("c"), num(1), num(2)),
        id="if",
    ),
    pytest.param("set x = 1", Assign("x", num(1)), id="set"),
    pytest.param("def x = 1", Define("x", num(1)), id="def"),
    pytest.param("1; 2", Sequence((num(1), num(2))), id="sequence"),
    pytest.param("1;", num(1), id="trailing-semicolon"),
    pytest.param("", Sequence(()), id="empty-program"),
    pytest.param("{ }", Sequence(()), id="empty-block"),
    pytest.param("{ 1 }", Sequence((num(1),)), id="block"),
    pytest.param("1 # trailing comment\n", num(1), id="comment"),
    pytest.param(
        "let f = lambda (x) x + 1 in f(2)",
        Let(
            "f",
            Lambda(("x",), Call(var("+"), (var("x"), num(1)))),
            Call(var("f"), (num(2),)),
        ),
        id="lambda-body-extends-right",
    ),
    pytest.param(
        "if a then let x = 1 in x else 2",
        If(var("a"), Let("x", num(1), var("x")), num(2)),
        id="let-inside-then",
    ),
    pytest.param("lexically", var("lexically"), id="keyword-prefix-is-name"),
]


@pytest.mark.parametrize("source, expected", PARSE_CASES)
def test_parse_shapes(source: str, expected) -> None:
    assert parse_source(source) == expected


PARSE_ERRORS = [
    pytest.param("let x = in x", id="missing-let-value"),
    pytest.param("let x = 1", id="missing-in"),
    pytest.param("1 < 2 < 3", id="comparison-non-associative"),
    pytest.param("let let = 1 in 2", id="keyword-as-name"),
    pytest.param("lambda (a, 1) a", id="non-name-param"),
    pytest.param("f(1,)", id="trailing-comma"),
    pytest.param("@", id="stray-character"),
    pytest.param('"open', id="unterminated-string"),
    pytest.param('"\\q"', id="unknown-escape"),
    pytest.param("if a then b", id="if-without-else"),
]


@pytest.mark.parametrize("source", PARSE_ERRORS)
def test_parse_errors(source: str) -> None:
    with pytest.raises(ParseError):
        parse_source(source)


def test_parse_error_position() -> None:
    with pytest.raises(ParseError) as exc_info:
        parse_source("let x = 1 in\n  x + @")

    err = exc_info.value
    assert (err.line, err.column) == (2, 7)
    assert "Unexpected character" in str(err)
    assert str(err).endswith("at line 2, col 7")


def test_parse_error_end_of_input() -> None:
    with pytest.raises(ParseError) as exc_info:
        parse_source("let x = 1 in")

    assert exc_info.value.message == "Unexpected end of input"


def test_escape_error_reports_string_position() -> None:
    with pytest.raises(ParseError) as exc_info:
        parse_source('x;\n "\\q"')

    assert exc_info.value.line == 2


def test_nodes_carry_spans() -> None:
    node = parse_source("\n  foo(1)")

    assert node.meta == Span(2, 3)
    assert node.callee.meta == Span(2, 3)
    assert node.args[0].meta == Span(2, 7)


def test_spans_do_not_affect_equality() -> None:
    assert parse_source("  x") == parse_source("x")


def test_unescape_string() -> None:
    assert unescape_string('"a\\nb\\t\\\\"') == "a\nb\t\\"


def test_lex_source_keeps_whitespace_and_comments() -> None:
    types = [tok.type for tok in lex_source("x # c")]

    assert types[0] == "NAME"
    assert "WS" in types
    assert types[-1] == "COMMENT"


@pytest.mark.parametrize(
    "source",
    [
        pytest.param("let x = 1 in " * 2000 + "x", id="let-chain"),
        pytest.param("-" * 5000 + "1", id="unary-chain"),
    ],
)
def test_deep_nesting_is_a_parse_error(source: str) -> None:
    with pytest.raises(ParseError) as exc_info:
        parse_source(source)

    assert exc_info.value.message == "Program nested too deeply"


def test_deep_nesting_reaches_outcome() -> None:
    outcome = Interpreter().execute("let x = 1 in " * 2000 + "x")

    assert isinstance(outcome.error, ParseError)
    assert not outcome.ok
