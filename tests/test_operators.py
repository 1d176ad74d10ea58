from __future__ import annotations

import pytest

from scopa.runtime import Builtins, init_stdlib
from scopa.runner import Interpreter
from scopa.types import ScopaTypeError
from tests.support.harness import run_runtime_case

SCENARIOS = [
    pytest.param("1 + 2 * 3", ("number", 7), None, id="mul-binds-tighter"),
    pytest.param("(1 + 2) * 3", ("number", 9), None, id="parens"),
    pytest.param("10 - 4 - 3", ("number", 3), None, id="sub-left-assoc"),
    pytest.param("7 / 2", ("number", 3.5), None, id="div-float"),
    pytest.param("2 * 3 % 4", ("number", 2), None, id="mod-same-precedence"),
    pytest.param("-(2 + 3)", ("number", -5), None, id="neg-group"),
    pytest.param("1 - -1", ("number", 2), None, id="neg-operand"),
    pytest.param("-7 % 3", ("number", -1), None, id="mod-sign-follows-dividend"),
    pytest.param("idiv(7, 2)", ("number", 3), None, id="idiv"),
    pytest.param("idiv(-7, 2)", ("number", -3), None, id="idiv-truncates"),
    pytest.param("abs(-4)", ("number", 4), None, id="abs"),
    pytest.param("sqrt(16)", ("number", 4), None, id="sqrt"),
    pytest.param("sqrt(-1)", None, ScopaTypeError, id="sqrt-negative"),
    pytest.param("floor(2.7)", ("number", 2), None, id="floor"),
    pytest.param("ceiling(2.1)", ("number", 3), None, id="ceiling"),
    pytest.param("round(2.5)", ("number", 3), None, id="round-half-up"),
    pytest.param("round(-2.5)", ("number", -3), None, id="round-half-away"),
    pytest.param("round(2.4)", ("number", 2), None, id="round-down"),
    pytest.param("1 < 2", ("bool", True), None, id="lt"),
    pytest.param("2 <= 2", ("bool", True), None, id="le"),
    pytest.param("3 > 4", ("bool", False), None, id="gt"),
    pytest.param("4 >= 5", ("bool", False), None, id="ge"),
    pytest.param('"apple" < "banana"', ("bool", True), None, id="lt-strings"),
    pytest.param("1 == 1.0", ("bool", True), None, id="eq-numbers"),
    pytest.param('1 == "1"', ("bool", False), None, id="eq-mixed-types"),
    pytest.param("unit == unit", ("bool", True), None, id="eq-unit"),
    pytest.param("true != false", ("bool", True), None, id="ne-bools"),
    pytest.param("abs == abs", ("bool", True), None, id="eq-builtin-identity"),
    pytest.param("true and false", ("bool", False), None, id="and"),
    pytest.param("false or true", ("bool", True), None, id="or"),
    pytest.param("not false", ("bool", True), None, id="not"),
    pytest.param("false and ghost", ("bool", False), None, id="and-short-circuit"),
    pytest.param("true or ghost", ("bool", True), None, id="or-short-circuit"),
    pytest.param("1 < 2 and 2 < 3", ("bool", True), None, id="and-binds-looser"),
    pytest.param("true or false and false", ("bool", True), None, id="and-before-or"),
    pytest.param('length("hello")', ("number", 5), None, id="length"),
    pytest.param('concat("a", "b", "c")', ("string", "abc"), None, id="concat"),
    pytest.param("concat()", ("string", ""), None, id="concat-empty"),
    pytest.param('concat("a", 1)', None, ScopaTypeError, id="concat-type"),
    pytest.param("str(42)", ("string", "42"), None, id="str-int"),
    pytest.param("str(1.5)", ("string", "1.5"), None, id="str-float"),
    pytest.param('str("x")', ("string", "x"), None, id="str-string"),
    pytest.param("str(true)", ("string", "true"), None, id="str-bool"),
    pytest.param("str(unit)", ("string", "unit"), None, id="str-unit"),
    pytest.param('"tab\\there"', ("string", "tab\there"), None, id="string-escape"),
    pytest.param('length("a\\"b")', ("number", 3), None, id="escaped-quote"),
]

# Too many digits for a float: the literal reads as infinity.
HUGE = "1" + "0" * 400

NON_FINITE = [
    pytest.param(f"floor({HUGE})", id="floor-inf"),
    pytest.param(f"ceiling({HUGE})", id="ceiling-inf"),
    pytest.param(f"round(-{HUGE})", id="round-neg-inf"),
    pytest.param(f"idiv({HUGE}, 2)", id="idiv-inf"),
    pytest.param(f"{HUGE} % 2", id="mod-inf"),
    pytest.param(f"let big = {HUGE} in floor(big - big)", id="floor-nan"),
    pytest.param(f"let big = {HUGE} in idiv(big - big, 1)", id="idiv-nan"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_operators(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_operator_symbols_alias_named_builtins() -> None:
    init_stdlib()

    for name, symbol in [("add", "+"), ("sub", "-"), ("eq", "=="), ("le", "<=")]:
        assert Builtins.functions[name] is Builtins.functions[symbol]


def test_builtin_arities() -> None:
    init_stdlib()

    assert Builtins.functions["+"].arity == 2
    assert Builtins.functions["concat"].arity is None


@pytest.mark.parametrize("source", NON_FINITE)
def test_non_finite_numbers_raise_type_error(source: str) -> None:
    run_runtime_case(source, None, ScopaTypeError)


def test_non_finite_numbers_stay_usable() -> None:
    run_runtime_case(f"str({HUGE})", ("string", "inf"), None)
    run_runtime_case(f"{HUGE} > 1", ("bool", True), None)


def test_non_finite_error_reaches_outcome() -> None:
    outcome = Interpreter().execute(f"floor({HUGE})")

    assert isinstance(outcome.error, ScopaTypeError)
    assert "finite Number" in str(outcome.error)
