"""Primitive procedures bound in the global frame via register_builtin."""

from __future__ import annotations

import math
from typing import List

from .runtime import (
    register_builtin,
    expect_bool,
    expect_finite,
    expect_number,
    expect_string,
    ScpBool,
    ScpNumber,
    ScpString,
    ScpValue,
    ScopaTypeError,
    ScopaZeroDivisionError,
)
from .types import type_name
from .utils import scp_equals, stringify

# ---- arithmetic ----

@register_builtin("add", "+", arity=2)
def std_add(args: List[ScpValue]) -> ScpNumber:
    return ScpNumber(expect_number(args[0], "add") + expect_number(args[1], "add"))

@register_builtin("sub", "-", arity=2)
def std_sub(args: List[ScpValue]) -> ScpNumber:
    return ScpNumber(expect_number(args[0], "sub") - expect_number(args[1], "sub"))

@register_builtin("mul", "*", arity=2)
def std_mul(args: List[ScpValue]) -> ScpNumber:
    return ScpNumber(expect_number(args[0], "mul") * expect_number(args[1], "mul"))

@register_builtin("div", "/", arity=2)
def std_div(args: List[ScpValue]) -> ScpNumber:
    lhs = expect_number(args[0], "div")
    rhs = expect_number(args[1], "div")

    if rhs == 0:
        raise ScopaZeroDivisionError("Division by zero")

    return ScpNumber(lhs / rhs)

@register_builtin("idiv", arity=2)
def std_idiv(args: List[ScpValue]) -> ScpNumber:
    lhs = expect_number(args[0], "idiv")
    rhs = expect_number(args[1], "idiv")

    if rhs == 0:
        raise ScopaZeroDivisionError("Division by zero")

    quotient = expect_finite(ScpNumber(lhs / rhs), "idiv")
    # truncates toward zero, not toward -inf
    return ScpNumber(float(math.trunc(quotient)))

@register_builtin("mod", "%", arity=2)
def std_mod(args: List[ScpValue]) -> ScpNumber:
    lhs = expect_finite(args[0], "mod")
    rhs = expect_number(args[1], "mod")

    if rhs == 0:
        raise ScopaZeroDivisionError("Modulo by zero")

    # sign follows the dividend
    return ScpNumber(math.fmod(lhs, rhs))

@register_builtin("neg", arity=1)
def std_neg(args: List[ScpValue]) -> ScpNumber:
    return ScpNumber(-expect_number(args[0], "neg"))

@register_builtin("abs", arity=1)
def std_abs(args: List[ScpValue]) -> ScpNumber:
    return ScpNumber(abs(expect_number(args[0], "abs")))

@register_builtin("sqrt", arity=1)
def std_sqrt(args: List[ScpValue]) -> ScpNumber:
    n = expect_number(args[0], "sqrt")

    if n < 0:
        raise ScopaTypeError("non-negative Number", str(ScpNumber(n)), "sqrt")

    return ScpNumber(math.sqrt(n))

@register_builtin("floor", arity=1)
def std_floor(args: List[ScpValue]) -> ScpNumber:
    return ScpNumber(float(math.floor(expect_finite(args[0], "floor"))))

@register_builtin("ceiling", arity=1)
def std_ceiling(args: List[ScpValue]) -> ScpNumber:
    return ScpNumber(float(math.ceil(expect_finite(args[0], "ceiling"))))

@register_builtin("round", arity=1)
def std_round(args: List[ScpValue]) -> ScpNumber:
    n = expect_finite(args[0], "round")
    # halves round away from zero
    return ScpNumber(float(math.floor(abs(n) + 0.5)) * (1 if n >= 0 else -1))

# ---- comparison ----

@register_builtin("eq", "==", arity=2)
def std_eq(args: List[ScpValue]) -> ScpBool:
    return ScpBool(scp_equals(args[0], args[1]))

@register_builtin("ne", "!=", arity=2)
def std_ne(args: List[ScpValue]) -> ScpBool:
    return ScpBool(not scp_equals(args[0], args[1]))

def _ordered(name: str, args: List[ScpValue]):
    lhs, rhs = args

    if isinstance(lhs, ScpString) and isinstance(rhs, ScpString):
        return lhs.value, rhs.value

    if isinstance(lhs, ScpNumber) and isinstance(rhs, ScpNumber):
        return lhs.value, rhs.value

    raise ScopaTypeError(
        "two Numbers or two Strings", f"{type_name(lhs)} and {type_name(rhs)}", name
    )

@register_builtin("lt", "<", arity=2)
def std_lt(args: List[ScpValue]) -> ScpBool:
    a, b = _ordered("lt", args)
    return ScpBool(a < b)

@register_builtin("le", "<=", arity=2)
def std_le(args: List[ScpValue]) -> ScpBool:
    a, b = _ordered("le", args)
    return ScpBool(a <= b)

@register_builtin("gt", ">", arity=2)
def std_gt(args: List[ScpValue]) -> ScpBool:
    a, b = _ordered("gt", args)
    return ScpBool(a > b)

@register_builtin("ge", ">=", arity=2)
def std_ge(args: List[ScpValue]) -> ScpBool:
    a, b = _ordered("ge", args)
    return ScpBool(a >= b)

# ---- logic ----

@register_builtin("not", arity=1)
def std_not(args: List[ScpValue]) -> ScpBool:
    return ScpBool(not expect_bool(args[0], "not"))

# ---- strings ----

@register_builtin("length", arity=1)
def std_length(args: List[ScpValue]) -> ScpNumber:
    return ScpNumber(float(len(expect_string(args[0], "length"))))

@register_builtin("concat")
def std_concat(args: List[ScpValue]) -> ScpString:
    return ScpString("".join(expect_string(arg, "concat") for arg in args))

@register_builtin("str", arity=1)
def std_str(args: List[ScpValue]) -> ScpString:
    return ScpString(stringify(args[0]))
