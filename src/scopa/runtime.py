from __future__ import annotations

import importlib
import math
from typing import Callable, Dict, List, Optional

from .environment import Environment, FrameArena
from .tree import Node
from .types import (
    BuiltinFn,
    ScpBool,
    ScpBuiltin,
    ScpClosure,
    ScpNumber,
    ScpString,
    ScpValue,
    ScopaArityError,
    ScopaNotCallable,
    ScopaTypeError,
    ScopaZeroDivisionError,
    type_name,
)

EvalFn = Callable[[Node, Environment], ScpValue]

_STDLIB_INITIALIZED = False


class Builtins:
    functions: Dict[str, ScpBuiltin] = {}


def init_stdlib() -> None:
    """Load the primitive library (idempotent) so register_builtin hooks run."""
    global _STDLIB_INITIALIZED

    if _STDLIB_INITIALIZED:
        return

    importlib.import_module("scopa.stdlib")
    _STDLIB_INITIALIZED = True


def register_builtin(name: str, *aliases: str, arity: Optional[int] = None):
    def dec(fn: BuiltinFn):
        builtin = ScpBuiltin(name=name, fn=fn, arity=arity)
        for key in (name, *aliases):
            Builtins.functions[key] = builtin
        return fn

    return dec


def install_builtins(arena: FrameArena) -> None:
    init_stdlib()
    arena.globals.vars.update(Builtins.functions)


def expect_number(value: ScpValue, context: str) -> float:
    if isinstance(value, ScpNumber):
        return value.value

    raise ScopaTypeError("Number", type_name(value), context)


def expect_finite(value: ScpValue, context: str) -> float:
    """Number check for primitives that convert to an integer; rejects inf and nan."""
    n = expect_number(value, context)

    if not math.isfinite(n):
        raise ScopaTypeError("finite Number", repr(ScpNumber(n)), context)

    return n


def expect_bool(value: ScpValue, context: str) -> bool:
    if isinstance(value, ScpBool):
        return value.value

    raise ScopaTypeError("Boolean", type_name(value), context)


def expect_string(value: ScpValue, context: str) -> str:
    if isinstance(value, ScpString):
        return value.value

    raise ScopaTypeError("String", type_name(value), context)


def bind_params(closure: ScpClosure, args: List[ScpValue]) -> Dict[str, ScpValue]:
    if len(args) != len(closure.params):
        raise ScopaArityError(len(closure.params), len(args))

    return dict(zip(closure.params, args))


def call_closure(closure: ScpClosure, args: List[ScpValue], env: Environment, eval_fn: EvalFn) -> ScpValue:
    """Apply *closure* to already-evaluated *args* under the session's mode."""
    bindings = bind_params(closure, args)
    handle = env.push_call(closure, bindings)

    try:
        return eval_fn(closure.body, env)
    finally:
        env.pop_scope(handle)


def call_builtin(builtin: ScpBuiltin, args: List[ScpValue]) -> ScpValue:
    if builtin.arity is not None and len(args) != builtin.arity:
        raise ScopaArityError(builtin.arity, len(args), callee=builtin.name)

    return builtin.fn(args)


def call_value(callee: ScpValue, args: List[ScpValue], env: Environment, eval_fn: EvalFn) -> ScpValue:
    match callee:
        case ScpClosure():
            return call_closure(callee, args, env, eval_fn)
        case ScpBuiltin():
            return call_builtin(callee, args)
        case _:
            raise ScopaNotCallable(callee)
