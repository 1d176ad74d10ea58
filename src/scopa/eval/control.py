from __future__ import annotations

from ..environment import Environment
from ..runtime import EvalFn
from ..tree import If, Sequence
from ..types import UNIT, ScpBool, ScpValue, ScopaTypeError, type_name


def eval_if(node: If, env: Environment, eval_fn: EvalFn) -> ScpValue:
    cond = eval_fn(node.cond, env)

    if not isinstance(cond, ScpBool):
        raise ScopaTypeError("Boolean", type_name(cond), "if condition")

    # No new scope: the chosen branch runs in the current environment.
    return eval_fn(node.then if cond.value else node.orelse, env)


def eval_sequence(node: Sequence, env: Environment, eval_fn: EvalFn) -> ScpValue:
    result: ScpValue = UNIT

    for expr in node.exprs:
        result = eval_fn(expr, env)

    return result
