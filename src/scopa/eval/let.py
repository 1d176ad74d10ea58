from __future__ import annotations

from ..environment import Environment
from ..runtime import EvalFn
from ..tree import Let
from ..types import ScpValue


def eval_let(node: Let, env: Environment, eval_fn: EvalFn) -> ScpValue:
    # The value is evaluated before the new frame exists, so `let x = x in ...`
    # reads the outer x.
    value = eval_fn(node.value, env)
    handle = env.push_let(node.name, value)

    try:
        return eval_fn(node.body, env)
    finally:
        env.pop_scope(handle)
