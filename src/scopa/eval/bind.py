from __future__ import annotations

from ..environment import Environment
from ..runtime import EvalFn
from ..tree import Assign, Define
from ..types import ScpValue


def eval_assign(node: Assign, env: Environment, eval_fn: EvalFn) -> ScpValue:
    """`set name = value`: overwrite the nearest visible binding, never create one."""
    value = eval_fn(node.value, env)
    env.assign(node.name, value)

    return value


def eval_define(node: Define, env: Environment, eval_fn: EvalFn) -> ScpValue:
    """`def name = value`: bind in the innermost frame, replacing any binding there."""
    value = eval_fn(node.value, env)
    env.define(node.name, value)

    return value
