from __future__ import annotations

from typing import List

from ..environment import Environment
from ..runtime import EvalFn, call_value
from ..tree import Call, Lambda
from ..types import ScpClosure, ScpValue, ScopaNotCallable, ScopaRuntimeError, is_callable_value


def eval_lambda(node: Lambda, env: Environment) -> ScpClosure:
    if len(set(node.params)) != len(node.params):
        raise ScopaRuntimeError(f"Duplicate parameter name in ({', '.join(node.params)})")

    return ScpClosure(params=node.params, body=node.body, frame=env.capture())


def eval_args(node: Call, env: Environment, eval_fn: EvalFn) -> List[ScpValue]:
    return [eval_fn(arg, env) for arg in node.args]


def eval_call(node: Call, env: Environment, eval_fn: EvalFn) -> ScpValue:
    callee = eval_fn(node.callee, env)

    if not is_callable_value(callee):
        raise ScopaNotCallable(callee)

    # Arguments see the caller's environment, never the callee's frame.
    args = eval_args(node, env, eval_fn)

    return call_value(callee, args, env, eval_fn)
