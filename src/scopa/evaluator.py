from __future__ import annotations

from typing import Optional

from .environment import Environment, FrameArena
from .mode import ScopingMode, SessionConfig
from .runtime import install_builtins
from .tree import (
    Assign,
    Call,
    Define,
    If,
    Lambda,
    Let,
    Literal,
    Node,
    Sequence,
    Variable,
    node_meta,
)
from .types import ScpValue, ScopaRuntimeError

from .eval.bind import eval_assign, eval_define
from .eval.control import eval_if, eval_sequence
from .eval.fn import eval_call, eval_lambda
from .eval.let import eval_let


def _maybe_attach_location(exc: ScopaRuntimeError, node: Node) -> None:
    # The innermost node wins; outer frames of the recursion leave it alone.
    if exc.meta is not None:
        return

    meta = node_meta(node)
    if meta is not None:
        exc.meta = meta

# ---------------- Public API ----------------

def eval_expr(ast: Node, env: Optional[Environment] = None, config: Optional[SessionConfig] = None) -> ScpValue:
    """Evaluate *ast* in *env*, or in a throwaway global environment.

    Prefer `scopa.session.Session` when globals must outlive the call.
    """
    if env is None:
        config = config or SessionConfig()
        arena = FrameArena()
        install_builtins(arena)
        env = Environment(arena, config.mode, config.max_depth)

    return eval_node(ast, env)

# ---------------- Core evaluator ----------------

def eval_node(n: Node, env: Environment) -> ScpValue:
    try:
        return _eval_node_inner(n, env)
    except ScopaRuntimeError as e:
        _maybe_attach_location(e, n)
        raise


def _eval_node_inner(n: Node, env: Environment) -> ScpValue:
    match n:
        case Literal(value=value):
            return value
        case Variable(name=name):
            return env.lookup(name)
        case Let():
            return eval_let(n, env, eval_node)
        case Lambda():
            return eval_lambda(n, env)
        case Call():
            return eval_call(n, env, eval_node)
        case If():
            return eval_if(n, env, eval_node)
        case Assign():
            return eval_assign(n, env, eval_node)
        case Define():
            return eval_define(n, env, eval_node)
        case Sequence():
            return eval_sequence(n, env, eval_node)
        case _:
            raise ScopaRuntimeError(f"Unknown node: {type(n).__name__}")


def evaluate_in_mode(ast: Node, mode: ScopingMode) -> ScpValue:
    return eval_expr(ast, config=SessionConfig(mode=mode))
