"""Evaluation sessions and the workspace they share.

A `Workspace` is the long-lived global environment: the frame arena whose
handle 0 holds the primitives and every top-level `def`. A `Session` is one
evaluation under one fixed `SessionConfig`; it owns the live stack for that
run and gives back the frames it allocated once it finishes, unless a value
that outlives it still points at them.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional

from .environment import Environment, FrameArena
from .evaluator import eval_node
from .mode import SessionConfig
from .runtime import install_builtins
from .tree import Node
from .types import ScpValue, ScopaResourceExhausted, ScopaUnboundVariable

logger = logging.getLogger(__name__)


class Workspace:
    def __init__(self) -> None:
        self.arena = FrameArena()
        install_builtins(self.arena)

    @property
    def globals(self) -> Dict[str, ScpValue]:
        return self.arena.globals.vars

    def define_global(self, name: str, value: ScpValue) -> None:
        self.globals[name] = value

    def lookup_global(self, name: str) -> ScpValue:
        try:
            return self.globals[name]
        except KeyError:
            raise ScopaUnboundVariable(name) from None

    def frame_count(self) -> int:
        return len(self.arena)

    def reset(self) -> None:
        self.arena.reset()
        install_builtins(self.arena)


class Session:
    """Single-use evaluation of one AST under a fixed scoping mode."""

    def __init__(self, config: SessionConfig, workspace: Optional[Workspace] = None):
        self.config = config
        self.workspace = workspace if workspace is not None else Workspace()
        self.env = Environment(self.workspace.arena, config.mode, config.max_depth)
        self._used = False

    @property
    def mode(self):
        return self.config.mode

    def evaluate(self, ast: Node) -> ScpValue:
        if self._used:
            raise RuntimeError("Session already evaluated a program; start a new one")
        self._used = True

        arena = self.workspace.arena
        mark = arena.mark()
        result: Optional[ScpValue] = None
        logger.debug("session start: mode=%s max_depth=%d frames=%d", self.config.mode, self.config.max_depth, mark)

        try:
            result = eval_node(ast, self.env)
            return result
        except RecursionError:
            raise ScopaResourceExhausted(
                "Recursion depth exceeded host stack", depth=self.env.call_depth
            ) from None
        finally:
            self.env.unwind(1)
            roots = () if result is None else (result,)
            released = arena.release_since(mark, roots)
            logger.debug(
                "session end: frames=%d released=%s", len(arena), released
            )


def evaluate(ast: Node, config: Optional[SessionConfig] = None, workspace: Optional[Workspace] = None) -> ScpValue:
    return Session(config or SessionConfig(), workspace).evaluate(ast)
