from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .mode import ModeController, ScopingMode, SessionConfig, parse_mode
from .parser import ParseError, parse_source
from .session import Session, Workspace
from .tree import Node
from .types import ScpValue, ScopaRuntimeError
from .utils import default_mode_from_env, max_depth_from_env

ScopaError = Union[ParseError, ScopaRuntimeError]


@dataclass(frozen=True)
class Outcome:
    """What the command loop reports for one line of input.

    Exactly one of `value`, `error` or `mode` is set.
    """
    value: Optional[ScpValue] = None
    error: Optional[ScopaError] = None
    mode: Optional[ScopingMode] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def is_toggle(self) -> bool:
        return self.mode is not None


class Interpreter:
    """Command-loop core: mode toggles plus programs evaluated in fresh sessions.

    Globals defined by one program stay visible to later ones; the scoping mode
    in effect when a program starts governs that whole program.
    """

    def __init__(self, mode: Optional[ScopingMode] = None, max_depth: Optional[int] = None):
        self.controller = ModeController(
            mode if mode is not None else default_mode_from_env(),
            max_depth if max_depth is not None else max_depth_from_env(),
        )
        self.workspace = Workspace()

    @property
    def mode(self) -> ScopingMode:
        return self.controller.mode

    def execute(self, text: str) -> Outcome:
        toggled = self.controller.toggle(text)
        if toggled is not None:
            return Outcome(mode=toggled)

        try:
            ast = parse_source(text)
        except ParseError as exc:
            return Outcome(error=exc)

        return self.evaluate(ast)

    def evaluate(self, ast: Node) -> Outcome:
        session = Session(self.controller.snapshot(), self.workspace)

        try:
            value = session.evaluate(ast)
        except ScopaRuntimeError as exc:
            return Outcome(error=exc)

        return Outcome(value=value)

    def reset(self) -> None:
        self.workspace.reset()


def run(src: str, mode: ScopingMode = ScopingMode.DYNAMIC, max_depth: Optional[int] = None,
        workspace: Optional[Workspace] = None) -> ScpValue:
    """Parse and evaluate *src*, raising ParseError/ScopaRuntimeError on failure."""
    ast = parse_source(src)
    config = SessionConfig(mode=mode) if max_depth is None else SessionConfig(mode=mode, max_depth=max_depth)

    return Session(config, workspace).evaluate(ast)


def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    if candidate.exists():
        return candidate.read_text(encoding="utf-8")

    return arg


def main() -> None:
    mode = None
    max_depth = None
    arg = None
    it = iter(sys.argv[1:])

    for token in it:
        if token in ("--lexical", "--dynamic"):
            mode = parse_mode(token[2:])
            continue

        if token.startswith("--mode="):
            try:
                mode = parse_mode(token.split("=", 1)[1])
            except ValueError as exc:
                raise SystemExit(str(exc)) from None
            continue

        if token == "--max-depth" or token.startswith("--max-depth="):
            raw = token.split("=", 1)[1] if "=" in token else next(it, None)
            if raw is None:
                raise SystemExit("--max-depth flag requires a number")
            try:
                max_depth = int(raw)
            except ValueError:
                raise SystemExit(f"--max-depth expects an integer; got {raw!r}") from None
            if max_depth < 1:
                raise SystemExit(f"--max-depth must be positive; got {max_depth}")
            continue

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    try:
        if mode is None:
            mode = default_mode_from_env()
        if max_depth is None:
            max_depth = max_depth_from_env()
    except ValueError as exc:
        raise SystemExit(str(exc)) from None

    source = _load_source(arg or "-")

    try:
        result = run(source, mode=mode, max_depth=max_depth)
    except (ParseError, ScopaRuntimeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from None

    print(result)


if __name__ == "__main__":
    main()
