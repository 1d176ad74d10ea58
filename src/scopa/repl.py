"""Interactive REPL for Scopa, powered by prompt_toolkit.

A line reading exactly `lexical` or `dynamic` switches the scoping mode used
by every program entered afterwards; anything else is evaluated as a program.
"""

from __future__ import annotations

import os
import re
import sys
import traceback
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.shortcuts import clear

from .repl_highlight import ScopaLexer
from .runner import Interpreter, Outcome
from .types import ScpUnit
from .utils import ENV_DEBUG_PY_TRACE, debug_py_trace_enabled

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/reset": ("Reset the global environment", ""),
    "/mode": ("Show the scoping mode for the next program", ""),
}

_TOGGLE_WORDS = ("lexical", "dynamic")


class _ReplCompleter(Completer):
    """Autocomplete slash commands and the mode toggles on the primary prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text:
            return

        if text.startswith("/"):
            for cmd, (desc, hint) in _SLASH_CMDS.items():
                if cmd.startswith(text):
                    yield Completion(cmd, start_position=-len(text), display_meta=desc)
            return

        for word in _TOGGLE_WORDS:
            if word.startswith(text) and word != text:
                yield Completion(word, start_position=-len(text), display_meta="scoping mode")


def _handle_slash(line: str, interp: Interpreter) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/py-traceback":
        if arg.lower() in ("on", "1", "true", "yes"):
            os.environ[ENV_DEBUG_PY_TRACE] = "1"
        elif arg.lower() in ("off", "0", "false", "no"):
            os.environ.pop(ENV_DEBUG_PY_TRACE, None)
        elif arg == "":
            # Toggle.
            if debug_py_trace_enabled():
                os.environ.pop(ENV_DEBUG_PY_TRACE, None)
            else:
                os.environ[ENV_DEBUG_PY_TRACE] = "1"
        else:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        state = "on" if debug_py_trace_enabled() else "off"
        print(f"Python traceback: {state}")
        return True

    if cmd == "/reset":
        interp.reset()
        print("Environment reset.")
        return True

    if cmd == "/mode":
        print(f"Scoping: {interp.mode}")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def report(outcome: Outcome) -> None:
    if outcome.is_toggle:
        print(f"Scoping: {outcome.mode}")
        return

    if outcome.error is not None:
        exc = outcome.error
        print(f"Error: {exc}", file=sys.stderr)
        if debug_py_trace_enabled() and exc.__traceback__ is not None:
            print("\nPython traceback:", file=sys.stderr)
            print("".join(traceback.format_tb(exc.__traceback__)), file=sys.stderr, end="")
        return

    if not isinstance(outcome.value, ScpUnit):
        print(outcome.value)


def repl() -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    interp = Interpreter()

    session: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=ScopaLexer(),
        completer=_ReplCompleter(),
        complete_while_typing=True,
    )

    print(f"scopa repl ({interp.mode} scoping), Ctrl-D to exit, / for commands")

    while True:
        try:
            text = session.prompt(f"{interp.mode}> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if not text.strip():
            continue

        if text.strip() == "quit":
            break

        if _handle_slash(text, interp):
            continue

        report(interp.execute(text))


if __name__ == "__main__":
    repl()
