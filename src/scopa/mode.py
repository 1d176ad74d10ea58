"""Scoping-mode selection.

A session reads its mode exactly once, from the `SessionConfig` it is built
with. The command loop owns a `ModeController`; toggling it only changes the
config handed to sessions started afterwards.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ScopingMode(Enum):
    LEXICAL = "lexical"
    DYNAMIC = "dynamic"

    def __str__(self) -> str:
        return self.value


DEFAULT_MODE = ScopingMode.DYNAMIC
DEFAULT_MAX_DEPTH = 10_000


@dataclass(frozen=True)
class SessionConfig:
    mode: ScopingMode = DEFAULT_MODE
    max_depth: int = DEFAULT_MAX_DEPTH


def parse_mode(text: str) -> ScopingMode:
    try:
        return ScopingMode(text.strip().lower())
    except ValueError:
        raise ValueError(f"Unknown scoping mode {text!r}; expected 'lexical' or 'dynamic'") from None


def parse_toggle(text: str) -> Optional[ScopingMode]:
    """Return the mode named by a toggle command, or None for program text.

    Only the exact words `lexical` and `dynamic` are commands.
    """
    stripped = text.strip()

    for mode in ScopingMode:
        if stripped == mode.value:
            return mode

    return None


class ModeController:
    def __init__(self, mode: ScopingMode = DEFAULT_MODE, max_depth: int = DEFAULT_MAX_DEPTH):
        self._mode = mode
        self.max_depth = max_depth

    @property
    def mode(self) -> ScopingMode:
        return self._mode

    def set(self, mode: ScopingMode) -> None:
        self._mode = mode

    def toggle(self, text: str) -> Optional[ScopingMode]:
        mode = parse_toggle(text)
        if mode is not None:
            self._mode = mode
        return mode

    def snapshot(self) -> SessionConfig:
        return SessionConfig(mode=self._mode, max_depth=self.max_depth)
