from __future__ import annotations

import os
from typing import Optional

from .mode import DEFAULT_MAX_DEPTH, DEFAULT_MODE, ScopingMode, parse_mode
from .types import (
    ScpBool,
    ScpBuiltin,
    ScpClosure,
    ScpNumber,
    ScpString,
    ScpUnit,
    ScpValue,
)

ENV_SCOPING = "SCOPA_SCOPING"
ENV_MAX_DEPTH = "SCOPA_MAX_DEPTH"
ENV_DEBUG_PY_TRACE = "SCOPA_DEBUG_PY_TRACE"

_TRUTHY_FLAGS = {"1", "true", "yes", "on"}


def debug_py_trace_enabled() -> bool:
    return os.environ.get(ENV_DEBUG_PY_TRACE, "").strip().lower() in _TRUTHY_FLAGS


def default_mode_from_env() -> ScopingMode:
    raw = os.environ.get(ENV_SCOPING)
    if raw is None or not raw.strip():
        return DEFAULT_MODE

    return parse_mode(raw)


def max_depth_from_env() -> int:
    raw = os.environ.get(ENV_MAX_DEPTH)
    if raw is None or not raw.strip():
        return DEFAULT_MAX_DEPTH

    try:
        depth = int(raw)
    except ValueError:
        raise ValueError(f"{ENV_MAX_DEPTH} must be an integer; got {raw!r}") from None

    if depth < 1:
        raise ValueError(f"{ENV_MAX_DEPTH} must be positive; got {depth}")

    return depth


def scp_equals(lhs: ScpValue, rhs: ScpValue) -> bool:
    match (lhs, rhs):
        case (ScpUnit(), ScpUnit()):
            return True
        case (ScpNumber(value=a), ScpNumber(value=b)):
            return a == b
        case (ScpString(value=a), ScpString(value=b)):
            return a == b
        case (ScpBool(value=a), ScpBool(value=b)):
            return a == b
        case (ScpClosure(), ScpClosure()) | (ScpBuiltin(), ScpBuiltin()):
            return lhs is rhs
        case _:
            return False


def stringify(value: Optional[ScpValue]) -> str:
    if isinstance(value, ScpString):
        return value.value

    if value is None:
        return "unit"

    return repr(value)
