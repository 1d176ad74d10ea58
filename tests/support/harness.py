from __future__ import annotations

from typing import Optional, Tuple

import pytest

from scopa.mode import ScopingMode
from scopa.runner import run as run_program
from scopa.types import (
    ScpBool,
    ScpBuiltin,
    ScpClosure,
    ScpNumber,
    ScpString,
    ScpUnit,
)

RuntimeExpectation = Optional[Tuple[str, object]]

LEXICAL = ScopingMode.LEXICAL
DYNAMIC = ScopingMode.DYNAMIC
BOTH_MODES = (LEXICAL, DYNAMIC)


def verify_result(value: object, kind: str, expected: object) -> None:
    """Assert a runtime result has the expected value kind and payload."""
    match kind:
        case "string":
            assert isinstance(
                value, ScpString
            ), f"expected ScpString, got {type(value).__name__}"
            assert (
                value.value == expected
            ), f"expected {expected!r}, got {value.value!r}"
            return
        case "number":
            assert isinstance(
                value, ScpNumber
            ), f"expected number, got {type(value).__name__}"
            assert (
                abs(value.value - float(expected)) <= 1e-9
            ), f"expected {expected}, got {value.value}"
            return
        case "bool":
            assert isinstance(
                value, ScpBool
            ), f"expected bool, got {type(value).__name__}"
            assert bool(value.value) == bool(
                expected
            ), f"expected {expected}, got {value.value}"
            return
        case "unit":
            assert isinstance(
                value, ScpUnit
            ), f"expected ScpUnit, got {type(value).__name__}"
            return
        case "closure":
            assert isinstance(
                value, ScpClosure
            ), f"expected ScpClosure, got {type(value).__name__}"
            assert (
                value.params == tuple(expected)
            ), f"expected params {expected!r}, got {value.params!r}"
            return
        case "builtin":
            assert isinstance(
                value, ScpBuiltin
            ), f"expected ScpBuiltin, got {type(value).__name__}"
            assert value.name == expected, f"expected {expected!r}, got {value.name!r}"
            return
        case _:
            raise AssertionError(f"unknown expectation kind {kind}")


def run_runtime_case(
    source: str,
    expectation: RuntimeExpectation,
    expected_exc: Optional[type],
    mode: ScopingMode = DYNAMIC,
) -> None:
    """Execute one runtime scenario with optional expected exception."""
    if expected_exc is not None:
        with pytest.raises(expected_exc):
            run_program(source, mode=mode)
        return

    result = run_program(source, mode=mode)
    if expectation is not None:
        verify_result(result, expectation[0], expectation[1])
