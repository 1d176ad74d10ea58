from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, List, Optional, Tuple
from typing_extensions import TypeAlias

if TYPE_CHECKING:
    from .tree import Node, Span

# ---------- Value Model ----------

@dataclass(frozen=True)
class ScpUnit:
    def __repr__(self) -> str:
        return "unit"

@dataclass(frozen=True)
class ScpNumber:
    value: float
    def __repr__(self) -> str:
        v = float(self.value)
        return str(int(v)) if v.is_integer() else str(v)

@dataclass(frozen=True)
class ScpBool:
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

@dataclass(frozen=True)
class ScpString:
    value: str
    def __repr__(self) -> str:
        escaped = self.value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'

@dataclass(eq=False)
class ScpClosure:
    params: Tuple[str, ...]
    body: 'Node'               # shared with the program AST
    frame: Optional[int]       # captured frame handle; None when created in dynamic mode
    def __repr__(self) -> str:
        captured = "" if self.frame is None else f" @{self.frame}"
        return f"<lambda ({', '.join(self.params)}){captured}>"

BuiltinFn = Callable[[List['ScpValue']], 'ScpValue']

@dataclass(frozen=True, eq=False)
class ScpBuiltin:
    name: str
    fn: BuiltinFn
    arity: Optional[int] = None  # None accepts any count
    def __repr__(self) -> str:
        return f"<builtin {self.name}>"

ScpValue: TypeAlias = (
    ScpUnit
    | ScpNumber
    | ScpBool
    | ScpString
    | ScpClosure
    | ScpBuiltin
)

UNIT = ScpUnit()
TRUE = ScpBool(True)
FALSE = ScpBool(False)

def is_callable_value(value: ScpValue) -> bool:
    return isinstance(value, (ScpClosure, ScpBuiltin))

def type_name(value: object) -> str:
    match value:
        case ScpUnit():
            return "Unit"
        case ScpNumber():
            return "Number"
        case ScpBool():
            return "Boolean"
        case ScpString():
            return "String"
        case ScpClosure():
            return "Closure"
        case ScpBuiltin():
            return "Builtin"
        case _:
            return type(value).__name__

# ---------- Exceptions ----------

class ScopaRuntimeError(Exception):
    meta: Optional['Span']

    def __init__(self, message: str):
        super().__init__(message)
        self.meta = None

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        msg = super().__str__()

        if self.meta is None:
            return msg

        return f"{msg} ({self.meta})"

class ScopaUnboundVariable(ScopaRuntimeError):
    def __init__(self, name: str):
        super().__init__(f"Unbound variable '{name}'")
        self.name = name

class ScopaNotCallable(ScopaRuntimeError):
    def __init__(self, value: ScpValue):
        super().__init__(f"{type_name(value)} value {value!r} is not callable")
        self.value = value

class ScopaArityError(ScopaRuntimeError):
    def __init__(self, expected: int, got: int, callee: str = "Function"):
        super().__init__(f"{callee} expects {expected} args; got {got}")
        self.expected = expected
        self.got = got

class ScopaTypeError(ScopaRuntimeError):
    def __init__(self, expected: str, got: str, context: Optional[str] = None):
        prefix = f"{context}: " if context else ""
        super().__init__(f"{prefix}expected {expected}, got {got}")
        self.expected = expected
        self.got = got

class ScopaZeroDivisionError(ScopaRuntimeError):
    pass

class ScopaResourceExhausted(ScopaRuntimeError):
    def __init__(self, message: str = "Recursion depth exceeded", depth: Optional[int] = None):
        super().__init__(message)
        self.depth = depth
