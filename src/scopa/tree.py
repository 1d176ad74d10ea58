"""AST node classes for Scopa programs.

Nodes are frozen dataclasses forming a closed variant; the evaluator matches
on them exhaustively. Source spans ride along for error reporting but never
take part in equality.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional, Set, Tuple
from typing_extensions import TypeAlias

from .types import ScpValue


@dataclass(frozen=True)
class Span:
    line: int
    column: int

    @classmethod
    def from_meta(cls, meta: object) -> Optional[Span]:
        line = getattr(meta, "line", None)
        if line is None:
            return None
        return cls(line, getattr(meta, "column", 1))

    def __str__(self) -> str:
        return f"line {self.line}, col {self.column}"


@dataclass(frozen=True)
class Literal:
    value: ScpValue
    meta: Optional[Span] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Variable:
    name: str
    meta: Optional[Span] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Let:
    name: str
    value: Node
    body: Node
    meta: Optional[Span] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Lambda:
    params: Tuple[str, ...]
    body: Node
    meta: Optional[Span] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Call:
    callee: Node
    args: Tuple[Node, ...]
    meta: Optional[Span] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class If:
    cond: Node
    then: Node
    orelse: Node
    meta: Optional[Span] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Assign:
    name: str
    value: Node
    meta: Optional[Span] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Define:
    name: str
    value: Node
    meta: Optional[Span] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Sequence:
    exprs: Tuple[Node, ...]
    meta: Optional[Span] = field(default=None, compare=False, repr=False)


Node: TypeAlias = Literal | Variable | Let | Lambda | Call | If | Assign | Define | Sequence

NODE_TYPES: Tuple[type, ...] = (Literal, Variable, Let, Lambda, Call, If, Assign, Define, Sequence)


def is_node(value: object) -> bool:
    return isinstance(value, NODE_TYPES)


def node_meta(node: Node) -> Optional[Span]:
    return getattr(node, "meta", None)


def node_children(node: Node) -> Tuple[Node, ...]:
    match node:
        case Literal() | Variable():
            return ()
        case Let(value=value, body=body):
            return (value, body)
        case Lambda(body=body):
            return (body,)
        case Call(callee=callee, args=args):
            return (callee, *args)
        case If(cond=cond, then=then, orelse=orelse):
            return (cond, then, orelse)
        case Assign(value=value) | Define(value=value):
            return (value,)
        case Sequence(exprs=exprs):
            return exprs
        case _:
            raise TypeError(f"Not an AST node: {type(node).__name__}")


def walk(node: Node) -> Iterator[Node]:
    """Pre-order traversal of *node* and all of its descendants."""
    stack = [node]

    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(node_children(current)))


def contains_lambda(node: Node) -> bool:
    return any(isinstance(n, Lambda) for n in walk(node))


def free_variables(node: Node, bound: Optional[Set[str]] = None) -> Set[str]:
    """Names referenced in *node* that no enclosing Let/Lambda inside it binds.

    `Define` is not treated as binding, since it writes into whatever frame is
    current at runtime.
    """
    bound = set() if bound is None else bound

    match node:
        case Literal():
            return set()
        case Variable(name=name):
            return set() if name in bound else {name}
        case Let(name=name, value=value, body=body):
            return free_variables(value, bound) | free_variables(body, bound | {name})
        case Lambda(params=params, body=body):
            return free_variables(body, bound | set(params))
        case Assign(name=name, value=value) | Define(name=name, value=value):
            names = free_variables(value, bound)
            if name not in bound and isinstance(node, Assign):
                names.add(name)
            return names
        case _:
            names: Set[str] = set()
            for child in node_children(node):
                names |= free_variables(child, bound)
            return names
