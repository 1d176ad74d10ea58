"""Lark-based front end: source text to `scopa.tree` nodes."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, Optional, Tuple

from lark import Lark, Token, Transformer, UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken
from lark.exceptions import VisitError
from lark.visitors import v_args

from .tree import Assign, Call, Define, If, Lambda, Let, Literal, Node, Sequence, Span, Variable
from .types import FALSE, TRUE, UNIT, ScpNumber, ScpString

GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")

KEYWORDS = frozenset({
    "let", "in", "lambda", "fn", "if", "then", "else", "set", "def",
    "and", "or", "not", "true", "false", "unit",
})

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", '"': '"', "\\": "\\"}

_PARSER: Optional[Lark] = None


class ParseError(Exception):
    """Parse error with position info"""
    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(
            f"{message} at line {line}, col {column}" if line is not None else message
        )


def _span(meta: object) -> Optional[Span]:
    return Span.from_meta(meta)


def unescape_string(raw: str) -> str:
    body = raw[1:-1]
    out = []
    chars = iter(body)

    for ch in chars:
        if ch != "\\":
            out.append(ch)
            continue

        nxt = next(chars, "")
        if nxt not in _ESCAPES:
            raise ParseError(f"Unknown escape sequence '\\{nxt}'")
        out.append(_ESCAPES[nxt])

    return "".join(out)


def _binary(symbol: str):
    def build(self, meta, lhs: Node, rhs: Node) -> Call:
        span = _span(meta)
        return Call(Variable(symbol, span), (lhs, rhs), span)

    return build


def _unary(name: str):
    def build(self, meta, operand: Node) -> Call:
        span = _span(meta)
        return Call(Variable(name, span), (operand,), span)

    return build


@v_args(meta=True, inline=True)
class AstBuilder(Transformer):
    """Turns the lark parse tree into immutable AST nodes."""

    def program(self, meta, *exprs: Node) -> Node:
        if len(exprs) == 1:
            return exprs[0]
        return Sequence(tuple(exprs), _span(meta))

    def block(self, meta, *exprs: Node) -> Sequence:
        return Sequence(tuple(exprs), _span(meta))

    def let_expr(self, meta, name: Token, value: Node, body: Node) -> Let:
        return Let(str(name), value, body, _span(meta))

    def lambda_expr(self, meta, *children) -> Lambda:
        *rest, body = children
        params: Tuple[str, ...] = rest[0] if rest else ()
        return Lambda(params, body, _span(meta))

    def params(self, meta, *names: Token) -> Tuple[str, ...]:
        return tuple(str(n) for n in names)

    def if_expr(self, meta, cond: Node, then: Node, orelse: Node) -> If:
        return If(cond, then, orelse, _span(meta))

    def assign_expr(self, meta, name: Token, value: Node) -> Assign:
        return Assign(str(name), value, _span(meta))

    def define_expr(self, meta, name: Token, value: Node) -> Define:
        return Define(str(name), value, _span(meta))

    def and_(self, meta, lhs: Node, rhs: Node) -> If:
        return If(lhs, rhs, Literal(FALSE), _span(meta))

    def or_(self, meta, lhs: Node, rhs: Node) -> If:
        return If(lhs, Literal(TRUE), rhs, _span(meta))

    eq = _binary("==")
    ne = _binary("!=")
    lt = _binary("<")
    le = _binary("<=")
    gt = _binary(">")
    ge = _binary(">=")
    add = _binary("+")
    sub = _binary("-")
    mul = _binary("*")
    div = _binary("/")
    mod = _binary("%")

    neg = _unary("neg")
    not_ = _unary("not")

    def call(self, meta, callee: Node, *rest) -> Call:
        args: Tuple[Node, ...] = rest[0] if rest else ()
        return Call(callee, args, _span(meta))

    def args(self, meta, *exprs: Node) -> Tuple[Node, ...]:
        return tuple(exprs)

    def number(self, meta, tok: Token) -> Literal:
        return Literal(ScpNumber(float(tok)), _span(meta))

    def string(self, meta, tok: Token) -> Literal:
        try:
            text = unescape_string(str(tok))
        except ParseError as exc:
            raise ParseError(exc.message, tok.line, tok.column) from None
        return Literal(ScpString(text), _span(meta))

    def true(self, meta) -> Literal:
        return Literal(TRUE, _span(meta))

    def false(self, meta) -> Literal:
        return Literal(FALSE, _span(meta))

    def unit(self, meta) -> Literal:
        return Literal(UNIT, _span(meta))

    def var(self, meta, tok: Token) -> Variable:
        return Variable(str(tok), _span(meta))


def make_parser(grammar_path: Optional[str] = None) -> Lark:
    path = Path(grammar_path) if grammar_path else GRAMMAR_PATH
    grammar = path.read_text(encoding="utf-8")

    return Lark(
        grammar,
        parser="lalr",
        lexer="basic",
        start="start",
        maybe_placeholders=False,
        propagate_positions=True,
    )


def get_parser() -> Lark:
    global _PARSER

    if _PARSER is None:
        _PARSER = make_parser()

    return _PARSER


def _describe(exc: UnexpectedInput) -> str:
    if isinstance(exc, UnexpectedEOF):
        return "Unexpected end of input"

    if isinstance(exc, UnexpectedToken):
        if exc.token.type == "$END":
            return "Unexpected end of input"
        return f"Unexpected token {str(exc.token)!r}"

    if isinstance(exc, UnexpectedCharacters):
        return f"Unexpected character {exc.char!r}"

    return "Syntax error"


def parse_source(src: str) -> Node:
    try:
        tree = get_parser().parse(src)
    except UnexpectedInput as exc:
        line = getattr(exc, "line", None)
        column = getattr(exc, "column", None)
        if line is not None and line < 0:
            line = column = None
        raise ParseError(_describe(exc), line, column) from None
    except RecursionError:
        raise ParseError("Program nested too deeply") from None

    # AstBuilder recurses once per nesting level of the parse tree.
    try:
        return AstBuilder().transform(tree)
    except RecursionError:
        raise ParseError("Program nested too deeply") from None
    except VisitError as exc:
        if isinstance(exc.orig_exc, ParseError):
            raise exc.orig_exc from None
        if isinstance(exc.orig_exc, RecursionError):
            raise ParseError("Program nested too deeply") from None
        raise


def lex_source(src: str, dont_ignore: bool = True) -> Iterator[Token]:
    """Yield raw tokens (whitespace and comments included by default)."""
    return get_parser().lex(src, dont_ignore=dont_ignore)
