"""prompt_toolkit lexer for live Scopa syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from lark import Token
from lark.exceptions import UnexpectedCharacters
from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .mode import parse_toggle
from .parser import KEYWORDS, lex_source

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "constant": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "operator": "",
    "punctuation": "",
    "comment": "italic ansigray",
    "mode": "bold ansiblue",
    "error": "bold ansired",
}

_PUNCTUATION = frozenset("(){},;")


def token_group(tok: Token) -> str:
    text = str(tok)

    if tok.type == "COMMENT":
        return "comment"
    if text in ("true", "false"):
        return "boolean"
    if text == "unit":
        return "constant"
    if text in KEYWORDS:
        return "keyword"
    if tok.type == "NUMBER":
        return "number"
    if tok.type == "STRING":
        return "string"
    if tok.type == "NAME":
        return "identifier"
    if text in _PUNCTUATION:
        return "punctuation"
    return "operator"


def highlight_line(line: str) -> StyleAndTextTuples:
    if parse_toggle(line) is not None:
        return [(GROUP_STYLE["mode"], line)]

    fragments: StyleAndTextTuples = []
    pos = 0

    try:
        for tok in lex_source(line):
            start = tok.start_pos
            if start > pos:
                fragments.append(("", line[pos:start]))

            style = "" if tok.type == "WS" else GROUP_STYLE[token_group(tok)]
            fragments.append((style, str(tok)))
            pos = tok.end_pos
    except UnexpectedCharacters:
        # Unterminated strings and stray characters: paint the rest as an error.
        fragments.append((GROUP_STYLE["error"], line[pos:]))
        return fragments

    if pos < len(line):
        fragments.append(("", line[pos:]))

    return fragments


class ScopaLexer(Lexer):
    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        def get_line(lineno: int) -> StyleAndTextTuples:
            try:
                return highlight_line(lines[lineno])
            except IndexError:
                return []

        return get_line
