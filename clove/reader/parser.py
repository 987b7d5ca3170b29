"""
  Lisp Reader, Lexer and Parser

- Streaming, lazy parsing
- Emits the same values the evaluator works on (code is data):

    - nil / true / false -> Nil / True / False
    - (a b c)            -> List
    - [a b c]            -> Vector
    - {k v ...}          -> Map
    - symbols            -> Symbol
    - :name              -> Keyword
    - strings            -> str
    - numbers            -> int/float
    - 'x `x ~x ~@x       -> (quote x) (quasiquote x) (unquote x) (unquote-splicing x)

  Commas are whitespace; `;` starts a comment that runs to the end of the line.
"""

from __future__ import annotations

import re
from typing import Iterator, Optional

from clove import SExpression
from clove.types.collections import List, Map, Vector
from clove.types.errors import CloveSyntaxError
from clove.types.nil import Nil
from clove.types.symbol import Keyword, Symbol


TOKEN_RE = re.compile(
    r"[\s,]*(?:"
    r"(?P<comment>;[^\n]*)"  # single-line comment
    r"|(?P<quote>['`])"  # ' and `
    r"|(?P<unquote>~@|~)"  # ~ and ~@
    r"|(?P<lparen>\()"  # (
    r"|(?P<rparen>\))"  # )
    r"|(?P<lbracket>\[)"  # [
    r"|(?P<rbracket>\])"  # ]
    r"|(?P<lbrace>\{)"  # {
    r"|(?P<rbrace>\})"  # }
    r'|(?P<string>"(?:\\.|[^\\"])*")'  # double-quoted strings
    r"|(?P<symbol>[^\s,()\[\]{}'\"`~;]+)"  # fallback: symbols, numbers, keywords
    r")",
    re.DOTALL,
)

INT_RE = re.compile(r"[+-]?\d+\Z")
FLOAT_RE = re.compile(r"[+-]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?\Z")
ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)

QUOTE_FORMS: dict[str, Symbol] = {
    "'": Symbol("quote"),
    "`": Symbol("quasiquote"),
    "~": Symbol("unquote"),
    "~@": Symbol("unquote-splicing"),
}

ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
    '"': '"',
    "\\": "\\",
}

CLOSERS = {"lparen": "rparen", "lbracket": "rbracket", "lbrace": "rbrace"}


def lex(source: str) -> Iterator[tuple[str, str]]:
    """Token generator: yields (token_type, token_value) tuples."""
    pos = 0
    n = len(source)
    while pos < n:
        m = TOKEN_RE.match(source, pos)
        if m is None:
            if not source[pos:].strip(" \t\r\n,"):
                return
            raise CloveSyntaxError(f"Unexpected char at {pos}: {source[pos:pos + 10]!r}")
        pos = m.end()
        kind = m.lastgroup
        if kind == "comment":
            continue
        yield kind, m.group(kind)


def _unescape(body: str) -> str:
    def repl(m: re.Match) -> str:
        ch = m.group(1)
        if ch not in ESCAPES:
            raise CloveSyntaxError(f"Unsupported escape character: \\{ch}")
        return ESCAPES[ch]

    return ESCAPE_RE.sub(repl, body)


def read_atom(tok_val: str) -> SExpression:
    """Classify a bare token: nil/true/false, numbers, keywords, else a symbol."""
    if tok_val == "nil":
        return Nil
    if tok_val == "true":
        return True
    if tok_val == "false":
        return False
    if INT_RE.match(tok_val):
        return int(tok_val)
    if FLOAT_RE.match(tok_val):
        return float(tok_val)
    if tok_val.startswith(":"):
        if len(tok_val) == 1:
            raise CloveSyntaxError("Invalid keyword ':'")
        return Keyword(tok_val[1:])
    return Symbol(tok_val)


class TokenStream:
    def __init__(self, token_iter: Iterator[tuple[str, str]]):
        self.tokens = iter(token_iter)
        self.buffer: list[tuple[str, str]] = []

    def peek(self) -> tuple[Optional[str], Optional[str]]:
        if not self.buffer:
            try:
                self.buffer.append(next(self.tokens))
            except StopIteration:
                return None, None
        return self.buffer[0]

    def advance(self) -> tuple[Optional[str], Optional[str]]:
        if self.buffer:
            return self.buffer.pop(0)
        return next(self.tokens, (None, None))

    def _read_until(self, closer: str) -> list[SExpression]:
        items = []
        while True:
            tok_type, tok_val = self.peek()
            if tok_type is None:
                raise CloveSyntaxError(f"Unexpected EOF: expected {closer}")
            if tok_type == closer:
                self.advance()
                return items
            if tok_type in ("rparen", "rbracket", "rbrace"):
                raise CloveSyntaxError(f"Unmatched {tok_val!r}")
            items.append(self.parse_expr())

    def parse_expr(self) -> SExpression:
        """Parse one form; returns None (not Nil) once the input is exhausted."""
        tok_type, tok_val = self.peek()
        if tok_type is None:
            return None

        if tok_type == "symbol":
            self.advance()
            return read_atom(tok_val)

        # Quote forms
        if tok_type in ("quote", "unquote"):
            self.advance()
            if self.peek()[0] is None:
                raise CloveSyntaxError(f"Unexpected EOF after {tok_val!r}")
            expr = self.parse_expr()
            return List.from_iterable([QUOTE_FORMS[tok_val], expr])

        if tok_type == "lparen":
            self.advance()
            return List.from_iterable(self._read_until("rparen"))

        if tok_type == "lbracket":
            self.advance()
            return Vector(self._read_until("rbracket"))

        if tok_type == "lbrace":
            self.advance()
            items = self._read_until("rbrace")
            if len(items) % 2:
                raise CloveSyntaxError("Map literal must contain an even number of forms")
            return Map(zip(items[::2], items[1::2]))

        # String
        if tok_type == "string":
            self.advance()
            return _unescape(tok_val[1:-1])

        raise CloveSyntaxError(f"Unmatched {tok_val!r}")

    def parse_all(self) -> Iterator[SExpression]:
        while True:
            tok_type, _ = self.peek()
            if tok_type is None:
                break
            yield self.parse_expr()


def read_string(source: str) -> SExpression:
    """Read the first form in `source` (None if there is none)."""
    return TokenStream(lex(source)).parse_expr()
