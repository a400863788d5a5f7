"""
Tokenizer and parser for route patterns.

Grammar:

    pattern   := ( static | param )*
    param     := ":" name [ "?" ]
    name      := [A-Za-z0-9_]+
    static    := any run of characters other than ":" and "?"

A ``/`` or ``.`` written immediately before a parameter becomes that
parameter's prefix, so ``/users/:id?`` builds ``/users`` when ``id`` is absent.
"""

from dataclasses import dataclass
from typing import List, Optional, Any
from enum import Enum

from .ast_nodes import (
    PatternAST,
    StaticSegment,
    TokenSegment,
    Span,
    Segment,
)
from ..diagnostics.errors import PatternSyntaxError


PREFIX_CHARS = "/."


def _is_name_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch == "_")


class TokenType(str, Enum):
    """Token types for the lexer."""
    STATIC = "STATIC"
    PARAM = "PARAM"
    QUESTION = "QUESTION"
    EOF = "EOF"


@dataclass
class PatternToken:
    """A lexical token with position information."""
    type: TokenType
    value: Any
    span: Span

    def __repr__(self) -> str:
        return f"{self.type}('{self.value}') at {self.span}"


class Tokenizer:
    """Tokenizer for route patterns."""

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.tokens: List[PatternToken] = []

    def error(self, message: str) -> PatternSyntaxError:
        """Create syntax error at current position."""
        return PatternSyntaxError(
            message=message,
            span=Span(self.pos, self.pos + 1, 1, self.pos + 1),
            pattern=self.source,
        )

    def peek(self, offset: int = 0) -> Optional[str]:
        pos = self.pos + offset
        return self.source[pos] if pos < len(self.source) else None

    def read_name(self) -> str:
        start = self.pos
        while self.peek() is not None and _is_name_char(self.peek()):
            self.pos += 1
        return self.source[start:self.pos]

    def read_static(self) -> str:
        start = self.pos
        while self.peek() is not None and self.peek() not in ":?":
            self.pos += 1
        return self.source[start:self.pos]

    def tokenize(self) -> List[PatternToken]:
        """Tokenize the source into tokens."""
        self.tokens = []

        while self.pos < len(self.source):
            start = self.pos
            ch = self.peek()

            if ch == ":":
                self.pos += 1
                name = self.read_name()
                if not name:
                    raise self.error(f"Missing parameter name at {start}")
                self.tokens.append(PatternToken(
                    TokenType.PARAM,
                    name,
                    Span(start, self.pos, 1, start + 1),
                ))
            elif ch == "?":
                self.pos += 1
                self.tokens.append(PatternToken(
                    TokenType.QUESTION,
                    "?",
                    Span(start, self.pos, 1, start + 1),
                ))
            else:
                self.tokens.append(PatternToken(
                    TokenType.STATIC,
                    self.read_static(),
                    Span(start, self.pos, 1, start + 1),
                ))

        self.tokens.append(PatternToken(
            TokenType.EOF,
            None,
            Span(self.pos, self.pos, 1, self.pos + 1),
        ))

        return self.tokens


class PatternParser:
    """Parser turning a token stream into a PatternAST."""

    def __init__(self, tokens: List[PatternToken], source: str = ""):
        self.tokens = tokens
        self.source = source
        self.pos = 0

    def error(self, message: str) -> PatternSyntaxError:
        """Create syntax error at current token."""
        return PatternSyntaxError(
            message=message,
            span=self.current().span,
            pattern=self.source,
        )

    def current(self) -> PatternToken:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else self.tokens[-1]

    def advance(self) -> PatternToken:
        token = self.current()
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return token

    def match(self, *token_types: TokenType) -> bool:
        return self.current().type in token_types

    def parse(self, raw: str) -> PatternAST:
        """Parse tokens into AST."""
        segments: List[Segment] = []
        seen: set[str] = set()
        pending = ""

        while not self.match(TokenType.EOF):
            token = self.current()

            if token.type == TokenType.STATIC:
                pending += token.value
                self.advance()
                continue

            if token.type == TokenType.QUESTION:
                raise self.error(f"Unexpected '?' at {token.span.start}: only parameters can be optional")

            # PARAM
            if token.value in seen:
                raise self.error(f"Duplicate parameter name {token.value!r}")
            seen.add(token.value)

            prefix = ""
            if pending and pending[-1] in PREFIX_CHARS:
                prefix = pending[-1]
                pending = pending[:-1]
            if pending:
                segments.append(StaticSegment(value=pending))
                pending = ""

            self.advance()
            optional = False
            if self.match(TokenType.QUESTION):
                optional = True
                self.advance()

            segments.append(TokenSegment(
                name=token.value,
                prefix=prefix,
                optional=optional,
                span=token.span,
            ))

        if pending:
            segments.append(StaticSegment(value=pending))

        return PatternAST(raw=raw, segments=segments)


def parse_pattern(source: str) -> PatternAST:
    """Parse a route pattern into an AST."""
    tokenizer = Tokenizer(source)
    tokens = tokenizer.tokenize()
    parser = PatternParser(tokens, source)
    return parser.parse(source)
