"""
AST node definitions for route patterns.

These nodes represent the parsed structure of a route template such as
``/users/:id`` or ``/files/:name.:ext?``.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass
class Span:
    """Source span for diagnostics."""
    start: int
    end: int
    line: int = 1
    column: int = 1

    def __repr__(self) -> str:
        return f"Line {self.line}:{self.column} (pos {self.start}-{self.end})"


@dataclass
class StaticSegment:
    """Literal text copied verbatim into the built path."""
    value: str = ""
    span: Optional[Span] = None


@dataclass
class TokenSegment:
    """
    Named parameter.

    ``prefix`` is the ``/`` or ``.`` that immediately preceded the token in
    the source; it is emitted only when the parameter has a value.
    """
    name: str = ""
    prefix: str = ""
    optional: bool = False
    span: Optional[Span] = None


Segment = Union[StaticSegment, TokenSegment]


@dataclass
class PatternAST:
    """Complete AST for a route pattern."""
    raw: str
    segments: List[Segment] = field(default_factory=list)
