"""Compiler package for route patterns."""

from .parser import PatternParser, PatternToken, parse_pattern
from .ast_nodes import PatternAST, StaticSegment, TokenSegment, Span
from .compiler import PatternCompiler, CompiledPattern, escape_path_segment

__all__ = [
    "PatternParser",
    "PatternToken",
    "parse_pattern",
    "PatternAST",
    "StaticSegment",
    "TokenSegment",
    "Span",
    "PatternCompiler",
    "CompiledPattern",
    "escape_path_segment",
]
