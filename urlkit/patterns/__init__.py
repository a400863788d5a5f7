"""
Route pattern language for urlkit.

Turns templates such as ``/users/:id`` or ``/posts/:slug?`` into builders
that substitute path-escaped parameter values:

    >>> compile_pattern("/users/:id").build({"id": "42"})
    '/users/42'
"""

from .compiler.parser import PatternParser, PatternToken, parse_pattern
from .compiler.ast_nodes import PatternAST, StaticSegment, TokenSegment
from .compiler.compiler import PatternCompiler, CompiledPattern, escape_path_segment
from .diagnostics.errors import (
    PatternDiagnostic,
    PatternSyntaxError,
    PatternBuildError,
)
from .cache import PatternCache, compile_pattern, get_global_cache, set_global_cache

__all__ = [
    # Parser
    "PatternParser",
    "PatternToken",
    "parse_pattern",
    # AST
    "PatternAST",
    "StaticSegment",
    "TokenSegment",
    # Compiler
    "PatternCompiler",
    "CompiledPattern",
    "escape_path_segment",
    # Diagnostics
    "PatternDiagnostic",
    "PatternSyntaxError",
    "PatternBuildError",
    # Cache
    "PatternCache",
    "compile_pattern",
    "get_global_cache",
    "set_global_cache",
]
