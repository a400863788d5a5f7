"""
Compiler that transforms a PatternAST into a path builder.
"""

from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional
from urllib.parse import quote

from .ast_nodes import PatternAST, StaticSegment
from ..diagnostics.errors import PatternBuildError


# Characters left unescaped inside a path segment, on top of the
# unreserved set that ``quote`` never escapes.
PATH_SAFE = "$&+:=@"


def escape_path_segment(value: str) -> str:
    """Percent-encode ``value`` for use as a single path segment."""
    return quote(value, safe=PATH_SAFE)


@dataclass
class CompiledPattern:
    """Compiled route pattern, ready to build concrete paths."""
    raw: str
    ast: PatternAST
    encode: Callable[[str], str] = escape_path_segment

    def build(self, params: Optional[Mapping[str, Any]] = None) -> str:
        """
        Substitute ``params`` into the pattern.

        Values are path-escaped. Optional parameters that are absent, ``None``
        or empty are dropped together with their prefix.

        Raises:
            PatternBuildError: a required parameter is missing or empty
        """
        params = params or {}
        parts: List[str] = []

        for segment in self.ast.segments:
            if isinstance(segment, StaticSegment):
                parts.append(segment.value)
                continue

            value = params.get(segment.name)
            if value is None or value == "":
                if segment.optional:
                    continue
                if value is None:
                    raise PatternBuildError(
                        f'Expected "{segment.name}" to be a string',
                        param=segment.name,
                        pattern=self.raw,
                        span=segment.span,
                    )
                raise PatternBuildError(
                    f'Expected "{segment.name}" to be non-empty',
                    param=segment.name,
                    pattern=self.raw,
                    span=segment.span,
                )

            parts.append(segment.prefix + self.encode(str(value)))

        return "".join(parts)


class PatternCompiler:
    """Compiles PatternAST into CompiledPattern."""

    def __init__(self, encode: Callable[[str], str] = escape_path_segment):
        self.encode = encode

    def compile(self, ast: PatternAST) -> CompiledPattern:
        """Compile AST into executable pattern."""
        return CompiledPattern(
            raw=ast.raw,
            ast=ast,
            encode=self.encode,
        )
