"""
Diagnostics raised while parsing or building route patterns.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ..compiler.ast_nodes import Span


@dataclass
class PatternDiagnostic:
    """Message plus optional location in the offending pattern."""
    message: str
    span: Optional[Span] = None
    pattern: Optional[str] = None
    suggestions: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        return self.message

    def format(self) -> str:
        """Multi-line rendering with a caret under the offending position."""
        lines = [f"{type(self).__name__}: {self.message}"]

        if self.span is not None:
            if self.pattern is None:
                lines.append(f"  --> {self.span}")
            else:
                lines.append(f"  --> {self.pattern}")
                lines.append(" " * (6 + self.span.start) + "^")

        if self.suggestions:
            lines.append("\nSuggestions:")
            lines.extend(f"  {n}) {text}" for n, text in enumerate(self.suggestions, 1))

        return "\n".join(lines)


class PatternSyntaxError(PatternDiagnostic, Exception):
    """Malformed route template."""


class PatternBuildError(PatternDiagnostic, Exception):
    """Parameters supplied to a compiled pattern cannot produce a path."""

    def __init__(self, message: str, param: str, **kwargs):
        super().__init__(message, **kwargs)
        self.param = param
