"""Diagnostics package."""

from .errors import (
    PatternDiagnostic,
    PatternSyntaxError,
    PatternBuildError,
)

__all__ = [
    "PatternDiagnostic",
    "PatternSyntaxError",
    "PatternBuildError",
]
