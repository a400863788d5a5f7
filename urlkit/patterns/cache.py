"""
Caching layer for compiled route patterns.

Groups recompile their routes whenever routes are added or overwritten.
Many groups share the same templates (``/``, ``/:id``), so compiled
patterns are kept in a bounded LRU keyed by the raw template string.
"""

import threading
from collections import OrderedDict
from dataclasses import dataclass, replace
from typing import Optional

from .compiler.compiler import CompiledPattern, PatternCompiler
from .compiler.parser import parse_pattern


@dataclass
class CacheStats:
    """Counters for one cache; ``errors`` counts failed compilations."""
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    errors: int = 0


class PatternCache:
    """Thread-safe LRU of compiled patterns. ``max_size <= 0`` disables storage."""

    def __init__(self, max_size: int = 1024):
        self.max_size = max_size
        self._entries: "OrderedDict[str, CompiledPattern]" = OrderedDict()
        self._lock = threading.RLock()
        self._stats = CacheStats()
        self._compiler = PatternCompiler()

    def get(self, pattern: str) -> Optional[CompiledPattern]:
        with self._lock:
            if pattern not in self._entries:
                self._stats.misses += 1
                return None
            self._entries.move_to_end(pattern)
            self._stats.hits += 1
            return self._entries[pattern]

    def put(self, pattern: str, compiled: CompiledPattern):
        if self.max_size <= 0:
            return
        with self._lock:
            self._entries[pattern] = compiled
            self._entries.move_to_end(pattern)
            while len(self._entries) > self.max_size:
                self._entries.popitem(last=False)
                self._stats.evictions += 1

    def compile_with_cache(self, pattern: str) -> CompiledPattern:
        """
        Return the compiled form of ``pattern``, compiling on a miss.

        Raises:
            PatternSyntaxError: Invalid pattern syntax
        """
        compiled = self.get(pattern)
        if compiled is not None:
            return compiled

        try:
            compiled = self._compiler.compile(parse_pattern(pattern))
        except Exception:
            with self._lock:
                self._stats.errors += 1
            raise

        self.put(pattern, compiled)
        return compiled

    def invalidate(self, pattern: Optional[str] = None):
        """Drop one pattern, or everything when ``pattern`` is None."""
        with self._lock:
            if pattern is None:
                self._entries.clear()
            else:
                self._entries.pop(pattern, None)

    def get_stats(self) -> CacheStats:
        """Snapshot of the counters."""
        with self._lock:
            return replace(self._stats)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, pattern: str) -> bool:
        with self._lock:
            return pattern in self._entries


_shared_cache: Optional[PatternCache] = None
_shared_lock = threading.Lock()


def get_global_cache() -> PatternCache:
    """Process-wide cache, created on first use."""
    global _shared_cache
    with _shared_lock:
        if _shared_cache is None:
            _shared_cache = PatternCache()
        return _shared_cache


def set_global_cache(cache: Optional[PatternCache]):
    """Replace the process-wide cache; ``None`` resets it to a fresh one on next use."""
    global _shared_cache
    with _shared_lock:
        _shared_cache = cache


def compile_pattern(pattern: str, use_cache: bool = True) -> CompiledPattern:
    """
    Compile a route pattern such as ``/users/:id``.

    Raises:
        PatternSyntaxError: Invalid pattern syntax
    """
    if not use_cache:
        return PatternCompiler().compile(parse_pattern(pattern))
    return get_global_cache().compile_with_cache(pattern)
