"""
URL Utilities for urlkit.

Separator policy: every run of duplicate ``/`` is collapsed. Empty segments
never survive a join, so ``join_url_path("/", "/x")`` is ``"/x"``.
"""

from typing import Mapping, Optional
from urllib.parse import quote_plus, urlsplit, urlunsplit


def split_path_segments(path: str) -> tuple[list[str], bool, bool]:
    """
    Split a path into its non-empty segments.

    Returns:
        ``(segments, has_trailing_slash, is_root)`` where ``is_root`` is True
        for a non-empty path made only of slashes.
    """
    if not path:
        return [], False, False

    segments = [s for s in path.split("/") if s]
    return segments, path.endswith("/"), not segments


def longest_overlap(prefix: list[str], route: list[str]) -> int:
    """
    Length of the longest suffix of ``prefix`` that is also a prefix of ``route``.

    Example:
        longest_overlap(["api", "v1"], ["v1", "users"]) -> 1
    """
    for size in range(min(len(prefix), len(route)), 0, -1):
        if prefix[-size:] == route[:size]:
            return size
    return 0


def join_url_path(prefix: str, route: str) -> str:
    """
    Merge an accumulated group prefix with a compiled route path.

    Segments the route repeats from the end of the prefix are emitted once,
    the result carries exactly one leading slash and keeps the route's
    trailing slash.

    Example:
        join_url_path("/api/v1", "/v1/users/") -> "/api/v1/users/"
    """
    prefix_segments, _, prefix_is_root = split_path_segments(prefix)
    route_segments, route_has_trailing, route_is_root = split_path_segments(route)

    overlap = longest_overlap(prefix_segments, route_segments)
    merged = prefix_segments + route_segments[overlap:]

    if not merged:
        if prefix_is_root or route_is_root:
            return "/"
        return ""

    path = "/" + "/".join(merged)
    if route_has_trailing:
        path += "/"
    return path


def encode_query_pair(key: str, value: str) -> str:
    """Encode one ``key=value`` pair for a query string."""
    return quote_plus(key) + "=" + quote_plus(value)


def join_url(base: str, path: str = "", *queries: Optional[Mapping[str, str]]) -> str:
    """
    Attach a path and query parameters to a base URL.

    An absolute ``path`` replaces the base URL's path, a relative one is
    appended after a slash. Each query mapping is emitted in sorted key order
    and appended to any query string already on ``base``.

    Example:
        join_url("http://example.com?existing=1", "/foo", {"a": "1"})
        -> "http://example.com/foo?existing=1&a=1"
    """
    try:
        scheme, netloc, base_path, query, fragment = urlsplit(base)
    except ValueError:
        scheme, netloc, base_path, query, fragment = "", "", base, "", ""

    if path:
        if path.startswith("/"):
            base_path = path
        else:
            if not base_path.endswith("/"):
                base_path += "/"
            base_path += path

    pairs = []
    for q in queries:
        if not q:
            continue
        for key in sorted(q):
            pairs.append(encode_query_pair(key, q[key]))

    if pairs:
        query = "&".join([query, *pairs] if query else pairs)

    return urlunsplit((scheme, netloc, base_path, query, fragment))
