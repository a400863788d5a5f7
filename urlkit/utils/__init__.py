"""URL and template string helpers."""

from .urls import (
    join_url,
    join_url_path,
    encode_query_pair,
    split_path_segments,
    longest_overlap,
)
from .substitution import (
    substitute_template,
    detect_missing_template_vars,
    apply_route_path_suffix,
    DEFAULT_ROUTE_PATH_SUFFIX,
)

__all__ = [
    "join_url",
    "join_url_path",
    "encode_query_pair",
    "split_path_segments",
    "longest_overlap",
    "substitute_template",
    "detect_missing_template_vars",
    "apply_route_path_suffix",
    "DEFAULT_ROUTE_PATH_SUFFIX",
]
