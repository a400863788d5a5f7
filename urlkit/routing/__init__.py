"""
Route hierarchy: groups, the manager, builders and navigation nodes.
"""

from .group import Group
from .manager import RouteManager
from .builder import Builder
from .navigation import NavigationNode
from .params import (
    ParamSource,
    Params,
    Query,
    stringify,
    coerce_params,
    combine_queries,
    build_params_from_input,
    build_query_from_input,
    parse_ensure_segment,
)

__all__ = [
    "Group",
    "RouteManager",
    "Builder",
    "NavigationNode",
    "ParamSource",
    "Params",
    "Query",
    "stringify",
    "coerce_params",
    "combine_queries",
    "build_params_from_input",
    "build_query_from_input",
    "parse_ensure_segment",
]
