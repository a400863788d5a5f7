"""
Builder - fluent accumulation of route parameters and query values.

Input errors are captured on first occurrence and raised from ``build()``,
so a chain of ``with_*`` calls never needs intermediate checks. A builder is
a local accumulator and is not meant to be shared between threads.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, TYPE_CHECKING

from ..faults import Fault
from .params import (
    MultiQuery,
    Params,
    Query,
    combine_queries,
    merge_params_input,
    normalize_multi,
    stringify,
)

if TYPE_CHECKING:
    from .group import Group


class Builder:
    """
    Fluent URL builder for one route of a group.

    Example:
        ```python
        url = (
            manager.group("api")
            .builder("user")
            .with_param("id", 123)
            .with_query("tab", "posts")
            .build()
        )
        ```
    """

    def __init__(self, group: Group, route_name: str):
        self.group = group
        self.route_name = route_name
        self.params: Params = {}
        self.query: Query = {}
        self.multi_query: MultiQuery = {}
        self.error: Optional[Fault] = None

    def __repr__(self) -> str:
        return f"Builder(group={self.group.display_name()!r}, route={self.route_name!r})"

    def with_param(self, key: str, value: Any) -> Builder:
        if self.error is None:
            self.params[key] = stringify(value)
        return self

    def with_params_map(self, values: Optional[Mapping[str, Any]]) -> Builder:
        return self._merge(values)

    def with_struct(self, value: Any) -> Builder:
        """
        Read parameters from a dataclass, named tuple, mapping or any object
        implementing ``url_params()``.
        """
        return self._merge(value)

    def with_query(self, key: str, value: Any) -> Builder:
        """
        Set a query value. Lists and tuples make ``key`` multi-valued,
        ``None`` becomes an empty value. The last call for a key wins.
        """
        if self.error is not None:
            return self

        if isinstance(value, (list, tuple)):
            self._set_multi(key, value)
        else:
            self.query[key] = stringify(value)
            self.multi_query.pop(key, None)
        return self

    def with_query_values(self, values: Mapping[str, Iterable[Any]]) -> Builder:
        if self.error is not None:
            return self

        for key, items in values.items():
            self._set_multi(key, items)
        return self

    def build(self) -> str:
        """
        Render the URL.

        Raises:
            Fault: the first deferred input error, or any render fault
        """
        if self.error is not None:
            raise self.error

        queries = combine_queries(self.query, self.multi_query)
        return self.group.render(self.route_name, dict(self.params), *queries)

    def must_build(self) -> str:
        return self.build()

    def _merge(self, source: Any) -> Builder:
        if self.error is not None:
            return self
        try:
            merge_params_input(self.params, source)
        except Fault as exc:
            self.error = exc
        return self

    def _set_multi(self, key: str, values: Iterable[Any]) -> None:
        self.multi_query[key] = normalize_multi(values)
        self.query.pop(key, None)
