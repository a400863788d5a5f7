"""
Parameter and query normalization.

Anything passed as route parameters ends up as a ``dict[str, str]``; query
input is split into single-valued pairs and multi-valued keys. Structured
inputs are read through the ``ParamSource`` protocol or one of the built-in
adapters for mappings, dataclasses and named tuples.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Iterable, Mapping, Optional, Protocol, runtime_checkable

from ..faults import ParamsFault, ConfigInvalidFault

Params = dict[str, str]
Query = dict[str, str]
MultiQuery = dict[str, list[str]]


@runtime_checkable
class ParamSource(Protocol):
    """Object that knows how to describe itself as route parameters."""

    def url_params(self) -> Iterable[tuple[str, Any]]:
        ...


def stringify(value: Any) -> str:
    """Render a parameter or query value as text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def lower_first(value: str) -> str:
    return value[:1].lower() + value[1:]


def field_param_key(field: dataclasses.Field) -> Optional[str]:
    """
    Resolve the parameter key of a dataclass field.

    Lookup order is the ``urlkit`` metadata entry, then the first part of a
    ``json`` metadata entry, then the field name with a lower-cased first
    letter. ``"-"`` in either metadata entry excludes the field.
    """
    tag = field.metadata.get("urlkit")
    if tag:
        return None if tag == "-" else tag

    tag = field.metadata.get("json")
    if tag:
        name = tag.split(",")[0]
        if name == "-":
            return None
        if name:
            return name

    return lower_first(field.name)


def _is_multi(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def merge_params_input(target: Params, source: Any) -> None:
    """
    Merge a parameter source into ``target``.

    Raises:
        ParamsFault: ``source`` has no known parameter shape
    """
    if source is None:
        return

    if isinstance(source, ParamSource):
        for key, value in source.url_params():
            target[key] = stringify(value)
        return

    if isinstance(source, Mapping):
        for key, value in source.items():
            target[str(key)] = stringify(value)
        return

    if dataclasses.is_dataclass(source) and not isinstance(source, type):
        for field in dataclasses.fields(source):
            if field.name.startswith("_"):
                continue
            key = field_param_key(field)
            if key is None:
                continue
            target[key] = stringify(getattr(source, field.name))
        return

    if isinstance(source, tuple) and hasattr(source, "_asdict"):
        for key, value in source._asdict().items():
            if key.startswith("_"):
                continue
            target[lower_first(key)] = stringify(value)
        return

    raise ParamsFault("params", type(source).__name__)


def build_params_from_input(source: Any) -> Params:
    params: Params = {}
    merge_params_input(params, source)
    return params


def coerce_params(source: Optional[Mapping[str, Any]]) -> Params:
    """Stringify every value of a plain parameter mapping."""
    if not source:
        return {}
    return {key: stringify(value) for key, value in source.items()}


def normalize_multi(values: Iterable[Any]) -> list[str]:
    normalized = [stringify(v) for v in values]
    return normalized or [""]


def build_query_from_input(source: Any) -> tuple[Query, MultiQuery]:
    """
    Split query input into single and multi-valued parts.

    ``None`` values become empty strings, lists and tuples become
    multi-valued keys, anything else is stringified.

    Raises:
        ParamsFault: ``source`` is not a mapping
    """
    if source is None:
        return {}, {}

    if not isinstance(source, Mapping):
        raise ParamsFault("query", type(source).__name__)

    single: Query = {}
    multi: MultiQuery = {}
    for key, value in source.items():
        if _is_multi(value):
            multi[str(key)] = normalize_multi(value)
        else:
            single[str(key)] = stringify(value)
    return single, multi


def combine_queries(single: Optional[Mapping[str, str]], multi: Optional[Mapping[str, list[str]]]) -> list[Query]:
    """
    Flatten single and multi-valued queries into an ordered list of mappings.

    The single-valued mapping comes first, followed by one mapping per value
    of each multi-valued key in sorted key order.
    """
    queries: list[Query] = []

    if single:
        queries.append(dict(single))

    if multi:
        for key in sorted(multi):
            values = multi[key]
            if not values:
                queries.append({key: ""})
                continue
            for value in values:
                queries.append({key: stringify(value)})

    return queries


def parse_ensure_segment(segment: str) -> tuple[str, str]:
    """
    Parse one ``ensure_group`` path segment.

    ``"name"`` mounts at ``/name``; ``"name:/custom"`` or ``"name:custom"``
    mounts at ``/custom``.

    Raises:
        ConfigInvalidFault: the segment is empty or has no name
    """
    if not segment:
        raise ConfigInvalidFault("segment", "ensure group: empty segment")

    name, _, custom_path = segment.partition(":")
    name = name.strip()
    custom_path = custom_path.strip()

    if not name:
        raise ConfigInvalidFault("segment", f"ensure group: segment {segment!r} missing group name")

    if not custom_path:
        custom_path = "/" + (name.lstrip("/") or name)
    elif not custom_path.startswith("/"):
        custom_path = "/" + custom_path

    return name, custom_path
