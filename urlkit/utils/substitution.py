"""
``{name}`` placeholder substitution for URL templates.
"""

import re
from typing import Mapping

PLACEHOLDER_RE = re.compile(r"\{([a-zA-Z0-9_]+)\}")

DEFAULT_ROUTE_PATH_SUFFIX = "/"


def substitute_template(template: str, variables: Mapping[str, str]) -> str:
    """
    Replace every literal ``{key}`` in ``template`` with ``variables[key]``.

    Any key is honoured, not only identifier-like ones, so ``{cdn-host}`` is
    replaced when ``"cdn-host"`` is set. Placeholders without a value are left
    as literal text. Substituted values are never rescanned.

    Example:
        substitute_template("{proto}://{host}", {"proto": "https", "host": "a.io"})
        -> "https://a.io"
    """
    if not variables:
        return template

    pattern = re.compile("\\{(" + "|".join(map(re.escape, variables)) + ")\\}")
    return pattern.sub(lambda match: str(variables[match.group(1)]), template)


def detect_missing_template_vars(template: str, variables: Mapping[str, str]) -> list[str]:
    """Sorted, de-duplicated placeholder names in ``template`` absent from ``variables``."""
    names = set(PLACEHOLDER_RE.findall(template))
    return sorted(name for name in names if name not in variables)


def apply_route_path_suffix(route_path: str, suffix: str) -> str:
    """Append ``suffix`` to ``route_path`` unless it is already there."""
    if not route_path or not suffix:
        return route_path
    if route_path.endswith(suffix):
        return route_path
    if suffix == "/" and route_path == "/":
        return route_path
    return route_path + suffix
