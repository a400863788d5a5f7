"""
Group - a node in the route hierarchy.

A group owns named routes, child groups, template variables and an optional
URL template. Rendering picks one of two modes on every call:

- Path concatenation: the mount paths from the root down to the group are
  joined with the compiled route and attached to the root's base URL.
- Template rendering: when the group or one of its ancestors defines a URL
  template, ``{name}`` placeholders are filled from the inherited template
  variables plus ``route_path`` and ``base_url``.

Every group guards its own state with a lock. Traversals up or down the tree
lock one node at a time and never hold two node locks together.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Mapping, Optional, TYPE_CHECKING

from ..faults import (
    GroupNotFoundFault,
    GroupValidationFault,
    RouteBuildFault,
    RouteNotFoundFault,
    TemplateSubstitutionFault,
)
from ..patterns import CompiledPattern, PatternBuildError, compile_pattern
from ..utils.substitution import (
    DEFAULT_ROUTE_PATH_SUFFIX,
    apply_route_path_suffix,
    detect_missing_template_vars,
    substitute_template,
)
from ..utils.urls import join_url, join_url_path

if TYPE_CHECKING:
    from .builder import Builder
    from .navigation import NavigationNode

logger = logging.getLogger("urlkit.routing")

ROUTE_PATH_VAR = "route_path"
BASE_URL_VAR = "base_url"
ROUTE_PATH_SUFFIX_VAR = "route_path_suffix"


def _compile_routes(routes: Mapping[str, str]) -> dict[str, CompiledPattern]:
    return {name: compile_pattern(template) for name, template in routes.items()}


class Group:
    """
    Route group.

    Root groups are created by ``RouteManager.register_group`` and carry the
    base URL; children are created with ``register_group`` on their parent
    and contribute a mount path.
    """

    def __init__(
        self,
        name: str = "",
        *,
        base_url: str = "",
        path: str = "",
        routes: Optional[Mapping[str, str]] = None,
        parent: Optional[Group] = None,
    ):
        routes = dict(routes or {})
        self._lock = threading.RLock()
        self._name = name
        self._base_url = base_url
        self._path = path
        self._routes: dict[str, str] = routes
        self._compiled: dict[str, CompiledPattern] = _compile_routes(routes)
        self._parent = parent
        self._children: dict[str, Group] = {}
        self._url_template = ""
        self._template_vars: dict[str, str] = {}

    def __repr__(self) -> str:
        return f"Group(name={self.display_name()!r}, path={self.path!r})"

    # ========================================================================
    # Identity
    # ========================================================================

    @property
    def name(self) -> str:
        with self._lock:
            return self._name

    @property
    def path(self) -> str:
        """Local mount path of this group."""
        with self._lock:
            return self._path

    @property
    def base_url(self) -> str:
        """Base URL stored on this node. Only meaningful on a root."""
        with self._lock:
            return self._base_url

    @property
    def parent(self) -> Optional[Group]:
        with self._lock:
            return self._parent

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def set_path(self, path: str) -> None:
        with self._lock:
            self._path = path

    def fqn(self) -> str:
        """
        Dotted name of this group from its root, e.g. ``frontend.en.marketing``.

        Unnamed groups are skipped, a detached unnamed group yields ``""``.
        """
        with self._lock:
            name = self._name
            parent = self._parent

        if parent is None:
            return name

        parent_name = parent.fqn()
        if not parent_name:
            return name
        if not name:
            return parent_name
        return f"{parent_name}.{name}"

    def display_name(self) -> str:
        """Name used in error messages and debug output."""
        fqn = self.fqn()
        if fqn:
            return fqn
        return "(root)" if self.parent is None else "(unnamed)"

    def root(self) -> Group:
        """Walk the parent chain up to the root group."""
        current = self
        while True:
            parent = current.parent
            if parent is None:
                return current
            current = parent

    def full_path(self) -> str:
        """Concatenated mount paths from the root down to this group."""
        parts = []
        current: Optional[Group] = self
        while current is not None:
            with current._lock:
                parts.append(current._path)
                current = current._parent
        return "".join(reversed(parts))

    # ========================================================================
    # Routes
    # ========================================================================

    def add_routes(self, routes: Mapping[str, str]) -> None:
        """
        Add or overwrite routes; each one is compiled before it is stored.

        Raises:
            PatternSyntaxError: a template is malformed. No route is stored.
        """
        if not routes:
            return
        compiled = _compile_routes(routes)
        with self._lock:
            self._routes.update(routes)
            self._compiled.update(compiled)
        logger.debug("Added routes %s to group %s", sorted(routes), self.display_name())

    def route(self, route_name: str) -> str:
        """
        Raw template of ``route_name``.

        Raises:
            RouteNotFoundFault: the group has no such route
        """
        with self._lock:
            template = self._routes.get(route_name)
        if template is None:
            raise RouteNotFoundFault(route_name, self.display_name())
        return template

    def must_route(self, route_name: str) -> str:
        return self.route(route_name)

    def has_route(self, route_name: str) -> bool:
        with self._lock:
            return route_name in self._routes

    def routes(self) -> dict[str, str]:
        """Snapshot of route name to raw template."""
        with self._lock:
            return dict(self._routes)

    def validate(self, routes: list[str]) -> None:
        """
        Check that every name in ``routes`` is registered.

        Raises:
            GroupValidationFault: listing the missing names in input order
        """
        with self._lock:
            missing = [name for name in routes if name not in self._routes]
        if missing:
            raise GroupValidationFault(missing, group=self.display_name())

    # ========================================================================
    # Children
    # ========================================================================

    def register_group(
        self,
        name: str,
        path: str = "",
        routes: Optional[Mapping[str, str]] = None,
    ) -> Group:
        """
        Create a child group, or merge ``routes`` into an existing child.

        An existing child keeps its mount path unless it has none.
        """
        compiled = _compile_routes(routes or {})
        with self._lock:
            existing = self._children.get(name)
            if existing is None:
                child = Group(name, path=path, parent=self)
                child._routes = dict(routes or {})
                child._compiled = compiled
                self._children[name] = child

        if existing is None:
            logger.debug("Registered group %s (path=%r)", child.display_name(), path)
            return child

        if routes:
            existing.add_routes(routes)
        if path:
            with existing._lock:
                if not existing._path:
                    existing._path = path
        return existing

    def group(self, name: str) -> Group:
        """
        Child group by name.

        Raises:
            GroupNotFoundFault: no child is registered under ``name``
        """
        with self._lock:
            child = self._children.get(name)
        if child is None:
            raise GroupNotFoundFault(f"{self.display_name()}.{name}")
        return child

    def get_child(self, name: str) -> Optional[Group]:
        with self._lock:
            return self._children.get(name)

    def children(self) -> dict[str, Group]:
        """Snapshot of child name to group."""
        with self._lock:
            return dict(self._children)

    # ========================================================================
    # Templates
    # ========================================================================

    @property
    def url_template(self) -> str:
        with self._lock:
            return self._url_template

    def set_url_template(self, template: str) -> None:
        """
        Make this group a template owner. An empty string switches it back
        to path concatenation.
        """
        with self._lock:
            self._url_template = template

    def set_template_var(self, key: str, value: str) -> None:
        with self._lock:
            self._template_vars[key] = value

    def get_template_var(self, key: str) -> Optional[str]:
        """Local variable only; ancestors are not consulted."""
        with self._lock:
            return self._template_vars.get(key)

    def find_template_owner(self) -> Optional[Group]:
        """Nearest group on the self-to-root chain with a URL template."""
        current: Optional[Group] = self
        while current is not None:
            with current._lock:
                if current._url_template:
                    return current
                current = current._parent
        return None

    def collect_template_vars(self) -> dict[str, str]:
        """Template variables merged root to leaf; the nearest group wins."""
        chain = []
        current: Optional[Group] = self
        while current is not None:
            chain.append(current)
            current = current.parent

        merged: dict[str, str] = {}
        for group in reversed(chain):
            with group._lock:
                merged.update(group._template_vars)
        return merged

    # ========================================================================
    # Rendering
    # ========================================================================

    def builder(self, route_name: str) -> Builder:
        from .builder import Builder

        return Builder(self, route_name)

    def render(
        self,
        route_name: str,
        params: Optional[Mapping[str, str]] = None,
        *queries: Optional[Mapping[str, str]],
    ) -> str:
        """
        Build the URL of ``route_name``.

        Raises:
            RouteNotFoundFault: unknown route
            RouteBuildFault: the route rejected ``params``
            TemplateSubstitutionFault: template placeholders left unresolved
        """
        with self._lock:
            compiled = self._compiled.get(route_name)
        if compiled is None:
            raise RouteNotFoundFault(route_name, self.display_name())

        route_path = self._build_route_path(route_name, compiled, params)

        owner = self.find_template_owner()
        if owner is not None:
            return self._render_template(route_name, owner, route_path, queries)

        full_path = join_url_path(self.full_path(), route_path)
        return join_url(self.root().base_url, full_path, *queries)

    def _build_route_path(
        self,
        route_name: str,
        compiled: CompiledPattern,
        params: Optional[Mapping[str, str]],
    ) -> str:
        try:
            return compiled.build(params)
        except PatternBuildError as exc:
            raise RouteBuildFault(route_name, self.display_name(), str(exc)) from exc

    def _render_template(
        self,
        route_name: str,
        owner: Group,
        route_path: str,
        queries: tuple,
    ) -> str:
        variables = self.collect_template_vars()

        suffix = variables.get(ROUTE_PATH_SUFFIX_VAR, DEFAULT_ROUTE_PATH_SUFFIX)
        variables[ROUTE_PATH_VAR] = apply_route_path_suffix(route_path, suffix)
        variables[BASE_URL_VAR] = self.root().base_url

        template = owner.url_template
        missing = detect_missing_template_vars(template, variables)
        if missing:
            raise TemplateSubstitutionFault(
                group=self.display_name(),
                route=route_name,
                template_owner=owner.display_name(),
                template=template,
                missing=missing,
            )

        url = substitute_template(template, variables)
        if any(queries):
            return join_url(url, "", *queries)
        return url

    def navigation(
        self,
        routes: list[str],
        params: Optional[Callable[[str], Optional[Mapping[str, Any]]]] = None,
    ) -> list[NavigationNode]:
        """
        Build one ``NavigationNode`` per route name, in order.

        Empty names are skipped. ``params`` is called with each route name
        and may return the parameters for that route. The first build error
        aborts the whole batch.
        """
        from .navigation import NavigationNode

        nodes: list[NavigationNode] = []
        if not routes:
            return nodes

        group_name = self.fqn()
        for route_name in routes:
            if not route_name:
                continue

            provided = dict(params(route_name) or {}) if params is not None else {}
            url = self.builder(route_name).with_params_map(provided).build()

            full_route = f"{group_name}.{route_name}" if group_name else route_name
            nodes.append(NavigationNode(
                group=group_name,
                route=route_name,
                full_route=full_route,
                path=self.route(route_name),
                url=url,
                params=provided,
            ))

        return nodes

    # ========================================================================
    # Debug
    # ========================================================================

    def debug_lines(self, depth: int = 0) -> list[str]:
        """Lines describing this group and its subtree, children sorted by name."""
        with self._lock:
            is_root = self._parent is None
            base_url = self._base_url
            path = self._path
            template = self._url_template
            routes = dict(self._routes)
            children = dict(self._children)

        indent = "  " * depth
        meta = []
        if is_root:
            meta.append(f"base={_quote(base_url)}")
        if path:
            meta.append(f"path={_quote(path)}")

        header = f"{indent}- {self.display_name()}"
        if meta:
            header += " (" + ", ".join(meta) + ")"
        lines = [header]

        if template:
            lines.append(f"{indent}  template: {_quote(template)}")

        variables = self.collect_template_vars()
        if variables:
            lines.append(f"{indent}  vars:")
            for key in sorted(variables):
                lines.append(f"{indent}    {key} = {_quote(variables[key])}")

        if routes:
            lines.append(f"{indent}  routes:")
            for route_name in sorted(routes):
                lines.append(f"{indent}    - {route_name}: {routes[route_name]}")

        names = sorted(children)
        for idx, child_name in enumerate(names):
            lines.extend(children[child_name].debug_lines(depth + 1))
            if idx < len(names) - 1:
                lines.append("")

        return lines


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


