"""
RouteManager - registry of root groups.

The manager's lock guards only the name-to-root map. Group state is guarded
by each group's own lock.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Mapping, Optional, Union

from ..config import Config, GroupConfig
from ..faults import (
    ConfigInvalidFault,
    ConfigMissingFault,
    GroupNotFoundFault,
    GroupValidationFault,
    ValidationFault,
)
from ..utils.urls import join_url_path
from .group import Group
from .params import (
    build_params_from_input,
    build_query_from_input,
    coerce_params,
    combine_queries,
    parse_ensure_segment,
)

logger = logging.getLogger("urlkit.routing")

MISSING_GROUP = "Missing group"


class RouteManager:
    """
    Entry point for building URLs.

    Example:
        ```python
        manager = RouteManager()
        manager.register_group("api", "https://api.example.com", {"user": "/users/:id"})
        manager.group("api").builder("user").with_param("id", 42).build()
        # 'https://api.example.com/users/42'
        ```
    """

    def __init__(self, config: Optional[Union[Config, Mapping[str, Any]]] = None):
        self._lock = threading.RLock()
        self._groups: dict[str, Group] = {}
        if config is not None:
            self.load_config(config)

    @classmethod
    def from_config(cls, config: Optional[Union[Config, Mapping[str, Any]]]) -> RouteManager:
        """
        Build a manager from a ``Config`` or its dict form.

        Raises:
            ConfigMissingFault: a group has no name
            ConfigInvalidFault: duplicate root or nested ``base_url``
        """
        return cls(config)

    def load_config(self, config: Union[Config, Mapping[str, Any]]) -> RouteManager:
        if not isinstance(config, Config):
            config = Config.from_dict(dict(config))
        for group_config in config.groups:
            self._load_group(group_config, None)
        return self

    def _load_group(self, cfg: GroupConfig, parent: Optional[Group]) -> Group:
        if not cfg.name:
            raise ConfigMissingFault("name", "group name is required")

        routes = cfg.effective_routes()

        if parent is None:
            with self._lock:
                if cfg.name in self._groups:
                    raise ConfigInvalidFault("name", f"duplicate root group {cfg.name}")
            self.register_group(cfg.name, cfg.base_url, routes)
            group = self.group(cfg.name)
            group.set_path(cfg.path)
        else:
            if cfg.base_url:
                raise ConfigInvalidFault(
                    "base_url", f"nested group {cfg.name} cannot specify base_url"
                )
            group = parent.register_group(cfg.name, cfg.path, routes)
            if cfg.path:
                group.set_path(cfg.path)

        if cfg.url_template:
            group.set_url_template(cfg.url_template)
        for key, value in cfg.template_vars.items():
            group.set_template_var(key, value)

        for child in cfg.groups:
            self._load_group(child, group)

        return group

    # ========================================================================
    # Registration
    # ========================================================================

    def register_group(
        self,
        name: str,
        base_url: str = "",
        routes: Optional[Mapping[str, str]] = None,
    ) -> RouteManager:
        """
        Create a root group, or merge ``routes`` into an existing one.

        The base URL of an existing root is left unchanged.
        """
        with self._lock:
            existing = self._groups.get(name)
            if existing is None:
                self._groups[name] = Group(name, base_url=base_url, routes=routes)

        if existing is None:
            logger.debug("Registered root group %s (base=%r)", name, base_url)
        elif routes:
            existing.add_routes(routes)
        return self

    def add_routes(self, path: str, routes: Mapping[str, str]) -> Group:
        """
        Attach or overwrite routes on the group at ``path``.

        Raises:
            GroupNotFoundFault: no such group
        """
        group = self.get_group(path)
        group.add_routes(routes)
        return group

    def ensure_group(self, path: str) -> Group:
        """
        Return the group at ``path``, creating missing descendants.

        Each segment after the root may carry a mount path as
        ``name:/custom``; otherwise it mounts at ``/name``. The root must
        already exist.

        Example:
            ``ensure_group("frontend.marketing:/mkt.landing")`` creates
            ``marketing`` at ``/mkt`` and ``landing`` at ``/landing``.

        Raises:
            GroupNotFoundFault: empty path or unknown root
            ConfigInvalidFault: a segment has no name
        """
        if not path:
            raise GroupNotFoundFault("")

        try:
            return self.get_group(path)
        except GroupNotFoundFault:
            pass

        root_name, *segments = path.split(".")
        with self._lock:
            current = self._groups.get(root_name)
        if current is None:
            raise GroupNotFoundFault(root_name)

        for segment in segments:
            name, mount = parse_ensure_segment(segment)
            child = current.get_child(name)
            if child is None:
                child = current.register_group(name, mount)
                logger.debug("ensure_group created %s at %s", child.display_name(), child.path)
            current = child

        return current

    # ========================================================================
    # Lookup
    # ========================================================================

    def get_group(self, path: str) -> Group:
        """
        Resolve a dotted group path such as ``frontend.en.marketing``.

        Raises:
            GroupNotFoundFault: no group at ``path``
        """
        if not path:
            raise GroupNotFoundFault("")

        with self._lock:
            group = self._groups.get(path)
        if group is not None:
            return group

        group = self._find_group_by_path(path) if "." in path else None
        if group is None:
            raise GroupNotFoundFault(path)
        return group

    def group(self, path: str) -> Group:
        return self.get_group(path)

    def _find_group_by_path(self, path: str) -> Optional[Group]:
        parts = [part.strip() for part in path.split(".")]
        if not all(parts):
            return None

        with self._lock:
            current = self._groups.get(parts[0])

        for part in parts[1:]:
            if current is None:
                return None
            current = current.get_child(part)
        return current

    def root_names(self) -> list[str]:
        with self._lock:
            return sorted(self._groups)

    def __contains__(self, path: str) -> bool:
        try:
            self.get_group(path)
        except GroupNotFoundFault:
            return False
        return True

    # ========================================================================
    # Validation & diagnostics
    # ========================================================================

    def validate(self, expected: Mapping[str, list[str]]) -> None:
        """
        Check that each expected group exists and has the listed routes.

        Raises:
            ValidationFault: mapping every failing group to its missing route
                names, or to ``["Missing group"]``
        """
        errors: dict[str, list[str]] = {}
        for path, routes in expected.items():
            try:
                group = self.get_group(path)
            except GroupNotFoundFault:
                errors[path] = [MISSING_GROUP]
                continue

            try:
                group.validate(list(routes))
            except GroupValidationFault as exc:
                errors[path] = exc.missing_routes

        if errors:
            raise ValidationFault(errors)

    def must_validate(self, expected: Mapping[str, list[str]]) -> RouteManager:
        self.validate(expected)
        return self

    def debug_tree(self) -> str:
        """Sorted text dump of every group, its template, variables and routes."""
        with self._lock:
            roots = dict(self._groups)

        if not roots:
            return "RouteManager: <empty>"

        lines = ["RouteManager Debug Tree:"]
        names = sorted(roots)
        for idx, name in enumerate(names):
            lines.extend(roots[name].debug_lines())
            if idx < len(names) - 1:
                lines.append("")
        return "\n".join(lines) + "\n"

    # ========================================================================
    # One-shot resolution
    # ========================================================================

    def resolve(
        self,
        group_path: str,
        route: str,
        params: Optional[Mapping[str, Any]] = None,
        query: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Render ``route`` of ``group_path`` with plain params and query."""
        group = self.get_group(group_path)
        queries = combine_queries(coerce_params(query), None)
        return group.render(route, coerce_params(params), *queries)

    def resolve_with(
        self,
        group_path: str,
        route: str,
        params: Any = None,
        query: Any = None,
    ) -> str:
        """
        Render with any parameter source and query shape.

        ``params`` may be a mapping, dataclass, named tuple or ``ParamSource``;
        ``query`` may map keys to scalars or to lists of values.

        Raises:
            ParamsFault: unsupported ``params`` or ``query`` shape
        """
        normalized = build_params_from_input(params)
        single, multi = build_query_from_input(query)
        group = self.get_group(group_path)
        return group.render(route, normalized, *combine_queries(single, multi))

    def route_path(self, group_path: str, route: str) -> str:
        """Group mount path joined with the raw route template."""
        group = self.get_group(group_path)
        return join_url_path(group.full_path(), group.route(route))
