"""
URL helpers for Jinja2 templates.

Helpers never raise into a template. A failure renders as
``#error:<helper>:<type>:<message>`` or, with structured errors enabled, as a
``TemplateError`` object.

Usage:
    {{ url("api", "user", {"id": user.id}) }}
    {{ route_path("frontend", "search", {}, {"q": query}) }}
    <a class="{{ current_route_if('frontend.home', current_route, 'active') }}">
    {% if has_route("frontend", "about") %}...{% endif %}
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union
from urllib.parse import urlsplit, urlunsplit
import logging

from jinja2 import Environment

from ..faults import Fault
from ..locale import LocaleConfig, LocaleInfo
from ..routing.manager import RouteManager

logger = logging.getLogger("urlkit.templates")


@dataclass
class TemplateHelperConfig:
    """Behaviour of the template helpers."""
    enable_structured_errors: bool = False
    enable_error_logging: bool = False


@dataclass
class TemplateError:
    """Structured helper failure, rendered by templates instead of a URL."""
    helper: str
    type: str
    message: str
    context: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"helper": self.helper, "type": self.type, "message": self.message}
        if self.context:
            data["context"] = dict(self.context)
        return data

    def __str__(self) -> str:
        return f"#error:{self.helper}:{self.type}:{self.message}"


HelperResult = Union[str, TemplateError]


class HelperArgumentError(ValueError):
    """Template supplied arguments of the wrong shape."""


@dataclass
class URLHelperArgs:
    group: str
    route: str
    params: Dict[str, Any] = field(default_factory=dict)
    query: Dict[str, Any] = field(default_factory=dict)


def parse_args(args: tuple) -> URLHelperArgs:
    """
    Parse ``(group, route, params=None, query=None)``.

    Raises:
        HelperArgumentError: fewer than two arguments or wrong types
    """
    if len(args) < 2:
        raise HelperArgumentError("at least 2 arguments required: group and route")

    group, route = args[0], args[1]
    if not isinstance(group, str):
        raise HelperArgumentError("group must be a string")
    if not isinstance(route, str):
        raise HelperArgumentError("route must be a string")

    parsed = URLHelperArgs(group=group, route=route)

    if len(args) > 2 and args[2] is not None:
        if not isinstance(args[2], dict):
            raise HelperArgumentError("params must be a map")
        parsed.params = dict(args[2])

    if len(args) > 3 and args[3] is not None:
        if not isinstance(args[3], dict):
            raise HelperArgumentError("query must be a map")
        parsed.query = {k: v for k, v in args[3].items() if v is not None}

    return parsed


class _HelperSet:
    """Closes over a manager and config; each public method is one helper."""

    def __init__(
        self,
        manager: RouteManager,
        config: TemplateHelperConfig,
        locale_config: Optional[LocaleConfig] = None,
    ):
        self.manager = manager
        self.config = config
        self.locale_config = locale_config

    def error(self, helper: str, error_type: str, message: str, **context: Any) -> HelperResult:
        if self.config.enable_error_logging:
            logger.warning("Template helper %s failed: %s (context: %r)", helper, message, context)
        if self.config.enable_structured_errors:
            return TemplateError(helper=helper, type=error_type, message=message, context=context)
        return f"#error:{helper}:{error_type}:{message}"

    def build(self, helper: str, args: tuple) -> HelperResult:
        try:
            parsed = parse_args(args)
        except HelperArgumentError as exc:
            return self.error(helper, "invalid_arguments", str(exc))
        return self.build_parsed(helper, parsed)

    def build_parsed(self, helper: str, parsed: URLHelperArgs) -> HelperResult:
        context = {"group": parsed.group, "route": parsed.route}
        try:
            builder = self.manager.get_group(parsed.group).builder(parsed.route)
            builder.with_params_map(parsed.params)
            for key, value in parsed.query.items():
                builder.with_query(key, value)
            return builder.build()
        except Fault as exc:
            return self.error(helper, exc.code.lower(), exc.message, **context)

    # ------------------------------------------------------------------
    # Core helpers
    # ------------------------------------------------------------------

    def url(self, *args: Any) -> HelperResult:
        return self.build("url", args)

    def url_abs(self, *args: Any) -> HelperResult:
        return self.build("url_abs", args)

    def route_path(self, *args: Any) -> HelperResult:
        """Built URL without scheme and host."""
        result = self.build("route_path", args)
        if not isinstance(result, str) or result.startswith("#error:"):
            return result
        _, _, path, query, fragment = urlsplit(result)
        return urlunsplit(("", "", path or "/", query, fragment))

    def has_route(self, *args: Any) -> bool:
        if len(args) < 2 or not isinstance(args[0], str) or not isinstance(args[1], str):
            return False
        group = self._find_group(args[0])
        return group is not None and group.has_route(args[1])

    def route_exists(self, *args: Any) -> bool:
        if len(args) < 1 or not isinstance(args[0], str):
            return False
        return self._find_group(args[0]) is not None

    def route_template(self, *args: Any) -> HelperResult:
        if len(args) < 2:
            return self.error("route_template", "invalid_arguments", "at least 2 arguments required: group and route")
        group_name, route_name = args[0], args[1]
        if not isinstance(group_name, str) or not isinstance(route_name, str):
            return self.error("route_template", "invalid_arguments", "group and route must be strings")

        group = self._find_group(group_name)
        if group is None:
            return self.error("route_template", "group_not_found", f"group '{group_name}' not found")
        if not group.has_route(route_name):
            return self.error(
                "route_template",
                "route_not_found",
                f"route '{route_name}' not found in group '{group_name}'",
            )
        return group.route(route_name)

    def route_vars(self, *args: Any) -> Union[Dict[str, str], HelperResult]:
        if len(args) < 1:
            return self.error("route_vars", "invalid_arguments", "at least 1 argument required: group")
        if not isinstance(args[0], str):
            return self.error("route_vars", "invalid_arguments", "group must be a string")

        group = self._find_group(args[0])
        if group is None:
            return self.error("route_vars", "group_not_found", f"group '{args[0]}' not found")
        return group.collect_template_vars()

    def current_route_if(self, *args: Any) -> HelperResult:
        """``(target, current, value_if_true, value_if_false="")``"""
        if len(args) < 3:
            return self.error(
                "current_route_if",
                "invalid_arguments",
                "at least 3 arguments required: target route, current route and value",
            )
        target, current = args[0], args[1]
        if not isinstance(target, str) or not isinstance(current, str):
            return self.error("current_route_if", "invalid_arguments", "routes must be strings")

        if target == current:
            return str(args[2])
        return str(args[3]) if len(args) > 3 and args[3] is not None else ""

    # ------------------------------------------------------------------
    # Locale helpers
    # ------------------------------------------------------------------

    def url_locale(self, *args: Any) -> HelperResult:
        """``(group, route, locale, params=None, query=None)``"""
        if len(args) < 3 or not isinstance(args[2], str):
            return self.error("url_locale", "invalid_arguments", "group, route and locale are required")
        try:
            parsed = parse_args((args[0], args[1], *args[3:]))
        except HelperArgumentError as exc:
            return self.error("url_locale", "invalid_arguments", str(exc))

        locale = self.locale_config.resolve_locale(args[2], parsed.group)
        if locale is None:
            return self.error("url_locale", "unsupported_locale", args[2], group=parsed.group)
        return self.build_parsed("url_locale", self._localize(parsed, locale))

    def url_all_locales(self, *args: Any) -> Union[List[LocaleInfo], HelperResult]:
        """``(group, route, params=None, query=None)``: one entry per buildable locale."""
        try:
            parsed = parse_args(args)
        except HelperArgumentError as exc:
            return self.error("url_all_locales", "invalid_arguments", str(exc))

        entries = []
        for locale in self.locale_config.locales_for_group(parsed.group):
            result = self.build_parsed("url_all_locales", self._localize(parsed, locale))
            if isinstance(result, str) and not result.startswith("#error:"):
                entries.append(LocaleInfo(locale=locale, url=result))
        return entries

    def current_locale(self, *args: Any) -> str:
        """``(context=None, group="")``"""
        context = args[0] if args and isinstance(args[0], dict) else {}
        group = args[1] if len(args) > 1 and isinstance(args[1], str) else ""
        return self.locale_config.detect_locale(context, group)

    def has_locale(self, *args: Any) -> bool:
        if len(args) < 2 or not isinstance(args[0], str) or not isinstance(args[1], str):
            return False
        group, locale = args[0], args[1]
        if not self.locale_config.is_supported(locale, group):
            return False
        if self.locale_config.enable_hierarchical_locales:
            return self._find_group(self.locale_config.locale_group(group, locale)) is not None
        return True

    def _localize(self, parsed: URLHelperArgs, locale: str) -> URLHelperArgs:
        if self.locale_config.enable_hierarchical_locales:
            return URLHelperArgs(
                group=self.locale_config.locale_group(parsed.group, locale),
                route=parsed.route,
                params=parsed.params,
                query=parsed.query,
            )
        return URLHelperArgs(
            group=parsed.group,
            route=parsed.route,
            params={**parsed.params, "locale": locale},
            query=parsed.query,
        )

    def _find_group(self, path: str):
        try:
            return self.manager.get_group(path)
        except Fault:
            return None


def template_helpers(
    manager: RouteManager,
    config: Optional[TemplateHelperConfig] = None,
    locale_config: Optional[LocaleConfig] = None,
) -> Dict[str, Callable[..., Any]]:
    """
    Create URL helper functions for templates.

    Returns dictionary of helper functions that can be registered as
    template globals. Locale helpers are included when ``locale_config``
    is given.
    """
    helpers = _HelperSet(manager, config or TemplateHelperConfig(), locale_config)

    registry: Dict[str, Callable[..., Any]] = {
        "url": helpers.url,
        "url_abs": helpers.url_abs,
        "route_path": helpers.route_path,
        "has_route": helpers.has_route,
        "route_template": helpers.route_template,
        "route_vars": helpers.route_vars,
        "route_exists": helpers.route_exists,
        "current_route_if": helpers.current_route_if,
    }

    if locale_config is not None:
        registry.update({
            "url_locale": helpers.url_locale,
            "url_all_locales": helpers.url_all_locales,
            "current_locale": helpers.current_locale,
            "has_locale": helpers.has_locale,
        })

    return registry


def install_template_helpers(
    env: Environment,
    manager: RouteManager,
    config: Optional[TemplateHelperConfig] = None,
    locale_config: Optional[LocaleConfig] = None,
) -> Environment:
    """Register the URL helpers as globals of a Jinja2 environment."""
    env.globals.update(template_helpers(manager, config, locale_config))
    return env
