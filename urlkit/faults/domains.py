"""
UrlKit Faults - Domain-specific fault types.

Each family sets its ``domain`` once on a base class; concrete faults
declare their ``code`` and build the message from their arguments.
"""

from typing import Any, Optional

from .core import Fault, FaultDomain, Severity


def _format_names(names: list[str]) -> str:
    return "[" + " ".join(names) + "]"


def _meta(kwargs: dict[str, Any], **fields: Any) -> dict[str, Any]:
    return {**fields, **kwargs.get("metadata", {})}


# ============================================================================
# CONFIG Faults
# ============================================================================

class ConfigFault(Fault):
    """Base class for configuration faults."""
    domain = FaultDomain.CONFIG

    def __init__(self, message: str, *, metadata: Optional[dict[str, Any]] = None):
        super().__init__(message=message, metadata=metadata)


class ConfigMissingFault(ConfigFault):
    """Required configuration is missing."""
    code = "CONFIG_MISSING"

    def __init__(self, key: str, reason: Optional[str] = None, **kwargs):
        super().__init__(
            f"configuration error: {reason or key + ' is required'}",
            metadata=_meta(kwargs, key=key),
        )
        self.key = key


class ConfigInvalidFault(ConfigFault):
    """Configuration value is invalid."""
    code = "CONFIG_INVALID"

    def __init__(self, key: str, reason: str, **kwargs):
        super().__init__(
            f"configuration error: {reason}",
            metadata=_meta(kwargs, key=key, reason=reason),
        )
        self.key = key
        self.reason = reason


# ============================================================================
# ROUTING Faults
# ============================================================================

class RoutingFault(Fault):
    """Base class for group and route faults."""
    domain = FaultDomain.ROUTING

    def __init__(self, message: str, *, metadata: Optional[dict[str, Any]] = None):
        super().__init__(message=message, metadata=metadata)


class GroupNotFoundFault(RoutingFault, LookupError):
    """No group is registered at the requested dotted path."""
    code = "GROUP_NOT_FOUND"

    def __init__(self, path: str, **kwargs):
        super().__init__(
            f"group not found: {path or 'empty group path'}",
            metadata=_meta(kwargs, path=path),
        )
        self.path = path


class RouteNotFoundFault(RoutingFault, LookupError):
    """The group has no route with the requested name."""
    code = "ROUTE_NOT_FOUND"

    def __init__(self, route: str, group: str, **kwargs):
        super().__init__(
            f"route not found: route {route!r} in group {group}",
            metadata=_meta(kwargs, route=route, group=group),
        )
        self.route = route
        self.group = group


class RouteBuildFault(RoutingFault):
    """The path compiler rejected the supplied parameters."""
    code = "ROUTE_BUILD_FAILED"

    def __init__(self, route: str, group: str, reason: str, **kwargs):
        super().__init__(
            f"failed to build route {route!r} in group {group}: {reason}",
            metadata=_meta(kwargs, route=route, group=group, reason=reason),
        )
        self.route = route
        self.group = group
        self.reason = reason


class GroupValidationFault(RoutingFault):
    """A single group is missing expected routes."""
    code = "GROUP_VALIDATION_FAILED"

    def __init__(self, missing_routes: list[str], group: str = "", **kwargs):
        super().__init__(
            f"missing routes: {_format_names(missing_routes)}",
            metadata=_meta(kwargs, group=group, missing_routes=list(missing_routes)),
        )
        self.group = group
        self.missing_routes = list(missing_routes)


class ValidationFault(RoutingFault):
    """
    Aggregate validation failure across groups.

    ``errors`` maps each failing group path to the names it is missing.
    A group that does not exist at all is reported as ``["Missing group"]``.
    """
    code = "VALIDATION_FAILED"

    def __init__(self, errors: dict[str, list[str]], **kwargs):
        parts = [
            f"group {group} missing: {_format_names(missing)}"
            for group, missing in sorted(errors.items())
        ]
        super().__init__(
            "validation error: " + ";".join(parts),
            metadata=_meta(kwargs, errors=errors),
        )
        self.errors = errors


# ============================================================================
# TEMPLATE Faults
# ============================================================================

class TemplateSubstitutionFault(Fault):
    """One or more ``{name}`` placeholders could not be resolved."""
    code = "TEMPLATE_SUBSTITUTION_FAILED"
    domain = FaultDomain.TEMPLATE

    def __init__(
        self,
        group: str,
        route: str,
        template_owner: str,
        template: str,
        missing: list[str],
        **kwargs,
    ):
        super().__init__(
            message=(
                f"template substitution failed for group {group!r} route {route!r} "
                f"(template owner {template_owner!r}): missing variables {_format_names(missing)}"
            ),
            metadata=_meta(
                kwargs,
                group=group,
                route=route,
                template_owner=template_owner,
                template=template,
                missing=list(missing),
            ),
        )
        self.group = group
        self.route = route
        self.template_owner = template_owner
        self.template = template
        self.missing = list(missing)


# ============================================================================
# PARAMS Faults
# ============================================================================

class ParamsFault(Fault):
    """Parameter or query input has an unsupported shape."""
    domain = FaultDomain.PARAMS

    def __init__(self, kind: str, value_type: str, **kwargs):
        super().__init__(
            code=f"UNSUPPORTED_{kind.upper()}",
            message=f"unsupported {kind} type {value_type}",
            metadata=_meta(kwargs, kind=kind, type=value_type),
        )
        self.kind = kind
        self.value_type = value_type


# ============================================================================
# SECURITY Faults
# ============================================================================

class SecureLinkFault(Fault):
    """
    Base class for signed link faults.

    Messages stay generic; they never say which check a token failed.
    """
    domain = FaultDomain.SECURITY


class SigningKeyFault(SecureLinkFault):
    """Signing key or algorithm rejected at configuration time."""
    code = "SIGNING_KEY_INVALID"

    def __init__(self, reason: str, **kwargs):
        super().__init__(
            message=f"configuration validation failed: {reason}",
            severity=Severity.FATAL,
            metadata=_meta(kwargs, reason=reason),
        )


class SecureRouteNotFoundFault(SecureLinkFault, LookupError):
    """Route is not among the signed link routes."""
    code = "SECURE_ROUTE_NOT_FOUND"

    def __init__(self, route: str, **kwargs):
        super().__init__(
            message=f"route '{route}' not found in configured routes",
            metadata=_meta(kwargs, route=route),
        )
        self.route = route


class TokenFault(SecureLinkFault):
    """Token could not be signed or verified."""
    code = "TOKEN_INVALID"

    def __init__(self, message: str = "token validation failed", code: Optional[str] = None, **kwargs):
        super().__init__(code=code, message=message, metadata=kwargs.get("metadata"))
