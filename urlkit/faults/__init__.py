"""
UrlKit Faults - structured error taxonomy.

Every failure raised by urlkit is a typed ``Fault`` with a stable code,
a domain and metadata describing what went wrong.
"""

from .core import (
    Fault,
    FaultDomain,
    Severity,
    DOMAIN_SEVERITY,
)

from .domains import (
    ConfigFault,
    ConfigMissingFault,
    ConfigInvalidFault,
    RoutingFault,
    GroupNotFoundFault,
    RouteNotFoundFault,
    RouteBuildFault,
    GroupValidationFault,
    ValidationFault,
    TemplateSubstitutionFault,
    ParamsFault,
    SecureLinkFault,
    SigningKeyFault,
    SecureRouteNotFoundFault,
    TokenFault,
)

__all__ = [
    # Core types
    "Fault",
    "FaultDomain",
    "Severity",
    "DOMAIN_SEVERITY",

    # Config
    "ConfigFault",
    "ConfigMissingFault",
    "ConfigInvalidFault",

    # Routing
    "RoutingFault",
    "GroupNotFoundFault",
    "RouteNotFoundFault",
    "RouteBuildFault",
    "GroupValidationFault",
    "ValidationFault",

    # Template / params
    "TemplateSubstitutionFault",
    "ParamsFault",

    # Security
    "SecureLinkFault",
    "SigningKeyFault",
    "SecureRouteNotFoundFault",
    "TokenFault",
]
