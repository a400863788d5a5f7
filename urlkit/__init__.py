"""
urlkit - hierarchical URL route and template builder

- Routing: named groups of route templates (``/users/:id``) nested under
  root groups that own a base URL
- Templates: per-group URL templates such as ``{base_url}/{locale}{route_path}``
  with inherited variables
- Builders: fluent parameter and query accumulation, navigation nodes
- Config: JSON/YAML loading with ``${VAR}`` expansion
- Jinja2 helpers, locale detection and expiring signed links
"""

__version__ = "0.1.0"

# ============================================================================
# Core
# ============================================================================

from .routing import (
    Group,
    RouteManager,
    Builder,
    NavigationNode,
    ParamSource,
)
from .config import Config, GroupConfig, ConfigLoader, load_manager
from .utils import join_url, join_url_path, substitute_template

# ============================================================================
# Faults
# ============================================================================

from .faults import (
    Fault,
    FaultDomain,
    Severity,
    ConfigMissingFault,
    ConfigInvalidFault,
    GroupNotFoundFault,
    RouteNotFoundFault,
    RouteBuildFault,
    GroupValidationFault,
    ValidationFault,
    TemplateSubstitutionFault,
    ParamsFault,
)

# ============================================================================
# Integrations
# ============================================================================

from .locale import LocaleConfig, LocaleDetectionStrategy, LocaleInfo
from .templates import TemplateHelperConfig, template_helpers, install_template_helpers
from .securelink import SecureLinkConfig, SecureLinkManager

__all__ = [
    "__version__",
    "Group",
    "RouteManager",
    "Builder",
    "NavigationNode",
    "ParamSource",
    "Config",
    "GroupConfig",
    "ConfigLoader",
    "load_manager",
    "join_url",
    "join_url_path",
    "substitute_template",
    "Fault",
    "FaultDomain",
    "Severity",
    "ConfigMissingFault",
    "ConfigInvalidFault",
    "GroupNotFoundFault",
    "RouteNotFoundFault",
    "RouteBuildFault",
    "GroupValidationFault",
    "ValidationFault",
    "TemplateSubstitutionFault",
    "ParamsFault",
    "LocaleConfig",
    "LocaleDetectionStrategy",
    "LocaleInfo",
    "TemplateHelperConfig",
    "template_helpers",
    "install_template_helpers",
    "SecureLinkConfig",
    "SecureLinkManager",
]
