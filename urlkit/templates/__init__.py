"""
Jinja2 integration: URL helpers exposed as template globals.
"""

from .helpers import (
    TemplateHelperConfig,
    TemplateError,
    URLHelperArgs,
    HelperArgumentError,
    parse_args,
    template_helpers,
    install_template_helpers,
)

__all__ = [
    "TemplateHelperConfig",
    "TemplateError",
    "URLHelperArgs",
    "HelperArgumentError",
    "parse_args",
    "template_helpers",
    "install_template_helpers",
]
