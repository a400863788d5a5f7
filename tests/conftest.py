"""
Shared test fixtures and helpers for the urlkit test suite.
"""

import pytest

from urlkit.patterns import PatternCache, set_global_cache
from urlkit.routing import RouteManager


# ============================================================================
# Pattern cache isolation
# ============================================================================


@pytest.fixture(autouse=True)
def fresh_pattern_cache():
    """Give every test its own global pattern cache."""
    set_global_cache(PatternCache())
    yield
    set_global_cache(None)


# ============================================================================
# Managers
# ============================================================================


@pytest.fixture
def manager() -> RouteManager:
    """Empty route manager."""
    return RouteManager()


@pytest.fixture
def api_manager() -> RouteManager:
    """
    Path-concatenation tree:

        api      https://api.example.com
          v1     /v1
          v2     /v2
        frontend https://example.com
          en     /en
    """
    m = RouteManager()
    m.register_group("api", "https://api.example.com", {
        "users": "/users",
        "user": "/users/:id",
        "post": "/users/:id/posts/:slug?",
    })
    api = m.group("api")
    api.register_group("v1", "/v1", {"status": "/status"})
    api.register_group("v2", "/v2", {"user": "/users/:id", "search": "/search"})

    m.register_group("frontend", "https://example.com", {"home": "/"})
    m.group("frontend").register_group("en", "/en", {"about": "/about-us", "home": "/"})
    return m


@pytest.fixture
def template_manager() -> RouteManager:
    """
    Template-rendered tree:

        site  https://example.com  template {protocol}://{host}/{locale}{route_path}
          es  locale=es-ES
    """
    m = RouteManager()
    m.register_group("site", "https://example.com", {"about": "/about", "product": "/products/:id"})
    site = m.group("site")
    site.set_url_template("{protocol}://{host}/{locale}{route_path}")
    site.set_template_var("protocol", "https")
    site.set_template_var("host", "example.com")
    site.set_template_var("locale", "en-US")

    es = site.register_group("es", "/es", {"about": "/acerca"})
    es.set_template_var("locale", "es-ES")
    return m
