"""
Group (urlkit.routing.group)

Tests identity, routes, children, template state and both render modes.
"""

import pytest

from urlkit.faults import (
    GroupNotFoundFault,
    GroupValidationFault,
    RouteBuildFault,
    RouteNotFoundFault,
    TemplateSubstitutionFault,
)
from urlkit.patterns import PatternSyntaxError
from urlkit.routing import Group, RouteManager


# ============================================================================
# Identity
# ============================================================================

class TestIdentity:

    def test_fqn(self, api_manager):
        assert api_manager.group("api").fqn() == "api"
        assert api_manager.group("api.v1").fqn() == "api.v1"

    def test_fqn_skips_unnamed(self):
        root = Group("", base_url="https://example.com")
        child = root.register_group("docs", "/docs")
        assert child.fqn() == "docs"
        assert root.fqn() == ""

    def test_display_name(self):
        root = Group("")
        unnamed = root.register_group("", "/x")
        assert root.display_name() == "(root)"
        assert unnamed.display_name() == "(unnamed)"

    def test_root_and_full_path(self, api_manager):
        v1 = api_manager.group("api.v1")
        deeper = v1.register_group("admin", "/admin")
        assert deeper.root() is api_manager.group("api")
        assert deeper.full_path() == "/v1/admin"
        assert deeper.is_root is False
        assert api_manager.group("api").is_root is True


# ============================================================================
# Routes
# ============================================================================

class TestRoutes:

    def test_route_lookup(self, api_manager):
        api = api_manager.group("api")
        assert api.route("user") == "/users/:id"
        assert api.must_route("users") == "/users"
        assert api.has_route("user")
        assert not api.has_route("nope")

    def test_route_not_found(self, api_manager):
        with pytest.raises(RouteNotFoundFault) as exc_info:
            api_manager.group("api.v1").route("nope")
        assert exc_info.value.message == "route not found: route 'nope' in group api.v1"

    def test_add_routes_overwrites(self):
        group = Group("g", routes={"a": "/a"})
        group.add_routes({"a": "/a2", "b": "/b"})
        assert group.routes() == {"a": "/a2", "b": "/b"}

    def test_malformed_route_rejected_atomically(self):
        group = Group("g", routes={"a": "/a"})
        with pytest.raises(PatternSyntaxError):
            group.add_routes({"b": "/b", "c": "/:"})
        assert group.routes() == {"a": "/a"}

    def test_validate(self, api_manager):
        api = api_manager.group("api")
        api.validate(["user", "users"])

        with pytest.raises(GroupValidationFault) as exc_info:
            api.validate(["zeta", "user", "alpha"])
        assert exc_info.value.missing_routes == ["zeta", "alpha"]
        assert exc_info.value.message == "missing routes: [zeta alpha]"


# ============================================================================
# Children
# ============================================================================

class TestChildren:

    def test_register_child(self):
        root = Group("root")
        child = root.register_group("docs", "/docs", {"index": "/"})
        assert child.parent is root
        assert root.group("docs") is child
        assert root.children() == {"docs": child}

    def test_register_existing_merges_routes(self):
        root = Group("root")
        first = root.register_group("docs", "/docs", {"a": "/a"})
        second = root.register_group("docs", "/other", {"b": "/b"})
        assert first is second
        assert first.routes() == {"a": "/a", "b": "/b"}
        assert first.path == "/docs"

    def test_register_existing_fills_empty_path(self):
        root = Group("root")
        child = root.register_group("docs")
        root.register_group("docs", "/docs")
        assert child.path == "/docs"

    def test_group_not_found(self, api_manager):
        with pytest.raises(GroupNotFoundFault) as exc_info:
            api_manager.group("api").group("v9")
        assert exc_info.value.message == "group not found: api.v9"

    def test_get_child(self, api_manager):
        assert api_manager.group("api").get_child("v9") is None
        assert api_manager.group("api").get_child("v1") is api_manager.group("api.v1")


# ============================================================================
# Template state
# ============================================================================

class TestTemplateState:

    def test_template_var_is_local(self, template_manager):
        es = template_manager.group("site.es")
        assert es.get_template_var("locale") == "es-ES"
        assert es.get_template_var("host") is None

    def test_collect_nearest_wins(self, template_manager):
        variables = template_manager.group("site.es").collect_template_vars()
        assert variables == {"protocol": "https", "host": "example.com", "locale": "es-ES"}

    def test_find_template_owner(self, template_manager, api_manager):
        site = template_manager.group("site")
        assert template_manager.group("site.es").find_template_owner() is site
        assert api_manager.group("api.v1").find_template_owner() is None

    def test_clear_template(self, template_manager):
        site = template_manager.group("site")
        site.set_url_template("")
        assert site.url_template == ""
        assert site.find_template_owner() is None


# ============================================================================
# Rendering: path concatenation
# ============================================================================

class TestPathRendering:

    def test_root_route(self, api_manager):
        url = api_manager.group("api").render("user", {"id": "123"})
        assert url == "https://api.example.com/users/123"

    def test_nested_route(self, api_manager):
        url = api_manager.group("frontend.en").render("about")
        assert url == "https://example.com/en/about-us"

    def test_nested_root_route(self, api_manager):
        assert api_manager.group("frontend.en").render("home") == "https://example.com/en/"
        assert api_manager.group("frontend").render("home") == "https://example.com/"

    def test_optional_param(self, api_manager):
        api = api_manager.group("api")
        assert api.render("post", {"id": "1"}) == "https://api.example.com/users/1/posts"
        assert api.render("post", {"id": "1", "slug": "hi"}) == "https://api.example.com/users/1/posts/hi"

    def test_with_queries(self, api_manager):
        url = api_manager.group("api.v2").render("search", {}, {"q": "shoes"}, {"tag": "a"})
        assert url == "https://api.example.com/v2/search?q=shoes&tag=a"

    def test_overlapping_mount(self):
        m = RouteManager()
        m.register_group("api", "https://x.io")
        v1 = m.group("api").register_group("v1", "/api/v1", {"users": "/v1/users/"})
        assert v1.render("users") == "https://x.io/api/v1/users/"

    def test_unknown_route(self, api_manager):
        with pytest.raises(RouteNotFoundFault):
            api_manager.group("api").render("nope")

    def test_missing_param(self, api_manager):
        with pytest.raises(RouteBuildFault) as exc_info:
            api_manager.group("api").render("user", {})
        assert exc_info.value.route == "user"
        assert exc_info.value.group == "api"
        assert 'Expected "id" to be a string' in exc_info.value.message

    def test_route_added_after_render(self, api_manager):
        api = api_manager.group("api")
        api.add_routes({"user": "/people/:id"})
        assert api.render("user", {"id": "7"}) == "https://api.example.com/people/7"


# ============================================================================
# Rendering: URL templates
# ============================================================================

class TestTemplateRendering:

    def test_template_with_default_suffix(self, template_manager):
        url = template_manager.group("site").render("about")
        assert url == "https://example.com/en-US/about/"

    def test_child_inherits_template_and_overrides_vars(self, template_manager):
        url = template_manager.group("site.es").render("about")
        assert url == "https://example.com/es-ES/acerca/"

    def test_template_with_params_and_query(self, template_manager):
        url = template_manager.group("site").render("product", {"id": "5"}, {"ref": "x"})
        assert url == "https://example.com/en-US/products/5/?ref=x"

    def test_custom_suffix(self, template_manager):
        site = template_manager.group("site")
        site.set_template_var("route_path_suffix", "")
        assert site.render("about") == "https://example.com/en-US/about"

    def test_base_url_variable(self, template_manager):
        site = template_manager.group("site")
        site.set_url_template("{base_url}/{locale}{route_path}")
        assert site.render("about") == "https://example.com/en-US/about/"

    def test_missing_variable(self, template_manager):
        site = template_manager.group("site")
        site.set_url_template("{protocol}://{host}/{section}{route_path}")

        with pytest.raises(TemplateSubstitutionFault) as exc_info:
            template_manager.group("site.es").render("about")

        fault = exc_info.value
        assert fault.missing == ["section"]
        assert fault.group == "site.es"
        assert fault.route == "about"
        assert fault.template_owner == "site"

    def test_child_template_owner(self, template_manager):
        es = template_manager.group("site.es")
        es.set_url_template("https://{locale}.example.com{route_path}")
        assert es.render("about") == "https://es-ES.example.com/acerca/"
        # siblings and the parent keep the parent's template
        assert template_manager.group("site").render("about") == "https://example.com/en-US/about/"

    def test_hyphenated_variable(self, template_manager):
        site = template_manager.group("site")
        site.set_url_template("https://{cdn-host}{route_path}")
        site.set_template_var("cdn-host", "cdn.example.com")

        assert site.render("about") == "https://cdn.example.com/about/"
        assert template_manager.group("site.es").render("about") == "https://cdn.example.com/acerca/"

    def test_reserved_variables_override_user_values(self, template_manager):
        site = template_manager.group("site")
        es = template_manager.group("site.es")
        site.set_url_template("{base_url}|{route_path}")
        site.set_template_var("route_path", "/bogus")
        site.set_template_var("base_url", "x")
        es.set_template_var("route_path", "/nested-bogus")
        es.set_template_var("base_url", "y")

        assert site.render("about") == "https://example.com|/about/"
        assert es.render("about") == "https://example.com|/acerca/"


# ============================================================================
# Debug
# ============================================================================

class TestDebugLines:

    def test_lines(self):
        root = Group("web", base_url="https://example.com", routes={"home": "/"})
        root.set_url_template('{base_url}{route_path}')
        root.set_template_var("title", 'say "hi"')
        root.register_group("docs", "/docs", {"index": "/"})

        assert root.debug_lines() == [
            '- web (base="https://example.com")',
            '  template: "{base_url}{route_path}"',
            "  vars:",
            '    title = "say \\"hi\\""',
            "  routes:",
            "    - home: /",
            '  - web.docs (path="/docs")',
            "    vars:",
            '      title = "say \\"hi\\""',
            "    routes:",
            "      - index: /",
        ]
