"""
Configuration (urlkit.config)

Tests GroupConfig/Config parsing and ConfigLoader file loading with
environment expansion.
"""

import json
import textwrap

import pytest

from urlkit.config import Config, ConfigLoader, GroupConfig, load_manager
from urlkit.faults import ConfigInvalidFault, ConfigMissingFault


YAML_CONFIG = textwrap.dedent("""\
    groups:
      - name: api
        base_url: ${API_URL}
        routes:
          user: /users/:id
        groups:
          - name: v2
            path: /v2
            routes:
              user: /users/:id
      - name: frontend
        base_url: https://example.com
        url_template: "{base_url}/{locale}{route_path}"
        template_vars:
          locale: en
        routes:
          about: /about
""")


# ============================================================================
# Data model
# ============================================================================

class TestGroupConfig:

    def test_from_dict(self):
        cfg = GroupConfig.from_dict({
            "name": "api",
            "base_url": "https://x.io",
            "routes": {"a": "/a", "n": 1},
            "groups": [{"name": "v1", "path": "/v1"}],
        })
        assert cfg.name == "api"
        assert cfg.routes == {"a": "/a", "n": "1"}
        assert cfg.groups[0].path == "/v1"

    def test_legacy_paths(self):
        cfg = GroupConfig.from_dict({"name": "a", "paths": {"x": "/x"}})
        assert cfg.effective_routes() == {"x": "/x"}

    def test_routes_win_over_paths(self):
        cfg = GroupConfig.from_dict({"name": "a", "routes": {"r": "/r"}, "paths": {"x": "/x"}})
        assert cfg.effective_routes() == {"r": "/r"}

    def test_invalid_shapes(self):
        with pytest.raises(ConfigInvalidFault):
            GroupConfig.from_dict(["not", "a", "mapping"])
        with pytest.raises(ConfigInvalidFault, match="routes must be a mapping"):
            GroupConfig.from_dict({"name": "a", "routes": ["/a"]})
        with pytest.raises(ConfigInvalidFault, match="groups must be a list"):
            GroupConfig.from_dict({"name": "a", "groups": {"name": "b"}})

    def test_round_trip_dict(self):
        data = {
            "name": "frontend",
            "base_url": "https://example.com",
            "url_template": "{base_url}{route_path}",
            "template_vars": {"locale": "en"},
            "groups": [{"name": "en", "path": "/en", "routes": {"home": "/"}}],
        }
        assert GroupConfig.from_dict(data).to_dict() == data


class TestConfig:

    def test_from_dict(self):
        config = Config.from_dict({"groups": [{"name": "a"}, {"name": "b"}]})
        assert [g.name for g in config.groups] == ["a", "b"]

    def test_empty(self):
        assert Config.from_dict(None).groups == []
        assert Config.from_dict({}).groups == []

    def test_invalid(self):
        with pytest.raises(ConfigInvalidFault):
            Config.from_dict("groups")
        with pytest.raises(ConfigInvalidFault):
            Config.from_dict({"groups": "a"})


# ============================================================================
# ConfigLoader
# ============================================================================

class TestConfigLoader:

    def test_load_yaml_with_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("API_URL", "https://api.example.com")
        path = tmp_path / "routes.yaml"
        path.write_text(YAML_CONFIG)

        config = ConfigLoader.load(path)
        assert config.groups[0].base_url == "https://api.example.com"
        assert config.groups[1].template_vars == {"locale": "en"}

    def test_env_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("API_URL", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("API_URL=https://dotenv.example.com\n")
        path = tmp_path / "routes.yml"
        path.write_text(YAML_CONFIG)

        config = ConfigLoader.load(path, env_file=env_file)
        assert config.groups[0].base_url == "https://dotenv.example.com"

    def test_environment_overrides_env_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("API_URL", "https://process.example.com")
        env_file = tmp_path / ".env"
        env_file.write_text("API_URL=https://dotenv.example.com\n")
        path = tmp_path / "routes.yaml"
        path.write_text(YAML_CONFIG)

        config = ConfigLoader.load(path, env_file=env_file)
        assert config.groups[0].base_url == "https://process.example.com"

    def test_unknown_variable_left_as_is(self, tmp_path, monkeypatch):
        monkeypatch.delenv("API_URL", raising=False)
        path = tmp_path / "routes.yaml"
        path.write_text(YAML_CONFIG)
        assert ConfigLoader.load(path).groups[0].base_url == "${API_URL}"

    def test_expansion_disabled(self, tmp_path, monkeypatch):
        monkeypatch.setenv("API_URL", "https://api.example.com")
        path = tmp_path / "routes.yaml"
        path.write_text(YAML_CONFIG)
        assert ConfigLoader.load(path, expand_env=False).groups[0].base_url == "${API_URL}"

    def test_load_json(self, tmp_path):
        path = tmp_path / "routes.json"
        path.write_text(json.dumps({"groups": [{"name": "api", "routes": {"a": "/a"}}]}))
        assert ConfigLoader.load(path).groups[0].routes == {"a": "/a"}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigMissingFault, match="file not found"):
            ConfigLoader.load(tmp_path / "nope.yaml")

    def test_unknown_suffix(self, tmp_path):
        path = tmp_path / "routes.toml"
        path.write_text("")
        with pytest.raises(ConfigInvalidFault, match="unsupported configuration format"):
            ConfigLoader.load(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "routes.json"
        path.write_text("{not json")
        with pytest.raises(ConfigInvalidFault, match="invalid JSON"):
            ConfigLoader.load(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "routes.yaml"
        path.write_text("groups: [unclosed")
        with pytest.raises(ConfigInvalidFault, match="invalid YAML"):
            ConfigLoader.load(path)

    def test_load_manager(self, tmp_path, monkeypatch):
        monkeypatch.setenv("API_URL", "https://api.example.com")
        path = tmp_path / "routes.yaml"
        path.write_text(YAML_CONFIG)

        manager = load_manager(path)
        assert manager.resolve("api.v2", "user", {"id": 1}) == "https://api.example.com/v2/users/1"
        assert manager.resolve("frontend", "about") == "https://example.com/en/about/"
