"""
Configuration for route hierarchies.

A configuration is a list of group descriptors:

```yaml
groups:
  - name: api
    base_url: https://api.example.com
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
```

``ConfigLoader`` reads JSON or YAML files and expands ``${VAR}`` references
in string values from the process environment, layered over an optional
``.env`` file.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import json
import logging
import os
import re

from dotenv import dotenv_values

from .faults import ConfigInvalidFault, ConfigMissingFault

logger = logging.getLogger("urlkit.config")

_ENV_REF_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def _string_map(value: Any, key: str) -> Dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigInvalidFault(key, f"{key} must be a mapping, got {type(value).__name__}")
    return {str(k): "" if v is None else str(v) for k, v in value.items()}


@dataclass
class GroupConfig:
    """Descriptor of one group and its subtree."""
    name: str
    base_url: str = ""
    path: str = ""
    routes: Dict[str, str] = field(default_factory=dict)
    paths: Dict[str, str] = field(default_factory=dict)  # legacy alias of routes
    groups: List["GroupConfig"] = field(default_factory=list)
    url_template: str = ""
    template_vars: Dict[str, str] = field(default_factory=dict)

    def effective_routes(self) -> Dict[str, str]:
        """``routes``, falling back to the legacy ``paths`` when empty."""
        if self.routes:
            return dict(self.routes)
        return dict(self.paths)

    @classmethod
    def from_dict(cls, data: Any) -> "GroupConfig":
        if not isinstance(data, dict):
            raise ConfigInvalidFault("groups", f"group entry must be a mapping, got {type(data).__name__}")

        children = data.get("groups") or []
        if not isinstance(children, list):
            raise ConfigInvalidFault("groups", "groups must be a list")

        return cls(
            name=str(data.get("name") or ""),
            base_url=str(data.get("base_url") or ""),
            path=str(data.get("path") or ""),
            routes=_string_map(data.get("routes"), "routes"),
            paths=_string_map(data.get("paths"), "paths"),
            groups=[cls.from_dict(child) for child in children],
            url_template=str(data.get("url_template") or ""),
            template_vars=_string_map(data.get("template_vars"), "template_vars"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name}
        if self.base_url:
            data["base_url"] = self.base_url
        if self.path:
            data["path"] = self.path
        if self.routes:
            data["routes"] = dict(self.routes)
        if self.paths:
            data["paths"] = dict(self.paths)
        if self.groups:
            data["groups"] = [g.to_dict() for g in self.groups]
        if self.url_template:
            data["url_template"] = self.url_template
        if self.template_vars:
            data["template_vars"] = dict(self.template_vars)
        return data


@dataclass
class Config:
    """Top-level configuration: the root groups."""
    groups: List[GroupConfig] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "Config":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigInvalidFault("config", f"configuration must be a mapping, got {type(data).__name__}")

        groups = data.get("groups") or []
        if not isinstance(groups, list):
            raise ConfigInvalidFault("groups", "groups must be a list")
        return cls(groups=[GroupConfig.from_dict(g) for g in groups])

    def to_dict(self) -> Dict[str, Any]:
        return {"groups": [g.to_dict() for g in self.groups]}


class ConfigLoader:
    """
    Loads route configuration files.

    Supported formats: ``.json``, ``.yaml`` and ``.yml``.
    """

    SUFFIXES = {".json": "_load_json_file", ".yaml": "_load_yaml_file", ".yml": "_load_yaml_file"}

    def __init__(self, env_file: Optional[Union[str, Path]] = None, expand_env: bool = True):
        self.env_file = env_file
        self.expand_env = expand_env
        self.environ: Dict[str, str] = {}

    @classmethod
    def load(
        cls,
        path: Union[str, Path],
        env_file: Optional[Union[str, Path]] = None,
        expand_env: bool = True,
    ) -> Config:
        """
        Load a configuration file.

        Args:
            path: JSON or YAML file
            env_file: Optional ``.env`` file providing variables for expansion
            expand_env: Expand ``${VAR}`` references in string values

        Raises:
            ConfigMissingFault: ``path`` does not exist
            ConfigInvalidFault: unknown suffix or malformed content
        """
        loader = cls(env_file=env_file, expand_env=expand_env)
        return loader.load_file(path)

    def load_file(self, path: Union[str, Path]) -> Config:
        path = Path(path)
        if not path.exists():
            raise ConfigMissingFault(str(path), f"file not found: {path}")

        method = self.SUFFIXES.get(path.suffix.lower())
        if method is None:
            raise ConfigInvalidFault(str(path), f"unsupported configuration format {path.suffix!r}")

        data = getattr(self, method)(path)
        if self.expand_env:
            self.environ = self._load_environ()
            data = self._expand(data)

        logger.debug("Loaded route configuration from %s", path)
        return Config.from_dict(data)

    def _load_json_file(self, path: Path) -> Any:
        """Load config from JSON file."""
        with open(path) as f:
            try:
                return json.load(f)
            except json.JSONDecodeError as exc:
                raise ConfigInvalidFault(str(path), f"invalid JSON: {exc}") from exc

    def _load_yaml_file(self, path: Path) -> Any:
        """Load config from YAML file."""
        import yaml
        with open(path) as f:
            try:
                return yaml.safe_load(f)
            except yaml.YAMLError as exc:
                raise ConfigInvalidFault(str(path), f"invalid YAML: {exc}") from exc

    def _load_environ(self) -> Dict[str, str]:
        """``.env`` values overridden by the process environment."""
        environ: Dict[str, str] = {}
        if self.env_file and Path(self.env_file).exists():
            environ.update({k: v for k, v in dotenv_values(self.env_file).items() if v is not None})
        environ.update(os.environ)
        return environ

    def _expand(self, value: Any) -> Any:
        if isinstance(value, str):
            return _ENV_REF_RE.sub(lambda m: self.environ.get(m.group(1), m.group(0)), value)
        if isinstance(value, dict):
            return {k: self._expand(v) for k, v in value.items()}
        if isinstance(value, list):
            return [self._expand(v) for v in value]
        return value


def load_manager(
    path: Union[str, Path],
    env_file: Optional[Union[str, Path]] = None,
    expand_env: bool = True,
):
    """Load a configuration file and build a ``RouteManager`` from it."""
    from .routing.manager import RouteManager

    return RouteManager.from_config(ConfigLoader.load(path, env_file=env_file, expand_env=expand_env))
