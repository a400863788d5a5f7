"""
Locale configuration and detection.

Locales are picked from a request-like context dict by a list of detection
strategies tried in order:

- ``context``: the ``locale`` or ``user_locale`` key
- ``url``: ``url_path`` such as ``/es/products`` or ``/locale/es/products``
- ``header``: ``accept_language`` (``es-MX,es;q=0.9``), with ``es-MX``
  falling back to ``es``
- ``cookie``: the ``cookie_locale`` key

With hierarchical locales enabled, each locale lives in a child group
named ``<group>.<locale>``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from .faults import ConfigInvalidFault


class LocaleDetectionStrategy(str, Enum):
    """Where a locale may be read from."""
    CONTEXT = "context"
    URL = "url"
    HEADER = "header"
    COOKIE = "cookie"


CONTEXT_LOCALE_KEYS = ("locale", "user_locale")
URL_PATH_KEY = "url_path"
ACCEPT_LANGUAGE_KEY = "accept_language"
COOKIE_LOCALE_KEY = "cookie_locale"


@dataclass
class LocaleInfo:
    """One entry of a language switcher or hreflang list."""
    locale: str
    url: str

    def to_dict(self) -> Dict[str, str]:
        return {"locale": self.locale, "url": self.url}


def parse_accept_language(header: str) -> List[str]:
    """
    Language tags of an ``Accept-Language`` header, highest quality first.

    Example:
        parse_accept_language("de;q=0.5,es-MX,en;q=0.8") -> ["es-MX", "en", "de"]
    """
    weighted = []
    for index, part in enumerate(header.split(",")):
        tag, _, params = part.strip().partition(";")
        tag = tag.strip()
        if not tag or tag == "*":
            continue
        quality = 1.0
        params = params.strip()
        if params.startswith("q="):
            try:
                quality = float(params[2:])
            except ValueError:
                quality = 0.0
        if quality <= 0:
            continue
        weighted.append((-quality, index, tag))
    return [tag for _, _, tag in sorted(weighted)]


@dataclass
class LocaleConfig:
    """Supported locales and how to detect the active one."""
    default_locale: str = "en"
    supported_locales: List[str] = field(default_factory=lambda: ["en"])
    locale_groups: Dict[str, List[str]] = field(default_factory=dict)
    detection_strategies: List[LocaleDetectionStrategy] = field(
        default_factory=lambda: [LocaleDetectionStrategy.CONTEXT]
    )
    enable_locale_fallback: bool = True
    enable_locale_validation: bool = True
    enable_hierarchical_locales: bool = False

    # ------------------------------------------------------------------
    # Presets
    # ------------------------------------------------------------------

    @classmethod
    def multi_strategy(
        cls,
        default_locale: str,
        supported_locales: List[str],
        strategies: List[LocaleDetectionStrategy],
    ) -> "LocaleConfig":
        return cls(
            default_locale=default_locale,
            supported_locales=list(supported_locales),
            detection_strategies=list(strategies),
        )

    @classmethod
    def url_based(cls, default_locale: str, supported_locales: List[str]) -> "LocaleConfig":
        return cls.multi_strategy(default_locale, supported_locales, [LocaleDetectionStrategy.URL])

    @classmethod
    def header_based(cls, default_locale: str, supported_locales: List[str]) -> "LocaleConfig":
        return cls.multi_strategy(default_locale, supported_locales, [LocaleDetectionStrategy.HEADER])

    @classmethod
    def full_stack(cls, default_locale: str, supported_locales: List[str]) -> "LocaleConfig":
        """Context, then URL, then header, then cookie."""
        return cls.multi_strategy(default_locale, supported_locales, list(LocaleDetectionStrategy))

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self) -> "LocaleConfig":
        """
        Raises:
            ConfigInvalidFault: inconsistent locale settings
        """
        if not self.default_locale:
            raise ConfigInvalidFault("default_locale", "default locale is required")
        if not self.supported_locales:
            raise ConfigInvalidFault("supported_locales", "at least one supported locale is required")
        if self.default_locale not in self.supported_locales:
            raise ConfigInvalidFault(
                "default_locale",
                f"default locale {self.default_locale!r} is not in supported locales",
            )
        for group, locales in self.locale_groups.items():
            unknown = sorted(set(locales) - set(self.supported_locales))
            if unknown:
                raise ConfigInvalidFault(
                    "locale_groups",
                    f"group {group} lists unsupported locales {unknown}",
                )
        for strategy in self.detection_strategies:
            try:
                LocaleDetectionStrategy(strategy)
            except ValueError:
                raise ConfigInvalidFault(
                    "detection_strategies", f"unknown detection strategy {strategy!r}"
                ) from None
        return self

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def locales_for_group(self, group: str = "") -> List[str]:
        """Locales allowed for ``group``; the global list when unrestricted."""
        if group and group in self.locale_groups:
            return list(self.locale_groups[group])
        return list(self.supported_locales)

    def is_supported(self, locale: str, group: str = "") -> bool:
        return locale in self.locales_for_group(group)

    def resolve_locale(self, locale: str, group: str = "") -> Optional[str]:
        """
        Locale to use when ``locale`` is requested for ``group``.

        Returns None when validation rejects it and fallback is disabled.
        """
        if not self.enable_locale_validation or self.is_supported(locale, group):
            return locale
        if self.enable_locale_fallback:
            return self.default_locale
        return None

    def locale_group(self, group: str, locale: str) -> str:
        """Group path that serves ``locale``."""
        if self.enable_hierarchical_locales:
            return f"{group}.{locale}"
        return group

    # ------------------------------------------------------------------
    # Detection
    # ------------------------------------------------------------------

    def detect_locale(self, context: Optional[Mapping[str, Any]], group: str = "") -> str:
        """First acceptable locale found by the detection strategies, else the default."""
        context = context or {}
        for strategy in self.detection_strategies:
            for candidate in self._candidates(LocaleDetectionStrategy(strategy), context):
                if self._acceptable(candidate, group):
                    return candidate
        return self.default_locale

    def _acceptable(self, locale: str, group: str) -> bool:
        if not locale:
            return False
        return not self.enable_locale_validation or self.is_supported(locale, group)

    def _candidates(self, strategy: LocaleDetectionStrategy, context: Mapping[str, Any]) -> List[str]:
        if strategy == LocaleDetectionStrategy.CONTEXT:
            for key in CONTEXT_LOCALE_KEYS:
                value = context.get(key)
                if isinstance(value, str) and value:
                    return [value]
            return []

        if strategy == LocaleDetectionStrategy.URL:
            path = context.get(URL_PATH_KEY)
            if not isinstance(path, str):
                return []
            segments = [s for s in path.split("/") if s]
            if len(segments) >= 2 and segments[0] == "locale":
                return [segments[1]]
            return segments[:1]

        if strategy == LocaleDetectionStrategy.HEADER:
            header = context.get(ACCEPT_LANGUAGE_KEY)
            if not isinstance(header, str):
                return []
            candidates = []
            for tag in parse_accept_language(header):
                candidates.append(tag)
                primary = tag.split("-")[0]
                if primary != tag:
                    candidates.append(primary)
            return candidates

        if strategy == LocaleDetectionStrategy.COOKIE:
            value = context.get(COOKIE_LOCALE_KEY)
            return [value] if isinstance(value, str) and value else []

        return []
