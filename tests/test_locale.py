"""
Locale configuration and detection (urlkit.locale)
"""

import pytest

from urlkit.faults import ConfigInvalidFault
from urlkit.locale import (
    LocaleConfig,
    LocaleDetectionStrategy,
    LocaleInfo,
    parse_accept_language,
)


class TestAcceptLanguage:

    def test_quality_order(self):
        assert parse_accept_language("de;q=0.5,es-MX,en;q=0.8") == ["es-MX", "en", "de"]

    def test_ties_keep_header_order(self):
        assert parse_accept_language("fr, it") == ["fr", "it"]

    def test_skips_wildcard_and_zero(self):
        assert parse_accept_language("*, en;q=0, es;q=bad, pt") == ["pt"]


class TestLocaleConfig:

    def test_defaults(self):
        cfg = LocaleConfig()
        assert cfg.default_locale == "en"
        assert cfg.supported_locales == ["en"]
        assert cfg.detection_strategies == [LocaleDetectionStrategy.CONTEXT]
        assert cfg.enable_locale_fallback is True

    def test_presets(self):
        assert LocaleConfig.url_based("en", ["en"]).detection_strategies == [LocaleDetectionStrategy.URL]
        assert LocaleConfig.header_based("en", ["en"]).detection_strategies == [LocaleDetectionStrategy.HEADER]
        assert LocaleConfig.full_stack("en", ["en"]).detection_strategies == [
            LocaleDetectionStrategy.CONTEXT,
            LocaleDetectionStrategy.URL,
            LocaleDetectionStrategy.HEADER,
            LocaleDetectionStrategy.COOKIE,
        ]

    def test_validate(self):
        LocaleConfig(default_locale="en", supported_locales=["en", "es"]).validate()
        with pytest.raises(ConfigInvalidFault, match="not in supported locales"):
            LocaleConfig(default_locale="fr", supported_locales=["en"]).validate()
        with pytest.raises(ConfigInvalidFault, match="unsupported locales"):
            LocaleConfig(supported_locales=["en"], locale_groups={"shop": ["en", "de"]}).validate()
        with pytest.raises(ConfigInvalidFault, match="unknown detection strategy"):
            LocaleConfig(detection_strategies=["geoip"]).validate()

    def test_locales_for_group(self):
        cfg = LocaleConfig(supported_locales=["en", "es", "fr"], locale_groups={"shop": ["en", "es"]})
        assert cfg.locales_for_group("shop") == ["en", "es"]
        assert cfg.locales_for_group("blog") == ["en", "es", "fr"]
        assert cfg.is_supported("fr", "blog")
        assert not cfg.is_supported("fr", "shop")

    def test_resolve_locale(self):
        cfg = LocaleConfig(supported_locales=["en", "es"])
        assert cfg.resolve_locale("es") == "es"
        assert cfg.resolve_locale("de") == "en"

        cfg.enable_locale_fallback = False
        assert cfg.resolve_locale("de") is None

        cfg.enable_locale_validation = False
        assert cfg.resolve_locale("de") == "de"

    def test_locale_group(self):
        cfg = LocaleConfig()
        assert cfg.locale_group("frontend", "es") == "frontend"
        cfg.enable_hierarchical_locales = True
        assert cfg.locale_group("frontend", "es") == "frontend.es"


class TestDetection:

    def setup_method(self):
        self.cfg = LocaleConfig.full_stack("en", ["en", "es", "fr"])

    def test_context(self):
        assert self.cfg.detect_locale({"locale": "es"}) == "es"
        assert self.cfg.detect_locale({"user_locale": "fr"}) == "fr"

    def test_url(self):
        assert self.cfg.detect_locale({"url_path": "/es/products"}) == "es"
        assert self.cfg.detect_locale({"url_path": "/locale/fr/products"}) == "fr"

    def test_header_with_region_fallback(self):
        assert self.cfg.detect_locale({"accept_language": "es-MX,de;q=0.5"}) == "es"

    def test_cookie(self):
        assert self.cfg.detect_locale({"cookie_locale": "fr"}) == "fr"

    def test_strategy_order(self):
        context = {"cookie_locale": "fr", "url_path": "/es/x"}
        assert self.cfg.detect_locale(context) == "es"

    def test_unsupported_skipped(self):
        context = {"locale": "de", "url_path": "/products", "cookie_locale": "fr"}
        assert self.cfg.detect_locale(context) == "fr"

    def test_default(self):
        assert self.cfg.detect_locale(None) == "en"
        assert self.cfg.detect_locale({}) == "en"


class TestLocaleInfo:

    def test_to_dict(self):
        assert LocaleInfo("es", "https://x.io/es/").to_dict() == {"locale": "es", "url": "https://x.io/es/"}
