"""
Expiring signed links (urlkit.securelink)
"""

import base64
import json
import time

import pytest

from urlkit.faults import SecureRouteNotFoundFault, SigningKeyFault, TokenFault
from urlkit.securelink import (
    Payload,
    SecureLinkConfig,
    SecureLinkManager,
    validate_signing_key,
)

KEY_32 = "k" * 32
KEY_64 = "k" * 64


def make_manager(**overrides):
    options = {
        "signing_key": KEY_32,
        "expiration": 3600,
        "base_url": "https://example.com",
        "query_key": "token",
        "routes": {"activate": "/activate", "reset": "/account/reset/"},
    }
    options.update(overrides)
    return SecureLinkManager(SecureLinkConfig(**options))


def token_from_path(url):
    return url.rsplit("/", 1)[1]


def decode_segment(segment):
    padding = "=" * (-len(segment) % 4)
    return json.loads(base64.urlsafe_b64decode(segment + padding))


# ============================================================================
# Configuration
# ============================================================================

class TestSigningKey:

    @pytest.mark.parametrize("method, length", [("HS256", 32), ("HS384", 48), ("HS512", 64)])
    def test_minimum_lengths(self, method, length):
        validate_signing_key("k" * length, method)
        with pytest.raises(ValueError, match=f"got {length - 1} bytes, need at least {length} bytes"):
            validate_signing_key("k" * (length - 1), method)

    def test_unsupported_method(self):
        with pytest.raises(ValueError, match="unsupported signing method"):
            validate_signing_key(KEY_64, "RS256")

    def test_manager_rejects_short_key(self):
        with pytest.raises(SigningKeyFault) as exc_info:
            make_manager(signing_key="short")
        assert exc_info.value.message.startswith(
            "configuration validation failed: signing key too short for HS256 algorithm"
        )

    def test_key_length_counts_bytes(self):
        # 16 two-byte characters
        validate_signing_key("é" * 16, "HS256")


# ============================================================================
# Generate / validate
# ============================================================================

class TestSecureLinks:

    def test_path_token_round_trip(self):
        links = make_manager()
        url = links.with_data("user_id", 42).with_data("email", "a@b.c").generate("activate")

        assert url.startswith("https://example.com/activate/")
        payload = links.validate(token_from_path(url))
        assert payload == {"user_id": 42, "email": "a@b.c"}
        assert isinstance(payload, Payload)

    def test_query_token(self):
        links = make_manager(as_query=True)
        url = links.with_data("id", "1").generate("reset")

        assert url.startswith("https://example.com/account/reset?token=")
        token = url.split("?token=", 1)[1]
        assert links.get_and_validate({"token": token}.get) == {"id": "1"}

    def test_claims(self):
        links = make_manager(expiration=60)
        before = int(time.time())
        token = token_from_path(links.with_data("a", 1).generate("activate"))

        header_b64, claims_b64, _ = token.split(".")
        assert decode_segment(header_b64) == {"alg": "HS256", "typ": "JWT"}
        claims = decode_segment(claims_b64)
        assert claims["dat"] == {"a": 1}
        assert before <= claims["iat"] <= claims["exp"] - 60

    def test_payload_reset_after_generate(self):
        links = make_manager()
        links.with_data("a", 1).generate("activate")
        token = token_from_path(links.generate("activate"))

        with pytest.raises(TokenFault, match="token payload extraction failed"):
            links.validate(token)

    def test_unknown_route(self):
        links = make_manager()
        with pytest.raises(SecureRouteNotFoundFault, match="route 'nope' not found in configured routes"):
            links.with_data("a", 1).generate("nope")

    def test_unknown_route_still_consumes_payload(self):
        links = make_manager()
        with pytest.raises(SecureRouteNotFoundFault):
            links.with_data("a", 1).generate("nope")
        with pytest.raises(TokenFault):
            links.validate(token_from_path(links.generate("activate")))

    def test_base_url_path_kept(self):
        links = make_manager(base_url="https://example.com/app/")
        assert links.with_data("a", 1).generate("activate").startswith("https://example.com/app/activate/")

    def test_unserializable_payload(self):
        links = make_manager()
        with pytest.raises(TokenFault, match="token signing failed"):
            links.with_data("a", object()).generate("activate")

    @pytest.mark.parametrize("method, key", [("HS384", "k" * 48), ("HS512", KEY_64)])
    def test_other_algorithms(self, method, key):
        links = make_manager(signing_key=key, signing_method=method)
        token = token_from_path(links.with_data("a", 1).generate("activate"))
        assert links.validate(token) == {"a": 1}

    def test_expiration_property(self):
        links = make_manager(expiration=120)
        assert links.expiration == 120
        assert links.get_expiration() == 120


class TestTokenValidation:

    def setup_method(self):
        self.links = make_manager()
        self.token = token_from_path(self.links.with_data("a", 1).generate("activate"))

    def test_tampered_payload(self):
        header, _, signature = self.token.split(".")
        forged = base64.urlsafe_b64encode(
            json.dumps({"dat": {"a": 2}, "exp": time.time() + 60}).encode()
        ).rstrip(b"=").decode()
        with pytest.raises(TokenFault, match="token validation failed"):
            self.links.validate(f"{header}.{forged}.{signature}")

    def test_wrong_key(self):
        other = make_manager(signing_key="x" * 32)
        with pytest.raises(TokenFault, match="token validation failed"):
            other.validate(self.token)

    def test_wrong_algorithm(self):
        other = make_manager(signing_key=KEY_64, signing_method="HS512")
        with pytest.raises(TokenFault):
            other.validate(self.token)

    def test_expired(self):
        links = make_manager(expiration=-10)
        token = token_from_path(links.with_data("a", 1).generate("activate"))
        with pytest.raises(TokenFault, match="token validation failed"):
            links.validate(token)

    @pytest.mark.parametrize("token", ["", "abc", "a.b", "a.b.c.d", "!!.??.**", None])
    def test_malformed(self, token):
        with pytest.raises(TokenFault, match="token validation failed"):
            self.links.validate(token)

    def test_payload_get_string(self):
        payload = Payload({"email": "a@b.c", "n": 1})
        assert payload.get_string("email") == "a@b.c"
        with pytest.raises(TokenFault, match="error decoding key n: not found"):
            payload.get_string("n")
