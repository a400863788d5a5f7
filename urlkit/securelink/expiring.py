"""
Expiring signed links.

A link carries an HMAC-signed JWT holding caller data under the ``dat``
claim, along with ``iat`` and ``exp``. Tokens are appended to the route
either as a trailing path segment or as a query parameter.

Example:
    ```python
    links = SecureLinkManager(SecureLinkConfig(
        signing_key=secret,
        expiration=3600,
        base_url="https://example.com",
        query_key="token",
        routes={"activate": "/activate"},
    ))
    url = links.with_data("user_id", 42).generate("activate")
    # 'https://example.com/activate/eyJhbGciOi...'
    ```
"""

from __future__ import annotations

import base64
import json
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional
from urllib.parse import quote, quote_plus, urlsplit, urlunsplit

from ..faults import SecureRouteNotFoundFault, SigningKeyFault, TokenFault

logger = logging.getLogger("urlkit.securelink")

# Minimum key length in bytes per HMAC algorithm (hash output size)
MIN_KEY_LENGTHS = {
    "HS256": 32,
    "HS384": 48,
    "HS512": 64,
}

DEFAULT_SIGNING_METHOD = "HS256"


def _hash_algorithm(method: str):
    from cryptography.hazmat.primitives import hashes

    return {
        "HS256": hashes.SHA256,
        "HS384": hashes.SHA384,
        "HS512": hashes.SHA512,
    }[method]()


def validate_signing_key(key: str, method: str) -> None:
    """
    Raises:
        ValueError: unsupported method or key shorter than the hash output
    """
    minimum = MIN_KEY_LENGTHS.get(method)
    if minimum is None:
        raise ValueError("unsupported signing method")

    length = len(key.encode())
    if length < minimum:
        raise ValueError(
            f"signing key too short for {method} algorithm: got {length} bytes, "
            f"need at least {minimum} bytes ({minimum * 8} bits)"
        )


class Payload(dict):
    """Data carried by a validated link."""

    def get_string(self, key: str) -> str:
        """
        Raises:
            TokenFault: ``key`` is absent or not a string
        """
        value = self.get(key)
        if not isinstance(value, str):
            raise TokenFault(f"error decoding key {key}: not found", code="PAYLOAD_KEY_MISSING")
        return value


@dataclass
class SecureLinkConfig:
    """Signed link settings. ``expiration`` is in seconds."""
    signing_key: str
    expiration: float
    base_url: str
    query_key: str = "token"
    routes: dict[str, str] = field(default_factory=dict)
    as_query: bool = False
    signing_method: str = DEFAULT_SIGNING_METHOD

    def validate(self) -> SecureLinkConfig:
        """
        Raises:
            SigningKeyFault: key or algorithm rejected
        """
        try:
            validate_signing_key(self.signing_key, self.signing_method or DEFAULT_SIGNING_METHOD)
        except ValueError as exc:
            raise SigningKeyFault(str(exc)) from None
        return self


class SecureLinkManager:
    """
    Generates and validates expiring links for a fixed set of routes.

    Data set with ``with_data`` is consumed by the next ``generate`` call.
    """

    def __init__(self, config: SecureLinkConfig):
        self.config = config.validate()
        self.signing_method = config.signing_method or DEFAULT_SIGNING_METHOD
        self._lock = threading.RLock()
        self._payload: Optional[dict[str, Any]] = None

    @property
    def expiration(self) -> float:
        return self.config.expiration

    def get_expiration(self) -> float:
        return self.config.expiration

    def with_data(self, key: str, value: Any) -> SecureLinkManager:
        with self._lock:
            if self._payload is None:
                self._payload = {}
            self._payload[key] = value
        return self

    def generate(self, route: str) -> str:
        """
        Sign the pending data and build the link for ``route``.

        Raises:
            SecureRouteNotFoundFault: ``route`` is not configured
            TokenFault: signing failed
        """
        with self._lock:
            payload, self._payload = self._payload, None

        segment = self.config.routes.get(route)
        if segment is None:
            raise SecureRouteNotFoundFault(route)

        token = self.sign(payload)

        if self.config.as_query:
            url = self._join_path(segment)
            return f"{url}?{self.config.query_key}={quote_plus(token)}"
        return self._join_path(segment, token)

    def sign(self, data: Optional[dict[str, Any]]) -> str:
        """
        Raises:
            TokenFault: data could not be encoded
        """
        now = int(time.time())
        claims = {
            "dat": data,
            "iat": now,
            "exp": now + int(self.config.expiration),
        }
        header = {"alg": self.signing_method, "typ": "JWT"}

        try:
            header_b64 = self._base64_encode_json(header)
            payload_b64 = self._base64_encode_json(claims)
        except (TypeError, ValueError):
            logger.warning("Signed link payload is not JSON serializable")
            raise TokenFault("token signing failed", code="TOKEN_SIGNING_FAILED") from None

        message = f"{header_b64}.{payload_b64}".encode()
        signature_b64 = self._base64_encode(self._create_signature(message))
        return f"{header_b64}.{payload_b64}.{signature_b64}"

    def validate(self, token: str) -> Payload:
        """
        Verify ``token`` and return its ``dat`` claim.

        Raises:
            TokenFault: malformed, wrongly signed or expired token, or a
                payload that is not a mapping
        """
        if not isinstance(token, str) or not token:
            raise TokenFault()
        try:
            header_b64, payload_b64, signature_b64 = token.split(".")
            header = self._base64_decode_json(header_b64)
        except ValueError:
            raise TokenFault() from None

        if not isinstance(header, dict) or header.get("alg") != self.signing_method:
            raise TokenFault()

        message = f"{header_b64}.{payload_b64}".encode()
        try:
            signature = self._base64_decode(signature_b64)
        except ValueError:
            raise TokenFault() from None
        if not self._verify_signature(message, signature):
            raise TokenFault()

        try:
            claims = self._base64_decode_json(payload_b64)
        except ValueError:
            raise TokenFault() from None
        if not isinstance(claims, dict):
            raise TokenFault("invalid token claims", code="TOKEN_CLAIMS_INVALID")

        exp = claims.get("exp")
        if not isinstance(exp, (int, float)) or exp < time.time():
            raise TokenFault()

        data = claims.get("dat")
        if not isinstance(data, dict):
            raise TokenFault("token payload extraction failed", code="TOKEN_PAYLOAD_INVALID")
        return Payload(data)

    def get_and_validate(self, getter: Callable[[str], str]) -> Payload:
        """Read the token with ``getter(query_key)`` and validate it."""
        return self.validate(getter(self.config.query_key))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _join_path(self, *elements: str) -> str:
        scheme, netloc, path, query, fragment = urlsplit(self.config.base_url)
        parts = [path.rstrip("/")]
        for element in elements:
            stripped = element.strip("/")
            if stripped:
                parts.append(quote(stripped, safe="/"))
        joined = "/".join(parts)
        if not joined.startswith("/"):
            joined = "/" + joined
        return urlunsplit((scheme, netloc, joined, query, fragment))

    def _create_signature(self, message: bytes) -> bytes:
        from cryptography.hazmat.primitives import hmac

        h = hmac.HMAC(self.config.signing_key.encode(), _hash_algorithm(self.signing_method))
        h.update(message)
        return h.finalize()

    def _verify_signature(self, message: bytes, signature: bytes) -> bool:
        from cryptography.exceptions import InvalidSignature
        from cryptography.hazmat.primitives import hmac

        h = hmac.HMAC(self.config.signing_key.encode(), _hash_algorithm(self.signing_method))
        h.update(message)
        try:
            h.verify(signature)
        except InvalidSignature:
            return False
        return True

    def _base64_encode(self, data: bytes) -> str:
        """URL-safe base64 encode."""
        return base64.urlsafe_b64encode(data).rstrip(b"=").decode()

    def _base64_decode(self, data: str) -> bytes:
        """URL-safe base64 decode."""
        padding = 4 - (len(data) % 4)
        if padding != 4:
            data += "=" * padding
        try:
            return base64.urlsafe_b64decode(data.encode())
        except (ValueError, TypeError) as exc:
            raise ValueError("invalid base64") from exc

    def _base64_encode_json(self, data: dict[str, Any]) -> str:
        return self._base64_encode(json.dumps(data, separators=(",", ":")).encode())

    def _base64_decode_json(self, data: str) -> Any:
        try:
            return json.loads(self._base64_decode(data))
        except UnicodeDecodeError as exc:
            raise ValueError("invalid token segment") from exc
