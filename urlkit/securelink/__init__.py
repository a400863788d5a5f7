"""
Expiring, HMAC-signed links.
"""

from .expiring import (
    MIN_KEY_LENGTHS,
    Payload,
    SecureLinkConfig,
    SecureLinkManager,
    validate_signing_key,
)

__all__ = [
    "MIN_KEY_LENGTHS",
    "Payload",
    "SecureLinkConfig",
    "SecureLinkManager",
    "validate_signing_key",
]
