"""
UrlKit Faults - Core types.

Every urlkit failure is a ``Fault``: an exception carrying a stable code,
the domain it belongs to, a severity and free-form metadata. Callers can
branch on the concrete class, on ``code`` or on ``domain``.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional


# ============================================================================
# Severity & Domain
# ============================================================================

class Severity(str, Enum):
    """How bad a fault is; maps onto a ``logging`` level."""
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"

    @property
    def log_level(self) -> int:
        return _LOG_LEVELS[self]


_LOG_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.WARN: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.FATAL: logging.CRITICAL,
}


class FaultDomain:
    """
    Functional area a fault belongs to.

    Domains compare equal to their name, so ``fault.domain == "routing"``
    works without importing the constants.
    """

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description

    @property
    def value(self) -> str:
        return self.name

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"FaultDomain({self.name!r})"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, FaultDomain):
            return self.name == other.name
        return self.name == other

    def __hash__(self) -> int:
        return hash(self.name)


FaultDomain.CONFIG = FaultDomain("config", "Configuration loading and validation")
FaultDomain.ROUTING = FaultDomain("routing", "Group and route lookup, path building")
FaultDomain.TEMPLATE = FaultDomain("template", "URL template substitution")
FaultDomain.PARAMS = FaultDomain("params", "Parameter and query input shapes")
FaultDomain.SECURITY = FaultDomain("security", "Signed link keys and tokens")


# Severity used when a fault does not pass one explicitly
DOMAIN_SEVERITY = {
    FaultDomain.CONFIG: Severity.FATAL,
    FaultDomain.ROUTING: Severity.ERROR,
    FaultDomain.TEMPLATE: Severity.ERROR,
    FaultDomain.PARAMS: Severity.ERROR,
    FaultDomain.SECURITY: Severity.ERROR,
}


# ============================================================================
# Fault - Base Class
# ============================================================================

class Fault(Exception):
    """
    Base fault class.

    Subclasses may declare ``code`` and ``domain`` as class attributes and
    pass only the message.

    Example:
        ```python
        try:
            manager.group("api").builder("user").build()
        except Fault as fault:
            logger.log(fault.severity.log_level, "%s", fault)
        ```
    """

    code: Optional[str] = None
    domain: Optional[FaultDomain] = None

    def __init__(
        self,
        code: Optional[str] = None,
        message: Optional[str] = None,
        *,
        domain: Optional[FaultDomain] = None,
        severity: Optional[Severity] = None,
        metadata: Optional[dict[str, Any]] = None,
    ):
        self.code = code or type(self).code
        self.domain = domain or type(self).domain
        if not self.code or message is None or self.domain is None:
            raise TypeError(f"{type(self).__name__} requires a code, a message and a domain")

        super().__init__(message)
        self.message = message
        self.severity = severity or DOMAIN_SEVERITY.get(self.domain, Severity.ERROR)
        self.metadata = metadata or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, domain={self.domain.value})"

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable form for logs and CLI output."""
        return {
            "code": self.code,
            "message": self.message,
            "domain": self.domain.value,
            "severity": self.severity.value,
            "metadata": self.metadata,
        }
