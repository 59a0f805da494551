"""Error types shared by the vault service, endpoints, and transports."""

from __future__ import annotations


class VaultError(RuntimeError):
    """Base class for vault failures."""


class VaultServiceError(VaultError):
    """Domain failure raised by a vault service and carried in response payloads."""


class HashingError(VaultServiceError):
    """Raised when the hashing primitive cannot derive a hash for a password."""


class RateLimitedError(VaultError):
    """Raised when an endpoint call is denied by the rate limiter."""

    def __init__(self, message: str = "rate limit exceeded") -> None:
        super().__init__(message)


class VaultTransportError(VaultError):
    """Raised by remote clients when a call fails at the transport level."""
