"""Port for the two-operation vault service contract."""

from __future__ import annotations

from typing import Protocol


class VaultServicePort(Protocol):
    """Hash and validate passwords.

    Implemented by the in-process service and by endpoint-backed clients, so callers can
    swap a local service for a remote one without changes.
    """

    async def hash(self, password: str) -> str:
        """Return a salted hash for password or raise VaultServiceError."""

    async def validate(self, password: str, password_hash: str) -> bool:
        """Return whether password matches password_hash."""
