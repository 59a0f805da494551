"""In-process vault service backed by a password hasher."""

from __future__ import annotations

import asyncio

from vault.application.ports.password_hasher_port import PasswordHasherPort
from vault.application.ports.vault_service_port import VaultServicePort


class VaultService(VaultServicePort):
    """Hash and validate passwords without keeping per-request state.

    The hasher is read-only after construction, so one instance may be shared across
    transports and concurrent calls. Hashing runs in a worker thread; once started it is
    not interrupted by cancellation.
    """

    def __init__(self, *, password_hasher: PasswordHasherPort) -> None:
        self._password_hasher = password_hasher

    async def hash(self, password: str) -> str:
        """Return a salted hash for password, raising HashingError on failure."""

        return await asyncio.to_thread(self._password_hasher.hash_password, password)

    async def validate(self, password: str, password_hash: str) -> bool:
        """Return whether password matches password_hash; malformed hashes never match."""

        return await asyncio.to_thread(
            self._password_hasher.verify_password,
            password=password,
            password_hash=password_hash,
        )
