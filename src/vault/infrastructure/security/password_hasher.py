"""Bcrypt password hasher adapter."""

from __future__ import annotations

import bcrypt

from vault.application.ports.password_hasher_port import PasswordHasherPort
from vault.domain.errors import HashingError

DEFAULT_COST = 10
MIN_COST = 4
MAX_COST = 31
MAX_PASSWORD_BYTES = 72


class BcryptPasswordHasher(PasswordHasherPort):
    """Password hashing adapter using bcrypt at a fixed cost factor."""

    def __init__(self, *, cost: int = DEFAULT_COST) -> None:
        self._cost = cost

    @property
    def cost(self) -> int:
        return self._cost

    def hash_password(self, password: str) -> str:
        try:
            encoded = password.encode("utf-8")
        except UnicodeEncodeError as error:
            raise HashingError("password is not valid UTF-8 text") from error
        # bcrypt only reads the first 72 bytes; longer inputs are rejected instead of truncated.
        if len(encoded) > MAX_PASSWORD_BYTES:
            raise HashingError(f"password length exceeds {MAX_PASSWORD_BYTES} bytes")
        if not MIN_COST <= self._cost <= MAX_COST:
            raise HashingError(f"invalid bcrypt cost {self._cost}")
        try:
            salt = bcrypt.gensalt(rounds=self._cost)
            return bcrypt.hashpw(encoded, salt).decode("utf-8")
        except ValueError as error:
            raise HashingError(str(error)) from error

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            return False
