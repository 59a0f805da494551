"""Pydantic models for vault request/response contracts shared by all transports."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class VaultModel(BaseModel):
    """Base model for immutable per-call request/response values."""

    model_config = ConfigDict(frozen=True)


class HashRequest(VaultModel):
    """Request to hash one plaintext password."""

    password: str = ""


class HashResponse(VaultModel):
    """Hash result; err is set only when hashing failed, leaving hash empty."""

    hash: str = ""
    err: str | None = None


class ValidateRequest(VaultModel):
    """Request to check one plaintext password against a stored hash."""

    password: str = ""
    hash: str = ""


class ValidateResponse(VaultModel):
    """Validation result; err is set only when validation failed, leaving valid False."""

    valid: bool = False
    err: str | None = None
