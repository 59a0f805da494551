"""Transport-agnostic endpoints for the vault service operations.

An endpoint is an async callable taking one request model and returning one response model.
Domain failures from the service are embedded in the response ``err`` field; anything raised
by an endpoint is a transport-level failure for the adapter to report natively.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

from vault.application.dto.vault_models import (
    HashRequest,
    HashResponse,
    ValidateRequest,
    ValidateResponse,
)
from vault.application.ports.vault_service_port import VaultServicePort
from vault.domain.errors import VaultServiceError

RequestT = TypeVar("RequestT")
ResponseT = TypeVar("ResponseT")

Endpoint = Callable[[RequestT], Awaitable[ResponseT]]
EndpointMiddleware = Callable[[Endpoint[Any, Any]], Endpoint[Any, Any]]

logger = logging.getLogger(__name__)


def make_hash_endpoint(service: VaultServicePort) -> Endpoint[HashRequest, HashResponse]:
    """Build the hash endpoint bound to service."""

    async def hash_endpoint(request: HashRequest) -> HashResponse:
        try:
            password_hash = await service.hash(request.password)
        except VaultServiceError as error:
            logger.warning("vault_hash_failed error=%s", error)
            return HashResponse(hash="", err=str(error))
        return HashResponse(hash=password_hash)

    return hash_endpoint


def make_validate_endpoint(
    service: VaultServicePort,
) -> Endpoint[ValidateRequest, ValidateResponse]:
    """Build the validate endpoint bound to service."""

    async def validate_endpoint(request: ValidateRequest) -> ValidateResponse:
        try:
            valid = await service.validate(request.password, request.hash)
        except VaultServiceError as error:
            logger.warning("vault_validate_failed error=%s", error)
            return ValidateResponse(valid=False, err=str(error))
        return ValidateResponse(valid=valid)

    return validate_endpoint


def chain(
    endpoint: Endpoint[RequestT, ResponseT],
    middleware: Sequence[EndpointMiddleware],
) -> Endpoint[RequestT, ResponseT]:
    """Wrap endpoint with middleware; the first middleware is the outermost."""

    wrapped: Endpoint[Any, Any] = endpoint
    for decorate in reversed(middleware):
        wrapped = decorate(wrapped)
    return wrapped


@dataclass(frozen=True)
class VaultEndpoints:
    """One endpoint per vault operation, usable wherever a VaultServicePort is expected.

    Calling ``hash``/``validate`` goes through the endpoints and converts an embedded
    ``err`` back into a raised VaultServiceError, so local, HTTP, and gRPC backed
    endpoints are interchangeable at the call site.
    """

    hash_endpoint: Endpoint[HashRequest, HashResponse]
    validate_endpoint: Endpoint[ValidateRequest, ValidateResponse]

    async def hash(self, password: str) -> str:
        response = await self.hash_endpoint(HashRequest(password=password))
        if response.err:
            raise VaultServiceError(response.err)
        return response.hash

    async def validate(self, password: str, password_hash: str) -> bool:
        response = await self.validate_endpoint(
            ValidateRequest(password=password, hash=password_hash)
        )
        if response.err:
            raise VaultServiceError(response.err)
        return response.valid


def build_endpoints(
    service: VaultServicePort,
    *,
    middleware: Sequence[EndpointMiddleware] = (),
) -> VaultEndpoints:
    """Build endpoints for every vault operation, each wrapped with middleware."""

    return VaultEndpoints(
        hash_endpoint=chain(make_hash_endpoint(service), middleware),
        validate_endpoint=chain(make_validate_endpoint(service), middleware),
    )
