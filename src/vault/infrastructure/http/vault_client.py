"""HTTP/JSON client building vault endpoints over an httpx client."""

from __future__ import annotations

from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from vault.application.dto.vault_models import (
    HashRequest,
    HashResponse,
    ValidateRequest,
    ValidateResponse,
)
from vault.application.endpoints import Endpoint, VaultEndpoints
from vault.domain.errors import RateLimitedError, VaultTransportError

ResponseModelT = TypeVar("ResponseModelT", bound=BaseModel)


def new_http_client(http_client: httpx.AsyncClient) -> VaultEndpoints:
    """Return a vault service backed by POST /hash and POST /validate on http_client.

    The caller owns http_client, including its base URL and lifetime.
    """

    return VaultEndpoints(
        hash_endpoint=_make_http_endpoint(http_client, "/hash", HashResponse),
        validate_endpoint=_make_http_endpoint(http_client, "/validate", ValidateResponse),
    )


def _make_http_endpoint(
    http_client: httpx.AsyncClient,
    path: str,
    response_model: type[ResponseModelT],
) -> Endpoint[HashRequest | ValidateRequest, ResponseModelT]:
    async def http_endpoint(request: HashRequest | ValidateRequest) -> ResponseModelT:
        try:
            response = await http_client.post(path, json=request.model_dump())
        except httpx.HTTPError as error:
            raise VaultTransportError(f"POST {path} failed: {error}") from error

        if response.status_code == 429:
            raise RateLimitedError()
        if response.status_code != 200:
            raise VaultTransportError(
                f"POST {path} returned status={response.status_code} body={response.text}"
            )
        try:
            return response_model.model_validate_json(response.content)
        except ValidationError as error:
            raise VaultTransportError(f"POST {path} returned invalid JSON body") from error

    return http_endpoint
