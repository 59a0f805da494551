"""HTTP/JSON routes exposing vault endpoints."""

from __future__ import annotations

import logging
from typing import TypeVar

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from vault.application.dto.vault_models import (
    HashRequest,
    HashResponse,
    ValidateRequest,
    ValidateResponse,
)
from vault.application.endpoints import Endpoint, VaultEndpoints
from vault.domain.errors import RateLimitedError

RequestModelT = TypeVar("RequestModelT", bound=BaseModel)
ResponseModelT = TypeVar("ResponseModelT", bound=BaseModel)

logger = logging.getLogger(__name__)


def build_vault_router(*, endpoints: VaultEndpoints) -> APIRouter:
    """Build router for POST /hash and POST /validate."""

    router = APIRouter(tags=["vault"])

    @router.post("/hash", response_model=HashResponse, response_model_exclude_none=True)
    async def hash_password(request: Request) -> JSONResponse:
        hash_request = decode_request(HashRequest, await request.body())
        return encode_response(await _serve(endpoints.hash_endpoint, hash_request))

    @router.post(
        "/validate",
        response_model=ValidateResponse,
        response_model_exclude_none=True,
    )
    async def validate_password(request: Request) -> JSONResponse:
        validate_request = decode_request(ValidateRequest, await request.body())
        return encode_response(await _serve(endpoints.validate_endpoint, validate_request))

    return router


def decode_request(model: type[RequestModelT], raw_body: bytes) -> RequestModelT:
    """Parse a JSON body into model, raising HTTP 400 when it cannot be decoded."""

    try:
        return model.model_validate_json(raw_body)
    except ValidationError as error:
        logger.info(
            "vault_http_decode_failed request_type=%s error_count=%s",
            model.__name__,
            error.error_count(),
        )
        raise HTTPException(status_code=400, detail=_describe(error)) from error


def encode_response(response: BaseModel) -> JSONResponse:
    """Serialize any vault response as a 200 JSON body, embedded err included."""

    return JSONResponse(status_code=200, content=response.model_dump(exclude_none=True))


async def _serve(
    endpoint: Endpoint[RequestModelT, ResponseModelT],
    request: RequestModelT,
) -> ResponseModelT:
    try:
        return await endpoint(request)
    except RateLimitedError as error:
        raise HTTPException(status_code=429, detail=str(error)) from error


def _describe(error: ValidationError) -> str:
    # Input values are left out so passwords never reach the response body.
    return "; ".join(
        f"{'.'.join(str(part) for part in item['loc']) or 'body'}: {item['msg']}"
        for item in error.errors(include_url=False, include_input=False)
    )
