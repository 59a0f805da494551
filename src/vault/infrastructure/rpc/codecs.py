"""Conversions between vault request/response models and protobuf messages.

Each pair mirrors the HTTP JSON shape field for field. proto3 has no absent strings, so an
empty ``err`` on the wire is ``None`` in the model and the other way round.
"""

from __future__ import annotations

from typing import Any

from vault.application.dto.vault_models import (
    HashRequest,
    HashResponse,
    ValidateRequest,
    ValidateResponse,
)
from vault.infrastructure.rpc.vault_messages import (
    HashRequestMessage,
    HashResponseMessage,
    ValidateRequestMessage,
    ValidateResponseMessage,
)


def encode_grpc_hash_request(request: HashRequest) -> Any:
    return HashRequestMessage(password=request.password)


def decode_grpc_hash_request(message: Any) -> HashRequest:
    return HashRequest(password=message.password)


def encode_grpc_hash_response(response: HashResponse) -> Any:
    return HashResponseMessage(hash=response.hash, err=response.err or "")


def decode_grpc_hash_response(message: Any) -> HashResponse:
    return HashResponse(hash=message.hash, err=message.err or None)


def encode_grpc_validate_request(request: ValidateRequest) -> Any:
    return ValidateRequestMessage(password=request.password, hash=request.hash)


def decode_grpc_validate_request(message: Any) -> ValidateRequest:
    return ValidateRequest(password=message.password, hash=message.hash)


def encode_grpc_validate_response(response: ValidateResponse) -> Any:
    return ValidateResponseMessage(valid=response.valid, err=response.err or "")


def decode_grpc_validate_response(message: Any) -> ValidateResponse:
    return ValidateResponse(valid=message.valid, err=message.err or None)
