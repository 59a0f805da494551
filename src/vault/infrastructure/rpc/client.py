"""gRPC client adapter building vault endpoints over a channel."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import grpc

from vault.application.endpoints import Endpoint, VaultEndpoints
from vault.domain.errors import RateLimitedError, VaultTransportError
from vault.infrastructure.rpc.codecs import (
    decode_grpc_hash_response,
    decode_grpc_validate_response,
    encode_grpc_hash_request,
    encode_grpc_validate_request,
)
from vault.infrastructure.rpc.vault_messages import (
    HASH_METHOD,
    VALIDATE_METHOD,
    HashRequestMessage,
    HashResponseMessage,
    ValidateRequestMessage,
    ValidateResponseMessage,
)


def new_grpc_client(
    channel: grpc.aio.Channel,
    *,
    timeout_seconds: float | None = None,
) -> VaultEndpoints:
    """Return a vault service whose calls go to a remote ``vault.Vault`` server.

    The caller owns channel and closes it when done.
    """

    hash_call = channel.unary_unary(
        HASH_METHOD,
        request_serializer=HashRequestMessage.SerializeToString,
        response_deserializer=HashResponseMessage.FromString,
    )
    validate_call = channel.unary_unary(
        VALIDATE_METHOD,
        request_serializer=ValidateRequestMessage.SerializeToString,
        response_deserializer=ValidateResponseMessage.FromString,
    )
    return VaultEndpoints(
        hash_endpoint=_make_grpc_endpoint(
            hash_call,
            method=HASH_METHOD,
            encode_request=encode_grpc_hash_request,
            decode_response=decode_grpc_hash_response,
            timeout_seconds=timeout_seconds,
        ),
        validate_endpoint=_make_grpc_endpoint(
            validate_call,
            method=VALIDATE_METHOD,
            encode_request=encode_grpc_validate_request,
            decode_response=decode_grpc_validate_response,
            timeout_seconds=timeout_seconds,
        ),
    )


def _make_grpc_endpoint(
    call: grpc.aio.UnaryUnaryMultiCallable,
    *,
    method: str,
    encode_request: Callable[[Any], Any],
    decode_response: Callable[[Any], Any],
    timeout_seconds: float | None,
) -> Endpoint[Any, Any]:
    async def grpc_endpoint(request: Any) -> Any:
        try:
            message = await call(encode_request(request), timeout=timeout_seconds)
        except grpc.aio.AioRpcError as error:
            if error.code() == grpc.StatusCode.RESOURCE_EXHAUSTED:
                raise RateLimitedError(error.details() or "rate limit exceeded") from error
            raise VaultTransportError(
                f"{method} failed: status={error.code().name} details={error.details()}"
            ) from error
        return decode_response(message)

    return grpc_endpoint
