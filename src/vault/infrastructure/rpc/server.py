"""gRPC server adapter serving vault endpoints as ``vault.Vault`` unary methods."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import grpc

from vault.application.endpoints import Endpoint, VaultEndpoints
from vault.domain.errors import RateLimitedError
from vault.infrastructure.rpc.codecs import (
    decode_grpc_hash_request,
    decode_grpc_validate_request,
    encode_grpc_hash_response,
    encode_grpc_validate_response,
)
from vault.infrastructure.rpc.vault_messages import (
    SERVICE_NAME,
    HashRequestMessage,
    HashResponseMessage,
    ValidateRequestMessage,
    ValidateResponseMessage,
)

logger = logging.getLogger(__name__)


def build_grpc_handler(endpoints: VaultEndpoints) -> grpc.GenericRpcHandler:
    """Build the generic handler routing Hash and Validate calls to endpoints."""

    return grpc.method_handlers_generic_handler(
        SERVICE_NAME,
        {
            "Hash": _unary_handler(
                endpoints.hash_endpoint,
                decode_request=decode_grpc_hash_request,
                encode_response=encode_grpc_hash_response,
                request_message=HashRequestMessage,
                response_message=HashResponseMessage,
            ),
            "Validate": _unary_handler(
                endpoints.validate_endpoint,
                decode_request=decode_grpc_validate_request,
                encode_response=encode_grpc_validate_response,
                request_message=ValidateRequestMessage,
                response_message=ValidateResponseMessage,
            ),
        },
    )


def create_grpc_server(
    endpoints: VaultEndpoints,
    *,
    address: str,
) -> tuple[grpc.aio.Server, int]:
    """Create an unstarted asyncio gRPC server bound to address and return it with its port."""

    server = grpc.aio.server()
    server.add_generic_rpc_handlers((build_grpc_handler(endpoints),))
    port = server.add_insecure_port(address)
    if port == 0:
        raise RuntimeError(f"failed to bind gRPC listener to {address}")
    return server, port


def _unary_handler(
    endpoint: Endpoint[Any, Any],
    *,
    decode_request: Callable[[Any], Any],
    encode_response: Callable[[Any], Any],
    request_message: Any,
    response_message: Any,
) -> grpc.RpcMethodHandler:
    async def behavior(message: Any, context: grpc.aio.ServicerContext) -> Any:
        try:
            response = await endpoint(decode_request(message))
        except RateLimitedError as error:
            await context.abort(grpc.StatusCode.RESOURCE_EXHAUSTED, str(error))
        return encode_response(response)

    return grpc.unary_unary_rpc_method_handler(
        behavior,
        request_deserializer=request_message.FromString,
        response_serializer=response_message.SerializeToString,
    )
