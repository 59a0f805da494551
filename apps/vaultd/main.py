"""vaultd entrypoint serving the vault over HTTP/JSON and gRPC."""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
from collections.abc import Sequence
from enum import StrEnum

import uvicorn
from fastapi import FastAPI

from vault.application.endpoints import EndpointMiddleware, VaultEndpoints, build_endpoints
from vault.application.ports.vault_service_port import VaultServicePort
from vault.application.services.rate_limiter import CallBudget, rate_limiter
from vault.application.services.vault_service import VaultService
from vault.config.settings import Settings, load_settings, parse_listen_address
from vault.infrastructure.http.vault_router import build_vault_router
from vault.infrastructure.logging import configure_logging
from vault.infrastructure.rpc.server import create_grpc_server
from vault.infrastructure.security.password_hasher import BcryptPasswordHasher

logger = logging.getLogger(__name__)


class ExitReason(StrEnum):
    """Why the serving loop returned."""

    HTTP_STOPPED = "http_stopped"
    GRPC_STOPPED = "grpc_stopped"
    SIGNAL = "signal"


def build_vault_endpoints(
    *,
    settings: Settings,
    service: VaultServicePort | None = None,
) -> VaultEndpoints:
    """Build endpoints over the bcrypt-backed service, rate limited when configured."""

    if service is None:
        service = VaultService(
            password_hasher=BcryptPasswordHasher(cost=settings.bcrypt_cost),
        )

    middleware: list[EndpointMiddleware] = []
    if settings.rate_limit_capacity is not None:
        budget = CallBudget(
            capacity=settings.rate_limit_capacity,
            window_seconds=settings.rate_limit_window_seconds,
        )
        middleware.append(rate_limiter(budget))
    return build_endpoints(service, middleware=middleware)


def create_app(*, endpoints: VaultEndpoints | None = None) -> FastAPI:
    """Create FastAPI app exposing POST /hash and POST /validate."""

    if endpoints is None:
        settings = load_settings()
        configure_logging(level=settings.log_level)
        endpoints = build_vault_endpoints(settings=settings)

    app = FastAPI(title="vault")
    app.include_router(build_vault_router(endpoints=endpoints))
    return app


def parse_args(argv: Sequence[str] | None, *, settings: Settings) -> argparse.Namespace:
    """Parse listen-address flags, defaulting to the loaded settings."""

    parser = argparse.ArgumentParser(prog="vaultd", description="Password hashing service.")
    parser.add_argument(
        "-http",
        "--http",
        dest="http_addr",
        default=settings.http_addr,
        help="http listen address (default: %(default)s)",
    )
    parser.add_argument(
        "-grpc",
        "--grpc",
        dest="grpc_addr",
        default=settings.grpc_addr,
        help="gRPC listen address (default: %(default)s)",
    )
    args = parser.parse_args(argv)
    for flag, value in (("http", args.http_addr), ("grpc", args.grpc_addr)):
        try:
            parse_listen_address(value)
        except ValueError as error:
            parser.error(f"-{flag}: {error}")
    return args


async def serve(
    *,
    endpoints: VaultEndpoints,
    http_addr: str,
    grpc_addr: str,
    stop_event: asyncio.Event | None = None,
) -> ExitReason:
    """Serve HTTP and gRPC until either listener stops or a termination signal arrives."""

    http_host, http_port = parse_listen_address(http_addr)
    grpc_host, grpc_port = parse_listen_address(grpc_addr)
    if stop_event is None:
        stop_event = asyncio.Event()

    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, stop_event.set)
        except (NotImplementedError, RuntimeError):
            logger.debug("vaultd_signal_handler_unavailable signal=%s", signum.name)

    http_server = uvicorn.Server(
        uvicorn.Config(
            create_app(endpoints=endpoints),
            host=http_host,
            port=http_port,
            log_config=None,
        )
    )
    grpc_server, bound_grpc_port = create_grpc_server(
        endpoints,
        address=_format_address(grpc_host, grpc_port),
    )
    await grpc_server.start()
    logger.info("vaultd_grpc_listening address=%s port=%s", grpc_addr, bound_grpc_port)
    logger.info("vaultd_http_listening address=%s", http_addr)

    http_task = asyncio.create_task(_serve_http(http_server), name="vaultd-http")
    grpc_task = asyncio.create_task(grpc_server.wait_for_termination(), name="vaultd-grpc")
    stop_task = asyncio.create_task(stop_event.wait(), name="vaultd-stop")
    reasons = {
        http_task: ExitReason.HTTP_STOPPED,
        grpc_task: ExitReason.GRPC_STOPPED,
        stop_task: ExitReason.SIGNAL,
    }

    try:
        done, _ = await asyncio.wait(set(reasons), return_when=asyncio.FIRST_COMPLETED)
        first = next(task for task in reasons if task in done)
        if not first.cancelled() and first.exception() is not None:
            logger.error(
                "vaultd_listener_failed reason=%s error=%s",
                reasons[first].value,
                first.exception(),
            )
        return reasons[first]
    finally:
        http_server.should_exit = True
        await grpc_server.stop(grace=None)
        stop_task.cancel()
        await asyncio.gather(http_task, grpc_task, stop_task, return_exceptions=True)
        for signum in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(signum)


async def _serve_http(server: uvicorn.Server) -> None:
    # uvicorn calls sys.exit when it cannot bind; keep that inside the task.
    try:
        await server.serve()
    except SystemExit as error:
        raise RuntimeError(f"http listener exited with status {error.code}") from error


def _format_address(host: str, port: int) -> str:
    if not host:
        return f"[::]:{port}"
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def main(argv: Sequence[str] | None = None) -> None:
    """Run vaultd and exit non-zero once serving stops."""

    settings = load_settings()
    configure_logging(level=settings.log_level)
    args = parse_args(argv, settings=settings)
    endpoints = build_vault_endpoints(settings=settings)

    reason = asyncio.run(
        serve(endpoints=endpoints, http_addr=args.http_addr, grpc_addr=args.grpc_addr)
    )
    logger.error("vaultd_exit reason=%s", reason.value)
    raise SystemExit(1)


if __name__ == "__main__":
    main()
