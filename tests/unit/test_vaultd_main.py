from __future__ import annotations

import pytest
from fastapi.routing import APIRoute

from apps.vaultd.main import _format_address, build_vault_endpoints, create_app, parse_args
from vault.config.settings import Settings
from vault.domain.errors import RateLimitedError


class _FakeVaultService:
    async def hash(self, password: str) -> str:
        return f"hashed::{password}"

    async def validate(self, password: str, password_hash: str) -> bool:
        return password_hash == f"hashed::{password}"


def _settings(**overrides: object) -> Settings:
    return Settings.model_validate(
        {"VAULT_HTTP_ADDR": ":8080", "VAULT_GRPC_ADDR": ":8081", **overrides},
    )


def test_parse_args_defaults_to_settings() -> None:
    args = parse_args([], settings=_settings())

    assert args.http_addr == ":8080"
    assert args.grpc_addr == ":8081"


@pytest.mark.parametrize(
    "argv",
    [
        ["-http", "127.0.0.1:9000", "-grpc", ":9001"],
        ["--http", "127.0.0.1:9000", "--grpc", ":9001"],
        ["--http=127.0.0.1:9000", "--grpc=:9001"],
    ],
)
def test_parse_args_accepts_single_and_double_dash_flags(argv: list[str]) -> None:
    args = parse_args(argv, settings=_settings())

    assert args.http_addr == "127.0.0.1:9000"
    assert args.grpc_addr == ":9001"


def test_parse_args_rejects_invalid_listen_address() -> None:
    with pytest.raises(SystemExit) as exc_info:
        parse_args(["-http", "nowhere"], settings=_settings())

    assert exc_info.value.code == 2


def test_create_app_exposes_hash_and_validate_routes() -> None:
    endpoints = build_vault_endpoints(settings=_settings(), service=_FakeVaultService())
    app = create_app(endpoints=endpoints)

    routes = {
        (route.path, method)
        for route in app.routes
        if isinstance(route, APIRoute)
        for method in route.methods
    }

    assert ("/hash", "POST") in routes
    assert ("/validate", "POST") in routes


@pytest.mark.asyncio
async def test_endpoints_are_unlimited_without_rate_limit_capacity() -> None:
    endpoints = build_vault_endpoints(settings=_settings(), service=_FakeVaultService())

    results = [await endpoints.hash(f"pw-{index}") for index in range(20)]

    assert results[-1] == "hashed::pw-19"


@pytest.mark.asyncio
async def test_endpoints_are_rate_limited_with_capacity() -> None:
    endpoints = build_vault_endpoints(
        settings=_settings(RATE_LIMIT_CAPACITY=2, RATE_LIMIT_WINDOW_SECONDS=3600),
        service=_FakeVaultService(),
    )

    await endpoints.hash("a")
    await endpoints.validate("a", "hashed::a")
    with pytest.raises(RateLimitedError):
        await endpoints.hash("b")


@pytest.mark.parametrize(
    ("host", "port", "expected"),
    [
        ("", 8081, "[::]:8081"),
        ("127.0.0.1", 8081, "127.0.0.1:8081"),
        ("::1", 8081, "[::1]:8081"),
    ],
)
def test_grpc_address_binds_all_interfaces_for_empty_host(
    host: str,
    port: int,
    expected: str,
) -> None:
    assert _format_address(host, port) == expected
