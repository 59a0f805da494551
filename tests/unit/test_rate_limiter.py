from __future__ import annotations

import pytest
from limits.storage import MemoryStorage

from vault.application.dto.vault_models import HashRequest
from vault.application.endpoints import build_endpoints
from vault.application.services.rate_limiter import CallBudget, rate_limiter
from vault.domain.errors import RateLimitedError


class _CountingVaultService:
    def __init__(self) -> None:
        self.hash_calls = 0

    async def hash(self, password: str) -> str:
        self.hash_calls += 1
        return f"hashed::{password}"

    async def validate(self, password: str, password_hash: str) -> bool:
        return password_hash == f"hashed::{password}"


def test_budget_starts_full_and_drains() -> None:
    budget = CallBudget(capacity=2, window_seconds=3600)

    assert budget.capacity == 2
    assert budget.remaining() == 2
    assert budget.try_take() is True
    assert budget.try_take() is True
    assert budget.try_take() is False
    assert budget.remaining() == 0


def test_budgets_with_separate_storage_are_independent() -> None:
    first = CallBudget(capacity=1, window_seconds=3600, storage=MemoryStorage())
    second = CallBudget(capacity=1, window_seconds=3600, storage=MemoryStorage())

    assert first.try_take() is True
    assert first.try_take() is False
    assert second.try_take() is True


@pytest.mark.parametrize(
    ("capacity", "window_seconds"),
    [(0, 1), (-1, 1), (1, 0)],
)
def test_budget_rejects_invalid_parameters(capacity: int, window_seconds: int) -> None:
    with pytest.raises(ValueError):
        CallBudget(capacity=capacity, window_seconds=window_seconds)


@pytest.mark.asyncio
async def test_limiter_denies_without_reaching_service() -> None:
    service = _CountingVaultService()
    budget = CallBudget(capacity=1, window_seconds=3600)
    endpoints = build_endpoints(service, middleware=[rate_limiter(budget)])

    first = await endpoints.hash_endpoint(HashRequest(password="pw"))
    with pytest.raises(RateLimitedError):
        await endpoints.hash_endpoint(HashRequest(password="pw"))

    assert first.hash == "hashed::pw"
    assert service.hash_calls == 1


@pytest.mark.asyncio
async def test_limiter_budget_is_shared_across_operations() -> None:
    budget = CallBudget(capacity=1, window_seconds=3600)
    endpoints = build_endpoints(_CountingVaultService(), middleware=[rate_limiter(budget)])

    await endpoints.hash("pw")
    with pytest.raises(RateLimitedError):
        await endpoints.validate("pw", "hashed::pw")
