from __future__ import annotations

import pytest

from vault.domain.errors import HashingError
from vault.infrastructure.security.password_hasher import (
    DEFAULT_COST,
    BcryptPasswordHasher,
)


def test_hash_password_never_stores_plaintext_and_verifies() -> None:
    hasher = BcryptPasswordHasher(cost=4)
    password = "super-secret-password"

    password_hash = hasher.hash_password(password)

    assert password_hash != password
    assert password not in password_hash
    assert hasher.verify_password(password=password, password_hash=password_hash) is True


def test_wrong_password_fails_verification() -> None:
    hasher = BcryptPasswordHasher(cost=4)
    password_hash = hasher.hash_password("correct")

    assert hasher.verify_password(password="wrong", password_hash=password_hash) is False


def test_same_password_hashes_differ_but_both_verify() -> None:
    hasher = BcryptPasswordHasher(cost=4)

    first = hasher.hash_password("repeat-me")
    second = hasher.hash_password("repeat-me")

    assert first != second
    assert hasher.verify_password(password="repeat-me", password_hash=first) is True
    assert hasher.verify_password(password="repeat-me", password_hash=second) is True


def test_default_cost_is_embedded_in_hash() -> None:
    hasher = BcryptPasswordHasher()

    password_hash = hasher.hash_password("pw")

    assert hasher.cost == DEFAULT_COST == 10
    assert password_hash.startswith("$2b$10$")


@pytest.mark.parametrize("password_hash", ["", "not-a-bcrypt-hash", "$2b$04$short"])
def test_malformed_hash_fails_verification_without_error(password_hash: str) -> None:
    hasher = BcryptPasswordHasher(cost=4)

    assert hasher.verify_password(password="pw", password_hash=password_hash) is False


def test_empty_password_round_trips() -> None:
    hasher = BcryptPasswordHasher(cost=4)
    password_hash = hasher.hash_password("")

    assert hasher.verify_password(password="", password_hash=password_hash) is True
    assert hasher.verify_password(password="x", password_hash=password_hash) is False


def test_password_longer_than_72_bytes_raises_hashing_error() -> None:
    hasher = BcryptPasswordHasher(cost=4)

    with pytest.raises(HashingError, match="72 bytes"):
        hasher.hash_password("a" * 73)


def test_multibyte_password_at_limit_is_accepted() -> None:
    hasher = BcryptPasswordHasher(cost=4)
    password = "é" * 36

    password_hash = hasher.hash_password(password)

    assert hasher.verify_password(password=password, password_hash=password_hash) is True


@pytest.mark.parametrize("cost", [3, 32])
def test_out_of_range_cost_raises_hashing_error(cost: int) -> None:
    hasher = BcryptPasswordHasher(cost=cost)

    with pytest.raises(HashingError, match="invalid bcrypt cost"):
        hasher.hash_password("pw")


def test_unencodable_password_raises_hashing_error() -> None:
    hasher = BcryptPasswordHasher(cost=4)

    with pytest.raises(HashingError, match="not valid UTF-8"):
        hasher.hash_password("\ud800")


def test_unencodable_password_never_validates() -> None:
    hasher = BcryptPasswordHasher(cost=4)
    password_hash = hasher.hash_password("pw")

    assert hasher.verify_password(password="\ud800", password_hash=password_hash) is False
