"""Runtime settings loaded from environment variables."""

from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

NonEmptyStr = Annotated[str, Field(min_length=1)]
PositiveInt = Annotated[int, Field(gt=0)]
BcryptCost = Annotated[int, Field(ge=4, le=31)]


class Settings(BaseSettings):
    """Environment-driven service settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    http_addr: NonEmptyStr = Field(default=":8080", validation_alias="VAULT_HTTP_ADDR")
    grpc_addr: NonEmptyStr = Field(default=":8081", validation_alias="VAULT_GRPC_ADDR")
    bcrypt_cost: BcryptCost = Field(default=10, validation_alias="BCRYPT_COST")
    rate_limit_capacity: PositiveInt | None = Field(
        default=None,
        validation_alias="RATE_LIMIT_CAPACITY",
    )
    rate_limit_window_seconds: PositiveInt = Field(
        default=1,
        validation_alias="RATE_LIMIT_WINDOW_SECONDS",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @field_validator("http_addr", "grpc_addr")
    @classmethod
    def _validate_listen_address(cls, value: str) -> str:
        parse_listen_address(value)
        return value


def parse_listen_address(address: str) -> tuple[str, int]:
    """Split a ``host:port`` listen address.

    An empty host is returned as ``""`` and means every interface, IPv4 and IPv6.
    """

    host, separator, port_text = address.strip().rpartition(":")
    if not separator or not port_text.isdigit():
        raise ValueError(f"invalid listen address: {address!r}")
    port = int(port_text)
    if port > 65_535:
        raise ValueError(f"invalid listen port: {address!r}")
    host = host.strip("[]")
    return host, port


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load and cache service settings."""

    return Settings()
