# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_HASH_ALGORITHMS = ("sha256", "sha384", "sha512", "sha3_256", "sha3_512")

_SECTION_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    validate_by_name=True,
    extra="ignore",
)


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///authcore.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")
    echo: bool = Field(False, alias="DATABASE_ECHO")

    model_config = _SECTION_CONFIG


class HashingConfig(BaseSettings):
    # Changing any of these invalidates every stored digest.
    algorithm: str = Field("sha512", alias="HASH_ALGORITHM")
    iterations: int = Field(1000, ge=1, alias="HASH_ITERATIONS")
    key_length: int = Field(64, ge=16, alias="HASH_KEY_LENGTH")
    salt_bytes: int = Field(32, ge=16, alias="HASH_SALT_BYTES")

    model_config = _SECTION_CONFIG

    @field_validator("algorithm")
    @classmethod
    def _check_algorithm(cls, value: str) -> str:
        value = value.lower()
        if value not in SUPPORTED_HASH_ALGORITHMS:
            raise ValueError(f"unsupported hash algorithm: {value}")
        return value


class TokenConfig(BaseSettings):
    ttl_hours: float = Field(8.0, gt=0, alias="TOKEN_TTL_HOURS")
    algorithm: str = Field("HS512", alias="TOKEN_ALGORITHM")
    issuer: str = Field("authcore", alias="TOKEN_ISSUER")

    model_config = _SECTION_CONFIG


class LockoutConfig(BaseSettings):
    enabled: bool = Field(True, alias="LOCKOUT_ENABLED")
    max_attempts: int = Field(5, ge=1, alias="LOCKOUT_MAX_ATTEMPTS")
    duration: float = Field(15 * 60, ge=1.0, alias="LOCKOUT_DURATION")
    window: float = Field(60 * 60, ge=1.0, alias="LOCKOUT_WINDOW")

    model_config = _SECTION_CONFIG

    @field_validator("enabled", mode="before")
    @classmethod
    def _parse_bool(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _hashing_config_factory() -> HashingConfig:
    return HashingConfig()  # type: ignore[call-arg]


def _token_config_factory() -> TokenConfig:
    return TokenConfig()  # type: ignore[call-arg]


def _lockout_config_factory() -> LockoutConfig:
    return LockoutConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_file: str | None = Field(None, alias="LOG_FILE")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    hashing: HashingConfig = Field(default_factory=_hashing_config_factory)
    token: TokenConfig = Field(default_factory=_token_config_factory)
    lockout: LockoutConfig = Field(default_factory=_lockout_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "HashingConfig",
    "LockoutConfig",
    "SUPPORTED_HASH_ALGORITHMS",
    "TokenConfig",
    "load_config",
]
