"""
Configuration settings for bungeesuite.

Uses Pydantic Settings to load the database target, pool sizing and logging
options from environment variables (or a `.env` file). The database layer
itself takes plain constructor arguments; these settings are the application's
way of supplying them.
"""
from __future__ import annotations

from functools import lru_cache
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_name: str = Field("bungeesuite", alias="DB_NAME")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: SecretStr = Field(SecretStr("postgres"), alias="DB_PASSWORD")

    # Pool
    pool_min_size: int = Field(1, alias="POOL_MIN_SIZE", ge=0)
    pool_max_size: int = Field(10, alias="POOL_MAX_SIZE", ge=1)
    pool_timeout: float = Field(30.0, alias="POOL_TIMEOUT", gt=0)

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
