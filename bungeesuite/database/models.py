"""
Data models for the database access layer.

PoolConfiguration is assembled once, when a ConnectionManager is constructed,
and describes both where the pool connects and how large it may grow.
"""
from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator


class PoolConfiguration(BaseModel):
    """
    Immutable connection parameters and pool sizing for one database target.
    """

    host: str = Field(..., description="Database server host name or address.")
    port: str = Field(..., description="Database server port, as text.")
    database: str = Field(..., description="Database name.")
    username: str = Field(..., description="Login role.")
    password: SecretStr = Field(..., description="Login password.")
    min_size: int = Field(1, ge=0, description="Connections kept open while idle.")
    max_size: int = Field(10, ge=1, description="Upper bound on pooled connections.")
    timeout: float = Field(30.0, gt=0, description="Seconds to wait for a lease.")

    model_config = {
        "frozen": True,
        "arbitrary_types_allowed": False,
    }

    @field_validator("port", mode="before")
    @classmethod
    def _port_as_text(cls, value: Any) -> str:
        return str(value)

    @model_validator(mode="after")
    def _sizes_are_ordered(self) -> "PoolConfiguration":
        if self.min_size > self.max_size:
            raise ValueError(
                f"min_size ({self.min_size}) must not exceed max_size ({self.max_size})"
            )
        return self

    @property
    def conninfo(self) -> str:
        """Connection address without credentials."""
        return f"postgresql://{self.host}:{self.port}/{self.database}"

    def connect_kwargs(self) -> Dict[str, Any]:
        """
        Keyword arguments passed to every new connection.

        Carries the credentials, and puts connections in autocommit mode so each
        statement takes effect on its own unless the caller opens a transaction.
        """
        return {
            "user": self.username,
            "password": self.password.get_secret_value(),
            "autocommit": True,
        }


__all__ = ["PoolConfiguration"]
