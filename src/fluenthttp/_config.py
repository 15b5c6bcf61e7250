import os
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, field_validator

from ._utils.constants import (
    ENV_BASE_URL,
    ENV_CONNECT_TIMEOUT,
    ENV_DEBUG,
    ENV_TIMEOUT,
)

_TRUTHY = ("1", "true", "yes", "on")


class Config(BaseModel):
    """Defaults applied to a new ``Client``."""

    base_url: str = ""
    timeout: Optional[float] = None
    connect_timeout: Optional[float] = None
    headers: dict[str, str] = {}
    debug: bool = False

    @field_validator("base_url", mode="before")
    @classmethod
    def strip_base_url(cls, value: Optional[str]) -> str:
        return (value or "").strip().rstrip("/")

    @field_validator("timeout", "connect_timeout")
    @classmethod
    def validate_timeout(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value < 0:
            raise ValueError("Timeouts must be non-negative")
        return value

    @classmethod
    def from_env(cls, **overrides) -> "Config":
        """Build a config from ``FLUENTHTTP_*`` variables, loading ``.env`` first.

        Keyword arguments take precedence over the environment.
        """
        load_dotenv(find_dotenv(usecwd=True))

        values = {
            "base_url": os.getenv(ENV_BASE_URL, ""),
            "timeout": os.getenv(ENV_TIMEOUT) or None,
            "connect_timeout": os.getenv(ENV_CONNECT_TIMEOUT) or None,
            "debug": os.getenv(ENV_DEBUG, "").strip().lower() in _TRUTHY,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
