from __future__ import annotations

import logging
from functools import cache
from pathlib import Path

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from services.open_exchange_rates_client import DEFAULT_BASE_URL

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = Path(".env")


class SettingsError(RuntimeError):
    pass


class MissingApiKeyError(SettingsError):
    def __init__(self) -> None:
        super().__init__("no key")


class AppSettings(BaseSettings):
    # Open Exchange Rates app id, read from KEY.
    key: str = Field(min_length=1)
    oxr_base_url: str = DEFAULT_BASE_URL
    oxr_timeout: float | None = Field(default=None, gt=0)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@cache
def config(env_file: str = str(DEFAULT_ENV_FILE)) -> AppSettings:
    return AppSettings(_env_file=env_file)  # type: ignore[call-arg]


def load_settings(env_file: Path = DEFAULT_ENV_FILE) -> AppSettings:
    if not env_file.is_file():
        logger.warning("env file %s does not exist, reading settings from the environment only", env_file)

    try:
        return config(str(env_file))
    except ValidationError as exc:
        if any(error["loc"][:1] == ("key",) for error in exc.errors()):
            raise MissingApiKeyError() from exc
        fields = ", ".join(str(error["loc"][0]).upper() for error in exc.errors() if error["loc"])
        raise SettingsError(f"invalid settings: {fields}") from exc


__all__ = ["AppSettings", "MissingApiKeyError", "SettingsError", "config", "load_settings"]
