"""Lightweight configuration for the Conqueror service."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Settings(BaseSettings):
    """Application settings, read from ``CONQUEROR_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CONQUEROR_", env_file=".env", env_file_encoding="utf-8"
    )

    data_dir: Path = Field(default=Path("games"), description="Where JSON game snapshots live")
    store_backend: Literal["memory", "json", "sql"] = Field(
        default="json", description="Persistence adapter used by the action service"
    )
    database_url: str = Field(
        default="sqlite:///conqueror.db", description="SQLAlchemy URL for the sql backend"
    )
    database_echo: bool = Field(default=False, description="Log every SQL statement")
    default_map: str = Field(default="classic", description="Map variant used when none is given")
    default_round_limit: int = Field(
        default=100, description="Round limit used when none is given", ge=1
    )
    log_level: str = Field(default="INFO", description="Root log level")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"],
        description="Origins allowed to call the HTTP API",
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    settings = Settings()
    if settings.store_backend == "json":
        settings.data_dir.mkdir(parents=True, exist_ok=True)
    return settings


def configure_logging(level: str | int | None = None) -> None:
    """Install a stream handler on the root logger."""

    if level is None:
        level = get_settings().log_level
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
