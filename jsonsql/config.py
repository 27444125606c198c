"""
Configuration settings for JSON SQL Search.

Uses Pydantic Settings to load environment variables for the query engine,
the projected table, and logging.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Projection
    table_name: str = Field("t", alias="TABLE_NAME")
    default_query_limit: int = Field(100, alias="DEFAULT_QUERY_LIMIT", gt=0)

    # Engine
    duckdb_database: str = Field(":memory:", alias="DUCKDB_DATABASE")
    duckdb_threads: Optional[int] = Field(None, alias="DUCKDB_THREADS", gt=0)
    engine_init_timeout_seconds: float = Field(30.0, alias="ENGINE_INIT_TIMEOUT_SECONDS", gt=0)

    # Application
    app_env: str = Field("development", alias="APP_ENV")
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


def default_query(table_name: str, limit: int) -> str:
    """Query run right after a load to preview the fresh table."""
    return f"SELECT * FROM {table_name} LIMIT {limit}"


__all__ = ["Settings", "default_query", "get_settings"]
