from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    context_lines: int = Field(3, ge=0, alias="SPLITDIFF_CONTEXT_LINES")
    match_strategy: Literal["sequence", "greedy"] = Field(
        "sequence", alias="SPLITDIFF_MATCH_STRATEGY"
    )
    couple_columns: bool = Field(False, alias="SPLITDIFF_COUPLE_COLUMNS")
    staged: bool = Field(False, alias="SPLITDIFF_STAGED")
    hunks_only: bool = Field(False, alias="SPLITDIFF_HUNKS_ONLY")
    log_level: str = Field("WARNING", alias="SPLITDIFF_LOG_LEVEL")
    log_file: str | None = Field(None, alias="SPLITDIFF_LOG_FILE")
    git_binary: str = Field("git", alias="SPLITDIFF_GIT_BINARY")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
