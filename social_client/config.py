"""
Runtime configuration helpers for the client.

Loads the API base URL, timeouts and the token location from the environment,
falling back to a .env file located in the project root.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the project root
BASE_DIR = Path(__file__).resolve().parents[1]

# Absolute path to .env
ENV_PATH = BASE_DIR / ".env"

# Load .env defaults without overriding variables already present in the environment
load_dotenv(dotenv_path=ENV_PATH, override=False)


class Settings(BaseSettings):
    api_base_url: str = Field(default="http://localhost:5000/api", alias="SOCIAL_API_BASE_URL")
    request_timeout: float = Field(default=10.0, alias="SOCIAL_REQUEST_TIMEOUT")
    token_path: Path = Field(default=Path.home() / ".social_client" / "token.json", alias="SOCIAL_TOKEN_PATH")

    # Composer behaviour
    mention_debounce_seconds: float = Field(default=0.3, alias="SOCIAL_MENTION_DEBOUNCE_SECONDS")
    mention_search_limit: int = Field(default=8, alias="SOCIAL_MENTION_SEARCH_LIMIT")
    comment_max_length: int = Field(default=500, alias="SOCIAL_COMMENT_MAX_LENGTH")

    # Paging
    default_page_limit: int = Field(default=10, alias="SOCIAL_DEFAULT_PAGE_LIMIT")
    max_page_limit: int = Field(default=100, alias="SOCIAL_MAX_PAGE_LIMIT")

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
