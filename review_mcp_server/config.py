"""Configuration for the GitHub Review Tools server."""
import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Load .env from project root (one level above review_mcp_server/)
# Uses Path(__file__) so it works regardless of cwd.
# ---------------------------------------------------------------------------
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"

if _ENV_FILE.exists():
    load_dotenv(_ENV_FILE, override=False)


class ReviewToolsSettings(BaseSettings):
    """Settings for the GitHub Review Tools server."""

    github_token: str = Field(
        default="",
        validation_alias=AliasChoices("github_personal_access_token", "github_token"),
    )
    github_api_base: str = Field(default="https://api.github.com")
    github_graphql_url: str = Field(default="https://api.github.com/graphql")
    request_timeout: float = Field(default=30.0, description="Per-request timeout in seconds")

    mcp_server_host: str = Field(default="0.0.0.0")
    mcp_server_port: int = Field(default=3003)
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)

    class Config:
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> ReviewToolsSettings:
    """Return a cached settings instance."""
    return ReviewToolsSettings()


settings = get_settings()
