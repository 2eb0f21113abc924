from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings
from pydantic import Field


def parse_email_list(raw: str | None) -> list[str]:
    """Split a comma separated allow-list, dropping blanks."""
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings(BaseSettings):
    environment: Literal["development", "staging", "production", "test"] = Field(
        default="development"
    )
    app_version: str = Field(default="0.1.0")
    log_level: str = Field(default="INFO")

    database_url: str = Field(..., env="DATABASE_URL")
    jwt_secret_key: str = Field(..., env="JWT_SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=60 * 24)
    refresh_token_expire_minutes: int = Field(default=60 * 24 * 7)
    session_cookie_name: str = Field(default="session_token")

    # Comma separated, e.g. "ana@clerva.app, li@clerva.app"
    founder_emails: str = Field(default="")
    admin_emails: str = Field(default="")

    ai_provider: Literal["openai", "gemini"] = Field(default="openai")
    ai_model: str = Field(default="gpt-4o-mini")
    openai_api_key: str | None = Field(default=None, env="OPENAI_API_KEY")
    gemini_api_key: str | None = Field(default=None, env="GEMINI_API_KEY")

    cors_origins: list[str] = Field(
        default=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ]
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @property
    def founder_email_list(self) -> list[str]:
        return parse_email_list(self.founder_emails)

    @property
    def admin_email_list(self) -> list[str]:
        return parse_email_list(self.admin_emails)


@lru_cache
def get_settings() -> Settings:
    return Settings()
