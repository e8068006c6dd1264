"""Application configuration utilities."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings derived from environment variables."""

    app_name: str = Field(default="Campus Records", alias="APP_NAME")
    app_env: str = Field(default="production", alias="APP_ENV")
    database_url: str = Field(
        default="sqlite:///./campus.db", alias="DATABASE_URL"
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    jwt_secret: str = Field(default="change-me", alias="JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60, alias="ACCESS_TOKEN_EXPIRE_MINUTES"
    )
    session_cookie_name: str = Field(default="token", alias="SESSION_COOKIE_NAME")
    dashboard_path: str = Field(default="/api/dashboard", alias="DASHBOARD_PATH")

    import_link_students: bool = Field(default=True, alias="IMPORT_LINK_STUDENTS")
    import_students_per_teacher: int = Field(
        default=3, ge=0, alias="IMPORT_STUDENTS_PER_TEACHER"
    )
    import_concurrency: int = Field(default=4, ge=1, alias="IMPORT_CONCURRENCY")

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
    )

    @property
    def is_dev(self) -> bool:
        """Return ``True`` when development-only routes should be mounted."""

        return self.app_env.strip().lower() in {"dev", "development"}


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


__all__ = ["Settings", "get_settings"]
