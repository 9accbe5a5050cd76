from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Values are read from process environment and optionally from `.env`.
    `default_years` and `align_week_start` control how a date window is
    derived when the caller does not pass an explicit `from` date.
    """

    github_token: str | None = None
    github_graphql_url: str = "https://api.github.com/graphql"
    github_timeout_seconds: float = 20.0
    default_years: int = 1
    align_week_start: bool = True
    cache_control: str = "public, max-age=3600, stale-while-revalidate=600"
    cors_allow_origins: list[str] = ["*"]
    app_version: str = "1.0.0"
    docs_url: str = "https://docs.github.com/en/graphql/reference/objects#contributioncalendar"
    log_level: str = "INFO"
    sentry_dsn: str | None = None
    environment: str = "development"
    release: str | None = None
    sentry_traces_sample_rate: float = 0.1

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


def get_settings() -> Settings:
    return Settings()
