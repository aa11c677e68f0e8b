"""Application settings and configuration.

This module defines all process-level configuration options for the slot.
backend. Settings are loaded from environment variables (or a `.env` file).
Runtime feature flags live in the database config table instead; see
`slot_api.services.config_store`.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    `ADMIN_KEY` has no default: the process refuses to start without an
    explicitly configured admin secret.
    """

    # Application metadata
    app_name: str = Field(default="slot.", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    port: int = Field(default=3001, alias="PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Shared secret for /api/admin/* endpoints
    admin_key: str = Field(alias="ADMIN_KEY", min_length=1)

    # Database configuration
    database_url: str = Field(default="sqlite:///./slot.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    db_pool_size: int = Field(default=5, alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=10, alias="DB_MAX_OVERFLOW")
    auto_create_tables: bool = Field(default=True, alias="AUTO_CREATE_TABLES")

    # All calendar-day comparisons use this IANA zone
    timezone: str = Field(default="UTC", alias="SLOT_TIMEZONE")

    # Rate limiting; Redis is optional and only used when configured
    redis_url: str | None = Field(default=None, alias="REDIS_URL")
    rate_limit_requests: int = Field(default=100, alias="RATE_LIMIT_REQUESTS")
    rate_limit_window_seconds: int = Field(default=60, alias="RATE_LIMIT_WINDOW_SECONDS")

    # CORS configuration; the public client is served from arbitrary origins
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=False, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url

    @property
    def database_url_sync(self) -> str:
        """Return a URL usable by the synchronous SQLAlchemy engine.

        Postgres URLs are pinned to the psycopg (v3) driver, including the
        bare `postgres://` form some hosting providers hand out.

        Returns:
            Database URL compatible with synchronous database drivers
        """
        url = self.effective_database_url
        for prefix in ("postgresql+asyncpg://", "postgresql://", "postgres://"):
            if url.startswith(prefix):
                return "postgresql+psycopg://" + url[len(prefix):]
        return url


settings = Settings()  # type: ignore[call-arg]
