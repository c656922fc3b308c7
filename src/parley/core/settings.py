"""Application settings and configuration.

This module defines all configuration options for the Parley chat backend.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Parley", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    api_prefix: str = Field(default="/api", alias="API_PREFIX")

    # Database configuration
    database_url: str = Field(default="sqlite:///./parley.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Redis configuration for the session cache
    redis_url: str = Field(default="redis://localhost:6379/0", alias="REDIS_URL")
    session_ttl_seconds: int = Field(default=3600, alias="SESSION_TTL_SECONDS")

    # Password hashing work factor
    password_hash_rounds: int = Field(default=310_000, alias="PASSWORD_HASH_ROUNDS")

    # Rendering of message timestamps for display
    display_timezone: str = Field(default="UTC", alias="DISPLAY_TIMEZONE")
    time_format: str = Field(default="%X", alias="TIME_FORMAT")

    # Pusher Beams push notifications
    pusher_instance_id: str | None = Field(default=None, alias="PUSHER_INSTANCE_ID")
    pusher_secret_key: str | None = Field(default=None, alias="PUSHER_SECRET_KEY")
    push_icon_url: str = Field(default="", alias="PUSH_ICON_URL")
    push_deep_link_template: str = Field(
        default="/chat?user={sender_id}",
        alias="PUSH_DEEP_LINK_TEMPLATE",
    )
    push_timeout_seconds: float = Field(default=10.0, alias="PUSH_TIMEOUT_SECONDS")
    beams_token_ttl_seconds: int = Field(default=86400, alias="BEAMS_TOKEN_TTL_SECONDS")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts asyncpg URLs to psycopg for synchronous database operations
        like Alembic migrations.
        """
        url = self.effective_database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url

    @property
    def push_enabled(self) -> bool:
        """Return True when Pusher Beams credentials are configured."""
        return bool(self.pusher_instance_id and self.pusher_secret_key)


settings = Settings()
