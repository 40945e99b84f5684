"""Application settings and configuration.

This module defines all configuration options for the Dongne Board application.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Dongne Board", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Security and session cookie
    secret_key: str = Field(alias="SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    session_cookie_name: str = Field(default="app_session_id", alias="SESSION_COOKIE_NAME")
    session_expire_days: int = Field(default=365, alias="SESSION_EXPIRE_DAYS")
    dev_login_enabled: bool = Field(default=True, alias="DEV_LOGIN_ENABLED")

    # Database configuration
    database_url: str = Field(default="sqlite:///./dongne.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Owner account: promoted to admin on login and receives escalation notices
    owner_open_id: str | None = Field(default=None, alias="OWNER_OPEN_ID")

    # Empathy notification rules
    empathy_threshold: int = Field(default=50, alias="EMPATHY_THRESHOLD")
    empathy_notify_every: int = Field(default=10, alias="EMPATHY_NOTIFY_EVERY")
    empathy_notify_first: int = Field(default=3, alias="EMPATHY_NOTIFY_FIRST")

    # Image uploads (local filesystem)
    upload_dir: str = Field(default="public/uploads", alias="UPLOAD_DIR")
    upload_url_prefix: str = Field(default="/uploads", alias="UPLOAD_URL_PREFIX")
    max_upload_bytes: int = Field(default=10 * 1024 * 1024, alias="MAX_UPLOAD_BYTES")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["http://localhost:5173", "http://localhost:3000"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["Content-Type", "Authorization", "X-Requested-With"],
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
        url = self.database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def session_max_age_seconds(self) -> int:
        """Return the session cookie lifetime in seconds."""
        return self.session_expire_days * 24 * 60 * 60


settings = Settings()  # type: ignore[call-arg]
