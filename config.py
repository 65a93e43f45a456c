"""
Application configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file).

Decision on OAuth env vars: GOOGLE_OAUTH_CLIENT_ID / GOOGLE_OAUTH_CLIENT_SECRET
are canonical, but the storefront's older GOOGLE_CLIENT_ID / GOOGLE_CLIENT_SECRET
names are also accepted (handled in OAuthProviderSettings via model_validator).
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    mongodb_uri: str
    db_name: str = "watch-shop"


class RedisSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Optional — without Redis, sessions live in process memory
    redis_uri: Optional[str] = None


class SessionSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    session_secret: str = ""
    session_cookie_name: str = "watchshop_session"
    session_ttl_seconds: int = 86400
    cookie_secure: bool = False

    # Lifetime of an emailed double-check code
    verification_code_ttl_seconds: int = Field(600, gt=0)


class OAuthProviderSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    google_oauth_client_id: str = ""
    google_oauth_client_secret: str = ""
    google_oauth_redirect_uri: str = ""

    # legacy names
    google_client_id: str = ""
    google_client_secret: str = ""

    @model_validator(mode="after")
    def _accept_legacy_names(self) -> "OAuthProviderSettings":
        if not self.google_oauth_client_id and self.google_client_id:
            self.google_oauth_client_id = self.google_client_id
        if not self.google_oauth_client_secret and self.google_client_secret:
            self.google_oauth_client_secret = self.google_client_secret
        return self

    @property
    def google_configured(self) -> bool:
        return bool(self.google_oauth_client_id and self.google_oauth_client_secret)


class EmailSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    zepto_api_token: str = ""
    zepto_from_email: str = "noreply@watchshop.example"
    zepto_from_name: str = "Watch Shop"
    email_timeout_seconds: float = 10.0


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"
    log_format: str = "console"  # "json" in production


class SentrySettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    sentry_dsn: str = ""
    sentry_send_pii: bool = False
    sentry_traces_sample_rate: float = 0.1
    sentry_profile_sample_rate: float = 0.05


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Core
    env: str = "development"
    app_url: str = "http://localhost:8000"
    app_name: str = "Watch Shop"

    # CORS — the storefront frontend sends the session cookie cross-origin
    cors_origins: list[str] = ["http://localhost:5173"]

    # OpenAPI docs URL (None disables the docs UI in production)
    docs_url: Optional[str] = "/docs"

    # Sub-configs (composed via model_validator below)
    db: Optional[DatabaseSettings] = None
    redis: Optional[RedisSettings] = None
    session: Optional[SessionSettings] = None
    oauth: Optional[OAuthProviderSettings] = None
    email: Optional[EmailSettings] = None
    logging: Optional[LoggingSettings] = None
    sentry: Optional[SentrySettings] = None

    @model_validator(mode="after")
    def _populate_sub_configs(self) -> "AppSettings":
        # Populate sub-configs from the same env/dotenv source
        if self.db is None:
            self.db = DatabaseSettings()
        if self.redis is None:
            self.redis = RedisSettings()
        if self.session is None:
            self.session = SessionSettings()
        if self.oauth is None:
            self.oauth = OAuthProviderSettings()
        if self.email is None:
            self.email = EmailSettings()
        if self.logging is None:
            self.logging = LoggingSettings()
        if self.sentry is None:
            self.sentry = SentrySettings()

        return self

    @property
    def is_production(self) -> bool:
        return self.env == "production"
