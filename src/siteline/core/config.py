from functools import lru_cache
from urllib.parse import urlparse

from pydantic import ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Siteline"
    app_env: str = "development"  # development, testing, production
    debug: bool = False
    enable_openapi: bool = True

    # Security
    log_user_emails: bool = False
    allowed_app_url_domains: list[str] = ["localhost", "127.0.0.1"]
    csp_production: str = "default-src 'self'; frame-ancestors 'none'"

    # Database
    database_url: str
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_ssl_mode: str = "prefer"  # disable, prefer, require, verify-ca, verify-full

    # Shutdown
    shutdown_grace_period: int = 30

    # Auth
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    refresh_token_expire_days: int = 7
    argon2_time_cost: int = 3
    argon2_memory_cost: int = 65536
    argon2_parallelism: int = 1

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Metrics
    metrics_api_key: str | None = None

    # Email (Resend)
    resend_api_key: str | None = None  # If not set, emails are logged but not sent
    email_from: str = "notifications@example.com"
    email_send_timeout_seconds: int = 10
    app_url: str = "http://localhost:3000"  # Frontend URL used in links

    # Push (Pusher Beams)
    pusher_instance_id: str | None = None  # If not set, push is skipped
    pusher_secret_key: str | None = None
    push_timeout_seconds: float = 5.0
    push_icon_path: str = "/icon-192x192.png"

    # Invites
    invite_expire_days: int = 7

    # Deadline reminders (Temporal scheduled workflow)
    deadline_reminder_schedule: str | None = None  # Cron syntax, e.g. "0 7 * * *"
    deadline_reminder_days: int = 2

    # Redis (optional - app works without it)
    redis_url: str | None = None
    redis_pool_size: int = 10

    # Rate limits (slowapi syntax)
    login_rate_limit: str = "5/minute"
    signup_rate_limit: str = "3/hour"
    invite_rate_limit: str = "20/hour"

    # Temporal
    temporal_host: str = "localhost:7233"
    temporal_namespace: str = "default"
    temporal_task_queue: str = "siteline-jobs"

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        if v == "change-this-to-a-secure-random-string":
            raise ValueError(
                "JWT_SECRET_KEY must be changed from default value. "
                "Generate a secure secret with: openssl rand -hex 32"
            )
        if len(v) < 32:
            raise ValueError("JWT_SECRET_KEY must be at least 32 characters")
        return v

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        """Reject wildcard origins, credentials are allowed on every route."""
        if "*" in v:
            raise ValueError(
                "CORS wildcard '*' is not allowed when allow_credentials=True. "
                "Specify explicit origins instead."
            )
        return v

    @field_validator("app_url")
    @classmethod
    def validate_app_url(cls, v: str, info: ValidationInfo) -> str:
        """APP_URL ends up in emails and push deep links, so pin it to known hosts."""
        allowed = info.data.get("allowed_app_url_domains", ["localhost", "127.0.0.1"])
        hostname = urlparse(v).hostname or ""
        if not any(hostname == domain or hostname.endswith(f".{domain}") for domain in allowed):
            raise ValueError(
                f"APP_URL domain '{hostname}' not in allowed list. "
                f"Add it to ALLOWED_APP_URL_DOMAINS or use: {allowed}"
            )
        return v.rstrip("/")

    @property
    def push_enabled(self) -> bool:
        return bool(self.pusher_instance_id and self.pusher_secret_key)


@lru_cache
def get_settings() -> Settings:
    return Settings()
