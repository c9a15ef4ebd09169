from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Only ever used when APP_ENV is development or testing
DEV_JWT_SECRET_KEY = "local-development-only-secret-do-not-deploy"

PLACEHOLDER_SECRETS = {
    "change-this-to-a-secure-random-string",
    "your-secret-key-change-in-production",
}

LOCAL_ENVIRONMENTS = ("development", "testing")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "TIC Projects Platform"
    app_env: str = "development"  # development, testing, production
    debug: bool = False
    enable_openapi: bool = True

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Security
    log_user_emails: bool = False  # Set to False in production for GDPR compliance

    # Database
    database_url: str = "sqlite+aiosqlite:///./tic_projects.db"
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_ssl_mode: str = "prefer"  # disable, prefer, require, verify-ca, verify-full
    auto_migrate: bool = True  # Run Alembic migrations on startup

    # Auth
    jwt_secret_key: str | None = None
    jwt_algorithm: str = "HS256"
    access_token_expire_days: int = 7
    argon2_time_cost: int = 3
    argon2_memory_cost: int = 65536
    argon2_parallelism: int = 1

    # Uploads
    upload_dir: str = "uploads"
    upload_url_path: str = "/uploads"
    max_upload_size_bytes: int = 20 * 1024 * 1024

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Metrics
    metrics_api_key: str | None = None  # If set, /metrics requires this key

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret(cls, v: str | None) -> str | None:
        if v is None:
            return v
        if v in PLACEHOLDER_SECRETS:
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
        """Validate CORS origins - reject wildcards when credentials are used."""
        for origin in v:
            if origin == "*":
                raise ValueError(
                    "CORS wildcard '*' is not allowed when allow_credentials=True. "
                    "Specify explicit origins instead."
                )
        return v

    @field_validator("upload_url_path")
    @classmethod
    def validate_upload_url_path(cls, v: str) -> str:
        v = "/" + v.strip("/")
        if v in ("/", "/auth", "/projects", "/api"):
            raise ValueError("UPLOAD_URL_PATH must not overlap the API namespace")
        return v

    @model_validator(mode="after")
    def require_secret_outside_development(self) -> "Settings":
        """Fall back to the local secret only for development and testing."""
        if self.jwt_secret_key is None:
            if self.app_env not in LOCAL_ENVIRONMENTS:
                raise ValueError(
                    f"JWT_SECRET_KEY is required when APP_ENV={self.app_env!r}. "
                    "Generate a secure secret with: openssl rand -hex 32"
                )
            self.jwt_secret_key = DEV_JWT_SECRET_KEY
        return self

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    return Settings()
