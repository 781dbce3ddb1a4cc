"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide defaults that match the legacy SII DICRI deployment

Collaborators:
  - api/main.py: reads settings for CORS, middlewares and lifespan
  - container.py: decides between in-memory and PostgreSQL adapters
  - identity/auth_users.py: JWT secret, TTL and legacy password policy

Constraints:
  - Lives in API/infrastructure layer, NOT in domain/application
  - No business logic — pure configuration

Notes:
  - Singleton via lru_cache
  - A missing JWT secret is NOT validated here: it fails when the first
    session is issued or verified (SigningKeyMissingError)
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        database_url: PostgreSQL connection string
        app_env: Application environment (development/test/production)
        allowed_origins: Comma-separated CORS origins
        cors_allow_credentials: Allow cookies cross-origin (default: False)
        max_body_bytes: Max request body size (default: 1MB)
        jwt_secret: Secret for signing JWT access tokens
        jwt_access_ttl_minutes: Access token TTL in minutes (default: 8h)
        allow_legacy_plaintext_passwords: Accept stored plain-text passwords
        password_min_length: Minimum password length for new credentials
        db_pool_min_size / db_pool_max_size: Connection pool bounds
        db_statement_timeout_ms: Per-statement timeout (default: 15s)
        db_connect_timeout_seconds: Max wait for a pooled connection
        log_level / log_json: Logging configuration
        metrics_enabled: Expose /metrics
    """

    # Required (no defaults)
    database_url: str

    # Environment
    app_env: str = "development"

    # CORS configuration
    allowed_origins: str = "http://localhost:5173"
    cors_allow_credentials: bool = False

    # Security - Hardening
    max_body_bytes: int = 1024 * 1024  # 1MB

    # Security - JWT Auth
    jwt_secret: str = ""
    jwt_access_ttl_minutes: int = 480

    # Security - Credentials
    allow_legacy_plaintext_passwords: bool = True
    password_min_length: int = 6

    # Database - Connection Pool
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10
    db_statement_timeout_ms: int = 15000
    db_connect_timeout_seconds: float = 10.0

    # Observability
    log_level: str = "INFO"
    log_json: bool = True
    metrics_enabled: bool = True

    @field_validator("jwt_access_ttl_minutes")
    @classmethod
    def ttl_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("jwt_access_ttl_minutes must be greater than 0")
        return v

    @field_validator("password_min_length")
    @classmethod
    def password_min_length_valid(cls, v: int) -> int:
        if v < 1:
            raise ValueError("password_min_length must be >= 1")
        return v

    @model_validator(mode="after")
    def validate_pool_bounds(self):
        if self.db_pool_min_size < 0 or self.db_pool_max_size < 1:
            raise ValueError("db pool sizes must be positive")
        if self.db_pool_min_size > self.db_pool_max_size:
            raise ValueError(
                f"db_pool_min_size ({self.db_pool_min_size}) must be <= "
                f"db_pool_max_size ({self.db_pool_max_size})"
            )
        return self

    @model_validator(mode="after")
    def validate_security_requirements(self):
        if not self.is_production():
            return self

        insecure_secrets = {"dev-secret", "changeme", "change-me", "password"}
        jwt_secret = (self.jwt_secret or "").strip()
        if jwt_secret in insecure_secrets:
            raise ValueError(
                "JWT_SECRET must be set to a strong, non-default value in production"
            )
        if jwt_secret and len(jwt_secret) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters in production")
        return self

    def get_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    def is_test(self) -> bool:
        """Entornos que cablean repositorios in-memory (ver container)."""
        return self.app_env.strip().lower() in {"test", "testing", "ci"}

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()
