"""Settings for the workflow service, read from the environment and .env.

SECRET_KEY (outside debug) and the workflow engine bounds are checked
when the settings are first loaded.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings; every field has a default.

    validate_required rejects a missing secret_key (unless debug) and
    out-of-range engine bounds.
    """

    # App
    app_name: str = "hse-workflows"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database (SQLAlchemy async + Alembic)
    database_url: str = ""
    database_echo: bool = False
    # Optional pool overrides (None = use defaults in database.py)
    db_pool_size: int | None = None
    db_max_overflow: int | None = None

    # Security: bearer tokens are issued by the external identity provider
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 480  # 8 hours

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Evidence storage
    storage_root: str = "/var/hse-workflows/storage"
    storage_base_url: str | None = None
    max_upload_size: int = 10 * 1024 * 1024  # 10MB per image
    max_evidence_photos: int = 5
    allowed_evidence_mime_types: str = "image/jpeg,image/png,image/webp,image/heic"

    # Workflow engine: bounded retries of the history append after a record update
    history_append_max_attempts: int = 3
    history_append_retry_delay_seconds: float = 0.2

    # Request / middleware
    request_id_header: str = "X-Request-ID"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Validate required env and engine bounds."""
        if not self.debug and not self.secret_key.get_secret_value():
            raise ValueError(
                "SECRET_KEY is required. Generate with: openssl rand -hex 32."
            )
        if self.history_append_max_attempts < 1:
            raise ValueError("HISTORY_APPEND_MAX_ATTEMPTS must be at least 1")
        if self.history_append_retry_delay_seconds < 0:
            raise ValueError("HISTORY_APPEND_RETRY_DELAY_SECONDS must not be negative")
        if self.max_evidence_photos < 0:
            raise ValueError("MAX_EVIDENCE_PHOTOS must not be negative")
        return self

    @property
    def evidence_mime_types(self) -> frozenset[str]:
        """Allowed evidence MIME types as a set."""
        return frozenset(
            t.strip().lower() for t in self.allowed_evidence_mime_types.split(",") if t.strip()
        )


@lru_cache
def get_settings() -> Settings:
    """Load Settings once per process.

    Tests that change env vars must call get_settings.cache_clear() first.

    Returns:
        The validated Settings instance.
    """
    return Settings()
