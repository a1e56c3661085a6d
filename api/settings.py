"""
Planning API configuration, read from the environment and an optional .env file.

Environment variable names are the upper-cased field names (POCKETBASE_URL,
INFRA_CHUNK_SIZE, ...); ALLOWED_ORIGINS is the one alias.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from planning.data.pocketbase_store import INFRA_COLLECTION, PROJECTS_COLLECTION
from planning.importing.committer import DEFAULT_INFRA_CHUNK_SIZE, MAX_INFRA_CHUNK_SIZE
from planning.importing.session import DEFAULT_MAX_SESSIONS, DEFAULT_SESSION_TTL_SECONDS
from planning.payments.payment_status import DEFAULT_CHUNK_SIZE, MAX_CHUNK_SIZE


class Settings(BaseSettings):
    """Defaults target a local PocketBase on :8090 and the Vite dev server."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    # PocketBase
    pocketbase_url: str = Field(
        default="http://127.0.0.1:8090",
        description="Base URL of the PocketBase server",
    )
    pocketbase_admin_email: str = Field(
        default="admin@planning.local",
        description="Superuser email the API signs in with",
    )
    pocketbase_admin_password: str = Field(
        default="",
        description="Superuser password; empty only for local development",
    )
    skip_pb_auth: bool = Field(
        default=False,
        description="Do not sign in to PocketBase at startup",
    )
    projects_collection: str = Field(
        default=PROJECTS_COLLECTION,
        description="PocketBase collection holding project records",
    )
    infra_collection: str = Field(
        default=INFRA_COLLECTION,
        description="PocketBase collection holding the infrastructure-fee ledger",
    )

    @field_validator("pocketbase_admin_password", mode="after")
    @classmethod
    def validate_admin_password(cls, v: str) -> str:
        """Warn when the admin password is missing or an insecure default."""
        insecure_defaults = {"password", "admin", "123456", ""}
        if v in insecure_defaults:
            logging.getLogger(__name__).warning(
                "POCKETBASE_ADMIN_PASSWORD is empty or a well-known default; "
                "the API will not be able to sign in to a production PocketBase."
            )
        return v

    # CORS (comma-separated in the environment)
    allowed_origins_str: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        alias="ALLOWED_ORIGINS",
        description="Origins allowed to call the API",
    )

    # Insights
    openai_api_key: str = Field(
        default="",
        description="OpenAI API key; insights are disabled when empty",
    )
    insights_model: str = Field(
        default="gpt-4.1-mini",
        description="Model used for dataset insights and project reports",
    )
    insights_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout for a single insights request",
    )

    # Import engine
    import_timeout_seconds: float = Field(
        default=300.0,
        gt=0,
        description="Overall limit for committing one staged import",
    )
    infra_chunk_size: int = Field(
        default=DEFAULT_INFRA_CHUNK_SIZE,
        description="Infra-payment rows per bulk insert (must not exceed the server's batch.maxRequests)",
    )
    paid_status_chunk_size: int = Field(
        default=DEFAULT_CHUNK_SIZE,
        description="Plots per payment-status lookup query",
    )
    import_session_ttl_seconds: float = Field(
        default=DEFAULT_SESSION_TTL_SECONDS,
        gt=0,
        description="How long a staged import waits for confirmation before it is dropped",
    )
    max_import_sessions: int = Field(
        default=DEFAULT_MAX_SESSIONS,
        ge=1,
        description="Staged imports held at once; the oldest idle one is dropped beyond this",
    )

    @field_validator("infra_chunk_size", mode="after")
    @classmethod
    def validate_infra_chunk_size(cls, v: int) -> int:
        if not 1 <= v <= MAX_INFRA_CHUNK_SIZE:
            raise ValueError(f"INFRA_CHUNK_SIZE must be between 1 and {MAX_INFRA_CHUNK_SIZE}, got {v}")
        return v

    @field_validator("paid_status_chunk_size", mode="after")
    @classmethod
    def validate_paid_status_chunk_size(cls, v: int) -> int:
        if not 1 <= v <= MAX_CHUNK_SIZE:
            raise ValueError(f"PAID_STATUS_CHUNK_SIZE must be between 1 and {MAX_CHUNK_SIZE}, got {v}")
        return v

    @property
    def allowed_origins(self) -> list[str]:
        """ALLOWED_ORIGINS split on commas, blanks dropped."""
        return [origin.strip() for origin in self.allowed_origins_str.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Settings are read once per process; tests call get_settings.cache_clear()."""
    return Settings()
