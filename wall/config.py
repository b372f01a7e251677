"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets (ADMIN_TOKEN, SELLER_ADDRESS) come from environment variables
    - get_settings() is cached (lru_cache) — single instance per process
    - DATABASE_URL scheme selects the storage backend once, at startup

Design Decisions:
    - Same variable names as the original deployment (.env compatible):
      DB_PATH is still honoured when DATABASE_URL is not set
    - pending_ttl_seconds = 0 disables expiry entirely
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = ""
    db_path: str = "./wall.db"
    database_pool_size: int = 10
    database_max_overflow: int = 5

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str):
            if v.startswith("postgres://"):
                return v.replace("postgres://", "postgresql+asyncpg://", 1)
            if v.startswith("postgresql://"):
                return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    @model_validator(mode="after")
    def default_sqlite_url(self) -> "Settings":
        if not self.database_url:
            self.database_url = f"sqlite+aiosqlite:///{self.db_path}"
        return self

    # Server
    host: str = "0.0.0.0"
    port: int = 4021
    shutdown_grace_seconds: int = 10

    # Payment (x402)
    seller_address: str = "0x0000000000000000000000000000000000000000"
    message_price: str = "$0.001"
    network: str = "base-sepolia"
    facilitator_url: str = "https://x402.org/facilitator"
    facilitator_timeout_seconds: float = 15.0
    payment_timeout_seconds: int = 60

    # Administration
    admin_token: str | None = None

    # Pending message expiry
    pending_ttl_seconds: int = 3600
    pending_purge_interval_seconds: int = 300

    # API
    cors_origins: list[str] = ["http://localhost:4021"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
