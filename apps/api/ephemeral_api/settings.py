"""Application settings and configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database (commitments, nullifiers and notes only)
    database_url: str = "sqlite:///:memory:"

    # API
    api_port: int = 3001
    api_host: str = "0.0.0.0"
    environment: str = "development"

    # Logging
    log_level: str = "INFO"

    # Chain
    chain_id: int = 31337
    default_asset: str = "ETH"
    balance_currency: str = "ETH"
    zero_address: str = "0x0000000000000000000000000000000000000000"

    # Block production
    processing_delay_ms: int = 1000  # simulated block time
    block_poll_interval_seconds: float = 0.1
    reject_duplicate_nullifiers: bool = True

    # Black box retention
    retention_window_ms: int = 2 * 60 * 60 * 1000  # periodic sweep cutoff
    cleanup_default_window_ms: int = 24 * 60 * 60 * 1000  # on-demand cutoff
    sweep_interval_seconds: int = 60 * 60
    address_redaction_length: int = 10

    # CORS
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    @property
    def is_in_memory_database(self) -> bool:
        """Check if the database lives only inside this process."""
        return self.database_url in ("sqlite://", "sqlite:///:memory:")

    def validate_production_settings(self):
        """Validate settings for production environment."""
        env = self.environment.lower()
        if env not in ("development", "test", "dev"):
            if self.is_in_memory_database:
                raise ValueError(
                    "DATABASE_URL must point to a durable database outside development. "
                    "In-memory SQLite loses every commitment on restart."
                )
            if self.processing_delay_ms < 0:
                raise ValueError("PROCESSING_DELAY_MS must not be negative.")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
