"""Store configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Store settings loaded from environment variables."""

    # Persistence
    storage_backend: str = "memory"  # memory or file
    storage_dir: str = ".admin_store"
    key_prefix: str = "admin_"

    # Simulated network latency
    latency_min_ms: float = 200.0
    latency_max_ms: float = 500.0

    # Operations slower than this count as slow in store stats
    slow_operation_ms: float = 400.0

    # Application
    log_level: str = "INFO"

    @property
    def collection_keys(self) -> dict[str, str]:
        """Get the persisted key for each collection."""
        return {
            name: f"{self.key_prefix}{name}"
            for name in ("products", "orders", "customers", "analytics")
        }

    class Config:
        env_prefix = "ADMIN_STORE_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra environment variables


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
