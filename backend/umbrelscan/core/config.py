from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # Application
    APP_NAME: str = "Umbrel Scan"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database (last connected instance)
    DATABASE_URL: str = "sqlite+aiosqlite:///./umbrelscan.db"

    # Host probing
    PROBE_TIMEOUT: float = 2.0  # seconds per host
    PROBE_PORT: int = 80
    PROBE_PATH: str = "/trpc/system.status"
    EXPECTED_STATUS: str = "running"

    # Network Scanning
    BATCH_SIZE: int = 20  # concurrent probes per batch
    DEFAULT_PREFIX: int = 24  # used when the subnet mask is unknown
    DEVICE_IP: Optional[str] = None  # Auto-detect if None
    SUBNET_MASK: Optional[str] = None

    # CORS
    CORS_ORIGINS: list[str] = ["*"]

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
