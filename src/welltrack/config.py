"""Configuration management for WellTrack."""
from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    WellTrack settings, read from the environment or a `.env` file.

    Only DATABASE_URL is required. Names match the environment variables
    exactly (case-sensitive).
    """

    # Application
    APP_NAME: str = "WellTrack"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str
    DATABASE_POOL_SIZE: int = 5
    DATABASE_MAX_OVERFLOW: int = 10
    DATABASE_ECHO: bool = False

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"

    # API
    API_V1_PREFIX: str = "/api/v1"

    # Inference service
    ML_BASE_URL: str = "http://welltrack-ml.welltrack.svc.cluster.local:5000"
    INFERENCE_TIMEOUT_SECONDS: float = 10.0

    # Analysis queue and worker
    ANALYSIS_WORKER_ENABLED: bool = True
    ANALYSIS_POLL_INTERVAL: float = 0.5  # Seconds the worker idles on an empty queue
    ANALYSIS_QUEUE_MAX_DEPTH: Optional[int] = 1000  # 0 or None disables the bound
    SHUTDOWN_DRAIN_TIMEOUT: float = 30.0

    # Result history
    RESULT_BACKEND: str = "memory"  # "memory" or "redis"
    RESULT_HISTORY_LIMIT: int = 100  # Results kept per subject
    RESULT_TTL_SECONDS: int = 86400  # 0 keeps results forever

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Return the process-wide settings, loaded on first use."""
    return Settings()
