"""Configuration settings for the care quality engine."""

from functools import lru_cache

from pydantic import Field, computed_field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from the environment and an optional ``.env`` file.

    Variable names are case-insensitive, so ``METRICS_WINDOW_DAYS=30`` sets
    ``metrics_window_days``.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore")

    # Application settings
    app_name: str = Field(default="Care Quality Engine", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    environment: str = Field(default="development", description="Environment (development, staging, production)")

    # API settings
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    api_prefix: str = Field(default="/api/v1", description="API prefix")
    enable_docs: bool = Field(default=True, description="Enable OpenAPI docs endpoints")
    enable_metrics: bool = Field(default=True, description="Enable Prometheus metrics")

    # Logging settings
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format (json or text)")
    log_file: str | None = Field(default=None, description="Log file path")
    log_rotation: bool = Field(default=True, description="Enable log rotation")
    log_max_size: str = Field(default="100MB", description="Maximum log file size")
    log_backup_count: int = Field(default=5, description="Number of backup log files")

    # Quality metrics settings
    metrics_window_days: int = Field(default=90, ge=1, description="Trailing window for caregiver metrics")
    metrics_max_concurrency: int = Field(default=20, ge=1, description="Caregivers computed concurrently in a batch")
    metrics_task_timeout_seconds: float = Field(default=30.0, gt=0, description="Timeout per caregiver computation")
    platform_rollup_limit: int = Field(default=1000, ge=1, description="Snapshots read by the platform rollup")

    # Incident settings
    low_rating_threshold: float = Field(default=2.0, ge=0.0, le=5.0, description="Ratings at or below open an incident")
    high_severity_threshold: float = Field(default=1.5, ge=0.0, le=5.0, description="Ratings at or below are high severity")

    # Health check settings
    service_timeout: float = Field(default=5.0, gt=0, description="Health check timeout in seconds")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = ["development", "dev", "local", "test", "staging", "stage", "production", "prod"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v.lower() not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v.lower()

    @model_validator(mode="after")
    def validate_thresholds(self) -> "Settings":
        if self.high_severity_threshold > self.low_rating_threshold:
            raise ValueError("high_severity_threshold cannot exceed low_rating_threshold")
        return self

    @computed_field
    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment in ("development", "dev", "local")

    @computed_field
    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment in ("production", "prod")


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
