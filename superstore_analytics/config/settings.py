"""
Superstore Sales Analytics
Centralized Configuration Management

Pydantic settings with environment variable support, validation, and type safety.
"""

from functools import lru_cache
from typing import List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DataSettings(BaseSettings):
    """Dataset Source Configuration"""

    model_config = SettingsConfigDict(env_prefix="DATA_")

    dataset_path: str = Field(default="./data/super_store.csv", description="Default dataset file")
    encoding: str = Field(default="utf8-lossy", description="CSV encoding")
    delimiter: str = Field(default=",", description="CSV delimiter")
    null_values: List[str] = Field(
        default=["", "NULL", "null", "None", "NA", "N/A"],
        description="Tokens read as null",
    )


class AnalyticsSettings(BaseSettings):
    """Report Computation Configuration"""

    model_config = SettingsConfigDict(env_prefix="ANALYTICS_")

    date_format: str = Field(default="%m/%d/%Y", description="Order/ship date text format")
    top_products_limit: int = Field(default=10, description="Rows in the top products report")
    top_states_limit: int = Field(default=5, description="Rows in the state profitability report")
    top_customers_per_state: int = Field(default=3, description="Rank cutoff per state")
    top_pairs_limit: int = Field(default=10, description="Rows in the sub-category pairs report")
    float_precision: int = Field(default=2, description="Decimal places when rendering")
    max_workers: int = Field(default=4, description="Threads for parallel report runs")


class MonitoringSettings(BaseSettings):
    """Logging Configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="Logging level")
    log_format: str = Field(default="json", alias="LOG_FORMAT", description="Log format: json or text")


class Settings(BaseSettings):
    """
    Main Application Settings

    Aggregates all configuration sections and provides a single entry point
    for accessing application configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = Field(default="superstore-analytics", alias="APP_NAME", description="Application name")
    app_env: str = Field(default="development", alias="APP_ENV", description="Environment")
    debug: bool = Field(default=False, alias="DEBUG", description="Debug mode")

    # API Server
    api_host: str = Field(default="0.0.0.0", alias="API_HOST", description="API host")
    api_port: int = Field(default=8000, alias="API_PORT", description="API port")

    version: str = Field(default="1.0.0", description="Application version")

    # Subsystem configurations
    data: DataSettings = Field(default_factory=DataSettings)
    analytics: AnalyticsSettings = Field(default_factory=AnalyticsSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development"""
        return self.app_env == "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
