"""
⚙️ Configuration Management
Centralized settings for the genetic engine (environment variables and .env file)
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Main settings of the genetic engine"""

    model_config = SettingsConfigDict(
        env_prefix="GENETIC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: str = Field(default="development")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Project
    project_name: str = "genetic-engine"
    version: str = "0.1.0"

    # File logs are only written when a directory is configured
    logs_dir: Optional[Path] = Field(default=None)

    # Run defaults
    crossover_probability: float = Field(default=0.75, ge=0.0, le=1.0)
    mutation_probability: float = Field(default=0.1, ge=0.0, le=1.0)
    population_min_size: int = Field(default=50, ge=2)
    population_max_size: int = Field(default=100, ge=2)
    generation_history_size: int = Field(default=10, ge=1)

    # Performance
    evaluation_workers: int = Field(default=1, ge=1)
    random_seed: Optional[int] = Field(default=None)

    @field_validator("logs_dir")
    @classmethod
    def ensure_path_absolute(cls, v):
        """Resolve the logs directory to an absolute path"""
        if v is None:
            return v
        return Path(v).resolve()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate the log level"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return v.upper()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        valid_environments = ["development", "testing", "production"]
        if v.lower() not in valid_environments:
            raise ValueError(f"Invalid environment. Must be one of: {valid_environments}")
        return v.lower()

    @model_validator(mode="after")
    def validate_population_bounds(self):
        if self.population_max_size < self.population_min_size:
            raise ValueError(
                "population_max_size should be greater or equal to population_min_size"
            )
        return self

    def create_directories(self) -> None:
        """Create the logs directory when file logging is enabled"""
        if self.logs_dir is not None:
            self.logs_dir.mkdir(parents=True, exist_ok=True)

    def is_production(self) -> bool:
        return self.environment == "production"

    def is_development(self) -> bool:
        return self.environment == "development"

    def is_testing(self) -> bool:
        return self.environment == "testing"


@lru_cache()
def get_settings() -> Settings:
    """
    Return the settings instance (singleton).
    lru_cache avoids reloading the environment on every call.
    """
    settings = Settings()
    settings.create_directories()
    return settings
