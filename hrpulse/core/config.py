"""Settings for the HRPulse psychometrics service.

Values come from the environment or a ``.env`` file. ``get_settings`` is
cached and also configures logging for the selected environment, so modules
call it at import time.
"""

import json
from functools import lru_cache
from typing import Annotated, Any, List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from hrpulse.utils.logger import setup_logging


class Settings(BaseSettings):
    """HRPulse settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Service
    APP_NAME: str = "HRPulse Psychometrics"
    APP_VERSION: str = "1.0.0"
    APP_ENV: str = Field(default="development", pattern="^(development|test|staging|production)$")
    APP_DEBUG: bool = True
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = Field(default=8000, ge=1, le=65535)

    # HTTP
    API_V1_PREFIX: str = "/api/v1"
    ALLOWED_HOSTS: Annotated[List[str], NoDecode] = ["localhost", "127.0.0.1"]
    CORS_ORIGINS: Annotated[List[str], NoDecode] = ["http://localhost:5173", "http://localhost:3000"]

    # MongoDB
    MONGODB_URL: str = "mongodb://localhost:27017"
    MONGODB_DB_NAME: str = "hrpulse"
    MONGODB_MAX_POOL_SIZE: int = Field(default=50, ge=1)
    MONGODB_MIN_POOL_SIZE: int = Field(default=5, ge=0)
    MONGODB_MAX_IDLE_TIME_MS: int = Field(default=10000, ge=0)
    MONGODB_CONNECT_TIMEOUT_MS: int = Field(default=10000, ge=1000)
    TEST_DATABASE_URL: str = "mongodb://localhost:27017"
    TEST_DATABASE_NAME: str = "hrpulse_test"

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"
    TEST_REDIS_URL: str = "redis://localhost:6379/15"
    REDIS_PASSWORD: Optional[str] = None
    REDIS_MAX_CONNECTIONS: int = Field(default=50, ge=1)
    REDIS_HEALTH_CHECK_INTERVAL: int = Field(default=30, ge=0)

    # Features
    ENABLE_CACHE: bool = True
    ENABLE_API_DOCS: bool = True
    ENABLE_METRICS: bool = True

    # Scoring and caching
    RECOMMENDATION_RULES_PATH: Optional[str] = Field(
        default=None,
        description="JSON rule table replacing the built-in recommendation text",
    )
    QUESTION_BANK_CACHE_TTL: int = Field(default=300, ge=0, description="Seconds")
    DASHBOARD_CACHE_TTL: int = Field(default=60, ge=0, description="Seconds")

    LOG_LEVEL: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    @field_validator("CORS_ORIGINS", "ALLOWED_HOSTS", mode="before")
    @classmethod
    def split_comma_separated(cls, v: Any) -> Any:
        """Accept ``a,b,c`` as well as a JSON list."""
        if not isinstance(v, str):
            return v
        if v.lstrip().startswith("["):
            return json.loads(v)
        return [item.strip() for item in v.split(",") if item.strip()]

    @field_validator("MONGODB_URL", "TEST_DATABASE_URL")
    @classmethod
    def validate_mongodb_url(cls, v: str) -> str:
        if not v.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError("MongoDB URL must start with mongodb:// or mongodb+srv://")
        return v

    @field_validator("REDIS_URL", "TEST_REDIS_URL")
    @classmethod
    def validate_redis_url(cls, v: str) -> str:
        if not v.startswith(("redis://", "rediss://")):
            raise ValueError("Redis URL must start with redis:// or rediss://")
        return v

    @field_validator("RECOMMENDATION_RULES_PATH")
    @classmethod
    def validate_rules_path(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        if v is not None and not v.endswith(".json"):
            raise ValueError("RECOMMENDATION_RULES_PATH must point to a .json file")
        return v

    @model_validator(mode="after")
    def apply_environment_overrides(self) -> "Settings":
        if self.is_test():
            self.ENABLE_METRICS = False
        if self.is_production():
            self.APP_DEBUG = False
            if self.LOG_LEVEL == "DEBUG":
                self.LOG_LEVEL = "INFO"
        return self

    def get_database_url(self) -> str:
        return self.TEST_DATABASE_URL if self.is_test() else self.MONGODB_URL

    def get_database_name(self) -> str:
        return self.TEST_DATABASE_NAME if self.is_test() else self.MONGODB_DB_NAME

    def get_redis_url(self) -> str:
        return self.TEST_REDIS_URL if self.is_test() else self.REDIS_URL

    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    def is_development(self) -> bool:
        return self.APP_ENV == "development"

    def is_test(self) -> bool:
        return self.APP_ENV == "test"


@lru_cache()
def get_settings() -> Settings:
    """Load settings once and configure logging for the environment.

    Returns:
        Settings: Application settings instance
    """
    settings = Settings()
    setup_logging(environment=settings.APP_ENV, log_level=settings.LOG_LEVEL)
    return settings
