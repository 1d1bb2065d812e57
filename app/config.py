import logging
from typing import List, Optional
from pydantic import ValidationInfo, field_validator, model_validator, Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

log = logging.getLogger(__name__)


class DatabaseSettings(BaseSettings):
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_ECHO_LOG: bool = False


class PostgresSettings(DatabaseSettings):
    POSTGRES_USER: str = Field(default="postgres")
    POSTGRES_PASSWORD: str = Field(default="postgres")
    POSTGRES_HOST: str = Field(default="localhost")
    POSTGRES_PORT: int = Field(default=5432)
    POSTGRES_DB: str = Field(default="postgres")
    POSTGRES_SSL_MODE: str = Field(default="disable")
    POSTGRES_ASYNC_PREFIX: str = "postgresql+asyncpg://"
    DATABASE_URL_ENV: Optional[str] = Field(default=None, validation_alias="DATABASE_URL")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def DATABASE_URL(self) -> str:
        if self.DATABASE_URL_ENV:
            return self.DATABASE_URL_ENV
        credentials = f"{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
        location = f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        url = f"{self.POSTGRES_ASYNC_PREFIX}{credentials}@{location}"
        # asyncpg takes "ssl" rather than libpq's "sslmode"
        if self.POSTGRES_SSL_MODE and self.POSTGRES_SSL_MODE != "disable":
            url = f"{url}?ssl={self.POSTGRES_SSL_MODE}"
        return url

    @model_validator(mode="after")
    def check_required_database_fields(self) -> "PostgresSettings":
        if self.DATABASE_URL_ENV:
            return self
        if not self.POSTGRES_HOST:
            raise ValueError("database host is required")
        if not self.POSTGRES_USER:
            raise ValueError("database user is required")
        if not self.POSTGRES_DB:
            raise ValueError("database name is required")
        return self


class ServerSettings(BaseSettings):
    SERVER_HOST: str = Field(default="0.0.0.0")
    SERVER_PORT: int = Field(default=8080)


class Settings(PostgresSettings, ServerSettings, BaseSettings):
    """Application configuration settings loaded from .env file and environment variables."""

    # --- Core Application Settings ---
    PROJECT_NAME: str = "cruder"
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = Field(default="development", pattern=r"^(development|testing|staging|production)$")
    API_V1_STR: str = "/api/v1"

    # Shared credential for the X-API-Key header; empty disables the check
    API_KEY: str = ""

    CORS_ORIGINS: str = Field(default="")
    CORS_ORIGINS_LIST: List[str] = Field(default=[], validate_default=True)

    @field_validator("ENVIRONMENT", mode="before")
    @classmethod
    def strip_comments(cls, v: str) -> str:
        if isinstance(v, str):
            return v.split("#")[0].strip()
        return v

    @field_validator("CORS_ORIGINS_LIST", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: List[str], info: ValidationInfo) -> List[str]:
        cors_origins_str = info.data.get("CORS_ORIGINS", "")
        log.debug(f"Raw CORS_ORIGINS input: {cors_origins_str!r}")
        if isinstance(cors_origins_str, str) and cors_origins_str:
            origins = [origin.strip() for origin in cors_origins_str.split(",") if origin.strip()]
            valid_origins = []
            for origin in origins:
                if origin == "*" or origin.startswith("http://") or origin.startswith("https://"):
                    valid_origins.append(origin)
                else:
                    log.warning(f"Invalid CORS origin skipped: '{origin}'")
            return valid_origins
        return []

    @model_validator(mode="after")
    def set_db_echo_log(self) -> "Settings":
        if self.ENVIRONMENT == "development":
            self.DB_ECHO_LOG = True
        return self

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    log.info("Loading application settings...")
    settings = Settings()
    sensitive_keys = {"API_KEY", "POSTGRES_PASSWORD", "DATABASE_URL_ENV", "DATABASE_URL"}
    log_data = settings.model_dump(exclude=sensitive_keys)
    log.debug(f"Settings loaded: {log_data}")
    return settings


settings = get_settings()
