# newsfeed/config.py

import logging

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ConfigError(Exception):
    pass


class Settings(BaseSettings):
    # Database
    database_url: str
    db_pool_min: int = 1
    db_pool_max: int = 10

    # Ingestion
    feeds_file: str = "feeds.yaml"
    ingest_interval_minutes: int = 60
    scheduler_enabled: bool = True
    dedupe_within_batch: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


def load_settings(**overrides) -> Settings:
    """
    Read settings from the environment (and a .env file if present).
    DATABASE_URL is mandatory.
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        missing = [
            str(err["loc"][0]).upper() for err in e.errors() if err["type"] == "missing"
        ]
        if missing:
            raise ConfigError(f"{', '.join(missing)} must be set.") from e
        raise ConfigError(f"Invalid configuration: {e}") from e


def configure_logging(level: str = "INFO"):
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)
