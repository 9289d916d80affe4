"""Application configuration from environment variables."""

from pydantic import ConfigDict, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Settings loaded from environment variables and an optional .env file."""

    model_config = ConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = Field(
        default="sqlite:///./statement_ledger.db",
        description="SQLAlchemy database URL",
    )
    database_echo: bool = Field(default=False, description="Log SQL queries")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: str = Field(default="logs/statement.log", description="Log file path")

    # Statements
    timezone: str = Field(
        default="America/Cancun",
        description="IANA timezone used for the statement date when none is given",
    )


def get_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings()


__all__ = ["Settings", "get_settings"]
