"""Settings for the datasearch engine."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class SearchSettings(BaseSettings):
    """datasearch configuration settings."""

    # Backend wired for this deployment
    SEARCH_BACKEND: Literal["sqlalchemy", "mongodb"] = "sqlalchemy"

    # Number parsing (locale of the incoming search values)
    NUMBER_GROUPING_SEPARATOR: str = ","
    NUMBER_DECIMAL_SEPARATOR: str = "."

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


settings = SearchSettings()
