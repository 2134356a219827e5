"""Settings for detakit clients."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_BASE_HOST, DEFAULT_DRIVE_HOST, DEFAULT_TIMEOUT


class DetaSettings(BaseSettings):
    """detakit configuration settings.

    Only read when a client is built through `Deta.from_settings()`;
    `Deta(...)` itself takes every value explicitly.
    """

    # Credentials
    DETA_PROJECT_KEY: Optional[str] = None

    # Endpoints
    DETA_BASE_HOST: str = DEFAULT_BASE_HOST
    DETA_DRIVE_HOST: str = DEFAULT_DRIVE_HOST
    DETA_TIMEOUT: float = DEFAULT_TIMEOUT

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

