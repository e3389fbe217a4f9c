"""Runtime configuration for barterpy."""

from __future__ import annotations

import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .const import API_URLS, Environment

_LOGGER = logging.getLogger(__name__)


class Settings(BaseSettings):
    APP_ENV: Environment = Environment.DEVELOPMENT
    API_URL: str | None = None  # overrides the per-environment URL
    KEYRING_SERVICE: str = "barter"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("APP_ENV", mode="before")
    @classmethod
    def _default_unknown_env(cls, v):
        # unset or unrecognized values fall back to development
        if isinstance(v, Environment):
            return v
        try:
            return Environment(str(v).strip().lower())
        except ValueError:
            _LOGGER.warning("Unknown APP_ENV %r, using development", v)
            return Environment.DEVELOPMENT

    @property
    def api_base_url(self) -> str:
        """Return the API base URL for this configuration."""
        if self.API_URL:
            return self.API_URL.rstrip("/")
        return get_api_base_url(self.APP_ENV)


def get_api_base_url(environment: Environment | str | None = None) -> str:
    """Return the base URL for ``environment``, defaulting to development."""
    try:
        env = Environment(environment) if environment else Environment.DEVELOPMENT
    except ValueError:
        env = Environment.DEVELOPMENT
    return API_URLS[env]


settings = Settings()
