"""Shared base classes for the settings sections.

Every section reads the process environment plus the env files below,
relative to the working directory the CLI is started from.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

# Later files take priority, so .env.local overrides .env
ENV_FILES = (".env", ".env.local")

SECTION_CONFIG = SettingsConfigDict(
    env_file=ENV_FILES,
    case_sensitive=True,
    extra="ignore",
)


class IntegrationSettings(BaseSettings):
    """Credentials and endpoints of an external service (Microsoft Graph)."""

    model_config = SECTION_CONFIG


class FeatureSettings(BaseSettings):
    """Behaviour of one export feature (window, file names, output dir)."""

    model_config = SECTION_CONFIG
