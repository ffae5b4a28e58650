"""Audit export configuration settings - main aggregator."""

from functools import lru_cache

from pydantic_settings import BaseSettings

from infrastructure.configuration.base import SECTION_CONFIG
from infrastructure.configuration.features import AuditExportSettings
from infrastructure.configuration.integrations import GraphSettings


class Settings(BaseSettings):
    """Audit export configuration settings - main aggregator.

    Aggregates the domain-specific settings into a single configuration object:

    - **Integrations**: Microsoft Graph credentials and endpoints
    - **Features**: audit and role export behaviour

    Environment Variables:
        PREFIX: Environment prefix; any value switches to console log rendering
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)

    Example:
        ```python
        from infrastructure.configuration import get_settings

        settings = get_settings()
        window = settings.audit_export.AUDIT_WINDOW_HOURS
        ```
    """

    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"

    graph: GraphSettings
    audit_export: AuditExportSettings

    @property
    def is_production(self) -> bool:
        """True if PREFIX is empty (production)."""
        return not bool(self.PREFIX)

    def __init__(self, **kwargs):
        """Initialize Settings with automatic subsettings instantiation.

        Args:
            **kwargs: Optional overrides for specific settings sections.
        """
        settings_map = {
            "graph": GraphSettings,
            "audit_export": AuditExportSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SECTION_CONFIG


@lru_cache
def get_settings() -> Settings:
    """Get the process-wide settings instance.

    The first call reads the environment and env files; later calls return
    the same object. Tests construct ``Settings(...)`` directly instead.
    """
    return Settings()
