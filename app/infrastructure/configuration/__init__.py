"""Infrastructure configuration module - public API.

Centralized configuration for the audit export tool using Pydantic
BaseSettings with domain-based organization.

Exports:
    get_settings: Cached Settings instance
    Settings: Main settings class (for testing/overrides)
    GraphSettings: Microsoft Graph credentials and endpoints
    AuditExportSettings: Export behaviour

Example:
    ```python
    from infrastructure.configuration import get_settings

    settings = get_settings()
    if not settings.graph.is_configured:
        ...
    ```
"""

from infrastructure.configuration.features import AuditExportSettings
from infrastructure.configuration.integrations import GraphSettings
from infrastructure.configuration.settings import Settings, get_settings

__all__ = ["Settings", "get_settings", "GraphSettings", "AuditExportSettings"]
