"""Feature settings __init__ - exports all feature settings."""

from infrastructure.configuration.features.audit_export import AuditExportSettings

__all__ = [
    "AuditExportSettings",
]
