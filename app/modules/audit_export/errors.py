"""Errors for the audit export module."""


class AuditExportError(Exception):
    """Base class for export failures that end the run."""


class ConfigurationError(AuditExportError):
    """Raised when required configuration (credentials) is missing or invalid."""


class ExportWriteError(AuditExportError):
    """Raised when an export file cannot be created or written.

    Attributes:
        path: the file that could not be written
    """

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path
