"""Infrastructure modules for the SSPR audit export.

Centralized infrastructure components:
- configuration: Settings management (Settings, get_settings)
- logging: Structured logging setup and run context (configure_logging, get_module_logger)
- operations: Operation results and error classification
- clients.graph: Microsoft Graph session provider and clients
"""

from infrastructure.configuration import Settings, get_settings
from infrastructure.logging import configure_logging, get_module_logger
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    # Configuration
    "Settings",
    "get_settings",
    # Logging
    "configure_logging",
    "get_module_logger",
    # Operations
    "OperationResult",
    "OperationStatus",
]
