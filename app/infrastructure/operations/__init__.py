"""Operation result types and status enums.

This module contains standardized result types for Graph operations,
including status enums, result dataclasses, and the error classifier for
``requests`` exceptions.
"""

from infrastructure.operations.classifiers import classify_http_error
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
    "classify_http_error",
]
