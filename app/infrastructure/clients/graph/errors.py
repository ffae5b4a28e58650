"""Errors raised by the Microsoft Graph client layer."""

from typing import Optional

from infrastructure.operations.result import OperationResult


class GraphError(Exception):
    """Base class for Graph client failures that end an export run."""


class AuthenticationError(GraphError):
    """Raised when no application token can be obtained for Graph."""


class GraphRequestError(GraphError):
    """Raised when a Graph call fails in a way the caller cannot work around.

    Attributes:
        operation: name of the failed operation (e.g. "list_directory_audits")
        result: the classified OperationResult of the failed call
        identifier: the object id the call was made for, when there is one
    """

    def __init__(
        self,
        operation: str,
        result: OperationResult,
        identifier: Optional[str] = None,
    ):
        target = f" for {identifier}" if identifier else ""
        super().__init__(f"{operation} failed{target}: {result.message}")
        self.operation = operation
        self.result = result
        self.identifier = identifier
