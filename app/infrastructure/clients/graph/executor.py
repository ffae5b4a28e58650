"""Low-level Graph API execution with error classification."""

from typing import Any, Callable

import requests
import structlog

from infrastructure.operations.classifiers import classify_http_error
from infrastructure.operations.result import OperationResult

logger = structlog.get_logger()


def execute_graph_api_call(
    operation_name: str,
    api_callable: Callable[[], Any],
) -> OperationResult:
    """Execute a Graph API call once and wrap the outcome.

    Request failures are classified into an OperationResult. Nothing is
    retried: a failed call is reported to the caller, which decides whether
    it is fatal. AuthenticationError is not caught.

    Args:
        operation_name: Name of operation for logging (e.g., "get_user")
        api_callable: Callable that performs the request and returns the data

    Returns:
        OperationResult with standardized status, message, data, error_code

    Example:
        result = execute_graph_api_call(
            "get_user", lambda: provider.get(f"users/{user_id}")
        )
        if result.is_success:
            user = result.data
    """
    logger.debug("graph_api_call", operation=operation_name)

    try:
        data = api_callable()
    except requests.exceptions.InvalidJSONError as e:
        logger.error(
            "graph_api_invalid_response", operation=operation_name, error=str(e)
        )
        return OperationResult.permanent_error(
            message=f"Invalid JSON in Graph response: {e}",
            error_code="INVALID_RESPONSE",
        )
    except requests.RequestException as e:
        result = classify_http_error(e)
        if result.is_not_found:
            logger.debug("graph_api_not_found", operation=operation_name)
        else:
            logger.error(
                "graph_api_error",
                operation=operation_name,
                status=result.status.value,
                error_code=result.error_code,
                error=result.message,
            )
        return result

    if isinstance(data, OperationResult):
        return data

    return OperationResult.success(
        data=data,
        message=f"{operation_name} succeeded",
    )
