"""Error classifiers for Microsoft Graph request failures.

Converts ``requests`` exceptions raised while talking to Microsoft Graph into
standardized OperationResult objects.

Usage:
    from infrastructure.operations.classifiers import classify_http_error

    try:
        response = session.get(url, timeout=30)
        response.raise_for_status()
    except requests.RequestException as exc:
        return classify_http_error(exc)
"""

from typing import Optional

import requests

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus


def _graph_error_message(response: requests.Response) -> str:
    """Extract the ``error.message`` field from a Graph error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or ""
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            return str(error.get("message", ""))
    return ""


def _with_detail(message: str, detail: str) -> str:
    return f"{message}: {detail}" if detail else message


def classify_http_error(exc: Exception) -> OperationResult:
    """Classify a Graph request failure into an OperationResult.

    Status Code Mapping:
    - 429: Throttled → TRANSIENT_ERROR with retry_after
    - 401: Unauthorized → UNAUTHORIZED
    - 403: Forbidden → PERMANENT_ERROR (missing application permission)
    - 404: Not found → NOT_FOUND
    - 5xx: Server error → TRANSIENT_ERROR
    - Other 4xx → PERMANENT_ERROR
    - No response (connection error, timeout) → TRANSIENT_ERROR

    Args:
        exc: Exception raised by requests while calling Graph

    Returns:
        OperationResult with appropriate status, message, error_code, and
        retry_after (if applicable)
    """
    response: Optional[requests.Response] = None
    if isinstance(exc, requests.HTTPError):
        response = exc.response

    if response is None:
        if isinstance(exc, requests.Timeout):
            return OperationResult.transient_error(
                f"Graph request timed out: {exc}",
                error_code="TIMEOUT",
            )
        return OperationResult.transient_error(
            f"Connection error: {type(exc).__name__}: {str(exc)}",
            error_code="CONNECTION_ERROR",
        )

    status_code = response.status_code
    detail = _graph_error_message(response)

    if status_code == 429:
        retry_after = 60
        header_value = response.headers.get("Retry-After")
        if header_value:
            try:
                retry_after = int(header_value)
            except (ValueError, TypeError):
                pass  # malformed header, keep default

        return OperationResult.error(
            OperationStatus.TRANSIENT_ERROR,
            "Graph API throttled the request",
            error_code="RATE_LIMITED",
            retry_after=retry_after,
        )

    if status_code == 401:
        return OperationResult.error(
            OperationStatus.UNAUTHORIZED,
            _with_detail("Graph API authentication failed", detail),
            error_code="UNAUTHORIZED",
        )

    if status_code == 403:
        return OperationResult.permanent_error(
            _with_detail("Graph API authorization denied", detail),
            error_code="FORBIDDEN",
        )

    if status_code == 404:
        return OperationResult.error(
            OperationStatus.NOT_FOUND,
            "Graph resource not found",
            error_code="NOT_FOUND",
        )

    if 500 <= status_code < 600:
        return OperationResult.transient_error(
            f"Graph API server error ({status_code})",
            error_code="SERVER_ERROR",
        )

    if 400 <= status_code < 500:
        return OperationResult.permanent_error(
            _with_detail(f"Graph API client error ({status_code})", detail),
            error_code="HTTP_ERROR",
        )

    return OperationResult.permanent_error(
        f"Graph API error: {str(exc)}",
        error_code="UNKNOWN_ERROR",
    )
