"""Audit logs client for Microsoft Graph directory audit events."""

from typing import Any

import structlog

from infrastructure.clients.graph.executor import execute_graph_api_call
from infrastructure.clients.graph.session_provider import GraphSessionProvider
from infrastructure.operations.result import OperationResult

logger = structlog.get_logger()


class AuditLogsClient:
    """Client for the ``auditLogs/directoryAudits`` endpoint.

    Args:
        session_provider: GraphSessionProvider for authentication
    """

    def __init__(self, session_provider: GraphSessionProvider) -> None:
        self._session_provider = session_provider
        self._logger = logger.bind(component="audit_logs_client")

    def list_directory_audits(self, filter_expression: str) -> OperationResult:
        """List directory audit events matching an OData filter.

        Issues a single request; the server decides the order (newest first)
        and page size. A ``@odata.nextLink`` in the response is logged but not
        followed.

        Args:
            filter_expression: OData ``$filter`` expression, sent verbatim

        Returns:
            OperationResult with the list of raw audit event dicts in data
        """
        params: dict[str, Any] = {"$filter": filter_expression}

        self._logger.debug("listing_directory_audits", filter=filter_expression)

        def api_call() -> list[dict[str, Any]]:
            body = self._session_provider.get("auditLogs/directoryAudits", params)
            if body.get("@odata.nextLink"):
                self._logger.warning(
                    "directory_audits_truncated",
                    returned=len(body.get("value", [])),
                )
            return body.get("value", [])

        return execute_graph_api_call("list_directory_audits", api_call)
