"""Directory client for Microsoft Graph role and identity lookups.

Provides access to role assignments, role definitions, users and service
principals with consistent OperationResult return types.
"""

from typing import Any
from urllib.parse import quote

import structlog

from infrastructure.clients.graph.executor import execute_graph_api_call
from infrastructure.clients.graph.session_provider import GraphSessionProvider
from infrastructure.operations.result import OperationResult

logger = structlog.get_logger()

USER_SELECT = "id,displayName,mail,userPrincipalName"
SERVICE_PRINCIPAL_SELECT = "id,displayName,appId"


def _segment(object_id: str) -> str:
    return quote(object_id, safe="")


class DirectoryClient:
    """Client for Graph directory operations.

    All methods return OperationResult. A missing object comes back as
    NOT_FOUND rather than an exception so callers can fall back.

    Args:
        session_provider: GraphSessionProvider for authentication
    """

    def __init__(self, session_provider: GraphSessionProvider) -> None:
        self._session_provider = session_provider
        self._logger = logger.bind(component="directory_client")

    def list_role_assignments(self, expand: str = "principal") -> OperationResult:
        """List directory role assignments.

        Args:
            expand: ``$expand`` navigation property; ``principal`` embeds the
                assigned principal (including its ``@odata.type``)

        Returns:
            OperationResult with the list of raw assignment dicts in data
        """
        self._logger.debug("listing_role_assignments", expand=expand)

        def api_call() -> list[dict[str, Any]]:
            params = {"$expand": expand} if expand else None
            body = self._session_provider.get(
                "roleManagement/directory/roleAssignments", params
            )
            return body.get("value", [])

        return execute_graph_api_call("list_role_assignments", api_call)

    def get_role_definition(self, role_definition_id: str) -> OperationResult:
        """Get a directory role definition by id."""
        self._logger.debug(
            "getting_role_definition", role_definition_id=role_definition_id
        )
        return execute_graph_api_call(
            "get_role_definition",
            lambda: self._session_provider.get(
                f"roleManagement/directory/roleDefinitions/{_segment(role_definition_id)}"
            ),
        )

    def get_user(self, user_id: str) -> OperationResult:
        """Get a user by object id.

        Returns:
            OperationResult with id, displayName, mail and userPrincipalName
        """
        self._logger.debug("getting_user", user_id=user_id)
        return execute_graph_api_call(
            "get_user",
            lambda: self._session_provider.get(
                f"users/{_segment(user_id)}", {"$select": USER_SELECT}
            ),
        )

    def get_service_principal(self, service_principal_id: str) -> OperationResult:
        """Get a service principal (enterprise application) by object id."""
        self._logger.debug(
            "getting_service_principal", service_principal_id=service_principal_id
        )
        return execute_graph_api_call(
            "get_service_principal",
            lambda: self._session_provider.get(
                f"servicePrincipals/{_segment(service_principal_id)}",
                {"$select": SERVICE_PRINCIPAL_SELECT},
            ),
        )
