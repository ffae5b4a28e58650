"""Microsoft Graph clients facade."""

from typing import TYPE_CHECKING, Optional

import structlog

from infrastructure.clients.graph.audit_logs import AuditLogsClient
from infrastructure.clients.graph.directory import DirectoryClient
from infrastructure.clients.graph.session_provider import GraphSessionProvider

if TYPE_CHECKING:
    from infrastructure.configuration.integrations.graph import GraphSettings

logger = structlog.get_logger()


class GraphClients:
    """Facade for the Graph service clients used by the exports.

    Composes one session provider with the per-area clients. The facade is
    built once per CLI invocation and passed to each pipeline.

    Args:
        graph_settings: Graph configuration from settings.graph
        session_provider: Optional pre-built provider (used by tests)

    Attributes:
        audit_logs: AuditLogsClient for directory audit queries
        directory: DirectoryClient for role and identity lookups

    Usage:
        clients = GraphClients(settings.graph)
        result = clients.directory.get_user(user_id)
    """

    _session_provider: GraphSessionProvider
    audit_logs: AuditLogsClient
    directory: DirectoryClient

    def __init__(
        self,
        graph_settings: "GraphSettings",
        session_provider: Optional[GraphSessionProvider] = None,
    ) -> None:
        self._session_provider = session_provider or GraphSessionProvider(
            tenant_id=graph_settings.TENANT_ID,
            client_id=graph_settings.CLIENT_ID,
            client_secret=graph_settings.CLIENT_SECRET,
            base_url=graph_settings.GRAPH_BASE_URL,
            scope=graph_settings.GRAPH_SCOPE,
            authority_host=graph_settings.GRAPH_AUTHORITY_HOST,
            timeout=graph_settings.GRAPH_REQUEST_TIMEOUT,
        )

        self.audit_logs = AuditLogsClient(session_provider=self._session_provider)
        self.directory = DirectoryClient(session_provider=self._session_provider)

        self._logger = logger.bind(component="graph_clients")

    def authenticate(self) -> None:
        """Acquire a token up front so credential problems surface first."""
        self._session_provider.acquire_token()
        self._logger.info("graph_authenticated")

    def close(self) -> None:
        self._session_provider.close()
