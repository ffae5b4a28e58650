"""Microsoft Graph clients for the infrastructure layer.

Public API (Package Level):
- GraphClients: Facade composing the audit log and directory clients
- AuditLogsClient, DirectoryClient: individual clients
- GraphSessionProvider: token acquisition and authenticated GETs
- AuthenticationError, GraphRequestError, GraphError: client failures

Usage:
    from infrastructure.clients.graph import GraphClients

    clients = GraphClients(settings.graph)
    clients.authenticate()
    result = clients.audit_logs.list_directory_audits(filter_expression)
"""

from infrastructure.clients.graph.audit_logs import AuditLogsClient
from infrastructure.clients.graph.directory import DirectoryClient
from infrastructure.clients.graph.errors import (
    AuthenticationError,
    GraphError,
    GraphRequestError,
)
from infrastructure.clients.graph.facade import GraphClients
from infrastructure.clients.graph.session_provider import GraphSessionProvider

__all__ = [
    "GraphClients",
    "AuditLogsClient",
    "DirectoryClient",
    "GraphSessionProvider",
    "AuthenticationError",
    "GraphError",
    "GraphRequestError",
]
