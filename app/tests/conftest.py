from unittest.mock import Mock

import pytest

from infrastructure.configuration import AuditExportSettings, GraphSettings, Settings
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep developer .env files and credentials out of the tests."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "TENANT_ID",
        "CLIENT_ID",
        "CLIENT_SECRET",
        "LOG_LEVEL",
        "PREFIX",
        "EXPORT_OUTPUT_DIR",
        "AUDIT_WINDOW_HOURS",
        "AUDIT_ACTIVITY_DISPLAY_NAME",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def export_settings(tmp_path) -> AuditExportSettings:
    """Export settings writing into a per-test directory."""
    return AuditExportSettings(EXPORT_OUTPUT_DIR=str(tmp_path / "out"))


@pytest.fixture
def graph_settings() -> GraphSettings:
    return GraphSettings(
        TENANT_ID="tenant-123",
        CLIENT_ID="client-456",
        CLIENT_SECRET="shh",
    )


@pytest.fixture
def settings(graph_settings, export_settings) -> Settings:
    return Settings(graph=graph_settings, audit_export=export_settings)


@pytest.fixture
def not_found() -> OperationResult:
    return OperationResult.error(
        OperationStatus.NOT_FOUND, "Graph resource not found", error_code="NOT_FOUND"
    )


@pytest.fixture
def mock_directory() -> Mock:
    """Mock DirectoryClient; configure return values per test."""
    return Mock()


@pytest.fixture
def mock_clients(mock_directory) -> Mock:
    """Mock GraphClients facade with audit_logs and directory clients."""
    clients = Mock()
    clients.directory = mock_directory
    clients.audit_logs = Mock()
    return clients
