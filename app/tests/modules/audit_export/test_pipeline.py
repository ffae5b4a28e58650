import csv
import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from infrastructure.clients.graph.errors import GraphRequestError
from infrastructure.operations.result import OperationResult
from modules.audit_export.enrichment import ROLE_ASSIGNMENT_HEADER
from modules.audit_export.errors import ExportWriteError
from modules.audit_export.models import AuditRecord
from modules.audit_export.pipeline import (
    AuditExportProfile,
    run_audit_export,
    run_role_export,
    sspr_profile,
)
from modules.audit_export.projection import SSPR_AUDIT_HEADER, project_audit_record
from tests.factories.graph import (
    make_directory_audit,
    make_graph_user,
    make_role_assignment,
    make_role_definition,
    make_service_principal,
)

NOW = datetime(2025, 7, 31, 15, 30, tzinfo=timezone.utc)
EXPECTED_FILTER = (
    "activityDisplayName eq 'Reset password (self-service)' "
    "and activityDateTime ge 2025-07-24T00:00:00Z "
    "and activityDateTime le 2025-07-31T00:00:00Z"
)


def read_csv(path):
    with open(path, encoding="utf-8", newline="") as f:
        return list(csv.reader(f))


@pytest.mark.unit
class TestRunAuditExport:
    def test_writes_csv_and_json(self, mock_clients, export_settings):
        mock_clients.audit_logs.list_directory_audits.return_value = (
            OperationResult.success(make_directory_audit(n=2))
        )

        summary = run_audit_export(mock_clients, export_settings, now=NOW)

        mock_clients.audit_logs.list_directory_audits.assert_called_once_with(
            EXPECTED_FILTER
        )
        out = Path(export_settings.EXPORT_OUTPUT_DIR)
        rows = read_csv(out / export_settings.AUDIT_CSV_FILENAME)
        assert rows[0] == list(SSPR_AUDIT_HEADER)
        assert [row[0] for row in rows[1:]] == ["audit_id1", "audit_id2"]
        assert rows[1][1] == "2025-07-25 10:11:12"

        records = json.loads(
            (out / export_settings.AUDIT_JSON_FILENAME).read_text(encoding="utf-8")
        )
        assert [r["id"] for r in records] == ["audit_id1", "audit_id2"]
        assert records[0]["initiatedByUserPrincipalName"] == "user1@test.com"

        assert summary.rows_written == 2
        assert len(summary.outputs) == 2
        assert summary.is_clean

    def test_csv_rows_read_back_equal_projection(self, mock_clients, export_settings):
        raw_records = [
            make_directory_audit(
                prefix="a_",
                resultReason='Password reset, then "unlocked" by helpdesk',
                targetResources=[
                    {
                        "id": "t1",
                        "displayName": "Doe, Jane\nHelpdesk",
                        "type": "User",
                        "userPrincipalName": "jane@test.com",
                    }
                ],
            ),
            make_directory_audit(
                prefix="b_",
                initiatedBy={
                    "app": {"appId": "app-1", "servicePrincipalId": "sp-1"},
                    "user": None,
                },
                additionalDetails=[
                    {"key": "Method", "value": '"SMS", then email'},
                    {"key": "Dropped", "value": "second detail"},
                ],
            ),
            make_directory_audit(
                prefix="c_",
                resultReason=None,
                targetResources=None,
                additionalDetails=[],
            ),
        ]
        mock_clients.audit_logs.list_directory_audits.return_value = (
            OperationResult.success(raw_records)
        )

        run_audit_export(mock_clients, export_settings, now=NOW, formats=("csv",))

        rows = read_csv(
            Path(export_settings.EXPORT_OUTPUT_DIR) / export_settings.AUDIT_CSV_FILENAME
        )
        expected = [
            project_audit_record(AuditRecord.model_validate(raw)) for raw in raw_records
        ]
        assert rows[0] == list(SSPR_AUDIT_HEADER)
        assert rows[1:] == expected
        assert "Doe, Jane\nHelpdesk" in rows[1]
        assert rows[3][SSPR_AUDIT_HEADER.index("resultReason")] == ""

    def test_no_records_still_writes_files(self, mock_clients, export_settings):
        mock_clients.audit_logs.list_directory_audits.return_value = (
            OperationResult.success([])
        )

        summary = run_audit_export(mock_clients, export_settings, now=NOW)

        out = Path(export_settings.EXPORT_OUTPUT_DIR)
        assert read_csv(out / export_settings.AUDIT_CSV_FILENAME) == [
            list(SSPR_AUDIT_HEADER)
        ]
        assert (out / export_settings.AUDIT_JSON_FILENAME).read_text(
            encoding="utf-8"
        ) == "[]\n"
        assert summary.rows_written == 0

    def test_csv_only(self, mock_clients, export_settings):
        mock_clients.audit_logs.list_directory_audits.return_value = (
            OperationResult.success([make_directory_audit()])
        )

        summary = run_audit_export(
            mock_clients, export_settings, now=NOW, formats=("csv",)
        )

        out = Path(export_settings.EXPORT_OUTPUT_DIR)
        assert (out / export_settings.AUDIT_CSV_FILENAME).exists()
        assert not (out / export_settings.AUDIT_JSON_FILENAME).exists()
        assert summary.outputs == [str(out / export_settings.AUDIT_CSV_FILENAME)]

    def test_query_failure_raises_and_writes_nothing(
        self, mock_clients, export_settings
    ):
        mock_clients.audit_logs.list_directory_audits.return_value = (
            OperationResult.permanent_error("denied", error_code="FORBIDDEN")
        )

        with pytest.raises(GraphRequestError) as excinfo:
            run_audit_export(mock_clients, export_settings, now=NOW)

        assert excinfo.value.operation == "list_directory_audits"
        assert not Path(export_settings.EXPORT_OUTPUT_DIR).exists()

    def test_unparseable_record_is_skipped(self, mock_clients, export_settings):
        bad = make_directory_audit(activityDateTime="not a date")
        mock_clients.audit_logs.list_directory_audits.return_value = (
            OperationResult.success([bad, make_directory_audit(prefix="ok_")])
        )

        summary = run_audit_export(mock_clients, export_settings, now=NOW)

        assert summary.rows_written == 1
        assert summary.failed == 1
        assert summary.problems[0].startswith("audit_id1: unparseable record")

    def test_custom_profile(self, mock_clients, export_settings):
        profile = AuditExportProfile(
            name="password_change",
            activity_display_name="Change password (self-service)",
            window_hours=24,
            header=("id",),
            projector=lambda record: [record.id or ""],
            csv_filename="changes.csv",
            json_filename="changes.json",
        )
        mock_clients.audit_logs.list_directory_audits.return_value = (
            OperationResult.success([make_directory_audit()])
        )

        summary = run_audit_export(
            mock_clients, export_settings, now=NOW, profile=profile
        )

        filter_expression = mock_clients.audit_logs.list_directory_audits.call_args[0][0]
        assert "'Change password (self-service)'" in filter_expression
        assert "ge 2025-07-30T00:00:00Z" in filter_expression
        out = Path(export_settings.EXPORT_OUTPUT_DIR)
        assert read_csv(out / "changes.csv") == [["id"], ["audit_id1"]]
        assert summary.profile == "password_change"

    def test_sspr_profile_reads_settings(self, export_settings):
        profile = sspr_profile(export_settings)

        assert profile.activity_display_name == "Reset password (self-service)"
        assert profile.window_hours == 168
        assert profile.header == SSPR_AUDIT_HEADER

    def test_write_failure_propagates(self, mock_clients, export_settings, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x", encoding="utf-8")
        settings = export_settings.model_copy(
            update={"EXPORT_OUTPUT_DIR": str(blocker / "out")}
        )
        mock_clients.audit_logs.list_directory_audits.return_value = (
            OperationResult.success([])
        )

        with pytest.raises(ExportWriteError):
            run_audit_export(mock_clients, settings, now=NOW)


@pytest.mark.unit
class TestRunRoleExport:
    def _role_csv(self, export_settings):
        return read_csv(
            Path(export_settings.EXPORT_OUTPUT_DIR) / export_settings.ROLE_CSV_FILENAME
        )

    def test_enriches_each_assignment(
        self, mock_clients, mock_directory, export_settings, not_found
    ):
        mock_directory.list_role_assignments.return_value = OperationResult.success(
            [
                make_role_assignment(),
                make_role_assignment(
                    assignment_id="assignment_id2",
                    principal_id="sp_id1",
                    odata_type="#microsoft.graph.servicePrincipal",
                ),
            ]
        )
        mock_directory.get_role_definition.return_value = OperationResult.success(
            make_role_definition()
        )
        mock_directory.get_user.side_effect = lambda principal_id: (
            OperationResult.success(make_graph_user())
            if principal_id == "principal_id1"
            else not_found
        )
        mock_directory.get_service_principal.return_value = OperationResult.success(
            make_service_principal(sp_id="sp_id1")
        )

        summary = run_role_export(mock_clients, export_settings)

        mock_directory.list_role_assignments.assert_called_once_with(expand="principal")
        assert self._role_csv(export_settings) == [
            list(ROLE_ASSIGNMENT_HEADER),
            ["Global Administrator", "Jane Doe", "jane@test.com", "User"],
            ["Global Administrator", "Backup App", "", "Enterprise Application"],
        ]
        assert summary.rows_written == 2
        assert summary.is_clean

    def test_unresolved_principal_keeps_row(
        self, mock_clients, mock_directory, export_settings, not_found
    ):
        mock_directory.list_role_assignments.return_value = OperationResult.success(
            [make_role_assignment()]
        )
        mock_directory.get_role_definition.return_value = OperationResult.success(
            make_role_definition()
        )
        mock_directory.get_user.return_value = not_found
        mock_directory.get_service_principal.return_value = not_found

        summary = run_role_export(mock_clients, export_settings)

        assert self._role_csv(export_settings)[1] == [
            "Global Administrator",
            "",
            "",
            "User",
        ]
        assert summary.degraded == 1
        assert summary.rows_written == 1

    def test_no_assignments_writes_header_only(
        self, mock_clients, mock_directory, export_settings
    ):
        mock_directory.list_role_assignments.return_value = OperationResult.success([])

        summary = run_role_export(mock_clients, export_settings)

        assert self._role_csv(export_settings) == [list(ROLE_ASSIGNMENT_HEADER)]
        assert summary.rows_written == 0

    def test_listing_failure_raises(self, mock_clients, mock_directory, export_settings):
        mock_directory.list_role_assignments.return_value = (
            OperationResult.transient_error("timed out", error_code="TIMEOUT")
        )

        with pytest.raises(GraphRequestError, match="list_role_assignments"):
            run_role_export(mock_clients, export_settings)

    def test_lookup_transport_error_is_fatal(
        self, mock_clients, mock_directory, export_settings
    ):
        mock_directory.list_role_assignments.return_value = OperationResult.success(
            [make_role_assignment()]
        )
        mock_directory.get_user.return_value = OperationResult.transient_error(
            "Connection error", error_code="CONNECTION_ERROR"
        )

        with pytest.raises(GraphRequestError):
            run_role_export(mock_clients, export_settings)

        assert not Path(export_settings.EXPORT_OUTPUT_DIR).exists()
