"""Export pipelines.

Audit export: filter → directory audit query → projection → CSV/JSON.
Role export: role assignment listing → enrichment → CSV.

Both run synchronously, one request at a time, and return a RunSummary.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional, Protocol, Sequence

import structlog
from pydantic import ValidationError

from infrastructure.clients.graph.audit_logs import AuditLogsClient
from infrastructure.clients.graph.directory import DirectoryClient
from infrastructure.clients.graph.errors import GraphRequestError
from infrastructure.configuration.features.audit_export import AuditExportSettings
from modules.audit_export.enrichment import ROLE_ASSIGNMENT_HEADER, RoleEnrichmentJoiner
from modules.audit_export.exporter import write_csv, write_json
from modules.audit_export.filters import build_activity_filter, build_audit_window
from modules.audit_export.models import (
    AuditRecord,
    RoleAssignment,
    RowOutcome,
    RowStatus,
    RunSummary,
)
from modules.audit_export.projection import SSPR_AUDIT_HEADER, project_audit_record

logger = structlog.get_logger()

FORMAT_CSV = "csv"
FORMAT_JSON = "json"
ALL_FORMATS = (FORMAT_CSV, FORMAT_JSON)


class Clients(Protocol):
    audit_logs: AuditLogsClient
    directory: DirectoryClient


@dataclass(frozen=True)
class AuditExportProfile:
    """One audit export: which activity, which window, which columns, which files."""

    name: str
    activity_display_name: str
    window_hours: int
    header: tuple[str, ...]
    projector: Callable[[AuditRecord], list[str]]
    csv_filename: str
    json_filename: str


def sspr_profile(settings: AuditExportSettings) -> AuditExportProfile:
    return AuditExportProfile(
        name="sspr_audit",
        activity_display_name=settings.AUDIT_ACTIVITY_DISPLAY_NAME,
        window_hours=settings.AUDIT_WINDOW_HOURS,
        header=SSPR_AUDIT_HEADER,
        projector=project_audit_record,
        csv_filename=settings.AUDIT_CSV_FILENAME,
        json_filename=settings.AUDIT_JSON_FILENAME,
    )


def _subject(raw: Any, fallback: str) -> str:
    if isinstance(raw, dict) and raw.get("id"):
        return str(raw["id"])
    return fallback


def _parse(model: Any, raw: Any, summary: RunSummary, subject: str) -> Optional[Any]:
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        logger.warning(
            "record_unparseable", profile=summary.profile, subject=subject, error=str(e)
        )
        summary.record(
            RowOutcome(
                row=[],
                status=RowStatus.FAILED,
                subject=subject,
                problems=[f"unparseable record: {e.error_count()} validation error(s)"],
            )
        )
        return None


def run_audit_export(
    clients: Clients,
    settings: AuditExportSettings,
    now: Optional[datetime] = None,
    formats: Sequence[str] = ALL_FORMATS,
    profile: Optional[AuditExportProfile] = None,
) -> RunSummary:
    """Query audit events for the profile's window and export them.

    Args:
        clients: Graph clients (``audit_logs`` is used)
        settings: export settings (output directory and defaults)
        now: reference time for the window; the clock when None
        formats: any of "csv" and "json"
        profile: audit export profile; SSPR when None

    Returns:
        RunSummary of the run

    Raises:
        GraphRequestError: If the audit query fails
        ExportWriteError: If an output file cannot be written
    """
    profile = profile or sspr_profile(settings)
    summary = RunSummary(profile=profile.name)
    log = logger.bind(profile=profile.name)

    window = build_audit_window(now=now, window_hours=profile.window_hours)
    filter_expression = build_activity_filter(profile.activity_display_name, window)
    log.info(
        "audit_query_started",
        window_start=window.start.isoformat(),
        window_end=window.end.isoformat(),
    )

    result = clients.audit_logs.list_directory_audits(filter_expression)
    if not result.is_success:
        raise GraphRequestError("list_directory_audits", result)

    raw_records = result.data or []
    log.info("audit_records_fetched", count=len(raw_records))
    if not raw_records:
        log.info("no_audit_records_found")

    rows: list[list[str]] = []
    for index, raw in enumerate(raw_records):
        subject = _subject(raw, f"record-{index}")
        record = _parse(AuditRecord, raw, summary, subject)
        if record is None:
            continue
        row = profile.projector(record)
        rows.append(row)
        summary.record(RowOutcome(row=row, subject=subject))

    output_dir = Path(settings.EXPORT_OUTPUT_DIR)
    if FORMAT_CSV in formats:
        path = write_csv(output_dir / profile.csv_filename, profile.header, rows)
        summary.outputs.append(str(path))
    if FORMAT_JSON in formats:
        path = write_json(output_dir / profile.json_filename, profile.header, rows)
        summary.outputs.append(str(path))

    summary.rows_written = len(rows)
    log.info(
        "audit_export_completed",
        rows=summary.rows_written,
        outputs=summary.outputs,
        failed=summary.failed,
    )
    return summary


def run_role_export(
    clients: Clients,
    settings: AuditExportSettings,
    joiner: Optional[RoleEnrichmentJoiner] = None,
) -> RunSummary:
    """List role assignments, resolve names and write the role CSV.

    Raises:
        GraphRequestError: If the listing or a non-NOT_FOUND lookup fails
        ExportWriteError: If the output file cannot be written
    """
    summary = RunSummary(profile="role_assignments")
    log = logger.bind(profile=summary.profile)
    joiner = joiner or RoleEnrichmentJoiner(clients.directory)

    result = clients.directory.list_role_assignments(expand="principal")
    if not result.is_success:
        raise GraphRequestError("list_role_assignments", result)

    raw_assignments = result.data or []
    log.info("role_assignments_fetched", count=len(raw_assignments))

    rows: list[list[str]] = []
    for index, raw in enumerate(raw_assignments):
        subject = _subject(raw, f"assignment-{index}")
        assignment = _parse(RoleAssignment, raw, summary, subject)
        if assignment is None:
            continue
        outcome = joiner.enrich(assignment)
        rows.append(outcome.row)
        summary.record(outcome)

    path = write_csv(
        Path(settings.EXPORT_OUTPUT_DIR) / settings.ROLE_CSV_FILENAME,
        ROLE_ASSIGNMENT_HEADER,
        rows,
    )
    summary.outputs.append(str(path))
    summary.rows_written = len(rows)
    log.info(
        "role_export_completed",
        rows=summary.rows_written,
        degraded=summary.degraded,
        failed=summary.failed,
    )
    return summary
