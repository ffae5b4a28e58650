"""Projection of audit records into flat export rows."""

from datetime import datetime, timezone
from typing import Optional

from modules.audit_export.models import AuditRecord

SSPR_AUDIT_HEADER: tuple[str, ...] = (
    "id",
    "activityDateTime",
    "correlationId",
    "loggedByService",
    "category",
    "operationType",
    "activityDisplayName",
    "result",
    "resultReason",
    "initiatedByType",
    "initiatedById",
    "initiatedByUserPrincipalName",
    "targetResourceType",
    "targetResourceDisplayName",
    "targetResourceUserPrincipalName",
    "additionalDetailKey",
    "additionalDetailValue",
)

ACTIVITY_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_activity_timestamp(moment: Optional[datetime]) -> str:
    """Format as ``YYYY-MM-DD HH:MM:SS`` in UTC, or empty if absent."""
    if moment is None:
        return ""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime(ACTIVITY_TIMESTAMP_FORMAT)


def _text(value: Optional[str]) -> str:
    return "" if value is None else str(value)


def _initiator_fields(record: AuditRecord) -> tuple[str, str, str]:
    initiator = record.initiated_by
    if initiator is None:
        return "", "", ""
    if initiator.user is not None:
        user = initiator.user
        return "user", _text(user.id), _text(user.user_principal_name)
    if initiator.app is not None:
        app = initiator.app
        return "app", _text(app.service_principal_id or app.app_id), ""
    return "", "", ""


def project_audit_record(record: AuditRecord) -> list[str]:
    """Map one audit record to a row matching ``SSPR_AUDIT_HEADER``.

    Only the first target resource and the first additional detail are
    kept. Every absent value becomes an empty string.
    """
    initiator_type, initiator_id, initiator_upn = _initiator_fields(record)

    target = record.target_resources[0] if record.target_resources else None
    detail = record.additional_details[0] if record.additional_details else None

    return [
        _text(record.id),
        format_activity_timestamp(record.activity_date_time),
        _text(record.correlation_id),
        _text(record.logged_by_service),
        _text(record.category),
        _text(record.operation_type),
        _text(record.activity_display_name),
        _text(record.result),
        _text(record.result_reason),
        initiator_type,
        initiator_id,
        initiator_upn,
        _text(target.type) if target else "",
        _text(target.display_name) if target else "",
        _text(target.user_principal_name) if target else "",
        _text(detail.key) if detail else "",
        _text(detail.value) if detail else "",
    ]
