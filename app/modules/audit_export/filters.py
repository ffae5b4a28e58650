"""OData filter construction for the audit-log query.

The window always runs forwards in time: ``ge`` takes the older bound and
``le`` the newer one. Both bounds are truncated to UTC midnight and the
window is recomputed from the clock on every call.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

SSPR_ACTIVITY_DISPLAY_NAME = "Reset password (self-service)"
DEFAULT_WINDOW_HOURS = 7 * 24
FILTER_TIMESTAMP_FORMAT = "%Y-%m-%dT00:00:00Z"


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _utc_midnight(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def format_filter_timestamp(moment: datetime) -> str:
    """Render a UTC instant as ``YYYY-MM-DDT00:00:00Z``."""
    return _as_utc(moment).strftime(FILTER_TIMESTAMP_FORMAT)


def quote_odata_string(value: str) -> str:
    """Quote a string literal for an OData expression."""
    return "'" + value.replace("'", "''") + "'"


@dataclass(frozen=True)
class AuditWindow:
    """Closed time window ``[start, end]`` in UTC."""

    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(
                f"audit window start {self.start.isoformat()} is after end {self.end.isoformat()}"
            )

    def to_filter_clause(self, field_name: str = "activityDateTime") -> str:
        return (
            f"{field_name} ge {format_filter_timestamp(self.start)}"
            f" and {field_name} le {format_filter_timestamp(self.end)}"
        )


def build_audit_window(
    now: Optional[datetime] = None,
    window_hours: int = DEFAULT_WINDOW_HOURS,
) -> AuditWindow:
    """Build the trailing window ending at ``now``.

    Args:
        now: Reference instant; the current UTC time when None. Naive values
            are taken to be UTC.
        window_hours: Window length before truncation

    Returns:
        AuditWindow whose bounds are both UTC midnights
    """
    if window_hours <= 0:
        raise ValueError("window_hours must be positive")
    current = _as_utc(now) if now is not None else datetime.now(timezone.utc)
    lower = current - timedelta(hours=window_hours)
    return AuditWindow(start=_utc_midnight(lower), end=_utc_midnight(current))


def build_activity_filter(
    activity_display_name: str,
    window: AuditWindow,
) -> str:
    """Combine the activity predicate and the window bounds with ``and``."""
    return (
        f"activityDisplayName eq {quote_odata_string(activity_display_name)}"
        f" and {window.to_filter_clause()}"
    )


def build_sspr_filter(
    now: Optional[datetime] = None,
    activity_display_name: str = SSPR_ACTIVITY_DISPLAY_NAME,
    window_hours: int = DEFAULT_WINDOW_HOURS,
) -> str:
    """Build the self-service password reset audit filter.

    Example:
        >>> build_sspr_filter(datetime(2025, 7, 30, 15, 4, tzinfo=timezone.utc))
        "activityDisplayName eq 'Reset password (self-service)' and activityDateTime ge 2025-07-23T00:00:00Z and activityDateTime le 2025-07-30T00:00:00Z"
    """
    window = build_audit_window(now=now, window_hours=window_hours)
    return build_activity_filter(activity_display_name, window)
