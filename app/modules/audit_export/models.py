"""Models for audit records, role assignments and export outcomes.

Graph payloads are parsed into frozen pydantic models. Field names follow
Python conventions; the camelCase Graph names are accepted as aliases.
Unknown fields are ignored and JSON ``null`` is accepted wherever Graph may
send it.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Graph emits up to seven fractional digits; datetime holds six
_EXCESS_FRACTION = re.compile(r"(\.\d{6})\d+")


class GraphModel(BaseModel):
    """Base for models parsed from Microsoft Graph JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class UserIdentity(GraphModel):
    id: Optional[str] = None
    display_name: Optional[str] = None
    user_principal_name: Optional[str] = None
    ip_address: Optional[str] = None


class AppIdentity(GraphModel):
    app_id: Optional[str] = None
    display_name: Optional[str] = None
    service_principal_id: Optional[str] = None
    service_principal_name: Optional[str] = None


class InitiatedBy(GraphModel):
    """Who started the audited activity: a user or an application."""

    user: Optional[UserIdentity] = None
    app: Optional[AppIdentity] = None

    @property
    def kind(self) -> str:
        if self.user is not None:
            return "user"
        if self.app is not None:
            return "app"
        return ""


class TargetResource(GraphModel):
    id: Optional[str] = None
    display_name: Optional[str] = None
    type: Optional[str] = None
    user_principal_name: Optional[str] = None


class KeyValue(GraphModel):
    key: Optional[str] = None
    value: Optional[str] = None


class AuditRecord(GraphModel):
    """One directory audit event (``directoryAudit`` resource)."""

    id: Optional[str] = None
    activity_display_name: Optional[str] = None
    activity_date_time: Optional[datetime] = None
    correlation_id: Optional[str] = None
    logged_by_service: Optional[str] = None
    category: Optional[str] = None
    operation_type: Optional[str] = None
    result: Optional[str] = None
    result_reason: Optional[str] = None
    initiated_by: Optional[InitiatedBy] = None
    target_resources: list[TargetResource] = Field(default_factory=list)
    additional_details: list[KeyValue] = Field(default_factory=list)

    @field_validator("activity_date_time", mode="before")
    @classmethod
    def _trim_fraction(cls, v: Any) -> Any:
        if isinstance(v, str):
            return _EXCESS_FRACTION.sub(r"\1", v)
        return v

    @field_validator("target_resources", "additional_details", mode="before")
    @classmethod
    def _null_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class DirectoryPrincipal(GraphModel):
    """Principal embedded in a role assignment via ``$expand=principal``."""

    id: Optional[str] = None
    odata_type: Optional[str] = Field(default=None, alias="@odata.type")
    display_name: Optional[str] = None


class RoleAssignment(GraphModel):
    """A ``unifiedRoleAssignment``: a principal holding a role definition."""

    id: Optional[str] = None
    principal_id: Optional[str] = None
    role_definition_id: Optional[str] = None
    directory_scope_id: Optional[str] = None
    principal: Optional[DirectoryPrincipal] = None

    @property
    def resolved_principal_id(self) -> str:
        """Principal id, preferring the expanded principal object."""
        if self.principal is not None and self.principal.id:
            return self.principal.id
        return self.principal_id or ""


class IdentityKind(str, Enum):
    USER = "User"
    ENTERPRISE_APPLICATION = "Enterprise Application"
    UNKNOWN = "Unknown"


class ResolvedIdentity(BaseModel):
    """Display name and email resolved for a principal id."""

    model_config = ConfigDict(frozen=True)

    display_name: str = ""
    email: str = ""
    kind: IdentityKind = IdentityKind.UNKNOWN


class RowStatus(str, Enum):
    """Outcome of producing one export row.

    SUCCESS: every lookup resolved
    DEGRADED: some lookup missed; the row has empty fields in its place
    FAILED: nothing could be resolved; the row is written but mostly empty
    """

    SUCCESS = "success"
    DEGRADED = "degraded"
    FAILED = "failed"


@dataclass
class RowOutcome:
    """One export row together with how it was produced."""

    row: list[str]
    status: RowStatus = RowStatus.SUCCESS
    subject: str = ""
    identity: Optional[ResolvedIdentity] = None
    problems: list[str] = field(default_factory=list)


@dataclass
class RunSummary:
    """Aggregated result of one export pipeline run."""

    profile: str
    rows_written: int = 0
    outputs: list[str] = field(default_factory=list)
    status_counts: dict[str, int] = field(
        default_factory=lambda: {status.value: 0 for status in RowStatus}
    )
    problems: list[str] = field(default_factory=list)

    def record(self, outcome: RowOutcome) -> None:
        self.status_counts[outcome.status.value] += 1
        for problem in outcome.problems:
            prefix = f"{outcome.subject}: " if outcome.subject else ""
            self.problems.append(f"{prefix}{problem}")

    @property
    def degraded(self) -> int:
        return self.status_counts[RowStatus.DEGRADED.value]

    @property
    def failed(self) -> int:
        return self.status_counts[RowStatus.FAILED.value]

    @property
    def is_clean(self) -> bool:
        return not self.degraded and not self.failed
