"""SSPR audit-log and role-assignment export.

Public API:
    run_audit_export, run_role_export: the two export pipelines
    build_sspr_filter: OData filter for the trailing SSPR window
    project_audit_record, SSPR_AUDIT_HEADER: audit row projection
    RoleEnrichmentJoiner, ROLE_ASSIGNMENT_HEADER: role row enrichment
    write_csv, write_json: file writers
"""

from modules.audit_export.enrichment import (
    ROLE_ASSIGNMENT_HEADER,
    IdentityResolver,
    RoleEnrichmentJoiner,
    map_principal_type,
)
from modules.audit_export.errors import (
    AuditExportError,
    ConfigurationError,
    ExportWriteError,
)
from modules.audit_export.exporter import write_csv, write_json
from modules.audit_export.filters import build_audit_window, build_sspr_filter
from modules.audit_export.models import RunSummary
from modules.audit_export.pipeline import (
    AuditExportProfile,
    run_audit_export,
    run_role_export,
    sspr_profile,
)
from modules.audit_export.projection import SSPR_AUDIT_HEADER, project_audit_record

__all__ = [
    "AuditExportError",
    "AuditExportProfile",
    "ConfigurationError",
    "ExportWriteError",
    "IdentityResolver",
    "ROLE_ASSIGNMENT_HEADER",
    "RoleEnrichmentJoiner",
    "RunSummary",
    "SSPR_AUDIT_HEADER",
    "build_audit_window",
    "build_sspr_filter",
    "map_principal_type",
    "project_audit_record",
    "run_audit_export",
    "run_role_export",
    "sspr_profile",
    "write_csv",
    "write_json",
]
