"""Audit export feature settings."""

from pydantic import Field, field_validator

from infrastructure.configuration.base import FeatureSettings


class AuditExportSettings(FeatureSettings):
    """Settings for the SSPR audit and role-assignment exports.

    Environment Variables:
        AUDIT_ACTIVITY_DISPLAY_NAME: Activity the audit query filters on
        AUDIT_WINDOW_HOURS: Length of the trailing query window
        EXPORT_OUTPUT_DIR: Directory the export files are written to
        AUDIT_CSV_FILENAME / AUDIT_JSON_FILENAME: Audit export file names
        ROLE_CSV_FILENAME: Role-assignment export file name
    """

    AUDIT_ACTIVITY_DISPLAY_NAME: str = Field(
        default="Reset password (self-service)",
        alias="AUDIT_ACTIVITY_DISPLAY_NAME",
    )
    AUDIT_WINDOW_HOURS: int = Field(default=168, alias="AUDIT_WINDOW_HOURS")
    EXPORT_OUTPUT_DIR: str = Field(default=".", alias="EXPORT_OUTPUT_DIR")
    AUDIT_CSV_FILENAME: str = Field(
        default="sspr_audit_logs.csv", alias="AUDIT_CSV_FILENAME"
    )
    AUDIT_JSON_FILENAME: str = Field(
        default="sspr_audit_logs.json", alias="AUDIT_JSON_FILENAME"
    )
    ROLE_CSV_FILENAME: str = Field(
        default="role_assignment_logs.csv", alias="ROLE_CSV_FILENAME"
    )

    @field_validator("AUDIT_WINDOW_HOURS")
    @classmethod
    def _positive_window(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("AUDIT_WINDOW_HOURS must be a positive number of hours")
        return v
