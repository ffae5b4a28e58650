"""Role assignment enrichment.

Joins each role assignment with the identity of its principal and the
display name of its role definition. Lookups run one at a time and are not
cached. A lookup that comes back NOT_FOUND degrades that one row; any other
failure stops the run with GraphRequestError.
"""

from typing import Optional, Protocol

import structlog

from infrastructure.clients.graph.errors import GraphRequestError
from infrastructure.operations.result import OperationResult
from modules.audit_export.models import (
    IdentityKind,
    ResolvedIdentity,
    RoleAssignment,
    RowOutcome,
    RowStatus,
)

logger = structlog.get_logger()

ROLE_ASSIGNMENT_HEADER: tuple[str, ...] = (
    "roleName",
    "principalName",
    "principalEmail",
    "principalType",
)


class DirectoryLookups(Protocol):
    def get_user(self, user_id: str) -> OperationResult: ...

    def get_service_principal(self, service_principal_id: str) -> OperationResult: ...

    def get_role_definition(self, role_definition_id: str) -> OperationResult: ...


def map_principal_type(odata_type: Optional[str]) -> str:
    """Map a principal ``@odata.type`` to its display label.

    ``#microsoft.graph.servicePrincipal`` gives "Enterprise Application",
    ``#microsoft.graph.user`` gives "User"; anything else gives "".
    """
    if not odata_type or not odata_type.startswith("#"):
        return ""
    type_name = odata_type.rsplit(".", 1)[-1].lower()
    if type_name == "serviceprincipal":
        return IdentityKind.ENTERPRISE_APPLICATION.value
    if type_name == "user":
        return IdentityKind.USER.value
    return ""


class IdentityResolver:
    """Resolve a principal id to a display name and email.

    The id is tried as a user first and, on a miss, as a service principal.
    """

    def __init__(self, directory: DirectoryLookups) -> None:
        self._directory = directory
        self._logger = logger.bind(component="identity_resolver")

    def resolve(self, principal_id: Optional[str]) -> ResolvedIdentity:
        if not principal_id:
            return ResolvedIdentity()

        log = self._logger.bind(principal_id=principal_id)

        user = self._directory.get_user(principal_id)
        if user.is_success:
            data = user.data or {}
            return ResolvedIdentity(
                display_name=data.get("displayName") or "",
                email=data.get("mail") or "",
                kind=IdentityKind.USER,
            )
        if not user.is_not_found:
            raise GraphRequestError("get_user", user, principal_id)

        log.debug("principal_not_a_user")
        service_principal = self._directory.get_service_principal(principal_id)
        if service_principal.is_success:
            data = service_principal.data or {}
            return ResolvedIdentity(
                display_name=data.get("displayName") or "",
                email="",
                kind=IdentityKind.ENTERPRISE_APPLICATION,
            )
        if not service_principal.is_not_found:
            raise GraphRequestError(
                "get_service_principal", service_principal, principal_id
            )

        log.warning("principal_unresolved")
        return ResolvedIdentity()


class RoleEnrichmentJoiner:
    """Turn role assignments into ``ROLE_ASSIGNMENT_HEADER`` rows.

    Args:
        directory: client providing user, service principal and role
            definition lookups
        resolver: identity resolver (built from ``directory`` if None)
    """

    def __init__(
        self,
        directory: DirectoryLookups,
        resolver: Optional[IdentityResolver] = None,
    ) -> None:
        self._directory = directory
        self._resolver = resolver or IdentityResolver(directory)
        self._logger = logger.bind(component="role_enrichment")

    def resolve_role_name(self, role_definition_id: Optional[str]) -> Optional[str]:
        """Return the role display name, or None when it cannot be found."""
        if not role_definition_id:
            return None
        result = self._directory.get_role_definition(role_definition_id)
        if result.is_success:
            return (result.data or {}).get("displayName") or ""
        if result.is_not_found:
            return None
        raise GraphRequestError("get_role_definition", result, role_definition_id)

    def enrich(self, assignment: RoleAssignment) -> RowOutcome:
        principal_id = assignment.resolved_principal_id
        log = self._logger.bind(
            assignment_id=assignment.id,
            principal_id=principal_id,
            role_definition_id=assignment.role_definition_id,
        )
        problems: list[str] = []

        identity = self._resolver.resolve(principal_id)
        if not principal_id:
            problems.append("assignment has no principal id")
        elif identity.kind is IdentityKind.UNKNOWN:
            problems.append(
                f"principal {principal_id} is neither a user nor a service principal"
            )

        odata_type = assignment.principal.odata_type if assignment.principal else None
        principal_type = map_principal_type(odata_type)
        if (
            principal_type
            and identity.kind is not IdentityKind.UNKNOWN
            and principal_type != identity.kind.value
        ):
            log.warning(
                "principal_type_mismatch",
                reported_type=principal_type,
                resolved_kind=identity.kind.value,
            )

        role_name = self.resolve_role_name(assignment.role_definition_id)
        if role_name is None:
            if assignment.role_definition_id:
                problems.append(
                    f"role definition {assignment.role_definition_id} not found"
                )
            else:
                problems.append("assignment has no role definition id")

        if not problems:
            status = RowStatus.SUCCESS
        elif role_name is None and identity.kind is IdentityKind.UNKNOWN:
            status = RowStatus.FAILED
        else:
            status = RowStatus.DEGRADED

        if status is not RowStatus.SUCCESS:
            log.warning("role_row_degraded", status=status.value, problems=problems)

        return RowOutcome(
            row=[
                role_name or "",
                identity.display_name,
                identity.email,
                principal_type,
            ],
            status=status,
            subject=assignment.id or principal_id,
            identity=identity,
            problems=problems,
        )
