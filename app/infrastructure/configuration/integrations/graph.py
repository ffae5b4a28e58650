"""Microsoft Graph integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class GraphSettings(IntegrationSettings):
    """Microsoft Graph application (client credentials) settings.

    Environment Variables:
        TENANT_ID: Directory (tenant) ID of the Entra ID tenant
        CLIENT_ID: Application (client) ID of the app registration
        CLIENT_SECRET: Client secret of the app registration
        GRAPH_BASE_URL: Graph API root, including version segment
        GRAPH_SCOPE: Scope requested for the application token
        GRAPH_AUTHORITY_HOST: Identity provider host
        GRAPH_REQUEST_TIMEOUT: Per-request timeout in seconds

    Example:
        ```python
        from infrastructure.configuration import get_settings

        tenant = get_settings().graph.TENANT_ID
        ```
    """

    TENANT_ID: str = Field(default="", alias="TENANT_ID")
    CLIENT_ID: str = Field(default="", alias="CLIENT_ID")
    CLIENT_SECRET: str = Field(default="", alias="CLIENT_SECRET")
    GRAPH_BASE_URL: str = Field(
        default="https://graph.microsoft.com/v1.0", alias="GRAPH_BASE_URL"
    )
    GRAPH_SCOPE: str = Field(
        default="https://graph.microsoft.com/.default", alias="GRAPH_SCOPE"
    )
    GRAPH_AUTHORITY_HOST: str = Field(
        default="https://login.microsoftonline.com", alias="GRAPH_AUTHORITY_HOST"
    )
    GRAPH_REQUEST_TIMEOUT: float = Field(default=30.0, alias="GRAPH_REQUEST_TIMEOUT")

    @property
    def missing_credentials(self) -> list[str]:
        """Names of the credential variables that are not set."""
        return [
            name
            for name in ("TENANT_ID", "CLIENT_ID", "CLIENT_SECRET")
            if not getattr(self, name)
        ]

    @property
    def is_configured(self) -> bool:
        """True when tenant, client id and client secret are all present."""
        return not self.missing_credentials
