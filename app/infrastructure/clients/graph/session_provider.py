"""Microsoft Graph session provider for authentication and HTTP access."""

from typing import Any, Callable, Optional

import msal
import requests
import structlog

from infrastructure.clients.graph.errors import AuthenticationError

logger = structlog.get_logger()


class GraphSessionProvider:
    """Manages the application token and HTTP session used for Graph calls.

    Tokens are acquired with the client credentials grant for a single
    ``.default`` scope. msal keeps the token in its in-memory cache, so asking
    for a token before every request only reaches the identity provider when
    the cached one has expired.

    Args:
        tenant_id: Directory (tenant) ID
        client_id: Application (client) ID
        client_secret: Client secret of the app registration
        base_url: Graph root URL including the version segment
        scope: Scope requested for the token
        authority_host: Identity provider host
        timeout: Per-request timeout in seconds
        app_factory: Factory for the msal confidential client (tests inject a mock)
        session: requests session to reuse (a new one is created if None)
    """

    def __init__(
        self,
        tenant_id: str,
        client_id: str,
        client_secret: str,
        base_url: str = "https://graph.microsoft.com/v1.0",
        scope: str = "https://graph.microsoft.com/.default",
        authority_host: str = "https://login.microsoftonline.com",
        timeout: float = 30.0,
        app_factory: Callable[..., Any] = msal.ConfidentialClientApplication,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._tenant_id = tenant_id
        self._client_id = client_id
        self._client_secret = client_secret
        self._base_url = base_url.rstrip("/")
        self._scope = scope
        self._authority = f"{authority_host.rstrip('/')}/{tenant_id}"
        self._timeout = timeout
        self._app_factory = app_factory
        self._app: Optional[Any] = None
        self._session = session or requests.Session()
        self._logger = logger.bind(component="graph_session_provider")

    def _get_app(self) -> Any:
        if self._app is None:
            try:
                self._app = self._app_factory(
                    self._client_id,
                    authority=self._authority,
                    client_credential=self._client_secret,
                )
            except (ValueError, requests.RequestException) as e:
                self._logger.error(
                    "graph_client_app_creation_failed",
                    tenant_id=self._tenant_id,
                    error=str(e),
                )
                raise AuthenticationError(
                    f"Could not create confidential client for tenant {self._tenant_id}: {e}"
                ) from e
        return self._app

    def acquire_token(self) -> str:
        """Return a valid access token for the configured scope.

        Raises:
            AuthenticationError: If the identity provider refuses the request
                or cannot be reached
        """
        try:
            result = self._get_app().acquire_token_for_client(scopes=[self._scope])
        except requests.RequestException as e:
            self._logger.error(
                "graph_token_request_failed",
                tenant_id=self._tenant_id,
                error=str(e),
            )
            raise AuthenticationError(
                f"Could not reach the identity provider for tenant {self._tenant_id}: {e}"
            ) from e
        if not result or "access_token" not in result:
            result = result or {}
            error = result.get("error", "unknown_error")
            description = result.get("error_description", "no token returned")
            self._logger.error(
                "graph_token_acquisition_failed",
                tenant_id=self._tenant_id,
                client_id=self._client_id,
                error=error,
            )
            raise AuthenticationError(f"Token request failed ({error}): {description}")
        return result["access_token"]

    def build_url(self, path: str) -> str:
        """Resolve a path relative to the Graph base URL."""
        return f"{self._base_url}/{path.lstrip('/')}"

    def get(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        """Issue one authenticated GET and return the decoded JSON body.

        Raises:
            AuthenticationError: If no token can be acquired
            requests.RequestException: On transport failure or non-2xx status
        """
        headers = {
            "Authorization": f"Bearer {self.acquire_token()}",
            "Accept": "application/json",
        }
        response = self._session.get(
            self.build_url(path),
            params=params,
            headers=headers,
            timeout=self._timeout,
        )
        response.raise_for_status()
        return response.json()

    def close(self) -> None:
        self._session.close()
