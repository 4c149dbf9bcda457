"""Bearer token acquisition for Microsoft Graph (client-credentials grant)."""

import logging
from typing import Protocol

import httpx

from bidplatform.app.config import Settings
from bidplatform.app.errors import StoreOperationFailed

logger = logging.getLogger(__name__)

GRAPH_SCOPE = "https://graph.microsoft.com/.default"


class TokenProvider(Protocol):
    """Source of bearer tokens for the remote store."""

    async def get_token(self) -> str:
        """Return a bearer token string (shape is validated by callers)."""
        ...


def is_valid_jwt(token: str | None) -> bool:
    """Check a token has the three dot-separated segments of a JWT."""
    return bool(token) and len(token.split(".")) == 3  # type: ignore[union-attr]


class ClientCredentialsTokenProvider:
    """Fetch app-only Graph tokens from Azure AD."""

    def __init__(
        self,
        tenant_id: str,
        client_id: str,
        client_secret: str,
        authority_url: str = "https://login.microsoftonline.com",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.tenant_id = tenant_id
        self.client_id = client_id
        self.client_secret = client_secret
        self.authority_url = authority_url.rstrip("/")
        self._client = client

    @classmethod
    def from_settings(
        cls, settings: Settings, client: httpx.AsyncClient | None = None
    ) -> "ClientCredentialsTokenProvider":
        return cls(
            tenant_id=settings.sharepoint_tenant_id,
            client_id=settings.sharepoint_client_id,
            client_secret=settings.sharepoint_client_secret.get_secret_value(),
            authority_url=settings.azure_authority_url,
            client=client,
        )

    async def get_token(self) -> str:
        """Request an access token.

        Raises:
            StoreOperationFailed: If Azure AD rejects the request or is unreachable
        """
        url = f"{self.authority_url}/{self.tenant_id}/oauth2/v2.0/token"
        data = {
            "grant_type": "client_credentials",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "scope": GRAPH_SCOPE,
        }

        close_client = False
        client = self._client
        if client is None:
            client = httpx.AsyncClient(timeout=10.0)
            close_client = True

        try:
            response = await client.post(url, data=data)
            response.raise_for_status()
            return str(response.json().get("access_token", ""))
        except httpx.HTTPStatusError as e:
            logger.error("Token request rejected: %s", e.response.text)
            raise StoreOperationFailed(
                "acquire_token", status_code=e.response.status_code, detail=e.response.text
            ) from e
        except httpx.HTTPError as e:
            logger.error("Token request failed: %s", e)
            raise StoreOperationFailed("acquire_token", detail=str(e)) from e
        finally:
            if close_client:
                await client.aclose()
