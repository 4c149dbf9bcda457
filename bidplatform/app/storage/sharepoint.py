"""SharePoint document-library client over Microsoft Graph.

Every operation acquires a fresh bearer token, rejects malformed tokens
before touching the network, and makes exactly one HTTP attempt.
"""

import json
import logging
from typing import Any

import httpx

from bidplatform.app.config import Settings
from bidplatform.app.errors import InvalidCredential, StoreOperationFailed
from bidplatform.app.storage.credentials import TokenProvider, is_valid_jwt
from bidplatform.app.utils.metrics import metrics

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    ".json": "application/json",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


def content_type_for(filename: str) -> str:
    """Pick an upload Content-Type from the file extension."""
    for extension, content_type in CONTENT_TYPES.items():
        if filename.lower().endswith(extension):
            return content_type
    return "application/octet-stream"


class SharePointClient:
    """Folder/file operations under a fixed root folder of a site drive."""

    def __init__(
        self,
        site_id: str,
        token_provider: TokenProvider,
        root_folder: str = "SharePointTest",
        base_url: str = "https://graph.microsoft.com/v1.0",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize SharePoint client.

        Args:
            site_id: Graph site id hosting the drive
            token_provider: Source of bearer tokens
            root_folder: Folder under the drive root that holds all documents
            base_url: Graph API base URL
            client: Optional httpx client (for testing with mocks)
        """
        self.site_id = site_id
        self.token_provider = token_provider
        self.root_folder = root_folder
        self.base_url = base_url.rstrip("/")
        self._client = client

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        token_provider: TokenProvider,
        client: httpx.AsyncClient | None = None,
    ) -> "SharePointClient":
        return cls(
            site_id=settings.sharepoint_site_id,
            token_provider=token_provider,
            root_folder=settings.sharepoint_root_folder,
            base_url=settings.graph_base_url,
            client=client,
        )

    @property
    def drive_root(self) -> str:
        return f"{self.base_url}/sites/{self.site_id}/drive/root:/{self.root_folder}"

    async def create_folder(self, folder_name: str) -> dict[str, Any]:
        """Create a folder under the root folder; Graph renames on collision.

        Returns:
            The created driveItem
        """
        response = await self._request(
            "create_folder",
            "POST",
            f"{self.drive_root}:/children",
            json={
                "name": folder_name,
                "folder": {},
                "@microsoft.graph.conflictBehavior": "rename",
            },
            headers={"Content-Type": "application/json"},
        )
        item: dict[str, Any] = response.json()
        if item.get("name") not in (None, folder_name):
            logger.warning("Folder %s was created as %s", folder_name, item.get("name"))
        logger.info("Folder created successfully in SharePoint: %s", folder_name)
        return item

    async def upload_file(
        self, folder_name: str, file_name: str, content: str | bytes
    ) -> dict[str, Any]:
        """Upload (or overwrite) ``folder_name/file_name``."""
        response = await self._request(
            "upload_file",
            "PUT",
            f"{self.drive_root}/{folder_name}/{file_name}:/content",
            content=content.encode("utf-8") if isinstance(content, str) else content,
            headers={"Content-Type": content_type_for(file_name)},
        )
        logger.info("File uploaded successfully to SharePoint: %s/%s", folder_name, file_name)
        return dict(response.json())

    async def update_file(self, file_path: str, content: str | bytes) -> None:
        """Overwrite an existing file addressed by its path under the root folder."""
        await self._request(
            "update_file",
            "PUT",
            f"{self.drive_root}/{file_path}:/content",
            content=content.encode("utf-8") if isinstance(content, str) else content,
            headers={"Content-Type": content_type_for(file_path)},
        )
        logger.info("File %s updated successfully in SharePoint", file_path)

    async def list_children(self) -> list[dict[str, Any]]:
        """List files and folders directly under the root folder."""
        response = await self._request("list_children", "GET", f"{self.drive_root}:/children")
        return list(response.json().get("value", []))

    async def delete_item(self, item_path: str) -> None:
        """Delete a file or folder addressed by its path under the root folder."""
        await self._request("delete_item", "DELETE", f"{self.drive_root}/{item_path}")
        logger.info("Item %s deleted successfully from SharePoint", item_path)

    async def get_json_file(self, folder_name: str, file_name: str) -> Any:
        """Download a file and decode it as JSON.

        Raises:
            StoreOperationFailed: On HTTP failure or if the body is not JSON
        """
        response = await self._request(
            "get_file",
            "GET",
            f"{self.drive_root}/{folder_name}/{file_name}:/content",
        )
        try:
            return json.loads(response.content)
        except ValueError as e:
            raise StoreOperationFailed("get_file", detail="Invalid JSON content") from e

    async def _authorization(self) -> dict[str, str]:
        token = await self.token_provider.get_token()
        if not is_valid_jwt(token):
            raise InvalidCredential("Invalid access token format")
        return {"Authorization": f"Bearer {token}"}

    async def _request(
        self,
        operation: str,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Authorize and send a single request, wrapping failures.

        Raises:
            InvalidCredential: If the token is malformed (no request is sent)
            StoreOperationFailed: On non-2xx status or transport error
        """
        try:
            request_headers = await self._authorization()
        except InvalidCredential:
            metrics.inc_store_operation(operation, "invalid_credential")
            raise
        request_headers.update(headers or {})

        close_client = False
        client = self._client
        if client is None:
            client = httpx.AsyncClient(timeout=30.0)
            close_client = True

        try:
            response = await client.request(method, url, headers=request_headers, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            metrics.inc_store_operation(operation, "error")
            logger.error(
                "SharePoint %s failed with %s: %s",
                operation,
                e.response.status_code,
                e.response.text,
            )
            raise StoreOperationFailed(
                operation, status_code=e.response.status_code, detail=e.response.text
            ) from e
        except httpx.HTTPError as e:
            metrics.inc_store_operation(operation, "error")
            logger.error("SharePoint %s failed: %s", operation, e)
            raise StoreOperationFailed(operation, detail=str(e)) from e
        finally:
            if close_client:
                await client.aclose()

        metrics.inc_store_operation(operation, "success")
        return response
