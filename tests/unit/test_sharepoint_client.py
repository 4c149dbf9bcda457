"""Tests for the SharePoint store client (mocked Graph transport)."""

import json
from collections.abc import Callable

import httpx
import pytest

from bidplatform.app.errors import InvalidCredential, StoreOperationFailed
from bidplatform.app.storage.sharepoint import SharePointClient, content_type_for

VALID_TOKEN = "header.payload.signature"
DRIVE_ROOT = "https://graph.microsoft.com/v1.0/sites/site-1/drive/root:/SharePointTest"


class StaticTokenProvider:
    def __init__(self, token: str) -> None:
        self.token = token
        self.calls = 0

    async def get_token(self) -> str:
        self.calls += 1
        return self.token


def _client(
    handler: Callable[[httpx.Request], httpx.Response],
    token: str = VALID_TOKEN,
) -> tuple[SharePointClient, list[httpx.Request]]:
    requests: list[httpx.Request] = []

    def recording_handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(recording_handler))
    client = SharePointClient(
        site_id="site-1",
        token_provider=StaticTokenProvider(token),
        client=http_client,
    )
    return client, requests


@pytest.mark.asyncio
async def test_create_folder_posts_rename_conflict_behavior() -> None:
    client, requests = _client(lambda request: httpx.Response(201, json={"name": "doc-1", "folder": {}}))

    item = await client.create_folder("doc-1")

    assert item["name"] == "doc-1"
    assert len(requests) == 1
    request = requests[0]
    assert request.method == "POST"
    assert str(request.url) == f"{DRIVE_ROOT}:/children"
    assert request.headers["Authorization"] == f"Bearer {VALID_TOKEN}"
    assert json.loads(request.content) == {
        "name": "doc-1",
        "folder": {},
        "@microsoft.graph.conflictBehavior": "rename",
    }


@pytest.mark.asyncio
async def test_upload_file_puts_content_with_type_from_extension() -> None:
    client, requests = _client(lambda request: httpx.Response(201, json={"name": "version-1.json"}))

    await client.upload_file("doc-1", "version-1.json", '{"content": {}}')

    request = requests[0]
    assert request.method == "PUT"
    assert str(request.url) == f"{DRIVE_ROOT}/doc-1/version-1.json:/content"
    assert request.headers["Content-Type"] == "application/json"
    assert request.content == b'{"content": {}}'


@pytest.mark.asyncio
async def test_upload_binary_docx() -> None:
    client, requests = _client(lambda request: httpx.Response(200, json={"name": "version-1.docx"}))

    await client.upload_file("doc-1", "version-1.docx", b"PK\x03\x04")

    assert requests[0].content == b"PK\x03\x04"
    assert requests[0].headers["Content-Type"].endswith("wordprocessingml.document")


@pytest.mark.asyncio
async def test_malformed_token_sends_no_request() -> None:
    client, requests = _client(lambda request: httpx.Response(201, json={}), token="not-a-jwt")

    with pytest.raises(InvalidCredential):
        await client.create_folder("doc-1")

    assert requests == []


@pytest.mark.asyncio
async def test_empty_token_sends_no_request() -> None:
    client, requests = _client(lambda request: httpx.Response(201, json={}), token="")

    with pytest.raises(InvalidCredential):
        await client.upload_file("doc-1", "version-1.json", "{}")

    assert requests == []


@pytest.mark.asyncio
async def test_non_2xx_raises_store_operation_failed_after_one_attempt() -> None:
    client, requests = _client(lambda request: httpx.Response(409, json={"error": {"code": "nameAlreadyExists"}}))

    with pytest.raises(StoreOperationFailed) as exc_info:
        await client.create_folder("doc-1")

    assert exc_info.value.operation == "create_folder"
    assert exc_info.value.status_code == 409
    assert "nameAlreadyExists" in str(exc_info.value.detail)
    assert len(requests) == 1


@pytest.mark.asyncio
async def test_transport_error_raises_store_operation_failed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client, _ = _client(handler)

    with pytest.raises(StoreOperationFailed) as exc_info:
        await client.list_children()

    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_list_children_returns_value_array() -> None:
    client, requests = _client(
        lambda request: httpx.Response(200, json={"value": [{"name": "a"}, {"name": "b"}]})
    )

    children = await client.list_children()

    assert [child["name"] for child in children] == ["a", "b"]
    assert str(requests[0].url) == f"{DRIVE_ROOT}:/children"


@pytest.mark.asyncio
async def test_update_and_delete_address_items_by_path() -> None:
    client, requests = _client(lambda request: httpx.Response(204))

    await client.update_file("doc-1/version-1.json", "{}")
    await client.delete_item("doc-1")

    assert requests[0].method == "PUT"
    assert str(requests[0].url) == f"{DRIVE_ROOT}/doc-1/version-1.json:/content"
    assert requests[1].method == "DELETE"
    assert str(requests[1].url) == f"{DRIVE_ROOT}/doc-1"


@pytest.mark.asyncio
async def test_get_json_file_decodes_body() -> None:
    client, requests = _client(lambda request: httpx.Response(200, content=b'{"content": {"sections": {}}}'))

    data = await client.get_json_file("doc-1", "version-1.json")

    assert data == {"content": {"sections": {}}}
    assert str(requests[0].url) == f"{DRIVE_ROOT}/doc-1/version-1.json:/content"


@pytest.mark.asyncio
async def test_get_json_file_rejects_invalid_json() -> None:
    client, _ = _client(lambda request: httpx.Response(200, content=b"<html>not json</html>"))

    with pytest.raises(StoreOperationFailed) as exc_info:
        await client.get_json_file("doc-1", "version-1.json")

    assert exc_info.value.operation == "get_file"


@pytest.mark.asyncio
async def test_every_operation_fetches_a_fresh_token() -> None:
    provider = StaticTokenProvider(VALID_TOKEN)
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"value": []}))
    )
    client = SharePointClient(site_id="site-1", token_provider=provider, client=http_client)

    await client.list_children()
    await client.list_children()

    assert provider.calls == 2


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("version-1.json", "application/json"),
        ("VERSION-1.DOCX", "application/vnd.openxmlformats-officedocument.wordprocessingml.document"),
        ("notes.txt", "application/octet-stream"),
    ],
)
def test_content_type_for(filename: str, expected: str) -> None:
    assert content_type_for(filename) == expected
