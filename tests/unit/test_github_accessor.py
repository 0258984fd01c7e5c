"""Unit tests for the GitHub contents API accessor."""

from __future__ import annotations

import httpx
import pytest

from templatecheck.accessor import GitHubRepositoryAccessor
from templatecheck.config import GitHubConfig
from templatecheck.exceptions import AccessorError, EntryNotFoundError
from templatecheck.schema.models import EntryKind


def _accessor(handler, token: str = "") -> GitHubRepositoryAccessor:
    config = GitHubConfig(api_url="https://api.github.test", token=token)
    return GitHubRepositoryAccessor("acme", "folio", config=config, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_list_entries_maps_contents_payload() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json=[
                {"name": ".nebula", "path": ".nebula", "type": "dir", "sha": "abc"},
                {"name": "README.md", "path": "README.md", "type": "file", "size": 12, "sha": "def"},
            ],
        )

    entries = await _accessor(handler, token="secret").list_entries("", "main")
    assert [(entry.path, entry.kind, entry.size) for entry in entries] == [
        (".nebula", EntryKind.DIRECTORY, None),
        ("README.md", EntryKind.FILE, 12),
    ]
    assert entries[1].revision_id == "def"
    request = seen[0]
    assert request.url.path == "/repos/acme/folio/contents/"
    assert request.url.params["ref"] == "main"
    assert request.headers["Authorization"] == "Bearer secret"
    assert request.headers["Accept"] == "application/vnd.github+json"


@pytest.mark.asyncio
async def test_read_file_requests_raw_media_type() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/repos/acme/folio/contents/.nebula/config.json"
        assert request.headers["Accept"] == "application/vnd.github.raw"
        assert "Authorization" not in request.headers
        return httpx.Response(200, text='{"version": "1.0.0"}')

    assert await _accessor(handler).read_file(".nebula/config.json") == '{"version": "1.0.0"}'


@pytest.mark.asyncio
async def test_not_found_and_file_listing_map_to_entry_not_found() -> None:
    def missing(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"message": "Not Found"})

    with pytest.raises(EntryNotFoundError):
        await _accessor(missing).read_file("data.json")

    def file_payload(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"name": "data.json", "type": "file"})

    with pytest.raises(EntryNotFoundError):
        await _accessor(file_payload).list_entries("data.json")


@pytest.mark.asyncio
@pytest.mark.parametrize(("status", "retryable"), [(401, False), (403, True), (429, True), (503, True)])
async def test_http_errors_map_to_accessor_error(status: int, retryable: bool) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status)

    with pytest.raises(AccessorError) as exc_info:
        await _accessor(handler).list_entries()
    assert exc_info.value.retryable is retryable


@pytest.mark.asyncio
async def test_transport_failure_is_retryable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(AccessorError) as exc_info:
        await _accessor(handler).read_file("README.md")
    assert exc_info.value.retryable


@pytest.mark.asyncio
async def test_malformed_listing_is_accessor_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{"type": "file"}])

    with pytest.raises(AccessorError):
        await _accessor(handler).list_entries()


def test_from_slug() -> None:
    accessor = GitHubRepositoryAccessor.from_slug("acme/folio")
    assert (accessor.owner, accessor.repo) == ("acme", "folio")
    with pytest.raises(ValueError):
        GitHubRepositoryAccessor.from_slug("acme")
    with pytest.raises(ValueError):
        GitHubRepositoryAccessor.from_slug("acme/folio/extra")
