"""Accessor backed by the GitHub repository contents API."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from templatecheck.config.models import GitHubConfig
from templatecheck.exceptions import AccessorError, EntryNotFoundError
from templatecheck.schema.models import EntryKind, RepositoryEntry

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = frozenset({403, 429, 500, 502, 503, 504})
RAW_MEDIA_TYPE = "application/vnd.github.raw"
JSON_MEDIA_TYPE = "application/vnd.github+json"


class GitHubRepositoryAccessor:
    """List and read files of ``owner/repo`` at an optional ref.

    Every call opens its own client; no caching or retry happens here.
    Failures are mapped to ``EntryNotFoundError`` (404) or ``AccessorError``.
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        config: GitHubConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not owner or not repo:
            raise ValueError("owner and repo are required")
        self.owner = owner
        self.repo = repo
        self._config = config or GitHubConfig()
        self._transport = transport

    @classmethod
    def from_slug(
        cls,
        slug: str,
        config: GitHubConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> GitHubRepositoryAccessor:
        owner, sep, repo = slug.strip().strip("/").partition("/")
        if not sep or "/" in repo:
            raise ValueError(f"expected OWNER/REPO, got {slug!r}")
        return cls(owner, repo, config=config, transport=transport)

    def _headers(self, media_type: str) -> dict[str, str]:
        headers = {"Accept": media_type, "X-GitHub-Api-Version": "2022-11-28"}
        if self._config.token:
            headers["Authorization"] = f"Bearer {self._config.token}"
        return headers

    def _url(self, path: str) -> str:
        cleaned = quote(path.strip().strip("/"))
        return f"/repos/{self.owner}/{self.repo}/contents/{cleaned}"

    async def _get(self, path: str, ref: str | None, media_type: str) -> httpx.Response:
        params = {"ref": ref} if ref else None
        try:
            async with httpx.AsyncClient(
                base_url=self._config.api_url,
                timeout=self._config.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.get(self._url(path), params=params, headers=self._headers(media_type))
        except (httpx.TimeoutException, httpx.TransportError) as exc:
            raise AccessorError(f"GitHub request failed for {path or '/'}: {exc}", path=path, retryable=True) from exc
        if response.status_code == 404:
            raise EntryNotFoundError(path, ref)
        if response.status_code >= 400:
            logger.warning("GitHub returned %s for %s/%s:%s", response.status_code, self.owner, self.repo, path)
            raise AccessorError(
                f"GitHub returned HTTP {response.status_code} for {path or '/'}",
                path=path,
                retryable=response.status_code in RETRYABLE_STATUS,
            )
        return response

    async def list_entries(self, path: str = "", ref: str | None = None) -> list[RepositoryEntry]:
        response = await self._get(path, ref, JSON_MEDIA_TYPE)
        try:
            payload: Any = response.json()
        except ValueError as exc:
            raise AccessorError(f"malformed listing for {path or '/'}", path=path) from exc
        if isinstance(payload, dict):
            # contents API answers a file path with a single object
            raise EntryNotFoundError(path, ref)
        if not isinstance(payload, list):
            raise AccessorError(f"malformed listing for {path or '/'}", path=path)
        entries: list[RepositoryEntry] = []
        for item in payload:
            if not isinstance(item, dict) or not isinstance(item.get("name"), str):
                raise AccessorError(f"malformed listing entry under {path or '/'}", path=path)
            entries.append(
                RepositoryEntry(
                    name=item["name"],
                    path=str(item.get("path") or item["name"]),
                    kind=EntryKind.DIRECTORY if item.get("type") == "dir" else EntryKind.FILE,
                    size=item.get("size") if isinstance(item.get("size"), int) else None,
                    revision_id=item.get("sha") if isinstance(item.get("sha"), str) else None,
                )
            )
        return entries

    async def read_file(self, path: str, ref: str | None = None) -> str:
        response = await self._get(path, ref, RAW_MEDIA_TYPE)
        return response.text
