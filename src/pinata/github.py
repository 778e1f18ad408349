# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Minimal GitHub REST client for tag listing and commit lookup."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import TracebackType
from typing import Any, Final, Protocol
from urllib.parse import quote

import requests
from pydantic import TypeAdapter, ValidationError

from .config import PinSettings
from .errors import ResolutionError
from .models import CommitRef, RepoCoordinate, TagRef

LOGGER = logging.getLogger(__name__)

ACCEPT_HEADER: Final[str] = "application/vnd.github+json"
API_VERSION: Final[str] = "2022-11-28"
PAGE_SIZE: Final[int] = 100
HTTP_OK_MIN: Final[int] = 200
HTTP_OK_MAX: Final[int] = 299
HTTP_NOT_FOUND: Final[int] = 404

_TAG_LIST_ADAPTER: Final[TypeAdapter[list[TagRef]]] = TypeAdapter(list[TagRef])


class HttpResponse(Protocol):
    """Subset of ``requests.Response`` consumed by the client."""

    status_code: int
    links: Mapping[str, Mapping[str, str]]

    def json(self) -> Any:
        """Return the decoded JSON body."""


class HttpSession(Protocol):
    """Subset of ``requests.Session`` consumed by the client."""

    def get(
        self,
        url: str,
        *,
        params: Mapping[str, str | int] | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        """Issue a GET request for ``url``."""

    def close(self) -> None:
        """Release pooled connections."""


class GitHubClient:
    """Read-only access to the two endpoints the resolver needs."""

    def __init__(self, settings: PinSettings, *, session: HttpSession | None = None) -> None:
        """Create a client bound to ``settings``.

        Args:
            settings: Base URL, credentials and timeout for every request.
            session: Optional session used instead of a new
                :class:`requests.Session`; the caller keeps ownership.
        """

        self._settings = settings
        self._owns_session = session is None
        self._session: HttpSession = session if session is not None else requests.Session()

    def headers(self) -> dict[str, str]:
        """Return the headers sent with every request.

        Returns:
            dict[str, str]: Accept, API version, user agent and, when a token
            is configured, the bearer authorization header.
        """

        headers = {
            "Accept": ACCEPT_HEADER,
            "User-Agent": self._settings.user_agent,
            "X-GitHub-Api-Version": API_VERSION,
        }
        if self._settings.token:
            headers["Authorization"] = f"Bearer {self._settings.token}"
        return headers

    def list_tags(self, coordinate: RepoCoordinate) -> list[TagRef]:
        """Return every tag ref of ``coordinate``, following pagination.

        A repository without tags answers with 404, which maps to an empty list.

        Args:
            coordinate: Repository whose tags should be listed.

        Returns:
            list[TagRef]: Tags in the order the API returned them.

        Raises:
            ResolutionError: On transport failures, unexpected statuses or
                malformed payloads.
        """

        key = f"{coordinate} tags"
        url: str | None = f"{self._settings.api_url}/repos/{coordinate}/git/refs/tags"
        params: Mapping[str, str | int] | None = {"per_page": PAGE_SIZE}
        tags: list[TagRef] = []
        while url is not None:
            response = self._get(url, key=key, params=params)
            if response.status_code == HTTP_NOT_FOUND:
                return tags
            _ensure_success(response, key=key)
            payload = _decode(response, key=key)
            if isinstance(payload, dict):
                payload = [payload]
            try:
                tags.extend(_TAG_LIST_ADAPTER.validate_python(payload))
            except ValidationError as exc:
                raise ResolutionError(key, f"malformed tag listing: {exc.error_count()} error(s)") from exc
            url = response.links.get("next", {}).get("url")
            params = None
        return tags

    def get_commit(self, coordinate: RepoCoordinate, ref: str) -> CommitRef | None:
        """Return the commit ``ref`` points at, or ``None`` when GitHub has none.

        Args:
            coordinate: Repository owning ``ref``.
            ref: Branch, tag or SHA prefix to resolve.

        Returns:
            CommitRef | None: Commit payload, ``None`` on 404.

        Raises:
            ResolutionError: On transport failures, unexpected statuses or
                malformed payloads.
        """

        key = f"{coordinate}@{ref}"
        url = f"{self._settings.api_url}/repos/{coordinate}/commits/{quote(ref, safe='/')}"
        response = self._get(url, key=key)
        if response.status_code == HTTP_NOT_FOUND:
            return None
        _ensure_success(response, key=key)
        payload = _decode(response, key=key)
        try:
            return CommitRef.model_validate(payload)
        except ValidationError as exc:
            raise ResolutionError(key, f"malformed commit payload: {exc.error_count()} error(s)") from exc

    def close(self) -> None:
        """Close the underlying session when the client created it."""

        if self._owns_session:
            self._session.close()

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def _get(
        self,
        url: str,
        *,
        key: str,
        params: Mapping[str, str | int] | None = None,
    ) -> HttpResponse:
        """Issue a GET request translating transport failures.

        Args:
            url: Absolute request URL.
            key: Identifier used in error messages.
            params: Optional query parameters.

        Returns:
            HttpResponse: Response regardless of status code.

        Raises:
            ResolutionError: When the request cannot be completed.
        """

        LOGGER.debug("GET %s", url)
        try:
            return self._session.get(
                url,
                params=params,
                headers=self.headers(),
                timeout=self._settings.timeout,
            )
        except requests.Timeout as exc:
            raise ResolutionError(key, f"timed out after {self._settings.timeout:g}s") from exc
        except requests.RequestException as exc:
            raise ResolutionError(key, f"request failed: {exc}") from exc


def _ensure_success(response: HttpResponse, *, key: str) -> None:
    """Raise :class:`ResolutionError` unless ``response`` has a 2xx status."""

    status = response.status_code
    if not HTTP_OK_MIN <= status <= HTTP_OK_MAX:
        raise ResolutionError(key, f"unexpected status {status}", status=status)


def _decode(response: HttpResponse, *, key: str) -> Any:
    """Return the JSON body of ``response``.

    Raises:
        ResolutionError: If the body is not valid JSON.
    """

    try:
        return response.json()
    except ValueError as exc:
        raise ResolutionError(key, "response body is not valid JSON") from exc


__all__ = ["GitHubClient", "HttpResponse", "HttpSession"]
