# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the GitHub REST client."""

from __future__ import annotations

from typing import Any

import pytest
import requests

from pinata.config import PinSettings
from pinata.errors import ResolutionError
from pinata.github import GitHubClient
from pinata.models import RepoCoordinate

from conftest import FakeResponse

REPO = RepoCoordinate(owner="acme", name="tool")


class ScriptedSession:
    def __init__(self, *responses: FakeResponse | Exception) -> None:
        self.responses = list(responses)
        self.requests: list[tuple[str, Any]] = []
        self.closed = False

    def get(self, url: str, *, params: Any = None, headers: Any = None, timeout: Any = None) -> FakeResponse:
        del headers, timeout
        self.requests.append((url, params))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        self.closed = True


def _tag(name: str, char: str) -> dict[str, Any]:
    return {"ref": f"refs/tags/{name}", "object": {"sha": char * 40, "type": "commit"}}


def test_headers_without_token() -> None:
    headers = GitHubClient(PinSettings(), session=ScriptedSession()).headers()
    assert headers["User-Agent"] == "pinata"
    assert headers["Accept"] == "application/vnd.github+json"
    assert "Authorization" not in headers


def test_bearer_token_and_timeout_are_sent(fake_github) -> None:
    client = GitHubClient(PinSettings(token="s3cret", timeout=3.5), session=fake_github)
    fake_github.add_commit("acme/tool", "main", "a" * 40)

    client.get_commit(REPO, "main")

    assert fake_github.headers[-1]["Authorization"] == "Bearer s3cret"
    assert fake_github.timeouts == [3.5]


def test_list_tags_follows_pagination() -> None:
    next_url = "https://api.github.com/repositories/1/git/refs/tags?per_page=100&page=2"
    session = ScriptedSession(
        FakeResponse(payload=[_tag("v1.0.0", "1")], links={"next": {"url": next_url, "rel": "next"}}),
        FakeResponse(payload=[_tag("v2.0.0", "2")]),
    )

    tags = GitHubClient(PinSettings(), session=session).list_tags(REPO)

    assert [tag.name for tag in tags] == ["v1.0.0", "v2.0.0"]
    assert session.requests == [
        ("https://api.github.com/repos/acme/tool/git/refs/tags", {"per_page": 100}),
        (next_url, None),
    ]


def test_list_tags_accepts_single_object() -> None:
    session = ScriptedSession(FakeResponse(payload=_tag("v1.0.0", "1")))
    tags = GitHubClient(PinSettings(), session=session).list_tags(REPO)
    assert [tag.sha for tag in tags] == ["1" * 40]


def test_list_tags_not_found_is_empty() -> None:
    session = ScriptedSession(FakeResponse(status_code=404, payload={"message": "Not Found"}))
    assert GitHubClient(PinSettings(), session=session).list_tags(REPO) == []


def test_custom_api_url_is_used() -> None:
    session = ScriptedSession(FakeResponse(payload={"sha": "b" * 40}))
    client = GitHubClient(PinSettings(api_url="https://ghe.example.com/api/v3/"), session=session)

    client.get_commit(REPO, "main")

    assert session.requests[0][0] == "https://ghe.example.com/api/v3/repos/acme/tool/commits/main"


def test_commit_not_found_is_none() -> None:
    session = ScriptedSession(FakeResponse(status_code=404, payload={"message": "Not Found"}))
    assert GitHubClient(PinSettings(), session=session).get_commit(REPO, "gone") is None


@pytest.mark.parametrize("status", [401, 403, 422, 500, 502])
def test_unexpected_status_raises(status: int) -> None:
    session = ScriptedSession(FakeResponse(status_code=status, payload={"message": "nope"}))
    with pytest.raises(ResolutionError) as excinfo:
        GitHubClient(PinSettings(), session=session).get_commit(REPO, "main")
    assert excinfo.value.status == status
    assert excinfo.value.key == "acme/tool@main"


def test_invalid_json_raises() -> None:
    session = ScriptedSession(FakeResponse(payload=ValueError("Expecting value")))
    with pytest.raises(ResolutionError, match="not valid JSON"):
        GitHubClient(PinSettings(), session=session).list_tags(REPO)


@pytest.mark.parametrize("payload", [[{"ref": "refs/tags/v1"}], {"message": "no sha"}, "text"])
def test_malformed_payload_raises(payload: Any) -> None:
    session = ScriptedSession(FakeResponse(payload=payload), FakeResponse(payload=payload))
    client = GitHubClient(PinSettings(), session=session)
    with pytest.raises(ResolutionError, match="malformed"):
        if isinstance(payload, list):
            client.list_tags(REPO)
        else:
            client.get_commit(REPO, "main")


def test_timeout_raises_resolution_error() -> None:
    session = ScriptedSession(requests.Timeout("read timed out"))
    with pytest.raises(ResolutionError, match="timed out after 15s"):
        GitHubClient(PinSettings(), session=session).list_tags(REPO)


def test_connection_error_raises_resolution_error() -> None:
    session = ScriptedSession(requests.ConnectionError("dns failure"))
    with pytest.raises(ResolutionError, match="request failed"):
        GitHubClient(PinSettings(), session=session).get_commit(REPO, "main")


def test_injected_session_is_not_closed() -> None:
    session = ScriptedSession()
    with GitHubClient(PinSettings(), session=session):
        pass
    assert not session.closed


def test_owned_session_is_closed(monkeypatch: pytest.MonkeyPatch) -> None:
    session = ScriptedSession()
    monkeypatch.setattr("pinata.github.requests.Session", lambda: session)
    with GitHubClient(PinSettings()):
        pass
    assert session.closed
