# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import unquote

import pytest

from pinata.config import DEFAULT_API_URL, PinSettings
from pinata.github import GitHubClient
from pinata.resolver import RefResolver


@dataclass
class FakeResponse:
    status_code: int = 200
    payload: Any = None
    links: dict[str, dict[str, str]] = field(default_factory=dict)

    def json(self) -> Any:
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeGitHub:
    """Serve tag listings and commits from in-memory tables, recording every request."""

    def __init__(self) -> None:
        self.tags: dict[str, list[dict[str, Any]]] = {}
        self.commits: dict[str, str] = {}
        self.failing: dict[str, int] = {}
        self.calls: list[str] = []
        self.headers: list[dict[str, str]] = []
        self.timeouts: list[float | None] = []
        self.closed = False

    def add_tag(self, repo: str, name: str, sha: str, *, kind: str = "commit") -> None:
        self.tags.setdefault(repo, []).append(
            {"ref": f"refs/tags/{name}", "object": {"sha": sha, "type": kind, "url": "ignored"}},
        )

    def add_commit(self, repo: str, ref: str, sha: str) -> None:
        self.commits[f"{repo}@{ref}"] = sha

    def tag_calls(self) -> list[str]:
        return [url for url in self.calls if url.endswith("/git/refs/tags")]

    def commit_calls(self) -> list[str]:
        return [url for url in self.calls if "/commits/" in url]

    def get(
        self,
        url: str,
        *,
        params: Any = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> FakeResponse:
        del params
        self.calls.append(url)
        self.headers.append(dict(headers or {}))
        self.timeouts.append(timeout)
        _, _, owner, name, rest = url.removeprefix(DEFAULT_API_URL).split("/", 4)
        repo = f"{owner}/{name}"
        if repo in self.failing:
            return FakeResponse(status_code=self.failing[repo], payload={"message": "boom"})
        if rest == "git/refs/tags":
            tags = self.tags.get(repo)
            if not tags:
                return FakeResponse(status_code=404, payload={"message": "Not Found"})
            return FakeResponse(payload=tags)
        ref = unquote(rest.removeprefix("commits/"))
        sha = self.commits.get(f"{repo}@{ref}")
        if sha is None:
            return FakeResponse(status_code=404, payload={"message": "Not Found"})
        return FakeResponse(payload={"sha": sha, "commit": {"message": "demo"}})

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def client(fake_github: FakeGitHub) -> GitHubClient:
    return GitHubClient(PinSettings(), session=fake_github)


@pytest.fixture
def resolver(client: GitHubClient) -> RefResolver:
    return RefResolver(client)


@pytest.fixture(autouse=True)
def _reset_pinata_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger("pinata")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
