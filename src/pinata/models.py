# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Data models describing workflow references and their resolutions."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

SHA_LENGTH: Final[int] = 40
TAG_REF_PREFIX: Final[str] = "refs/tags/"

_SHA_RE: Final[re.Pattern[str]] = re.compile(rf"[0-9a-fA-F]{{{SHA_LENGTH}}}")


def is_sha(value: str) -> bool:
    """Return ``True`` when ``value`` is a full 40 character hex commit identifier.

    Args:
        value: Candidate ref text.

    Returns:
        bool: ``True`` for exactly 40 hexadecimal characters.
    """

    return _SHA_RE.fullmatch(value) is not None


@dataclass(frozen=True, slots=True)
class RepoCoordinate:
    """Identify a remote repository by its case-sensitive owner and name."""

    owner: str
    name: str

    def __str__(self) -> str:
        """Return the ``owner/name`` form used in URLs and cache keys."""

        return f"{self.owner}/{self.name}"


@dataclass(frozen=True, slots=True)
class DependencyReference:
    """Describe a resolvable ``owner/name[/subpath]@ref`` token found on a line.

    Attributes:
        coordinate: Repository owning the action or reusable workflow.
        ref: Symbolic ref (tag, branch or short SHA) after the ``@``.
        raw_text: Exact substring of the line used for substitution.
        subpath: Path inside the repository for nested actions and
            reusable workflows, ``None`` for top-level actions.
    """

    coordinate: RepoCoordinate
    ref: str
    raw_text: str
    subpath: str | None = None

    @property
    def path(self) -> str:
        """Return the coordinate path written before the ``@`` separator."""

        if self.subpath:
            return f"{self.coordinate}/{self.subpath}"
        return str(self.coordinate)

    @property
    def cache_key(self) -> str:
        """Return the ``owner/name@ref`` key shared by every subpath."""

        return f"{self.coordinate}@{self.ref}"

    def pinned(self, sha: str) -> str:
        """Return the reference text with ``sha`` in place of the ref.

        Args:
            sha: Identifier to write after the ``@`` separator.

        Returns:
            str: ``owner/name[/subpath]@sha``.
        """

        return f"{self.path}@{sha}"


@dataclass(frozen=True, slots=True)
class ResolvedRef:
    """Outcome of resolving a symbolic ref.

    ``label`` carries the tag name when the ref resolved through the tag
    namespace and is ``None`` for branches and bare commits.
    """

    sha: str
    label: str | None = None


class GitObject(BaseModel):
    """Object a git ref points at, as returned by the refs API."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    sha: str = Field(min_length=1)
    type: str = "commit"


class TagRef(BaseModel):
    """Single entry from the tag listing endpoint."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    ref: str
    object: GitObject

    @property
    def name(self) -> str:
        """Return the tag name without the ``refs/tags/`` prefix."""

        return self.ref.removeprefix(TAG_REF_PREFIX)

    @property
    def sha(self) -> str:
        """Return the identifier of the object the tag points at."""

        return self.object.sha

    @property
    def annotated(self) -> bool:
        """Return ``True`` when the tag points at an annotated tag object."""

        return self.object.type == "tag"


class CommitRef(BaseModel):
    """Commit payload returned by the commit lookup endpoint."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    sha: str = Field(min_length=1)


__all__ = [
    "CommitRef",
    "DependencyReference",
    "GitObject",
    "RepoCoordinate",
    "ResolvedRef",
    "SHA_LENGTH",
    "TAG_REF_PREFIX",
    "TagRef",
    "is_sha",
]
