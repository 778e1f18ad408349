# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Resolve symbolic refs to commit identifiers.

Resolution runs in two phases. The repository's tag listing is consulted
first so a ref given as a released tag gains a readable label; the highest
semantic version among tags sharing the target wins. When no tag matches,
the ref is resolved as a commit-ish (branch, short SHA or unlisted tag) and
carries no label. Annotated tags are peeled through the commit lookup so the
pinned identifier always names a commit.

When neither phase finds anything the input ref is returned unchanged, which
leaves the workflow line untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Final, Protocol

from semver import Version

from .cache import ResolutionCache
from .models import CommitRef, DependencyReference, RepoCoordinate, ResolvedRef, TagRef

LOGGER = logging.getLogger(__name__)

VERSION_PREFIX: Final[str] = "v"


class RefLookup(Protocol):
    """Remote operations required by :class:`RefResolver`."""

    def list_tags(self, coordinate: RepoCoordinate) -> list[TagRef]:
        """Return the tags of ``coordinate``."""

    def get_commit(self, coordinate: RepoCoordinate, ref: str) -> CommitRef | None:
        """Return the commit ``ref`` points at, ``None`` when unknown."""


@dataclass(frozen=True, slots=True)
class VersionedTag:
    """Tag paired with its parsed version."""

    tag: TagRef
    version: Version

    @property
    def sort_key(self) -> tuple[Version, str]:
        """Return the ordering key; names break ties between equal versions."""

        return self.version, self.tag.name


def parse_version(name: str) -> Version:
    """Parse a tag name as a semantic version.

    A single leading ``v`` is ignored and missing minor or patch components
    default to zero.

    Args:
        name: Tag name such as ``v1``, ``v1.2`` or ``v1.2.3-rc.1``.

    Returns:
        Version: Parsed semantic version.

    Raises:
        ValueError: When ``name`` is not a semantic version.
    """

    text = name.removeprefix(VERSION_PREFIX)
    return Version.parse(text, optional_minor_and_patch=True)


def parse_tags(coordinate: RepoCoordinate, tags: Iterable[TagRef]) -> list[VersionedTag]:
    """Return ``tags`` whose names parse as semantic versions.

    Tags that fail to parse are excluded rather than ranked lowest.

    Args:
        coordinate: Repository owning the tags, used for diagnostics.
        tags: Tag refs from the listing endpoint.

    Returns:
        list[VersionedTag]: Parsed tags in listing order.
    """

    parsed: list[VersionedTag] = []
    for tag in tags:
        try:
            version = parse_version(tag.name)
        except ValueError:
            LOGGER.warning(
                "ignoring invalid tag %s in %s",
                tag.name,
                coordinate,
                extra={"repository": str(coordinate), "tag": tag.name},
            )
            continue
        parsed.append(VersionedTag(tag=tag, version=version))
    return parsed


def select_tag(tags: Sequence[VersionedTag], ref: str) -> TagRef | None:
    """Return the highest-versioned tag pointing at the same object as ``ref``.

    When ``ref`` names one of ``tags`` the comparison uses that tag's target,
    so a tag name and its object identifier are treated alike.

    Args:
        tags: Parsed tags of one repository.
        ref: Symbolic ref as written in the workflow.

    Returns:
        TagRef | None: Winning tag, or ``None`` when no tag matches.
    """

    target = ref
    for entry in tags:
        if entry.tag.name == ref:
            target = entry.tag.sha
            break
    candidates = [entry for entry in tags if entry.tag.sha == target]
    if not candidates:
        return None
    return max(candidates, key=lambda entry: entry.sort_key).tag


class RefResolver:
    """Resolve ``(coordinate, ref)`` pairs, memoizing results for one run."""

    def __init__(self, lookup: RefLookup, *, cache: ResolutionCache | None = None) -> None:
        """Create a resolver backed by ``lookup``.

        Args:
            lookup: Remote lookup service, usually a :class:`~pinata.github.GitHubClient`.
            cache: Cache shared across files; a fresh one is created when omitted.
        """

        self._lookup = lookup
        self._cache = cache if cache is not None else ResolutionCache()

    @property
    def cache(self) -> ResolutionCache:
        """Return the cache owned by this resolver."""

        return self._cache

    def resolve_reference(self, reference: DependencyReference) -> ResolvedRef:
        """Resolve ``reference``; subpaths share their repository's entry."""

        return self.resolve(reference.coordinate, reference.ref)

    def resolve(self, coordinate: RepoCoordinate, ref: str) -> ResolvedRef:
        """Return the commit identifier and label for ``ref`` in ``coordinate``.

        Args:
            coordinate: Repository owning ``ref``.
            ref: Tag, branch or short SHA to resolve.

        Returns:
            ResolvedRef: Resolution; ``sha`` equals ``ref`` when nothing better
            was found.

        Raises:
            ResolutionError: When a remote lookup fails.
        """

        cached = self._cache.get(coordinate, ref)
        if cached is not None:
            LOGGER.debug("cache hit for %s@%s", coordinate, ref)
            return cached

        tags = parse_tags(coordinate, self._lookup.list_tags(coordinate))
        tag = select_tag(tags, ref)

        if tag is None:
            resolved = self._resolve_commit(coordinate, ref)
        elif tag.annotated:
            resolved = self._peel(coordinate, ref, tag)
        else:
            resolved = ResolvedRef(sha=tag.sha, label=tag.name)
        LOGGER.debug("resolved %s@%s to %s (label=%s)", coordinate, ref, resolved.sha, resolved.label)
        self._cache.store(coordinate, ref, resolved)
        return resolved

    def _resolve_commit(self, coordinate: RepoCoordinate, ref: str) -> ResolvedRef:
        """Resolve ``ref`` as a commit-ish, returning it unchanged when unknown."""

        commit = self._lookup.get_commit(coordinate, ref)
        if commit is None:
            LOGGER.info("could not resolve %s@%s; leaving it unchanged", coordinate, ref)
            return ResolvedRef(sha=ref)
        return ResolvedRef(sha=commit.sha.lower())

    def _peel(self, coordinate: RepoCoordinate, ref: str, tag: TagRef) -> ResolvedRef:
        """Resolve the commit behind annotated ``tag``.

        The tag object's own identifier is never returned; when the commit
        cannot be found ``ref`` is left unchanged.
        """

        commit = self._lookup.get_commit(coordinate, tag.name)
        if commit is None:
            LOGGER.warning(
                "annotated tag %s in %s has no reachable commit; leaving %s unchanged",
                tag.name,
                coordinate,
                ref,
                extra={"repository": str(coordinate), "tag": tag.name},
            )
            return ResolvedRef(sha=ref)
        return ResolvedRef(sha=commit.sha.lower(), label=tag.name)


__all__ = ["RefLookup", "RefResolver", "VersionedTag", "parse_tags", "parse_version", "select_tag"]
