# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Extract and classify ``uses:`` references found on workflow lines."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Final

from .models import DependencyReference, RepoCoordinate, is_sha

USES_TRIGGER: Final[str] = "uses:"
COMMENT_RE: Final[re.Pattern[str]] = re.compile(r"\s#")
EXPRESSION_MARKER: Final[str] = "${{"
_QUOTES: Final[frozenset[str]] = frozenset({"'", '"'})

LOCAL_PREFIXES: Final[tuple[str, ...]] = ("./", "../", "/")
DOCKER_PREFIX: Final[str] = "docker://"
URL_PREFIXES: Final[tuple[str, ...]] = ("http://", "https://")

LOGGER = logging.getLogger(__name__)


class ReferenceKind(str, Enum):
    """Outcome categories produced by :func:`classify_reference`."""

    NO_REFERENCE = "no-reference"
    SKIPPED = "skipped"
    PINNED = "pinned"
    RESOLVABLE = "resolvable"


class SkipReason(str, Enum):
    """Why a reference is left untouched without any remote lookup."""

    LOCAL = "local"
    DOCKER = "docker"
    URL = "url"
    EXPRESSION = "expression"


@dataclass(frozen=True, slots=True)
class Classification:
    """Result of classifying an extracted token.

    ``reference`` is only populated for :attr:`ReferenceKind.RESOLVABLE`.
    """

    kind: ReferenceKind
    reference: DependencyReference | None = None
    skip_reason: SkipReason | None = None

    @property
    def resolvable(self) -> bool:
        """Return ``True`` when the token should be resolved remotely."""

        return self.kind is ReferenceKind.RESOLVABLE and self.reference is not None


def extract_reference(line: str) -> str | None:
    """Return the reference token following ``uses:`` on ``line``.

    Everything after the trigger is taken, cut at the first inline comment,
    trimmed, and one layer of enclosing quotes is removed.

    Args:
        line: Workflow line, without its terminator.

    Returns:
        str | None: Token text, or ``None`` when the line holds no reference.
    """

    index = line.find(USES_TRIGGER)
    if index < 0:
        return None
    token = line[index + len(USES_TRIGGER) :]
    comment = COMMENT_RE.search(token)
    if comment is not None:
        token = token[: comment.start()]
    token = _strip_quotes(token.strip())
    if not token or token == line:
        return None
    return token


def _strip_quotes(token: str) -> str:
    """Remove one layer of matching single or double quotes around ``token``."""

    if len(token) >= 2 and token[0] in _QUOTES and token[-1] == token[0]:
        return token[1:-1]
    return token


def classify_reference(token: str) -> Classification:
    """Classify ``token`` and split resolvable references into their parts.

    Args:
        token: Text produced by :func:`extract_reference`.

    Returns:
        Classification: Kind of reference plus the parsed reference when it
        should be resolved.
    """

    path, separator, ref = token.rpartition("@")
    if not separator or not path or not ref:
        return Classification(ReferenceKind.NO_REFERENCE)

    skip_reason = _skip_reason(path, ref)
    if skip_reason is not None:
        LOGGER.debug("skipping %s reference %s", skip_reason.value, token)
        return Classification(ReferenceKind.SKIPPED, skip_reason=skip_reason)
    if is_sha(ref):
        LOGGER.debug("already pinned: %s", token)
        return Classification(ReferenceKind.PINNED)

    owner, _, remainder = path.partition("/")
    name, _, subpath = remainder.partition("/")
    if not owner or not name:
        return Classification(ReferenceKind.NO_REFERENCE)
    reference = DependencyReference(
        coordinate=RepoCoordinate(owner=owner, name=name),
        ref=ref,
        raw_text=token,
        subpath=subpath or None,
    )
    return Classification(ReferenceKind.RESOLVABLE, reference=reference)


def _skip_reason(path: str, ref: str) -> SkipReason | None:
    """Return the reason ``path``/``ref`` must not be resolved, if any."""

    if path.startswith(LOCAL_PREFIXES):
        return SkipReason.LOCAL
    if path.startswith(DOCKER_PREFIX):
        return SkipReason.DOCKER
    if path.startswith(URL_PREFIXES):
        return SkipReason.URL
    if EXPRESSION_MARKER in ref:
        return SkipReason.EXPRESSION
    return None


__all__ = [
    "COMMENT_RE",
    "Classification",
    "ReferenceKind",
    "SkipReason",
    "USES_TRIGGER",
    "classify_reference",
    "extract_reference",
]
