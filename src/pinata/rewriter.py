# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rewrite a workflow line with a resolved commit identifier."""

from __future__ import annotations

from .models import DependencyReference, ResolvedRef
from .references import COMMENT_RE, USES_TRIGGER


def rewrite_line(line: str, reference: DependencyReference, resolved: ResolvedRef) -> str:
    """Return ``line`` with ``reference`` pinned to ``resolved``.

    The first occurrence of the reference token after ``uses:`` is replaced by
    ``owner/name[/subpath]@sha``. A label different from the SHA replaces any
    trailing comment with ``# <label>``; otherwise comments are kept as they
    are. Text before the token, including indentation and quotes, is never
    modified.

    Args:
        line: Original line without its terminator.
        reference: Reference extracted from ``line``.
        resolved: Resolution of ``reference``.

    Returns:
        str: Rewritten line; equal to ``line`` when nothing changed.
    """

    start = max(line.find(USES_TRIGGER), 0)
    index = line.find(reference.raw_text, start)
    if index < 0:
        return line

    replacement = reference.pinned(resolved.sha)
    rewritten = line[:index] + replacement + line[index + len(reference.raw_text) :]
    if not resolved.label or resolved.label == resolved.sha:
        return rewritten

    end = index + len(replacement)
    comment = COMMENT_RE.search(rewritten, end)
    if comment is not None:
        rewritten = rewritten[: comment.start()]
    return f"{rewritten} # {resolved.label}"


__all__ = ["rewrite_line"]
