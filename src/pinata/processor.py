# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Apply the pinning pipeline to lines, files and workflow directories."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from .errors import FileProcessingError, ResolutionError
from .references import USES_TRIGGER, classify_reference, extract_reference
from .resolver import RefResolver
from .rewriter import rewrite_line

WORKFLOW_SUFFIXES: Final[frozenset[str]] = frozenset({".yml", ".yaml"})
ENCODING: Final[str] = "utf-8"

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PinOutcome:
    """Result of pinning a block of text."""

    text: str
    changed: bool
    pinned: int = 0


@dataclass(frozen=True, slots=True)
class FileResult:
    """Outcome for one workflow file, reported while a directory is walked."""

    path: Path
    changed: bool
    error: FileProcessingError | None = None

    @property
    def failed(self) -> bool:
        """Return ``True`` when the file could not be processed."""

        return self.error is not None


@dataclass(slots=True)
class RunSummary:
    """Aggregate outcome of a run over a workflow directory."""

    root: Path
    scanned: int = 0
    changed: list[Path] = field(default_factory=list)
    failed: list[FileProcessingError] = field(default_factory=list)

    def register(self, result: FileResult) -> None:
        """Record ``result`` in the summary.

        Args:
            result: Outcome for a single workflow file.
        """

        self.scanned += 1
        if result.error is not None:
            self.failed.append(result.error)
        elif result.changed:
            self.changed.append(result.path)

    @property
    def ok(self) -> bool:
        """Return ``True`` when every scanned file was processed."""

        return not self.failed


ResultCallback = Callable[[FileResult], None]


def pin_line(line: str, resolver: RefResolver) -> str:
    """Return ``line`` with its ``uses:`` reference pinned when resolvable.

    Args:
        line: Workflow line without its terminator.
        resolver: Resolver shared by the whole run.

    Returns:
        str: Rewritten line, or ``line`` itself when nothing applies.

    Raises:
        ResolutionError: When the reference cannot be looked up.
    """

    token = extract_reference(line)
    if token is None:
        return line
    classification = classify_reference(token)
    if not classification.resolvable or classification.reference is None:
        return line
    reference = classification.reference
    return rewrite_line(line, reference, resolver.resolve_reference(reference))


def split_lines(text: str) -> Iterator[tuple[str, str]]:
    """Yield ``(body, terminator)`` pairs covering ``text`` exactly.

    Only ``\\n`` and ``\\r\\n`` end a line; the final line may have no
    terminator.

    Args:
        text: File contents read without newline translation.

    Yields:
        tuple[str, str]: Line body and its original terminator.
    """

    parts = text.split("\n")
    last = len(parts) - 1
    for index, part in enumerate(parts):
        if index == last:
            if part:
                yield part, ""
            return
        if part.endswith("\r"):
            yield part[:-1], "\r\n"
        else:
            yield part, "\n"


def pin_text(text: str, resolver: RefResolver) -> PinOutcome:
    """Pin every ``uses:`` reference in ``text``.

    Args:
        text: Workflow contents.
        resolver: Resolver shared by the whole run.

    Returns:
        PinOutcome: Reconstructed text and whether any line changed.

    Raises:
        ResolutionError: On the first reference that cannot be looked up.
    """

    chunks: list[str] = []
    pinned = 0
    for body, terminator in split_lines(text):
        if USES_TRIGGER in body:
            rewritten = pin_line(body, resolver)
            if rewritten != body:
                pinned += 1
            body = rewritten
        chunks.append(body)
        chunks.append(terminator)
    return PinOutcome(text="".join(chunks), changed=pinned > 0, pinned=pinned)


def process_file(
    path: Path,
    resolver: RefResolver,
    *,
    output: Path | None = None,
    dry_run: bool = False,
) -> bool:
    """Pin the references of ``path`` and write the result when it changed.

    Nothing is written if any reference fails, so a file is never left
    half-pinned.

    Args:
        path: Workflow file to read.
        resolver: Resolver shared by the whole run.
        output: Destination for the rewritten contents, ``path`` by default.
        dry_run: When ``True`` report the change without writing.

    Returns:
        bool: ``True`` when at least one line changed.

    Raises:
        FileProcessingError: When reading, resolving or writing fails.
    """

    try:
        with path.open("r", encoding=ENCODING, newline="") as handle:
            original = handle.read()
        outcome = pin_text(original, resolver)
        if outcome.changed and not dry_run:
            destination = output or path
            with destination.open("w", encoding=ENCODING, newline="") as handle:
                handle.write(outcome.text)
    except (ResolutionError, OSError, UnicodeDecodeError) as exc:
        raise FileProcessingError(path, exc) from exc
    if outcome.changed:
        LOGGER.debug("pinned %d reference(s) in %s", outcome.pinned, path)
    return outcome.changed


def iter_workflow_files(root: Path) -> Iterator[Path]:
    """Yield workflow files beneath ``root`` in a stable order.

    Args:
        root: Directory to walk, or a single workflow file.

    Yields:
        Path: Files whose suffix is ``.yml`` or ``.yaml``.
    """

    if root.is_file():
        if root.suffix in WORKFLOW_SUFFIXES:
            yield root
        return
    for candidate in sorted(root.rglob("*")):
        if candidate.suffix in WORKFLOW_SUFFIXES and candidate.is_file():
            yield candidate


def pin_workflows(
    root: Path,
    resolver: RefResolver,
    *,
    dry_run: bool = False,
    on_result: ResultCallback | None = None,
) -> RunSummary:
    """Pin every workflow under ``root``.

    A failing file is recorded and the walk continues with its siblings.

    Args:
        root: Directory (or file) to process.
        resolver: Resolver shared by every file.
        dry_run: When ``True`` no file is written.
        on_result: Optional callback invoked after each file.

    Returns:
        RunSummary: Counts of scanned, changed and failed files.
    """

    summary = RunSummary(root=root)
    for path in iter_workflow_files(root):
        try:
            result = FileResult(path=path, changed=process_file(path, resolver, dry_run=dry_run))
        except FileProcessingError as exc:
            LOGGER.debug("failed to process %s", path, exc_info=exc)
            result = FileResult(path=path, changed=False, error=exc)
        summary.register(result)
        if on_result is not None:
            on_result(result)
    return summary


__all__ = [
    "FileResult",
    "PinOutcome",
    "RunSummary",
    "WORKFLOW_SUFFIXES",
    "iter_workflow_files",
    "pin_line",
    "pin_text",
    "pin_workflows",
    "process_file",
    "split_lines",
]
