# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by the pinning pipeline."""

from __future__ import annotations

from pathlib import Path


class PinataError(Exception):
    """Base class for every error raised by :mod:`pinata`."""


class ConfigError(PinataError):
    """Raised when run settings are invalid."""


class ResolutionError(PinataError):
    """Raised when a reference cannot be resolved against the remote service.

    Transport failures, unexpected HTTP statuses and malformed payloads all
    surface through this error. Missing tags or commits do not.
    """

    def __init__(self, key: str, message: str, *, status: int | None = None) -> None:
        """Initialise the error for ``key``.

        Args:
            key: ``owner/name@ref`` identifier of the failed lookup.
            message: Human-readable failure description.
            status: HTTP status code when the server responded.
        """

        super().__init__(f"{key}: {message}")
        self.key = key
        self.status = status


class FileProcessingError(PinataError):
    """Raised when a workflow file cannot be read, resolved or written."""

    def __init__(self, path: Path, cause: Exception) -> None:
        """Initialise the error for ``path``.

        Args:
            path: Workflow file that failed.
            cause: Underlying resolution or I/O error.
        """

        super().__init__(f"{path}: {cause}")
        self.path = path
        self.cause = cause


__all__ = [
    "ConfigError",
    "FileProcessingError",
    "PinataError",
    "ResolutionError",
]
