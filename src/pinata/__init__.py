# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Pin workflow action references to immutable commit identifiers."""

from __future__ import annotations

from importlib import metadata

__all__ = ["__version__"]

try:
    __version__ = metadata.version("pinata-actions")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"
