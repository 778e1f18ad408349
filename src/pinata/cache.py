# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Per-run cache of resolved references.

Entries live for one run and never expire; commit identifiers behind a
``(repository, ref)`` pair are assumed stable for that long. Subpaths of a
repository share the entry of their owning coordinate.
"""

from __future__ import annotations

from dataclasses import dataclass
from threading import Lock

from .models import RepoCoordinate, ResolvedRef

CacheKey = tuple[RepoCoordinate, str]


@dataclass(frozen=True, slots=True)
class CacheInfo:
    """Describe cache state.

    Attributes:
        current_size: Number of cached entries currently stored.
        hits: Number of lookups answered from the cache.
        misses: Number of lookups that found no entry.
    """

    current_size: int
    hits: int
    misses: int


class ResolutionCache:
    """Lock-guarded mapping from ``(coordinate, ref)`` to :class:`ResolvedRef`."""

    def __init__(self) -> None:
        """Initialise an empty cache."""

        self._store: dict[CacheKey, ResolvedRef] = {}
        self._lock = Lock()
        self._hits = 0
        self._misses = 0

    def get(self, coordinate: RepoCoordinate, ref: str) -> ResolvedRef | None:
        """Return the cached resolution for ``coordinate``/``ref``.

        Args:
            coordinate: Repository the ref belongs to.
            ref: Symbolic ref as written in the workflow.

        Returns:
            ResolvedRef | None: Cached value, or ``None`` on a miss.
        """

        with self._lock:
            cached = self._store.get((coordinate, ref))
            if cached is None:
                self._misses += 1
            else:
                self._hits += 1
            return cached

    def store(self, coordinate: RepoCoordinate, ref: str, resolved: ResolvedRef) -> None:
        """Record ``resolved`` for ``coordinate``/``ref``.

        Args:
            coordinate: Repository the ref belongs to.
            ref: Symbolic ref as written in the workflow.
            resolved: Resolution to remember for the rest of the run.
        """

        with self._lock:
            self._store[(coordinate, ref)] = resolved

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._store

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def info(self) -> CacheInfo:
        """Return a snapshot of cache metadata."""

        with self._lock:
            return CacheInfo(current_size=len(self._store), hits=self._hits, misses=self._misses)


__all__ = ["CacheInfo", "CacheKey", "ResolutionCache"]
