# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared Rich consoles for user-facing output."""

from __future__ import annotations

import sys
from functools import lru_cache

from rich.console import Console


def detect_tty() -> bool:
    """Return ``True`` when stdout appears to be backed by a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


def get_console(*, color: bool, emoji: bool) -> Console:
    """Return the console matching ``color``/``emoji`` for the current stdout.

    Colour is only enabled when stdout is a terminal, so output captured by a
    pipe or a test runner stays plain.

    Args:
        color: ``True`` when ANSI colour output is wanted.
        emoji: ``True`` when Rich should render emoji codes.

    Returns:
        Console: Console shared by every caller with the same settings.
    """

    return _console_for(color, emoji, detect_tty())


@lru_cache(maxsize=8)
def _console_for(color: bool, emoji: bool, tty: bool) -> Console:
    styled = color and tty
    return Console(
        color_system="auto" if styled else None,
        force_terminal=tty,
        no_color=not styled,
        emoji=emoji,
        highlight=False,
        soft_wrap=True,
    )


__all__ = ["detect_tty", "get_console"]
