# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing output helpers and diagnostic logger setup."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Final

from rich.rule import Rule
from rich.text import Text

from .console import detect_tty, get_console

PACKAGE_LOGGER: Final[str] = "pinata"
_HANDLER_MARKER: Final[str] = "_pinata_handler"


def emoji(symbol: str, enable: bool) -> str:
    """Select an emoji symbol based on the caller's preference.

    Args:
        symbol: Emoji text to include in the output.
        enable: Flag indicating whether emoji output is desired.

    Returns:
        str: Emoji symbol when enabled, otherwise an empty string.
    """

    return symbol if enable else ""


def _print_line(msg: str, *, style: str | None, use_emoji: bool, use_color: bool | None = None) -> None:
    """Render ``msg`` to the console using shared styling helpers.

    Args:
        msg: Message text to print to the console.
        style: Rich style name to apply when colour output is active.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    color_enabled = detect_tty() if use_color is None else use_color
    console = get_console(color=color_enabled, emoji=use_emoji)
    text = Text(msg)
    if style and color_enabled:
        text.stylize(style)
    console.print(text)


def section(title: str, *, use_color: bool | None = None) -> None:
    """Render a section header to delineate console output blocks.

    Args:
        title: Section title displayed to the user.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    color_enabled = detect_tty() if use_color is None else use_color
    console = get_console(color=color_enabled, emoji=False)
    if color_enabled:
        console.print()
        console.print(Rule(title))
    else:
        console.print(f"\n--- {title} ---")


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an informational message."""

    _print_line(f"{emoji('ℹ️ ', use_emoji)}{msg}", style="cyan", use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a success message."""

    _print_line(f"{emoji('✅ ', use_emoji)}{msg}", style="green", use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a warning message."""

    _print_line(f"{emoji('⚠️ ', use_emoji)}{msg}", style="yellow", use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an error message."""

    _print_line(f"{emoji('❌ ', use_emoji)}{msg}", style="red", use_emoji=use_emoji, use_color=use_color)


@dataclass(slots=True)
class CLILogger:
    """Adapter around the output helpers respecting CLI emoji and colour settings."""

    use_emoji: bool
    use_color: bool | None = None

    def info(self, message: str) -> None:
        """Log an informational message."""

        info(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def ok(self, message: str) -> None:
        """Log a success message."""

        ok(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def warn(self, message: str) -> None:
        """Log a warning message."""

        warn(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def fail(self, message: str) -> None:
        """Log a failure message."""

        fail(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def section(self, title: str) -> None:
        """Render a section header."""

        section(title, use_color=self.use_color)


def configure_logging(*, verbose: bool) -> logging.Logger:
    """Attach a stderr handler to the package logger.

    Diagnostics stay at ``WARNING`` unless ``verbose`` is requested. Repeated
    calls replace the handler so it writes to the current ``sys.stderr``.

    Args:
        verbose: Whether debug diagnostics should be emitted.

    Returns:
        logging.Logger: The configured ``pinata`` logger.
    """

    logger = logging.getLogger(PACKAGE_LOGGER)
    for existing in [handler for handler in logger.handlers if getattr(handler, _HANDLER_MARKER, False)]:
        logger.removeHandler(existing)
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    setattr(handler, _HANDLER_MARKER, True)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return logger


__all__ = [
    "CLILogger",
    "configure_logging",
    "emoji",
    "fail",
    "info",
    "ok",
    "section",
    "warn",
]
