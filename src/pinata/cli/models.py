# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Parameter declarations and normalised options for the pin command."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer

from ..config import (
    API_URL_ENV,
    DEFAULT_API_URL,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_WORKFLOWS_DIR,
    TOKEN_ENV,
)

DIRECTORY_ARGUMENT = Annotated[
    Path,
    typer.Argument(
        help="Workflow directory (or single file) to pin.",
        show_default=True,
    ),
]
TOKEN_OPTION = Annotated[
    str | None,
    typer.Option(
        "--token",
        envvar=TOKEN_ENV,
        help="GitHub token used for higher API rate limits.",
        show_default=False,
    ),
]
API_URL_OPTION = Annotated[
    str,
    typer.Option(
        "--api-url",
        envvar=API_URL_ENV,
        help="Base URL of the GitHub REST API.",
    ),
]
TIMEOUT_OPTION = Annotated[
    float,
    typer.Option(
        "--timeout",
        help="Timeout in seconds for each API request.",
    ),
]
DRY_RUN_OPTION = Annotated[
    bool,
    typer.Option(
        "--dry-run",
        help="Report files that would change without writing them.",
    ),
]
VERBOSE_OPTION = Annotated[
    bool,
    typer.Option(
        "--verbose",
        "-v",
        help="Emit debug diagnostics to stderr.",
    ),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output."),
]


@dataclass(slots=True)
class PinCLIOptions:
    """Normalised CLI inputs for the pin command."""

    root: Path
    token: str | None
    api_url: str
    timeout: float
    dry_run: bool
    verbose: bool
    use_emoji: bool


def build_pin_options(
    directory: Path = Path(DEFAULT_WORKFLOWS_DIR),
    *,
    token: str | None = None,
    api_url: str = DEFAULT_API_URL,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    dry_run: bool = False,
    verbose: bool = False,
    emoji: bool = True,
) -> PinCLIOptions:
    """Construct ``PinCLIOptions`` from Typer parameters.

    Args:
        directory: Workflow directory supplied as the positional argument.
        token: Optional GitHub token.
        api_url: Base URL of the GitHub REST API.
        timeout: Per-request timeout in seconds.
        dry_run: Flag disabling file writes.
        verbose: Flag enabling debug diagnostics.
        emoji: Flag controlling emoji usage in CLI output.

    Returns:
        PinCLIOptions: Structured CLI options for the pin run.
    """

    return PinCLIOptions(
        root=directory,
        token=token,
        api_url=api_url,
        timeout=timeout,
        dry_run=dry_run,
        verbose=verbose,
        use_emoji=emoji,
    )


__all__ = [
    "API_URL_OPTION",
    "DIRECTORY_ARGUMENT",
    "DRY_RUN_OPTION",
    "EMOJI_OPTION",
    "PinCLIOptions",
    "TIMEOUT_OPTION",
    "TOKEN_OPTION",
    "VERBOSE_OPTION",
    "build_pin_options",
]
