# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point pinning workflow references."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Final

import typer

from .. import __version__
from ..config import DEFAULT_API_URL, DEFAULT_TIMEOUT_SECONDS, DEFAULT_WORKFLOWS_DIR, build_settings
from ..errors import ConfigError
from ..github import GitHubClient
from ..logging import CLILogger, configure_logging
from ..processor import FileResult, RunSummary, pin_workflows
from ..resolver import RefResolver
from .models import (
    API_URL_OPTION,
    DIRECTORY_ARGUMENT,
    DRY_RUN_OPTION,
    EMOJI_OPTION,
    TIMEOUT_OPTION,
    TOKEN_OPTION,
    VERBOSE_OPTION,
    PinCLIOptions,
    build_pin_options,
)

EXIT_OK: Final[int] = 0
EXIT_FAILURE: Final[int] = 1
EXIT_CONFIG: Final[int] = 2

app = typer.Typer(
    name="pinata",
    help="Pin workflow `uses:` references to immutable commit SHAs.",
    add_completion=False,
    no_args_is_help=False,
)


def _version_callback(value: bool) -> None:
    """Print the installed version and exit when ``--version`` is passed."""

    if value:
        typer.echo(f"pinata {__version__}")
        raise typer.Exit(code=EXIT_OK)


@app.command()
def pin(
    directory: DIRECTORY_ARGUMENT = Path(DEFAULT_WORKFLOWS_DIR),
    token: TOKEN_OPTION = None,
    api_url: API_URL_OPTION = DEFAULT_API_URL,
    timeout: TIMEOUT_OPTION = DEFAULT_TIMEOUT_SECONDS,
    dry_run: DRY_RUN_OPTION = False,
    verbose: VERBOSE_OPTION = False,
    emoji: EMOJI_OPTION = True,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = False,
) -> None:
    """Pin every `uses:` reference in the workflows under DIRECTORY.

    Raises:
        typer.Exit: Always raised to terminate the command with an exit status.
    """

    del version
    options = build_pin_options(
        directory,
        token=token,
        api_url=api_url,
        timeout=timeout,
        dry_run=dry_run,
        verbose=verbose,
        emoji=emoji,
    )
    raise typer.Exit(code=run_pin(options))


def run_pin(options: PinCLIOptions) -> int:
    """Execute a pin run for ``options`` and return the exit status.

    Args:
        options: Normalised CLI options.

    Returns:
        int: ``0`` on success, ``1`` when a file failed or the root is
        missing, ``2`` for invalid settings.
    """

    configure_logging(verbose=options.verbose)
    logger = CLILogger(use_emoji=options.use_emoji)
    try:
        settings = build_settings(token=options.token, api_url=options.api_url, timeout=options.timeout)
    except ConfigError as exc:
        logger.fail(str(exc))
        return EXIT_CONFIG

    if not options.root.exists():
        logger.fail(f"{options.root} does not exist")
        return EXIT_FAILURE

    mode = " (dry run)" if options.dry_run else ""
    logger.info(f"Pinning workflows in {options.root}{mode}")
    with GitHubClient(settings) as client:
        resolver = RefResolver(client)
        summary = pin_workflows(
            options.root,
            resolver,
            dry_run=options.dry_run,
            on_result=_ResultReporter(logger, dry_run=options.dry_run),
        )
    _emit_summary(summary, logger, dry_run=options.dry_run)
    return EXIT_OK if summary.ok else EXIT_FAILURE


class _ResultReporter:
    """Report each processed file as the walk progresses."""

    def __init__(self, logger: CLILogger, *, dry_run: bool) -> None:
        self._logger = logger
        self._dry_run = dry_run

    def __call__(self, result: FileResult) -> None:
        if result.error is not None:
            self._logger.fail(f"could not process {result.path}: {result.error.cause}")
        elif result.changed:
            verb = "would update" if self._dry_run else "updated"
            self._logger.ok(f"{verb} {result.path}")


def _emit_summary(summary: RunSummary, logger: CLILogger, *, dry_run: bool) -> None:
    """Render the final counts of a run.

    Args:
        summary: Aggregated run outcome.
        logger: CLI output adapter.
        dry_run: Whether files were left untouched.
    """

    logger.section("Summary")
    verb = "would change" if dry_run else "changed"
    message = f"{summary.scanned} file(s) scanned, {len(summary.changed)} {verb}"
    if summary.failed:
        logger.fail(f"{message}, {len(summary.failed)} failed")
        return
    if summary.scanned == 0:
        logger.warn(f"No workflow files found under {summary.root}")
        return
    logger.ok(message)


def main() -> None:
    """Console script entry point."""

    app()


__all__ = ["app", "main", "run_pin"]
