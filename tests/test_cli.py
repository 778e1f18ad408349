# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the pinata command line interface."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from pinata.cli.app import app


def sha_of(char: str) -> str:
    return char * 40


@pytest.fixture
def patched_session(fake_github, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr("pinata.github.requests.Session", lambda: fake_github)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("GITHUB_API_URL", raising=False)
    return fake_github


def _workflows(root: Path) -> Path:
    workflows = root / ".github" / "workflows"
    workflows.mkdir(parents=True)
    (workflows / "ci.yml").write_text("steps:\n  - uses: actions/checkout@v4\n", encoding="utf-8")
    (workflows / "lint.yaml").write_text("steps:\n  - uses: ./local\n", encoding="utf-8")
    return workflows


def test_cli_pins_workflows(tmp_path: Path, patched_session) -> None:
    patched_session.add_tag("actions/checkout", "v4", sha_of("a"))
    patched_session.add_tag("actions/checkout", "v4.2.2", sha_of("a"))
    workflows = _workflows(tmp_path)

    result = CliRunner().invoke(app, [str(workflows), "--no-emoji"])

    assert result.exit_code == 0, result.output
    assert f"updated {workflows / 'ci.yml'}" in result.output
    assert "--- Summary ---" in result.output
    assert "2 file(s) scanned, 1 changed" in result.output
    assert (workflows / "ci.yml").read_text(encoding="utf-8") == (
        f"steps:\n  - uses: actions/checkout@{sha_of('a')} # v4.2.2\n"
    )
    assert patched_session.closed


def test_cli_reads_token_from_environment(tmp_path: Path, patched_session, monkeypatch: pytest.MonkeyPatch) -> None:
    patched_session.add_commit("actions/checkout", "v4", sha_of("a"))
    workflows = _workflows(tmp_path)
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_example")

    result = CliRunner().invoke(app, [str(workflows), "--no-emoji"])

    assert result.exit_code == 0, result.output
    assert all(headers["Authorization"] == "Bearer ghp_example" for headers in patched_session.headers)


def test_cli_dry_run_leaves_files(tmp_path: Path, patched_session) -> None:
    patched_session.add_commit("actions/checkout", "v4", sha_of("a"))
    workflows = _workflows(tmp_path)

    result = CliRunner().invoke(app, [str(workflows), "--dry-run", "--no-emoji"])

    assert result.exit_code == 0, result.output
    assert "would update" in result.output
    assert "1 would change" in result.output
    assert "@v4" in (workflows / "ci.yml").read_text(encoding="utf-8")


def test_cli_reports_failures_and_keeps_going(tmp_path: Path, patched_session) -> None:
    patched_session.failing["actions/checkout"] = 500
    patched_session.add_commit("acme/tool", "main", sha_of("b"))
    workflows = _workflows(tmp_path)
    (workflows / "release.yml").write_text("steps:\n  - uses: acme/tool@main\n", encoding="utf-8")

    result = CliRunner().invoke(app, [str(workflows), "--no-emoji"])

    assert result.exit_code == 1
    assert f"could not process {workflows / 'ci.yml'}" in result.output
    assert "unexpected status 500" in result.output
    assert "3 file(s) scanned, 1 changed, 1 failed" in result.output
    assert sha_of("b") in (workflows / "release.yml").read_text(encoding="utf-8")


def test_cli_missing_directory(tmp_path: Path, patched_session) -> None:
    result = CliRunner().invoke(app, [str(tmp_path / "nope"), "--no-emoji"])

    assert result.exit_code == 1
    assert "does not exist" in result.output
    assert patched_session.calls == []


def test_cli_empty_directory_warns(tmp_path: Path, patched_session) -> None:
    result = CliRunner().invoke(app, [str(tmp_path), "--no-emoji"])

    assert result.exit_code == 0
    assert "No workflow files found" in result.output


@pytest.mark.parametrize("args", [["--timeout", "0"], ["--api-url", "ftp://example.com"]])
def test_cli_invalid_settings(tmp_path: Path, patched_session, args: list[str]) -> None:
    result = CliRunner().invoke(app, [str(tmp_path), "--no-emoji", *args])

    assert result.exit_code == 2
    assert "invalid settings" in result.output


def test_cli_version() -> None:
    result = CliRunner().invoke(app, ["--version"])

    assert result.exit_code == 0
    assert result.output.startswith("pinata ")


def test_cli_defaults_to_workflows_directory(
    tmp_path: Path,
    patched_session,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    patched_session.add_commit("actions/checkout", "v4", sha_of("a"))
    workflows = _workflows(tmp_path)
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(app, ["--no-emoji"])

    assert result.exit_code == 0, result.output
    assert sha_of("a") in (workflows / "ci.yml").read_text(encoding="utf-8")
