"""CLI parser and command behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from livedoc import cli
from livedoc.cli import _build_parser
from livedoc.config import ConfigError
from livedoc.git import ChangeSelection, SelectionState
from livedoc.orchestrator import FunctionSyncResult, SyncOutcome
from livedoc.postproc import PatchStatus
from tests._fixtures.repo_builder import RepoBuilder


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "sync"])
    assert args.verbose is True
    assert args.command == "sync"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["analyze", "--verbose"])
    assert args.verbose is True
    assert args.command == "analyze"
    assert args.path == "."


def test_cli_accepts_dry_run_flag() -> None:
    parser = _build_parser()
    args = parser.parse_args(["sync", "repo", "--dry-run"])
    assert args.command == "sync"
    assert args.path == "repo"
    assert args.dry_run is True


def test_cli_analyze_options() -> None:
    parser = _build_parser()
    args = parser.parse_args(["analyze", "--top", "3", "--pattern", "**/*.ts", "--json"])
    assert args.top == 3
    assert args.patterns == ["**/*.ts"]
    assert args.json is True


def test_cli_requires_command() -> None:
    with pytest.raises(SystemExit):
        _build_parser().parse_args([])


def test_analyze_prints_report(repo_builder: RepoBuilder, capsys, monkeypatch) -> None:
    monkeypatch.delenv("LIVEDOC_API_KEY", raising=False)
    repo_builder.write({"src/a.js": "function add(a, b) { return a + b; }\n"})

    cli.main(["analyze", str(repo_builder.path())])

    out = capsys.readouterr().out
    assert out.startswith("=== CODE ANALYSIS REPORT ===")
    assert "   Total functions: 1" in out
    assert "   declaration: 1" in out


def test_analyze_json_output(repo_builder: RepoBuilder, capsys) -> None:
    repo_builder.write({"src/a.js": "const f = async x => x;\n"})

    cli.main(["analyze", str(repo_builder.path()), "--json"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["summary"]["totalFunctions"] == 1
    assert payload["files"][0]["functions"][0] == {
        "kind": "arrow",
        "name": "anonymous",
        "line": 1,
        "isAsync": True,
        "isGenerator": False,
        "paramCount": 1,
    }


def test_analyze_empty_tree(repo_builder: RepoBuilder, capsys) -> None:
    cli.main(["analyze", str(repo_builder.path())])
    assert "No JavaScript files found to analyze" in capsys.readouterr().out


def test_analyze_missing_path_exits_non_zero(tmp_path: Path, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["analyze", str(tmp_path / "nope")])
    assert excinfo.value.code == 1
    assert "not found" in capsys.readouterr().err


class _SyncStub:
    def __init__(self, outcome=None, error=None) -> None:  # type: ignore[no-untyped-def]
        self.outcome = outcome
        self.error = error
        self.calls: list[tuple[str, bool]] = []

    def run_sync(self, path: str, *, dry_run: bool = False) -> SyncOutcome:
        self.calls.append((path, dry_run))
        if self.error is not None:
            raise self.error
        return self.outcome


def test_sync_prints_statuses_and_diff(monkeypatch, capsys, tmp_path: Path) -> None:
    outcome = SyncOutcome(
        docs_path=tmp_path / "README.md",
        selection=ChangeSelection(SelectionState.DIFF, ("src/utils.js",)),
        results=[FunctionSyncResult("foo", "src/utils.js", PatchStatus.UPDATED)],
        dry_run=True,
        diff="--- README.md (current)\n+++ README.md (proposed)\n",
    )
    stub = _SyncStub(outcome)
    monkeypatch.setattr(cli, "Orchestrator", lambda: stub)

    cli.main(["sync", "repo", "--dry-run"])

    out = capsys.readouterr().out
    assert stub.calls == [("repo", True)]
    assert "foo (src/utils.js): updated" in out
    assert "Documentation changes (dry-run):" in out
    assert "+++ README.md (proposed)" in out


def test_sync_config_error_exits(monkeypatch, capsys) -> None:
    stub = _SyncStub(error=ConfigError("LIVEDOC_API_KEY or GEMINI_API_KEY environment variable not set."))
    monkeypatch.setattr(cli, "Orchestrator", lambda: stub)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["sync"])

    assert excinfo.value.code == 1
    assert "environment variable not set" in capsys.readouterr().err


def test_sync_on_file_path_exits_non_zero(repo_builder: RepoBuilder, capsys, monkeypatch) -> None:
    monkeypatch.setenv("LIVEDOC_API_KEY", "test-key")
    repo_builder.write({"src/a.js": "export function a() {}\n"})

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["sync", str(repo_builder.path() / "src" / "a.js")])

    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert "livedoc sync failed" in err
    assert "not a directory" in err
