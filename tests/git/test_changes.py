"""Tests for change selection."""

from __future__ import annotations

from typing import List, Optional

from livedoc.git import ChangeSelector, GitError, SelectionState


class _FakeHistory:
    def __init__(
        self,
        *,
        repository: bool = True,
        commits: int = 5,
        changed: Optional[List[str]] = None,
        diff_error: Optional[Exception] = None,
    ) -> None:
        self.repository = repository
        self.commits = commits
        self.changed = changed or []
        self.diff_error = diff_error
        self.diff_calls: list[tuple[str, str]] = []

    def is_repository(self) -> bool:
        return self.repository

    def commit_count(self, limit: Optional[int] = None) -> int:
        return self.commits if limit is None else min(self.commits, limit)

    def diff(self, range_start: str, range_end: str) -> List[str]:
        self.diff_calls.append((range_start, range_end))
        if self.diff_error is not None:
            raise self.diff_error
        return list(self.changed)


def _fallback() -> List[str]:
    return ["src/a.js", "src/b.js"]


def test_no_repository_uses_fallback() -> None:
    history = _FakeHistory(repository=False)

    selection = ChangeSelector(history, _fallback).select()

    assert selection.state is SelectionState.NO_REPO
    assert selection.files == ("src/a.js", "src/b.js")
    assert history.diff_calls == []


def test_single_commit_uses_fallback() -> None:
    selection = ChangeSelector(_FakeHistory(commits=1), _fallback).select()

    assert selection.state is SelectionState.SINGLE_COMMIT
    assert selection.files == ("src/a.js", "src/b.js")


def test_diff_filters_by_prefix_and_extension() -> None:
    history = _FakeHistory(
        changed=["src/a.js", "src/b.ts", "lib/c.js", "README.md", "src/nested/d.js"]
    )

    selection = ChangeSelector(history, _fallback).select()

    assert selection.state is SelectionState.DIFF
    assert selection.files == ("src/a.js", "src/nested/d.js")
    assert history.diff_calls == [("HEAD~1", "HEAD")]
    assert selection.warning is None


def test_diff_with_no_relevant_changes_is_empty() -> None:
    selection = ChangeSelector(_FakeHistory(changed=["docs/guide.md"]), _fallback).select()

    assert selection.state is SelectionState.DIFF
    assert selection.files == ()


def test_diff_failure_selects_nothing_with_warning() -> None:
    history = _FakeHistory(diff_error=GitError("bad revision"))

    selection = ChangeSelector(history, _fallback).select()

    assert selection.state is SelectionState.DIFF_FAILED
    assert selection.files == ()
    assert selection.warning and "bad revision" in selection.warning


def test_custom_prefix_and_extensions() -> None:
    selector = ChangeSelector(
        _FakeHistory(), _fallback, prefix="lib/", extensions=(".ts", ".tsx")
    )

    assert selector.matches("lib/a.ts")
    assert selector.matches("lib/ui/b.tsx")
    assert not selector.matches("lib/a.js")
    assert not selector.matches("src/a.ts")
