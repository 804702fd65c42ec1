"""Selects the source files a sync run should (re-)document."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Protocol, Sequence

from ..logging import get_logger
from .history import GitError


class RevisionHistory(Protocol):
    def is_repository(self) -> bool: ...

    def commit_count(self, limit: Optional[int] = None) -> int: ...

    def diff(self, range_start: str, range_end: str) -> List[str]: ...


class SelectionState(str, Enum):
    """How the file set of a run was obtained."""

    NO_REPO = "no_repo"
    SINGLE_COMMIT = "single_commit"
    DIFF = "diff"
    DIFF_FAILED = "diff_failed"


@dataclass(frozen=True)
class ChangeSelection:
    """Files chosen for a sync run and the state that produced them."""

    state: SelectionState
    files: Sequence[str] = field(default_factory=tuple)
    warning: Optional[str] = None


class ChangeSelector:
    """Maps the latest commit to documentable source files.

    Without a repository, or with fewer than two commits, there is no prior
    revision to compare against and the full fallback set is used. A failing
    diff query selects nothing rather than guessing.
    """

    RANGE_START = "HEAD~1"
    RANGE_END = "HEAD"

    def __init__(
        self,
        history: RevisionHistory,
        fallback: Callable[[], Sequence[Path | str]],
        *,
        prefix: str = "src/",
        extensions: Sequence[str] = (".js",),
    ) -> None:
        self.history = history
        self._fallback = fallback
        self.prefix = prefix
        self.extensions = tuple(extensions)
        self.logger = get_logger("git.changes")

    def select(self) -> ChangeSelection:
        if not self.history.is_repository():
            self.logger.info("Not a git repository; documenting all source files")
            return ChangeSelection(SelectionState.NO_REPO, self._fallback_files())

        if self.history.commit_count(limit=2) < 2:
            self.logger.info("Fewer than two commits; documenting all source files")
            return ChangeSelection(SelectionState.SINGLE_COMMIT, self._fallback_files())

        try:
            changed = self.history.diff(self.RANGE_START, self.RANGE_END)
        except GitError as exc:
            warning = f"Unable to diff {self.RANGE_START}..{self.RANGE_END}: {exc}"
            self.logger.warning(warning)
            return ChangeSelection(SelectionState.DIFF_FAILED, (), warning=warning)

        normalized = [path.replace("\\", "/") for path in changed]
        files = tuple(path for path in normalized if self.matches(path))
        self.logger.debug("Diff selected %d of %d changed files", len(files), len(changed))
        return ChangeSelection(SelectionState.DIFF, files)

    def matches(self, path: str) -> bool:
        return path.startswith(self.prefix) and path.endswith(self.extensions)

    def _fallback_files(self) -> tuple[str, ...]:
        return tuple(str(path) for path in self._fallback())


__all__ = ["ChangeSelection", "ChangeSelector", "RevisionHistory", "SelectionState"]
