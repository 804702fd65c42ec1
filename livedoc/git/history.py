"""Read-only queries against a repository's revision history."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Iterable, List, Optional


class GitError(RuntimeError):
    """Raised when a git query fails."""


class GitHistory:
    """Thin wrapper over the git CLI exposing only what change selection needs."""

    def __init__(self, repo_path: Path | str, runner: Callable[..., str] | None = None) -> None:
        self.repo_path = Path(repo_path)
        self._runner = runner or self._default_runner

    def is_repository(self) -> bool:
        try:
            output = self._run(["git", "rev-parse", "--is-inside-work-tree"])
        except GitError:
            return False
        return output.strip() == "true"

    def commit_count(self, limit: Optional[int] = None) -> int:
        """Return the number of commits reachable from HEAD, capped at ``limit``.

        A repository without commits has an unborn HEAD; that counts as zero.
        """
        args = ["git", "rev-list", "--count"]
        if limit is not None:
            args.append(f"--max-count={limit}")
        args.append("HEAD")
        try:
            output = self._run(args)
        except GitError:
            return 0
        try:
            return int(output.strip() or "0")
        except ValueError as exc:
            raise GitError(f"Unexpected rev-list output: {output.strip()!r}") from exc

    def diff(self, range_start: str, range_end: str) -> List[str]:
        """Return paths changed between two revisions, unquoted.

        ``-z`` keeps git from C-quoting paths with non-ASCII characters.
        """
        output = self._run(["git", "diff", "--name-only", "-z", range_start, range_end])
        return [path for path in output.split("\0") if path.strip()]

    def _run(self, args: Iterable[str]) -> str:
        args = list(args)
        try:
            return self._runner(args, cwd=self.repo_path, capture_output=True)
        except FileNotFoundError as exc:
            raise GitError("git executable not found") from exc
        except subprocess.CalledProcessError as exc:
            stderr = (exc.stderr or "").strip() if isinstance(exc.stderr, str) else ""
            detail = stderr or f"exit code {exc.returncode}"
            raise GitError(f"{' '.join(args)} failed: {detail}") from exc
        except OSError as exc:
            raise GitError(f"Unable to run git in {self.repo_path}: {exc}") from exc

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        capture_output: bool = False,
    ) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            capture_output=capture_output,
        )
        return completed.stdout if capture_output else ""


__all__ = ["GitError", "GitHistory"]
