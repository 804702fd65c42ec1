"""Source file discovery for the analysis and sync pipelines."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Sequence

from .config import DEFAULT_EXCLUDES, DEFAULT_PATTERNS
from .logging import get_logger

logger = get_logger("repo_scanner")

_ALWAYS_SKIPPED_DIRS = frozenset({"node_modules"})


@dataclass(frozen=True)
class IgnoreRule:
    """One line of a root ``.gitignore``."""

    pattern: str
    directory_only: bool = False
    anchored: bool = False
    negate: bool = False

    @classmethod
    def parse(cls, line: str) -> IgnoreRule | None:
        """Build a rule from a raw line; blank lines and comments yield None."""
        text = line.strip()
        if not text or text.startswith("#"):
            return None
        negate = text.startswith("!")
        if negate:
            text = text[1:]
        directory_only = text.endswith("/")
        anchored = text.startswith("/")
        text = text.strip("/")
        if not text:
            return None
        return cls(pattern=text, directory_only=directory_only, anchored=anchored, negate=negate)

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if self.directory_only and not is_dir:
            return False
        if self.anchored or "/" in self.pattern:
            return fnmatchcase(rel_path, self.pattern)
        # Unanchored single-segment patterns apply at any depth.
        return fnmatchcase(rel_path.rsplit("/", 1)[-1], self.pattern)


class GitIgnore:
    """Root-level ignore rules; the last matching rule wins."""

    def __init__(self, rules: Sequence[IgnoreRule] = ()) -> None:
        self.rules = tuple(rules)

    @classmethod
    def load(cls, root: Path) -> GitIgnore:
        try:
            text = (root / ".gitignore").read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return cls()
        rules = (IgnoreRule.parse(line) for line in text.splitlines())
        return cls([rule for rule in rules if rule is not None])

    def ignores(self, rel_path: str, is_dir: bool) -> bool:
        ignored = False
        for rule in self.rules:
            if rule.matches(rel_path, is_dir):
                ignored = not rule.negate
        return ignored


def glob_matches(path: str, pattern: str) -> bool:
    """Match a ``/``-separated relative path against a glob, one segment at a time.

    ``*``, ``?`` and ``[...]`` never cross a ``/``; a ``**`` segment spans zero
    or more segments. Wildcards do not match a leading ``.`` (hidden files and
    directories) unless the pattern segment itself starts with ``.``.
    """
    parts = [part for part in path.replace("\\", "/").split("/") if part]
    segments = [segment for segment in pattern.split("/") if segment]
    return _match_segments(parts, segments)


def _match_segments(parts: Sequence[str], segments: Sequence[str]) -> bool:
    if not segments:
        return not parts
    head, rest = segments[0], segments[1:]
    if head == "**":
        for index in range(len(parts) + 1):
            if _match_segments(parts[index:], rest):
                return True
            if index < len(parts) and parts[index].startswith("."):
                return False
        return False
    if not parts or not _segment_matches(parts[0], head):
        return False
    return _match_segments(parts[1:], rest)


def _segment_matches(name: str, pattern: str) -> bool:
    if name.startswith(".") and not pattern.startswith("."):
        return False
    return fnmatchcase(name, pattern)


class FileDiscovery:
    """Finds source files under a root by glob pattern, minus exclusions."""

    def find(
        self,
        root: Path | str,
        patterns: Sequence[str] = DEFAULT_PATTERNS,
        exclude: Sequence[str] = DEFAULT_EXCLUDES,
    ) -> List[Path]:
        """Return absolute, duplicate-free paths ordered by pattern, then path."""
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Repository path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Repository path is not a directory: {root}")

        gitignore = GitIgnore.load(root_path)
        candidates = [
            rel_path
            for rel_path in sorted(self._walk(root_path, gitignore))
            if not any(glob_matches(rel_path, pattern) for pattern in exclude)
        ]

        found: dict[str, Path] = {}
        for pattern in patterns:
            for rel_path in candidates:
                if rel_path not in found and glob_matches(rel_path, pattern):
                    found[rel_path] = root_path / rel_path
        logger.debug("Discovered %d files under %s", len(found), root_path)
        return list(found.values())

    @staticmethod
    def _walk(root: Path, gitignore: GitIgnore) -> Iterator[str]:
        """Yield root-relative POSIX paths of files that are not ignored."""
        for dirpath, dirnames, filenames in os.walk(root):
            prefix = Path(dirpath).relative_to(root).as_posix()
            prefix = "" if prefix == "." else f"{prefix}/"
            dirnames[:] = [
                name
                for name in dirnames
                if not name.startswith(".")
                and name not in _ALWAYS_SKIPPED_DIRS
                and not gitignore.ignores(prefix + name, True)
            ]
            for filename in filenames:
                if not gitignore.ignores(prefix + filename, False):
                    yield prefix + filename


__all__ = ["FileDiscovery", "GitIgnore", "IgnoreRule", "glob_matches"]
