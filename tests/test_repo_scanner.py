"""Tests for source file discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from livedoc.repo_scanner import FileDiscovery, GitIgnore, IgnoreRule, glob_matches
from tests._fixtures.repo_builder import RepoBuilder


@pytest.mark.parametrize(
    ("path", "pattern", "expected"),
    [
        ("index.js", "**/*.js", True),
        ("src/deep/index.js", "**/*.js", True),
        ("src/index.js", "src/**/*.js", True),
        ("src/a/b/index.js", "src/**/*.js", True),
        ("lib/index.js", "src/**/*.js", False),
        ("dist/bundle.js", "dist/**", True),
        ("distant/a.js", "dist/**", False),
        ("src/app.min.js", "**/*.min.js", True),
        ("src/app.ts", "**/*.js", False),
        ("src/a/b.js", "src/*.js", False),
        ("lib/index.js", "*.js", False),
        (".eslintrc.js", "**/*.js", False),
        ("src/.cache/a.js", "**/*.js", False),
        (".git/config", ".git/**", True),
        ("dist", "dist/**", True),
    ],
)
def test_glob_matches(path: str, pattern: str, expected: bool) -> None:
    assert glob_matches(path, pattern) is expected


def test_discovery_applies_patterns_and_excludes(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "src/index.js": "export function a() {}\n",
            "src/view.tsx": "export const V = () => <div />;\n",
            "src/util.test.js": "test('x', () => {});\n",
            "dist/bundle.js": "function b() {}\n",
            "node_modules/pkg/index.js": "function c() {}\n",
            ".cache/tmp.js": "function d() {}\n",
            "README.md": "# readme\n",
        }
    )

    assert repo_builder.discover() == ["src/index.js", "src/view.tsx"]


def test_discovery_orders_by_pattern_then_path(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"b.ts": "", "a.js": "", "lib/c.js": ""})
    discovery = FileDiscovery()

    found = discovery.find(repo_builder.path(), patterns=("**/*.ts", "**/*.js", "*.js"), exclude=())

    assert [path.relative_to(repo_builder.path()).as_posix() for path in found] == [
        "b.ts",
        "a.js",
        "lib/c.js",
    ]
    assert all(path.is_absolute() for path in found)


def test_discovery_honours_gitignore(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            ".gitignore": "generated/\n*.gen.js\n!keep.gen.js\n",
            "generated/out.js": "",
            "src/a.gen.js": "",
            "src/keep.gen.js": "",
            "src/main.js": "",
        }
    )

    assert repo_builder.discover() == ["src/keep.gen.js", "src/main.js"]


def test_discovery_rejects_bad_roots(tmp_path: Path) -> None:
    discovery = FileDiscovery()
    with pytest.raises(FileNotFoundError):
        discovery.find(tmp_path / "missing")

    file_path = tmp_path / "file.js"
    file_path.write_text("", encoding="utf-8")
    with pytest.raises(NotADirectoryError):
        discovery.find(file_path)


def test_ignore_rule_parsing() -> None:
    assert IgnoreRule.parse("# comment") is None
    assert IgnoreRule.parse("   ") is None
    assert IgnoreRule.parse("/build/") == IgnoreRule("build", directory_only=True, anchored=True)
    assert IgnoreRule.parse("!keep.js") == IgnoreRule("keep.js", negate=True)


def test_gitignore_last_matching_rule_wins() -> None:
    rules = [IgnoreRule.parse(line) for line in ("*.log", "!important.log", "/out/")]
    gitignore = GitIgnore([rule for rule in rules if rule is not None])

    assert gitignore.ignores("logs/debug.log", False)
    assert not gitignore.ignores("logs/important.log", False)
    assert gitignore.ignores("out", True)
    assert not gitignore.ignores("out", False)
    assert not gitignore.ignores("src/out", True)


def test_single_star_pattern_stays_in_one_directory(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"src/a.js": "", "src/nested/b.js": "", ".eslintrc.js": "", "top.js": ""})
    discovery = FileDiscovery()

    shallow = discovery.find(repo_builder.path(), patterns=("src/*.js",), exclude=())
    everywhere = discovery.find(repo_builder.path(), patterns=("**/*.js",), exclude=())

    root = repo_builder.path()
    assert [path.relative_to(root).as_posix() for path in shallow] == ["src/a.js"]
    assert [path.relative_to(root).as_posix() for path in everywhere] == [
        "src/a.js",
        "src/nested/b.js",
        "top.js",
    ]
