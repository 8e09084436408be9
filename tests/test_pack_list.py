"""Tests for archive membership (ManifestPackLister)."""

from __future__ import annotations

from pathlib import Path

import pytest

from wspack.app.adapters import ManifestPackLister, ManifestWorkspaceResolver
from wspack.app.adapters.pack_list import IgnoreRule, is_ignored, matches_files_field
from wspack.config import Settings


@pytest.fixture
def settings(temp_dir: Path) -> Settings:
    return Settings(data_dir=temp_dir / "appdata")


def _pack_list(settings: Settings, cwd: Path) -> list[str]:
    resolver = ManifestWorkspaceResolver(settings)
    _, workspace = resolver.find(cwd)
    return ManifestPackLister(settings, resolver).gen_pack_list(workspace)


def test_lists_sorted_files_and_skips_dependencies(settings: Settings, make_workspace) -> None:
    root = make_workspace(
        manifest={"name": "foo", "version": "1.0.0"},
        files={
            "lib/b.js": "b",
            "a.js": "a",
            "node_modules/dep/index.js": "dep",
            "yarn.lock": "",
            ".gitignore": "dist/\n",
            "dist/out.js": "built",
        },
    )

    assert _pack_list(settings, root) == ["a.js", "lib/b.js", "package.json"]


def test_files_field_restricts_contents_but_keeps_manifest_and_readme(
    settings: Settings, make_workspace
) -> None:
    root = make_workspace(
        manifest={"name": "foo", "files": ["lib"]},
        files={"README.md": "hi", "lib/b.js": "b", "src/c.js": "c", "LICENSE": "MIT"},
    )

    assert _pack_list(settings, root) == ["LICENSE", "README.md", "lib/b.js", "package.json"]


def test_npmignore_takes_precedence_over_gitignore(settings: Settings, make_workspace) -> None:
    root = make_workspace(
        manifest={"name": "foo"},
        files={
            ".gitignore": "lib\n",
            ".npmignore": "*.log\n",
            "lib/b.js": "b",
            "debug.log": "noise",
        },
    )

    assert _pack_list(settings, root) == ["lib/b.js", "package.json"]


def test_negated_rule_reincludes_file(settings: Settings, make_workspace) -> None:
    root = make_workspace(
        manifest={"name": "foo"},
        files={".npmignore": "*.js\n!keep.js\n", "drop.js": "", "keep.js": ""},
    )

    assert _pack_list(settings, root) == ["keep.js", "package.json"]


def test_nested_workspaces_are_not_packed_with_root(settings: Settings, make_workspace) -> None:
    root = make_workspace(
        manifest={"name": "root", "private": True, "workspaces": ["packages/*"]},
        files={"yarn.lock": "", "packages/notes.txt": "hello", "index.js": ""},
    )
    make_workspace(
        "project/packages/a",
        manifest={"name": "a", "version": "0.1.0"},
        files={"index.js": ""},
    )

    assert _pack_list(settings, root) == ["index.js", "package.json", "packages/notes.txt"]
    assert _pack_list(settings, root / "packages" / "a") == ["index.js", "package.json"]


def test_previous_default_archive_is_excluded(settings: Settings, make_workspace) -> None:
    root = make_workspace(
        manifest={"name": "foo"},
        files={"package.tgz": "old archive", "index.js": ""},
    )

    assert _pack_list(settings, root) == ["index.js", "package.json"]


def test_ignore_rules_last_match_wins() -> None:
    rules = [
        rule
        for line in ["# comment", "", "build/", "*.map", "!keep.map", "/top.txt"]
        if (rule := IgnoreRule.parse(line)) is not None
    ]

    assert len(rules) == 4
    assert is_ignored(rules, "build", is_dir=True)
    assert not is_ignored(rules, "build", is_dir=False)
    assert is_ignored(rules, "src/app.js.map", is_dir=False)
    assert not is_ignored(rules, "src/keep.map", is_dir=False)
    assert is_ignored(rules, "top.txt", is_dir=False)
    assert not is_ignored(rules, "nested/top.txt", is_dir=False)


@pytest.mark.parametrize(
    ("relative", "expected"),
    [
        ("lib/index.js", True),
        ("lib", True),
        ("dist/types/a.d.ts", True),
        ("dist/main.js", False),
        ("src/index.js", False),
    ],
)
def test_matches_files_field(relative: str, expected: bool) -> None:
    patterns = ["./lib/", "dist/types"]
    assert matches_files_field(patterns, relative) is expected


@pytest.mark.parametrize(
    ("line", "relative", "is_dir", "expected"),
    [
        ("lib/*.js", "lib/index.js", False, True),
        ("lib/*.js", "lib/sub/keep.js", False, False),
        ("**/fixtures", "fixtures", True, True),
        ("**/fixtures", "test/unit/fixtures", True, True),
        ("docs/**/*.md", "docs/guide.md", False, True),
        ("docs/**/*.md", "docs/a/b/guide.md", False, True),
        ("docs/**/*.md", "other/docs/guide.md", False, False),
    ],
)
def test_anchored_rules_match_per_path_segment(
    line: str, relative: str, is_dir: bool, expected: bool
) -> None:
    rule = IgnoreRule.parse(line)

    assert rule is not None
    assert rule.matches(relative, is_dir=is_dir) is expected


def test_single_star_rule_keeps_nested_files(settings: Settings, make_workspace) -> None:
    root = make_workspace(
        manifest={"name": "foo"},
        files={
            ".npmignore": "lib/*.js\n**/fixtures\n",
            "lib/drop.js": "",
            "lib/sub/keep.js": "",
            "fixtures/data.json": "{}",
            "test/fixtures/more.json": "{}",
            "test/unit.js": "",
        },
    )

    assert _pack_list(settings, root) == ["lib/sub/keep.js", "package.json", "test/unit.js"]
