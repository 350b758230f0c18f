"""Tests for linter file discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from cclint.config import CclintConfig, LintRules
from cclint.linters.discovery import discover, existing_file, should_skip_file


@pytest.fixture
def agents_dir(tmp_path: Path) -> Path:
    """A .claude/agents directory with two agents and a non-markdown file."""
    directory = tmp_path / ".claude" / "agents"
    (directory / "nested").mkdir(parents=True)
    (directory / "b.md").write_text("b")
    (directory / "nested" / "a.md").write_text("a")
    (directory / "notes.txt").write_text("not markdown")
    return directory


class TestDiscover:
    """Tests for discover()."""

    def test_finds_markdown_recursively(self, tmp_path: Path, agents_dir: Path) -> None:
        """Test markdown files are found in nested directories, sorted."""
        files = discover(tmp_path, [agents_dir])
        assert files == [agents_dir / "b.md", agents_dir / "nested" / "a.md"]

    def test_missing_directories_skipped(self, tmp_path: Path, agents_dir: Path) -> None:
        """Test candidate directories that do not exist are ignored."""
        files = discover(tmp_path, [tmp_path / "agents", agents_dir])
        assert len(files) == 2

    def test_custom_suffix(self, tmp_path: Path, agents_dir: Path) -> None:
        """Test the suffix selects which files are returned."""
        assert discover(tmp_path, [agents_dir], suffix=".txt") == [agents_dir / "notes.txt"]

    def test_symlinked_file_skipped_by_default(self, tmp_path: Path, agents_dir: Path) -> None:
        """Test symlinks are not followed unless asked."""
        (tmp_path / "shared.md").write_text("shared")
        (agents_dir / "shared.md").symlink_to(tmp_path / "shared.md")
        assert agents_dir / "shared.md" not in discover(tmp_path, [agents_dir])

    def test_symlinked_file_followed_inside_root(self, tmp_path: Path, agents_dir: Path) -> None:
        """Test a followed symlink inside the root is returned under its link path."""
        (tmp_path / "shared.md").write_text("shared")
        (agents_dir / "shared.md").symlink_to(tmp_path / "shared.md")
        files = discover(tmp_path, [agents_dir], follow_symlinks=True)
        assert agents_dir / "shared.md" in files

    def test_symlink_outside_root_never_followed(self, tmp_path: Path) -> None:
        """Test links resolving outside the project root are skipped even when following."""
        root = tmp_path / "project"
        agents = root / ".claude" / "agents"
        agents.mkdir(parents=True)
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "secret.md").write_text("secret")
        (agents / "secret.md").symlink_to(outside / "secret.md")
        (agents / "external").symlink_to(outside, target_is_directory=True)

        assert discover(root, [agents], follow_symlinks=True) == []

    def test_circular_symlinks_terminate(self, tmp_path: Path, agents_dir: Path) -> None:
        """Test directory cycles are walked once."""
        (agents_dir / "nested" / "loop").symlink_to(agents_dir, target_is_directory=True)
        (agents_dir / "up").symlink_to(tmp_path / ".claude", target_is_directory=True)
        files = discover(tmp_path, [agents_dir], follow_symlinks=True)
        assert files == [agents_dir / "b.md", agents_dir / "nested" / "a.md"]

    def test_broken_symlink_skipped(self, tmp_path: Path, agents_dir: Path) -> None:
        """Test dangling links are ignored."""
        (agents_dir / "gone.md").symlink_to(tmp_path / "missing.md")
        assert len(discover(tmp_path, [agents_dir], follow_symlinks=True)) == 2

    def test_deduplicates_by_real_path(self, tmp_path: Path, agents_dir: Path) -> None:
        """Test a file reachable twice is returned once."""
        (agents_dir / "z-alias.md").symlink_to(agents_dir / "b.md")
        files = discover(tmp_path, [agents_dir], follow_symlinks=True)
        assert files == [agents_dir / "b.md", agents_dir / "nested" / "a.md"]

    def test_symlinked_search_dir_skipped(self, tmp_path: Path, agents_dir: Path) -> None:
        """Test a candidate directory that is itself a symlink needs following."""
        link = tmp_path / "agents"
        link.symlink_to(agents_dir, target_is_directory=True)
        assert discover(tmp_path, [link]) == []
        assert len(discover(tmp_path, [link], follow_symlinks=True)) == 2

    def test_exclude_patterns(
        self, tmp_path: Path, agents_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test configured exclude patterns drop matching files."""
        monkeypatch.chdir(tmp_path)
        config = CclintConfig(rules=LintRules(exclude_patterns=["nested/*"]))
        assert discover(tmp_path, [agents_dir], config) == [agents_dir / "b.md"]

    def test_include_patterns_add_directories(self, tmp_path: Path, agents_dir: Path) -> None:
        """Test include patterns add search directories below the root."""
        extra = tmp_path / "team" / "agents"
        extra.mkdir(parents=True)
        (extra / "c.md").write_text("c")
        config = CclintConfig(rules=LintRules(include_patterns=["team/*"]))
        files = discover(tmp_path, [agents_dir], config)
        assert extra / "c.md" in files

    def test_absolute_include_pattern_inside_root(self, tmp_path: Path, agents_dir: Path) -> None:
        """Test an absolute include pattern below the root is applied, not fatal."""
        extra = tmp_path / "team" / "agents"
        extra.mkdir(parents=True)
        (extra / "c.md").write_text("c")
        config = CclintConfig(
            rules=LintRules(include_patterns=[str(tmp_path / "te*" / "agents")])
        )
        files = discover(tmp_path, [agents_dir], config)
        assert extra / "c.md" in files

    def test_absolute_include_pattern_outside_root_ignored(self, tmp_path: Path) -> None:
        """Test an absolute include pattern elsewhere on disk is dropped."""
        root = tmp_path / "project"
        root.mkdir()
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "x.md").write_text("x")
        config = CclintConfig(rules=LintRules(include_patterns=[str(tmp_path / "out*")]))
        assert discover(root, [], config) == []

    def test_include_pattern_outside_root_ignored(self, tmp_path: Path) -> None:
        """Test include patterns escaping the root are dropped."""
        root = tmp_path / "project"
        root.mkdir()
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "x.md").write_text("x")
        config = CclintConfig(rules=LintRules(include_patterns=["../outside"]))
        assert discover(root, [], config) == []


class TestShouldSkipFile:
    """Tests for should_skip_file()."""

    def test_no_patterns(self, tmp_path: Path) -> None:
        """Test nothing is skipped without patterns."""
        assert not should_skip_file(tmp_path / "a.md", None)
        assert not should_skip_file(tmp_path / "a.md", [])

    def test_wildcards(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test * and ? wildcards match anywhere in the relative path."""
        monkeypatch.chdir(tmp_path)
        path = tmp_path / ".claude" / "agents" / "draft-1.md"
        assert should_skip_file(path, ["draft-?.md"])
        assert should_skip_file(path, ["agents/*"])
        assert not should_skip_file(path, ["commands/*"])

    def test_dots_are_literal(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test regex metacharacters in patterns match literally."""
        monkeypatch.chdir(tmp_path)
        assert not should_skip_file(tmp_path / "aXmd", [".md"])


class TestExistingFile:
    """Tests for existing_file()."""

    def test_regular_file(self, tmp_path: Path) -> None:
        """Test a regular file is returned."""
        path = tmp_path / "CLAUDE.md"
        path.write_text("# Doc")
        assert existing_file(path, tmp_path) == path

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file is None."""
        assert existing_file(tmp_path / "CLAUDE.md", tmp_path) is None

    def test_directory_is_not_a_file(self, tmp_path: Path) -> None:
        """Test directories are not returned."""
        (tmp_path / "CLAUDE.md").mkdir()
        assert existing_file(tmp_path / "CLAUDE.md", tmp_path) is None

    def test_symlink_requires_following(self, tmp_path: Path) -> None:
        """Test symlinked files need follow_symlinks and must stay in the root."""
        (tmp_path / "docs.md").write_text("# Doc")
        link = tmp_path / "CLAUDE.md"
        link.symlink_to(tmp_path / "docs.md")
        assert existing_file(link, tmp_path) is None
        assert existing_file(link, tmp_path, follow_symlinks=True) == link

    def test_symlink_outside_root(self, tmp_path: Path) -> None:
        """Test symlinked files resolving outside the root are rejected."""
        root = tmp_path / "project"
        root.mkdir()
        (tmp_path / "docs.md").write_text("# Doc")
        link = root / "CLAUDE.md"
        link.symlink_to(tmp_path / "docs.md")
        assert existing_file(link, root, follow_symlinks=True) is None
