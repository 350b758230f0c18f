"""Tests for cclint.project module."""

from __future__ import annotations

import json
from pathlib import Path

from cclint.project import detect_package_manager, detect_project_info, find_project_root


class TestFindProjectRoot:
    """Tests for find_project_root()."""

    def test_marker_in_start_dir(self, tmp_path: Path) -> None:
        """Test a directory with a marker is its own root."""
        (tmp_path / ".claude").mkdir()
        assert find_project_root(tmp_path) == tmp_path.resolve()

    def test_climbs_to_ancestor(self, tmp_path: Path) -> None:
        """Test the nearest ancestor with a marker is returned."""
        (tmp_path / "package.json").write_text("{}")
        nested = tmp_path / "src" / "deep"
        nested.mkdir(parents=True)
        assert find_project_root(nested) == tmp_path.resolve()

    def test_nearest_marker_wins(self, tmp_path: Path) -> None:
        """Test an inner project shadows an outer one."""
        (tmp_path / ".git").mkdir()
        inner = tmp_path / "packages" / "app"
        inner.mkdir(parents=True)
        (inner / "pyproject.toml").write_text("")
        assert find_project_root(inner / ".") == inner.resolve()


class TestDetectPackageManager:
    """Tests for detect_package_manager()."""

    def test_none(self, tmp_path: Path) -> None:
        """Test no lock file means no package manager."""
        assert detect_package_manager(tmp_path) is None

    def test_lock_files(self, tmp_path: Path) -> None:
        """Test lock files map to their package manager."""
        (tmp_path / "uv.lock").write_text("")
        assert detect_package_manager(tmp_path) == "uv"
        (tmp_path / "yarn.lock").write_text("")
        assert detect_package_manager(tmp_path) == "yarn"


class TestDetectProjectInfo:
    """Tests for detect_project_info()."""

    def test_bare_directory(self, tmp_path: Path) -> None:
        """Test an empty directory has no markers and no config."""
        info = detect_project_info(tmp_path)
        assert info.root == tmp_path
        assert not info.has_git
        assert not info.has_claude_dir
        assert info.project_name is None
        assert info.cclint_config is None

    def test_name_from_package_json(self, tmp_path: Path) -> None:
        """Test the package.json name is used first."""
        (tmp_path / "package.json").write_text(json.dumps({"name": "web-app"}))
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "py-app"\n')
        info = detect_project_info(tmp_path)
        assert info.has_package_json
        assert info.has_pyproject
        assert info.project_name == "web-app"

    def test_name_from_pyproject(self, tmp_path: Path) -> None:
        """Test pyproject [project].name is used without package.json."""
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "py-app"\n')
        assert detect_project_info(tmp_path).project_name == "py-app"

    def test_unreadable_manifests(self, tmp_path: Path) -> None:
        """Test malformed manifests are treated as absent."""
        (tmp_path / "package.json").write_text("{not json")
        (tmp_path / "pyproject.toml").write_text("[project\n")
        info = detect_project_info(tmp_path)
        assert not info.has_package_json
        assert not info.has_pyproject

    def test_loads_config(self, tmp_path: Path) -> None:
        """Test the project's cclint config is attached."""
        (tmp_path / ".cclintrc.json").write_text(json.dumps({"rules": {"strict": False}}))
        info = detect_project_info(tmp_path)
        assert info.cclint_config is not None
        assert info.cclint_config.rules.strict is False
        assert detect_project_info(tmp_path, load_cclint_config=False).cclint_config is None

    def test_claude_dir_and_git(self, tmp_path: Path) -> None:
        """Test marker directories are detected."""
        (tmp_path / ".claude").mkdir()
        (tmp_path / ".git").mkdir()
        info = detect_project_info(tmp_path)
        assert info.has_claude_dir
        assert info.has_git
