"""Tests for hcp_setup.platform.env module."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from hcp_setup.platform.env import add_path


class TestAddPath:
    """Test PATH mutation."""

    def test_prepends_to_path(self, tmp_path: Path) -> None:
        env = {"PATH": "/usr/bin"}
        add_path(tmp_path, environ=env)
        assert env["PATH"] == f"{tmp_path}{os.pathsep}/usr/bin"

    def test_empty_path(self, tmp_path: Path) -> None:
        env: dict[str, str] = {}
        add_path(tmp_path, environ=env)
        assert env["PATH"] == str(tmp_path)

    def test_appends_to_github_path_file(self, tmp_path: Path) -> None:
        path_file = tmp_path / "runner" / "path.txt"
        env = {"PATH": ""}
        add_path(tmp_path / "a", github_path_file=path_file, environ=env)
        add_path(tmp_path / "b", github_path_file=path_file, environ=env)
        lines = path_file.read_text(encoding="utf-8").splitlines()
        assert lines == [str(tmp_path / "a"), str(tmp_path / "b")]

    def test_unwritable_github_path_file_raises(self, tmp_path: Path) -> None:
        env = {"PATH": "/usr/bin"}
        with pytest.raises(OSError):
            add_path(tmp_path / "bin", github_path_file=tmp_path, environ=env)
        assert env["PATH"].startswith(str(tmp_path / "bin"))
