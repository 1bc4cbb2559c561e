"""Tests for hcp_setup.platform.files module."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

from hcp_setup.platform.files import atomic_write_text, make_executable


class TestAtomicWriteText:
    def test_creates_parents_and_writes(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "marker"
        atomic_write_text(target, "done")
        assert target.read_text(encoding="utf-8") == "done"

    def test_leaves_no_temp_files(self, tmp_path: Path) -> None:
        target = tmp_path / "marker"
        atomic_write_text(target, "one")
        atomic_write_text(target, "two")
        assert [p.name for p in tmp_path.iterdir()] == ["marker"]
        assert target.read_text(encoding="utf-8") == "two"


class TestMakeExecutable:
    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    def test_sets_exec_bits(self, tmp_path: Path) -> None:
        target = tmp_path / "hcp"
        target.write_text("#!/bin/sh\n", encoding="utf-8")
        target.chmod(0o644)
        make_executable(target)
        assert os.access(target, os.X_OK)
        assert target.stat().st_mode & 0o111 == 0o111
