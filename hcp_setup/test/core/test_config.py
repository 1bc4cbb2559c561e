"""Tests for hcp_setup.core.config module."""

from __future__ import annotations

from pathlib import Path

import pytest

from hcp_setup.core.config import DEFAULT_TIMEOUT, ConfigError, SetupConfig
from hcp_setup.core.result import Err, Ok
from hcp_setup.platform import paths


class TestFromEnv:
    """Tests for SetupConfig.from_env."""

    def test_reads_runner_variables(self, tmp_path: Path) -> None:
        env = {
            "INPUT_VERSION": " 0.5.0 ",
            "INPUT_PROJECT_ID": "proj-123",
            "RUNNER_TOOL_CACHE": str(tmp_path / "cache"),
            "RUNNER_TEMP": str(tmp_path / "temp"),
            "GITHUB_PATH": str(tmp_path / "path.txt"),
            "RUNNER_DEBUG": "1",
            "HCP_SETUP_TIMEOUT": "12.5",
        }
        result = SetupConfig.from_env(env)

        assert isinstance(result, Ok)
        config = result.value
        assert config.version == "0.5.0"
        assert config.project_id == "proj-123"
        assert config.tool_cache_dir == tmp_path / "cache"
        assert config.temp_dir == tmp_path / "temp"
        assert config.github_path_file == tmp_path / "path.txt"
        assert config.debug is True
        assert config.timeout == 12.5

    def test_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without runner variables, the user cache dir hosts the tool cache."""
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "xdg"))
        monkeypatch.setenv("LOCALAPPDATA", str(tmp_path / "xdg"))
        monkeypatch.setenv("USERPROFILE", str(tmp_path))
        paths.clear_caches()
        try:
            result = SetupConfig.from_env({})
            assert isinstance(result, Ok)
            config = result.value
            assert config.version == ""
            assert config.project_id == ""
            assert config.github_path_file is None
            assert config.debug is False
            assert config.timeout == DEFAULT_TIMEOUT
            assert config.tool_cache_dir.name == "tool-cache"
            assert config.tool_cache_dir.parent.name == "hcp-setup"
        finally:
            paths.clear_caches()

    def test_debug_only_for_one(self) -> None:
        result = SetupConfig.from_env({"RUNNER_DEBUG": "true", "RUNNER_TOOL_CACHE": "c"})
        assert isinstance(result, Ok)
        assert result.value.debug is False

    def test_invalid_timeout(self) -> None:
        result = SetupConfig.from_env({"HCP_SETUP_TIMEOUT": "soon", "RUNNER_TOOL_CACHE": "c"})
        assert isinstance(result, Err)
        assert result.error.key == "HCP_SETUP_TIMEOUT"
        assert "not a number" in str(result.error)

    def test_non_positive_timeout(self) -> None:
        result = SetupConfig.from_env({"HCP_SETUP_TIMEOUT": "0", "RUNNER_TOOL_CACHE": "c"})
        assert isinstance(result, Err)
        assert str(result.error) == "HCP_SETUP_TIMEOUT: must be positive"


class TestOverrides:
    """Tests for SetupConfig.with_overrides."""

    def test_cli_values_win(self, tmp_path: Path) -> None:
        base = SetupConfig(version="0.4.0", project_id="a")
        config = base.with_overrides(
            version=" ^0.5 ", project_id="b", tool_cache_dir=tmp_path, debug=True
        )
        assert config.version == "^0.5"
        assert config.project_id == "b"
        assert config.tool_cache_dir == tmp_path
        assert config.debug is True

    def test_none_keeps_environment_values(self) -> None:
        base = SetupConfig(version="0.4.0", project_id="a", debug=True)
        config = base.with_overrides()
        assert config == base

    def test_empty_version_overrides(self) -> None:
        """An explicit empty --version clears the environment value."""
        config = SetupConfig(version="0.4.0").with_overrides(version="")
        assert config.version == ""


class TestConfigError:
    def test_str_without_key(self) -> None:
        assert str(ConfigError("bad")) == "bad"
