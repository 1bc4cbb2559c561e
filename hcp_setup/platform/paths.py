"""User-level directories used when the runner provides none."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from .detection import Platform, detect_platform

__all__ = [
    "home",
    "user_cache_dir",
]

APP_NAME = "hcp-setup"


@lru_cache(maxsize=1)
def home() -> Path:
    """Get user's home directory.

    Uses USERPROFILE on Windows, HOME on Unix, then Path.home().
    """
    if detect_platform() == Platform.WINDOWS:
        userprofile = os.environ.get("USERPROFILE")
        if userprofile:
            return Path(userprofile)
    else:
        home_env = os.environ.get("HOME")
        if home_env:
            return Path(home_env)
    return Path.home()


@lru_cache(maxsize=1)
def user_cache_dir() -> Path:
    """Get the user-level cache directory for hcp-setup.

    Location: ~/.cache/hcp-setup/ (Linux), ~/Library/Caches/hcp-setup/ (macOS)
    or %LOCALAPPDATA%/hcp-setup/ (Windows).
    """
    match detect_platform():
        case Platform.WINDOWS:
            local_app_data = os.environ.get("LOCALAPPDATA")
            if local_app_data:
                return Path(local_app_data) / APP_NAME
            return home() / "AppData" / "Local" / APP_NAME
        case Platform.MACOS:
            return home() / "Library" / "Caches" / APP_NAME
        case _:
            xdg_cache = os.environ.get("XDG_CACHE_HOME")
            if xdg_cache:
                return Path(xdg_cache) / APP_NAME
            return home() / ".cache" / APP_NAME


def clear_caches() -> None:
    """Clear cached paths (tests change environment variables)."""
    home.cache_clear()
    user_cache_dir.cache_clear()
