"""Platform abstraction layer."""

from .detection import (
    Arch,
    Platform,
    PlatformInfo,
    UnsupportedPlatformError,
    build_target,
    detect,
)
from .env import add_path
from .files import atomic_write_text, make_executable
from .paths import home, user_cache_dir
from .process import ProcessError, run, run_silent

__all__ = [
    # detection
    "Arch",
    "Platform",
    "PlatformInfo",
    "UnsupportedPlatformError",
    "build_target",
    "detect",
    # env
    "add_path",
    # files
    "atomic_write_text",
    "make_executable",
    # paths
    "home",
    "user_cache_dir",
    # process
    "ProcessError",
    "run",
    "run_silent",
]
