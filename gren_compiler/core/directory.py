"""
Cache directory layout for gren-compiler-library.

The compiler executable lives in the user cache directory, keyed by version
so that different releases never collide on disk:

    <cache-root>/
        gren/
            <version>/
                install.lock : Serializes concurrent installers
                bin/
                    gren[.exe] : Downloaded compiler executable

The cache root follows the XDG base directory convention:
    - $XDG_CACHE_HOME when set
    - Windows: %LOCALAPPDATA%
    - Linux/macOS: ~/.cache
"""

import os
import platform
from pathlib import Path, PurePath
from typing import Union

from .exceptions import ConfigError

TOOL_NAME = "gren"


def get_cache_root() -> Path:
    """
    Get the platform-specific user cache directory.

    Returns:
        Path: The cache root. Nothing is created on disk.

    Example:
        >>> get_cache_root()
        PosixPath('/home/user/.cache')  # on Linux
    """
    xdg_cache = os.environ.get("XDG_CACHE_HOME")
    if xdg_cache:
        return Path(xdg_cache)

    if platform.system() == "Windows":
        local_app_data = os.environ.get("LOCALAPPDATA")
        if not local_app_data:
            raise ConfigError(
                "LOCALAPPDATA environment variable is not set. "
                "Cannot determine cache directory."
            )
        return Path(local_app_data)

    return Path.home() / ".cache"


def get_version_dir(cache_root: Union[str, Path], version: str) -> Path:
    """Get the directory holding everything for one compiler version."""
    if not isinstance(cache_root, (Path, PurePath)):
        cache_root = Path(cache_root)
    return cache_root / TOOL_NAME / version


def get_compiler_path(
    cache_root: Union[str, Path], version: str, extension: str = ""
) -> Path:
    """
    Get the path where the compiler executable for a version is expected.

    Pure function: the same inputs always give the same path, so concurrent
    installers on one machine converge on the same file.

    Args:
        cache_root: Base cache directory
        version: Compiler version string
        extension: Executable extension ('.exe' on Windows)

    Returns:
        Path: ``<cache_root>/gren/<version>/bin/gren<extension>``

    Example:
        >>> get_compiler_path(Path('/home/user/.cache'), '0.2.0')
        PosixPath('/home/user/.cache/gren/0.2.0/bin/gren')
    """
    return get_version_dir(cache_root, version) / "bin" / f"{TOOL_NAME}{extension}"


__all__ = [
    "TOOL_NAME",
    "get_cache_root",
    "get_version_dir",
    "get_compiler_path",
]
