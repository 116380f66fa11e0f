"""
Platform detection for gren-compiler-library.

Maps the host operating system to the name of the prebuilt compiler asset
published on the Gren release page and to the executable file extension.

Usage:
    from gren_compiler.core.platform import detect_platform

    target = detect_platform()
    print(target.asset_name)  # 'gren_linux'
"""

import functools
import platform
from dataclasses import dataclass

from .exceptions import UnsupportedPlatformError


@dataclass(frozen=True)
class PlatformTarget:
    """
    Download target for one operating system.

    Attributes:
        name: Normalized OS name ('linux', 'macos', 'windows')
        asset_name: File name of the release asset (download URL suffix)
        extension: Executable extension ('.exe' on Windows, '' otherwise)
    """

    name: str
    asset_name: str
    extension: str = ""

    @property
    def executable_name(self) -> str:
        """Local file name of the compiler executable."""
        return f"gren{self.extension}"


LINUX = PlatformTarget("linux", "gren_linux")
MACOS = PlatformTarget("macos", "gren_mac")
WINDOWS = PlatformTarget("windows", "gren.exe", ".exe")

_PLATFORM_MAP = {
    "linux": LINUX,
    "darwin": MACOS,
    "macos": MACOS,
    "windows": WINDOWS,
    "win32": WINDOWS,
}


def resolve_platform(system: str) -> PlatformTarget:
    """
    Resolve the download target for an operating system identifier.

    Args:
        system: OS identifier as reported by ``platform.system()`` or
            ``sys.platform`` (case-insensitive)

    Returns:
        PlatformTarget for the OS

    Raises:
        UnsupportedPlatformError: If no prebuilt compiler exists for the OS

    Example:
        >>> resolve_platform("Windows").extension
        '.exe'
    """
    target = _PLATFORM_MAP.get(system.lower())
    if target is None:
        raise UnsupportedPlatformError(system)
    return target


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformTarget:
    """
    Detect the download target for the running host.

    This function is cached - it only runs detection once per process.
    """
    return resolve_platform(platform.system())


def get_supported_platforms() -> list[str]:
    """Get the normalized names of all supported platforms."""
    return [LINUX.name, MACOS.name, WINDOWS.name]


def clear_platform_cache():
    """
    Clear the platform detection cache.

    This forces the next call to detect_platform() to re-detect.
    """
    detect_platform.cache_clear()


__all__ = [
    "PlatformTarget",
    "resolve_platform",
    "detect_platform",
    "get_supported_platforms",
    "clear_platform_cache",
]
