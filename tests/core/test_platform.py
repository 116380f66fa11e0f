"""
Unit tests for platform resolution.
"""

import pytest
from unittest.mock import patch

from gren_compiler.core.exceptions import UnsupportedPlatformError
from gren_compiler.core.platform import (
    PlatformTarget,
    clear_platform_cache,
    detect_platform,
    get_supported_platforms,
    resolve_platform,
)


class TestResolvePlatform:
    """Test resolve_platform function."""

    @pytest.mark.parametrize(
        "system,asset_name,extension",
        [
            ("linux", "gren_linux", ""),
            ("Linux", "gren_linux", ""),
            ("darwin", "gren_mac", ""),
            ("Darwin", "gren_mac", ""),
            ("macos", "gren_mac", ""),
            ("Windows", "gren.exe", ".exe"),
            ("win32", "gren.exe", ".exe"),
        ],
    )
    def test_supported_platforms(self, system, asset_name, extension):
        """Test known systems map to the published asset and extension."""
        target = resolve_platform(system)

        assert target.asset_name == asset_name
        assert target.extension == extension

    @pytest.mark.parametrize("system", ["FreeBSD", "SunOS", "aix", ""])
    def test_unsupported_platform(self, system):
        """Test unknown systems raise UnsupportedPlatformError naming them."""
        with pytest.raises(UnsupportedPlatformError) as exc_info:
            resolve_platform(system)

        assert exc_info.value.platform_name == system
        assert f"doesn't support the {system} platform" in str(exc_info.value)

    def test_unsupported_platform_is_runtime_error(self):
        """Test the error can be caught as RuntimeError."""
        with pytest.raises(RuntimeError):
            resolve_platform("plan9")

    def test_executable_name(self):
        """Test executable name carries the extension."""
        assert resolve_platform("windows").executable_name == "gren.exe"
        assert resolve_platform("linux").executable_name == "gren"

    def test_targets_are_immutable(self):
        """Test PlatformTarget is frozen."""
        target = resolve_platform("linux")

        with pytest.raises(AttributeError):
            target.extension = ".exe"


class TestDetectPlatform:
    """Test detect_platform function."""

    def test_detect_uses_platform_system(self):
        """Test detection resolves platform.system()."""
        with patch(
            "gren_compiler.core.platform.platform.system", return_value="Darwin"
        ):
            clear_platform_cache()
            assert detect_platform() == PlatformTarget("macos", "gren_mac")

    def test_detect_is_cached(self):
        """Test detection runs once until the cache is cleared."""
        with patch(
            "gren_compiler.core.platform.platform.system", return_value="Linux"
        ) as mock_system:
            clear_platform_cache()
            detect_platform()
            detect_platform()

            assert mock_system.call_count == 1

    def test_detect_unsupported_fails(self):
        """Test detection on an unsupported host raises."""
        with patch(
            "gren_compiler.core.platform.platform.system", return_value="Haiku"
        ):
            clear_platform_cache()
            with pytest.raises(UnsupportedPlatformError, match="Haiku"):
                detect_platform()


def test_get_supported_platforms():
    """Test supported platform names."""
    assert get_supported_platforms() == ["linux", "macos", "windows"]
