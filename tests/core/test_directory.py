"""
Unit tests for cache directory layout.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from gren_compiler.core.directory import (
    get_cache_root,
    get_compiler_path,
    get_version_dir,
)
from gren_compiler.core.exceptions import ConfigError


class TestGetCompilerPath:
    """Test get_compiler_path function."""

    def test_layout(self, tmp_path):
        """Test path is <root>/gren/<version>/bin/gren."""
        path = get_compiler_path(tmp_path, "0.2.0")

        assert path == tmp_path / "gren" / "0.2.0" / "bin" / "gren"

    def test_windows_extension(self, tmp_path):
        """Test extension is appended to the executable name."""
        path = get_compiler_path(tmp_path, "0.2.0", ".exe")

        assert path.name == "gren.exe"

    def test_deterministic(self, tmp_path):
        """Test same inputs give identical paths."""
        first = get_compiler_path(tmp_path, "0.2.0")
        second = get_compiler_path(str(tmp_path), "0.2.0")

        assert first == second
        assert str(first) == str(second)

    def test_versions_do_not_collide(self, tmp_path):
        """Test different versions get different paths."""
        assert get_compiler_path(tmp_path, "0.2.0") != get_compiler_path(
            tmp_path, "0.3.0"
        )

    def test_no_filesystem_access(self, tmp_path):
        """Test building the path creates nothing."""
        get_compiler_path(tmp_path / "missing", "0.2.0")

        assert not (tmp_path / "missing").exists()


def test_get_version_dir(tmp_path):
    """Test version directory is the parent of bin/."""
    assert get_version_dir(tmp_path, "0.2.0") == get_compiler_path(
        tmp_path, "0.2.0"
    ).parent.parent


class TestGetCacheRoot:
    """Test get_cache_root function."""

    def test_xdg_cache_home(self, tmp_path):
        """Test XDG_CACHE_HOME wins when set."""
        with patch.dict(os.environ, {"XDG_CACHE_HOME": str(tmp_path)}):
            assert get_cache_root() == tmp_path

    def test_posix_default(self, tmp_path):
        """Test ~/.cache is used on POSIX without XDG_CACHE_HOME."""
        env = {k: v for k, v in os.environ.items() if k != "XDG_CACHE_HOME"}
        with patch.dict(os.environ, env, clear=True), patch(
            "gren_compiler.core.directory.platform.system", return_value="Linux"
        ), patch("gren_compiler.core.directory.Path.home", return_value=tmp_path):
            assert get_cache_root() == tmp_path / ".cache"

    def test_windows_local_app_data(self, tmp_path):
        """Test %LOCALAPPDATA% is used on Windows."""
        env = {"LOCALAPPDATA": str(tmp_path)}
        with patch.dict(os.environ, env, clear=True), patch(
            "gren_compiler.core.directory.platform.system", return_value="Windows"
        ):
            assert get_cache_root() == Path(str(tmp_path))

    def test_windows_without_local_app_data(self):
        """Test missing LOCALAPPDATA on Windows raises ConfigError."""
        with patch.dict(os.environ, {}, clear=True), patch(
            "gren_compiler.core.directory.platform.system", return_value="Windows"
        ):
            with pytest.raises(ConfigError, match="LOCALAPPDATA"):
                get_cache_root()
