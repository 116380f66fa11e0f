"""
Pytest configuration and shared fixtures for gren-compiler-library tests.
"""

import sys

import pytest

# Import test fixtures to make them available to all tests
# These imports register the fixtures with pytest's fixture discovery system
# ruff: noqa: F401
from tests.fixtures.compilers import (
    compiler_config,
    project_dir,
    fake_compiler,
)

from gren_compiler.compiler import get_default_compiler
from gren_compiler.core.platform import clear_platform_cache


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """
    Skip integration tests unless --integration flag is provided.
    Skip tests that run fake shell-script compilers on Windows.
    """
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)
    if sys.platform == "win32":
        skip_posix = pytest.mark.skip(reason="fake compilers are shell scripts")
        for item in items:
            if "posix" in item.keywords:
                item.add_marker(skip_posix)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )
    config.addinivalue_line(
        "markers", "posix: marks tests that run /bin/sh fake compilers"
    )


@pytest.fixture(autouse=True)
def reset_caches():
    """Drop cached platform detection and default compiler between tests."""
    clear_platform_cache()
    get_default_compiler.cache_clear()
    yield
    clear_platform_cache()
    get_default_compiler.cache_clear()
