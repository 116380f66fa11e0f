"""
Core functionality for gren-compiler-library.

This package contains the foundational modules the command helpers and the
CLI depend on: platform resolution, cache layout, configuration, download,
locking and process invocation.
"""

from .platform import (
    PlatformTarget,
    resolve_platform,
    detect_platform,
    get_supported_platforms,
    clear_platform_cache,
)

from .directory import (
    get_cache_root,
    get_compiler_path,
)

from .config import (
    COMPILER_VERSION,
    CompilerConfig,
    load_config,
    config_from_env,
)

from .download import (
    DownloadProgress,
    download_file,
    ensure_installed,
    is_installed,
)

from .process import (
    InvocationOptions,
    ExecutionResult,
    run_process,
)

from .exceptions import (
    GrenCompilerError,
    UnsupportedPlatformError,
    ConfigError,
    DownloadError,
    ChecksumError,
    InstallLockTimeout,
    ProcessError,
    ProcessTimeoutError,
    CompileError,
)

__all__ = [
    "PlatformTarget",
    "resolve_platform",
    "detect_platform",
    "get_supported_platforms",
    "clear_platform_cache",
    "get_cache_root",
    "get_compiler_path",
    "COMPILER_VERSION",
    "CompilerConfig",
    "load_config",
    "config_from_env",
    "DownloadProgress",
    "download_file",
    "ensure_installed",
    "is_installed",
    "InvocationOptions",
    "ExecutionResult",
    "run_process",
    "GrenCompilerError",
    "UnsupportedPlatformError",
    "ConfigError",
    "DownloadError",
    "ChecksumError",
    "InstallLockTimeout",
    "ProcessError",
    "ProcessTimeoutError",
    "CompileError",
]
