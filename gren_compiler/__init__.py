"""
gren-compiler-library - download the Gren compiler and run it from Python.

The compiler executable for the pinned release is downloaded into the user
cache directory on first use. The helpers below shell out to it.
"""

from .compiler import (
    GrenCompiler,
    compiler_path,
    ensure_installed,
    run,
    install_dependencies,
    compile_project,
    compile_docs,
    validate_formatting,
    validate_project,
)

from .core import (
    COMPILER_VERSION,
    CompilerConfig,
    InvocationOptions,
    ExecutionResult,
    load_config,
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
    "GrenCompiler",
    "compiler_path",
    "ensure_installed",
    "run",
    "install_dependencies",
    "compile_project",
    "compile_docs",
    "validate_formatting",
    "validate_project",
    "COMPILER_VERSION",
    "CompilerConfig",
    "InvocationOptions",
    "ExecutionResult",
    "load_config",
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
