"""
Centralized exception hierarchy for gren-compiler-library.

Every error raised by this package derives from GrenCompilerError so that
embedding callers can catch the whole family with a single except clause.
"""

from typing import Any, Dict, List, Mapping, Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class GrenCompilerError(Exception):
    """Base exception for all gren-compiler-library errors."""

    pass


class UnsupportedPlatformError(GrenCompilerError, RuntimeError):
    """Raised when no prebuilt compiler exists for the host platform."""

    def __init__(self, platform_name: str):
        self.platform_name = platform_name
        super().__init__(f"This package doesn't support the {platform_name} platform")


class ConfigError(GrenCompilerError):
    """Configuration parsing or validation error."""

    pass


# ============================================================================
# Installation Exceptions
# ============================================================================


class DownloadError(GrenCompilerError):
    """Raised when the compiler executable cannot be downloaded or written."""

    pass


class ChecksumError(DownloadError):
    """Raised when a downloaded executable doesn't match the expected checksum."""

    pass


class InstallLockTimeout(DownloadError):
    """Raised when the install lock cannot be acquired within timeout."""

    pass


# ============================================================================
# Process Exceptions
# ============================================================================


class ProcessError(GrenCompilerError):
    """
    Raised when the compiler process fails.

    Covers non-zero exit, termination by signal and spawn failure.

    Attributes:
        args_list: Argument vector passed to the compiler
        returncode: Exit status (negative for signals, None if never started)
        stdout: Captured standard output
        stderr: Captured standard error
    """

    def __init__(
        self,
        message: str,
        args_list: Optional[List[str]] = None,
        returncode: Optional[int] = None,
        stdout: str = "",
        stderr: str = "",
    ):
        self.args_list = list(args_list or [])
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(message)


class ProcessTimeoutError(ProcessError):
    """Raised when the compiler process is killed after exceeding its timeout."""

    def __init__(self, timeout_ms: int, args_list=None, stdout="", stderr=""):
        self.timeout_ms = timeout_ms
        super().__init__(
            f"Gren compiler timed out after {timeout_ms}ms",
            args_list=args_list,
            returncode=None,
            stdout=stdout,
            stderr=stderr,
        )


class CompileError(GrenCompilerError):
    """
    Structured diagnostic reported by the compiler.

    Raised instead of ProcessError when the compiler exits with a JSON
    report on stderr. The report is kept as-is in ``diagnostic``.

    Attributes:
        path: Project directory the command ran in
        diagnostic: Parsed JSON report (e.g. ``{"type": "compile-errors", ...}``)
    """

    def __init__(self, path: str, diagnostic: Mapping[str, Any]):
        self.path = str(path)
        self.diagnostic: Dict[str, Any] = dict(diagnostic)
        super().__init__(f"Failed to compile project: {self.path}")

    @property
    def type(self) -> Optional[str]:
        """Report type, e.g. 'compile-errors' or 'error'."""
        return self.diagnostic.get("type")

    @property
    def errors(self) -> List[Any]:
        """Per-module error list for 'compile-errors' reports."""
        return self.diagnostic.get("errors", [])


__all__ = [
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
