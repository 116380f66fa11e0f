"""
High-level helpers for common Gren compiler commands.

Each helper makes sure the compiler is installed, runs one `gren` command in
a project directory and turns the compiler's JSON report into a CompileError
when the command fails.

Usage:
    from gren_compiler import compile_project, CompileError, InvocationOptions

    try:
        js = compile_project("path/to/app", InvocationOptions(target="src/Main.gren"))
    except CompileError as e:
        for module in e.errors:
            print(module["path"])
"""

import functools
import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, Optional, Sequence, Union

from .core.config import CompilerConfig, config_from_env
from .core.download import DownloadProgress, ensure_installed as install_compiler
from .core.exceptions import CompileError, ProcessError
from .core.process import ExecutionResult, InvocationOptions, run_process

logger = logging.getLogger(__name__)

STDOUT_SINK = "/dev/stdout"
NULL_SINK = os.devnull

PathLike = Union[str, Path]


class GrenCompiler:
    """
    The Gren compiler for one configuration (version, platform, cache root).

    Attributes:
        config: Compiler configuration
    """

    def __init__(self, config: Optional[CompilerConfig] = None):
        """
        Initialize compiler wrapper.

        Args:
            config: Compiler configuration (defaults for this host if None)
        """
        self.config = config or CompilerConfig()
        self._installed_path: Optional[Path] = None

    @property
    def compiler_path(self) -> Path:
        """Path of the cached compiler executable."""
        return self.config.compiler_path

    def ensure_installed(
        self, progress_callback: Optional[Callable[[DownloadProgress], None]] = None
    ) -> Path:
        """
        Download the compiler if it isn't cached yet.

        The install check (including the checksum, when configured) runs once
        per instance; later calls only check that the file is still there.
        """
        if self._installed_path is not None and self._installed_path.is_file():
            return self._installed_path
        self._installed_path = install_compiler(
            self.config, progress_callback=progress_callback
        )
        return self._installed_path

    def run(
        self,
        path: PathLike,
        args: Sequence[str],
        options: Optional[InvocationOptions] = None,
    ) -> ExecutionResult:
        """
        Execute an arbitrary command on the Gren compiler.

        Args:
            path: Project directory to run the command in
            args: Arguments passed to the compiler
            options: Environment variables and timeout (milliseconds)

        Raises:
            ProcessError: If the compiler fails or times out
        """
        self.ensure_installed()
        return run_process(self.compiler_path, path, args, options)

    def install_dependencies(
        self, path: PathLike, options: Optional[InvocationOptions] = None
    ) -> bool:
        """
        Install the dependencies of a Gren project.

        This executes `gren package install`.

        Raises:
            CompileError: If the compiler reported errors
            ProcessError: If the compiler failed without a JSON report
        """
        self._run_reporting(path, ["package", "install"], options)
        return True

    def compile_project(
        self, path: PathLike, options: Optional[InvocationOptions] = None
    ) -> str:
        """
        Compile a Gren project.

        This executes `gren make` and returns the compiled output. For an
        application, pass the relative path of the entrypoint as
        ``options.target``.

        Raises:
            CompileError: If the compiler reported errors
            ProcessError: If the compiler failed without a JSON report
        """
        options = options or InvocationOptions()
        args = ["make", f"--output={STDOUT_SINK}", "--report=json"]
        if options.target:
            args.append(options.target)

        return self._run_reporting(path, args, options)

    def compile_docs(
        self, path: PathLike, options: Optional[InvocationOptions] = None
    ) -> Any:
        """
        Compile the documentation of a Gren project.

        This executes `gren docs` and returns the parsed documentation.

        Raises:
            CompileError: If the compiler reported errors
            json.JSONDecodeError: If the compiler output isn't valid JSON
        """
        args = ["docs", f"--output={STDOUT_SINK}", "--report=json"]
        docs = self._run_reporting(path, args, options)
        return json.loads(docs)

    def validate_formatting(
        self, path: PathLike, options: Optional[InvocationOptions] = None
    ) -> bool:
        """
        Check that a Gren project has been formatted with `gren format`.

        This executes `gren format --validate`.
        """
        self._run_reporting(path, ["format", "--validate"], options)
        return True

    def validate_project(
        self, path: PathLike, options: Optional[InvocationOptions] = None
    ) -> bool:
        """
        Check that a Gren project compiles.

        Applications (``options.target`` set) are checked with `gren make`,
        packages with `gren docs` so that the documentation is validated too.
        Output is discarded.
        """
        options = options or InvocationOptions()
        if options.target:
            args = ["make", f"--output={NULL_SINK}", "--report=json", options.target]
        else:
            args = ["docs", f"--output={NULL_SINK}", "--report=json"]

        self._run_reporting(path, args, options)
        return True

    def _run_reporting(
        self,
        path: PathLike,
        args: Sequence[str],
        options: Optional[InvocationOptions],
    ) -> str:
        """Run a command that emits a JSON report on stderr when it fails."""
        try:
            return self.run(path, args, options).stdout
        except ProcessError as e:
            diagnostic = parse_report(e.stderr)
            if diagnostic is None:
                # Didn't get a report from the compiler
                raise
            logger.debug(f"Compiler reported {diagnostic.get('type')} for {path}")
            raise CompileError(str(path), diagnostic) from e


def parse_report(stderr: str) -> Optional[dict]:
    """
    Parse a `--report=json` diagnostic.

    Returns:
        The report object, or None if stderr isn't a JSON object
    """
    try:
        report = json.loads(stderr)
    except (TypeError, ValueError):
        return None
    return report if isinstance(report, dict) else None


@functools.lru_cache(maxsize=1)
def get_default_compiler() -> GrenCompiler:
    """Compiler for this host, configured from GREN_COMPILER_CONFIG if set."""
    return GrenCompiler(config_from_env())


def compiler_path() -> Path:
    """Path where the default compiler executable is cached."""
    return get_default_compiler().compiler_path


def ensure_installed(
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
) -> Path:
    """Download the default compiler to compiler_path() if it isn't there."""
    return get_default_compiler().ensure_installed(progress_callback)


def run(
    path: PathLike, args: Sequence[str], options: Optional[InvocationOptions] = None
) -> ExecutionResult:
    """Execute an arbitrary command on the default compiler."""
    return get_default_compiler().run(path, args, options)


def install_dependencies(
    path: PathLike, options: Optional[InvocationOptions] = None
) -> bool:
    """Install the dependencies of a Gren project (`gren package install`)."""
    return get_default_compiler().install_dependencies(path, options)


def compile_project(path: PathLike, options: Optional[InvocationOptions] = None) -> str:
    """Compile a Gren project (`gren make`) and return the output."""
    return get_default_compiler().compile_project(path, options)


def compile_docs(path: PathLike, options: Optional[InvocationOptions] = None) -> Any:
    """Compile and parse the documentation of a Gren project (`gren docs`)."""
    return get_default_compiler().compile_docs(path, options)


def validate_formatting(
    path: PathLike, options: Optional[InvocationOptions] = None
) -> bool:
    """Check formatting with `gren format --validate`."""
    return get_default_compiler().validate_formatting(path, options)


def validate_project(
    path: PathLike, options: Optional[InvocationOptions] = None
) -> bool:
    """Check that a Gren project compiles."""
    return get_default_compiler().validate_project(path, options)


__all__ = [
    "STDOUT_SINK",
    "NULL_SINK",
    "GrenCompiler",
    "parse_report",
    "get_default_compiler",
    "compiler_path",
    "ensure_installed",
    "run",
    "install_dependencies",
    "compile_project",
    "compile_docs",
    "validate_formatting",
    "validate_project",
]
