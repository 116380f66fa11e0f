"""
Compiler process invocation.

Runs the cached compiler executable with a working directory, argument
vector, environment and timeout, capturing stdout and stderr as text.
"""

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from .exceptions import ProcessError, ProcessTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 30_000


@dataclass
class InvocationOptions:
    """
    Per-call options for a compiler command.

    Attributes:
        env: Environment of the child process. The child sees only these
            variables; nothing is inherited from the parent.
        timeout: Milliseconds before the child is killed; zero or less
            means the default (30000)
        target: Relative path of the application entrypoint, for `gren make`
    """

    env: Dict[str, str] = field(default_factory=dict)
    timeout: int = DEFAULT_TIMEOUT_MS
    target: Optional[str] = None


@dataclass
class ExecutionResult:
    """Captured output of a successful compiler run."""

    stdout: str
    stderr: str
    returncode: int = 0


def run_process(
    executable: Union[str, Path],
    cwd: Union[str, Path],
    args: Sequence[str],
    options: Optional[InvocationOptions] = None,
) -> ExecutionResult:
    """
    Run an executable and capture its output.

    Args:
        executable: Program to run
        cwd: Working directory of the child
        args: Argument vector (without the program name)
        options: Environment and timeout (defaults: empty env, 30000ms)

    Returns:
        ExecutionResult for a zero exit status

    Raises:
        ProcessTimeoutError: If the child exceeded the timeout and was killed
        ProcessError: On non-zero exit, signal termination or spawn failure
    """
    options = options or InvocationOptions()
    timeout_ms = options.timeout
    if not timeout_ms or timeout_ms <= 0:
        timeout_ms = DEFAULT_TIMEOUT_MS
    arg_list: List[str] = [str(arg) for arg in args]
    command = [str(executable), *arg_list]

    logger.debug(f"Running {' '.join(command)} in {cwd}")

    try:
        result = subprocess.run(
            command,
            cwd=str(cwd),
            env=dict(options.env),
            capture_output=True,
            text=True,
            timeout=timeout_ms / 1000,
        )
    except subprocess.TimeoutExpired as e:
        # subprocess.run kills and reaps the child before raising
        raise ProcessTimeoutError(
            timeout_ms,
            args_list=arg_list,
            stdout=_as_text(e.stdout),
            stderr=_as_text(e.stderr),
        ) from e
    except OSError as e:
        raise ProcessError(
            f"Failed to start {executable}: {e}", args_list=arg_list
        ) from e

    if result.returncode != 0:
        if result.returncode < 0:
            message = f"Command failed: {' '.join(command)} (killed by signal {-result.returncode})"
        else:
            message = f"Command failed: {' '.join(command)} (exit code {result.returncode})"
        raise ProcessError(
            message,
            args_list=arg_list,
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )

    return ExecutionResult(stdout=result.stdout, stderr=result.stderr)


def _as_text(output: Union[str, bytes, None]) -> str:
    # TimeoutExpired may carry bytes even when text=True was requested
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output


__all__ = [
    "DEFAULT_TIMEOUT_MS",
    "InvocationOptions",
    "ExecutionResult",
    "run_process",
]
