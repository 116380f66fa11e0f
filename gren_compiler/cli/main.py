"""
`gren` command-line entry point.

Makes sure the compiler is installed, then runs it with this process's
arguments, standard streams and exit code passed through unchanged. There
are no options of our own: every argument belongs to the compiler.

Logging verbosity is controlled with GREN_COMPILER_LOG_LEVEL
(DEBUG, INFO, WARNING, ERROR; default INFO).
"""

import logging
import os
import subprocess
import sys
from typing import List, Optional

from gren_compiler.compiler import GrenCompiler
from gren_compiler.core.config import config_from_env
from gren_compiler.core.download import DownloadProgress
from gren_compiler.core.exceptions import GrenCompilerError

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV_VAR = "GREN_COMPILER_LOG_LEVEL"


def configure_logging() -> None:
    """Configure logging from GREN_COMPILER_LOG_LEVEL."""
    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, "INFO").upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        level = logging.INFO

    if level <= logging.DEBUG:
        format_str = "%(levelname)s [%(name)s] %(message)s"
    else:
        format_str = "%(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        stream=sys.stderr,
        force=True,  # Reconfigure if already configured
    )


def _log_progress(progress: DownloadProgress) -> None:
    logger.debug(str(progress))


def exit_code_for(returncode: int) -> int:
    """Map a child's return code to our exit code (128+N for signal N)."""
    if returncode < 0:
        return 128 - returncode
    return returncode


def run(argv: Optional[List[str]] = None, compiler: Optional[GrenCompiler] = None) -> int:
    """
    Install the compiler if needed and run it with ``argv``.

    Args:
        argv: Arguments for the compiler (default: sys.argv[1:])
        compiler: Compiler to run (default: configured from the environment)

    Returns:
        Exit code: the compiler's, or 1 if it couldn't be installed or started
    """
    if argv is None:
        argv = sys.argv[1:]

    try:
        if compiler is None:
            compiler = GrenCompiler(config_from_env())
        executable = compiler.ensure_installed(progress_callback=_log_progress)
    except GrenCompilerError as e:
        logger.error(f"Error: {e}")
        return 1

    try:
        result = subprocess.run([str(executable), *argv], check=False)
    except KeyboardInterrupt:
        return 130  # Standard exit code for SIGINT
    except OSError as e:
        logger.error(f"Error: failed to start {executable}: {e}")
        return 1

    return exit_code_for(result.returncode)


def main():
    """Main entry point for the `gren` console script."""
    configure_logging()
    sys.exit(run())


if __name__ == "__main__":
    main()
