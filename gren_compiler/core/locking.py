"""
Concurrent install control for gren-compiler-library.

Installing the compiler is guarded by a file lock next to the cached
executable, so that several threads or processes trying to install the same
version at once end up with exactly one download.

Usage:
    from gren_compiler.core.locking import install_lock

    with install_lock(config.lock_path, timeout=300):
        if not config.compiler_path.exists():
            download(...)
"""

import logging
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock, Timeout

from .exceptions import InstallLockTimeout

logger = logging.getLogger(__name__)


@contextmanager
def install_lock(lock_path: Path, timeout: int = 300):
    """
    Acquire the install lock for one compiler version.

    Args:
        lock_path: Lock file path (parent directory is created if missing)
        timeout: Maximum wait time in seconds (default: 300 for long downloads)

    Yields:
        None

    Raises:
        InstallLockTimeout: If the lock can't be acquired within timeout
    """
    lock_path = Path(lock_path)
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    lock = FileLock(lock_path, timeout=timeout)

    try:
        with lock:
            logger.debug(f"Acquired install lock: {lock_path}")
            yield
            logger.debug(f"Released install lock: {lock_path}")
    except Timeout as e:
        logger.error(
            f"Could not acquire install lock after {timeout}s. "
            "Another process may be downloading the compiler."
        )
        raise InstallLockTimeout(
            f"Could not acquire install lock {lock_path} after {timeout}s. "
            "Another process may be downloading the compiler."
        ) from e


__all__ = ["install_lock"]
