"""
Compiler download and installation.

This module fetches the prebuilt compiler executable for the configured
version and platform and places it in the cache:
- HTTPS downloads with redirects followed
- Streaming writes into a temporary file, moved into place atomically
- Optional SHA256 verification during download
- Progress reporting (bytes, percentage, speed, ETA)
- Cross-process install lock so racing installers converge on one file
"""

import hashlib
import logging
import os
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from .config import CompilerConfig
from .exceptions import ChecksumError, DownloadError
from .locking import install_lock

logger = logging.getLogger(__name__)

# Owner rwx, group/other rx
EXECUTABLE_MODE = 0o755


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int
    percentage: float
    speed_bps: float  # bytes per second
    eta_seconds: float  # estimated time remaining

    def __str__(self) -> str:
        """Format progress for display."""
        return format_progress(self)


class StreamingHasher:
    """Compute a SHA256 hash incrementally for streaming downloads."""

    def __init__(self):
        self.hasher = hashlib.sha256()

    def update(self, data: bytes):
        """Add data to hash computation."""
        self.hasher.update(data)

    def finalize(self) -> str:
        """Get final hash value as hex string."""
        return self.hasher.hexdigest()

    def verify(self, expected_hash: str) -> bool:
        """Check if computed hash matches expected value (case-insensitive)."""
        return self.finalize().lower() == expected_hash.lower()


def verify_checksum(file_path: Path, expected_sha256: str) -> bool:
    """
    Verify file SHA256 checksum.

    Args:
        file_path: Path to file to verify
        expected_sha256: Expected SHA256 hash (hex string)

    Returns:
        True if checksum matches, False otherwise

    Raises:
        FileNotFoundError: If file doesn't exist
    """
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    hasher = StreamingHasher()
    with open(file_path, "rb") as f:
        while chunk := f.read(8192):
            hasher.update(chunk)

    return hasher.verify(expected_sha256)


def download_file(
    url: str,
    destination: Path,
    expected_sha256: Optional[str] = None,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    timeout: int = 30,
    mode: int = EXECUTABLE_MODE,
) -> Path:
    """
    Download a file to destination, never leaving a partial file behind.

    The body is streamed into a temporary file created exclusively in the
    destination directory. Only after the whole body is written (and the
    checksum matched, if given) is the file chmod'ed and renamed into place.

    Args:
        url: URL to download from (redirects are followed)
        destination: Local path to save file
        expected_sha256: Expected SHA256 hash (verified during download)
        progress_callback: Optional callback for progress updates
        timeout: Request timeout in seconds
        mode: Permission bits of the final file

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If the request or a filesystem write fails
        ChecksumError: If checksum doesn't match expected value
        ValueError: If URL or destination is invalid

    Example:
        >>> download_file(
        ...     "https://github.com/gren-lang/compiler/releases/download/0.2.0/gren_linux",
        ...     Path("~/.cache/gren/0.2.0/bin/gren").expanduser(),
        ... )
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)

    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=destination.parent, prefix=f".{destination.name}.", suffix=".part"
        )
    except OSError as e:
        raise DownloadError(f"Cannot create {destination}: {e}") from e

    temp_path = Path(temp_path_str)

    try:
        with open(temp_fd, "wb") as f:
            _download_with_progress(
                url=url,
                file_obj=f,
                expected_sha256=expected_sha256,
                progress_callback=progress_callback,
                timeout=timeout,
                name=destination.name,
            )
        os.chmod(temp_path, mode)
        temp_path.replace(destination)
    except RequestException as e:
        _discard(temp_path)
        raise DownloadError(f"Failed to download {url}: {e}") from e
    except OSError as e:
        _discard(temp_path)
        raise DownloadError(f"Failed to write {destination}: {e}") from e
    except Exception:
        _discard(temp_path)
        raise

    logger.info(f"Download complete: {destination}")
    return destination


def _download_with_progress(
    url: str,
    file_obj,
    expected_sha256: Optional[str],
    progress_callback: Optional[Callable[[DownloadProgress], None]],
    timeout: int,
    name: str,
) -> None:
    """
    Stream the response body into an open file.

    Raises:
        ChecksumError: If checksum doesn't match
        RequestException: If HTTP request fails
    """
    logger.info(f"Downloading from {url}")

    response = requests.get(url, stream=True, timeout=timeout, allow_redirects=True)
    with response:
        response.raise_for_status()

        content_length = response.headers.get("content-length")
        total_size = int(content_length) if content_length else 0

        hasher = StreamingHasher() if expected_sha256 else None

        downloaded = 0
        start_time = time.time()
        last_progress_time = start_time

        for chunk in response.iter_content(chunk_size=8192):
            if not chunk:
                continue
            file_obj.write(chunk)
            downloaded += len(chunk)

            if hasher:
                hasher.update(chunk)

            # Report progress (max once per 0.5 seconds to avoid spam)
            current_time = time.time()
            if progress_callback and (
                current_time - last_progress_time >= 0.5 or downloaded == total_size
            ):
                elapsed = current_time - start_time
                speed = downloaded / elapsed if elapsed > 0 else 0
                remaining = total_size - downloaded if total_size > 0 else 0
                eta = remaining / speed if speed > 0 else 0

                progress_callback(
                    DownloadProgress(
                        bytes_downloaded=downloaded,
                        total_bytes=total_size if total_size > 0 else downloaded,
                        percentage=(downloaded / total_size * 100)
                        if total_size > 0
                        else 0,
                        speed_bps=speed,
                        eta_seconds=eta,
                    )
                )
                last_progress_time = current_time

    if expected_sha256 and hasher and not hasher.verify(expected_sha256):
        raise ChecksumError(
            f"Checksum mismatch for {name}: "
            f"expected {expected_sha256}, got {hasher.finalize()}"
        )


def _discard(temp_path: Path) -> None:
    try:
        temp_path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Failed to remove partial download {temp_path}: {e}")


def is_installed(config: CompilerConfig) -> bool:
    """
    Check whether the compiler executable is present in the cache.

    Without a configured checksum the file is trusted as soon as it exists.
    """
    path = config.compiler_path
    if not path.is_file():
        return False

    if config.sha256 and not verify_checksum(path, config.sha256):
        logger.warning(f"Checksum mismatch for cached compiler: {path}")
        return False

    return True


def ensure_installed(
    config: CompilerConfig,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
) -> Path:
    """
    Download the compiler to ``config.compiler_path`` if it isn't already there.

    Repeated calls after a successful install are no-ops and do no network
    I/O. Concurrent callers are serialized by the install lock; whoever loses
    the race finds the file in place and returns without downloading.

    Args:
        config: Compiler configuration
        progress_callback: Optional callback for download progress

    Returns:
        Path to the compiler executable

    Raises:
        DownloadError: If download or write fails
        ChecksumError: If a configured checksum doesn't match
        InstallLockTimeout: If another installer holds the lock too long
    """
    if is_installed(config):
        return config.compiler_path

    with install_lock(config.lock_path, timeout=config.lock_timeout):
        if is_installed(config):
            logger.debug("Compiler was installed by another process")
            return config.compiler_path

        if config.compiler_path.exists():
            # Only reachable with a configured checksum that didn't match
            logger.warning(f"Replacing corrupt compiler at {config.compiler_path}")
            config.compiler_path.unlink()

        logger.info(f"Gren {config.version} is not installed, downloading...")

        download_file(
            config.download_url,
            config.compiler_path,
            expected_sha256=config.sha256,
            progress_callback=progress_callback,
            timeout=config.request_timeout,
        )

    logger.info("Done!")
    return config.compiler_path


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Example:
        >>> progress = DownloadProgress(52428800, 104857600, 50.0, 1048576, 50)
        >>> print(format_progress(progress))
        50.0/100.0 MB (50.0%) at 1.0 MB/s ETA: 50s
    """
    mb_downloaded = progress.bytes_downloaded / 1024 / 1024
    mb_total = progress.total_bytes / 1024 / 1024
    speed_mbps = progress.speed_bps / 1024 / 1024

    if progress.total_bytes > 0:
        return (
            f"{mb_downloaded:.1f}/{mb_total:.1f} MB "
            f"({progress.percentage:.1f}%) "
            f"at {speed_mbps:.1f} MB/s "
            f"ETA: {progress.eta_seconds:.0f}s"
        )
    else:
        # Unknown total size
        return f"{mb_downloaded:.1f} MB at {speed_mbps:.1f} MB/s"


__all__ = [
    "EXECUTABLE_MODE",
    "DownloadProgress",
    "StreamingHasher",
    "verify_checksum",
    "download_file",
    "is_installed",
    "ensure_installed",
    "format_progress",
]
