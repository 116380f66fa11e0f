"""Configuration for gren-compiler-library.

A CompilerConfig is built once and handed to every component, instead of
reading process-wide constants. Defaults target the release this package
ships with; tests and embedding callers may override the version, cache root,
platform or download location.

Configuration can also be read from a YAML file:

    version: "0.2.0"
    cache_dir: /opt/cache
    download_base_url: https://mirror.example.com/gren/releases/download
    sha256: 3b7f...  # optional checksum of the release asset
    lock_timeout: 300
    request_timeout: 30
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from packaging.version import InvalidVersion, Version

from .directory import get_cache_root, get_compiler_path, get_version_dir
from .exceptions import ConfigError
from .platform import PlatformTarget, detect_platform

logger = logging.getLogger(__name__)

# The version of the Gren compiler downloaded and used by this package
COMPILER_VERSION = "0.2.0"

DEFAULT_DOWNLOAD_BASE_URL = "https://github.com/gren-lang/compiler/releases/download"

# Environment variable pointing to a YAML configuration file
CONFIG_ENV_VAR = "GREN_COMPILER_CONFIG"


@dataclass
class CompilerConfig:
    """Where the compiler comes from and where it is cached."""

    version: str = COMPILER_VERSION
    cache_root: Path = field(default_factory=get_cache_root)
    platform: PlatformTarget = field(default_factory=detect_platform)
    download_base_url: str = DEFAULT_DOWNLOAD_BASE_URL
    sha256: Optional[str] = None  # verified on download and on cached files
    lock_timeout: int = 300  # seconds
    request_timeout: int = 30  # seconds, per network read

    def __post_init__(self):
        self.cache_root = Path(self.cache_root)
        validate_version(self.version)

    @property
    def download_url(self) -> str:
        """Release asset URL for this version and platform."""
        base = self.download_base_url.rstrip("/")
        return f"{base}/{self.version}/{self.platform.asset_name}"

    @property
    def compiler_path(self) -> Path:
        """Path where the compiler executable is cached."""
        return get_compiler_path(
            self.cache_root, self.version, self.platform.extension
        )

    @property
    def lock_path(self) -> Path:
        """Lock file serializing installs of this version."""
        return get_version_dir(self.cache_root, self.version) / "install.lock"

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "CompilerConfig":
        """
        Build configuration from a parsed YAML mapping.

        Args:
            data: Mapping with optional keys version, cache_dir,
                download_base_url, sha256, lock_timeout, request_timeout

        Raises:
            ConfigError: If the mapping has unknown keys or invalid values
        """
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a mapping")

        known = {
            "version",
            "cache_dir",
            "download_base_url",
            "sha256",
            "lock_timeout",
            "request_timeout",
        }
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        kwargs: Dict[str, Any] = {}
        if "version" in data:
            kwargs["version"] = str(data["version"])
        for key in ("cache_dir", "download_base_url"):
            if key in data and not isinstance(data[key], str):
                raise ConfigError(f"{key} must be a string: {data[key]!r}")
        if "cache_dir" in data:
            kwargs["cache_root"] = Path(data["cache_dir"]).expanduser()
        if "download_base_url" in data:
            kwargs["download_base_url"] = data["download_base_url"]
        if data.get("sha256"):
            kwargs["sha256"] = str(data["sha256"]).lower()
        for key in ("lock_timeout", "request_timeout"):
            if key in data:
                try:
                    kwargs[key] = int(data[key])
                except (TypeError, ValueError) as e:
                    raise ConfigError(f"{key} must be an integer: {data[key]!r}") from e

        return cls(**kwargs)


def validate_version(version: str) -> None:
    """
    Check that a compiler version string is a valid release version.

    Raises:
        ConfigError: If the version cannot be parsed
    """
    try:
        Version(version)
    except InvalidVersion as e:
        raise ConfigError(f"Invalid compiler version: {version!r}") from e


def load_config(config_file: Union[str, Path]) -> CompilerConfig:
    """
    Load configuration from a YAML file.

    Args:
        config_file: Path to YAML configuration file

    Returns:
        CompilerConfig with the file's overrides applied

    Raises:
        ConfigError: If the file is missing or invalid
    """
    config_file = Path(config_file)
    if not config_file.exists():
        raise ConfigError(f"Configuration file not found: {config_file}")

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {config_file}: {e}") from e

    return CompilerConfig.from_mapping(data or {})


def config_from_env() -> CompilerConfig:
    """Build configuration, honouring GREN_COMPILER_CONFIG when it is set."""
    config_file = os.environ.get(CONFIG_ENV_VAR)
    if config_file:
        return load_config(config_file)
    return CompilerConfig()


__all__ = [
    "COMPILER_VERSION",
    "DEFAULT_DOWNLOAD_BASE_URL",
    "CONFIG_ENV_VAR",
    "CompilerConfig",
    "validate_version",
    "load_config",
    "config_from_env",
]
