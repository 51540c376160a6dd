"""
Centralized constants for verlimit.

This module defines immutable configuration values used across verlimit,
including project file names, summary sentinels, configuration defaults,
and logging formats. All values are intended to be treated as read-only.
"""

from typing import Final

# ---------------------------------------------------------------------------
# Project files
# ---------------------------------------------------------------------------

#: Name of the Node.js project manifest.
MANIFEST_FILENAME: Final[str] = "package.json"

#: Name of the npm lockfile that sits beside the manifest.
LOCKFILE_FILENAME: Final[str] = "package-lock.json"

#: Fallback project name when the manifest has no ``name``.
UNKNOWN_PROJECT_NAME: Final[str] = "unknown"

#: Indentation used when writing the manifest back.
MANIFEST_INDENT: Final[int] = 2

# ---------------------------------------------------------------------------
# Summary sentinels
# ---------------------------------------------------------------------------

#: Highest Node.js version when no upper bound was found.
UNLIMITED: Final[str] = "unlimited"

#: Highest npm version when no Node.js upper bound was found.
LATEST_COMPATIBLE: Final[str] = "latest compatible"

# ---------------------------------------------------------------------------
# Configuration defaults
# ---------------------------------------------------------------------------

#: Include ``devDependencies`` when collecting constraints.
DEFAULT_INCLUDE_DEV_DEPENDENCIES: Final[bool] = True

#: Scan ``package-lock.json`` when it exists.
DEFAULT_INCLUDE_LOCKFILE: Final[bool] = True

#: Create a timestamped backup of ``package.json`` before updating it.
DEFAULT_CREATE_BACKUP: Final[bool] = False

# ---------------------------------------------------------------------------
# Security constraints
# ---------------------------------------------------------------------------

#: Maximum allowed file size (in bytes) when reading project files.
MAX_FILE_SIZE: Final[int] = 50 * 1024 * 1024  # 50 MB, lockfiles get large

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
