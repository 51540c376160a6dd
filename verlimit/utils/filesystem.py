"""
Filesystem utilities for verlimit.

Safe helpers for reading and writing project files, backing them up, and
locating the manifest/lockfile pair of a Node.js project. All filesystem
errors are normalized to ``FileOperationError``; malformed JSON raises
``ParseError``.
"""

from __future__ import annotations

import os
import json
import shutil
import tempfile
from pathlib import Path
from datetime import datetime
from typing import Any, Dict, Optional, Tuple, Union

from verlimit.utils.logger import get_logger
from verlimit.exceptions import FileOperationError, ParseError
from verlimit.constants import LOCKFILE_FILENAME, MANIFEST_FILENAME, MAX_FILE_SIZE


logger = get_logger("filesystem")

PathLike = Union[str, Path]


def _validated_file(path: Path) -> Path:
    """Check that ``path`` is an existing regular file and resolve it."""
    if not path.exists():
        raise FileOperationError(
            f"File not found: {path}",
            file_path=str(path),
            operation="read",
        )
    if not path.is_file():
        raise FileOperationError(
            f"Not a file: {path}",
            file_path=str(path),
            operation="read",
        )
    return path.resolve()


def _atomic_write(target: Path, content: str) -> None:
    """Atomically write text to a file using a temporary file + replace.

    Symlinks are written through and an existing file keeps its mode.
    """
    target = target.resolve()
    temp_path: Optional[Path] = None

    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=str(target.parent),
            delete=False,
            prefix=f".{target.name}.",
            suffix=".tmp",
        ) as tmp:
            temp_path = Path(tmp.name)
            tmp.write(content)
            tmp.flush()
            os.fsync(tmp.fileno())

        if target.exists():
            shutil.copymode(target, temp_path)
        temp_path.replace(target)

    except OSError as exc:
        if temp_path and temp_path.exists():
            try:
                temp_path.unlink()
                logger.debug("Cleaned up temporary file: %s", temp_path)
            except OSError as cleanup_exc:
                logger.warning(
                    "Failed to clean up temporary file %s: %s",
                    temp_path,
                    cleanup_exc,
                )

        raise FileOperationError(
            f"Atomic write failed: {exc}",
            file_path=str(target),
            operation="write",
            original_error=exc,
        ) from exc


def _create_backup_internal(path: Path) -> Path:
    """Create a timestamped backup of a file next to it."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    backup_path = path.with_name(f"{path.name}.{timestamp}.backup")

    try:
        shutil.copy2(path, backup_path)
    except OSError as exc:
        raise FileOperationError(
            f"Failed to create backup: {exc}",
            file_path=str(path),
            operation="backup",
            original_error=exc,
        ) from exc

    logger.debug("Created backup: %s", backup_path)
    return backup_path


def _restore_backup_internal(backup: Path, target: Path) -> None:
    """Restore a file from a backup."""
    try:
        shutil.copy2(backup, target)
    except OSError as exc:
        raise FileOperationError(
            f"Failed to restore backup: {exc}",
            file_path=str(target),
            operation="restore",
            original_error=exc,
        ) from exc


def safe_read_file(
    file_path: PathLike,
    *,
    max_size: Optional[int] = MAX_FILE_SIZE,
    encoding: str = "utf-8",
) -> str:
    """Safely read a text file with optional size limits.

    Args:
        file_path: Path to the file.
        max_size: Maximum allowed file size in bytes (None disables limit).
        encoding: Text encoding.

    Returns:
        File contents as a string.

    Raises:
        FileOperationError: The file is missing, too large, or unreadable.
    """
    path = _validated_file(Path(file_path))
    size = path.stat().st_size

    if max_size is not None and size > max_size:
        raise FileOperationError(
            f"File too large: {size} bytes (max {max_size})",
            file_path=str(path),
            operation="read",
        )

    try:
        return path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise FileOperationError(
            f"Failed to read file: {exc}",
            file_path=str(path),
            operation="read",
            original_error=exc,
        ) from exc


def read_json_object(file_path: PathLike) -> Dict[str, Any]:
    """Read a file that must contain a single JSON object.

    Key order of the document is preserved.

    Args:
        file_path: Path to the JSON file.

    Returns:
        The decoded object.

    Raises:
        FileOperationError: The file cannot be read.
        ParseError: The content is not JSON or not an object.
    """
    content = safe_read_file(file_path)

    try:
        data = json.loads(content)
    except ValueError as exc:
        raise ParseError(
            f"Invalid JSON: {exc}",
            file_path=str(file_path),
        ) from exc

    if not isinstance(data, dict):
        raise ParseError(
            f"Expected a JSON object, got {type(data).__name__}",
            file_path=str(file_path),
        )

    return data


def safe_write_file(
    file_path: PathLike,
    content: str,
    *,
    create_backup: bool = False,
) -> Optional[Path]:
    """Safely write text to a file using atomic replacement.

    When a backup is requested and the write fails, the original content
    is restored from it.

    Args:
        file_path: Destination path.
        content: Text content to write.
        create_backup: Whether to create a backup before writing.

    Returns:
        Path to the created backup, if any.

    Raises:
        FileOperationError: Backup or write failed.
    """
    path = Path(file_path)
    backup: Optional[Path] = None

    if create_backup and path.is_file():
        backup = _create_backup_internal(path)

    try:
        _atomic_write(path, content)
    except FileOperationError:
        if backup and backup.exists():
            try:
                _restore_backup_internal(backup, path)
            except FileOperationError as restore_exc:
                logger.warning("Could not restore %s: %s", path, restore_exc)
        raise

    return backup


def find_project_files(
    directory: PathLike = ".",
) -> Tuple[Optional[Path], Optional[Path]]:
    """Locate the manifest and lockfile of a Node.js project.

    Args:
        directory: Project root to inspect.

    Returns:
        ``(manifest_path, lockfile_path)``; either is ``None`` when absent.
    """
    root = Path(directory).resolve()
    manifest = root / MANIFEST_FILENAME
    lockfile = root / LOCKFILE_FILENAME

    return (
        manifest if manifest.is_file() else None,
        lockfile if lockfile.is_file() else None,
    )
