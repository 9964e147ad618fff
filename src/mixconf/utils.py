# ABOUTME: Common utility functions for atomic file writes
# ABOUTME: Keeps a previously valid document intact if a save fails midway
"""Utility functions for mixconf"""

import logging
import os
import tempfile
from contextlib import suppress
from pathlib import Path

from mixconf.exceptions import StorageError

logger = logging.getLogger(__name__)


def atomic_write(filepath: Path | str, content: str) -> None:
    """
    Write file atomically to prevent data corruption.

    Args:
        filepath: Target file path
        content: Text to write

    Raises:
        StorageError: If write fails
    """
    filepath = Path(filepath)

    # Create temp file in same directory (for same filesystem)
    try:
        temp_fd, temp_path = tempfile.mkstemp(
            dir=filepath.parent, prefix=f".{filepath.name}.", suffix=".tmp"
        )
    except OSError as e:
        raise StorageError(
            f"Failed to write {filepath}: {e}",
            recovery_hint="Check that the directory exists and is writable",
        ) from e

    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())

        # mkstemp creates 0600, open() would honour the umask
        umask = os.umask(0)
        os.umask(umask)
        os.chmod(temp_path, 0o666 & ~umask)

        os.replace(temp_path, filepath)
        logger.debug(f"Wrote {filepath}")

    except OSError as e:
        with suppress(OSError):
            os.unlink(temp_path)
        raise StorageError(
            f"Failed to write {filepath}: {e}",
            recovery_hint="Check disk space and permissions",
        ) from e
