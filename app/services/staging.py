"""Staging area for media files that are sent once and then deleted."""

import logging
from pathlib import Path
from uuid import uuid4

from ..exceptions import CleanupError
from ..models import MediaFileHandle

logger = logging.getLogger(__name__)


def ensure_staging_dir(directory: Path) -> Path:
    """Create the staging directory if needed and return it."""
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def unique_stem(prefix: str) -> str:
    """File name stem that never collides with another fetch."""
    return f"{prefix}_{uuid4().hex}"


def remove_staged_file(handle: MediaFileHandle) -> None:
    """Delete a staged file.

    Args:
        handle: Handle of the file to delete.

    Raises:
        CleanupError: If the file exists but cannot be removed.
    """
    try:
        handle.path.unlink(missing_ok=True)
    except OSError as e:
        raise CleanupError(f"Failed to delete {handle.path}: {e}") from e
    logger.debug("Removed staged file %s", handle.path)


def remove_partial_downloads(directory: Path, stem: str) -> list[Path]:
    """Delete leftovers of an interrupted download (``.part``, ``.fNNN`` ...).

    Returns:
        Paths that were removed.
    """
    removed = []
    for leftover in directory.glob(f"{stem}.*"):
        try:
            leftover.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Failed to delete partial download %s: %s", leftover, e)
            continue
        removed.append(leftover)
    if removed:
        logger.debug("Removed %d partial download(s) for %s", len(removed), stem)
    return removed
