"""
Directory preconditions for the session files.

Every export calls ensure_directory_exists_for_filename() before
opening its file. Only absolute directories are ever created.
"""
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def ensure_directory_exists(directory: str) -> bool:
    """
    Make sure an absolute directory exists, creating it if needed.

    Args:
        directory: Absolute directory path

    Returns:
        True if the directory exists or was created. False if the path
        is relative (no creation is attempted) or creation failed.

    Raises:
        ValueError: If directory is an empty string.
    """
    if not directory:
        raise ValueError("Directory should not be an empty string.")

    if not os.path.isabs(directory):
        logger.error(f"Directory '{directory}' is not absolute "
                     f"(starts with invalid character: '{directory[0]}').")
        return False

    path = Path(directory)
    if path.is_dir():
        return True

    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Could not create directory '{directory}': {e}")
        return False

    logger.warning(f"Directory Created: {directory}")
    return True


def ensure_directory_exists_for_filename(filename: str) -> bool:
    """
    Make sure the parent directory of filename exists.

    Returns:
        False if filename has no directory part, otherwise the result
        of ensure_directory_exists() for that directory.
    """
    directory = os.path.dirname(filename)
    if not directory:
        logger.error(f"Filename '{filename}' does not specify a directory.")
        return False
    return ensure_directory_exists(directory)
