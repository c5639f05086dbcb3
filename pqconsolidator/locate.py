"""
Discover Parquet inputs on the local filesystem.

Best-effort walk: unreadable entries below the root are skipped, only a
failure to access the root itself is fatal. Results are sorted by full path
so canonical-file selection and output row order are reproducible.
"""

import os
from pathlib import Path

from pqconsolidator._exceptions import (
    LocateError,
    NotTargetFormatError,
    PathNotFoundError,
)
from pqconsolidator._format import is_parquet_file
from pqconsolidator._logging import get_logger

logger = get_logger(__name__)


def locate(root: str | Path, recursive: bool = False) -> list[Path]:
    """
    Find Parquet files under root.

    Args:
        root: A .parquet file or a directory
        recursive: Walk the full subtree instead of immediate children

    Returns:
        Sorted list of matching paths (may be empty)

    Raises:
        PathNotFoundError: If root does not exist
        NotTargetFormatError: If root is a file without .parquet extension
        LocateError: If root directory cannot be listed

    Examples:
        >>> locate("data/part-0001.parquet")
        [PosixPath('data/part-0001.parquet')]
        >>> locate("data", recursive=True)
        [PosixPath('data/a.parquet'), PosixPath('data/nested/b.parquet')]
    """
    root = Path(root)

    if not root.exists():
        raise PathNotFoundError(root)

    if root.is_file():
        if not is_parquet_file(root):
            raise NotTargetFormatError(root)
        return [root]

    if not root.is_dir():
        raise LocateError(f"Input path is neither a file nor a directory: {root}", root)

    # Root must be listable; everything below it is best-effort
    try:
        with os.scandir(root):
            pass
    except OSError as e:
        raise LocateError(f"Cannot access input directory {root}: {e}", root) from e

    if recursive:
        found = _walk_recursive(root)
    else:
        found = _walk_flat(root)

    files = sorted(found, key=str)
    logger.debug(f"Located {len(files)} parquet files in {root} (recursive={recursive})")
    return files


def _walk_flat(root: Path) -> list[Path]:
    """Immediate children of root that are parquet files."""
    files = []
    with os.scandir(root) as entries:
        for entry in entries:
            if _is_parquet_entry(entry):
                files.append(Path(entry.path))
    return files


def _walk_recursive(root: Path) -> list[Path]:
    """All parquet files in the subtree. Directory symlinks are not followed."""
    files = []

    def _skip(error: OSError) -> None:
        logger.debug(f"Skipping unreadable entry: {error}")

    for dirpath, _dirnames, filenames in os.walk(root, onerror=_skip):
        for name in filenames:
            path = Path(dirpath) / name
            if is_parquet_file(path) and _is_regular_file(path):
                files.append(path)
    return files


def _is_parquet_entry(entry: os.DirEntry) -> bool:
    if not is_parquet_file(entry.name):
        return False
    try:
        return entry.is_file()
    except OSError:
        return False


def _is_regular_file(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        return False
