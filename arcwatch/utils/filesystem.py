"""
Filesystem utilities for arcwatch.

Provides manifest discovery and size-bounded manifest reading. Failures
are normalised to :class:`~arcwatch.exceptions.FileOperationError`
subclasses: :class:`TraversalError` when the tree itself cannot be
walked, :class:`ManifestReadError` when a single file cannot be read.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional, Union

from arcwatch.utils.logger import get_logger
from arcwatch.constants import GOMOD_FILENAME, MAX_FILE_SIZE
from arcwatch.exceptions import ManifestReadError, TraversalError

logger = get_logger("filesystem")

PathLike = Union[str, Path]


def find_manifest_files(
    root: PathLike = ".",
    *,
    name: str = GOMOD_FILENAME,
) -> List[Path]:
    """Recursively collect files called *name* below *root*.

    Paths are returned joined onto *root* as given, so a relative root
    yields relative paths (``Path(".")`` yields ``a/go.mod``). Directories
    are visited in sorted order; callers should still not rely on the
    order for anything but display. Symbolic links to directories are not
    followed.

    Args:
        root: Directory to start from.
        name: Exact base name to match.

    Returns:
        Matching file paths.

    Raises:
        TraversalError: *root* or one of its subdirectories cannot be
            listed.
    """
    root_path = Path(root)
    matches: List[Path] = []

    def _on_error(exc: OSError) -> None:
        path = exc.filename if exc.filename is not None else str(root_path)
        raise TraversalError(
            f"Error walking directories: cannot access {path}",
            file_path=str(path),
            operation="walk",
            original_error=exc,
        ) from exc

    for dirpath, dirnames, filenames in os.walk(root_path, onerror=_on_error):
        dirnames.sort()
        if name in filenames:
            found = Path(dirpath) / name
            if found.is_file():
                logger.debug("Found %s file: %s", name, found)
                matches.append(found)

    return matches


def safe_read_file(
    file_path: PathLike,
    *,
    max_size: Optional[int] = MAX_FILE_SIZE,
    encoding: str = "utf-8",
) -> str:
    """Read a manifest as text, refusing files larger than *max_size*.

    Args:
        file_path: Path to the file.
        max_size: Maximum allowed size in bytes (``None`` disables the limit).
        encoding: Text encoding.

    Returns:
        File contents.

    Raises:
        ManifestReadError: The file is missing, too large, unreadable, or
            not valid text in *encoding*.
    """
    path = Path(file_path)

    try:
        size = path.stat().st_size
    except OSError as exc:
        raise ManifestReadError(
            f"Could not open {path}",
            file_path=str(path),
            operation="read",
            original_error=exc,
        ) from exc

    if max_size is not None and size > max_size:
        raise ManifestReadError(
            f"File too large: {size} bytes (max {max_size})",
            file_path=str(path),
            operation="read",
        )

    try:
        return path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestReadError(
            f"Could not read {path}",
            file_path=str(path),
            operation="read",
            original_error=exc,
        ) from exc
