"""
Directory traversal helpers.

Unreadable directories are skipped and recorded as warnings; only a missing
or non-directory root is fatal.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Optional

import structlog

from nextasset.config.exceptions import SourceDirectoryError
from nextasset.core.models import FileOperation, FileWarning

logger = structlog.get_logger(__name__)


def ensure_directory(path: Path | str) -> Path:
    """
    Validate a root directory.

    Raises:
        SourceDirectoryError: Path missing or not a directory
    """
    directory = Path(path)
    if not directory.exists():
        raise SourceDirectoryError(f"Source directory does not exist: {directory}")
    if not directory.is_dir():
        raise SourceDirectoryError(f"Source path is not a directory: {directory}")
    return directory


def list_files(
    directory: Path | str,
    recursive: bool = True,
    warnings: Optional[list[FileWarning]] = None,
) -> list[Path]:
    """
    List regular files under a directory.

    Symlinks are not followed and not returned. Output is sorted for
    reproducible processing order.

    Args:
        directory: Directory to walk
        recursive: Descend into subdirectories
        warnings: Collects unreadable directories when provided

    Returns:
        File paths joined onto ``directory`` as given (not resolved)
    """

    def _on_error(err: OSError) -> None:
        logger.debug("directory_unreadable", directory=str(err.filename), error=str(err))
        if warnings is not None:
            warnings.append(
                FileWarning(
                    path=str(err.filename),
                    operation=FileOperation.list,
                    error=err.strerror or str(err),
                )
            )

    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(directory, onerror=_on_error):
        dirnames.sort()
        for name in sorted(filenames):
            full_path = os.path.join(dirpath, name)
            if os.path.islink(full_path) or not os.path.isfile(full_path):
                continue
            files.append(Path(full_path))
        if not recursive:
            break

    return files


def filter_by_extension(files: Iterable[Path], extensions: Iterable[str]) -> list[Path]:
    """Keep files whose lower-cased suffix is in ``extensions``."""
    allowed = {ext.lower() for ext in extensions}
    return [f for f in files if f.suffix.lower() in allowed]
