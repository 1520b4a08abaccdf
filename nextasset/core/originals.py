"""
Removal and archiving of processed files.

Features:
- Plain deletion or send2trash (recoverable from the OS trash)
- Archiving with collision suffixes: name.ext, name_1.ext, name_2.ext, ...
- Cross-device safe moves (shutil.move falls back to copy + delete)
"""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path
from typing import Optional

import structlog

from nextasset.core.models import OriginalHandling

logger = structlog.get_logger(__name__)


def resolve_archive_path(archive_dir: Path, file_name: str) -> Path:
    """
    Pick a free destination for ``file_name`` inside ``archive_dir``.

    Keeps the name when free, else appends the smallest positive integer
    suffix not already present (``logo_1.png``, ``logo_2.png``, ...).

    Args:
        archive_dir: Archive directory
        file_name: Base name of the file being archived

    Returns:
        Destination path that does not exist at call time
    """
    dest = archive_dir / file_name
    if not dest.exists():
        return dest

    stem = dest.stem
    suffix = dest.suffix

    counter = 1
    while True:
        candidate = archive_dir / f"{stem}_{counter}{suffix}"
        if not candidate.exists():
            logger.debug(
                "archive_name_conflict_resolved",
                original=str(dest),
                renamed=str(candidate),
                counter=counter,
            )
            return candidate
        counter += 1


def _archive(source: Path, archive_dir: Path) -> Path:
    archive_dir.mkdir(parents=True, exist_ok=True)
    dest = resolve_archive_path(archive_dir, source.name)
    shutil.move(str(source), str(dest))
    return dest


async def archive_file(source: Path | str, archive_dir: Path | str) -> Path:
    """
    Move ``source`` into ``archive_dir`` (created if missing).

    Returns:
        Final archived path
    """
    dest = await asyncio.to_thread(_archive, Path(source), Path(archive_dir))
    logger.info("file_archived", source=str(source), destination=str(dest))
    return dest


async def remove_file(path: Path | str, use_trash: bool = False) -> None:
    """
    Delete a file, optionally via the OS trash.

    Raises:
        OSError: Deletion failed (callers decide whether to continue)
    """
    if use_trash:
        import send2trash as _send2trash

        await asyncio.to_thread(_send2trash.send2trash, str(path))
    else:
        await asyncio.to_thread(Path(path).unlink)
    logger.info("file_deleted", file_path=str(path), trash=use_trash)


async def handle_original(
    path: Path | str,
    delete: bool = False,
    archive_dir: Optional[Path | str] = None,
    use_trash: bool = False,
) -> OriginalHandling:
    """
    Delete or archive a processed source file.

    Deletion wins when both are requested; with neither the file is kept.
    """
    if delete:
        await remove_file(path, use_trash=use_trash)
        return OriginalHandling.deleted
    if archive_dir is not None:
        await archive_file(path, archive_dir)
        return OriginalHandling.archived
    return OriginalHandling.kept
