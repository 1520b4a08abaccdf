"""
Reference search and rewriting in source/markup files.

References are plain file names (``logo.png``) found anywhere in the text of
allow-listed files. Matching is literal: a name is escaped before it is used
in a pattern, so characters like ``(`` or ``+`` in file names match
themselves.
"""

from __future__ import annotations

import asyncio
import re
from pathlib import Path
from typing import Iterable, Mapping, Optional

import structlog

from nextasset.config.settings import get_settings
from nextasset.core.fs import filter_by_extension, list_files
from nextasset.core.models import FileOperation, FileWarning

logger = structlog.get_logger(__name__)


def collect_reference_files(
    reference_dirs: Iterable[Path | str],
    extensions: Optional[Iterable[str]] = None,
    warnings: Optional[list[FileWarning]] = None,
) -> list[Path]:
    """List every allow-listed text file under the reference directories (recursive)."""
    if extensions is None:
        extensions = get_settings().reference_extensions

    extensions = list(extensions)
    files: list[Path] = []
    for directory in reference_dirs:
        files.extend(filter_by_extension(list_files(directory, True, warnings), extensions))
    return files


def build_pattern(names: Iterable[str]) -> Optional[re.Pattern]:
    """
    Compile one alternation matching any of ``names`` literally.

    Longer names come first so ``logo_copy.png`` wins over ``logo.png`` at the
    same position. Returns None for an empty input.
    """
    escaped = [re.escape(n) for n in sorted(set(names), key=lambda n: (-len(n), n))]
    if not escaped:
        return None
    return re.compile("|".join(escaped))


def replace_names(content: str, replacements: Mapping[str, str]) -> str:
    """
    Replace every occurrence of each key with its value in a single pass.

    Single-pass substitution means a replaced name is never re-matched, so
    ``a -> b`` and ``b -> c`` never chain into ``a -> c``.
    """
    pattern = build_pattern(replacements.keys())
    if pattern is None:
        return content
    return pattern.sub(lambda m: replacements[m.group(0)], content)


def _rewrite_file(path: Path, replacements: Mapping[str, str]) -> bool:
    with open(path, "r", encoding="utf-8", newline="") as f:
        content = f.read()

    updated = replace_names(content, replacements)
    if updated == content:
        return False

    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(updated)
    return True


async def rewrite_references(
    replacements: Mapping[str, str],
    reference_dirs: Iterable[Path | str],
    extensions: Optional[Iterable[str]] = None,
    warnings: Optional[list[FileWarning]] = None,
) -> int:
    """
    Rewrite file-name references in every reference file.

    Files are processed one at a time. A file that cannot be read or written
    is skipped (and recorded in ``warnings``) without aborting the pass.

    Args:
        replacements: old base name -> new base name
        reference_dirs: Directories scanned recursively for reference files
        extensions: Allow-list override (defaults to settings)
        warnings: Collects per-file failures

    Returns:
        Number of files whose content changed
    """
    reference_dirs = list(reference_dirs)
    if not replacements or not reference_dirs:
        return 0

    updated_count = 0
    for ref_file in collect_reference_files(reference_dirs, extensions, warnings):
        try:
            changed = await asyncio.to_thread(_rewrite_file, ref_file, replacements)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("reference_rewrite_failed", file_path=str(ref_file), error=str(e))
            if warnings is not None:
                warnings.append(
                    FileWarning(path=str(ref_file), operation=FileOperation.rewrite, error=str(e))
                )
            continue

        if changed:
            updated_count += 1
            logger.info("reference_file_updated", file_path=str(ref_file))

    return updated_count


def _read_text(path: Path) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


async def read_reference_corpus(
    reference_dirs: Iterable[Path | str],
    extensions: Optional[Iterable[str]] = None,
    warnings: Optional[list[FileWarning]] = None,
) -> str:
    """Concatenate the text of every reference file, newline separated."""
    chunks: list[str] = []
    for ref_file in collect_reference_files(reference_dirs, extensions, warnings):
        try:
            chunks.append(await asyncio.to_thread(_read_text, ref_file))
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("reference_read_failed", file_path=str(ref_file), error=str(e))
            if warnings is not None:
                warnings.append(
                    FileWarning(path=str(ref_file), operation=FileOperation.read, error=str(e))
                )
    return "\n".join(chunks)
