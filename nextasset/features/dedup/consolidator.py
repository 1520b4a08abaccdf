"""
Safe consolidation of duplicate groups.

Order of operations (each step completes before the next starts):
1. Verify every duplicate (when verify_hashes is set)
2. Build the replacement map from verified duplicates only
3. Rewrite references in the reference directories
4. Delete / trash / archive every verified non-canonical file

Verification runs before any rewrite, so files edited by step 3 are never
re-hashed. A duplicate fails verification when:
1. It no longer exists
2. Its content hash no longer matches the group hash
3. The canonical file no longer exists

Failed duplicates stay on disk and references to them are left alone.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Callable, Optional

import structlog

from nextasset.core.models import FileOperation, FileWarning
from nextasset.core.originals import archive_file, remove_file
from nextasset.core.references import rewrite_references
from nextasset.features.dedup.models import (
    ConsolidationOptions,
    ConsolidationResult,
    DuplicateGroup,
)
from nextasset.features.dedup.scanner import hash_file

logger = structlog.get_logger(__name__)


def build_replacement_map(
    groups: list[DuplicateGroup],
    warnings: Optional[list[FileWarning]] = None,
    exclude: Optional[set[str]] = None,
) -> dict[str, str]:
    """
    Map every duplicate's base name to its group's canonical base name.

    Duplicates already named like their keeper map to themselves and are
    left out, as are paths in ``exclude``. If one base name is claimed by
    two groups with different keepers, the first group wins and the
    conflict is recorded.
    """
    exclude = exclude or set()
    replacements: dict[str, str] = {}
    for group in groups:
        keep_name = Path(group.keeper).name
        for duplicate in group.duplicates:
            if duplicate in exclude:
                continue
            old_name = Path(duplicate).name
            if old_name == keep_name:
                continue
            existing = replacements.get(old_name)
            if existing is not None and existing != keep_name:
                logger.warning(
                    "dedup_replacement_conflict",
                    name=old_name,
                    kept=existing,
                    ignored=keep_name,
                )
                if warnings is not None:
                    warnings.append(
                        FileWarning(
                            path=duplicate,
                            operation=FileOperation.rewrite,
                            error=f"'{old_name}' already maps to '{existing}', not '{keep_name}'",
                        )
                    )
                continue
            replacements[old_name] = keep_name
    return replacements


class DuplicateConsolidator:
    """Collapse each duplicate group to its canonical file."""

    def __init__(
        self,
        options: ConsolidationOptions,
        progress_callback: Optional[Callable[[ConsolidationResult], None]] = None,
    ):
        self.options = options
        self.progress_callback = progress_callback

    async def consolidate(self, groups: list[DuplicateGroup]) -> ConsolidationResult:
        """
        Rewrite references, then remove every non-canonical file.

        Args:
            groups: Groups from a previous scan

        Returns:
            ConsolidationResult; zero counts when no destructive action is set
        """
        result = ConsolidationResult()

        if not self.options.is_destructive:
            logger.info("dedup_consolidation_skipped", reason="no destructive action requested")
            return result

        total_to_remove = sum(len(g.duplicates) for g in groups)
        logger.info(
            "dedup_consolidation_started",
            groups=len(groups),
            total_to_remove=total_to_remove,
            action="delete" if self.options.delete_duplicates else "archive",
        )

        removable: list[str] = []
        for group in groups:
            for duplicate in group.duplicates:
                if self.options.verify_hashes:
                    safe, reason = await asyncio.to_thread(self._safety_check, duplicate, group)
                    if not safe:
                        result.skipped_files.append(duplicate)
                        result.warnings.append(
                            FileWarning(path=duplicate, operation=FileOperation.verify, error=reason)
                        )
                        logger.warning("dedup_file_skipped", file_path=duplicate, reason=reason)
                        continue
                removable.append(duplicate)

        replacements = build_replacement_map(groups, result.warnings, exclude=set(result.skipped_files))

        result.references_updated = await rewrite_references(
            replacements,
            self.options.reference_dirs,
            self.options.reference_extensions,
            result.warnings,
        )

        for duplicate in removable:
            if await self._remove(duplicate, result):
                result.removed_count += 1
                result.removed_files.append(duplicate)

            if self.progress_callback:
                self.progress_callback(result)

        logger.info(
            "dedup_consolidation_completed",
            removed=result.removed_count,
            skipped=len(result.skipped_files),
            references_updated=result.references_updated,
            warnings=len(result.warnings),
        )

        return result

    async def _remove(self, duplicate: str, result: ConsolidationResult) -> bool:
        """Delete or archive one duplicate; failures become warnings."""
        if self.options.delete_duplicates:
            operation = FileOperation.delete
        else:
            operation = FileOperation.archive

        try:
            if self.options.delete_duplicates:
                await remove_file(duplicate, use_trash=self.options.use_trash)
            else:
                await archive_file(duplicate, self.options.archive_dir)
        except OSError as e:
            result.warnings.append(FileWarning(path=duplicate, operation=operation, error=str(e)))
            logger.error(
                "dedup_remove_failed",
                file_path=duplicate,
                operation=operation.value,
                error=str(e),
            )
            return False

        return True

    def _safety_check(self, duplicate: str, group: DuplicateGroup) -> tuple[bool, str]:
        """
        Check a duplicate is still safe to remove.

        Hashes with the group's own algorithm when the scan recorded one.

        Returns:
            (is_safe, reason_if_not_safe)
        """
        file_path = Path(duplicate)

        if not file_path.exists():
            return False, "File no longer exists"

        algorithm = group.algorithm or self.options.hash_algorithm
        try:
            current_hash = hash_file(file_path, algorithm, self.options.chunk_size)
        except OSError as e:
            return False, f"Cannot read file for hash check: {e}"
        if current_hash != group.hash:
            return False, "Hash mismatch (file modified since scan)"

        if not Path(group.keeper).exists():
            return False, "Keeper file no longer exists"

        return True, ""
