"""
Unused asset detection.

An asset is "used" when its base name appears anywhere in the text of a
reference file. Matching is a plain substring search, so ``logo.png`` is also
considered used when only ``my-logo.png`` is referenced.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import structlog

from nextasset.config.exceptions import SourceDirectoryError
from nextasset.core.fs import ensure_directory, list_files
from nextasset.core.models import FileOperation, FileWarning
from nextasset.core.originals import archive_file, remove_file
from nextasset.core.references import read_reference_corpus
from nextasset.features.unused.models import (
    UnusedAssetResult,
    UnusedAssetsOptions,
    UnusedHandlingResult,
)

logger = structlog.get_logger(__name__)


async def find_unused_assets(
    source_dir: Path | str,
    options: UnusedAssetsOptions,
) -> UnusedAssetResult:
    """
    Report assets under ``source_dir`` never referenced in ``reference_dirs``.

    Destructive handling runs here only when ``skip_confirmation`` is set;
    otherwise call handle_unused_assets() after review.
    """
    reference_dirs = [str(d) for d in options.reference_dirs]

    try:
        root = ensure_directory(source_dir)
    except SourceDirectoryError as e:
        logger.warning("unused_scan_root_invalid", source_dir=str(source_dir), error=str(e))
        return UnusedAssetResult(success=False, reference_dirs=reference_dirs, error=str(e))

    warnings: list[FileWarning] = []
    assets = list_files(root, options.recursive, warnings)

    result = UnusedAssetResult(total_assets=len(assets), reference_dirs=reference_dirs)

    if assets:
        corpus = await read_reference_corpus(
            options.reference_dirs, options.reference_extensions, warnings
        )
        result.unused_assets = [str(a) for a in assets if a.name not in corpus]

    logger.info(
        "unused_scan_completed",
        source_dir=str(root),
        total_assets=result.total_assets,
        unused=len(result.unused_assets),
    )

    if options.skip_confirmation and result.unused_assets:
        handled = await handle_unused_assets(
            result.unused_assets,
            delete_unused=options.delete_unused,
            archive_dir=options.archive_dir,
        )
        if options.delete_unused:
            result.deleted_count = handled.deleted_count
        result.archived_to = handled.archived_to
        warnings.extend(handled.warnings)

    result.warnings = warnings

    if options.output_file is not None:
        _write_report(result, options.output_file)

    return result


async def handle_unused_assets(
    unused_assets: list[str],
    delete_unused: bool = False,
    archive_dir: Optional[Path | str] = None,
) -> UnusedHandlingResult:
    """
    Delete or archive reviewed unused assets.

    Archived names collide-resolve as ``name_1.ext``, ``name_2.ext``, ...
    Per-file failures are recorded and skipped.
    """
    outcome = UnusedHandlingResult()

    if not delete_unused and archive_dir is None:
        return outcome

    for asset in unused_assets:
        try:
            if delete_unused:
                await remove_file(asset)
                outcome.deleted_count += 1
            else:
                await archive_file(asset, archive_dir)
                outcome.archived_count += 1
        except OSError as e:
            operation = FileOperation.delete if delete_unused else FileOperation.archive
            outcome.warnings.append(FileWarning(path=asset, operation=operation, error=str(e)))
            logger.error("unused_remove_failed", file_path=asset, error=str(e))

    if not delete_unused:
        outcome.archived_to = str(archive_dir)

    return outcome


def _write_report(result: UnusedAssetResult, output_file: Path) -> None:
    report = {
        "success": result.success,
        "unusedAssets": result.unused_assets,
        "totalAssets": result.total_assets,
        "referenceDirs": result.reference_dirs,
    }
    if result.deleted_count is not None:
        report["deletedCount"] = result.deleted_count
    if result.archived_to is not None:
        report["archivedTo"] = result.archived_to
    report["warnings"] = [w.model_dump(mode="json") for w in result.warnings]

    output_file = Path(output_file)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2)

    logger.info("unused_report_generated", output_path=str(output_file))
