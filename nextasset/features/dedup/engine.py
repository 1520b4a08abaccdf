"""
Duplicate-asset engine entry points.

- scan(): non-destructive duplicate report
- consolidate(): rewrite references, then remove non-canonical files
- find_duplicates(): scan, consolidate when pre-confirmed, write report
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import structlog

from nextasset.features.dedup.consolidator import DuplicateConsolidator
from nextasset.features.dedup.models import (
    ConsolidationOptions,
    ConsolidationResult,
    DuplicateGroup,
    DuplicateOptions,
    DuplicateScanResult,
    ScanConfig,
)
from nextasset.features.dedup.report_generator import ReportGenerator
from nextasset.features.dedup.scanner import DuplicateScanner

logger = structlog.get_logger(__name__)


async def scan(root_dir: Path | str, recursive: bool = True, **config) -> DuplicateScanResult:
    """Scan ``root_dir`` for byte-identical files. Never writes to disk."""
    scanner = DuplicateScanner(ScanConfig(root_path=Path(root_dir), recursive=recursive, **config))
    return await scanner.scan()


async def consolidate(
    groups: list[DuplicateGroup],
    options: Optional[ConsolidationOptions] = None,
) -> ConsolidationResult:
    """Collapse each group to its canonical file (files[0])."""
    consolidator = DuplicateConsolidator(options or ConsolidationOptions())
    return await consolidator.consolidate(groups)


async def find_duplicates(
    source_dir: Path | str,
    options: Optional[DuplicateOptions] = None,
) -> DuplicateScanResult:
    """
    Scan, optionally consolidate, optionally write a report.

    Consolidation only runs here when ``skip_confirmation`` is set together
    with a destructive action; interactive callers show the scan result
    first and call consolidate() themselves.

    Args:
        source_dir: Directory to scan
        options: DuplicateOptions (defaults: recursive, report only)

    Returns:
        DuplicateScanResult with removed_count/references_updated set when
        consolidation ran
    """
    options = options or DuplicateOptions()

    result = await DuplicateScanner(options.to_scan_config(source_dir)).scan()
    if not result.success:
        return result

    consolidation_options = options.to_consolidation_options()
    if options.skip_confirmation and consolidation_options.is_destructive:
        outcome = await consolidate(result.groups, consolidation_options)
        result.removed_count = outcome.removed_count
        result.references_updated = outcome.references_updated
        result.warnings.extend(outcome.warnings)

    if options.output_file is not None:
        try:
            ReportGenerator().write(result, options.output_file)
        except OSError as e:
            logger.error("dedup_report_failed", output_path=str(options.output_file), error=str(e))
            result.success = False
            result.error = f"Could not write report {options.output_file}: {e}"

    return result
