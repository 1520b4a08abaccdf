"""
Duplicate-asset detection and safe consolidation.

Modules:
- scanner: size-bucketed content hashing
- consolidator: reference rewriting, then delete/trash/archive
- report_generator: JSON/CSV reports
- engine: scan / consolidate / find_duplicates entry points
- models: Pydantic data models
"""

from nextasset.features.dedup.engine import consolidate, find_duplicates, scan
from nextasset.features.dedup.models import (
    ConsolidationOptions,
    ConsolidationResult,
    DuplicateGroup,
    DuplicateOptions,
    DuplicateScanResult,
    FileRecord,
    ScanConfig,
)

__all__ = [
    "ConsolidationOptions",
    "ConsolidationResult",
    "DuplicateGroup",
    "DuplicateOptions",
    "DuplicateScanResult",
    "FileRecord",
    "ScanConfig",
    "consolidate",
    "find_duplicates",
    "scan",
]
