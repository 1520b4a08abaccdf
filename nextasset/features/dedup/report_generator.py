"""
Duplicate scan report generation.

Formats:
- JSON (default): success, groups[{hash, files, size}], totalFiles,
  totalDuplicates, totalSavings, optional removedCount/referencesUpdated,
  warnings[{path, operation, error}]
- CSV (output file ending in .csv): header statistics as comments, one row
  per file with its keep/remove action
"""

from __future__ import annotations

import csv
import io
import json
from pathlib import Path
from typing import Any, TextIO

import structlog

from nextasset.features.dedup.models import DuplicateScanResult

logger = structlog.get_logger(__name__)


class ReportGenerator:
    """Serialize a DuplicateScanResult to JSON or CSV."""

    CSV_COLUMNS = [
        "group_id",
        "hash",
        "file_path",
        "size_bytes",
        "action",
    ]

    def to_dict(self, result: DuplicateScanResult) -> dict[str, Any]:
        """Build the persisted JSON document."""
        report: dict[str, Any] = {
            "success": result.success,
            "groups": [
                {"hash": g.hash, "files": list(g.files), "size": g.size} for g in result.groups
            ],
            "totalFiles": result.total_files,
            "totalDuplicates": result.total_duplicates,
            "totalSavings": result.total_savings,
        }
        if result.removed_count is not None:
            report["removedCount"] = result.removed_count
        if result.references_updated is not None:
            report["referencesUpdated"] = result.references_updated
        if result.error:
            report["error"] = result.error
        report["warnings"] = [w.model_dump(mode="json") for w in result.warnings]
        return report

    def write(self, result: DuplicateScanResult, output_path: Path) -> Path:
        """
        Write the report; format chosen from the file extension.

        CSV keeps the raw bytes of undecodable (surrogate-escaped) paths;
        JSON escapes them.

        Args:
            result: Scan result (with consolidation counts if it ran)
            output_path: Destination (.csv for CSV, anything else JSON)

        Returns:
            Path to the written report
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        if output_path.suffix.lower() == ".csv":
            with open(output_path, "w", newline="", encoding="utf-8", errors="surrogateescape") as f:
                self._write_csv(f, result)
        else:
            with open(output_path, "w", encoding="utf-8", errors="surrogateescape") as f:
                json.dump(self.to_dict(result), f, indent=2)

        logger.info(
            "dedup_report_generated",
            output_path=str(output_path),
            groups=len(result.groups),
        )
        return output_path

    def generate_csv_string(self, result: DuplicateScanResult) -> str:
        """CSV content as a string."""
        output = io.StringIO()
        self._write_csv(output, result)
        return output.getvalue()

    def _write_csv(self, f: TextIO, result: DuplicateScanResult) -> None:
        self._write_header_stats(f, result)

        writer = csv.DictWriter(f, fieldnames=self.CSV_COLUMNS)
        writer.writeheader()

        for group_id, group in enumerate(result.groups, start=1):
            for index, file_path in enumerate(group.files):
                writer.writerow(
                    {
                        "group_id": group_id,
                        "hash": group.hash,
                        "file_path": file_path,
                        "size_bytes": group.size,
                        "action": "keep" if index == 0 else "remove",
                    }
                )

    @staticmethod
    def _write_header_stats(f: TextIO, result: DuplicateScanResult) -> None:
        """Write header statistics as CSV comments."""
        f.write(f"# Scan Date: {result.scan_date.strftime('%Y-%m-%d %H:%M:%S')}\n")
        f.write(f"# Total Files Scanned: {result.total_files}\n")
        f.write(f"# Duplicate Groups: {len(result.groups)}\n")
        f.write(f"# Total Duplicates: {result.total_duplicates}\n")
        f.write(f"# Space Reclaimable: {result.total_savings} bytes\n")
