"""
Content-hash duplicate scanner.

Features:
- Recursive or top-level-only enumeration
- Size bucketing: files with a unique size are never hashed
- Chunked hashing in a bounded thread pool (asyncio.to_thread + Semaphore)
- Optional byte-for-byte confirmation of equal hashes
- Deterministic output regardless of hash completion order

The scan is read-only.
"""

from __future__ import annotations

import asyncio
import filecmp
import hashlib
import os
from pathlib import Path
from typing import Callable, Optional

import structlog

from nextasset.config.exceptions import SourceDirectoryError
from nextasset.core.fs import ensure_directory, list_files
from nextasset.core.models import FileOperation, FileWarning
from nextasset.features.dedup.models import (
    DuplicateGroup,
    DuplicateScanResult,
    FileRecord,
    ScanConfig,
    ScanStats,
)

logger = structlog.get_logger(__name__)


def hash_file(file_path: Path | str, algorithm: str = "sha256", chunk_size: int = 65536) -> str:
    """
    Compute a full-content digest (chunked for memory efficiency).

    Args:
        file_path: File to hash
        algorithm: hashlib algorithm name
        chunk_size: Read size in bytes

    Returns:
        Hex digest string
    """
    digest = hashlib.new(algorithm)

    with open(file_path, "rb") as f:
        while chunk := f.read(chunk_size):
            digest.update(chunk)

    return digest.hexdigest()


class DuplicateScanner:
    """
    Find byte-identical files under a root directory.

    Steps:
    1. Enumerate files
    2. Bucket by size
    3. Hash buckets with 2+ files
    4. Group by hash, sort members, aggregate savings
    """

    def __init__(
        self,
        config: ScanConfig,
        progress_callback: Optional[Callable[[ScanStats], None]] = None,
    ):
        """
        Initialize scanner.

        Args:
            config: Scan configuration
            progress_callback: Called after each hashed file
        """
        self.config = config
        self.progress_callback = progress_callback
        self.stats = ScanStats()
        self._warnings: list[FileWarning] = []

    async def scan(self) -> DuplicateScanResult:
        """
        Main scan entry point.

        Returns:
            DuplicateScanResult; success=False only when the root itself is
            unusable
        """
        self.stats = ScanStats()
        self._warnings = []

        try:
            root = ensure_directory(self.config.root_path)
        except SourceDirectoryError as e:
            logger.warning("dedup_scan_root_invalid", root_path=str(self.config.root_path), error=str(e))
            return DuplicateScanResult(success=False, error=str(e))

        logger.info(
            "dedup_scan_started",
            root_path=str(root),
            recursive=self.config.recursive,
            algorithm=self.config.hash_algorithm,
        )

        try:
            files = await asyncio.to_thread(list_files, root, self.config.recursive, self._warnings)
        except OSError as e:
            logger.error("dedup_scan_failed", root_path=str(root), error=str(e))
            return DuplicateScanResult(success=False, error=str(e))

        self.stats.total_files = len(files)

        size_buckets = self._bucket_by_size(files)
        candidates = [record for bucket in size_buckets.values() if len(bucket) > 1 for record in bucket]
        self.stats.candidates = len(candidates)

        await self._hash_records(candidates)

        groups = await self._build_duplicate_groups(candidates)

        total_duplicates = sum(len(g.files) - 1 for g in groups)
        total_savings = sum(g.wasted_bytes for g in groups)

        result = DuplicateScanResult(
            success=True,
            groups=groups,
            total_files=len(files),
            total_duplicates=total_duplicates,
            total_savings=total_savings,
            warnings=list(self._warnings),
        )

        logger.info(
            "dedup_scan_completed",
            total_files=result.total_files,
            candidates=self.stats.candidates,
            duplicate_groups=len(groups),
            total_duplicates=total_duplicates,
            total_savings=total_savings,
            warnings=len(result.warnings),
        )

        return result

    def _bucket_by_size(self, files: list[Path]) -> dict[int, list[FileRecord]]:
        """Group files by byte size; stat failures become warnings."""
        buckets: dict[int, list[FileRecord]] = {}
        for file_path in files:
            try:
                size = os.stat(file_path).st_size
            except OSError as e:
                self._record_warning(file_path, FileOperation.stat, e)
                continue
            buckets.setdefault(size, []).append(FileRecord(path=str(file_path), size=size))
        return buckets

    async def _hash_records(self, records: list[FileRecord]) -> None:
        """Hash records concurrently, at most hash_workers at a time."""
        semaphore = asyncio.Semaphore(self.config.hash_workers)

        async def _hash_one(record: FileRecord) -> None:
            async with semaphore:
                try:
                    record.content_hash = await asyncio.to_thread(
                        hash_file,
                        record.path,
                        self.config.hash_algorithm,
                        self.config.chunk_size,
                    )
                    self.stats.hashed += 1
                except OSError as e:
                    self._record_warning(record.path, FileOperation.hash, e)

                if self.progress_callback:
                    self.progress_callback(self.stats)

        await asyncio.gather(*(_hash_one(r) for r in records))

    async def _build_duplicate_groups(self, records: list[FileRecord]) -> list[DuplicateGroup]:
        """
        Build duplicate groups from hashed records.

        Only hash buckets with 2+ files become groups. Groups are ordered by
        their canonical path.
        """
        by_hash: dict[str, list[FileRecord]] = {}
        for record in records:
            if record.content_hash is None:
                continue
            by_hash.setdefault(record.content_hash, []).append(record)

        groups: list[DuplicateGroup] = []
        for content_hash, members in by_hash.items():
            if len(members) < 2:
                continue

            if self.config.strict_compare:
                clusters = await asyncio.to_thread(self._split_by_content, members)
            else:
                clusters = [members]

            for cluster in clusters:
                if len(cluster) < 2:
                    continue
                groups.append(
                    DuplicateGroup(
                        hash=content_hash,
                        files=sorted(r.path for r in cluster),
                        size=cluster[0].size,
                        algorithm=self.config.hash_algorithm,
                    )
                )

        groups.sort(key=lambda g: g.files[0])
        return groups

    def _split_by_content(self, members: list[FileRecord]) -> list[list[FileRecord]]:
        """Partition same-hash records into byte-identical clusters."""
        clusters: list[list[FileRecord]] = []
        for record in sorted(members, key=lambda r: r.path):
            for cluster in clusters:
                try:
                    same = filecmp.cmp(cluster[0].path, record.path, shallow=False)
                except OSError as e:
                    self._record_warning(record.path, FileOperation.read, e)
                    break
                if same:
                    cluster.append(record)
                    break
            else:
                clusters.append([record])
        return clusters

    def _record_warning(self, path: Path | str, operation: FileOperation, error: Exception) -> None:
        self.stats.errors += 1
        self._warnings.append(FileWarning(path=str(path), operation=operation, error=str(error)))
        logger.debug(
            "dedup_file_skipped",
            file_path=str(path),
            operation=operation.value,
            error=str(error),
        )
