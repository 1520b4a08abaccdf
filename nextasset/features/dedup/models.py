"""
Pydantic models for the duplicate-asset engine.

Models:
- ScanConfig: Scan configuration (root, recursion, hashing)
- ScanStats: Running scan statistics (progress callback payload)
- FileRecord: Single file with size and lazily computed hash
- DuplicateGroup: Byte-identical files; files[0] is the one kept
- DuplicateScanResult: Scan output, optionally with consolidation counts
- ConsolidationOptions / ConsolidationResult: Destructive step
- DuplicateOptions: Everything find_duplicates() accepts
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from nextasset.config.settings import check_hash_algorithm, get_settings
from nextasset.core.models import FileWarning


class ScanConfig(BaseModel):
    """Configuration for a duplicate scan."""

    root_path: Path = Field(description="Directory to scan")
    recursive: bool = Field(default=True, description="Descend into subdirectories")
    hash_algorithm: str = Field(
        default_factory=lambda: get_settings().hash_algorithm,
        description="hashlib algorithm for content identity",
    )
    chunk_size: int = Field(
        default_factory=lambda: get_settings().chunk_size,
        ge=1,
        description="Hashing read size in bytes",
    )
    hash_workers: int = Field(
        default_factory=lambda: get_settings().hash_workers,
        ge=1,
        description="Maximum files hashed concurrently",
    )
    strict_compare: bool = Field(
        default_factory=lambda: get_settings().strict_compare,
        description="Confirm equal hashes byte-for-byte",
    )

    @field_validator("hash_algorithm")
    @classmethod
    def validate_hash_algorithm(cls, v: str) -> str:
        return check_hash_algorithm(v)


class ScanStats(BaseModel):
    """Running scan statistics."""

    total_files: int = 0
    candidates: int = 0
    hashed: int = 0
    errors: int = 0


class FileRecord(BaseModel):
    """Single file; content_hash is only set for size-bucket candidates."""

    path: str
    size: int
    content_hash: Optional[str] = None


class DuplicateGroup(BaseModel):
    """
    Files sharing the same content hash.

    ``files`` is always sorted lexicographically (plain string order) and
    holds at least two paths; ``files[0]`` is the canonical file to keep.
    """

    hash: str
    files: list[str]
    size: int
    algorithm: Optional[str] = Field(default=None, description="Algorithm that produced hash")

    @field_validator("files")
    @classmethod
    def validate_files(cls, v: list[str]) -> list[str]:
        if len(v) < 2:
            raise ValueError("A duplicate group needs at least 2 files")
        return sorted(v)

    @property
    def keeper(self) -> str:
        return self.files[0]

    @property
    def duplicates(self) -> list[str]:
        return self.files[1:]

    @property
    def wasted_bytes(self) -> int:
        return self.size * (len(self.files) - 1)


class DuplicateScanResult(BaseModel):
    """Result of scan(); consolidation counts are None unless it ran."""

    success: bool = True
    scan_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    groups: list[DuplicateGroup] = Field(default_factory=list)
    total_files: int = 0
    total_duplicates: int = 0
    total_savings: int = 0
    removed_count: Optional[int] = None
    references_updated: Optional[int] = None
    warnings: list[FileWarning] = Field(default_factory=list)
    error: Optional[str] = None


class ConsolidationOptions(BaseModel):
    """
    Options for consolidate().

    Deletion wins over archiving when both are set. With neither,
    consolidate() is a no-op.
    """

    delete_duplicates: bool = False
    archive_dir: Optional[Path] = None
    reference_dirs: list[Path] = Field(default_factory=list)
    use_trash: bool = Field(default=False, description="Delete through send2trash")
    verify_hashes: bool = Field(
        default_factory=lambda: get_settings().verify_hashes,
        description="Re-hash each duplicate before rewriting references to it",
    )
    hash_algorithm: str = Field(default_factory=lambda: get_settings().hash_algorithm)
    chunk_size: int = Field(default_factory=lambda: get_settings().chunk_size, ge=1)
    reference_extensions: Optional[list[str]] = Field(
        default=None, description="Override of the reference file allow-list"
    )

    @field_validator("hash_algorithm")
    @classmethod
    def validate_hash_algorithm(cls, v: str) -> str:
        return check_hash_algorithm(v)

    @property
    def is_destructive(self) -> bool:
        return self.delete_duplicates or self.archive_dir is not None


class ConsolidationResult(BaseModel):
    """Counts of removed duplicates and rewritten reference files."""

    removed_count: int = 0
    references_updated: int = 0
    removed_files: list[str] = Field(default_factory=list)
    skipped_files: list[str] = Field(default_factory=list)
    warnings: list[FileWarning] = Field(default_factory=list)


class DuplicateOptions(BaseModel):
    """Options of find_duplicates() (scan + optional consolidation + report)."""

    recursive: bool = True
    reference_dirs: list[Path] = Field(default_factory=list)
    delete_duplicates: bool = False
    archive_dir: Optional[Path] = None
    use_trash: bool = False
    output_file: Optional[Path] = None
    skip_confirmation: bool = False
    verify_hashes: bool = Field(default_factory=lambda: get_settings().verify_hashes)
    strict_compare: bool = Field(default_factory=lambda: get_settings().strict_compare)

    def to_scan_config(self, root_path: Path | str) -> ScanConfig:
        return ScanConfig(
            root_path=Path(root_path),
            recursive=self.recursive,
            strict_compare=self.strict_compare,
        )

    def to_consolidation_options(self) -> ConsolidationOptions:
        return ConsolidationOptions(
            delete_duplicates=self.delete_duplicates,
            archive_dir=self.archive_dir,
            reference_dirs=self.reference_dirs,
            use_trash=self.use_trash,
            verify_hashes=self.verify_hashes,
        )
