"""Pydantic models for unused-asset detection."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from nextasset.core.models import FileWarning


class UnusedAssetsOptions(BaseModel):
    """Options for find_unused_assets()."""

    reference_dirs: list[Path] = Field(..., min_length=1)
    delete_unused: bool = False
    archive_dir: Optional[Path] = None
    output_file: Optional[Path] = None
    recursive: bool = True
    skip_confirmation: bool = False
    reference_extensions: Optional[list[str]] = None


class UnusedAssetResult(BaseModel):
    """Unused assets found under a source directory."""

    success: bool = True
    unused_assets: list[str] = Field(default_factory=list)
    total_assets: int = 0
    reference_dirs: list[str] = Field(default_factory=list)
    deleted_count: Optional[int] = None
    archived_to: Optional[str] = None
    warnings: list[FileWarning] = Field(default_factory=list)
    error: Optional[str] = None


class UnusedHandlingResult(BaseModel):
    """Outcome of handle_unused_assets()."""

    deleted_count: int = 0
    archived_count: int = 0
    archived_to: Optional[str] = None
    warnings: list[FileWarning] = Field(default_factory=list)
