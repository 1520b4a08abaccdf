"""Pydantic models for PDF optimization."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from nextasset.core.models import OriginalHandling


class PdfOptimizeOptions(BaseModel):
    """Options for optimize_pdf() / optimize_pdfs_in_folder()."""

    output_dir: Optional[Path] = None
    compress_streams: bool = True
    delete_originals: bool = False
    archive_dir: Optional[Path] = None
    recursive: bool = True
    skip_confirmation: bool = False


class PdfOptimizeResult(BaseModel):
    """Outcome of rewriting one PDF."""

    success: bool
    input_path: str
    output_path: Optional[str] = None
    original_size: Optional[int] = None
    optimized_size: Optional[int] = None
    page_count: Optional[int] = None
    original_handled: Optional[OriginalHandling] = None
    error: Optional[str] = None
