"""Pydantic models for image conversion and resizing."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from nextasset.core.models import OriginalHandling


class TargetFormat(str, Enum):
    """Conversion target formats."""

    webp = "webp"
    avif = "avif"


class ResizeFormat(str, Enum):
    """Resize output formats; ``original`` keeps the input's format."""

    original = "original"
    webp = "webp"
    avif = "avif"
    jpeg = "jpeg"
    png = "png"


class ConversionOptions(BaseModel):
    """Options for convert_image() / convert_images_in_folder()."""

    format: TargetFormat = TargetFormat.webp
    quality: int = Field(default=80, ge=1, le=100)
    output_dir: Optional[Path] = None
    reference_dirs: list[Path] = Field(default_factory=list)
    delete_originals: bool = False
    archive_dir: Optional[Path] = None
    skip_confirmation: bool = False


class ConversionResult(BaseModel):
    """Outcome of converting one image."""

    success: bool
    input_path: str
    output_path: Optional[str] = None
    references_updated: int = 0
    original_handled: Optional[OriginalHandling] = None
    error: Optional[str] = None


class ResizeOptions(BaseModel):
    """Options for resize_image() / resize_images_in_folder()."""

    widths: list[int] = Field(..., min_length=1)
    format: ResizeFormat = ResizeFormat.original
    quality: int = Field(default=80, ge=1, le=100)
    output_dir: Optional[Path] = None
    delete_originals: bool = False
    archive_dir: Optional[Path] = None
    recursive: bool = True
    skip_confirmation: bool = False

    @field_validator("widths")
    @classmethod
    def validate_widths(cls, v: list[int]) -> list[int]:
        if any(w <= 0 for w in v):
            raise ValueError("Widths must be positive integers")
        return v


class ResizeResult(BaseModel):
    """Outcome of resizing one image to every requested width."""

    success: bool
    input_path: str
    output_paths: list[str] = Field(default_factory=list)
    original_handled: Optional[OriginalHandling] = None
    error: Optional[str] = None
