"""
Pydantic models for SVG optimization and component generation.

Models:
- SvgOptimizeOptions / SvgOptimizeResult: In-place or side-by-side scour pass
- SvgComponentOptions / SvgComponentResult: React component generation
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from nextasset.core.models import OriginalHandling


class SvgOptimizeOptions(BaseModel):
    """Options for optimize_svg() / optimize_svgs_in_folder()."""

    precision: int = Field(default=5, ge=1, le=10, description="Significant digits kept in coordinates")
    output_dir: Optional[Path] = Field(default=None, description="None rewrites each file in place")
    delete_originals: bool = False
    archive_dir: Optional[Path] = None
    recursive: bool = True
    skip_confirmation: bool = False


class SvgOptimizeResult(BaseModel):
    """Outcome of optimizing one SVG."""

    success: bool
    input_path: str
    output_path: Optional[str] = None
    original_size: Optional[int] = None
    optimized_size: Optional[int] = None
    original_handled: Optional[OriginalHandling] = None
    error: Optional[str] = None

    @property
    def saved_bytes(self) -> int:
        if self.original_size is None or self.optimized_size is None:
            return 0
        return self.original_size - self.optimized_size


class SvgComponentOptions(BaseModel):
    """Options for svg_to_component() / svg_to_components_in_folder()."""

    output_dir: Path = Path("components/icons")
    typescript: bool = True
    prefix: str = ""
    suffix: str = ""
    remove_dimensions: bool = Field(default=True, description="Drop width/height so CSS sizes the icon")
    generate_index: bool = True
    recursive: bool = True

    @field_validator("prefix", "suffix")
    @classmethod
    def validate_affix(cls, v: str) -> str:
        if v and not re.fullmatch(r"\w+", v, re.ASCII):
            raise ValueError(f"'{v}' is not valid inside a component name")
        return v


class SvgComponentResult(BaseModel):
    """Outcome of turning one SVG into a component file."""

    success: bool
    input_path: str
    output_path: Optional[str] = None
    component_name: Optional[str] = None
    error: Optional[str] = None
