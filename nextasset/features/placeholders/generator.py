"""
Blur placeholder generation.

Each image is shrunk to a few pixels wide, blurred, re-encoded in its own
format and emitted as a base64 data URL, ready for ``next/image``'s
``blurDataURL``.
"""

from __future__ import annotations

import asyncio
import base64
import io
import json
import os
from pathlib import Path
from typing import Optional

import structlog
from PIL import Image, ImageFilter
from pydantic import BaseModel, Field

from nextasset.config.exceptions import ImageProcessingError
from nextasset.core.fs import ensure_directory, filter_by_extension, list_files
from nextasset.core.models import FileOperation, FileWarning
from nextasset.features.images.codec import pillow_format, resize_to_width, save_image

logger = structlog.get_logger(__name__)

PLACEHOLDER_EXTENSIONS = [".jpg", ".jpeg", ".png", ".webp", ".avif"]

BLUR_RADIUS = 1


class PlaceholderOptions(BaseModel):
    size: int = Field(default=10, ge=1, description="Placeholder width in pixels")
    quality: int = Field(default=50, ge=1, le=100)
    output_file: Path = Path("placeholders.json")
    recursive: bool = True


class PlaceholderResult(BaseModel):
    success: bool = True
    count: int = 0
    output_file: str
    data: dict[str, str] = Field(default_factory=dict)
    warnings: list[FileWarning] = Field(default_factory=list)


def build_placeholder(file_path: Path, size: int = 10, quality: int = 50) -> str:
    """Return ``data:image/<format>;base64,...`` for one image."""
    with Image.open(file_path) as img:
        img.load()
        fmt_name = (img.format or "jpeg").lower()
        # Palette and bilevel images can't be filtered
        source = img.convert("RGBA") if img.mode in ("P", "1") else img
        small = resize_to_width(source, size).filter(ImageFilter.GaussianBlur(BLUR_RADIUS))

    buffer = io.BytesIO()
    save_image(small, buffer, pillow_format(fmt_name), quality)
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/{fmt_name};base64,{encoded}"


async def generate_placeholders(
    source_dir: Path | str,
    options: Optional[PlaceholderOptions] = None,
) -> PlaceholderResult:
    """
    Generate placeholders for every image and write them to ``options.output_file``.

    Raises:
        SourceDirectoryError: source_dir missing or not a directory
    """
    options = options or PlaceholderOptions()
    root = ensure_directory(source_dir)

    warnings: list[FileWarning] = []
    images = filter_by_extension(list_files(root, options.recursive, warnings), PLACEHOLDER_EXTENSIONS)

    data: dict[str, str] = {}
    for image in images:
        try:
            data_url = await asyncio.to_thread(build_placeholder, image, options.size, options.quality)
        except (OSError, ValueError, ImageProcessingError) as e:
            logger.warning("placeholder_generation_failed", file_path=str(image), error=str(e))
            warnings.append(FileWarning(path=str(image), operation=FileOperation.process, error=str(e)))
            continue
        data[Path(os.path.relpath(image, root)).as_posix()] = data_url

    output_file = Path(options.output_file)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)

    logger.info("placeholders_generated", source_dir=str(root), count=len(data), output_file=str(output_file))

    return PlaceholderResult(count=len(data), output_file=str(output_file), data=data, warnings=warnings)
