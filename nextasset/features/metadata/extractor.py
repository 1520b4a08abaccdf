"""
Asset metadata extraction.

Reads width, height, format, byte size and aspect ratio for every asset and
writes a JSON map keyed by path relative to the source directory. Raster
images are read with Pillow; SVG dimensions come from the root element's
width/height attributes or, failing that, its viewBox.
"""

from __future__ import annotations

import asyncio
import json
import os
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional

import structlog
from PIL import Image, UnidentifiedImageError
from pydantic import BaseModel, Field

from nextasset.core.fs import ensure_directory, filter_by_extension, list_files
from nextasset.core.models import FileOperation, FileWarning

logger = structlog.get_logger(__name__)

ASSET_EXTENSIONS = [".jpg", ".jpeg", ".png", ".webp", ".avif", ".svg", ".gif", ".tiff", ".bmp"]

_SVG_LENGTH = re.compile(r"^\s*([0-9]*\.?[0-9]+)\s*(px)?\s*$")


class AssetMetadata(BaseModel):
    width: Optional[int] = None
    height: Optional[int] = None
    format: Optional[str] = None
    size: Optional[int] = None
    aspect_ratio: Optional[float] = None


class MetadataOptions(BaseModel):
    output_file: Path = Path("metadata.json")
    include_size: bool = True
    recursive: bool = True


class MetadataResult(BaseModel):
    success: bool = True
    count: int = 0
    output_file: str
    data: dict[str, AssetMetadata] = Field(default_factory=dict)
    warnings: list[FileWarning] = Field(default_factory=list)


def _parse_svg_length(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    match = _SVG_LENGTH.match(value)
    if not match:
        return None
    return round(float(match.group(1)))


def read_svg_dimensions(file_path: Path) -> tuple[Optional[int], Optional[int]]:
    """Width and height of an SVG; percentages and unit-bearing lengths are ignored."""
    root = ET.parse(file_path).getroot()
    width = _parse_svg_length(root.get("width"))
    height = _parse_svg_length(root.get("height"))

    view_box = root.get("viewBox")
    if (width is None or height is None) and view_box:
        parts = view_box.replace(",", " ").split()
        if len(parts) == 4:
            width = width if width is not None else round(float(parts[2]))
            height = height if height is not None else round(float(parts[3]))

    return width, height


def read_metadata(file_path: Path, include_size: bool = True) -> AssetMetadata:
    """
    Read one asset's metadata.

    Raises:
        OSError: Unreadable file or format Pillow cannot identify
        ET.ParseError: Malformed SVG
    """
    if file_path.suffix.lower() == ".svg":
        width, height = read_svg_dimensions(file_path)
        fmt = "svg"
    else:
        with Image.open(file_path) as img:
            width, height = img.size
            fmt = (img.format or file_path.suffix.lstrip(".")).lower()

    return AssetMetadata(
        width=width,
        height=height,
        format=fmt,
        size=os.stat(file_path).st_size if include_size else None,
        aspect_ratio=width / height if width and height else None,
    )


async def extract_metadata(
    source_dir: Path | str,
    options: Optional[MetadataOptions] = None,
) -> MetadataResult:
    """
    Extract metadata for every asset and write it to ``options.output_file``.

    Raises:
        SourceDirectoryError: source_dir missing or not a directory
    """
    options = options or MetadataOptions()
    root = ensure_directory(source_dir)

    warnings: list[FileWarning] = []
    assets = filter_by_extension(list_files(root, options.recursive, warnings), ASSET_EXTENSIONS)

    data: dict[str, AssetMetadata] = {}
    for asset in assets:
        try:
            metadata = await asyncio.to_thread(read_metadata, asset, options.include_size)
        except (OSError, UnidentifiedImageError, ET.ParseError, ValueError) as e:
            logger.warning("metadata_extraction_failed", file_path=str(asset), error=str(e))
            warnings.append(FileWarning(path=str(asset), operation=FileOperation.process, error=str(e)))
            continue
        data[Path(os.path.relpath(asset, root)).as_posix()] = metadata

    output_file = Path(options.output_file)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(
            {
                key: {
                    "width": m.width,
                    "height": m.height,
                    "format": m.format,
                    **({"size": m.size} if m.size is not None else {}),
                    "aspectRatio": m.aspect_ratio,
                }
                for key, m in data.items()
            },
            f,
            indent=2,
        )

    logger.info("metadata_extracted", source_dir=str(root), count=len(data), output_file=str(output_file))

    return MetadataResult(count=len(data), output_file=str(output_file), data=data, warnings=warnings)
