"""
Pillow encode helpers shared by conversion, resizing and placeholders.

Pillow does the decoding, resampling and encoding; this module only maps
target formats to Pillow save arguments and colour modes.
"""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Union

from PIL import Image

from nextasset.config.exceptions import ImageProcessingError

# Format name (lower-case, as used in file names and data URLs) -> Pillow format
PILLOW_FORMATS = {
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "png": "PNG",
    "webp": "WEBP",
    "avif": "AVIF",
    "gif": "GIF",
    "tiff": "TIFF",
    "tif": "TIFF",
    "bmp": "BMP",
}

# Formats without alpha support
_NO_ALPHA = {"JPEG", "BMP"}


def pillow_format(name: str) -> str:
    """
    Resolve a format name or extension to Pillow's format identifier.

    Raises:
        ValueError: Unknown format
    """
    key = name.lower().lstrip(".")
    if key not in PILLOW_FORMATS:
        raise ValueError(f"Unsupported image format: {name}")
    return PILLOW_FORMATS[key]


def output_extension(name: str) -> str:
    """File extension for a target format (``jpeg`` is written as ``jpg``)."""
    key = name.lower().lstrip(".")
    return "jpg" if key == "jpeg" else key


def prepare_for_format(img: Image.Image, fmt: str) -> Image.Image:
    """Convert colour mode so ``fmt`` can encode it."""
    if fmt in _NO_ALPHA:
        if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
            background = Image.new("RGB", img.size, (255, 255, 255))
            rgba = img.convert("RGBA")
            background.paste(rgba, mask=rgba.getchannel("A"))
            return background
        if img.mode not in ("RGB", "L"):
            return img.convert("RGB")
        return img

    if fmt in ("WEBP", "AVIF") and img.mode not in ("RGB", "RGBA"):
        has_alpha = img.mode in ("LA", "PA") or "transparency" in img.info
        return img.convert("RGBA" if has_alpha else "RGB")

    return img


def save_image(
    img: Image.Image,
    target: Union[str, Path, BinaryIO],
    fmt: str,
    quality: int = 80,
) -> None:
    """
    Encode ``img`` as ``fmt`` (Pillow identifier) to a path or buffer.

    Quality applies to lossy formats; PNG is written losslessly with
    optimisation.
    """
    img = prepare_for_format(img, fmt)

    kwargs = {}
    if fmt in ("JPEG", "WEBP", "AVIF"):
        kwargs["quality"] = quality
    if fmt in ("JPEG", "PNG"):
        kwargs["optimize"] = True

    try:
        img.save(target, format=fmt, **kwargs)
    except KeyError as e:
        # Pillow built without this encoder
        raise ImageProcessingError(f"No {fmt} encoder available in Pillow") from e


def resize_to_width(img: Image.Image, width: int) -> Image.Image:
    """Resize preserving aspect ratio (upscales too)."""
    w, h = img.size
    height = max(1, round(h * width / w))
    return img.resize((width, height), Image.Resampling.LANCZOS)
