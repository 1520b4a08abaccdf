"""Image conversion (WebP/AVIF) and responsive resizing, encoded by Pillow."""

from nextasset.features.images.converter import (
    convert_image,
    convert_images,
    convert_images_in_folder,
)
from nextasset.features.images.models import (
    ConversionOptions,
    ConversionResult,
    ResizeFormat,
    ResizeOptions,
    ResizeResult,
    TargetFormat,
)
from nextasset.features.images.resizer import resize_image, resize_images_in_folder

__all__ = [
    "ConversionOptions",
    "ConversionResult",
    "ResizeFormat",
    "ResizeOptions",
    "ResizeResult",
    "TargetFormat",
    "convert_image",
    "convert_images",
    "convert_images_in_folder",
    "resize_image",
    "resize_images_in_folder",
]
