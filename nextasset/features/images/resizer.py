"""
Responsive image resizing.

Each image is written once per requested width as ``<stem>-<width>.<ext>``.
Files whose stem already ends in ``-<digits>`` are treated as earlier output
and skipped.
"""

from __future__ import annotations

import asyncio
import re
from pathlib import Path
from typing import Optional

import structlog
from PIL import Image

from nextasset.config.exceptions import ImageProcessingError
from nextasset.core.fs import ensure_directory, filter_by_extension, list_files
from nextasset.core.models import OriginalHandling
from nextasset.core.originals import handle_original
from nextasset.features.images.codec import output_extension, pillow_format, resize_to_width, save_image
from nextasset.features.images.models import ResizeFormat, ResizeOptions, ResizeResult

logger = structlog.get_logger(__name__)

RESIZABLE_EXTENSIONS = [".jpg", ".jpeg", ".png", ".webp", ".avif", ".tiff", ".bmp"]

RESIZED_SUFFIX = re.compile(r"-\d+$")


def is_already_resized(file_path: Path | str) -> bool:
    """True for names like ``hero-640.jpg``."""
    return RESIZED_SUFFIX.search(Path(file_path).stem) is not None


def _resize(input_path: Path, outputs: list[tuple[int, Path]], fmt: str, quality: int) -> None:
    with Image.open(input_path) as img:
        img.load()
        for width, output_path in outputs:
            save_image(resize_to_width(img, width), output_path, fmt, quality)


async def resize_image(
    input_path: Path | str,
    options: ResizeOptions,
    handle_originals: bool = True,
) -> ResizeResult:
    """
    Resize one image to every width in ``options.widths``.

    Returns:
        ResizeResult (success=False with error on any failure)
    """
    source = Path(input_path)

    if options.format == ResizeFormat.original:
        target_format = source.suffix.lower().lstrip(".")
    else:
        target_format = options.format.value

    target_dir = options.output_dir or source.parent
    extension = output_extension(target_format)
    outputs = [(w, target_dir / f"{source.stem}-{w}.{extension}") for w in options.widths]

    try:
        fmt = pillow_format(target_format)
        target_dir.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread(_resize, source, outputs, fmt, options.quality)

        if handle_originals:
            original_handled = await handle_original(
                source, options.delete_originals, options.archive_dir
            )
        else:
            original_handled = OriginalHandling.kept
    except (OSError, ValueError, ImageProcessingError) as e:
        logger.error("image_resize_failed", input_path=str(source), error=str(e))
        return ResizeResult(success=False, input_path=str(source), error=str(e))

    logger.info(
        "image_resized",
        input_path=str(source),
        widths=options.widths,
        original=original_handled.value,
    )

    return ResizeResult(
        success=True,
        input_path=str(source),
        output_paths=[str(p) for _, p in outputs],
        original_handled=original_handled,
    )


async def resize_images_in_folder(
    source_dir: Path | str,
    options: ResizeOptions,
) -> list[ResizeResult]:
    """
    Resize every image under ``source_dir`` not already resized.

    Originals are only deleted/archived when ``skip_confirmation`` is set.

    Raises:
        SourceDirectoryError: source_dir missing or not a directory
    """
    root = ensure_directory(source_dir)
    images = [
        f
        for f in filter_by_extension(list_files(root, options.recursive), RESIZABLE_EXTENSIONS)
        if not is_already_resized(f)
    ]

    logger.info("image_resize_started", source_dir=str(root), images=len(images), widths=options.widths)

    results = []
    for image in images:
        results.append(await resize_image(image, options, handle_originals=options.skip_confirmation))
    return results


async def handle_originals_after_review(
    results: list[ResizeResult],
    delete_originals: bool,
    archive_dir: Optional[Path | str] = None,
) -> list[ResizeResult]:
    """Delete/archive originals of successful resizes after confirmation."""
    for result in results:
        if not result.success:
            continue
        try:
            result.original_handled = await handle_original(
                result.input_path, delete_originals, archive_dir
            )
        except OSError as e:
            logger.error("original_handling_failed", input_path=result.input_path, error=str(e))
            result.error = str(e)
    return results
