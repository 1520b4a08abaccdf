"""
Image format conversion to WebP / AVIF.

For each image: encode with Pillow, rewrite references from the old file name
to the new one, then (optionally) delete or archive the original. Images are
processed one after another so reference rewrites never overlap.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import structlog
from PIL import Image

from nextasset.config.exceptions import ImageProcessingError
from nextasset.core.fs import ensure_directory, filter_by_extension, list_files
from nextasset.core.models import OriginalHandling
from nextasset.core.originals import handle_original
from nextasset.core.references import rewrite_references
from nextasset.features.images.codec import pillow_format, save_image
from nextasset.features.images.models import ConversionOptions, ConversionResult

logger = structlog.get_logger(__name__)

CONVERTIBLE_EXTENSIONS = [".jpg", ".jpeg", ".png", ".gif", ".tiff", ".bmp"]


def _encode(input_path: Path, output_path: Path, fmt: str, quality: int) -> None:
    with Image.open(input_path) as img:
        img.load()
        save_image(img, output_path, fmt, quality)


async def convert_image(
    input_path: Path | str,
    options: ConversionOptions,
    handle_originals: bool = True,
) -> ConversionResult:
    """
    Convert one image.

    Args:
        input_path: Source image
        options: Target format, quality, output dir, references, originals
        handle_originals: When False the original is always kept (review flow)

    Returns:
        ConversionResult (success=False with error on any failure)
    """
    source = Path(input_path)
    target_format = options.format.value
    output_dir = options.output_dir or source.parent
    output_path = output_dir / f"{source.stem}.{target_format}"

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread(_encode, source, output_path, pillow_format(target_format), options.quality)

        references_updated = 0
        if options.reference_dirs:
            references_updated = await rewrite_references(
                {source.name: output_path.name}, options.reference_dirs
            )

        if handle_originals:
            original_handled = await handle_original(
                source, options.delete_originals, options.archive_dir
            )
        else:
            original_handled = OriginalHandling.kept
    except (OSError, ValueError, ImageProcessingError) as e:
        logger.error("image_conversion_failed", input_path=str(source), error=str(e))
        return ConversionResult(success=False, input_path=str(source), error=str(e))

    logger.info(
        "image_converted",
        input_path=str(source),
        output_path=str(output_path),
        references_updated=references_updated,
        original=original_handled.value,
    )

    return ConversionResult(
        success=True,
        input_path=str(source),
        output_path=str(output_path),
        references_updated=references_updated,
        original_handled=original_handled,
    )


async def convert_images(
    input_paths: list[Path | str],
    options: ConversionOptions,
    handle_originals: bool = True,
) -> list[ConversionResult]:
    """Convert several images sequentially."""
    results = []
    for path in input_paths:
        results.append(await convert_image(path, options, handle_originals))
    return results


async def convert_images_in_folder(
    source_dir: Path | str,
    options: ConversionOptions,
) -> list[ConversionResult]:
    """
    Convert every convertible image directly inside ``source_dir``.

    Originals are only deleted/archived when ``skip_confirmation`` is set;
    otherwise they are kept and handle_originals_after_review() applies the
    reviewed decision.

    Raises:
        SourceDirectoryError: source_dir missing or not a directory
    """
    root = ensure_directory(source_dir)
    images = filter_by_extension(list_files(root, recursive=False), CONVERTIBLE_EXTENSIONS)

    logger.info("image_conversion_started", source_dir=str(root), images=len(images))

    return await convert_images(images, options, handle_originals=options.skip_confirmation)


async def handle_originals_after_review(
    results: list[ConversionResult],
    delete_originals: bool,
    archive_dir: Optional[Path | str] = None,
) -> list[ConversionResult]:
    """Delete/archive originals of successful conversions after confirmation."""
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
