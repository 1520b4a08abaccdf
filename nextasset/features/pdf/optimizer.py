"""
PDF optimization.

Pages are copied into a fresh PdfWriter, which leaves behind objects no page
refers to, and their content streams are optionally Flate-compressed. The
document info dictionary is carried over. Output keeps the file name; with no
output folder the PDF is rewritten in place and the original is never
deleted or archived.
"""

from __future__ import annotations

import asyncio
import io
from pathlib import Path
from typing import Optional

import structlog
from PyPDF2 import PdfReader, PdfWriter
from PyPDF2.errors import PdfReadError

from nextasset.core.fs import ensure_directory, filter_by_extension, list_files
from nextasset.core.models import OriginalHandling
from nextasset.core.originals import handle_original
from nextasset.features.pdf.models import PdfOptimizeOptions, PdfOptimizeResult

logger = structlog.get_logger(__name__)

PDF_EXTENSIONS = [".pdf"]


def _rewrite_pdf(input_path: Path, output_path: Path, compress_streams: bool) -> tuple[int, int, int]:
    original_size = input_path.stat().st_size

    with open(input_path, "rb") as f:
        reader = PdfReader(f)
        writer = PdfWriter()
        for page in reader.pages:
            if compress_streams:
                page.compress_content_streams()
            writer.add_page(page)
        if reader.metadata:
            writer.add_metadata(reader.metadata)

        # serialized fully before output_path is opened; it may be input_path
        buffer = io.BytesIO()
        writer.write(buffer)

    data = buffer.getvalue()
    output_path.write_bytes(data)
    return original_size, len(data), len(writer.pages)


def is_in_place(result: PdfOptimizeResult) -> bool:
    if result.output_path is None:
        return False
    return Path(result.output_path).resolve() == Path(result.input_path).resolve()


async def optimize_pdf(
    input_path: Path | str,
    options: Optional[PdfOptimizeOptions] = None,
    handle_originals: bool = True,
) -> PdfOptimizeResult:
    """
    Rewrite one PDF.

    Returns:
        PdfOptimizeResult (success=False with error for unreadable, encrypted
        or malformed files)
    """
    options = options or PdfOptimizeOptions()
    source = Path(input_path)
    output_dir = options.output_dir or source.parent
    output_path = output_dir / source.name

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        original_size, optimized_size, pages = await asyncio.to_thread(
            _rewrite_pdf, source, output_path, options.compress_streams
        )

        original_handled = OriginalHandling.kept
        if handle_originals and output_path.resolve() != source.resolve():
            original_handled = await handle_original(source, options.delete_originals, options.archive_dir)
    except (OSError, ValueError, PdfReadError) as e:
        logger.error("pdf_optimization_failed", input_path=str(source), error=str(e))
        return PdfOptimizeResult(success=False, input_path=str(source), error=str(e))

    logger.info(
        "pdf_optimized",
        input_path=str(source),
        output_path=str(output_path),
        pages=pages,
        original_size=original_size,
        optimized_size=optimized_size,
    )

    return PdfOptimizeResult(
        success=True,
        input_path=str(source),
        output_path=str(output_path),
        original_size=original_size,
        optimized_size=optimized_size,
        page_count=pages,
        original_handled=original_handled,
    )


async def optimize_pdfs_in_folder(
    source_dir: Path | str,
    options: Optional[PdfOptimizeOptions] = None,
) -> list[PdfOptimizeResult]:
    """
    Optimize every PDF under ``source_dir``, one at a time.

    Raises:
        SourceDirectoryError: source_dir missing or not a directory
    """
    options = options or PdfOptimizeOptions()
    root = ensure_directory(source_dir)
    pdfs = filter_by_extension(list_files(root, recursive=options.recursive), PDF_EXTENSIONS)

    logger.info("pdf_optimization_started", source_dir=str(root), files=len(pdfs))

    results = []
    for pdf in pdfs:
        results.append(await optimize_pdf(pdf, options, handle_originals=options.skip_confirmation))
    return results


async def handle_originals_after_review(
    results: list[PdfOptimizeResult],
    delete_originals: bool,
    archive_dir: Optional[Path | str] = None,
) -> list[PdfOptimizeResult]:
    """Delete/archive originals that were written to a separate output folder."""
    for result in results:
        if not result.success or is_in_place(result):
            continue
        try:
            result.original_handled = await handle_original(result.input_path, delete_originals, archive_dir)
        except OSError as e:
            logger.error("original_handling_failed", input_path=result.input_path, error=str(e))
            result.error = str(e)
    return results
