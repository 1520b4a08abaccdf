"""
SVG optimization through scour.

Comments, metadata, editor data and the XML prolog are stripped, styles are
turned into presentation attributes and coordinates are rounded to
``precision`` significant digits. The optimized file keeps its name, so
references never change; with no output folder the file is rewritten in
place and the original is never deleted or archived.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from types import SimpleNamespace
from typing import Optional
from xml.parsers.expat import ExpatError

import structlog
from scour import scour

from nextasset.core.fs import ensure_directory, filter_by_extension, list_files
from nextasset.core.models import OriginalHandling
from nextasset.core.originals import handle_original
from nextasset.features.svg.models import SvgOptimizeOptions, SvgOptimizeResult

logger = structlog.get_logger(__name__)

SVG_EXTENSIONS = [".svg"]


def scour_svg(svg_text: str, precision: int = 5, **overrides) -> str:
    """
    Run scour over SVG markup.

    Args:
        svg_text: SVG document
        precision: Significant digits for coordinates
        **overrides: Extra scour option values (e.g. strip_ids=True)

    Returns:
        Optimized markup

    Raises:
        ExpatError: Input is not well-formed XML
    """
    options = SimpleNamespace(
        digits=precision,
        strip_comments=True,
        strip_xml_prolog=True,
        remove_metadata=True,
        remove_descriptive_elements=False,
        enable_viewboxing=False,
        indent_type="none",
        newlines=False,
        quiet=True,
    )
    for key, value in overrides.items():
        setattr(options, key, value)
    # unknown keys are ignored by scour's own option sanitizer
    return scour.scourString(svg_text, options)


def _optimize_file(input_path: Path, output_path: Path, precision: int) -> tuple[int, int]:
    svg_text = input_path.read_text(encoding="utf-8")
    optimized = scour_svg(svg_text, precision)
    output_path.write_text(optimized, encoding="utf-8")
    return len(svg_text.encode("utf-8")), len(optimized.encode("utf-8"))


def is_in_place(result: SvgOptimizeResult) -> bool:
    """True when the optimized file replaced its source."""
    if result.output_path is None:
        return False
    return Path(result.output_path).resolve() == Path(result.input_path).resolve()


async def optimize_svg(
    input_path: Path | str,
    options: Optional[SvgOptimizeOptions] = None,
    handle_originals: bool = True,
) -> SvgOptimizeResult:
    """
    Optimize one SVG.

    Args:
        input_path: Source SVG
        options: Precision, output folder, originals handling
        handle_originals: When False the original is always kept (review flow)

    Returns:
        SvgOptimizeResult (success=False with error on any failure)
    """
    options = options or SvgOptimizeOptions()
    source = Path(input_path)
    output_dir = options.output_dir or source.parent
    output_path = output_dir / source.name

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        original_size, optimized_size = await asyncio.to_thread(
            _optimize_file, source, output_path, options.precision
        )

        original_handled = OriginalHandling.kept
        in_place = output_path.resolve() == source.resolve()
        if handle_originals and not in_place:
            original_handled = await handle_original(source, options.delete_originals, options.archive_dir)
    except (OSError, ValueError, ExpatError) as e:
        logger.error("svg_optimization_failed", input_path=str(source), error=str(e))
        return SvgOptimizeResult(success=False, input_path=str(source), error=str(e))

    logger.info(
        "svg_optimized",
        input_path=str(source),
        output_path=str(output_path),
        original_size=original_size,
        optimized_size=optimized_size,
    )

    return SvgOptimizeResult(
        success=True,
        input_path=str(source),
        output_path=str(output_path),
        original_size=original_size,
        optimized_size=optimized_size,
        original_handled=original_handled,
    )


async def optimize_svgs_in_folder(
    source_dir: Path | str,
    options: Optional[SvgOptimizeOptions] = None,
) -> list[SvgOptimizeResult]:
    """
    Optimize every SVG under ``source_dir``.

    Originals are only deleted/archived here when ``skip_confirmation`` is
    set; otherwise handle_originals_after_review() applies the decision.

    Raises:
        SourceDirectoryError: source_dir missing or not a directory
    """
    options = options or SvgOptimizeOptions()
    root = ensure_directory(source_dir)
    svgs = filter_by_extension(list_files(root, recursive=options.recursive), SVG_EXTENSIONS)

    logger.info("svg_optimization_started", source_dir=str(root), files=len(svgs))

    results = []
    for svg in svgs:
        results.append(await optimize_svg(svg, options, handle_originals=options.skip_confirmation))
    return results


async def handle_originals_after_review(
    results: list[SvgOptimizeResult],
    delete_originals: bool,
    archive_dir: Optional[Path | str] = None,
) -> list[SvgOptimizeResult]:
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
