#!/usr/bin/env python3
"""
nextasset command line interface.

Usage:
    nextasset find-duplicates ./public --refs ./src,./app --archive ./archive
    nextasset find-unused ./public/images --refs ./src --output-file unused.json
    nextasset extract-metadata ./public --output-file ./assets.json
    nextasset generate-placeholders ./public/images --size 20
    nextasset convert-images ./public/images --format avif --refs ./src --delete --yes
    nextasset resize-images ./public/images --widths 640,1280 --format webp
    nextasset optimize-svg ./public/icons --precision 3
    nextasset svg-to-component ./public/icons --output ./components/icons
    nextasset optimize-pdf ./public/docs --output ./public/docs-min --archive ./archive --yes

Destructive flags (--delete, --trash, --archive) ask for confirmation after
the report unless --yes is given.

Exit codes: 0 success, 1 operation failed or invalid invocation (bad source
directory, invalid config, unknown command, missing flag), 130 interrupted.
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path
from typing import Optional

import structlog
from pydantic import ValidationError

from nextasset.config.exceptions import NextAssetError
from nextasset.config.logging import configure_logging
from nextasset.config.settings import get_settings, load_settings, use_settings
from nextasset.features.dedup.engine import consolidate, find_duplicates
from nextasset.features.dedup.models import DuplicateOptions, DuplicateScanResult
from nextasset.features.dedup.report_generator import ReportGenerator
from nextasset.features.images import converter, resizer
from nextasset.features.images.models import (
    ConversionOptions,
    ConversionResult,
    ResizeFormat,
    ResizeOptions,
    ResizeResult,
    TargetFormat,
)
from nextasset.features.metadata import MetadataOptions, extract_metadata
from nextasset.features.pdf import optimizer as pdf_optimizer
from nextasset.features.pdf.models import PdfOptimizeOptions
from nextasset.features.placeholders import PlaceholderOptions, generate_placeholders
from nextasset.features.svg import optimizer as svg_optimizer
from nextasset.features.svg.components import svg_to_components_in_folder
from nextasset.features.svg.models import SvgComponentOptions, SvgOptimizeOptions
from nextasset.features.unused import UnusedAssetsOptions, find_unused_assets, handle_unused_assets

logger = structlog.get_logger(__name__)


def ask_confirmation(question: str) -> bool:
    """Ask a yes/no question on stdin; anything but y/yes (or EOF) is no."""
    try:
        answer = input(question)
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def format_size(size_bytes: int) -> str:
    """Human-readable byte count."""
    size = float(size_bytes)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024 or unit == "GB":
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size_bytes} B"


def _dir_list(value: str) -> list[Path]:
    """Parse ``dir1,dir2`` into paths."""
    dirs = [Path(part.strip()) for part in value.split(",") if part.strip()]
    if not dirs:
        raise argparse.ArgumentTypeError("expected at least one folder")
    return dirs


def _width_list(value: str) -> list[int]:
    try:
        widths = [int(part) for part in value.split(",") if part.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid width list: {value}")
    if not widths or any(w <= 0 for w in widths):
        raise argparse.ArgumentTypeError(f"widths must be positive integers: {value}")
    return widths


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return number


def _quality(value: str) -> int:
    try:
        quality = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid quality: {value}")
    if not 1 <= quality <= 100:
        raise argparse.ArgumentTypeError("quality must be between 1 and 100")
    return quality


def _precision(value: str) -> int:
    digits = _positive_int(value)
    if digits > 10:
        raise argparse.ArgumentTypeError("precision must be between 1 and 10")
    return digits


def _add_removal_flags(parser: argparse.ArgumentParser, trash: bool = False) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--delete", action="store_true", help="Delete files after review")
    if trash:
        group.add_argument("--trash", action="store_true", help="Send files to the OS trash")
    group.add_argument("--archive", type=Path, metavar="DIR", help="Move files to an archive folder")
    parser.add_argument("--yes", "-y", action="store_true", help="Skip confirmation prompts")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nextasset",
        description="Maintenance utilities for Next.js static assets",
    )
    parser.add_argument("--config", help="YAML settings file (default: ./nextasset.yaml if present)")
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "WARNING"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
    )
    parser.add_argument(
        "--log-format",
        default=os.getenv("LOG_FORMAT", "console"),
        choices=["json", "console"],
    )

    subparsers = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    dup = subparsers.add_parser("find-duplicates", help="Find byte-identical assets")
    dup.add_argument("source", type=Path)
    dup.add_argument(
        "--refs",
        type=_dir_list,
        default=[],
        help="Comma-separated folders whose references are rewritten",
    )
    _add_removal_flags(dup, trash=True)
    dup.add_argument("--output-file", type=Path, help="Write the report (.json or .csv)")
    dup.add_argument("--no-recursive", action="store_true", help="Only scan the top-level folder")
    dup.set_defaults(handler=run_find_duplicates)

    unused = subparsers.add_parser("find-unused", help="Find assets not referenced in code")
    unused.add_argument("source", type=Path)
    unused.add_argument("--refs", type=_dir_list, required=True, help="Comma-separated folders to search")
    _add_removal_flags(unused)
    unused.add_argument("--output-file", type=Path, help="Save results to a JSON file")
    unused.add_argument("--no-recursive", action="store_true")
    unused.set_defaults(handler=run_find_unused)

    meta = subparsers.add_parser("extract-metadata", help="Extract dimensions and metadata from assets")
    meta.add_argument("source", type=Path)
    meta.add_argument("--output-file", type=Path, default=Path("metadata.json"))
    meta.add_argument("--no-size", action="store_true", help="Exclude file size")
    meta.add_argument("--no-recursive", action="store_true")
    meta.set_defaults(handler=run_extract_metadata)

    ph = subparsers.add_parser("generate-placeholders", help="Generate blur placeholders")
    ph.add_argument("source", type=Path)
    ph.add_argument("--output-file", type=Path, default=Path("placeholders.json"))
    ph.add_argument("--size", type=_positive_int, default=10, help="Placeholder width (default: 10)")
    ph.add_argument("--quality", type=_quality, default=50)
    ph.add_argument("--no-recursive", action="store_true")
    ph.set_defaults(handler=run_generate_placeholders)

    conv = subparsers.add_parser("convert-images", help="Convert images to WebP/AVIF")
    conv.add_argument("source", type=Path)
    conv.add_argument("--format", choices=[f.value for f in TargetFormat], default="webp")
    conv.add_argument("--quality", type=_quality)
    conv.add_argument("--output", type=Path, help="Output folder")
    conv.add_argument("--refs", type=_dir_list, default=[])
    _add_removal_flags(conv)
    conv.set_defaults(handler=run_convert_images)

    rs = subparsers.add_parser("resize-images", help="Resize images to responsive widths")
    rs.add_argument("source", type=Path)
    rs.add_argument("--widths", type=_width_list, required=True, help="Comma-separated widths")
    rs.add_argument("--format", choices=[f.value for f in ResizeFormat], default="original")
    rs.add_argument("--quality", type=_quality)
    rs.add_argument("--output", type=Path, help="Output folder")
    _add_removal_flags(rs)
    rs.add_argument("--no-recursive", action="store_true")
    rs.set_defaults(handler=run_resize_images)

    svg = subparsers.add_parser("optimize-svg", help="Optimize SVG files")
    svg.add_argument("source", type=Path)
    svg.add_argument("--output", type=Path, help="Output folder (default: rewrite in place)")
    svg.add_argument("--precision", type=_precision, default=5, help="Significant digits (default: 5)")
    _add_removal_flags(svg)
    svg.add_argument("--no-recursive", action="store_true")
    svg.set_defaults(handler=run_optimize_svg)

    comp = subparsers.add_parser("svg-to-component", help="Generate React components from SVGs")
    comp.add_argument("source", type=Path)
    comp.add_argument("--output", type=Path, default=Path("components/icons"))
    comp.add_argument("--js", action="store_true", help="Write .jsx components instead of .tsx")
    comp.add_argument("--prefix", default="", help="Component name prefix")
    comp.add_argument("--suffix", default="", help="Component name suffix")
    comp.add_argument("--keep-dimensions", action="store_true", help="Keep width/height on the root <svg>")
    comp.add_argument("--no-index", action="store_true", help="Do not write an index file")
    comp.add_argument("--no-recursive", action="store_true")
    comp.set_defaults(handler=run_svg_to_component)

    pdf = subparsers.add_parser("optimize-pdf", help="Rewrite PDFs without unused objects")
    pdf.add_argument("source", type=Path)
    pdf.add_argument("--output", type=Path, help="Output folder (default: rewrite in place)")
    pdf.add_argument("--no-compress", action="store_true", help="Leave page content streams as they are")
    _add_removal_flags(pdf)
    pdf.add_argument("--no-recursive", action="store_true")
    pdf.set_defaults(handler=run_optimize_pdf)

    return parser


def _print_duplicate_report(result: DuplicateScanResult) -> None:
    print(f"Scanned {result.total_files} files")
    if not result.groups:
        print("No duplicate files found")
        return

    print(
        f"Found {len(result.groups)} duplicate groups, {result.total_duplicates} duplicates "
        f"({format_size(result.total_savings)} reclaimable)"
    )
    for group in result.groups:
        print(f"\n  {group.hash[:12]}  {format_size(group.size)} x {len(group.files)}")
        print(f"    KEEP    {group.keeper}")
        for duplicate in group.duplicates:
            print(f"    REMOVE  {duplicate}")


def _print_warnings(warnings) -> None:
    if warnings:
        print(f"\n{len(warnings)} warning(s):")
        for w in warnings:
            print(f"  {w.operation.value}: {w.path}: {w.error}")


async def run_find_duplicates(args: argparse.Namespace) -> int:
    delete = args.delete or args.trash
    options = DuplicateOptions(
        recursive=not args.no_recursive,
        reference_dirs=args.refs,
        delete_duplicates=delete,
        archive_dir=args.archive,
        use_trash=args.trash,
        skip_confirmation=args.yes,
    )

    result = await find_duplicates(args.source, options)
    if not result.success:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1

    _print_duplicate_report(result)

    destructive = delete or args.archive is not None
    if destructive and result.groups and not args.yes:
        action = "archive" if args.archive is not None else "delete"
        if ask_confirmation(f"\nDo you want to {action} {result.total_duplicates} duplicate(s)? (y/n): "):
            outcome = await consolidate(result.groups, options.to_consolidation_options())
            result.removed_count = outcome.removed_count
            result.references_updated = outcome.references_updated
            result.warnings.extend(outcome.warnings)
        else:
            print("Duplicates kept.")

    if result.removed_count is not None:
        verb = "Archived" if args.archive is not None else "Removed"
        print(f"\n{verb} {result.removed_count} duplicate(s)")
        print(f"Updated references in {result.references_updated} file(s)")

    _print_warnings(result.warnings)

    if args.output_file is not None:
        ReportGenerator().write(result, args.output_file)
        print(f"Report: {args.output_file}")

    return 0


async def run_find_unused(args: argparse.Namespace) -> int:
    options = UnusedAssetsOptions(
        reference_dirs=args.refs,
        delete_unused=args.delete,
        archive_dir=args.archive,
        output_file=args.output_file,
        recursive=not args.no_recursive,
        skip_confirmation=args.yes,
    )

    result = await find_unused_assets(args.source, options)
    if not result.success:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1

    print(f"Scanned {result.total_assets} assets")
    print(f"Found {len(result.unused_assets)} unused assets")
    for asset in result.unused_assets:
        print(f"  {asset}")

    destructive = args.delete or args.archive is not None
    if destructive and result.unused_assets:
        if args.yes:
            if result.deleted_count:
                print(f"Deleted {result.deleted_count} unused assets")
            elif result.archived_to:
                print(f"Archived unused assets to {result.archived_to}")
        else:
            action = "delete" if args.delete else "archive"
            if ask_confirmation(f"\nDo you want to {action} the unused assets? (y/n): "):
                handled = await handle_unused_assets(
                    result.unused_assets, delete_unused=args.delete, archive_dir=args.archive
                )
                if args.delete:
                    print(f"Deleted {handled.deleted_count} unused assets")
                else:
                    print(f"Archived {handled.archived_count} unused assets to {handled.archived_to}")
                result.warnings.extend(handled.warnings)
            else:
                print("Unused assets kept.")

    _print_warnings(result.warnings)
    return 0


async def run_extract_metadata(args: argparse.Namespace) -> int:
    result = await extract_metadata(
        args.source,
        MetadataOptions(
            output_file=args.output_file,
            include_size=not args.no_size,
            recursive=not args.no_recursive,
        ),
    )
    print(f"Extracted metadata from {result.count} assets")
    print(f"  Output: {result.output_file}")
    _print_warnings(result.warnings)
    return 0


async def run_generate_placeholders(args: argparse.Namespace) -> int:
    result = await generate_placeholders(
        args.source,
        PlaceholderOptions(
            size=args.size,
            quality=args.quality,
            output_file=args.output_file,
            recursive=not args.no_recursive,
        ),
    )
    print(f"Generated {result.count} placeholders")
    print(f"  Output: {result.output_file}")
    _print_warnings(result.warnings)
    return 0


def _print_results(results, label: str) -> None:
    successful = [r for r in results if r.success]
    print(f"{label} {len(successful)}/{len(results)} images")
    for r in results:
        if not r.success:
            print(f"  FAILED {r.input_path}: {r.error}")
        elif isinstance(r, ConversionResult):
            print(f"  {r.input_path} -> {r.output_path}")
            if r.references_updated:
                print(f"    Updated {r.references_updated} reference(s)")
        else:
            print(f"  {r.input_path} -> {', '.join(r.output_paths)}")


async def _review_originals(args: argparse.Namespace, results, handler) -> None:
    """Confirm and apply --delete/--archive to originals of successful results."""
    if not (args.delete or args.archive is not None):
        return
    if not any(r.success for r in results):
        return

    if not args.yes:
        action = "delete" if args.delete else "archive"
        if not ask_confirmation(f"\nDo you want to {action} the original files? (y/n): "):
            print("Original files kept.")
            return
        await handler(results, args.delete, args.archive)

    for r in results:
        if r.success and r.original_handled is not None:
            print(f"  {r.input_path}: {r.original_handled.value}")


async def run_convert_images(args: argparse.Namespace) -> int:
    quality = args.quality if args.quality is not None else get_settings().default_quality
    options = ConversionOptions(
        format=TargetFormat(args.format),
        quality=quality,
        output_dir=args.output,
        reference_dirs=args.refs,
        delete_originals=args.delete,
        archive_dir=args.archive,
        skip_confirmation=args.yes,
    )
    results: list[ConversionResult] = await converter.convert_images_in_folder(args.source, options)
    _print_results(results, f"Converted to {args.format}:")
    await _review_originals(args, results, converter.handle_originals_after_review)
    return 0


async def run_resize_images(args: argparse.Namespace) -> int:
    quality = args.quality if args.quality is not None else get_settings().default_quality
    options = ResizeOptions(
        widths=args.widths,
        format=ResizeFormat(args.format),
        quality=quality,
        output_dir=args.output,
        delete_originals=args.delete,
        archive_dir=args.archive,
        recursive=not args.no_recursive,
        skip_confirmation=args.yes,
    )
    results: list[ResizeResult] = await resizer.resize_images_in_folder(args.source, options)
    _print_results(results, "Resized")
    await _review_originals(args, results, resizer.handle_originals_after_review)
    return 0


def _print_optimized(results, noun: str) -> None:
    successful = [r for r in results if r.success]
    print(f"Optimized {len(successful)}/{len(results)} {noun}")

    total_before = 0
    total_after = 0
    for r in results:
        if not r.success:
            print(f"  FAILED {r.input_path}: {r.error}")
            continue
        total_before += r.original_size
        total_after += r.optimized_size
        saving = (r.original_size - r.optimized_size) / r.original_size * 100 if r.original_size else 0.0
        print(f"  {r.output_path} ({saving:.1f}% saved)")

    if total_before:
        saving = (total_before - total_after) / total_before * 100
        print(f"\nTotal savings: {saving:.1f}% ({format_size(total_before)} -> {format_size(total_after)})")


async def _review_rewritten(args: argparse.Namespace, results, handler) -> None:
    """--delete/--archive only make sense when output went to another folder."""
    if args.output is None:
        if args.delete or args.archive is not None:
            print("Files were optimized in place; --delete/--archive need --output.")
        return
    await _review_originals(args, results, handler)


async def run_optimize_svg(args: argparse.Namespace) -> int:
    options = SvgOptimizeOptions(
        precision=args.precision,
        output_dir=args.output,
        delete_originals=args.delete,
        archive_dir=args.archive,
        recursive=not args.no_recursive,
        skip_confirmation=args.yes,
    )
    results = await svg_optimizer.optimize_svgs_in_folder(args.source, options)
    _print_optimized(results, "SVGs")
    await _review_rewritten(args, results, svg_optimizer.handle_originals_after_review)
    return 0


async def run_svg_to_component(args: argparse.Namespace) -> int:
    options = SvgComponentOptions(
        output_dir=args.output,
        typescript=not args.js,
        prefix=args.prefix,
        suffix=args.suffix,
        remove_dimensions=not args.keep_dimensions,
        generate_index=not args.no_index,
        recursive=not args.no_recursive,
    )
    results = await svg_to_components_in_folder(args.source, options)
    successful = [r for r in results if r.success]
    print(f"Generated {len(successful)}/{len(results)} components in {args.output}")
    for r in results:
        if r.success:
            print(f"  {r.component_name} <- {r.input_path}")
        else:
            print(f"  FAILED {r.input_path}: {r.error}")
    return 0


async def run_optimize_pdf(args: argparse.Namespace) -> int:
    options = PdfOptimizeOptions(
        output_dir=args.output,
        compress_streams=not args.no_compress,
        delete_originals=args.delete,
        archive_dir=args.archive,
        recursive=not args.no_recursive,
        skip_confirmation=args.yes,
    )
    results = await pdf_optimizer.optimize_pdfs_in_folder(args.source, options)
    _print_optimized(results, "PDFs")
    await _review_rewritten(args, results, pdf_optimizer.handle_originals_after_review)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # argparse exits 2 on usage errors, 0 on --help
        return 0 if e.code in (0, None) else 1

    configure_logging(level=args.log_level, json_format=args.log_format == "json")

    try:
        if args.config:
            use_settings(load_settings(args.config))
        return asyncio.run(args.handler(args))
    except NextAssetError as e:
        logger.error("command_failed", command=args.command, error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValidationError as e:
        logger.error("command_invalid_options", command=args.command, error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        logger.error("command_io_failed", command=args.command, error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
