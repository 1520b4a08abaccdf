"""
nextasset - Next.js asset maintenance utilities.

Programmatic API (all coroutines):
- scan / consolidate / find_duplicates: duplicate detection and consolidation
- find_unused_assets / handle_unused_assets: unreferenced assets
- extract_metadata: dimensions, format, size
- generate_placeholders: blur data URLs
- convert_images_in_folder / resize_images_in_folder: Pillow transforms
- optimize_svgs_in_folder / svg_to_components_in_folder: scour-based SVG work
- optimize_pdfs_in_folder: PyPDF2 re-serialization
"""

from nextasset.features.dedup import (
    ConsolidationOptions,
    DuplicateOptions,
    consolidate,
    find_duplicates,
    scan,
)
from nextasset.features.images import (
    ConversionOptions,
    ResizeOptions,
    convert_image,
    convert_images_in_folder,
    resize_image,
    resize_images_in_folder,
)
from nextasset.features.metadata import MetadataOptions, extract_metadata
from nextasset.features.pdf import PdfOptimizeOptions, optimize_pdfs_in_folder
from nextasset.features.placeholders import PlaceholderOptions, generate_placeholders
from nextasset.features.svg import (
    SvgComponentOptions,
    SvgOptimizeOptions,
    optimize_svgs_in_folder,
    svg_to_components_in_folder,
)
from nextasset.features.unused import (
    UnusedAssetsOptions,
    find_unused_assets,
    handle_unused_assets,
)

__version__ = "1.0.0"

__all__ = [
    "ConsolidationOptions",
    "ConversionOptions",
    "DuplicateOptions",
    "MetadataOptions",
    "PdfOptimizeOptions",
    "PlaceholderOptions",
    "ResizeOptions",
    "SvgComponentOptions",
    "SvgOptimizeOptions",
    "UnusedAssetsOptions",
    "consolidate",
    "convert_image",
    "convert_images_in_folder",
    "extract_metadata",
    "find_duplicates",
    "find_unused_assets",
    "generate_placeholders",
    "handle_unused_assets",
    "optimize_pdfs_in_folder",
    "optimize_svgs_in_folder",
    "resize_image",
    "resize_images_in_folder",
    "scan",
    "svg_to_components_in_folder",
]
