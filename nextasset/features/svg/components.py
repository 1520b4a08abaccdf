"""
SVG to React component generation.

Each SVG is cleaned with scour, its root width/height are dropped (a viewBox
is kept or derived so it still scales), attributes are renamed to their JSX
spelling and the markup is wrapped in a typed or untyped component file:

    icons/arrow-left.svg  ->  components/icons/ArrowLeft.tsx

An index file re-exporting every generated component is written last.
"""

from __future__ import annotations

import asyncio
import re
from pathlib import Path
from typing import Optional
from xml.parsers.expat import ExpatError

import structlog

from nextasset.core.fs import ensure_directory, filter_by_extension, list_files
from nextasset.features.svg.models import SvgComponentOptions, SvgComponentResult
from nextasset.features.svg.optimizer import SVG_EXTENSIONS, scour_svg

logger = structlog.get_logger(__name__)

# React expects these exactly as SVG spells them
KEEP_ATTRIBUTE_NAMES = {"className", "xmlns", "viewBox", "version"}

ROOT_TAG = re.compile(r"<svg\b[^>]*>")
ATTRIBUTE = re.compile(r"""([A-Za-z_][\w:.-]*)(\s*=\s*)("[^"]*"|'[^']*')""")
NUMBER = re.compile(r"^\s*(\d+(?:\.\d+)?)(?:px)?\s*$")

TSX_TEMPLATE = """import React, {{ SVGProps }} from 'react';

const {name} = (props: SVGProps<SVGSVGElement>) => (
  {jsx}
);

export default {name};
"""

JSX_TEMPLATE = """import React from 'react';

const {name} = (props) => (
  {jsx}
);

export default {name};
"""


def to_pascal_case(name: str) -> str:
    """``arrow-left`` -> ``ArrowLeft``; names starting with a digit get ``Svg``."""
    words = re.sub(r"[-_]+", " ", name)
    words = re.sub(r"[^\w\s]", "", words)
    words = re.sub(r"\s+(.)(\w*)", lambda m: m.group(1).upper() + m.group(2).lower(), words)
    words = re.sub(r"\s", "", words)
    if not words:
        return "Svg"
    if words[0].isdigit():
        words = f"Svg{words}"
    return words[0].upper() + words[1:]


def jsx_attribute_name(attr: str) -> str:
    """``stroke-width`` -> ``strokeWidth``, ``xlink:href`` -> ``xlinkHref``."""
    if attr == "class":
        return "className"
    if attr in KEEP_ATTRIBUTE_NAMES or attr.startswith(("data-", "aria-")):
        return attr
    return re.sub(r"[-:]([a-zA-Z])", lambda m: m.group(1).upper(), attr)


def _attributes_to_jsx(markup: str) -> str:
    return ATTRIBUTE.sub(lambda m: jsx_attribute_name(m.group(1)) + m.group(2) + m.group(3), markup)


def _attribute(tag: str, name: str) -> Optional[str]:
    match = re.search(rf"""\s{name}\s*=\s*("([^"]*)"|'([^']*)')""", tag)
    if match is None:
        return None
    return match.group(2) if match.group(2) is not None else match.group(3)


def remove_dimensions(svg: str) -> str:
    """
    Drop width/height from the root <svg> tag.

    A missing viewBox is derived from numeric width/height first; without
    one the dimensions are left alone so the icon keeps its size.
    """
    match = ROOT_TAG.search(svg)
    if match is None:
        return svg

    tag = match.group(0)
    width = _attribute(tag, "width")
    height = _attribute(tag, "height")
    if width is None and height is None:
        return svg

    if _attribute(tag, "viewBox") is None:
        w = NUMBER.match(width or "")
        h = NUMBER.match(height or "")
        if not (w and h):
            return svg
        tag = tag.replace("<svg", f'<svg viewBox="0 0 {w.group(1)} {h.group(1)}"', 1)

    tag = re.sub(r"""\s(?:width|height)\s*=\s*("[^"]*"|'[^']*')""", "", tag)
    return svg[: match.start()] + tag + svg[match.end():]


def render_component(svg: str, component_name: str, typescript: bool = True) -> str:
    """Wrap cleaned SVG markup in a component that spreads its props."""
    jsx = _attributes_to_jsx(svg.strip())
    jsx = jsx.replace("<svg", "<svg {...props}", 1)
    template = TSX_TEMPLATE if typescript else JSX_TEMPLATE
    return template.format(name=component_name, jsx=jsx)


def _convert_file(input_path: Path, output_path: Path, component_name: str, options: SvgComponentOptions) -> None:
    svg_text = input_path.read_text(encoding="utf-8")
    # prefixing kept ids avoids clashes between icons rendered on one page
    cleaned = scour_svg(
        svg_text,
        strip_ids=True,
        shorten_ids=True,
        shorten_ids_prefix=f"{component_name.lower()}-",
    )
    if options.remove_dimensions:
        cleaned = remove_dimensions(cleaned)
    output_path.write_text(render_component(cleaned, component_name, options.typescript), encoding="utf-8")


async def svg_to_component(
    input_path: Path | str,
    options: Optional[SvgComponentOptions] = None,
) -> SvgComponentResult:
    """
    Generate one component file from an SVG.

    Returns:
        SvgComponentResult (success=False with error on any failure)
    """
    options = options or SvgComponentOptions()
    source = Path(input_path)
    component_name = f"{options.prefix}{to_pascal_case(source.stem)}{options.suffix}"
    extension = "tsx" if options.typescript else "jsx"
    output_path = options.output_dir / f"{component_name}.{extension}"

    try:
        options.output_dir.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread(_convert_file, source, output_path, component_name, options)
    except (OSError, ValueError, ExpatError) as e:
        logger.error("svg_component_failed", input_path=str(source), error=str(e))
        return SvgComponentResult(success=False, input_path=str(source), error=str(e))

    logger.info("svg_component_generated", input_path=str(source), component=component_name)

    return SvgComponentResult(
        success=True,
        input_path=str(source),
        output_path=str(output_path),
        component_name=component_name,
    )


def generate_index_file(results: list[SvgComponentResult], output_dir: Path | str, typescript: bool = True) -> Path:
    """Write index.ts/index.js re-exporting every successful component."""
    index_path = Path(output_dir) / f"index.{'ts' if typescript else 'js'}"
    exports = [
        f"export {{ default as {r.component_name} }} from './{r.component_name}';"
        for r in results
        if r.success and r.component_name
    ]
    index_path.write_text("\n".join(exports) + "\n", encoding="utf-8")
    return index_path


async def svg_to_components_in_folder(
    source_dir: Path | str,
    options: Optional[SvgComponentOptions] = None,
) -> list[SvgComponentResult]:
    """
    Generate a component for every SVG under ``source_dir``.

    Two SVGs mapping to the same component name would overwrite each other;
    the later one (in path order) fails instead.

    Raises:
        SourceDirectoryError: source_dir missing or not a directory
    """
    options = options or SvgComponentOptions()
    root = ensure_directory(source_dir)
    svgs = filter_by_extension(list_files(root, recursive=options.recursive), SVG_EXTENSIONS)

    logger.info("svg_components_started", source_dir=str(root), files=len(svgs))

    results: list[SvgComponentResult] = []
    generated: dict[str, str] = {}
    for svg in svgs:
        name = f"{options.prefix}{to_pascal_case(svg.stem)}{options.suffix}"
        if name in generated:
            error = f"Component {name} already generated from {generated[name]}"
            logger.warning("svg_component_name_conflict", input_path=str(svg), component=name)
            results.append(SvgComponentResult(success=False, input_path=str(svg), error=error))
            continue
        result = await svg_to_component(svg, options)
        if result.success:
            generated[name] = str(svg)
        results.append(result)

    if options.generate_index and any(r.success for r in results):
        index_path = generate_index_file(results, options.output_dir, options.typescript)
        logger.info("svg_component_index_written", index_path=str(index_path))

    return results
