"""SVG optimization (scour) and SVG to React component generation."""

from nextasset.features.svg.components import svg_to_component, svg_to_components_in_folder
from nextasset.features.svg.models import (
    SvgComponentOptions,
    SvgComponentResult,
    SvgOptimizeOptions,
    SvgOptimizeResult,
)
from nextasset.features.svg.optimizer import optimize_svg, optimize_svgs_in_folder

__all__ = [
    "SvgComponentOptions",
    "SvgComponentResult",
    "SvgOptimizeOptions",
    "SvgOptimizeResult",
    "optimize_svg",
    "optimize_svgs_in_folder",
    "svg_to_component",
    "svg_to_components_in_folder",
]
