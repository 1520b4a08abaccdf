from nextasset.features.placeholders.generator import (
    PlaceholderOptions,
    PlaceholderResult,
    build_placeholder,
    generate_placeholders,
)

__all__ = [
    "PlaceholderOptions",
    "PlaceholderResult",
    "build_placeholder",
    "generate_placeholders",
]
