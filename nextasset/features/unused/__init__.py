"""Detection of assets never referenced by source files."""

from nextasset.features.unused.finder import find_unused_assets, handle_unused_assets
from nextasset.features.unused.models import (
    UnusedAssetResult,
    UnusedAssetsOptions,
    UnusedHandlingResult,
)

__all__ = [
    "UnusedAssetResult",
    "UnusedAssetsOptions",
    "UnusedHandlingResult",
    "find_unused_assets",
    "handle_unused_assets",
]
