from nextasset.features.metadata.extractor import (
    AssetMetadata,
    MetadataOptions,
    MetadataResult,
    extract_metadata,
    read_metadata,
)

__all__ = [
    "AssetMetadata",
    "MetadataOptions",
    "MetadataResult",
    "extract_metadata",
    "read_metadata",
]
