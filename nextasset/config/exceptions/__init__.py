"""
nextasset - canonical exception hierarchy.

Per-file failures are never raised to callers: they are recorded as
FileWarning entries and the batch continues. These exceptions cover the
failures that make a whole operation meaningless.
"""


class NextAssetError(Exception):
    """Base exception for nextasset."""


class SourceDirectoryError(NextAssetError):
    """Source directory is missing or is not a directory."""


class ConfigurationError(NextAssetError):
    """Invalid configuration file or option combination."""


class ImageProcessingError(NextAssetError):
    """Pillow could not decode or encode a single image."""
