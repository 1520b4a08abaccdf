"""Configuration: structlog setup, exception hierarchy and YAML settings."""

from nextasset.config.exceptions import (
    ConfigurationError,
    ImageProcessingError,
    NextAssetError,
    SourceDirectoryError,
)
from nextasset.config.settings import (
    NextAssetSettings,
    get_settings,
    load_settings,
    reset_settings,
    use_settings,
)

__all__ = [
    "ConfigurationError",
    "ImageProcessingError",
    "NextAssetError",
    "NextAssetSettings",
    "SourceDirectoryError",
    "get_settings",
    "load_settings",
    "reset_settings",
    "use_settings",
]
