"""
Project-level settings for nextasset.

Loads and validates an optional nextasset.yaml:

    nextasset:
      reference_extensions: [".tsx", ".ts", ".css"]
      hash_algorithm: sha256
      hash_workers: 4

Every key is optional; missing keys fall back to the defaults below.
"""
import hashlib
from pathlib import Path
from typing import List, Optional

import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from nextasset.config.exceptions import ConfigurationError

logger = structlog.get_logger(__name__)

DEFAULT_CONFIG_FILENAME = "nextasset.yaml"

# Text-like files eligible for reference search and rewriting
DEFAULT_REFERENCE_EXTENSIONS = [
    ".tsx",
    ".ts",
    ".jsx",
    ".js",
    ".mjs",
    ".cjs",
    ".css",
    ".scss",
    ".html",
    ".md",
    ".mdx",
    ".json",
]


def check_hash_algorithm(v: str) -> str:
    """Normalize a hashlib algorithm name; reject ones hashlib cannot use."""
    name = v.lower()
    # shake_* digests need an explicit length
    if name not in hashlib.algorithms_available or name.startswith("shake"):
        raise ValueError(f"Unsupported hash algorithm: {v}")
    return name


class NextAssetSettings(BaseModel):
    """
    Settings shared by every feature.

    Attributes:
        reference_extensions: Extensions of files scanned for asset references
        hash_algorithm: hashlib algorithm used for content identity
        chunk_size: Read size when hashing
        hash_workers: Maximum concurrent hashing threads
        verify_hashes: Re-hash duplicates right before removing them
        strict_compare: Confirm equal hashes with a byte-for-byte comparison
        default_quality: Encoder quality used when the CLI gets no --quality
    """

    reference_extensions: List[str] = Field(
        default_factory=lambda: list(DEFAULT_REFERENCE_EXTENSIONS),
        min_length=1,
    )
    hash_algorithm: str = Field(default="sha256")
    chunk_size: int = Field(default=65536, ge=1024)
    hash_workers: int = Field(default=4, ge=1, le=64)
    verify_hashes: bool = True
    strict_compare: bool = False
    default_quality: int = Field(default=80, ge=1, le=100)

    @field_validator("reference_extensions")
    @classmethod
    def validate_extensions(cls, v: List[str]) -> List[str]:
        """Each extension must start with a dot; stored lower-cased."""
        validated = []
        for ext in v:
            if not ext.startswith("."):
                raise ValueError(f"Extension '{ext}' must start with '.'")
            validated.append(ext.lower())
        return validated

    @field_validator("hash_algorithm")
    @classmethod
    def validate_hash_algorithm(cls, v: str) -> str:
        """Reject algorithms hashlib does not provide."""
        return check_hash_algorithm(v)


def load_settings(config_path: Optional[str] = None) -> NextAssetSettings:
    """
    Load settings from YAML.

    Args:
        config_path: Explicit config file. When None, nextasset.yaml in the
            current directory is used if present, else built-in defaults.

    Returns:
        Validated NextAssetSettings

    Raises:
        ConfigurationError: Explicit file missing, invalid YAML or schema
    """
    if config_path is None:
        path = Path.cwd() / DEFAULT_CONFIG_FILENAME
        if not path.exists():
            return NextAssetSettings()
    else:
        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict) or not isinstance(raw.get("nextasset", {}), dict):
        raise ConfigurationError(f"Invalid config {path}: expected a 'nextasset' mapping")

    try:
        settings = NextAssetSettings(**(raw.get("nextasset") or {}))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config {path}: {e}") from e

    logger.info("settings_loaded", config_path=str(path))
    return settings


# Singleton instance (lazy loaded)
_settings: Optional[NextAssetSettings] = None


def get_settings() -> NextAssetSettings:
    """Return the process-wide settings, loading them on first use."""
    global _settings

    if _settings is None:
        _settings = load_settings()

    return _settings


def use_settings(settings: NextAssetSettings) -> None:
    """Install explicitly loaded settings (CLI --config)."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Forget cached settings (tests)."""
    global _settings
    _settings = None
