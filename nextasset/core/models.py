"""
Models shared by every feature.

Models:
- FileWarning: Per-file failure recorded instead of aborting a batch
- OriginalHandling: What happened to a source file after processing
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class FileOperation(str, Enum):
    """Filesystem step that failed for a single file."""

    list = "list"
    stat = "stat"
    hash = "hash"
    read = "read"
    rewrite = "rewrite"
    delete = "delete"
    archive = "archive"
    verify = "verify"
    process = "process"


class FileWarning(BaseModel):
    """A failure local to one file; the batch it belongs to continued."""

    path: str
    operation: FileOperation
    error: str


class OriginalHandling(str, Enum):
    """Fate of a source file after conversion/resizing."""

    deleted = "deleted"
    archived = "archived"
    kept = "kept"
