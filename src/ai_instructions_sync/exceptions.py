"""Exceptions raised by instruction export and import."""
from pathlib import Path
from typing import Optional

class SyncError(Exception):
    """Base class for failures that abort an export or import."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path

class DocumentNotFoundError(SyncError):
    """The workspace document does not exist."""

class InstructionsDirectoryNotFoundError(SyncError):
    """The instructions directory to import from does not exist."""

class DocumentParseError(SyncError):
    """The workspace document is not well-formed XML."""

class DocumentWriteError(SyncError):
    """The workspace document could not be written back."""

class InstructionsWriteError(SyncError):
    """The instructions directory or one of its files could not be written."""
