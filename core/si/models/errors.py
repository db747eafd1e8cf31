"""
Errors raised by the model catalog and cache reconciliation engine.
"""

from typing import Optional


class CatalogError(Exception):
    """Base class for catalog engine errors."""


class CatalogIOError(CatalogError):
    """Reading or writing a file failed."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class CatalogParseError(CatalogError):
    """The catalog document exists but is malformed."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class CatalogLockTimeout(CatalogError):
    """The catalog write lock could not be acquired in time."""


class RemoteError(CatalogError):
    """The model hub failed while listing or downloading files."""

    def __init__(self, message: str, model_id: str, filename: Optional[str] = None):
        super().__init__(message)
        self.model_id = model_id
        self.filename = filename


class ReconstructionError(CatalogError):
    """No cached content could be found for a model."""

    def __init__(self, message: str, model_id: str):
        super().__init__(message)
        self.model_id = model_id
