"""Pydantic models for API request/response schemas."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str


class ModelFileResponse(BaseModel):
    """A file of a cataloged model."""

    size: int
    path: str


class ModelResponse(BaseModel):
    """Cataloged model information."""

    model_id: str
    files: list[ModelFileResponse]
    total_size: int


class DownloadRequest(BaseModel):
    """Model download request."""

    model_id: str


class SyncResponse(BaseModel):
    """Result of a catalog sync."""

    dry_run: bool
    messages: list[str]
    added: list[str]
    removed: list[str]
    missing: list[str]
    discrepancy_count: int
