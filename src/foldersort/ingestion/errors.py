"""Ingestion errors."""


class IngestionError(Exception):
    """Base exception for listing and metadata operations."""


class MetadataError(IngestionError):
    """Raised when a directory entry cannot be listed or stat'ed."""
