"""Directory listing and file metadata collaborators."""

from .detectors import MimeLookup, TypeDetector
from .discovery import DirectoryScanner
from .errors import IngestionError, MetadataError
from .extractors import MetadataExtractor, file_extension
from .models import DEFAULT_MIME_TYPE, FileEntry, FileMetadata

__all__ = [
    "DEFAULT_MIME_TYPE",
    "DirectoryScanner",
    "FileEntry",
    "FileMetadata",
    "IngestionError",
    "MetadataError",
    "MetadataExtractor",
    "MimeLookup",
    "TypeDetector",
    "file_extension",
]
