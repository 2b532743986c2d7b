"""Tar Stream Extractor - Async streaming extraction of tar and tar.gz archives."""

__version__ = "0.1.0"

from .batch import extract_directory
from .core.extractor import TarExtractor
from .core.types import ExtractConfig
from .exceptions import (
    DecompressionError,
    HeaderChecksumError,
    TarExtractError,
    TarFormatError,
    TarReadError,
    TruncatedArchiveError,
    UnsafePathError,
)
from .extract import (
    extract_tar,
    extract_tar_file,
    extract_tar_gzip,
    extract_tar_gzip_file,
    extract_tar_url,
)
from .sink import FileSystemSink, OutputSink
from .sources import BytesSource, FileSource, GzipSource, HttpSource
from .tar.models import ArchiveResult, EntryReport, EntryType, ExtractStats

__all__ = [
    "extract_tar",
    "extract_tar_gzip",
    "extract_tar_file",
    "extract_tar_gzip_file",
    "extract_tar_url",
    "extract_directory",
    "TarExtractor",
    "ExtractConfig",
    "OutputSink",
    "FileSystemSink",
    "BytesSource",
    "FileSource",
    "GzipSource",
    "HttpSource",
    "EntryReport",
    "EntryType",
    "ExtractStats",
    "ArchiveResult",
    "TarExtractError",
    "TarFormatError",
    "HeaderChecksumError",
    "TruncatedArchiveError",
    "DecompressionError",
    "UnsafePathError",
    "TarReadError",
]
