"""Utility functions for the tar stream extractor."""

from .digest import calculate_digest, file_digest
from .paths import normalize_entry_name

__all__ = ["calculate_digest", "file_digest", "normalize_entry_name"]
