"""Data models for tar stream handling."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

# Type flags understood by the extractor
REGTYPE = "0"
AREGTYPE = "\0"
LNKTYPE = "1"
SYMTYPE = "2"
DIRTYPE = "5"
GNUTYPE_LONGNAME = "L"


class EntryType(Enum):
    """Classified tar entry type."""

    FILE = "file"
    DIRECTORY = "directory"
    LINK = "link"
    LONG_NAME = "long_name"
    OTHER = "other"

    @classmethod
    def from_flag(cls, type_flag: str) -> "EntryType":
        """Classify a raw one-character type flag."""
        if type_flag in (REGTYPE, AREGTYPE):
            return cls.FILE
        if type_flag == DIRTYPE:
            return cls.DIRECTORY
        if type_flag in (LNKTYPE, SYMTYPE):
            return cls.LINK
        if type_flag == GNUTYPE_LONGNAME:
            return cls.LONG_NAME
        return cls.OTHER


@dataclass
class TarHeader:
    """Decoded tar header record."""

    name: str
    type_flag: str
    size: int
    mtime: datetime
    checksum: int
    magic: str
    offset: int  # Stream offset of the header record

    @property
    def entry_type(self) -> EntryType:
        return EntryType.from_flag(self.type_flag)


@dataclass
class EntryReport:
    """Per-entry extraction report."""

    name: str
    type_flag: str
    checksum: int
    mtime: datetime
    size: int
    magic: str
    digest: Optional[str] = None
    error: Optional[str] = None

    @property
    def digest_or_error(self) -> str:
        return self.error if self.error is not None else (self.digest or "")

    @property
    def ok(self) -> bool:
        return self.error is None

    def __str__(self) -> str:
        flag = "\\0" if self.type_flag == AREGTYPE else self.type_flag
        return (
            f"{self.name}, {flag}, {self.checksum}, {self.mtime.isoformat()}, "
            f"{self.size}, {self.magic}, {self.digest_or_error}"
        )


@dataclass
class ExtractStats:
    """Totals for one archive walk."""

    entries: int = 0
    files: int = 0
    directories: int = 0
    links: int = 0
    skipped: int = 0
    errors: int = 0
    bytes_written: int = 0


@dataclass
class ArchiveResult:
    """Outcome of extracting one archive in a batch."""

    archive: str
    destination: str
    stats: Optional[ExtractStats] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
