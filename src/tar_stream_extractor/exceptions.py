"""Custom exceptions for the tar stream extractor."""


class TarExtractError(Exception):
    """Base exception for all extraction-related errors."""

    pass


class TarFormatError(TarExtractError):
    """Raised when the archive violates the tar framing rules."""

    pass


class HeaderChecksumError(TarFormatError):
    """Raised when a header checksum does not match its stored value."""

    def __init__(self, expected: int, actual: int, position: int) -> None:
        super().__init__(
            f"Mismatch tar header checksum at offset {position}: "
            f"stored {expected}, computed {actual}"
        )
        self.expected = expected
        self.actual = actual
        self.position = position


class TruncatedArchiveError(TarExtractError):
    """Raised when the byte source ends in the middle of a record."""

    pass


class DecompressionError(TarExtractError):
    """Raised when the compressed envelope cannot be decoded."""

    pass


class UnsafePathError(TarExtractError):
    """Raised when an entry path would land outside the destination root."""

    pass


class TarReadError(TarExtractError):
    """Raised when unable to open or fetch the archive source."""

    pass
