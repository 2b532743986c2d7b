"""Buffered block reader over an async byte source."""

import logging
from typing import Awaitable, Callable, Optional

from ..core.types import BLOCK_SIZE, ExtractConfig
from ..exceptions import TarFormatError, TruncatedArchiveError
from ..sources import ByteSource

logger = logging.getLogger(__name__)

# offset 148, len 8: checksum field, counted as spaces
CHECKSUM_OFFSET = 148
CHECKSUM_LENGTH = 8

_NUL = 0x00
_SPACE = 0x20
_ZERO = 0x30
_SEVEN = 0x37


def parse_octal(field: bytes) -> int:
    """Parse a tar numeric field.

    Leading spaces and zeros are padding. A space after the first
    significant digit or a NUL anywhere ends the number. Fields starting
    with 0x80 or 0xFF use the GNU base-256 encoding.

    Args:
        field: Raw field bytes

    Returns:
        Parsed integer (0 for blank fields)

    Raises:
        TarFormatError: If the field contains a non-octal digit
    """
    if field and field[0] in (0x80, 0xFF):
        value = int.from_bytes(field[1:], "big")
        if field[0] == 0xFF:
            value -= 256 ** (len(field) - 1)
        return value

    value = 0
    padding = True
    for byte in field:
        if byte == _NUL:
            break
        if byte in (_SPACE, _ZERO) and padding:
            continue
        if byte == _SPACE:
            break
        if not _ZERO <= byte <= _SEVEN:
            raise TarFormatError(f"Invalid octal digit {chr(byte)!r} in {field!r}")
        padding = False
        value = (value << 3) + (byte - _ZERO)
    return value


class BlockReader:
    """Async buffered cursor with typed tar read primitives."""

    def __init__(
        self, source: ByteSource, config: Optional[ExtractConfig] = None
    ) -> None:
        """Initialize block reader.

        Args:
            source: Sequential byte source supporting partial reads
            config: Extraction settings (block and buffer sizes, encoding)
        """
        self.config = config or ExtractConfig()
        self._source = source
        self._buffer = bytearray(self.config.buffer_size)
        self._filled = 0
        self._cursor = 0
        self._position = 0
        self._header_checksum = 0
        self._exhausted = False

    @property
    def position(self) -> int:
        """Absolute number of bytes consumed from the source."""
        return self._position

    @property
    def header_checksum(self) -> int:
        """Checksum captured by the last compute_header_checksum call."""
        return self._header_checksum

    @property
    def available(self) -> int:
        """Bytes resident in the buffer and not yet consumed."""
        return self._filled - self._cursor

    async def prefetch(self, count: int) -> int:
        """Try to make ``count`` bytes resident without consuming them.

        Returns:
            Number of resident bytes, less than ``count`` only when the
            source is exhausted
        """
        if count > len(self._buffer):
            raise ValueError(
                f"Cannot prefetch {count} bytes with a {len(self._buffer)} byte buffer"
            )
        if self.available < count:
            await self._fill()
        return self.available

    async def compute_header_checksum(self) -> int:
        """Compute the header checksum over the 512-byte window at the cursor.

        Must be called before any field of the header is consumed.
        """
        await self._require(BLOCK_SIZE, "header")
        window = self._buffer[self._cursor : self._cursor + BLOCK_SIZE]
        end = CHECKSUM_OFFSET + CHECKSUM_LENGTH
        self._header_checksum = (
            sum(window[:CHECKSUM_OFFSET]) + _SPACE * CHECKSUM_LENGTH + sum(window[end:])
        )
        return self._header_checksum

    async def read_string(self, length: int) -> str:
        """Read a fixed-length NUL-terminated string field."""
        await self._require(length, "string field")
        raw = self._buffer[self._cursor : self._cursor + length]
        end = raw.find(_NUL)
        if end != -1:
            del raw[end:]
        self._advance(length)
        return raw.decode(self.config.encoding, self.config.errors)

    async def read_field(self, length: int) -> bytes:
        """Read a fixed-length header field without decoding it."""
        await self._require(length, "header field")
        field = bytes(self._buffer[self._cursor : self._cursor + length])
        self._advance(length)
        return field

    async def read_octal(self, length: int) -> int:
        """Read a fixed-length numeric field."""
        return parse_octal(await self.read_field(length))

    async def read_byte(self) -> int:
        """Read a single byte."""
        await self._require(1, "byte")
        value = self._buffer[self._cursor]
        self._advance(1)
        return value

    async def read_bytes(self, length: int) -> bytes:
        """Read exactly ``length`` raw bytes; may exceed the buffer size."""
        data = bytearray()

        async def collect(chunk: bytes) -> None:
            data.extend(chunk)

        await self.copy_to(collect, length)
        return bytes(data)

    async def skip(self, length: int, what: str = "payload") -> None:
        """Advance ``length`` bytes without copying them."""
        remaining = length
        while remaining > 0:
            available = await self._next_chunk(remaining, what)
            self._advance(available)
            remaining -= available

    async def align(self, block_size: Optional[int] = None) -> None:
        """Skip forward to the next multiple of ``block_size``."""
        block_size = block_size or self.config.block_size
        remainder = self._position % block_size
        if remainder:
            await self.skip(block_size - remainder, "block padding")

    async def copy_to(
        self, write: Callable[[bytes], Awaitable[object]], length: int
    ) -> None:
        """Stream exactly ``length`` bytes to an async ``write`` callable."""
        remaining = length
        while remaining > 0:
            count = await self._next_chunk(remaining, "payload")
            await write(bytes(self._buffer[self._cursor : self._cursor + count]))
            self._advance(count)
            remaining -= count

    async def _next_chunk(self, remaining: int, what: str) -> int:
        """Refill if needed and return how many of ``remaining`` bytes are resident."""
        if self.available == 0:
            await self._fill()
            if self.available == 0:
                raise TruncatedArchiveError(
                    f"Unexpected end of stream in {what} at offset "
                    f"{self._position}: {remaining} bytes missing"
                )
        return min(self.available, remaining)

    async def _require(self, count: int, what: str) -> None:
        available = await self.prefetch(count)
        if available < count:
            raise TruncatedArchiveError(
                f"Unexpected end of stream in {what} at offset {self._position}: "
                f"needed {count} bytes, {available} available"
            )

    def _advance(self, count: int) -> None:
        self._cursor += count
        self._position += count

    async def _fill(self) -> None:
        """Move the unread tail to the front and read until full or exhausted."""
        tail = self.available
        if tail and self._cursor:
            self._buffer[:tail] = self._buffer[self._cursor : self._filled]
        self._cursor = 0
        self._filled = tail

        while self._filled < len(self._buffer) and not self._exhausted:
            chunk = await self._source.read(len(self._buffer) - self._filled)
            if not chunk:
                self._exhausted = True
                break
            count = len(chunk)
            self._buffer[self._filled : self._filled + count] = chunk
            self._filled += count

        logger.debug(
            f"Buffer refilled at offset {self._position}: {self._filled} bytes resident"
        )
