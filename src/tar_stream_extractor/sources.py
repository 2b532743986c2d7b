"""Async byte sources feeding the block reader."""

import zlib
from pathlib import Path
from typing import Optional, Protocol, Union

import aiofiles
import aiohttp

from .exceptions import DecompressionError, TarReadError, TruncatedArchiveError

# gzip framing for zlib
GZIP_WBITS = 16 + zlib.MAX_WBITS


class ByteSource(Protocol):
    """Sequential byte source; a read may return fewer bytes than requested.

    An empty result signals end of stream.
    """

    async def read(self, size: int) -> bytes: ...


class BytesSource:
    """In-memory byte source."""

    def __init__(self, data: bytes, max_chunk: Optional[int] = None) -> None:
        """Initialize source.

        Args:
            data: Archive bytes
            max_chunk: Upper bound on bytes returned per read, to mimic
                sources that deliver short reads
        """
        self._data = memoryview(bytes(data))
        self._offset = 0
        self._max_chunk = max_chunk

    async def read(self, size: int) -> bytes:
        if self._max_chunk is not None:
            size = min(size, self._max_chunk)
        chunk = self._data[self._offset : self._offset + size]
        self._offset += len(chunk)
        return chunk.tobytes()


class FileSource:
    """Async byte source over a local file."""

    def __init__(self, path: Union[str, Path]) -> None:
        """Initialize file source.

        Args:
            path: Path to the archive file
        """
        self.path = Path(path)
        if not self.path.exists():
            raise TarReadError(f"Archive file not found: {path}")
        self._file = None

    async def __aenter__(self) -> "FileSource":
        """Enter async context manager."""
        try:
            self._file = await aiofiles.open(self.path, "rb")
        except OSError as e:
            raise TarReadError(f"Cannot open archive {self.path}: {e}") from e
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context manager."""
        await self.close()

    async def close(self) -> None:
        """Close the file."""
        if self._file:
            await self._file.close()
            self._file = None

    async def read(self, size: int) -> bytes:
        if self._file is None:
            raise TarReadError("File source not opened")
        return await self._file.read(size)


class HttpSource:
    """Async byte source streaming an HTTP response body."""

    def __init__(
        self,
        url: str,
        timeout: int = 300,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        """Initialize HTTP source.

        Args:
            url: Archive URL
            timeout: Total request timeout in seconds
            session: Existing session to reuse; one is created otherwise
        """
        self.url = url
        self.timeout = timeout
        self.session = session
        self._owns_session = session is None
        self._response: Optional[aiohttp.ClientResponse] = None

    async def __aenter__(self) -> "HttpSource":
        """Enter async context manager."""
        if self.session is None:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
        try:
            self._response = await self.session.get(self.url)
            self._response.raise_for_status()
        except aiohttp.ClientError as e:
            await self.close()
            raise TarReadError(f"Failed to fetch archive {self.url}: {e}") from e
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context manager."""
        await self.close()

    async def close(self) -> None:
        """Release the response and any owned session."""
        if self._response is not None:
            self._response.release()
            self._response = None
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def read(self, size: int) -> bytes:
        if self._response is None:
            raise TarReadError("HTTP source not opened")
        try:
            return await self._response.content.read(size)
        except aiohttp.ClientError as e:
            raise TarReadError(f"Failed to read archive body from {self.url}: {e}") from e


class GzipSource:
    """Decompresses a gzip byte source on the fly.

    Concatenated gzip members are decoded back to back and zero padding
    after the last member is ignored. Each inflate step yields at most
    ``chunk_size`` bytes; compressed input that did not fit is kept for
    the next read.
    """

    def __init__(self, source: ByteSource, chunk_size: int = 64 * 1024) -> None:
        self._source = source
        self._chunk_size = chunk_size
        self._decompressor = zlib.decompressobj(GZIP_WBITS)
        self._member_open = False
        self._input = b""
        self._pending = b""
        self._offset = 0
        self._eof = False

    async def read(self, size: int) -> bytes:
        while self._offset >= len(self._pending) and not self._eof:
            if not self._input:
                chunk = await self._source.read(self._chunk_size)
                if not chunk:
                    self._eof = True
                    if self._member_open:
                        raise TruncatedArchiveError(
                            "Compressed stream ended before the end of a gzip member"
                        )
                    break
                self._input = chunk
            self._pending = self._inflate()
            self._offset = 0

        data = self._pending[self._offset : self._offset + size]
        self._offset += len(data)
        return data

    def _inflate(self) -> bytes:
        if not self._member_open:
            self._input = self._input.lstrip(b"\0")
            if not self._input:
                return b""
            self._member_open = True
        try:
            output = self._decompressor.decompress(self._input, self._chunk_size)
        except zlib.error as e:
            raise DecompressionError(f"Corrupt gzip stream: {e}") from e
        self._input = self._decompressor.unconsumed_tail
        if self._decompressor.eof:
            # Member finished; anything left over starts the next one
            self._input = self._decompressor.unused_data
            self._decompressor = zlib.decompressobj(GZIP_WBITS)
            self._member_open = False
        return output
