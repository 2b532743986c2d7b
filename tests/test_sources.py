"""Tests for byte sources and the gzip decompression wrapper."""

import gzip

import pytest

from tar_stream_extractor import (
    BytesSource,
    DecompressionError,
    FileSource,
    GzipSource,
    TarReadError,
    TruncatedArchiveError,
    extract_tar_gzip,
    extract_tar_gzip_file,
)
from tests.helpers import build_tar, build_tar_gz, file_member


async def read_all(source, size: int = 1000) -> bytes:
    chunks = []
    while True:
        chunk = await source.read(size)
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks)


@pytest.mark.asyncio
async def test_bytes_source_short_reads():
    """Test that max_chunk limits each read."""
    source = BytesSource(b"abcdefgh", max_chunk=3)

    assert await source.read(100) == b"abc"
    assert await source.read(2) == b"de"
    assert await read_all(source) == b"fgh"
    assert await source.read(10) == b""


@pytest.mark.asyncio
async def test_gzip_source_decompresses():
    """Test plain gzip decompression with small source chunks."""
    data = bytes(range(256)) * 100
    source = GzipSource(BytesSource(gzip.compress(data), max_chunk=50), chunk_size=64)

    assert await read_all(source, 333) == data


@pytest.mark.asyncio
async def test_gzip_source_concatenated_members():
    """Test that concatenated gzip members are read back to back."""
    payload = gzip.compress(b"first-") + gzip.compress(b"second")

    assert await read_all(GzipSource(BytesSource(payload))) == b"first-second"


@pytest.mark.asyncio
async def test_gzip_source_ignores_zero_padding():
    """Test that trailing zero padding after the last member is ignored."""
    payload = gzip.compress(b"padded") + b"\0" * 1000

    source = GzipSource(BytesSource(payload, max_chunk=100), chunk_size=100)

    assert await read_all(source) == b"padded"


@pytest.mark.asyncio
async def test_gzip_source_bounds_inflated_output():
    """Test that a highly compressible chunk inflates in bounded steps."""
    data = b"\0" * 1_000_000
    source = GzipSource(BytesSource(gzip.compress(data)), chunk_size=4096)

    first = await source.read(len(data))

    assert 0 < len(first) <= 4096
    assert first + await read_all(source, 100_000) == data


@pytest.mark.asyncio
async def test_gzip_source_truncated():
    """Test that a cut-off member is reported as truncation."""
    payload = gzip.compress(bytes(range(256)) * 100)[:-20]

    with pytest.raises(TruncatedArchiveError):
        await read_all(GzipSource(BytesSource(payload)))


@pytest.mark.asyncio
async def test_gzip_source_corrupt():
    """Test that non-gzip input raises DecompressionError."""
    with pytest.raises(DecompressionError):
        await read_all(GzipSource(BytesSource(b"this is not gzip data")))


@pytest.mark.asyncio
async def test_extract_tar_gzip_stream(destination):
    """Test extraction through the gzip wrapper."""
    archive = build_tar_gz([file_member("z/a.txt", b"zipped")])

    stats = await extract_tar_gzip(BytesSource(archive, max_chunk=100), destination)

    assert (destination / "z" / "a.txt").read_bytes() == b"zipped"
    assert stats.files == 1


@pytest.mark.asyncio
async def test_extract_tar_gzip_file(tmp_path, destination):
    """Test extraction of a .tar.gz file on disk."""
    path = tmp_path / "bundle.tar.gz"
    path.write_bytes(build_tar_gz([file_member("a.txt", b"from disk")]))

    await extract_tar_gzip_file(path, destination)

    assert (destination / "a.txt").read_bytes() == b"from disk"


@pytest.mark.asyncio
async def test_file_source_reads(tmp_path):
    """Test the aiofiles-backed source."""
    path = tmp_path / "plain.tar"
    archive = build_tar([file_member("a.txt", b"a")])
    path.write_bytes(archive)

    async with FileSource(path) as source:
        assert await read_all(source) == archive


def test_file_source_missing(tmp_path):
    """Test that a missing archive raises TarReadError."""
    with pytest.raises(TarReadError):
        FileSource(tmp_path / "missing.tar")


@pytest.mark.asyncio
async def test_file_source_not_opened(tmp_path):
    """Test reading before entering the context manager."""
    path = tmp_path / "plain.tar"
    path.write_bytes(b"")
    source = FileSource(path)

    with pytest.raises(TarReadError):
        await source.read(10)
