"""Content digest helpers used for extraction reports."""

import base64
import hashlib
from typing import Any, Union

from ..sink import OutputSink


def _new_hasher(algorithm: str) -> "hashlib._Hash":
    if algorithm not in hashlib.algorithms_available:
        raise ValueError(f"Unsupported algorithm: {algorithm}")
    return hashlib.new(algorithm)


def calculate_digest(data: Union[bytes, bytearray], algorithm: str = "sha1") -> str:
    """Calculate base64 digest of data.

    Args:
        data: Data to hash
        algorithm: Hash algorithm (default: sha1)

    Returns:
        Base64-encoded digest

    Raises:
        ValueError: If algorithm is not supported
        ValueError: If data is not bytes-like
    """
    if not isinstance(data, (bytes, bytearray)):
        raise ValueError("Data must be bytes or bytearray")

    hasher = _new_hasher(algorithm)
    hasher.update(data)
    return base64.b64encode(hasher.digest()).decode("ascii")


async def file_digest(
    sink: OutputSink,
    target: Any,
    algorithm: str = "sha1",
    chunk_size: int = 64 * 1024,
) -> str:
    """Calculate base64 digest of a file in the sink.

    Args:
        sink: Sink holding the file
        target: Resolved sink target
        algorithm: Hash algorithm (default: sha1)
        chunk_size: Bytes read per step

    Returns:
        Base64-encoded digest
    """
    hasher = _new_hasher(algorithm)
    handle = await sink.open_read(target)
    try:
        while True:
            chunk = await handle.read(chunk_size)
            if not chunk:
                break
            hasher.update(chunk)
    finally:
        await handle.close()
    return base64.b64encode(hasher.digest()).decode("ascii")
