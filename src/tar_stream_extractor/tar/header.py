"""Tar header record decoding."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from ..exceptions import HeaderChecksumError, TarFormatError
from .models import TarHeader
from .reader import BlockReader, parse_octal

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
USTAR_MAGICS = ("ustar", "ustar ")


def to_datetime(seconds: int) -> datetime:
    """Convert a Unix timestamp to an aware UTC datetime."""
    try:
        return EPOCH + timedelta(seconds=seconds)
    except OverflowError as e:
        raise TarFormatError(f"Modification time out of range: {seconds}") from e


async def read_header(reader: BlockReader) -> Optional[TarHeader]:
    """Decode the next 512-byte header record.

    Args:
        reader: Block reader positioned at a header boundary

    Returns:
        Decoded header, or None at the end of the archive (exhausted
        source or blank name)

    Raises:
        HeaderChecksumError: If the stored checksum does not match
        TarFormatError: If a numeric field is malformed
        TruncatedArchiveError: If the source ends inside the header
    """
    offset = reader.position
    if await reader.prefetch(1) == 0:
        return None

    header_checksum = await reader.compute_header_checksum()

    # offset 0, len 100, File name
    name = await reader.read_string(100)
    if not name.strip():
        return None

    # offset 100, len 8 * 3, mode, uid, gid
    await reader.skip(8 * 3, "header")

    # offset 124, len 12, File size in bytes (octal)
    size_field = await reader.read_field(12)

    # offset 136, len 12, Last modification time in Unix seconds (octal)
    mtime_field = await reader.read_field(12)

    # offset 148, len 8, Checksum for header record
    checksum = await reader.read_octal(8)
    if checksum != header_checksum:
        raise HeaderChecksumError(checksum, header_checksum, offset)

    # Numeric fields are decoded only once the record is known intact
    size = parse_octal(size_field)
    if size < 0:
        raise TarFormatError(f"Negative entry size {size} for {name!r}")
    mtime = to_datetime(parse_octal(mtime_field))

    # offset 156, len 1, Type flag
    type_flag = chr(await reader.read_byte())

    # offset 157, len 100, Name of linked file
    await reader.skip(100, "header")

    # offset 257, len 6, "ustar" then NUL, or GNU "ustar "
    magic = await reader.read_string(6)
    if magic in USTAR_MAGICS:
        # version, uname, gname, devmajor, devminor
        await reader.skip(82, "header")

        # offset 345, len 155, Name prefix
        prefix = await reader.read_string(155)
        if prefix:
            name = f"{prefix}/{name}"

    await reader.align()

    return TarHeader(
        name=name,
        type_flag=type_flag,
        size=size,
        mtime=mtime,
        checksum=checksum,
        magic=magic,
        offset=offset,
    )
