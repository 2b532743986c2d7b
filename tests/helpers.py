"""Test helpers for building synthetic tar archives."""

import gzip
import io
import tarfile

BLOCK = 512
END_OF_ARCHIVE = b"\0" * (BLOCK * 2)
MTIME = 1_600_000_000


def file_member(name: str, data: bytes = b"", mtime: int = MTIME):
    """Create a regular file member for build_tar."""
    info = tarfile.TarInfo(name)
    info.size = len(data)
    info.mtime = mtime
    info.mode = 0o644
    return info, data


def dir_member(name: str, mtime: int = MTIME):
    """Create a directory member for build_tar."""
    info = tarfile.TarInfo(name)
    info.type = tarfile.DIRTYPE
    info.mtime = mtime
    info.mode = 0o755
    return info, None


def symlink_member(name: str, target: str, mtime: int = MTIME):
    """Create a symlink member for build_tar."""
    info = tarfile.TarInfo(name)
    info.type = tarfile.SYMTYPE
    info.linkname = target
    info.mtime = mtime
    return info, None


def build_tar(members, fmt: int = tarfile.GNU_FORMAT) -> bytes:
    """Build an in-memory tar archive with the stdlib writer."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w", format=fmt) as tar:
        for info, data in members:
            tar.addfile(info, io.BytesIO(data) if data is not None else None)
    return buffer.getvalue()


def build_tar_gz(members, fmt: int = tarfile.GNU_FORMAT) -> bytes:
    """Build an in-memory gzip-compressed tar archive."""
    return gzip.compress(build_tar(members, fmt))


def _octal(value: int, length: int) -> bytes:
    return b"%0*o\0" % (length - 1, value)


def raw_header(
    name: bytes,
    size: int = 0,
    mtime: int = MTIME,
    type_flag: bytes = b"0",
    magic: bytes = b"ustar\0",
    prefix: bytes = b"",
    checksum: int | None = None,
) -> bytes:
    """Hand-craft a 512-byte header record with a valid checksum."""
    header = bytearray(BLOCK)
    header[0 : len(name)] = name
    header[100:108] = _octal(0o644, 8)
    header[108:116] = _octal(0, 8)
    header[116:124] = _octal(0, 8)
    header[124:136] = _octal(size, 12)
    header[136:148] = _octal(mtime, 12)
    header[148:156] = b" " * 8
    header[156:157] = type_flag
    header[257:263] = magic
    header[263:265] = b"00"
    header[345 : 345 + len(prefix)] = prefix
    if checksum is None:
        checksum = sum(header)
    header[148:156] = b"%06o\0 " % checksum
    return bytes(header)


def padded(data: bytes) -> bytes:
    """Pad data to the next block boundary."""
    remainder = len(data) % BLOCK
    return data + b"\0" * (BLOCK - remainder if remainder else 0)


def raw_entry(name: bytes, data: bytes = b"", type_flag: bytes = b"0", **kwargs) -> bytes:
    """Hand-craft a header plus padded payload."""
    return raw_header(name, size=len(data), type_flag=type_flag, **kwargs) + padded(data)


def long_name_entry(long_name: bytes) -> bytes:
    """Hand-craft a GNU long-name marker entry."""
    return raw_entry(
        b"././@LongLink", long_name + b"\0", type_flag=b"L", magic=b"ustar "
    )


def header_offset(archive: bytes, name: bytes) -> int:
    """Return the offset of the header whose name field starts with name."""
    for offset in range(0, len(archive), BLOCK):
        if archive[offset : offset + len(name)] == name:
            return offset
    raise ValueError(f"No header named {name!r}")
