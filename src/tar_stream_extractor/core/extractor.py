"""Streaming tar extraction engine."""

import inspect
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, List, Optional, Tuple, Union

from ..exceptions import TarFormatError, UnsafePathError
from ..sink import OutputSink
from ..sources import ByteSource
from ..tar.header import read_header
from ..tar.models import EntryReport, EntryType, ExtractStats, TarHeader
from ..tar.reader import BlockReader
from ..utils.digest import calculate_digest, file_digest
from ..utils.paths import normalize_entry_name
from .types import ExtractConfig

logger = logging.getLogger(__name__)

ReportCallback = Callable[[EntryReport], Union[None, Awaitable[None]]]


class LongNameSlot:
    """Holds a GNU long name until the entry it renames arrives."""

    def __init__(self) -> None:
        self._name = ""
        self._occupied = False

    @property
    def occupied(self) -> bool:
        return self._occupied

    @property
    def pending(self) -> Optional[str]:
        return self._name if self._occupied else None

    def hold(self, name: str) -> None:
        """Store a long name.

        Raises:
            TarFormatError: If a long name is already pending
        """
        if self._occupied:
            raise TarFormatError(
                f"Long name {self._name!r} is still pending, got another: {name!r}"
            )
        self._name = name
        self._occupied = True

    def resolve(self, name: str) -> str:
        """Return the pending long name if held (clearing it), else ``name``."""
        if not self._occupied:
            return name
        resolved = self._name
        self._name = ""
        self._occupied = False
        return resolved


class TarExtractor:
    """Walks a tar byte stream and materializes its entries into a sink."""

    def __init__(
        self,
        sink: OutputSink,
        config: Optional[ExtractConfig] = None,
        report_callback: Optional[ReportCallback] = None,
    ) -> None:
        """Initialize the extractor.

        Args:
            sink: Destination for directories and files
            config: Extraction settings
            report_callback: Optional sync or async callable receiving one
                EntryReport per reported entry
        """
        self.sink = sink
        self.config = config or ExtractConfig()
        self.report_callback = report_callback
        self._empty_digest = calculate_digest(b"", self.config.digest_algorithm)

    async def extract(self, source: ByteSource) -> ExtractStats:
        """Extract every entry of a plain tar stream.

        Args:
            source: Byte source delivering the uncompressed tar stream

        Returns:
            Totals for the walk

        Raises:
            TarFormatError: On checksum mismatch, non-empty directory
                entries or a repeated long-name marker
            TruncatedArchiveError: If the stream ends inside a record
        """
        reader = BlockReader(source, self.config)
        slot = LongNameSlot()
        stats = ExtractStats()
        directories: List[Tuple[Any, datetime]] = []

        while True:
            header = await read_header(reader)
            if header is None:
                break

            entry_type = header.entry_type
            if entry_type is EntryType.LONG_NAME:
                await self._read_long_name(reader, header, slot)
                continue

            header.name = slot.resolve(header.name)

            if entry_type is EntryType.DIRECTORY:
                await self._extract_directory(header, stats, directories)
            elif entry_type is EntryType.LINK:
                # Links are reported but never materialized; any declared
                # size describes the target, no payload follows
                await reader.align()
                stats.links += 1
                await self._report(self._new_report(header, self._empty_digest), stats)
            elif entry_type is EntryType.OTHER:
                logger.debug(
                    f"Skipping {header.name!r} with unsupported type "
                    f"{header.type_flag!r} ({header.size} bytes)"
                )
                await reader.skip(header.size)
                await reader.align()
                stats.skipped += 1
            else:
                await self._extract_file(reader, header, stats)

        if slot.occupied:
            logger.warning(f"Archive ended with unused long name {slot.pending!r}")

        # Files written into a directory bump its mtime, so apply these last
        for target, mtime in reversed(directories):
            await self.sink.set_mtime(target, mtime)

        return stats

    async def _read_long_name(
        self, reader: BlockReader, header: TarHeader, slot: LongNameSlot
    ) -> None:
        data = await reader.read_bytes(header.size)
        end = data.find(b"\0")
        if end != -1:
            data = data[:end]
        slot.hold(data.decode(self.config.encoding, self.config.errors))
        await reader.align()

    async def _extract_directory(
        self,
        header: TarHeader,
        stats: ExtractStats,
        directories: List[Tuple[Any, datetime]],
    ) -> None:
        if header.size != 0:
            raise TarFormatError(
                f"Directory size must be zero: {header.name!r} declares {header.size}"
            )

        report = self._new_report(header)
        try:
            target = self.sink.resolve(normalize_entry_name(header.name))
            await self.sink.make_dirs(target)
        except (OSError, UnsafePathError) as e:
            self._fail(report, e, stats)
        else:
            directories.append((target, header.mtime))
            report.digest = self._empty_digest
            stats.directories += 1
        await self._report(report, stats)

    async def _extract_file(
        self, reader: BlockReader, header: TarHeader, stats: ExtractStats
    ) -> None:
        report = self._new_report(header)
        try:
            relative = normalize_entry_name(header.name)
            if not relative:
                raise UnsafePathError(f"File entry has no usable path: {header.name!r}")
            target = self.sink.resolve(relative)
            handle = await self._prepare_file(target)
        except (OSError, UnsafePathError) as e:
            self._fail(report, e, stats)
            # Keep the stream aligned on the next header
            await reader.skip(header.size)
            await reader.align()
            await self._report(report, stats)
            return

        try:
            await reader.copy_to(handle.write, header.size)
        finally:
            await handle.close()

        await self.sink.set_mtime(target, header.mtime)
        report.digest = await file_digest(
            self.sink, target, self.config.digest_algorithm, self.config.chunk_size
        )
        stats.files += 1
        stats.bytes_written += header.size

        await reader.align()
        await self._report(report, stats)

    async def _prepare_file(self, target: Any) -> Any:
        parent = self.sink.parent(target)
        if not await self.sink.exists(parent):
            await self.sink.make_dirs(parent)
        elif await self.sink.exists(target):
            await self.sink.delete(target)
        return await self.sink.open_write(target)

    def _new_report(self, header: TarHeader, digest: Optional[str] = None) -> EntryReport:
        return EntryReport(
            name=header.name,
            type_flag=header.type_flag,
            checksum=header.checksum,
            mtime=header.mtime,
            size=header.size,
            magic=header.magic,
            digest=digest,
        )

    def _fail(self, report: EntryReport, error: Exception, stats: ExtractStats) -> None:
        report.error = str(error) or type(error).__name__
        stats.errors += 1
        logger.warning(f"Cannot extract {report.name!r}: {report.error}")

    async def _report(self, report: EntryReport, stats: ExtractStats) -> None:
        stats.entries += 1
        logger.info(str(report))
        if self.report_callback:
            result = self.report_callback(report)
            if inspect.isawaitable(result):
                await result
