"""Batch extraction of every archive in a directory."""

import asyncio
import logging
from pathlib import Path

import aiofiles.os

from .core.extractor import ReportCallback
from .core.types import ExtractConfig
from .exceptions import TarExtractError, TarReadError
from .extract import extract_tar_file, extract_tar_gzip_file
from .tar.models import ArchiveResult

logger = logging.getLogger(__name__)

GZIP_SUFFIXES = (".tar.gz", ".tgz")
TAR_SUFFIXES = (".tar",)


def archive_stem(name: str) -> str | None:
    """Return the archive name without its suffix, or None if not an archive."""
    lowered = name.lower()
    for suffix in GZIP_SUFFIXES + TAR_SUFFIXES:
        if lowered.endswith(suffix) and len(name) > len(suffix):
            return name[: -len(suffix)]
    return None


async def _list_archives(input_dir: Path) -> list[Path]:
    try:
        names = await aiofiles.os.listdir(input_dir)
    except OSError as e:
        raise TarReadError(f"Cannot list archive directory {input_dir}: {e}") from e

    archives = []
    for name in sorted(names):
        path = input_dir / name
        if archive_stem(name) and await aiofiles.os.path.isfile(path):
            archives.append(path)
    return archives


def assign_destinations(archives: list[Path], output_dir: Path) -> dict[Path, Path]:
    """Map each archive to its own subdirectory of ``output_dir``.

    Archives sharing a stem (``site.tar`` and ``site.tgz``) fall back to
    their full file name, then to a numbered suffix. Names are compared
    case-insensitively.
    """
    taken: set[str] = set()
    destinations = {}
    for archive in archives:
        name = archive_stem(archive.name) or archive.name
        if name.lower() in taken:
            name = archive.name
        candidate, counter = name, 1
        while candidate.lower() in taken:
            candidate = f"{name}-{counter}"
            counter += 1
        taken.add(candidate.lower())
        destinations[archive] = output_dir / candidate
    return destinations


async def extract_directory(
    input_dir: str | Path,
    output_dir: str | Path,
    concurrency: int = 3,
    continue_on_error: bool = True,
    report_callback: ReportCallback | None = None,
    config: ExtractConfig | None = None,
) -> list[ArchiveResult]:
    """디렉토리 안의 모든 tar / tar.gz 파일을 동시에 추출합니다.

    각 아카이브는 ``output_dir/<아카이브 이름>`` 하위 디렉토리에 추출되며,
    이름이 겹치면 전체 파일 이름을 사용하므로
    동시 추출 시에도 대상 경로가 겹치지 않습니다.

    Args:
        input_dir: 아카이브가 들어 있는 디렉토리 (".tar", ".tar.gz", ".tgz")
        output_dir: 추출 결과를 저장할 상위 디렉토리
        concurrency: 동시에 추출할 아카이브 수 (기본값: 3)
        continue_on_error: False이면 첫 실패 시 예외를 그대로 전파
        report_callback: 엔트리별 EntryReport를 받는 콜백
        config: 추출 설정

    Returns:
        list[ArchiveResult]: 아카이브별 추출 결과 (이름 순)

    Raises:
        TarReadError: 입력 디렉토리를 읽을 수 없는 경우
        TarExtractError: continue_on_error=False이고 아카이브 추출이 실패한 경우

    Examples:
        results = await extract_directory("./archives", "./restored")
        for result in results:
            status = "OK" if result.ok else result.error
            print(f"{result.archive}: {status}")
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be at least 1: {concurrency}")

    input_dir = Path(input_dir)
    output_dir = Path(output_dir)
    archives = await _list_archives(input_dir)
    destinations = assign_destinations(archives, output_dir)
    logger.info(f"Found {len(archives)} archives in {input_dir}")

    semaphore = asyncio.Semaphore(concurrency)

    async def extract_one(archive: Path) -> ArchiveResult:
        """Extract a single archive with concurrency control."""
        destination = destinations[archive]
        result = ArchiveResult(archive=str(archive), destination=str(destination))
        async with semaphore:
            logger.info(f"Extracting {archive}")
            try:
                if archive.name.lower().endswith(GZIP_SUFFIXES):
                    extract = extract_tar_gzip_file
                else:
                    extract = extract_tar_file
                result.stats = await extract(
                    archive, destination, report_callback, config
                )
            except (TarExtractError, OSError) as e:
                if not continue_on_error:
                    raise
                logger.error(f"Failed to extract {archive}: {e}")
                result.error = str(e)
        return result

    return list(await asyncio.gather(*(extract_one(a) for a in archives)))
