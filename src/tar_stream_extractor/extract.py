"""Async functional extraction entry points."""

import logging
from pathlib import Path

from .core.extractor import ReportCallback, TarExtractor
from .core.types import ExtractConfig
from .sink import FileSystemSink, OutputSink
from .sources import ByteSource, FileSource, GzipSource, HttpSource
from .tar.models import ExtractStats

logger = logging.getLogger(__name__)


def _make_sink(destination: str | Path | OutputSink) -> OutputSink:
    if isinstance(destination, OutputSink):
        return destination
    return FileSystemSink(destination)


async def extract_tar(
    source: ByteSource,
    destination: str | Path | OutputSink,
    report_callback: ReportCallback | None = None,
    config: ExtractConfig | None = None,
) -> ExtractStats:
    """압축되지 않은 tar 바이트 스트림을 대상 디렉토리에 추출합니다.

    Args:
        source: 비동기 바이트 소스 (``async read(n) -> bytes``)
            - 예: BytesSource(data), FileSource("backup.tar")
        destination: 추출 대상
            - 경로: "./output", Path("/srv/restore")
            - OutputSink 구현체
        report_callback: 엔트리별 EntryReport를 받는 콜백 (동기/비동기 모두 가능)
        config: 블록/버퍼 크기 등 추출 설정 (기본값: ExtractConfig())

    Returns:
        ExtractStats: 추출된 파일, 디렉토리, 오류 개수 등의 집계

    Raises:
        TarFormatError: 헤더 체크섬 불일치 등 형식 오류 시
        TruncatedArchiveError: 스트림이 레코드 중간에 끝난 경우

    Examples:
        # 메모리의 tar 데이터 추출
        stats = await extract_tar(BytesSource(data), "./output")
        print(f"파일 {stats.files}개 추출")
    """
    extractor = TarExtractor(_make_sink(destination), config, report_callback)
    stats = await extractor.extract(source)
    logger.info(
        f"Extracted {stats.files} files, {stats.directories} directories "
        f"({stats.bytes_written} bytes, {stats.errors} errors)"
    )
    return stats


async def extract_tar_gzip(
    source: ByteSource,
    destination: str | Path | OutputSink,
    report_callback: ReportCallback | None = None,
    config: ExtractConfig | None = None,
) -> ExtractStats:
    """gzip으로 압축된 tar 바이트 스트림을 대상 디렉토리에 추출합니다.

    Args:
        source: gzip 압축된 비동기 바이트 소스
        destination: 추출 대상 경로 또는 OutputSink 구현체
        report_callback: 엔트리별 EntryReport를 받는 콜백 (동기/비동기 모두 가능)
        config: 추출 설정 (기본값: ExtractConfig())

    Returns:
        ExtractStats: 추출 결과 집계

    Raises:
        DecompressionError: gzip 데이터가 손상된 경우
        TarFormatError: 형식 오류 시
        TruncatedArchiveError: 스트림이 중간에 끝난 경우

    Examples:
        async with FileSource("site.tar.gz") as source:
            await extract_tar_gzip(source, "./site")
    """
    config = config or ExtractConfig()
    return await extract_tar(
        GzipSource(source, config.chunk_size), destination, report_callback, config
    )


async def extract_tar_file(
    path: str | Path,
    destination: str | Path | OutputSink,
    report_callback: ReportCallback | None = None,
    config: ExtractConfig | None = None,
) -> ExtractStats:
    """로컬 tar 파일을 대상 디렉토리에 추출합니다.

    Args:
        path: tar 파일 경로
            - 상대경로: "backup.tar", "./archives/site.tar"
            - 절대경로: "/var/backups/site.tar"
        destination: 추출 대상 경로 또는 OutputSink 구현체
        report_callback: 엔트리별 EntryReport를 받는 콜백
        config: 추출 설정

    Returns:
        ExtractStats: 추출 결과 집계

    Raises:
        TarReadError: 파일이 없거나 열 수 없는 경우
        TarFormatError: 형식 오류 시
    """
    logger.info(f"Extracting {path} into {destination}")
    async with FileSource(path) as source:
        return await extract_tar(source, destination, report_callback, config)


async def extract_tar_gzip_file(
    path: str | Path,
    destination: str | Path | OutputSink,
    report_callback: ReportCallback | None = None,
    config: ExtractConfig | None = None,
) -> ExtractStats:
    """로컬 tar.gz 파일을 대상 디렉토리에 추출합니다.

    Args:
        path: tar.gz 파일 경로 (예: "./archives/site.tar.gz")
        destination: 추출 대상 경로 또는 OutputSink 구현체
        report_callback: 엔트리별 EntryReport를 받는 콜백
        config: 추출 설정

    Returns:
        ExtractStats: 추출 결과 집계

    Raises:
        TarReadError: 파일이 없거나 열 수 없는 경우
        DecompressionError: gzip 데이터가 손상된 경우
        TarFormatError: 형식 오류 시

    Examples:
        stats = await extract_tar_gzip_file("site.tar.gz", "./site")
    """
    logger.info(f"Extracting {path} into {destination}")
    async with FileSource(path) as source:
        return await extract_tar_gzip(source, destination, report_callback, config)


async def extract_tar_url(
    url: str,
    destination: str | Path | OutputSink,
    compressed: bool = True,
    timeout: int = 300,
    report_callback: ReportCallback | None = None,
    config: ExtractConfig | None = None,
) -> ExtractStats:
    """HTTP로 내려받는 tar 스트림을 디스크에 저장하지 않고 바로 추출합니다.

    Args:
        url: 아카이브 URL (예: "https://example.com/releases/site.tar.gz")
        destination: 추출 대상 경로 또는 OutputSink 구현체
        compressed: gzip 압축 여부 (기본값: True)
        timeout: 요청 타임아웃 (초, 기본값: 300초)
        report_callback: 엔트리별 EntryReport를 받는 콜백
        config: 추출 설정

    Returns:
        ExtractStats: 추출 결과 집계

    Raises:
        TarReadError: 요청 실패 또는 응답 본문 읽기 실패 시
        TarFormatError: 형식 오류 시

    Examples:
        await extract_tar_url("http://localhost:8080/site.tar.gz", "./site")

        # 압축되지 않은 tar
        await extract_tar_url("http://localhost:8080/site.tar", "./site", compressed=False)
    """
    logger.info(f"Extracting {url} into {destination}")
    async with HttpSource(url, timeout=timeout) as source:
        if compressed:
            return await extract_tar_gzip(source, destination, report_callback, config)
        return await extract_tar(source, destination, report_callback, config)
