"""Example usage of the async tar stream extractor."""

import asyncio
import logging
import sys

# Add parent directory to path
sys.path.insert(0, "src")

from tar_stream_extractor import (
    EntryReport,
    TarExtractError,
    extract_directory,
    extract_tar_gzip_file,
)

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def print_report(report: EntryReport) -> None:
    """Print one line per extracted entry."""
    print(report)


async def main(archive: str, output_dir: str):
    """Extract a single tar.gz archive."""
    try:
        stats = await extract_tar_gzip_file(archive, output_dir, print_report)
        logger.info(
            f"Extracted {stats.files} files and {stats.directories} directories "
            f"({stats.bytes_written:,} bytes, {stats.errors} errors)"
        )
    except TarExtractError as e:
        logger.error(f"Extraction error: {e}")


async def batch(input_dir: str, output_dir: str):
    """Extract every archive in a directory concurrently."""
    results = await extract_directory(input_dir, output_dir, concurrency=3)
    for result in results:
        if result.ok:
            logger.info(f"{result.archive}: {result.stats.files} files")
        else:
            logger.error(f"{result.archive}: {result.error}")


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("usage: async_example.py <archive.tar.gz | directory> <output_dir>")
        sys.exit(2)

    source, destination = sys.argv[1], sys.argv[2]
    if source.endswith((".tar.gz", ".tgz")):
        print("=== Single Archive ===")
        asyncio.run(main(source, destination))
    else:
        print("=== Archive Directory ===")
        asyncio.run(batch(source, destination))
