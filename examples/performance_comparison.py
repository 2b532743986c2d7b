"""Performance comparison between sequential and concurrent batch extraction."""

import asyncio
import shutil
import sys
import tempfile
import time

# Add parent directory to path
sys.path.insert(0, "src")

from tar_stream_extractor import extract_directory


async def timed_batch(input_dir: str, concurrency: int):
    """Extract every archive in input_dir with the given concurrency."""
    output_dir = tempfile.mkdtemp(prefix="tar-extract-")
    start_time = time.time()
    try:
        results = await extract_directory(input_dir, output_dir, concurrency=concurrency)
    finally:
        shutil.rmtree(output_dir, ignore_errors=True)

    end_time = time.time()
    return end_time - start_time, len(results)


async def main(input_dir: str):
    """Performance comparison."""
    print(f"Performance Comparison: archives in {input_dir}")
    print("=" * 50)

    print("\n1. Sequential Extraction:")
    sequential_time, count = await timed_batch(input_dir, concurrency=1)
    print(f"   Time: {sequential_time:.3f}s for {count} archives")

    print("\n2. Concurrent Extraction:")
    concurrent_time, count = await timed_batch(input_dir, concurrency=4)
    print(f"   Time: {concurrent_time:.3f}s for {count} archives")

    if concurrent_time > 0:
        print(f"\nSpeedup: {sequential_time / concurrent_time:.2f}x")


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("usage: performance_comparison.py <archive_dir>")
        sys.exit(2)
    asyncio.run(main(sys.argv[1]))
