"""Test configuration and fixtures."""

import pytest

from tar_stream_extractor import FileSystemSink
from tests.helpers import build_tar, dir_member, file_member


@pytest.fixture
def destination(tmp_path):
    """Empty extraction root."""
    path = tmp_path / "out"
    path.mkdir()
    return path


@pytest.fixture
def sink(destination):
    """Filesystem sink rooted at the extraction root."""
    return FileSystemSink(destination)


@pytest.fixture
def sample_archive():
    """Archive with a directory, a file and a GNU long-named file."""
    long_name = "docs/" + "very-long-directory-name-" * 5 + "/readme.txt"
    return build_tar(
        [
            dir_member("docs", mtime=1_500_000_000),
            file_member("docs/hello.txt", b"hello, world\n", mtime=1_600_000_000),
            file_member(long_name, b"x" * 1500, mtime=1_650_000_000),
        ]
    ), long_name


@pytest.fixture
def reports():
    """Collector for entry reports."""
    return []


# Pytest configuration
def pytest_configure(config):
    """Configure pytest markers and settings."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test requiring network"
    )
    config.addinivalue_line("markers", "unit: mark test as unit test (default)")
