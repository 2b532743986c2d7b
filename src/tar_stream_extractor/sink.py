"""Output sinks that receive extracted entries."""

import asyncio
import os
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Union

import aiofiles
import aiofiles.os

from .exceptions import UnsafePathError


class OutputSink(ABC):
    """Hierarchical store addressed by relative POSIX paths."""

    @abstractmethod
    def resolve(self, relative: str) -> Any:
        """Map a relative entry path to a target inside the sink root."""
        pass

    @abstractmethod
    async def exists(self, target: Any) -> bool:
        pass

    @abstractmethod
    async def is_dir(self, target: Any) -> bool:
        pass

    @abstractmethod
    async def make_dirs(self, target: Any) -> None:
        """Create a directory and its parents; no-op if it exists."""
        pass

    @abstractmethod
    async def delete(self, target: Any) -> None:
        pass

    @abstractmethod
    async def open_write(self, target: Any) -> Any:
        """Create or truncate a file and return an async writable handle."""
        pass

    @abstractmethod
    async def open_read(self, target: Any) -> Any:
        """Open a file and return an async readable handle."""
        pass

    @abstractmethod
    async def set_mtime(self, target: Any, mtime: datetime) -> None:
        pass

    @abstractmethod
    def parent(self, target: Any) -> Any:
        pass


class FileSystemSink(OutputSink):
    """Local directory sink backed by aiofiles."""

    def __init__(self, root: Union[str, Path]) -> None:
        """Initialize sink.

        Args:
            root: Destination directory; created on first write
        """
        self.root = Path(root).resolve()

    def resolve(self, relative: str) -> Path:
        """Resolve a normalized entry path under the root.

        Raises:
            UnsafePathError: If the path escapes the root
        """
        target = (self.root / relative).resolve()
        if target != self.root and self.root not in target.parents:
            raise UnsafePathError(f"Entry path escapes destination: {relative!r}")
        return target

    async def exists(self, target: Path) -> bool:
        return await aiofiles.os.path.exists(target)

    async def is_dir(self, target: Path) -> bool:
        return await aiofiles.os.path.isdir(target)

    async def make_dirs(self, target: Path) -> None:
        await aiofiles.os.makedirs(target, exist_ok=True)

    async def delete(self, target: Path) -> None:
        await aiofiles.os.remove(target)

    async def open_write(self, target: Path) -> Any:
        return await aiofiles.open(target, "wb")

    async def open_read(self, target: Path) -> Any:
        return await aiofiles.open(target, "rb")

    async def set_mtime(self, target: Path, mtime: datetime) -> None:
        timestamp = mtime.timestamp()
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, os.utime, target, (timestamp, timestamp))

    def parent(self, target: Path) -> Path:
        return target.parent
