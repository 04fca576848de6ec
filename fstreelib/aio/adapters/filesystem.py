"""Async local filesystem adapter.

Implements the primitive capability surface on the local disk. Every
blocking OS call runs in a worker thread via ``asyncio.to_thread`` so the
event loop is never blocked, and a semaphore caps how many of those calls
are in flight at once across all operations sharing the adapter.
"""

import asyncio
import os
from pathlib import Path
from typing import Any, BinaryIO, Callable, List, Set, TypeVar

from ..core import AsyncByteReader, AsyncByteWriter, AsyncFileSystemAdapter

T = TypeVar('T')


class LocalByteReader(AsyncByteReader):
    """Readable stream over a local binary file."""

    def __init__(self, handle: BinaryIO, path: Path):
        self._handle = handle
        self.path = path
        self.closed = False

    async def read(self, size: int = -1) -> bytes:
        return await asyncio.to_thread(self._handle.read, size)

    async def close(self) -> None:
        if not self.closed:
            self.closed = True
            await asyncio.to_thread(self._handle.close)

    def __repr__(self) -> str:
        return f"LocalByteReader({self.path})"


class LocalByteWriter(AsyncByteWriter):
    """Writable stream over a local binary file."""

    def __init__(self, handle: BinaryIO, path: Path):
        self._handle = handle
        self.path = path
        self.closed = False

    async def write(self, data: bytes) -> int:
        return await asyncio.to_thread(self._handle.write, data)

    async def close(self) -> None:
        if not self.closed:
            self.closed = True
            await asyncio.to_thread(self._handle.close)

    def __repr__(self) -> str:
        return f"LocalByteWriter({self.path})"


class LocalFileSystemAdapter(AsyncFileSystemAdapter):
    """Async adapter for the local filesystem.

    Example:
        async with LocalFileSystemAdapter(max_concurrent=32) as fs:
            names = await fs.list_names(Path("/srv/data"))
    """

    def __init__(self, max_concurrent: int = 100):
        """Initialize filesystem adapter.

        Args:
            max_concurrent: Maximum concurrent primitive calls
        """
        super().__init__(max_concurrent)
        self.io_count = 0

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        async with self.semaphore:
            self.io_count += 1
            return await asyncio.to_thread(func, *args)

    async def stat(self, path: Path, follow_symlinks: bool = True) -> os.stat_result:
        if follow_symlinks:
            return await self._run(os.stat, path)
        return await self._run(os.lstat, path)

    async def list_names(self, path: Path) -> List[str]:
        def _scan_directory_sync(directory: Path) -> List[str]:
            """Runs in a worker thread with proper resource management."""
            with os.scandir(directory) as iterator:
                return [entry.name for entry in iterator]

        return await self._run(_scan_directory_sync, path)

    async def mkdir(self, path: Path, mode: int = 0o777) -> None:
        await self._run(os.mkdir, path, mode)

    async def rmdir(self, path: Path) -> None:
        await self._run(os.rmdir, path)

    async def unlink(self, path: Path) -> None:
        await self._run(os.unlink, path)

    async def open_read(self, path: Path) -> LocalByteReader:
        handle = await self._run(open, path, 'rb')
        return LocalByteReader(handle, Path(path))

    async def open_write(self, path: Path) -> LocalByteWriter:
        handle = await self._run(open, path, 'wb')
        return LocalByteWriter(handle, Path(path))

    async def rename(self, old_path: Path, new_path: Path) -> None:
        await self._run(os.rename, old_path, new_path)

    async def chmod(self, path: Path, mode: int) -> None:
        await self._run(os.chmod, path, mode)

    async def chown(self, path: Path, uid: int, gid: int) -> None:
        await self._run(os.chown, path, uid, gid)

    def _define_capabilities(self) -> Set[str]:
        """Define filesystem adapter capabilities.

        Returns:
            Set of supported capabilities
        """
        return super()._define_capabilities() | {
            'rename',
            'chmod',
            'chown',
            'symlinks',
        }

    async def get_stats(self) -> dict:
        """Get adapter statistics.

        Returns:
            Statistics dictionary
        """
        stats = await super().get_stats()
        stats['io_count'] = self.io_count
        return stats

    def __repr__(self) -> str:
        return f"LocalFileSystemAdapter(max_concurrent={self.max_concurrent})"
