"""Async filesystem adapter abstraction.

Defines the primitive capability surface the walker and the bulk operations
need: one metadata query, one directory enumeration, one-level create and
remove, and byte-stream handles. Everything above this layer is built only
from these calls.
"""

import asyncio
import errno
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, List, Set


class AsyncByteReader(ABC):
    """Readable byte stream handle."""

    @abstractmethod
    async def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes. Returns b'' at end of stream."""
        pass

    @abstractmethod
    async def close(self) -> None:
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


class AsyncByteWriter(ABC):
    """Writable byte stream handle."""

    @abstractmethod
    async def write(self, data: bytes) -> int:
        """Write ``data`` and return the number of bytes written."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Flush and close. Completion of the destination is signalled here."""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


class AsyncFileSystemAdapter(ABC):
    """Abstract base class for async filesystem adapters.

    Adapters bridge between the generic traversal logic and a concrete
    storage backend. Every method is a single primitive call that either
    succeeds or raises an OSError (or a typed TreeError); none of them
    contains traversal logic.
    """

    def __init__(self, max_concurrent: int = 100):
        """Initialize adapter with concurrency control.

        Args:
            max_concurrent: Maximum concurrent primitive calls
        """
        self.max_concurrent = max_concurrent
        self.semaphore = asyncio.Semaphore(max_concurrent)
        self._capabilities = self._define_capabilities()

    @abstractmethod
    async def stat(self, path: Path, follow_symlinks: bool = True) -> Any:
        """Query metadata for one path.

        Args:
            path: Absolute path
            follow_symlinks: When False, report the link itself

        Returns:
            An ``os.stat_result`` (or an object with the same st_* fields)
        """
        pass

    @abstractmethod
    async def list_names(self, path: Path) -> List[str]:
        """Enumerate the entry names of one directory, in listing order."""
        pass

    @abstractmethod
    async def mkdir(self, path: Path, mode: int = 0o777) -> None:
        """Create one directory level. Fails if the parent is missing."""
        pass

    @abstractmethod
    async def rmdir(self, path: Path) -> None:
        """Remove one empty directory."""
        pass

    @abstractmethod
    async def unlink(self, path: Path) -> None:
        """Remove one non-directory node."""
        pass

    @abstractmethod
    async def open_read(self, path: Path) -> AsyncByteReader:
        """Open a readable byte stream."""
        pass

    @abstractmethod
    async def open_write(self, path: Path) -> AsyncByteWriter:
        """Open a writable byte stream, truncating any existing file."""
        pass

    # Optional single-node wrappers

    async def rename(self, old_path: Path, new_path: Path) -> None:
        raise NotImplementedError(f"{self.__class__.__name__} does not support rename")

    async def chmod(self, path: Path, mode: int) -> None:
        raise NotImplementedError(f"{self.__class__.__name__} does not support chmod")

    async def chown(self, path: Path, uid: int, gid: int) -> None:
        raise NotImplementedError(f"{self.__class__.__name__} does not support chown")

    async def exists(self, path: Path) -> bool:
        """Check whether a path exists.

        Only a "no such file" failure means False. Any other failure
        (e.g. permission denied on the parent) means the path may well
        exist, so it reports True rather than raising.
        """
        try:
            await self.stat(path)
        except OSError as e:
            return not (isinstance(e, FileNotFoundError) or e.errno in (errno.ENOENT, errno.ENOTDIR))
        return True

    async def read_bytes(self, path: Path) -> bytes:
        """Read a whole file."""
        async with await self.open_read(path) as reader:
            return await reader.read()

    async def write_bytes(self, path: Path, data: bytes) -> None:
        """Write a whole file, replacing any existing content."""
        async with await self.open_write(path) as writer:
            await writer.write(data)

    def supports_capability(self, capability: str) -> bool:
        """Check if adapter supports a specific capability.

        Args:
            capability: Capability name

        Returns:
            True if capability is supported
        """
        return capability in self._capabilities

    def _define_capabilities(self) -> Set[str]:
        """Define adapter capabilities.

        Override in subclasses to declare supported features.

        Returns:
            Set of capability names
        """
        return {
            'stat',
            'list_names',
            'mkdir',
            'rmdir',
            'unlink',
            'streams',
        }

    async def get_stats(self) -> dict:
        """Get adapter statistics.

        Returns:
            Dictionary of statistics
        """
        return {
            'max_concurrent': self.max_concurrent,
            'available_permits': self.semaphore._value if hasattr(self.semaphore, '_value') else None,
        }

    async def close(self):
        """Clean up adapter resources.

        Override if adapter needs cleanup.
        """
        pass

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
