"""File and tree copies.

``copy_file`` streams one file. ``copy_tree`` is the explicit recursive
variant: it walks the source breadth-first, recreates each directory with
RecursiveCreator and copies each regular file with ``copy_file``.
"""

import asyncio
import errno
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, NoReturn, Optional, Tuple

import structlog

from ..._common.config import CopyConfig, WalkConfig
from ..core import (
    AsyncByteReader,
    AsyncByteWriter,
    AsyncFileSystemAdapter,
    NodeKind,
    NodeProbe,
    NodeRecord,
    TreeWalker,
)
from ..errors import NodeIOError, NotFoundError, translate_os_error
from ..paths import PathLike, resolve_path
from ..streams import Pipe, pipe_stream
from .creator import RecursiveCreator

logger = structlog.get_logger()


def _reraise(error: OSError, path: Path) -> NoReturn:
    typed = translate_os_error(error, path)
    if typed is error:
        raise error
    raise typed from error


class _TaggedReader(AsyncByteReader):
    """Reader whose failures name the source path."""

    def __init__(self, handle: AsyncByteReader, path: Path):
        self.handle = handle
        self.path = path

    async def read(self, size: int = -1) -> bytes:
        try:
            return await self.handle.read(size)
        except OSError as e:
            _reraise(e, self.path)

    async def close(self) -> None:
        try:
            await self.handle.close()
        except OSError as e:
            _reraise(e, self.path)


class _TaggedWriter(AsyncByteWriter):
    """Writer whose failures name the destination path."""

    def __init__(self, handle: AsyncByteWriter, path: Path):
        self.handle = handle
        self.path = path

    async def write(self, data: bytes) -> int:
        try:
            return await self.handle.write(data)
        except OSError as e:
            _reraise(e, self.path)

    async def close(self) -> None:
        try:
            await self.handle.close()
        except OSError as e:
            _reraise(e, self.path)


@dataclass
class CopyReport:
    """Outcome of a tree copy."""
    source: Path
    destination: Path
    files: List[Path] = field(default_factory=list)        # Destination paths
    directories: List[Path] = field(default_factory=list)  # Destination paths
    skipped: List[Tuple[Path, str]] = field(default_factory=list)  # (source, kind)
    bytes_copied: int = 0


class TreeCopier:
    """Copies files by streaming bytes from source to destination.

    On the first error from either side both handles are closed before
    the error propagates. A partially written destination is left in
    place.
    """

    def __init__(
        self,
        adapter: AsyncFileSystemAdapter,
        pipe: Pipe = pipe_stream,
        config: Optional[CopyConfig] = None,
        creator: Optional[RecursiveCreator] = None,
    ):
        """Initialize copier.

        Args:
            adapter: Filesystem primitives
            pipe: Coroutine ``pipe(reader, writer, chunk_size)`` moving the bytes
            config: Chunk size and directory mode
            creator: Used by copy_tree for directories
        """
        self.adapter = adapter
        self.pipe = pipe
        self.config = config or CopyConfig()
        problems = self.config.validate()
        if problems:
            raise ValueError("; ".join(problems))
        self.creator = creator or RecursiveCreator(adapter)
        self.probe = NodeProbe(adapter, follow_symlinks=True)

    async def copy_file(self, source: PathLike, destination: PathLike) -> int:
        """Copy one file.

        Args:
            source: File to read
            destination: File to create or truncate

        Returns:
            Number of bytes copied

        Raises:
            NotFoundError, AccessDeniedError, NodeIOError: First error from
                either side, carrying that side's path. NodeIOError with
                EINVAL when both paths name the same file.
        """
        source = resolve_path(source)
        destination = resolve_path(destination)
        await self._check_distinct(source, destination)

        reader, writer = await self._open_pair(source, destination)
        reader = _TaggedReader(reader, source)
        writer = _TaggedWriter(writer, destination)
        try:
            copied = await self.pipe(reader, writer, self.config.chunk_size)
        except OSError as e:
            await self._close_quietly(reader, writer)
            _reraise(e, source)
        except BaseException:
            await self._close_quietly(reader, writer)
            raise

        try:
            await reader.close()
        except OSError as e:
            await self._close_quietly(writer)
            _reraise(e, source)
        try:
            # Closing the writer is where the destination reports completion
            await writer.close()
        except OSError as e:
            _reraise(e, destination)

        logger.debug("copied_file", source=str(source), destination=str(destination), bytes=copied)
        return copied

    async def _check_distinct(self, source: Path, destination: Path) -> None:
        # open_write truncates, so the destination must not be the source
        try:
            target = await self.probe.probe(destination)
        except NotFoundError:
            return
        origin = await self.probe.probe(source)
        if origin.ino and (origin.dev, origin.ino) == (target.dev, target.ino):
            raise NodeIOError(errno.EINVAL, "source and destination are the same file", str(destination))

    async def _open_pair(self, source: Path, destination: Path):
        results = await asyncio.gather(
            self.adapter.open_read(source),
            self.adapter.open_write(destination),
            return_exceptions=True,
        )
        reader, writer = results
        failures = [
            (result, path)
            for result, path in ((reader, source), (writer, destination))
            if isinstance(result, BaseException)
        ]
        if not failures:
            return reader, writer

        await self._close_quietly(
            *(handle for handle in (reader, writer) if not isinstance(handle, BaseException))
        )
        first, path = failures[0]
        if not isinstance(first, OSError):
            raise first
        _reraise(first, path)

    @staticmethod
    async def _close_quietly(*handles: Any) -> None:
        for handle in handles:
            try:
                await handle.close()
            except OSError as e:
                logger.debug("close_failed_after_error", handle=repr(handle), error=str(e))

    async def copy_tree(self, source: PathLike, destination: PathLike) -> CopyReport:
        """Recreate the tree under ``source`` at ``destination``.

        Directories are created shallow to deep (breadth-first order puts
        every parent first). Regular files are streamed with copy_file.
        Symlinks and special files are skipped and reported.

        Args:
            source: Directory (or single file) to copy
            destination: Path the source root maps onto

        Returns:
            CopyReport for the copy

        Raises:
            The first walk, create or copy failure.
        """
        source = resolve_path(source)
        destination = resolve_path(destination)
        report = CopyReport(source=source, destination=destination)

        records: List[NodeRecord] = []
        walker = TreeWalker(self.adapter, WalkConfig(recursive=True, follow_symlinks=False))
        await walker.walk(source, lambda path, record: records.append(record))

        for record in records:
            target = destination / record.path.relative_to(source)
            if record.kind is NodeKind.DIRECTORY:
                await self.creator.make_tree_path(target, self.config.mode)
                report.directories.append(target)
            elif record.kind is NodeKind.FILE:
                report.bytes_copied += await self.copy_file(record.path, target)
                report.files.append(target)
            else:
                report.skipped.append((record.path, record.kind.value))
                logger.debug("copy_skipped", path=str(record.path), kind=record.kind.value)

        logger.debug(
            "copied_tree",
            source=str(source),
            destination=str(destination),
            files=len(report.files),
            directories=len(report.directories),
            skipped=len(report.skipped),
        )
        return report
