"""High-level async API for FsTreeLib.

This module provides simple coroutine functions for the common tree
operations. Each accepts an optional adapter; without one it works on the
local filesystem.
"""

from pathlib import Path
from typing import Any, List, Optional, Union

from .adapters import LocalFileSystemAdapter
from .core import (
    AsyncFileSystemAdapter,
    NodeRecord,
    TreeWalker,
    WalkStats,
)
from .core.traverser import Visitor
from .operations import (
    CopyReport,
    Lister,
    RecursiveCreator,
    RecursiveRemover,
    RemovalReport,
    TreeCopier,
)
from .paths import PathLike, resolve_path
from .._common.config import CopyConfig, WalkConfig


def _adapter_or_default(adapter: Optional[AsyncFileSystemAdapter]) -> AsyncFileSystemAdapter:
    return adapter if adapter is not None else LocalFileSystemAdapter()


async def walk(
    root: PathLike,
    visitor: Visitor,
    recursive: bool = True,
    error_policy: Any = None,
    follow_symlinks: bool = False,
    adapter: Optional[AsyncFileSystemAdapter] = None,
) -> WalkStats:
    """Walk a tree breadth-first, calling ``visitor(path, record)`` per node.

    Args:
        root: Root path (relative paths use the working directory)
        visitor: Sync or async callable; raise from it to stop the walk
        recursive: Descend below the root's direct entries
        error_policy: ErrorPolicy or callable; None fails fast
        follow_symlinks: Probe through symbolic links
        adapter: Filesystem adapter (local disk if None)

    Returns:
        WalkStats for the completed walk

    Example:
        >>> await walk('/srv/data', lambda path, record: print(path))
    """
    config = WalkConfig(
        recursive=recursive,
        error_policy=error_policy,
        follow_symlinks=follow_symlinks,
    )
    return await TreeWalker(_adapter_or_default(adapter), config).walk(root, visitor)


async def list_tree(
    root: PathLike,
    recursive: bool = True,
    details: bool = True,
    error_policy: Any = None,
    adapter: Optional[AsyncFileSystemAdapter] = None,
) -> List[Union[Path, NodeRecord]]:
    """List a subtree in breadth-first order, root directory excluded.

    Args:
        root: Directory (or file) to list
        recursive: Descend below the root's direct entries
        details: NodeRecord values when True, bare Paths when False
        error_policy: ErrorPolicy or callable; None fails fast
        adapter: Filesystem adapter (local disk if None)

    Returns:
        Paths or NodeRecords in visitation order

    Example:
        >>> paths = await list_tree('/srv/data', details=False)
    """
    lister = Lister(_adapter_or_default(adapter))
    return await lister.list(root, recursive=recursive, details=details, error_policy=error_policy)


async def remove_tree(
    root: PathLike,
    recursive: bool = True,
    adapter: Optional[AsyncFileSystemAdapter] = None,
) -> RemovalReport:
    """Delete ``root`` and everything beneath it, children first.

    A failure part way through raises PartialFailureError; what was
    already deleted stays deleted.
    """
    return await RecursiveRemover(_adapter_or_default(adapter)).remove_tree(root, recursive)


async def make_tree_path(
    path: PathLike,
    mode: int = 0o777,
    adapter: Optional[AsyncFileSystemAdapter] = None,
) -> List[Path]:
    """Create ``path`` and any missing ancestors. Returns what was created."""
    return await RecursiveCreator(_adapter_or_default(adapter)).make_tree_path(path, mode)


async def copy_file(
    source: PathLike,
    destination: PathLike,
    chunk_size: int = CopyConfig.chunk_size,
    adapter: Optional[AsyncFileSystemAdapter] = None,
) -> int:
    """Stream one file to ``destination``. Returns bytes copied."""
    copier = TreeCopier(_adapter_or_default(adapter), config=CopyConfig(chunk_size=chunk_size))
    return await copier.copy_file(source, destination)


async def copy_tree(
    source: PathLike,
    destination: PathLike,
    mode: int = CopyConfig.mode,
    chunk_size: int = CopyConfig.chunk_size,
    adapter: Optional[AsyncFileSystemAdapter] = None,
) -> CopyReport:
    """Recreate the tree under ``source`` at ``destination``.

    Example:
        >>> report = await copy_tree('/srv/data', '/backup/data')
        >>> print(f"{len(report.files)} files, {report.bytes_copied} bytes")
    """
    copier = TreeCopier(
        _adapter_or_default(adapter),
        config=CopyConfig(chunk_size=chunk_size, mode=mode),
    )
    return await copier.copy_tree(source, destination)


async def exists(path: PathLike, adapter: Optional[AsyncFileSystemAdapter] = None) -> bool:
    """True unless the path is reported missing."""
    return await _adapter_or_default(adapter).exists(resolve_path(path))
