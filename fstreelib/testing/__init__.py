"""Testing helpers for code built on FsTreeLib."""

from .fixtures import (
    MemoryFileSystemAdapter,
    MemoryByteReader,
    MemoryByteWriter,
    MemoryStat,
    build_tree,
)

__all__ = [
    'MemoryFileSystemAdapter',
    'MemoryByteReader',
    'MemoryByteWriter',
    'MemoryStat',
    'build_tree',
]
