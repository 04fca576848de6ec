"""Concrete adapter implementations for async walking."""

from .filesystem import (
    LocalFileSystemAdapter,
    LocalByteReader,
    LocalByteWriter,
)

__all__ = [
    'LocalFileSystemAdapter',
    'LocalByteReader',
    'LocalByteWriter',
]
