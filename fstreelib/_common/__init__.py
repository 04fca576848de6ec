"""Common components shared across FsTreeLib.

This internal package contains non-I/O code. It should NOT be imported
directly by users; the public names are re-exported from ``fstreelib.aio``.

Important: This package must NEVER import from aio at module level to
avoid circular dependencies.
"""

from .config import (
    WalkConfig,
    ListConfig,
    CopyConfig,
)

__all__ = [
    'WalkConfig',
    'ListConfig',
    'CopyConfig',
]
