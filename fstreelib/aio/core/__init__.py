"""Core abstractions for async tree walking.

This module defines the primitive adapter interface, the node records,
the single-node probe and the breadth-first walker.
"""

from .node import NodeKind, NodeRecord
from .adapter import AsyncFileSystemAdapter, AsyncByteReader, AsyncByteWriter
from .probe import NodeProbe
from .traverser import (
    TreeWalker,
    WalkState,
    WalkStats,
    walk_tree,
)
from .collector import (
    DataCollector,
    PathCollector,
    RecordCollector,
)

__all__ = [
    # Nodes
    'NodeKind',
    'NodeRecord',
    # Adapter
    'AsyncFileSystemAdapter',
    'AsyncByteReader',
    'AsyncByteWriter',
    # Probe
    'NodeProbe',
    # Walker
    'TreeWalker',
    'WalkState',
    'WalkStats',
    'walk_tree',
    # Collectors
    'DataCollector',
    'PathCollector',
    'RecordCollector',
]
