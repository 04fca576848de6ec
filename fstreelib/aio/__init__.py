"""Asynchronous implementation of FsTreeLib.

This package contains the async/await walker, the bulk operations built on
it, and the adapter interface they share. Every filesystem primitive is an
awaitable call, so concurrent operations never block one another.
"""

# Core abstractions
from .core import (
    NodeKind,
    NodeRecord,
    AsyncFileSystemAdapter,
    AsyncByteReader,
    AsyncByteWriter,
    NodeProbe,
    TreeWalker,
    WalkState,
    WalkStats,
    walk_tree,
    DataCollector,
    PathCollector,
    RecordCollector,
)

# Adapters
from .adapters import (
    LocalFileSystemAdapter,
    LocalByteReader,
    LocalByteWriter,
)

# Paths
from .paths import PathResolver, resolve_path, ancestor_chain

# Errors and policies
from .errors import (
    TreeError,
    NotFoundError,
    AccessDeniedError,
    NodeIOError,
    InvalidPathError,
    PartialFailureError,
    translate_os_error,
)
from .error_policies import (
    ErrorPolicy,
    FailFastPolicy,
    ContinueOnErrorsPolicy,
    CollectErrorsPolicy,
    ThresholdPolicy,
    CallbackPolicy,
    as_error_policy,
    create_resilient_policy,
)

# Streams
from .streams import pipe_stream, read_all, write_chunked

# Bulk operations
from .operations import (
    Lister,
    RecursiveRemover,
    RemovalReport,
    RecursiveCreator,
    TreeCopier,
    CopyReport,
)

# High-level API
from .api import (
    walk,
    list_tree,
    remove_tree,
    make_tree_path,
    copy_file,
    copy_tree,
    exists,
)

# Configuration (re-exported from _common)
from .._common.config import (
    WalkConfig,
    ListConfig,
    CopyConfig,
)

__all__ = [
    # Nodes
    'NodeKind',
    'NodeRecord',
    # Adapters
    'AsyncFileSystemAdapter',
    'AsyncByteReader',
    'AsyncByteWriter',
    'LocalFileSystemAdapter',
    'LocalByteReader',
    'LocalByteWriter',
    # Probe and walker
    'NodeProbe',
    'TreeWalker',
    'WalkState',
    'WalkStats',
    'walk_tree',
    # Collectors
    'DataCollector',
    'PathCollector',
    'RecordCollector',
    # Paths
    'PathResolver',
    'resolve_path',
    'ancestor_chain',
    # Errors
    'TreeError',
    'NotFoundError',
    'AccessDeniedError',
    'NodeIOError',
    'InvalidPathError',
    'PartialFailureError',
    'translate_os_error',
    # Policies
    'ErrorPolicy',
    'FailFastPolicy',
    'ContinueOnErrorsPolicy',
    'CollectErrorsPolicy',
    'ThresholdPolicy',
    'CallbackPolicy',
    'as_error_policy',
    'create_resilient_policy',
    # Streams
    'pipe_stream',
    'read_all',
    'write_chunked',
    # Operations
    'Lister',
    'RecursiveRemover',
    'RemovalReport',
    'RecursiveCreator',
    'TreeCopier',
    'CopyReport',
    # Configuration
    'WalkConfig',
    'ListConfig',
    'CopyConfig',
    # High-level API
    'walk',
    'list_tree',
    'remove_tree',
    'make_tree_path',
    'copy_file',
    'copy_tree',
    'exists',
]
