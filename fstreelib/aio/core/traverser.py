"""Async breadth-first tree walker.

The walker drains an explicit FIFO queue of directory paths, so tree
depth never grows the call stack. Each discovered node is probed once
and handed to the visitor once; failures go to the configured error
policy, which either substitutes a value or aborts the walk.
"""

import inspect
import time
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Deque, List, Optional, Set, Tuple, Union

import structlog

from ..._common.config import WalkConfig
from ..errors import translate_os_error
from ..paths import PathLike, resolve_path
from .adapter import AsyncFileSystemAdapter
from .node import NodeKind, NodeRecord
from .probe import NodeProbe

logger = structlog.get_logger()

Visitor = Callable[[Path, Union[NodeRecord, Exception]], Any]


class WalkState(Enum):
    """Lifecycle of one walk."""
    INIT = "init"
    PROBING_ROOT = "probing_root"
    DRAINING = "draining"
    EXPANDING = "expanding"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class WalkStats:
    """Counters for a finished walk."""
    visited: int = 0
    directories: int = 0  # Directories expanded
    errors: int = 0       # Failures recovered by the policy
    elapsed: float = 0.0  # Seconds
    state: WalkState = WalkState.INIT  # Final state of this walk


class TreeWalker:
    """Breadth-first walker over an AsyncFileSystemAdapter.

    Ordering guarantees within one walk:
        - the root is visited first, exactly once
        - every node is visited at most once
        - a node is visited only after its parent directory
        - all direct entries of a directory are visited before any of
          their own children (breadth-first)
        - siblings follow the adapter's listing order (not sorted)

    Example:
        walker = TreeWalker(LocalFileSystemAdapter(), WalkConfig(recursive=False))
        await walker.walk("/srv/data", lambda path, record: print(path))

    ``state`` reflects the most recent walk started on this instance; each
    walk's own final state is in its WalkStats. The queue is local to each
    call, so concurrent walks never share it.
    """

    def __init__(
        self,
        adapter: AsyncFileSystemAdapter,
        config: Optional[WalkConfig] = None,
    ):
        """Initialize walker.

        Args:
            adapter: Filesystem primitives to walk with
            config: Walk options (defaults to WalkConfig())
        """
        self.adapter = adapter
        self.config = config or WalkConfig()
        self.state = WalkState.INIT

    async def walk(self, root: PathLike, visitor: Visitor) -> WalkStats:
        """Walk the tree under ``root``, calling ``visitor`` once per node.

        Args:
            root: Starting path, resolved against the working directory
            visitor: ``visitor(path, record_or_error)``, sync or async.
                Receives the NodeRecord, or the recovered error when the
                policy substituted something that is not a record.

        Returns:
            WalkStats for the completed walk

        Raises:
            Whatever the error policy or the visitor raises. The first
            unrecovered failure terminates the walk.
        """
        problems = self.config.validate()
        if problems:
            raise ValueError("; ".join(problems))

        policy = self.config.resolved_policy()
        probe = NodeProbe(self.adapter, follow_symlinks=self.config.follow_symlinks)
        root = resolve_path(root)
        stats = WalkStats()
        started = time.perf_counter()

        logger.debug(
            "walk_started",
            root=str(root),
            recursive=self.config.recursive,
            follow_symlinks=self.config.follow_symlinks,
        )

        try:
            self.state = stats.state = WalkState.PROBING_ROOT
            root_value = await self._probe(probe, policy, root, stats)
            await self._visit(visitor, root, root_value, stats)

            queue: Deque[Path] = deque()
            seen: Set[Tuple[Any, ...]] = set()
            if self._is_directory(root_value):
                self._mark_seen(root_value, seen)
                queue.append(root)

            while queue:
                self.state = stats.state = WalkState.DRAINING
                directory = queue.popleft()

                self.state = stats.state = WalkState.EXPANDING
                stats.directories += 1
                for name in await self._list_names(policy, directory, stats):
                    child = resolve_path(name, base=directory)
                    value = await self._probe(probe, policy, child, stats)
                    await self._visit(visitor, child, value, stats)

                    if self.config.recursive and self._is_directory(value):
                        if self._mark_seen(value, seen):
                            queue.append(child)
        except BaseException:
            self.state = stats.state = WalkState.FAILED
            raise

        self.state = stats.state = WalkState.COMPLETED
        stats.elapsed = time.perf_counter() - started
        logger.debug(
            "walk_completed",
            root=str(root),
            visited=stats.visited,
            directories=stats.directories,
            errors=stats.errors,
        )
        return stats

    async def _probe(self, probe: NodeProbe, policy, path: Path, stats: WalkStats):
        try:
            return await probe.probe(path)
        except OSError as e:
            error = translate_os_error(e, path)
            substitute = await policy.handle(error, 'probe', path)
            stats.errors += 1
            if isinstance(substitute, NodeRecord):
                return substitute
            return error

    async def _list_names(self, policy, directory: Path, stats: WalkStats) -> List[str]:
        try:
            return list(await self.adapter.list_names(directory))
        except OSError as e:
            error = translate_os_error(e, directory)
            substitute = await policy.handle(error, 'list_children', directory)
            stats.errors += 1
            return self._as_names(substitute)

    @staticmethod
    def _as_names(substitute: Any) -> List[str]:
        if substitute is None or isinstance(substitute, (str, bytes)):
            return []
        if isinstance(substitute, Iterable):
            return [str(name) for name in substitute]
        return []

    @staticmethod
    async def _visit(visitor: Visitor, path: Path, value: Any, stats: WalkStats) -> None:
        stats.visited += 1
        result = visitor(path, value)
        if inspect.isawaitable(result):
            await result

    @staticmethod
    def _is_directory(value: Any) -> bool:
        return isinstance(value, NodeRecord) and value.kind is NodeKind.DIRECTORY

    def _mark_seen(self, record: NodeRecord, seen: Set[Tuple[Any, ...]]) -> bool:
        """Remember a directory; False if it was already queued once."""
        if self.config.follow_symlinks and record.ino:
            key: Tuple[Any, ...] = ('inode', record.dev, record.ino)
        else:
            key = ('path', str(record.path))
        if key in seen:
            return False
        seen.add(key)
        return True

    def __repr__(self) -> str:
        return f"TreeWalker({self.adapter!r}, {self.config!r})"


async def walk_tree(
    adapter: AsyncFileSystemAdapter,
    root: PathLike,
    visitor: Visitor,
    recursive: bool = True,
    error_policy: Any = None,
    follow_symlinks: bool = False,
) -> WalkStats:
    """Convenience wrapper around TreeWalker.walk.

    Args:
        adapter: Filesystem primitives
        root: Starting path
        visitor: Called once per node
        recursive: Descend below the root's direct entries
        error_policy: ErrorPolicy or callable; None fails fast
        follow_symlinks: Probe through symbolic links

    Returns:
        WalkStats for the completed walk
    """
    config = WalkConfig(
        recursive=recursive,
        error_policy=error_policy,
        follow_symlinks=follow_symlinks,
    )
    return await TreeWalker(adapter, config).walk(root, visitor)
