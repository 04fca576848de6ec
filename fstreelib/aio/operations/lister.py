"""Subtree listing built on the walker."""

from pathlib import Path
from typing import Any, List, Optional, Union

from ..._common.config import ListConfig, WalkConfig
from ..core import AsyncFileSystemAdapter, NodeRecord, PathCollector, RecordCollector, TreeWalker
from ..paths import PathLike, resolve_path


class Lister:
    """Lists a subtree in breadth-first order.

    The root directory's own entry is left out; a file root lists as
    itself. Nodes whose probe failed and was recovered without a record
    are left out too (the policy has them).
    """

    def __init__(self, adapter: AsyncFileSystemAdapter):
        self.adapter = adapter

    async def list(
        self,
        root: PathLike,
        recursive: bool = True,
        details: bool = True,
        error_policy: Any = None,
        follow_symlinks: bool = False,
    ) -> List[Union[Path, NodeRecord]]:
        """List everything under ``root``.

        Args:
            root: Directory (or file) to list
            recursive: Descend below the root's direct entries
            details: NodeRecord values when True, bare Paths when False
            error_policy: ErrorPolicy or callable; None fails fast
            follow_symlinks: Probe through symbolic links

        Returns:
            Paths or NodeRecords in visitation order
        """
        config = ListConfig(
            walk=WalkConfig(
                recursive=recursive,
                error_policy=error_policy,
                follow_symlinks=follow_symlinks,
            ),
            details=details,
        )
        return await self.list_with_config(root, config)

    async def list_with_config(
        self,
        root: PathLike,
        config: Optional[ListConfig] = None,
    ) -> List[Union[Path, NodeRecord]]:
        """Same as ``list`` with the options given as a ListConfig."""
        config = config or ListConfig()
        root = resolve_path(root)

        collector_cls = RecordCollector if config.details else PathCollector
        collector = collector_cls(skip_root=root)

        await TreeWalker(self.adapter, config.walk).walk(root, collector)

        return collector.get_result()
