"""Recursive subtree removal.

The subtree is listed breadth-first, so every directory appears before
its contents. Deleting in reverse of that order therefore empties each
directory before it is removed.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import structlog

from ..core import AsyncFileSystemAdapter, NodeProbe, NodeRecord
from ..errors import PartialFailureError, translate_os_error
from ..paths import PathLike, resolve_path
from .lister import Lister

logger = structlog.get_logger()


@dataclass
class RemovalReport:
    """What a completed removal deleted, in deletion order."""
    root: Path
    removed: List[Path] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.removed)


class RecursiveRemover:
    """Deletes an entire subtree bottom-up.

    Deletion is strictly sequential and stops at the first failure.
    Nothing is rolled back: when some entries were already removed the
    caller gets a PartialFailureError describing what is gone and what
    is left.
    """

    def __init__(self, adapter: AsyncFileSystemAdapter, lister: Optional[Lister] = None):
        self.adapter = adapter
        self.lister = lister or Lister(adapter)

    async def remove_tree(self, root: PathLike, recursive: bool = True) -> RemovalReport:
        """Remove ``root`` and everything beneath it.

        Symbolic links are removed as links; their targets are never
        touched.

        Args:
            root: Directory or file to remove
            recursive: When False only the root's direct entries are
                targeted, so a non-empty subdirectory fails its removal

        Returns:
            RemovalReport listing every removed path

        Raises:
            NotFoundError, AccessDeniedError, NodeIOError: Listing failed
                or the very first deletion failed; nothing was removed
            PartialFailureError: A deletion failed after others succeeded
        """
        root = resolve_path(root)

        # Link-aware, fail-fast listing: an unreadable node aborts here,
        # before anything is deleted
        entries: List[NodeRecord] = await self.lister.list(
            root, recursive=recursive, details=True, follow_symlinks=False
        )
        targets = list(reversed(entries))
        if not (entries and entries[0].path == root):
            # A directory root is left out of its own listing; it goes last
            targets.append(await NodeProbe(self.adapter).probe(root))

        report = RemovalReport(root=root)
        for index, record in enumerate(targets):
            try:
                if record.is_directory:
                    await self.adapter.rmdir(record.path)
                else:
                    await self.adapter.unlink(record.path)
            except OSError as e:
                error = translate_os_error(e, record.path)
                if not report.removed:
                    if error is e:
                        raise
                    raise error from e
                remaining = [r.path for r in targets[index:]]
                logger.warning(
                    "remove_tree_partial_failure",
                    root=str(root),
                    failed_path=str(record.path),
                    removed=len(report.removed),
                    remaining=len(remaining),
                    error=str(error),
                )
                raise PartialFailureError(error, record.path, report.removed, remaining) from error
            report.removed.append(record.path)
            logger.debug("removed", path=str(record.path), kind=record.kind.value)

        return report
