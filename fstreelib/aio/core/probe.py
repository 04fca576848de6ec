"""Single-node metadata probe.

Wraps the adapter's metadata query and classifies the result into a
NodeRecord, translating OS failures into the typed error kinds.
"""

from pathlib import Path

from ..errors import NotFoundError, translate_os_error
from .adapter import AsyncFileSystemAdapter
from .node import NodeKind, NodeRecord


class NodeProbe:
    """Classifies one path as file, directory, symlink or other.

    In link-aware mode (``follow_symlinks=False``) a symbolic link is
    reported as ``SYMLINK`` and never resolved. In following mode a link
    is reported as its target; a link whose target is missing is reported
    as ``OTHER`` using the link's own metadata.
    """

    def __init__(self, adapter: AsyncFileSystemAdapter, follow_symlinks: bool = False):
        self.adapter = adapter
        self.follow_symlinks = follow_symlinks

    async def probe(self, path: Path) -> NodeRecord:
        """Query metadata for ``path``.

        Args:
            path: Absolute path to probe

        Returns:
            NodeRecord for the path

        Raises:
            NotFoundError: The path does not exist
            AccessDeniedError: Permission failure
            NodeIOError: Any other failure
        """
        try:
            st = await self.adapter.stat(path, follow_symlinks=self.follow_symlinks)
        except OSError as e:
            error = translate_os_error(e, path)
            if self.follow_symlinks and isinstance(error, NotFoundError):
                dangling = await self._probe_dangling_link(path)
                if dangling is not None:
                    return dangling
            if error is e:
                raise
            raise error from e
        return NodeRecord.from_stat(path, st)

    async def _probe_dangling_link(self, path: Path):
        try:
            st = await self.adapter.stat(path, follow_symlinks=False)
        except OSError:
            return None
        if NodeKind.from_mode(st.st_mode) is NodeKind.SYMLINK:
            return NodeRecord.from_stat(path, st, kind=NodeKind.OTHER)
        return None

    def __repr__(self) -> str:
        return f"NodeProbe({self.adapter!r}, follow_symlinks={self.follow_symlinks})"
