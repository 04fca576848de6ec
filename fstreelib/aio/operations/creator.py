"""Recursive directory creation (mkdir -p)."""

from pathlib import Path
from typing import List

import structlog

from ..core import AsyncFileSystemAdapter, NodeKind, NodeProbe
from ..errors import InvalidPathError, NotFoundError, translate_os_error
from ..paths import PathLike, ancestor_chain

logger = structlog.get_logger()


class RecursiveCreator:
    """Creates every missing ancestor of a path, shallow to deep.

    Each level is probed before anything deeper is attempted, so a
    single-level mkdir always finds its parent in place. An existing
    ancestor that is not a directory stops the operation at that level;
    nothing deeper is created and nothing is "fixed".
    """

    def __init__(self, adapter: AsyncFileSystemAdapter):
        self.adapter = adapter
        # Symlinks to directories count as directories here
        self.probe = NodeProbe(adapter, follow_symlinks=True)

    async def make_tree_path(self, path: PathLike, mode: int = 0o777) -> List[Path]:
        """Ensure ``path`` exists as a directory.

        Args:
            path: Target directory
            mode: Permission bits for each directory created

        Returns:
            Directories created, shallowest first (empty when everything
            already existed)

        Raises:
            InvalidPathError: An existing ancestor is not a directory
            AccessDeniedError, NodeIOError: A probe or mkdir failed
        """
        created: List[Path] = []
        for directory in ancestor_chain(path):
            try:
                record = await self.probe.probe(directory)
            except NotFoundError:
                if await self._mkdir(directory, mode):
                    created.append(directory)
                continue

            if record.kind is not NodeKind.DIRECTORY:
                raise InvalidPathError(directory)

        return created

    async def _mkdir(self, directory: Path, mode: int) -> bool:
        """Create one level. False if a concurrent creator got there first."""
        try:
            await self.adapter.mkdir(directory, mode)
        except FileExistsError:
            record = await self.probe.probe(directory)
            if record.kind is not NodeKind.DIRECTORY:
                raise InvalidPathError(directory)
            return False
        except OSError as e:
            error = translate_os_error(e, directory)
            if error is e:
                raise
            raise error from e
        logger.debug("created_directory", path=str(directory), mode=oct(mode))
        return True
