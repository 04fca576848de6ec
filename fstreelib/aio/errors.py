"""
Typed errors for FsTreeLib.

Every operation either completes with its documented result or raises
exactly one of these. The filesystem kinds also subclass the matching
builtin OSError subclasses, so ``except FileNotFoundError`` keeps working
for callers that do not know about this module.
"""

import errno
from pathlib import Path
from typing import List, Optional, Union


class TreeError(Exception):
    """Base class for all FsTreeLib errors."""


class NotFoundError(TreeError, FileNotFoundError):
    """The path does not exist."""


class AccessDeniedError(TreeError, PermissionError):
    """The operation was refused by the permission model."""


class NodeIOError(TreeError, OSError):
    """Any other failure reported by a filesystem primitive."""


class InvalidPathError(TreeError, NotADirectoryError):
    """An existing ancestor of the target path is not a directory."""

    def __init__(self, path: Union[str, Path]):
        super().__init__(errno.ENOTDIR, "Invalid Path", str(path))
        self.path = Path(path)


class PartialFailureError(TreeError):
    """A bulk operation stopped after changing part of the tree.

    Nothing is rolled back. ``removed`` lists what was already deleted,
    ``remaining`` what was still queued (the failed path first), and
    ``error`` the typed error that stopped the sequence.
    """

    def __init__(
        self,
        error: TreeError,
        failed_path: Path,
        removed: List[Path],
        remaining: List[Path],
    ):
        super().__init__(
            f"Stopped at {failed_path} after removing {len(removed)} "
            f"of {len(removed) + len(remaining)} entries: {error}"
        )
        self.error = error
        self.failed_path = failed_path
        self.removed = removed
        self.remaining = remaining


_NOT_FOUND = {errno.ENOENT, errno.ENOTDIR}
_ACCESS_DENIED = {errno.EACCES, errno.EPERM}


def translate_os_error(error: BaseException, path: Optional[Union[str, Path]] = None) -> TreeError:
    """Map an OSError onto the typed error kinds.

    Already-typed errors are returned unchanged. The errno, strerror and
    filename are carried over; ``path`` fills in the filename when the
    original error has none.

    Args:
        error: The exception raised by a primitive
        path: The path the primitive was operating on

    Returns:
        A TreeError instance (not raised)
    """
    if isinstance(error, TreeError):
        return error

    code = getattr(error, 'errno', None)
    message = getattr(error, 'strerror', None) or str(error)
    filename = getattr(error, 'filename', None)
    if filename is None and path is not None:
        filename = str(path)

    if isinstance(error, FileNotFoundError) or code in _NOT_FOUND:
        cls = NotFoundError
    elif isinstance(error, PermissionError) or code in _ACCESS_DENIED:
        cls = AccessDeniedError
    else:
        cls = NodeIOError

    if code is None:
        code = {
            NotFoundError: errno.ENOENT,
            AccessDeniedError: errno.EACCES,
        }.get(cls, errno.EIO)

    typed = cls(code, message, filename)
    typed.__cause__ = error
    return typed
