"""FsTreeLib - Async Filesystem Tree Operations.

FsTreeLib walks directory trees breadth-first without recursion and builds
listing, recursive removal, recursive creation and copying on top of that
walk.

    from fstreelib.aio import list_tree, remove_tree, make_tree_path, copy_file
"""

__version__ = "0.1.0"

from . import aio

__all__ = [
    "__version__",
    "aio",
]
