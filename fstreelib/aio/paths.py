"""Path resolution for FsTreeLib.

Resolution is purely syntactic: no filesystem access, no symlink
resolution. A relative candidate is joined onto a base working directory
(the process working directory unless one is given) and ``.``/``..``
segments are collapsed.
"""

import os
from pathlib import Path
from typing import List, Optional, Tuple, Union

from cachetools import LRUCache

PathLike = Union[str, os.PathLike]


class PathResolver:
    """Normalizes arbitrary paths into absolute, canonical Paths.

    Results are memoized per ``(base, candidate)`` pair, with a relative
    base anchored to the working directory first so every key is absolute.

    Example:
        resolver = PathResolver(base="/srv/data")
        resolver.resolve("logs/../cache")   # Path("/srv/data/cache")
    """

    def __init__(self, base: Optional[PathLike] = None, cache_size: int = 4096):
        """
        Initialize the resolver.

        Args:
            base: Fixed base directory. None means the process working
                directory at each call.
            cache_size: Maximum memoized resolutions
        """
        self.base = os.fspath(base) if base is not None else None
        self._cache: LRUCache = LRUCache(maxsize=cache_size)
        self.cache_hits = 0
        self.cache_misses = 0

    def resolve(self, candidate: PathLike, base: Optional[PathLike] = None) -> Path:
        """Resolve ``candidate`` against a base directory.

        Args:
            candidate: Absolute or relative path
            base: Overrides the resolver's base for this call

        Returns:
            Absolute normalized Path
        """
        if base is None:
            base = self.base if self.base is not None else os.getcwd()
        base_str = os.fspath(base)
        if not os.path.isabs(base_str):
            # Anchored before keying: the working directory can change between calls
            base_str = os.path.join(os.getcwd(), base_str)
        key: Tuple[str, str] = (base_str, os.fspath(candidate))

        cached = self._cache.get(key)
        if cached is not None:
            self.cache_hits += 1
            return cached

        self.cache_misses += 1
        resolved = Path(os.path.normpath(os.path.join(*key)))
        self._cache[key] = resolved
        return resolved

    def __call__(self, candidate: PathLike, base: Optional[PathLike] = None) -> Path:
        return self.resolve(candidate, base)


_default_resolver = PathResolver()


def resolve_path(candidate: PathLike, base: Optional[PathLike] = None) -> Path:
    """Resolve ``candidate`` with the shared process-wide resolver."""
    return _default_resolver.resolve(candidate, base)


def ancestor_chain(path: PathLike) -> List[Path]:
    """Ancestors of ``path`` from shallowest to deepest, ``path`` included.

    The filesystem root itself is never part of the chain.

    Example:
        ancestor_chain("/a/b/c")   # [Path("/a"), Path("/a/b"), Path("/a/b/c")]
    """
    path = resolve_path(path)
    chain = [p for p in reversed(path.parents) if p != p.parent]
    if path != path.parent:
        chain.append(path)
    return chain
