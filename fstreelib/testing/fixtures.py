"""Test fixtures for FsTreeLib consumers.

MemoryFileSystemAdapter is a complete in-memory implementation of the
adapter interface. It keeps listing order stable (insertion order),
records every primitive call, and lets a test make any primitive fail for
any path, including permission failures that cannot be produced on a
real disk when tests run as root.

Example:
    fs = MemoryFileSystemAdapter()
    build_tree(fs, "/root", {"a.txt": b"hello", "sub": {"b.txt": b"world"}})
    fs.fail("/root/sub", "rmdir", PermissionError(errno.EACCES, "denied"))
"""

import asyncio
import errno
import itertools
import os
import stat as stat_module
import time
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Optional, Set, Tuple, Union

from ..aio.core import AsyncByteReader, AsyncByteWriter, AsyncFileSystemAdapter

_DIR = 'directory'
_FILE = 'file'
_SYMLINK = 'symlink'
_OTHER = 'other'

_TYPE_BITS = {
    _DIR: stat_module.S_IFDIR,
    _FILE: stat_module.S_IFREG,
    _SYMLINK: stat_module.S_IFLNK,
    _OTHER: stat_module.S_IFIFO,
}

_MAX_LINK_HOPS = 40

TreeLayout = Dict[str, Union['TreeLayout', bytes, str]]


@dataclass
class MemoryStat:
    """The st_* subset of os.stat_result that FsTreeLib reads."""
    st_mode: int
    st_ino: int
    st_dev: int
    st_uid: int
    st_gid: int
    st_size: int
    st_atime: float
    st_mtime: float
    st_ctime: float
    st_nlink: int = 1


@dataclass
class _MemoryNode:
    kind: str
    ino: int
    permissions: int
    uid: int = 0
    gid: int = 0
    data: bytearray = field(default_factory=bytearray)
    children: List[str] = field(default_factory=list)  # Listing order
    target: Optional[str] = None                       # Symlinks only
    atime: float = field(default_factory=time.time)
    mtime: float = field(default_factory=time.time)
    ctime: float = field(default_factory=time.time)


def _key(path: Any) -> str:
    return str(PurePosixPath(os.path.normpath(os.fspath(path))))


def _error(cls, code: int, path: Any) -> OSError:
    return cls(code, os.strerror(code), str(path))


class MemoryByteReader(AsyncByteReader):
    """Reads a snapshot of an in-memory file."""

    def __init__(self, adapter: 'MemoryFileSystemAdapter', path: str, data: bytes):
        self._adapter = adapter
        self.path = path
        self._data = data
        self._offset = 0
        self.closed = False

    async def read(self, size: int = -1) -> bytes:
        await asyncio.sleep(0)
        self._adapter._check_fault('read', self.path)
        if size is None or size < 0:
            size = len(self._data) - self._offset
        chunk = self._data[self._offset:self._offset + size]
        self._offset += len(chunk)
        return bytes(chunk)

    async def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._adapter.open_handles.discard(self)
            self._adapter._check_fault('close', self.path)


class MemoryByteWriter(AsyncByteWriter):
    """Writes straight through to an in-memory file."""

    def __init__(self, adapter: 'MemoryFileSystemAdapter', path: str, node: _MemoryNode):
        self._adapter = adapter
        self.path = path
        self._node = node
        self.closed = False

    async def write(self, data: bytes) -> int:
        await asyncio.sleep(0)
        self._adapter._check_fault('write', self.path)
        self._node.data.extend(data)
        self._node.mtime = time.time()
        return len(data)

    async def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._adapter.open_handles.discard(self)
            self._adapter._check_fault('close', self.path)


class MemoryFileSystemAdapter(AsyncFileSystemAdapter):
    """In-memory POSIX-style filesystem implementing the adapter interface.

    Every primitive yields to the event loop once, so concurrent
    operations interleave the way they would on a real disk.
    """

    def __init__(self, max_concurrent: int = 100, dev: int = 1):
        super().__init__(max_concurrent)
        self.dev = dev
        self._inodes = itertools.count(2)
        self._nodes: Dict[str, _MemoryNode] = {
            '/': _MemoryNode(kind=_DIR, ino=1, permissions=0o755),
        }
        self._faults: Dict[Tuple[str, str], BaseException] = {}
        self.calls: List[Tuple[str, str]] = []
        self.open_handles: Set[Any] = set()

    # Fault injection

    def fail(self, path: Any, operation: str, error: BaseException) -> None:
        """Make ``operation`` on ``path`` raise ``error`` until cleared.

        Operations: stat, list_names, mkdir, rmdir, unlink,
        open_read, open_write, read, write, close, rename, chmod, chown.
        """
        self._faults[(operation, _key(path))] = error

    def deny(self, path: Any, operation: str = 'stat') -> None:
        """Shorthand for a permission failure."""
        self.fail(path, operation, _error(PermissionError, errno.EACCES, path))

    def clear_faults(self) -> None:
        self._faults.clear()

    def _check_fault(self, operation: str, path: Any) -> None:
        error = self._faults.get((operation, _key(path)))
        if error is not None:
            raise error

    async def _enter(self, operation: str, path: Any) -> str:
        key = _key(path)
        self.calls.append((operation, key))
        await asyncio.sleep(0)
        self._check_fault(operation, key)
        return key

    def calls_for(self, operation: str) -> List[str]:
        """Paths passed to ``operation``, in call order."""
        return [path for op, path in self.calls if op == operation]

    # Path resolution

    def _lookup(self, path: str, follow_last: bool = True, hops: int = 0) -> str:
        """Return the node key ``path`` refers to, following links."""
        parts = PurePosixPath(path).parts
        current = '/'
        for index, part in enumerate(parts[1:], start=1):
            parent = self._nodes[current]
            if parent.kind != _DIR:
                raise _error(NotADirectoryError, errno.ENOTDIR, path)
            if part not in parent.children:
                raise _error(FileNotFoundError, errno.ENOENT, path)
            current = str(PurePosixPath(current) / part)
            node = self._nodes[current]
            is_last = index == len(parts) - 1
            if node.kind == _SYMLINK and (follow_last or not is_last):
                if hops >= _MAX_LINK_HOPS:
                    raise _error(OSError, errno.ELOOP, path)
                target = _key(PurePosixPath(current).parent / node.target)
                current = self._lookup(target, True, hops + 1)
        return current

    def _parent_dir(self, key: str, path: Any) -> _MemoryNode:
        parent_key = self._lookup(str(PurePosixPath(key).parent))
        parent = self._nodes[parent_key]
        if parent.kind != _DIR:
            raise _error(NotADirectoryError, errno.ENOTDIR, path)
        return parent

    def _add(self, key: str, node: _MemoryNode) -> _MemoryNode:
        parent = self._parent_dir(key, key)
        name = PurePosixPath(key).name
        if name in parent.children:
            raise _error(FileExistsError, errno.EEXIST, key)
        parent.children.append(name)
        parent.mtime = time.time()
        # Keyed by the real parent so lookups through links agree
        real_key = str(PurePosixPath(self._lookup(str(PurePosixPath(key).parent))) / name)
        self._nodes[real_key] = node
        return node

    def _detach(self, key: str) -> None:
        parent = self._nodes[str(PurePosixPath(key).parent)]
        parent.children.remove(PurePosixPath(key).name)
        parent.mtime = time.time()
        del self._nodes[key]

    def _stat_of(self, node: _MemoryNode) -> MemoryStat:
        size = len(node.data)
        if node.kind == _SYMLINK:
            size = len(node.target or '')
        elif node.kind == _DIR:
            size = 4096
        return MemoryStat(
            st_mode=_TYPE_BITS[node.kind] | node.permissions,
            st_ino=node.ino,
            st_dev=self.dev,
            st_uid=node.uid,
            st_gid=node.gid,
            st_size=size,
            st_atime=node.atime,
            st_mtime=node.mtime,
            st_ctime=node.ctime,
        )

    # Synchronous builders for test setup (no call recording)

    def add_dir(self, path: Any, mode: int = 0o755) -> Path:
        key = _key(path)
        self._add(key, _MemoryNode(kind=_DIR, ino=next(self._inodes), permissions=mode))
        return Path(key)

    def add_file(self, path: Any, data: Union[bytes, str] = b'', mode: int = 0o644) -> Path:
        if isinstance(data, str):
            data = data.encode()
        key = _key(path)
        self._add(key, _MemoryNode(
            kind=_FILE, ino=next(self._inodes), permissions=mode, data=bytearray(data)
        ))
        return Path(key)

    def add_symlink(self, path: Any, target: Any) -> Path:
        key = _key(path)
        self._add(key, _MemoryNode(
            kind=_SYMLINK, ino=next(self._inodes), permissions=0o777, target=os.fspath(target)
        ))
        return Path(key)

    def add_special(self, path: Any) -> Path:
        """Add a FIFO-like node that is neither file, directory nor link."""
        key = _key(path)
        self._add(key, _MemoryNode(kind=_OTHER, ino=next(self._inodes), permissions=0o644))
        return Path(key)

    def has(self, path: Any) -> bool:
        try:
            self._lookup(_key(path), follow_last=False)
        except OSError:
            return False
        return True

    def content(self, path: Any) -> bytes:
        return bytes(self._nodes[self._lookup(_key(path))].data)

    def names(self, path: Any) -> List[str]:
        return list(self._nodes[self._lookup(_key(path))].children)

    # Adapter primitives

    async def stat(self, path: Path, follow_symlinks: bool = True) -> MemoryStat:
        key = await self._enter('stat', path)
        return self._stat_of(self._nodes[self._lookup(key, follow_last=follow_symlinks)])

    async def list_names(self, path: Path) -> List[str]:
        key = await self._enter('list_names', path)
        node = self._nodes[self._lookup(key)]
        if node.kind != _DIR:
            raise _error(NotADirectoryError, errno.ENOTDIR, path)
        return list(node.children)

    async def mkdir(self, path: Path, mode: int = 0o777) -> None:
        key = await self._enter('mkdir', path)
        if self.has(key):
            raise _error(FileExistsError, errno.EEXIST, path)
        try:
            self._parent_dir(key, path)
        except FileNotFoundError:
            raise _error(FileNotFoundError, errno.ENOENT, path) from None
        self._add(key, _MemoryNode(kind=_DIR, ino=next(self._inodes), permissions=mode & 0o7777))

    async def rmdir(self, path: Path) -> None:
        key = await self._enter('rmdir', path)
        real = self._lookup(key, follow_last=False)
        node = self._nodes[real]
        if node.kind != _DIR:
            raise _error(NotADirectoryError, errno.ENOTDIR, path)
        if node.children:
            raise _error(OSError, errno.ENOTEMPTY, path)
        if real == '/':
            raise _error(OSError, errno.EBUSY, path)
        self._detach(real)

    async def unlink(self, path: Path) -> None:
        key = await self._enter('unlink', path)
        real = self._lookup(key, follow_last=False)
        if self._nodes[real].kind == _DIR:
            raise _error(IsADirectoryError, errno.EISDIR, path)
        self._detach(real)

    async def open_read(self, path: Path) -> MemoryByteReader:
        key = await self._enter('open_read', path)
        node = self._nodes[self._lookup(key)]
        if node.kind == _DIR:
            raise _error(IsADirectoryError, errno.EISDIR, path)
        reader = MemoryByteReader(self, key, bytes(node.data))
        self.open_handles.add(reader)
        return reader

    async def open_write(self, path: Path) -> MemoryByteWriter:
        key = await self._enter('open_write', path)
        try:
            real = self._lookup(key)
        except FileNotFoundError:
            self._parent_dir(key, path)
            node = self._add(key, _MemoryNode(kind=_FILE, ino=next(self._inodes), permissions=0o644))
        else:
            node = self._nodes[real]
            if node.kind == _DIR:
                raise _error(IsADirectoryError, errno.EISDIR, path)
            node.data = bytearray()
        writer = MemoryByteWriter(self, key, node)
        self.open_handles.add(writer)
        return writer

    async def rename(self, old_path: Path, new_path: Path) -> None:
        old_key = await self._enter('rename', old_path)
        new_key = _key(new_path)
        real = self._lookup(old_key, follow_last=False)
        node = self._nodes[real]
        if self.has(new_key):
            existing = self._nodes[self._lookup(new_key, follow_last=False)]
            if existing.kind == _DIR and existing.children:
                raise _error(OSError, errno.ENOTEMPTY, new_path)
            self._detach(self._lookup(new_key, follow_last=False))
        if node.kind == _DIR:
            # Move the whole subtree
            moved = {
                k: v for k, v in self._nodes.items()
                if k == real or k.startswith(real.rstrip('/') + '/')
            }
            self._detach(real)
            self._add(new_key, node)
            for k, v in moved.items():
                if k != real:
                    del self._nodes[k]
                    self._nodes[new_key + k[len(real):]] = v
        else:
            self._detach(real)
            self._add(new_key, node)

    async def chmod(self, path: Path, mode: int) -> None:
        key = await self._enter('chmod', path)
        node = self._nodes[self._lookup(key)]
        node.permissions = mode & 0o7777
        node.ctime = time.time()

    async def chown(self, path: Path, uid: int, gid: int) -> None:
        key = await self._enter('chown', path)
        node = self._nodes[self._lookup(key)]
        node.uid, node.gid = uid, gid
        node.ctime = time.time()

    def _define_capabilities(self) -> Set[str]:
        return super()._define_capabilities() | {'rename', 'chmod', 'chown', 'symlinks', 'faults'}

    def __repr__(self) -> str:
        return f"MemoryFileSystemAdapter(nodes={len(self._nodes)})"


def build_tree(adapter: MemoryFileSystemAdapter, root: Any, layout: TreeLayout) -> Path:
    """Create ``root`` and the nested structure in ``layout``.

    Dict values are directories; bytes or str values are file contents.
    Entries are created in dict order, which becomes listing order.

    Args:
        adapter: Adapter to populate
        root: Directory to create (its parents must exist or are created)
        layout: Nested structure

    Returns:
        The root path
    """
    root_key = _key(root)
    for ancestor in [str(p) for p in reversed(PurePosixPath(root_key).parents)] + [root_key]:
        if ancestor != '/' and not adapter.has(ancestor):
            adapter.add_dir(ancestor)

    pending = [(root_key, layout)]
    while pending:
        directory, entries = pending.pop(0)
        for name, value in entries.items():
            path = str(PurePosixPath(directory) / name)
            if isinstance(value, dict):
                adapter.add_dir(path)
                pending.append((path, value))
            else:
                adapter.add_file(path, value)
    return Path(root_key)
