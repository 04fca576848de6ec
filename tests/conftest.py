"""Shared fixtures for the FsTreeLib test suite."""

import pytest

from fstreelib.testing import MemoryFileSystemAdapter, build_tree


@pytest.fixture
def memory_fs():
    """Empty in-memory filesystem."""
    return MemoryFileSystemAdapter()


@pytest.fixture
def sample_fs(memory_fs):
    """In-memory filesystem holding a small tree.

    Structure:
        /root
        ├── a.txt      "hello"
        └── sub
            └── b.txt  "world"
    """
    build_tree(memory_fs, "/root", {"a.txt": b"hello", "sub": {"b.txt": b"world"}})
    return memory_fs
