"""Filesystem node records.

A NodeRecord is built once per visited node from a single metadata query
and never changes afterwards.
"""

import stat as stat_module  # To avoid name collision with stat results
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional


class NodeKind(Enum):
    """Classification of a filesystem node.

    Drives the walker's decision to recurse, record, or skip.
    """
    FILE = "file"
    DIRECTORY = "directory"
    MISSING = "missing"      # Only for substitutes built from a NotFound error
    OTHER = "other"          # Sockets, devices, FIFOs, dangling links
    SYMLINK = "symlink"      # Link-aware probes only

    @classmethod
    def from_mode(cls, mode: int) -> 'NodeKind':
        """Classify a raw st_mode value."""
        if stat_module.S_ISDIR(mode):
            return cls.DIRECTORY
        if stat_module.S_ISREG(mode):
            return cls.FILE
        if stat_module.S_ISLNK(mode):
            return cls.SYMLINK
        return cls.OTHER


@dataclass(frozen=True)
class NodeRecord:
    """Metadata for one visited node.

    Attributes:
        path: Absolute, normalized path of the node
        kind: NodeKind classification
        mode: Raw st_mode bits (type and permissions)
        uid: Owner id
        gid: Group id
        size: Size in bytes
        atime: Access time as Unix timestamp
        mtime: Modification time as Unix timestamp
        ctime: Status change time as Unix timestamp
        birthtime: Creation time, where the platform reports one
        dev: Device id, with ino the identity of the node
    """

    path: Path
    kind: NodeKind
    mode: int = 0
    uid: int = 0
    gid: int = 0
    size: int = 0
    atime: float = 0.0
    mtime: float = 0.0
    ctime: float = 0.0
    birthtime: Optional[float] = None
    dev: int = 0
    ino: int = 0

    @classmethod
    def from_stat(cls, path: Path, st: Any, kind: Optional[NodeKind] = None) -> 'NodeRecord':
        """Build a record from an ``os.stat_result``.

        Args:
            path: Path the stat result belongs to
            st: Stat result (or any object with the st_* attributes)
            kind: Override the classification derived from st_mode

        Returns:
            New NodeRecord
        """
        return cls(
            path=Path(path),
            kind=kind or NodeKind.from_mode(st.st_mode),
            mode=st.st_mode,
            uid=st.st_uid,
            gid=st.st_gid,
            size=st.st_size,
            atime=st.st_atime,
            mtime=st.st_mtime,
            ctime=st.st_ctime,
            birthtime=getattr(st, 'st_birthtime', None),
            dev=getattr(st, 'st_dev', 0),
            ino=getattr(st, 'st_ino', 0),
        )

    @classmethod
    def missing(cls, path: Path) -> 'NodeRecord':
        """Placeholder record for a node that vanished or never existed."""
        return cls(path=Path(path), kind=NodeKind.MISSING)

    @property
    def is_file(self) -> bool:
        return self.kind is NodeKind.FILE

    @property
    def is_directory(self) -> bool:
        return self.kind is NodeKind.DIRECTORY

    @property
    def permissions(self) -> int:
        """Permission bits only (no file type bits)."""
        return stat_module.S_IMODE(self.mode)

    def to_dict(self) -> Dict[str, Any]:
        """Flat dictionary view, keyed the way listings report details."""
        return {
            'path': str(self.path),
            'is_file': self.is_file,
            'is_directory': self.is_directory,
            'kind': self.kind.value,
            'mode': self.mode,
            'uid': self.uid,
            'gid': self.gid,
            'size': self.size,
            'atime': self.atime,
            'mtime': self.mtime,
            'ctime': self.ctime,
            'birthtime': self.birthtime,
        }
