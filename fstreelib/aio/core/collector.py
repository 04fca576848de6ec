"""Collectors for walk output.

Collectors are visitors that accumulate what a walk produces into an
ordered result. They keep the walker's visitation order.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, List, Optional, Union

from .node import NodeRecord


class DataCollector(ABC):
    """Abstract base class for collectors.

    A collector is called as a visitor, ``collector(path, value)``.
    It can maintain state and aggregate data.
    """

    def __init__(self, skip_root: Optional[Path] = None):
        """Initialize collector with empty state.

        Args:
            skip_root: Directory whose own visit is not collected
        """
        self.skip_root = skip_root
        self.reset()

    @abstractmethod
    def collect(self, path: Path, value: Union[NodeRecord, Exception]) -> Any:
        """Collect data from a single visit.

        Args:
            path: Visited path
            value: NodeRecord, or the error recovered by the policy

        Returns:
            Collected data (type depends on collector)
        """
        pass

    @abstractmethod
    def reset(self):
        """Reset collector state.

        Called before starting a new walk.
        """
        pass

    @abstractmethod
    def get_result(self) -> Any:
        """Get final collected result."""
        pass

    def __call__(self, path: Path, value: Union[NodeRecord, Exception]) -> Any:
        if not isinstance(value, NodeRecord):
            self.errors.append((path, value))
            return None
        if self._is_skipped_root(path, value):
            return None
        return self.collect(path, value)

    def _is_skipped_root(self, path: Path, record: NodeRecord) -> bool:
        # The root's own record is not part of a listing of its contents
        return (
            self.skip_root is not None
            and path == self.skip_root
            and record.is_directory
        )


class PathCollector(DataCollector):
    """Collects visited paths in visitation order."""

    def reset(self):
        self.paths: List[Path] = []
        self.errors: List[Any] = []

    def collect(self, path: Path, value: Union[NodeRecord, Exception]) -> Path:
        self.paths.append(path)
        return path

    def get_result(self) -> List[Path]:
        return self.paths


class RecordCollector(DataCollector):
    """Collects full NodeRecords in visitation order."""

    def reset(self):
        self.records: List[NodeRecord] = []
        self.errors: List[Any] = []

    def collect(self, path: Path, value: Union[NodeRecord, Exception]) -> NodeRecord:
        self.records.append(value)
        return value

    def get_result(self) -> List[NodeRecord]:
        return self.records
