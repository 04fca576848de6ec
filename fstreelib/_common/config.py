"""Configuration system for FsTreeLib.

This module defines how callers specify walk, listing and copy behavior.
Options are explicit dataclasses with documented defaults rather than
loosely typed dictionaries.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass
class WalkConfig:
    """Configuration for a single tree walk.

    Attributes:
        recursive: When False, only the root's direct entries are visited
        error_policy: ErrorPolicy instance or callable
            ``(error, method_name, path) -> substitute``. ``None`` means
            fail fast: the first primitive failure aborts the walk.
        follow_symlinks: Probe through symbolic links. When False (the
            default), links are reported as links and never descended.
    """

    recursive: bool = True
    error_policy: Optional[Any] = None
    follow_symlinks: bool = False

    def resolved_policy(self):
        """Return the effective ErrorPolicy for this configuration."""
        # Imported lazily: _common must never import aio at module level
        from ..aio.error_policies import as_error_policy

        return as_error_policy(self.error_policy)

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        if self.error_policy is not None and not (
            callable(self.error_policy) or hasattr(self.error_policy, 'handle')
        ):
            errors.append("error_policy must be an ErrorPolicy or a callable")
        return errors


@dataclass
class ListConfig:
    """Configuration for listing a subtree."""

    walk: WalkConfig = field(default_factory=WalkConfig)
    details: bool = True  # NodeRecord values instead of bare paths


@dataclass
class CopyConfig:
    """Configuration for file and tree copies."""

    chunk_size: int = 64 * 1024
    mode: int = 0o777  # For directories created by copy_tree

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        if self.chunk_size <= 0:
            errors.append("chunk_size must be positive")
        if not 0 <= self.mode <= 0o7777:
            errors.append("mode must be a permission bit mask")
        return errors
