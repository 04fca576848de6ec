"""
Error handling policies for FsTreeLib.

This module provides a flexible error handling system through the Policy pattern,
allowing callers to decide how primitive failures are handled during a walk.

A policy receives every failed metadata query (``"probe"``) and every failed
directory enumeration (``"list_children"``). Returning a value recovers: the
walk continues with that value as the substitute. Raising aborts the walk
with the raised error.
"""

import inspect
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Optional

import structlog

from .errors import AccessDeniedError

logger = structlog.get_logger()


class ErrorPolicy(ABC):
    """
    Base class for error handling policies.

    Subclasses implement different strategies for handling errors
    that occur during filesystem operations.
    """

    @abstractmethod
    async def handle(self, error: Exception, method_name: str, node: Any, *args, **kwargs) -> Any:
        """
        Handle an error that occurred during a filesystem operation.

        Args:
            error: The typed exception that was raised
            method_name: Name of the step that failed ('probe' or 'list_children')
            node: The path being processed when the error occurred
            *args: Additional positional arguments from the failed step
            **kwargs: Additional keyword arguments from the failed step

        Returns:
            A substitute value that allows the walk to continue,
            or re-raises the exception to stop it.
        """
        pass


def _default_for(method_name: str) -> Any:
    """Sensible substitute for a failed step."""
    if method_name == 'list_children':
        return []  # Empty listing lets the walk continue
    return None  # No record


def _path_of(node: Any) -> Optional[Path]:
    if node is None:
        return None
    if hasattr(node, 'path'):
        return Path(node.path)
    return Path(node)


class FailFastPolicy(ErrorPolicy):
    """
    Policy that immediately re-raises any error, stopping the walk.

    This is the default behavior - any error will halt the entire operation.
    Useful when data integrity is critical and partial results are not acceptable.
    """

    async def handle(self, error: Exception, method_name: str, node: Any, *args, **kwargs) -> Any:
        """Re-raise the error immediately."""
        raise error


class CollectErrorsPolicy(ErrorPolicy):
    """
    Policy that collects all errors without logging, for batch processing.

    Errors are collected for later inspection, and sensible defaults
    are returned to allow the walk to continue.
    """

    def __init__(self):
        """Initialize the policy."""
        self.errors = []
        self.skipped_paths = []

    async def handle(self, error: Exception, method_name: str, node: Any, *args, **kwargs) -> Any:
        """Silently collect the error and return a default."""
        return self._handle_common(error, method_name, node)

    def _handle_common(self, error: Exception, method_name: str, node: Any) -> Any:
        path = _path_of(node)

        self.errors.append({
            'path': path,
            'method': method_name,
            'error': error,
            'error_type': type(error).__name__,
            'error_message': str(error)
        })

        if isinstance(error, OSError) and path is not None:
            self.skipped_paths.append(path)

        return _default_for(method_name)

    def get_statistics(self) -> dict:
        """
        Get statistics about errors encountered.

        Returns:
            Dictionary with error counts and details
        """
        return {
            'total_errors': len(self.errors),
            'access_denied': sum(1 for e in self.errors if isinstance(e['error'], PermissionError)),
            'not_found': sum(1 for e in self.errors if isinstance(e['error'], FileNotFoundError)),
            'skipped_paths': len(self.skipped_paths),
            'errors': self.errors  # Full error details
        }


class ContinueOnErrorsPolicy(CollectErrorsPolicy):
    """
    Policy that logs errors and continues the walk.

    Same collection as CollectErrorsPolicy, plus a warning per error
    when ``verbose`` is set.
    """

    def __init__(self, verbose: bool = True):
        """
        Initialize the policy.

        Args:
            verbose: If True, log a warning when an error occurs
        """
        super().__init__()
        self.verbose = verbose

    def _handle_common(self, error: Exception, method_name: str, node: Any) -> Any:
        result = super()._handle_common(error, method_name, node)

        if self.verbose:
            if isinstance(error, (AccessDeniedError, PermissionError)):
                logger.warning("skipping_inaccessible_path", path=str(_path_of(node)), error=str(error))
            else:
                logger.warning(
                    "walk_step_failed",
                    method=method_name,
                    path=str(_path_of(node)),
                    error=str(error),
                )

        return result


class ThresholdPolicy(ErrorPolicy):
    """
    Policy that tolerates errors up to a threshold, then fails fast.

    Useful when some errors are expected but too many indicate
    a systemic problem that should halt processing.
    """

    def __init__(self, max_errors: int = 10, verbose: bool = True):
        """
        Initialize threshold policy.

        Args:
            max_errors: Maximum errors to tolerate before failing
            verbose: If True, log a warning for each tolerated error
        """
        self.max_errors = max_errors
        self.error_count = 0
        self.verbose = verbose
        self.errors = []

    async def handle(self, error: Exception, method_name: str, node: Any, *args, **kwargs) -> Any:
        """Handle error if under threshold, otherwise raise."""
        self.error_count += 1
        self.errors.append(error)

        if self.error_count > self.max_errors:
            raise RuntimeError(f"Error threshold exceeded ({self.max_errors} errors)") from error

        if self.verbose:
            logger.warning(
                "walk_step_failed",
                method=method_name,
                path=str(_path_of(node)),
                error=str(error),
                error_count=self.error_count,
                max_errors=self.max_errors,
            )

        return _default_for(method_name)


class CallbackPolicy(ErrorPolicy):
    """Adapts a plain ``(error, method_name, path)`` callable into a policy.

    The callable may be sync or async. Whatever it returns is the
    substitute; whatever it raises aborts the walk.
    """

    def __init__(self, callback: Callable[..., Any]):
        self.callback = callback

    async def handle(self, error: Exception, method_name: str, node: Any, *args, **kwargs) -> Any:
        result = self.callback(error, method_name, node)
        if inspect.isawaitable(result):
            result = await result
        return result

    def __repr__(self) -> str:
        return f"CallbackPolicy({self.callback!r})"


def as_error_policy(handler: Any = None) -> ErrorPolicy:
    """
    Normalize an error handler into an ErrorPolicy.

    Args:
        handler: None (fail fast), an ErrorPolicy, or a callable

    Returns:
        An ErrorPolicy instance
    """
    if handler is None:
        return FailFastPolicy()
    if isinstance(handler, ErrorPolicy):
        return handler
    if callable(handler):
        return CallbackPolicy(handler)
    raise TypeError(f"Not an error policy: {handler!r}")


def create_resilient_policy(strict: bool = False, verbose: bool = True) -> ErrorPolicy:
    """
    Convenience function to pick a policy.

    Args:
        strict: If True, use FailFastPolicy; if False, use ContinueOnErrorsPolicy
        verbose: If True, log warnings for errors (only applies when strict=False)

    Returns:
        An ErrorPolicy configured appropriately
    """
    if strict:
        return FailFastPolicy()
    return ContinueOnErrorsPolicy(verbose=verbose)
