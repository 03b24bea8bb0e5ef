"""
Error handler for best-effort side effects.

State transitions are reported to the caller; side effects that follow a
transition (notifications, listing deactivation) are run through
ErrorHandler.best_effort so their failures are logged and swallowed.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional


# Configure logging
logger = logging.getLogger(__name__)


class ErrorHandler:
    """
    Runs side effects whose failure must not abort the triggering operation.

    Keeps a bounded history of swallowed failures for diagnostics.
    """

    def __init__(self, history_size: int = 50):
        """
        Initialize error handler.

        Args:
            history_size: Number of swallowed failures to remember
        """
        self.history_size = history_size
        self.failures: List[Dict[str, Any]] = []

    def best_effort(
        self,
        operation_name: str,
        func: Callable[..., Any],
        *args,
        **kwargs
    ) -> Optional[Any]:
        """
        Run a side effect, logging and swallowing any exception.

        Args:
            operation_name: Name used in log output
            func: Callable to run
            *args: Positional arguments for func
            **kwargs: Keyword arguments for func

        Returns:
            The result of func, or None if it raised
        """
        try:
            return func(*args, **kwargs)
        except Exception as e:
            self._log_error(operation_name, e, args, kwargs)
            return None

    def _log_error(
        self,
        operation_name: str,
        error: Exception,
        args: tuple,
        kwargs: dict
    ) -> None:
        """
        Log error with timestamp, context, and diagnostic data.

        Args:
            operation_name: Name of the operation that failed
            error: The exception that occurred
            args: Positional arguments passed to the operation
            kwargs: Keyword arguments passed to the operation
        """
        context = {
            'timestamp': datetime.now().isoformat(),
            'operation': operation_name,
            'error_type': type(error).__name__,
            'error_message': str(error),
            'args': str(args) if args else 'None',
            'kwargs': {k: str(v) for k, v in kwargs.items()} if kwargs else {}
        }

        self.failures.append(context)
        if len(self.failures) > self.history_size:
            self.failures = self.failures[-self.history_size:]

        logger.error(
            f"Side effect failed: {operation_name} | "
            f"Error: {type(error).__name__}: {str(error)}"
        )
        logger.debug(f"Full error context: {context}")
