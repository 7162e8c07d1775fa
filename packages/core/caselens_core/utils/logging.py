"""Logging utilities for the CaseLens core library."""

import inspect
import logging
import os
import sys
from functools import wraps
from typing import Any, Callable, TypeVar

_LOG_LEVEL = os.environ.get("CASELENS_LOG_LEVEL", "INFO").upper()
_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

F = TypeVar("F", bound=Callable[..., Any])


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    """Get a logger writing to stdout.

    Args:
        name: Logger name (typically __name__)
        level: Optional log level override

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        logger.addHandler(handler)

    if level is not None:
        logger.setLevel(level)
    elif logger.level == logging.NOTSET:
        logger.setLevel(getattr(logging, _LOG_LEVEL, logging.INFO))

    return logger


def log_exceptions(logger: logging.Logger, label: str | None = None) -> Callable[[F], F]:
    """Log any exception leaving the decorated function, then re-raise it.

    Args:
        logger: Logger receiving the traceback
        label: Name used in the log line, defaults to the function name

    Returns:
        Decorator for sync or async functions
    """

    def decorator(func: F) -> F:
        name = label or func.__name__

        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    logger.exception(f"{name} failed: {e}")
                    raise

            return async_wrapper  # type: ignore

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                logger.exception(f"{name} failed: {e}")
                raise

        return sync_wrapper  # type: ignore

    return decorator
