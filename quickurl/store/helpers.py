import functools
import logging
from typing import Any, Callable, TypeVar

from sqlalchemy import exc

from quickurl.exceptions import StorageUnavailableError


__all__ = ["handle_storage_errors"]

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

# Connectivity and locking failures; constraint violations are handled by the store
UNAVAILABLE_ERRORS = (
    exc.OperationalError,
    exc.InterfaceError,
    exc.DisconnectionError,
    exc.TimeoutError,
)


def handle_storage_errors(method: F) -> F:
    """Wrap database-interacting store methods to surface storage failures

    Args:
        method (Callable[..., Any]):
            Store method issuing SQL which may raise SQLAlchemy connectivity errors.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises StorageUnavailableError instead. The
            store never retries; the caller decides.

    Example:
        >>> @handle_storage_errors
        ... def sweep(self, now=None):
        ...     ...
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except UNAVAILABLE_ERRORS as e:
            logger.error("Storage unavailable during %s: %s", method.__name__, e)
            raise StorageUnavailableError(f"Storage unavailable during {method.__name__}.") from e
        except exc.DBAPIError as e:
            if not e.connection_invalidated:
                raise
            logger.error("Connection lost during %s: %s", method.__name__, e)
            raise StorageUnavailableError(f"Connection lost during {method.__name__}.") from e

    return wrapper
