"""
Exceptions raised by the URL record store and the service layer.

Every error carries a stable ``error_code`` so API handlers and logs can
identify it without matching on messages. Data-level errors are always
raised to the caller; nothing here terminates the process.
"""


class QuickURLError(Exception):
    """Base exception for all application-specific errors."""

    error_code = "app:quickurl_error"


class InvalidInputError(QuickURLError):
    """Raised when a required field is empty or the TTL is not positive."""

    error_code = "store:invalid_input_error"


class DuplicateTokenError(QuickURLError):
    """Raised when creating a record whose token is already taken."""

    error_code = "store:duplicate_token_error"


class URLNotFoundError(QuickURLError):
    """Raised when a lookup, increment or delete target is absent or expired."""

    error_code = "store:url_not_found_error"


class URLExpiredError(URLNotFoundError):
    """Raised when a redirect targets a record that is present but expired."""

    error_code = "store:url_expired_error"


class StorageUnavailableError(QuickURLError):
    """Raised when the backing storage cannot be reached.

    e.g. lost connections, locked or full databases. The store does not
    retry; callers decide whether to.
    """

    error_code = "store:storage_unavailable_error"
