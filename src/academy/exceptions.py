"""Exception hierarchy for academy.

All exceptions inherit from :class:`AcademyError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`academy.exit_codes`.
The top-level error handler in :func:`academy.app.main` catches
``AcademyError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    AcademyError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- AuthError           (exit 3)
    +-- NotFoundError       (exit 4)
    +-- ServerError         (exit 5)
    +-- ConnectionError_    (exit 6)
    +-- ValidationError     (exit 8)
    +-- ConfigError         (exit 1)

The response cache never raises any of these itself. Errors reaching a
caller of :meth:`~academy.cache.ResponseCache.fetch_with_cache` come from
the loader and are passed through unchanged.
"""

from academy.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
    EXIT_VALIDATION_ERROR,
)


class AcademyError(Exception):
    """Base exception for all academy errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`academy.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(AcademyError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class AuthError(AcademyError):
    """Raised when admin credentials are rejected or the API answers 401/403."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(AcademyError):
    """Raised when the API returns HTTP 404 (course, blog post, etc. not found)."""

    exit_code = EXIT_NOT_FOUND


class ServerError(AcademyError):
    """Raised when the API returns an HTTP 5xx server error."""

    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(AcademyError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class ValidationError(AcademyError):
    """Raised when input fails local validation or the API answers 400/422.

    Args:
        message: Human-readable error description.
        errors: Optional per-field error details, as returned by the server
            or produced by Pydantic.
    """

    exit_code = EXIT_VALIDATION_ERROR

    def __init__(self, message: str, errors: dict | list | None = None):
        super().__init__(message)
        self.errors = errors


class ConfigError(AcademyError):
    """Raised for configuration problems (invalid JSON, unknown keys, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
