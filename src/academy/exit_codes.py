"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~academy.exceptions.AcademyError` subclass.
Shell scripts wrapping the CLI can inspect the exit code to tell a
rejected admin login apart from an unreachable API without parsing stderr.

Example::

    $ academy admin enquiries
    $ echo $?
    3   # EXIT_AUTH_FAILURE -- no valid admin session
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_AUTH_FAILURE = 3
"""Admin authentication failed or the admin session has expired."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The remote API returned an HTTP 5xx server error."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_VALIDATION_ERROR = 8
"""Input was rejected, locally or by the API (HTTP 400/422)."""
