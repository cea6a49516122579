"""Exception hierarchy for authweb.

All exceptions inherit from :class:`AuthWebError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`authweb.exit_codes`.
The top-level error handler in :func:`authweb.app.main` catches
``AuthWebError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

The verification engine itself never lets these escape for an ordinary
authentication outcome: :func:`~authweb.verify.verify_credentials` turns
transport failures and declined attempts into a
:class:`~authweb.models.Verdict`.

Subclass hierarchy::

    AuthWebError (exit 1)
    +-- InvalidUsageError     (exit 2)
    +-- ConfigError           (exit 1)
    +-- TransportError        (exit 6)
    +-- CollectorClosedError  (exit 1)
"""

from authweb.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_TRANSPORT_ERROR,
)


class AuthWebError(Exception):
    """Base exception for all authweb errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`authweb.exit_codes`. The entry point catches
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


class InvalidUsageError(AuthWebError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(AuthWebError):
    """Raised for configuration problems (missing profiles, invalid JSON, bad regex, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE


class TransportError(AuthWebError):
    """Raised on network-level failures (timeout, DNS resolution, TLS, connection refused)."""

    exit_code = EXIT_TRANSPORT_ERROR


class CollectorClosedError(AuthWebError):
    """Raised when data is appended to a response collector after the transfer completed."""

    exit_code = EXIT_GENERIC_FAILURE
