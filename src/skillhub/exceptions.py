"""Exception hierarchy for skillhub.

All exceptions inherit from :class:`SkillhubError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`skillhub.exit_codes`.
The top-level error handler in :func:`skillhub.app.main` catches
``SkillhubError`` and exits with the appropriate code.

HTTP failures are split so that callers can tell a missing skill from an
unreachable backend: every :class:`HTTPError` carries the response
``status_code``, while :class:`ConnectionError_` never does.

Subclass hierarchy::

    SkillhubError (exit 1)
    +-- InvalidUsageError     (exit 2)
    +-- ConfigError           (exit 1)
    +-- ConnectionError_      (exit 6)
    +-- HTTPError             (exit 1)
    |   +-- NotFoundError     (exit 4)
    |   +-- ClientError       (exit 8)
    |   +-- ServerError       (exit 5)
    +-- RouteNotFoundError    (exit 9)
    +-- NavigationCancelled   (exit 130)
"""

from __future__ import annotations

from typing import Optional

from skillhub.exit_codes import (
    EXIT_CANCELLED,
    EXIT_CLIENT_ERROR,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_ROUTE_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class SkillhubError(Exception):
    """Base exception for all skillhub errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`skillhub.exit_codes`. The entry point catches
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


class InvalidUsageError(SkillhubError):
    """Raised for invalid CLI arguments or bad reverse-routing parameters."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(SkillhubError):
    """Raised for configuration problems (invalid JSON, failed validation)."""

    exit_code = EXIT_GENERIC_FAILURE


class ConnectionError_(SkillhubError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``. Carries no status code: no response was received.
    """

    exit_code = EXIT_CONNECTION_ERROR


class HTTPError(SkillhubError):
    """Raised when the backend answers with a 4xx or 5xx status.

    Args:
        message: Human-readable error description.
        status_code: The HTTP status of the response.
        url: The request URL, when known.
    """

    def __init__(self, message: str, status_code: int, url: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class NotFoundError(HTTPError):
    """Raised when the backend returns HTTP 404 (unknown skill)."""

    exit_code = EXIT_NOT_FOUND


class ClientError(HTTPError):
    """Raised for 4xx responses other than 404."""

    exit_code = EXIT_CLIENT_ERROR


class ServerError(HTTPError):
    """Raised when the backend returns an HTTP 5xx server error."""

    exit_code = EXIT_SERVER_ERROR


class RouteNotFoundError(SkillhubError):
    """Raised when a client URL matches none of the router's routes.

    Args:
        path: The path that failed to resolve.
    """

    exit_code = EXIT_ROUTE_NOT_FOUND

    def __init__(self, path: str):
        super().__init__(f"No route matches '{path}'")
        self.path = path


class NavigationCancelled(SkillhubError):
    """Raised to the caller of a navigation that a newer one superseded."""

    exit_code = EXIT_CANCELLED
