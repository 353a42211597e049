"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~skillhub.exceptions.SkillhubError` subclass, so
shell wrappers can tell "skill does not exist" from "backend is down"
without parsing stderr.

Example::

    $ skillhub show no-such-skill
    $ echo $?
    4   # EXIT_NOT_FOUND
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_NOT_FOUND = 4
"""The backend answered HTTP 404 (unknown skill name)."""

EXIT_SERVER_ERROR = 5
"""The backend answered with an HTTP 5xx status."""

EXIT_CONNECTION_ERROR = 6
"""The backend could not be reached (timeout, DNS failure, connection refused)."""

EXIT_CLIENT_ERROR = 8
"""The backend rejected the request with a 4xx status other than 404."""

EXIT_ROUTE_NOT_FOUND = 9
"""A client URL did not match any known route."""

EXIT_CANCELLED = 130
"""The operation was cancelled (Ctrl-C or a superseding navigation)."""
