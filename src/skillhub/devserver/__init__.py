"""Local development server in front of the registry backend.

See :mod:`skillhub.devserver.server` for the forwarding rules and the
single-page fallback.
"""

from skillhub.devserver.server import DevServer, find_rule

__all__ = ["DevServer", "find_rule"]
