"""skillhub -- terminal client for a Skills Registry backend.

The registry backend indexes *skills* (directories carrying a ``SKILL.md``)
and publishes them over a small JSON API plus a Markdown representation
meant for automated readers. This package talks to that backend and
renders what it returns in the terminal.

Typical workflow::

    skillhub list python          # search the catalog
    skillhub show python-asyncio  # one skill's detail page
    skillhub open /skill/pdf      # resolve a web URL to its view

Modules:
    app: Typer application and CLI entry point.
    api: Skills API operations on top of the HTTP clients.
    client: Sync and async HTTP clients wrapping :mod:`httpx`.
    router: URL path to view resolution.
    navigation: Async navigator that loads the data a view needs.
    devserver: Local development proxy in front of the backend.
    build: Static asset emission for the backend to embed.
    models: Pydantic models shared across the package.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
