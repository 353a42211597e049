"""Built-in CLI sub-command groups for skillhub.

* :mod:`~skillhub.commands.config` -- view and modify the user configuration.

The view commands (``list``, ``show``, ``open``...) are registered directly
on the root app in :mod:`skillhub.app`.
"""
