"""Built-in CLI sub-commands for nearbuild.

* :mod:`~nearbuild.commands.build` -- build a contract artifact.
* :mod:`~nearbuild.commands.config` -- view and modify global settings.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``config``) or a plain callback function
registered directly on the root app (for single commands like ``build``).
"""
