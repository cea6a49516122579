"""Built-in CLI sub-commands for authweb.

* :mod:`~authweb.commands.verify` -- check one credential pair.
* :mod:`~authweb.commands.profile` -- create, inspect, and remove profiles.
* :mod:`~authweb.commands.config` -- view and modify global settings.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``profile`` and ``config``) or a plain callback
function registered directly on the root app (for ``verify``).
"""
