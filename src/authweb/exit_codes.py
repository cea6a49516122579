"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific outcome and is referenced either by the
corresponding :class:`~authweb.exceptions.AuthWebError` subclass or by the
``authweb verify`` command when it maps a verdict to a process status.
Shell wrappers (PAM ``pam_exec``, FTP server hooks, CI scripts) can inspect
the exit code to tell a rejection apart from "try another mechanism"
without parsing stderr.

Example::

    $ authweb verify bob --password-source env:BOB_PASSWORD
    $ echo $?
    3   # EXIT_DENIED -- the endpoint rejected the credentials
"""

EXIT_SUCCESS = 0
"""The command completed successfully (for ``verify``: credentials accepted)."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred, including configuration problems."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_DENIED = 3
"""The remote endpoint was consulted and the policy rejected the credentials."""

EXIT_TRANSPORT_ERROR = 6
"""The verification request could not be completed (timeout, DNS, TLS, refused)."""

EXIT_NOT_APPLICABLE = 8
"""This mechanism declined the attempt (incomplete config or username not matched)."""
