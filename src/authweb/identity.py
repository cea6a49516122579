"""Local identity mapping for authenticated remote users.

Servers that run sessions as local accounts need a passwd-style record for
a user that only exists at the remote endpoint. :func:`resolve_identity`
builds one from the passwd entry of the configured ``local_user``, with the
name swapped for the authenticated username, so every web-authenticated
user shares that account's uid, gid, home and shell.

The same applicability rules as :func:`~authweb.verify.verify_credentials`
apply: an incomplete config or a username rejected by ``user_regex`` is
declined with ``None``.
"""

from __future__ import annotations

import pwd
from typing import Optional

from authweb.exceptions import ConfigError
from authweb.models import LocalIdentity, VerificationConfig
from authweb.output import debug


def resolve_identity(config: VerificationConfig, username: str) -> Optional[LocalIdentity]:
    """Return the local identity for *username*, or ``None`` to decline.

    Raises:
        ConfigError: If ``local_user`` names an account that does not exist.
    """
    if not config.local_user or not config.is_complete():
        return None
    if not config.user_matches(username):
        debug("user doesn't match regex")
        return None

    try:
        entry = pwd.getpwnam(config.local_user)
    except KeyError as exc:
        raise ConfigError(f"Local user '{config.local_user}' does not exist") from exc

    return LocalIdentity(
        name=username,
        uid=entry.pw_uid,
        gid=entry.pw_gid,
        gecos=entry.pw_gecos,
        home=entry.pw_dir,
        shell=entry.pw_shell,
    )
