"""Verify command -- check one credential pair against the active profile.

Prints the verdict record to stdout and exits with a status that wrapper
scripts can act on:

=====================  ====
verdict                exit
=====================  ====
``allow``              0
``deny``               3
``error``              6
``not_applicable``     8
=====================  ====
"""

from __future__ import annotations

from typing import Any

import typer

from authweb.exit_codes import (
    EXIT_DENIED,
    EXIT_NOT_APPLICABLE,
    EXIT_SUCCESS,
    EXIT_TRANSPORT_ERROR,
)
from authweb.models import VerdictKind
from authweb.output import format_response

VERDICT_EXIT_CODES = {
    VerdictKind.ALLOW: EXIT_SUCCESS,
    VerdictKind.DENY: EXIT_DENIED,
    VerdictKind.ERROR: EXIT_TRANSPORT_ERROR,
    VerdictKind.NOT_APPLICABLE: EXIT_NOT_APPLICABLE,
}


def verify_command(
    ctx: typer.Context,
    username: str = typer.Argument(help="Username to verify."),
    password_source: str = typer.Option(
        "prompt",
        "--password-source",
        "-s",
        help="Where to read the password: prompt, env:VAR, or file:/path.",
    ),
) -> None:
    """Verify a username/password pair against the profile's endpoint.

    Example::

        authweb verify bob --profile intranet
        BOB_PW=secret authweb --json verify bob -s env:BOB_PW
    """
    from authweb.config import resolve_credential, resolve_profile
    from authweb.identity import resolve_identity
    from authweb.models import Credentials
    from authweb.verify import verify_profile

    profile = resolve_profile(ctx.obj.get("profile") if ctx.obj else None)
    password = resolve_credential(password_source)
    credentials = Credentials(username=username, password=password)

    verdict = verify_profile(profile, credentials)

    record: dict[str, Any] = {
        "profile": profile.name,
        "username": username,
        **verdict.model_dump(mode="json"),
    }
    if verdict.is_allowed:
        identity = resolve_identity(profile.verification, username)
        if identity is not None:
            record["identity"] = identity.model_dump(mode="json")
    format_response(record)

    code = VERDICT_EXIT_CODES[verdict.kind]
    if code != EXIT_SUCCESS:
        raise typer.Exit(code=code)
