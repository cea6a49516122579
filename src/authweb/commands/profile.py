"""Profile commands -- create, inspect, and remove verification profiles.

Provides the ``authweb profile`` sub-command group. A profile bundles the
endpoint URL, form field names, the deny rules (failure string, required
headers), the optional username pattern and local user, and the transport
settings for one verification context.

Typical workflow::

    authweb profile create intranet --url https://intranet/login \\
        --username-param user --password-param pass \\
        --failed-string "Invalid login"
    authweb profile check intranet
    authweb verify bob -p intranet
"""

from __future__ import annotations

from typing import Optional

import typer

from authweb.output import error, format_response, print_table, success, suggest, warning


profile_app = typer.Typer(no_args_is_help=True)


@profile_app.command("create")
def profile_create(
    name: str = typer.Argument(help="Profile name."),
    url: str = typer.Option(..., "--url", help="Login endpoint to POST credentials to."),
    username_param: str = typer.Option(
        ..., "--username-param", help="Form field carrying the username."
    ),
    password_param: str = typer.Option(
        ..., "--password-param", help="Form field carrying the password."
    ),
    failed_string: Optional[str] = typer.Option(
        None, "--failed-string", help="Body text that marks a failed login."
    ),
    require_header: Optional[list[str]] = typer.Option(
        None, "--require-header", help="Header line that must appear (repeatable)."
    ),
    user_regex: Optional[str] = typer.Option(
        None, "--user-regex", help="Only handle usernames matching this pattern."
    ),
    local_user: Optional[str] = typer.Option(
        None, "--local-user", help="Local account that authenticated users map to."
    ),
    timeout: float = typer.Option(30.0, "--timeout", help="Request timeout in seconds."),
    no_verify_ssl: bool = typer.Option(
        False, "--no-verify-ssl", help="Skip TLS certificate verification."
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing profile."),
) -> None:
    """Create a verification profile.

    Example::

        authweb profile create intranet --url https://intranet/login \\
            --username-param user --password-param pass \\
            --require-header "X-Auth-Result: ok"
    """
    from authweb.config import profile_exists, save_profile
    from authweb.models import Profile, RequestConfig, VerificationConfig

    if profile_exists(name) and not force:
        error(f"Profile '{name}' already exists (use --force to overwrite)")
        raise typer.Exit(code=2)

    try:
        verification = VerificationConfig(
            url=url,
            username_param=username_param,
            password_param=password_param,
            failed_string=failed_string,
            required_headers=list(require_header or []),
            user_regex=user_regex,
            local_user=local_user,
        )
    except ValueError as exc:
        error(f"Invalid profile: {exc}")
        raise typer.Exit(code=2) from None

    profile = Profile(
        name=name,
        verification=verification,
        request=RequestConfig(timeout=timeout, verify_ssl=not no_verify_ssl),
    )
    save_profile(profile)
    success(f"Profile '{name}' saved.")
    for problem in verification.missing_fields():
        warning(f"Profile will decline every attempt: {problem}")
    suggest(f"authweb verify <username> --profile {name}")


@profile_app.command("list")
def profile_list() -> None:
    """List all profiles."""
    from authweb.config import list_profiles, load_profile

    rows: list[list[str]] = []
    for name in list_profiles():
        profile = load_profile(name)
        rows.append([name, profile.verification.url or ""])
    print_table(["name", "url"], rows, title="Profiles")


@profile_app.command("show")
def profile_show(name: str = typer.Argument(help="Profile name.")) -> None:
    """Show a profile's settings."""
    from authweb.config import load_profile

    format_response(load_profile(name).model_dump(mode="json"))


@profile_app.command("check")
def profile_check(name: str = typer.Argument(help="Profile name.")) -> None:
    """Report whether a profile is complete enough to verify credentials.

    Exits with code 1 when the profile would decline every attempt.
    """
    from authweb.config import load_profile

    problems = load_profile(name).verification.missing_fields()
    if problems:
        for problem in problems:
            error(problem)
        raise typer.Exit(code=1)
    success(f"Profile '{name}' is complete.")


@profile_app.command("delete")
def profile_delete(
    name: str = typer.Argument(help="Profile name."),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Delete a profile."""
    from authweb.config import delete_profile

    if not force and not typer.confirm(f"Delete profile '{name}'?"):
        raise typer.Exit()
    delete_profile(name)
    success(f"Profile '{name}' deleted.")
