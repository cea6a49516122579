"""Verification entry point.

:func:`verify_credentials` runs one attempt end to end::

    applicability check -> build request -> transport (feeds collector)
                        -> close collector -> policy -> Verdict

Every outcome is returned as a :class:`~authweb.models.Verdict`; nothing
escapes as an exception for an ordinary authentication result:

* incomplete config or a username the pattern rejects -> ``NOT_APPLICABLE``
  (no request is sent);
* the request could not be completed -> ``ERROR``;
* the policy rejected the response -> ``DENY``;
* running out of memory while building or collecting -> ``NOT_APPLICABLE``.

Reasons are logged through :mod:`authweb.output` and are meant for
operators, not for the remote client.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from authweb.collector import ResponseCollector
from authweb.exceptions import TransportError
from authweb.models import Credentials, Profile, VerificationConfig, Verdict
from authweb.output import debug, error
from authweb.policy import evaluate
from authweb.request import build_request

if TYPE_CHECKING:
    from authweb.client.transport import Transport

USER_NOT_MATCHED_REASON = "username does not match pattern"
ALLOCATION_FAILURE_REASON = "allocation failure"


def check_applicable(config: VerificationConfig, username: str) -> Optional[Verdict]:
    """Decide whether this mechanism handles *username* at all.

    Returns:
        A ``NOT_APPLICABLE`` verdict when the config is incomplete or the
        username does not match ``user_regex``, otherwise ``None``.
    """
    problems = config.missing_fields()
    if problems:
        reason = f"incomplete config: {'; '.join(problems)}"
        debug(reason)
        return Verdict.not_applicable(reason)
    if not config.user_matches(username):
        debug("user doesn't match regex")
        return Verdict.not_applicable(USER_NOT_MATCHED_REASON)
    return None


def verify_credentials(
    config: VerificationConfig,
    credentials: Credentials,
    transport: Optional[Transport] = None,
) -> Verdict:
    """Check *credentials* against the remote endpoint described by *config*.

    Args:
        config: Read-only verification settings; may be shared between
            concurrent attempts.
        credentials: The username/password pair of this attempt.
        transport: The HTTP capability to use. Defaults to an
            :class:`~authweb.client.transport.HttpxTransport` with default
            request settings.

    Returns:
        The attempt's verdict.
    """
    declined = check_applicable(config, credentials.username)
    if declined is not None:
        return declined

    if transport is None:
        from authweb.client.transport import HttpxTransport

        transport = HttpxTransport()

    try:
        request = build_request(config, credentials)
        debug(f"calling URL {request.url} with POST data {request.redacted_body()}")

        collector = ResponseCollector()
        try:
            outcome = transport.perform(request, collector)
        except TransportError as exc:
            error(f"URL call failed: {exc}")
            return Verdict.error(str(exc))
        if not outcome.ok:
            error(f"URL call failed: {outcome.error}")
            return Verdict.error(outcome.error or "transport failure")
        debug("URL call succeeded")

        verdict = evaluate(collector.close(), config)
    except MemoryError:
        debug(ALLOCATION_FAILURE_REASON)
        return Verdict.not_applicable(ALLOCATION_FAILURE_REASON)

    if verdict.is_denied:
        debug(f"denied: {verdict.reason}")
    return verdict


def verify_profile(
    profile: Profile,
    credentials: Credentials,
    transport: Optional[Transport] = None,
) -> Verdict:
    """Run :func:`verify_credentials` with a profile's config and request settings."""
    if transport is None:
        from authweb.client.transport import HttpxTransport

        transport = HttpxTransport(profile.request)
    return verify_credentials(profile.verification, credentials, transport=transport)
