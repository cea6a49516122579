"""Policy evaluator -- turns a collected response into a verdict.

Two independent rules are applied, in this order, and both must pass for
the attempt to be allowed:

1. **Failure string.** If a ``failed_string`` is configured and occurs in
   the response body (exact, case-sensitive), the attempt is denied. This
   is the cheap, common case (a "login failed" page) and short-circuits
   the header scan.
2. **Required headers.** Every configured header line must appear verbatim
   (full-line, case-sensitive) among the received header lines; the first
   one missing denies the attempt.

A rule that is not configured never denies.
"""

from __future__ import annotations

from authweb.collector import ResponseState
from authweb.models import VerificationConfig, Verdict
from authweb.output import debug

FAILED_STRING_REASON = "failure string matched"


def _as_bytes(text: str) -> bytes:
    return text.encode("utf-8", "surrogateescape")


def evaluate(state: ResponseState, config: VerificationConfig) -> Verdict:
    """Apply the failure-string and required-header rules to *state*.

    Args:
        state: The completed response of the attempt.
        config: The verification config whose rules are applied.

    Returns:
        ``DENY`` naming the first rule that rejected the response, or
        ``ALLOW``.
    """
    if config.failed_string is not None and _as_bytes(config.failed_string) in state.body:
        debug(f"found failed string '{config.failed_string}' in response")
        return Verdict.deny(FAILED_STRING_REASON)

    received = state.headers
    for required in config.required_headers:
        debug(f"checking for header '{required}' in response")
        if required not in received:
            debug(f"couldn't find header '{required}' in response")
            return Verdict.deny(f"required header missing: {required}")

    return Verdict.allow()
