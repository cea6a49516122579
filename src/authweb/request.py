"""Request builder -- turns a config and a credential pair into a POST request.

The outgoing request is a plain descriptor (:class:`VerificationRequest`);
sending it is the job of a :class:`~authweb.client.transport.Transport`.
The body has the form::

    <username_param>=<encoded username>&<password_param>=<encoded password>

Field names are inserted as configured; only the values are encoded with
:func:`~authweb.encoding.urlencode`.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from authweb import __version__
from authweb.encoding import escaped_length, urlencode
from authweb.exceptions import ConfigError
from authweb.models import Credentials, VerificationConfig

USER_AGENT = f"authweb/{__version__}"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


@dataclass(frozen=True)
class VerificationRequest:
    """An outgoing verification request, scoped to one attempt.

    Attributes:
        url: Target URL, taken from the config unmodified.
        body: The form-urlencoded POST body.
        headers: Request headers (``User-Agent`` and ``Content-Type``).
        method: Always ``"POST"``.
        password_param: Name of the password field, used for redaction.
    """

    url: str
    body: str
    headers: dict[str, str] = field(default_factory=dict)
    method: str = "POST"
    password_param: str = ""

    def redacted_body(self) -> str:
        """Return the body with the password value masked, for logging."""
        prefix = f"&{self.password_param}="
        idx = self.body.rfind(prefix)
        if not self.password_param or idx < 0:
            return self.body
        return self.body[: idx + len(prefix)] + "***"


def expected_body_length(config: VerificationConfig, credentials: Credentials) -> int:
    """Length of the body :func:`build_request` produces for these inputs.

    ``len(uparam) + 1 + len(enc_user) + 1 + len(pparam) + 1 + len(enc_pass)``
    """
    return (
        len(config.username_param or "")
        + 1
        + escaped_length(credentials.username)
        + 1
        + len(config.password_param or "")
        + 1
        + escaped_length(credentials.password.get_secret_value())
    )


def build_request(config: VerificationConfig, credentials: Credentials) -> VerificationRequest:
    """Assemble the POST request that submits *credentials* to the endpoint.

    Args:
        config: A complete verification config.
        credentials: The username/password pair being checked.

    Returns:
        A :class:`VerificationRequest` ready to hand to a transport.

    Raises:
        ConfigError: If *config* is incomplete. Callers are expected to
            check :meth:`~authweb.models.VerificationConfig.missing_fields`
            first and decline instead.
    """
    problems = config.missing_fields()
    if problems:
        raise ConfigError(f"Incomplete verification config: {'; '.join(problems)}")
    assert config.url and config.username_param and config.password_param

    encoded_user = urlencode(credentials.username)
    encoded_pass = urlencode(credentials.password.get_secret_value())
    body = (
        f"{config.username_param}={encoded_user}"
        f"&{config.password_param}={encoded_pass}"
    )
    return VerificationRequest(
        url=config.url,
        body=body,
        headers={
            "User-Agent": USER_AGENT,
            "Content-Type": FORM_CONTENT_TYPE,
        },
        password_param=config.password_param,
    )
