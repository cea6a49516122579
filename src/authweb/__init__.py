"""authweb -- verify username/password pairs against a remote HTTP endpoint.

The package POSTs a credential pair to a configured login URL and turns the
endpoint's response into an authentication verdict. Two independent rules
decide the outcome: a *failure string* that must not appear in the response
body, and a set of *required header lines* that must all appear among the
response headers.

Typical usage::

    from authweb import Credentials, VerificationConfig, verify_credentials

    config = VerificationConfig(
        url="https://intranet.example.com/login",
        username_param="user",
        password_param="pass",
        failed_string="Invalid login",
    )
    verdict = verify_credentials(config, Credentials(username="bob", password="s3cret"))
    if verdict.is_allowed:
        ...

Modules:
    encoding: form-urlencoded percent-encoding of credential values.
    request: builds the outgoing POST request descriptor.
    collector: accumulates header lines and body chunks during transfer.
    policy: evaluates the collected response against the configured rules.
    verify: the :func:`verify_credentials` entry point.
    identity: maps an authenticated user onto a local system identity.
    config: XDG-aware profile and global configuration management.
    app: Typer CLI entry point.
"""

__version__ = "1.1.2"

from authweb.models import (  # noqa: E402
    Credentials,
    Profile,
    RequestConfig,
    VerificationConfig,
    Verdict,
    VerdictKind,
)
from authweb.verify import verify_credentials, verify_profile  # noqa: E402

__all__ = [
    "Credentials",
    "Profile",
    "RequestConfig",
    "VerificationConfig",
    "Verdict",
    "VerdictKind",
    "verify_credentials",
    "verify_profile",
    "__version__",
]
