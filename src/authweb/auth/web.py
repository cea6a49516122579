"""Web endpoint authentication mechanism."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from authweb.auth.base import Authenticator
from authweb.models import Credentials, Profile, Verdict
from authweb.verify import verify_profile

if TYPE_CHECKING:
    from authweb.client.transport import Transport


class WebAuthenticator(Authenticator):
    """Authenticate by POSTing the credentials to the profile's endpoint.

    Args:
        profile: The verification profile to use.
        transport: Optional transport override (defaults to one built from
            ``profile.request``).
    """

    def __init__(self, profile: Profile, transport: Optional[Transport] = None) -> None:
        self._profile = profile
        self._transport = transport

    @property
    def name(self) -> str:
        return f"web:{self._profile.name}"

    def verify(self, credentials: Credentials) -> Verdict:
        return verify_profile(self._profile, credentials, transport=self._transport)
