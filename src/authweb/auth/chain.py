"""Authentication chain -- ordered dispatch across mechanisms.

The :class:`AuthChain` holds an ordered list of
:class:`~authweb.auth.base.Authenticator` instances and asks each in turn
until one gives a final answer. It is the host-side counterpart of the
verdict kinds:

* ``ALLOW`` -- stop; the user is authenticated by that mechanism.
* ``DENY`` -- stop; reject with bad-credentials semantics.
* ``ERROR`` / ``NOT_APPLICABLE`` -- fall through to the next mechanism.

Whatever the internal outcome, clients only ever see
:attr:`ChainResult.public_message`; verdict reasons stay in the logs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from authweb.auth.base import Authenticator
from authweb.exceptions import ConfigError
from authweb.models import Credentials, Verdict, VerdictKind

logger = logging.getLogger(__name__)

DECLINED_MESSAGE = "authentication declined"
NO_MECHANISM_REASON = "no mechanism accepted the attempt"


@dataclass(frozen=True)
class ChainResult:
    """Final outcome of running an :class:`AuthChain`.

    Attributes:
        verdict: The deciding verdict, or a ``NOT_APPLICABLE`` verdict when
            every mechanism deferred.
        mechanism: Name of the deciding mechanism, ``None`` if none decided.
    """

    verdict: Verdict
    mechanism: Optional[str] = None

    @property
    def authenticated(self) -> bool:
        return self.verdict.is_allowed

    @property
    def public_message(self) -> str:
        """The message safe to return to the remote client."""
        return "authenticated" if self.authenticated else DECLINED_MESSAGE


class AuthChain:
    """Ordered registry of authentication mechanisms.

    Example::

        chain = AuthChain()
        chain.register(WebAuthenticator(profile))
        result = chain.authenticate(Credentials(username="bob", password="pw"))
        if result.authenticated:
            ...
    """

    def __init__(self) -> None:
        self._mechanisms: list[Authenticator] = []

    def register(self, mechanism: Authenticator) -> None:
        """Append *mechanism* to the end of the chain.

        Raises:
            ConfigError: If a mechanism with the same name is already registered.
        """
        if mechanism.name in self.names():
            raise ConfigError(f"Mechanism '{mechanism.name}' is already registered")
        self._mechanisms.append(mechanism)

    def names(self) -> list[str]:
        """Return mechanism names in consultation order."""
        return [m.name for m in self._mechanisms]

    def authenticate(self, credentials: Credentials) -> ChainResult:
        """Consult each mechanism in order until one allows or denies."""
        for mechanism in self._mechanisms:
            verdict = mechanism.verify(credentials)
            if not verdict.should_defer:
                return ChainResult(verdict=verdict, mechanism=mechanism.name)
            if verdict.kind is VerdictKind.ERROR:
                logger.warning("Mechanism %s failed: %s", mechanism.name, verdict.reason)
            else:
                logger.debug("Mechanism %s declined: %s", mechanism.name, verdict.reason)
        return ChainResult(verdict=Verdict.not_applicable(NO_MECHANISM_REASON))
