"""Abstract base class for authentication mechanisms.

A host that supports several ways of authenticating a user (local password
file, LDAP, a web endpoint, ...) consults them in order. Each mechanism is
an :class:`Authenticator` that returns a :class:`~authweb.models.Verdict`;
``ALLOW`` and ``DENY`` are final, while ``ERROR`` and ``NOT_APPLICABLE``
let the next mechanism try.

See Also:
    :mod:`authweb.auth.chain` for ordering and dispatch.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from authweb.models import Credentials, Verdict


class Authenticator(ABC):
    """Abstract base class for authentication mechanisms.

    Every concrete mechanism must provide:

    1. A :attr:`name` property returning a unique identifier, used in logs
       and reported as the mechanism that decided an attempt.
    2. A :meth:`verify` implementation that checks one credential pair.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the unique mechanism identifier (e.g. ``"web"``)."""
        ...

    @abstractmethod
    def verify(self, credentials: Credentials) -> Verdict:
        """Check *credentials* and return a verdict.

        Implementations must not raise for ordinary outcomes: return
        ``DENY`` for rejected credentials and ``ERROR`` or
        ``NOT_APPLICABLE`` when the mechanism cannot decide.
        """
        ...
