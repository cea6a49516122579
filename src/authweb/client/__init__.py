"""HTTP transport for authweb.

Provides the :class:`Transport` interface the verification engine calls and
its default implementation, :class:`HttpxTransport`, which wraps
:mod:`httpx`.

Example::

    from authweb.client import HttpxTransport

    transport = HttpxTransport(profile.request)
    verdict = verify_credentials(profile.verification, credentials, transport=transport)
"""

from authweb.client.transport import HttpxTransport, Transport, TransportOutcome

__all__ = ["HttpxTransport", "Transport", "TransportOutcome"]
