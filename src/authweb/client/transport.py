"""Transport invoker -- sends the verification request exactly once.

A :class:`Transport` performs one HTTP exchange and streams what it
receives into a :class:`~authweb.collector.ResponseCollector`: header lines
first (status line, each header line, the blank terminator), then body
chunks, always in arrival order. It reports a single
:class:`TransportOutcome`. A failed outcome means "the request could not be
completed", which is distinct from "the request completed and the response
says the login failed"; the latter is still a transport success.

Transports never retry.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, Optional

import httpx

from authweb.collector import ResponseCollector
from authweb.models import RequestConfig
from authweb.output import debug
from authweb.request import VerificationRequest


@dataclass(frozen=True)
class TransportOutcome:
    """Result of one transport call.

    Attributes:
        ok: ``True`` when a complete HTTP response was received, whatever
            its status code.
        error: Diagnostic message for a failed call, otherwise ``None``.
        status_code: HTTP status of a completed exchange.
    """

    ok: bool
    error: Optional[str] = None
    status_code: Optional[int] = None

    @classmethod
    def success(cls, status_code: Optional[int] = None) -> TransportOutcome:
        return cls(ok=True, status_code=status_code)

    @classmethod
    def failure(cls, message: str) -> TransportOutcome:
        return cls(ok=False, error=message)


class Transport(ABC):
    """Abstract HTTP capability used by :func:`~authweb.verify.verify_credentials`.

    Implementations report failures by returning
    :meth:`TransportOutcome.failure`; raising
    :class:`~authweb.exceptions.TransportError` is treated the same way.
    """

    @abstractmethod
    def perform(
        self, request: VerificationRequest, collector: ResponseCollector
    ) -> TransportOutcome:
        """Send *request* once, feeding *collector* as data arrives.

        Args:
            request: The request to send.
            collector: The attempt's collector. The transport must not
                close it.

        Returns:
            The outcome of the exchange.
        """
        ...


class HttpxTransport(Transport):
    """Blocking transport backed by :class:`httpx.Client`.

    A fresh client is opened for every call so that concurrent attempts
    share nothing. The response is streamed: header lines are replayed
    from the raw header list (original casing, duplicates kept) and body
    chunks from :meth:`httpx.Response.iter_bytes`.

    Args:
        config: Timeout, SSL verification and redirect settings.
        transport: Optional :class:`httpx.BaseTransport` override, e.g. an
            :class:`httpx.MockTransport` in tests.

    Example::

        transport = HttpxTransport(RequestConfig(timeout=10))
        outcome = transport.perform(request, collector)
    """

    def __init__(
        self,
        config: Optional[RequestConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config or RequestConfig()
        self._transport = transport

    def perform(
        self, request: VerificationRequest, collector: ResponseCollector
    ) -> TransportOutcome:
        try:
            with httpx.Client(
                timeout=self._config.timeout,
                verify=self._config.verify_ssl,
                follow_redirects=self._config.follow_redirects,
                transport=self._transport,
            ) as client:
                with client.stream(
                    request.method,
                    request.url,
                    headers=request.headers,
                    content=request.body.encode("utf-8", "surrogateescape"),
                ) as response:
                    for line in _header_lines(response):
                        collector.append_header_line(line)
                    for chunk in response.iter_bytes():
                        collector.append_body_chunk(chunk)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            return TransportOutcome.failure(str(exc) or type(exc).__name__)

        debug(f"URL call returned HTTP {response.status_code}")
        return TransportOutcome.success(response.status_code)


def _header_lines(response: httpx.Response) -> Iterator[bytes]:
    """Yield the response head as CRLF-terminated lines, status line first."""
    reason = response.reason_phrase
    status = f"{response.http_version} {response.status_code}"
    yield (f"{status} {reason}" if reason else status).encode("ascii") + b"\r\n"
    for name, value in response.headers.raw:
        yield name + b": " + value + b"\r\n"
    yield b"\r\n"
