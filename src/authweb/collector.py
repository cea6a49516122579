"""Response collector -- accumulates a response as the transport delivers it.

A transport does not hand back the response in one piece; it calls
:meth:`ResponseCollector.append_header_line` once per received header line
(including the status line and the blank line that ends the header block)
and :meth:`ResponseCollector.append_body_chunk` once per body chunk, in
arrival order, on the attempt's own thread. When the transfer ends the
collector is closed and yields an immutable :class:`ResponseState` for the
policy evaluator.

A collector belongs to exactly one attempt and is never shared.
"""

from __future__ import annotations

from dataclasses import dataclass

from authweb.exceptions import CollectorClosedError
from authweb.output import debug

_LINE_ENDINGS = ("\r", "\n")


@dataclass(frozen=True)
class ResponseState:
    """The complete, read-only response of one attempt.

    Attributes:
        body: All body bytes, concatenated in arrival order.
        headers: Received header lines with trailing CR/LF removed, in
            arrival order, duplicates preserved.
    """

    body: bytes = b""
    headers: tuple[str, ...] = ()

    @property
    def text(self) -> str:
        """The body decoded as UTF-8 (undecodable bytes replaced)."""
        return self.body.decode("utf-8", errors="replace")


def trim_line_ending(line: str) -> str:
    """Strip at most two trailing ``\\r``/``\\n`` characters from *line*.

    The last character is checked, then the new last character; nothing
    else is touched, and an empty or all-control line never underflows.
    """
    for _ in range(2):
        if line and line[-1] in _LINE_ENDINGS:
            line = line[:-1]
    return line


def _decode_header(chunk: bytes) -> str:
    try:
        return chunk.decode("utf-8")
    except UnicodeDecodeError:
        return chunk.decode("iso-8859-1")


class ResponseCollector:
    """Append-only accumulator for the headers and body of one response.

    Example::

        collector = ResponseCollector()
        collector.append_header_line(b"X-Auth: ok\\r\\n")
        collector.append_body_chunk(b"Welcome")
        state = collector.close()
        assert state.headers == ("X-Auth: ok",)
    """

    def __init__(self) -> None:
        self._body = bytearray()
        self._headers: list[str] = []
        self._state: ResponseState | None = None

    @property
    def closed(self) -> bool:
        return self._state is not None

    def append_header_line(self, chunk: bytes | str) -> None:
        """Record one header line as delivered by the transport.

        Args:
            chunk: The raw line, usually terminated by ``\\r\\n``. A chunk
                without a terminator is stored unchanged; an empty chunk is
                ignored.

        Raises:
            CollectorClosedError: If the collector was already closed.
        """
        self._check_open()
        if not chunk:
            return
        line = chunk if isinstance(chunk, str) else _decode_header(chunk)
        line = trim_line_ending(line)
        debug(f"received response header: {line}")
        self._headers.append(line)

    def append_body_chunk(self, chunk: bytes) -> None:
        """Append *chunk* to the body exactly as received.

        Raises:
            CollectorClosedError: If the collector was already closed.
        """
        self._check_open()
        if not chunk:
            return
        self._body.extend(chunk)

    def close(self) -> ResponseState:
        """Finish the transfer and return the frozen response.

        Closing twice returns the same state.
        """
        if self._state is None:
            self._state = ResponseState(body=bytes(self._body), headers=tuple(self._headers))
        return self._state

    def _check_open(self) -> None:
        if self._state is not None:
            raise CollectorClosedError("Response collector is closed; the transfer already completed")
