"""
Transport for Ogmios calls: one WebSocket connection per request.

Defines the seam where the concrete WebSocket implementation plugs in.
``call()`` depends on the ``MessageTransport`` protocol, not on the
websockets library directly, so tests can swap in a fake without
touching the codec or client.

Concrete implementations:
    - WebsocketsTransport (default, uses websockets' asyncio client)
    - FakeTransport (tests, returns canned frames)

Exchange lifecycle (per call):
    connect -> send one text frame -> receive one frame -> close

No pooling, no retries, no timeout beyond the library's own open
timeout. A failed exchange is reported, never replayed: resubmitting a
transaction is the caller's decision.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from websockets.asyncio.client import connect
from websockets.exceptions import ConnectionClosed, InvalidHandshake, InvalidURI

from ogmios_client.envelope import R, ResponseEnvelope, decode
from ogmios_client.errors import OgmiosConnectionError, ReceiveError, SendError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Endpoint:
    """Host and port of the node's WebSocket service."""

    host: str
    port: str | int

    @property
    def url(self) -> str:
        return f"ws://{self.host}:{self.port}"


@runtime_checkable
class MessageTransport(Protocol):
    """Async transport for a single request/reply exchange."""

    async def exchange(self, url: str, frame: str) -> str | bytes:
        """Open a connection, send ``frame``, return the first reply frame.

        The connection must be closed before this returns or raises.

        Raises:
            OgmiosConnectionError: The connection could not be opened.
            SendError: The frame could not be written.
            ReceiveError: No reply could be read.
        """
        ...


class WebsocketsTransport:
    """Default transport using ``websockets.asyncio.client.connect``.

    Args:
        open_timeout: Seconds allowed for the opening handshake. None keeps
            the library default.
        max_size: Largest accepted reply frame in bytes. None keeps the
            library default.
    """

    def __init__(
        self,
        open_timeout: float | None = None,
        max_size: int | None = None,
    ) -> None:
        self._options: dict[str, Any] = {}
        if open_timeout is not None:
            self._options["open_timeout"] = open_timeout
        if max_size is not None:
            self._options["max_size"] = max_size

    async def exchange(self, url: str, frame: str) -> str | bytes:
        logger.debug("Connecting to %s", url)
        try:
            websocket = await connect(url, **self._options)
        except (InvalidURI, InvalidHandshake, OSError, TimeoutError, ValueError) as exc:
            # ValueError: port that urllib cannot cast to int
            logger.warning("Connection to %s failed: %s", url, exc)
            raise OgmiosConnectionError(f"cannot connect to {url}: {exc}") from exc

        async with websocket:
            try:
                await websocket.send(frame)
            except ConnectionClosed as exc:
                logger.warning("Send to %s failed: %s", url, exc)
                raise SendError(f"cannot send request to {url}: {exc}") from exc
            logger.debug("Sent %d chars to %s", len(frame), url)

            try:
                reply = await websocket.recv()
            except ConnectionClosed as exc:
                logger.warning("No reply from %s: %s", url, exc)
                raise ReceiveError(f"connection to {url} closed before a reply: {exc}") from exc
            logger.debug("Received %d chars from %s", len(reply), url)
            return reply


async def call(
    endpoint: Endpoint,
    request: bytes,
    result_type: type[R],
    *,
    transport: MessageTransport | None = None,
) -> ResponseEnvelope[R]:
    """Perform one request/response exchange and decode the reply.

    Args:
        endpoint: Where to connect.
        request: Encoded request envelope (UTF-8 JSON).
        result_type: Expected result class for the method being called.
        transport: Injectable transport. Defaults to WebsocketsTransport.

    Raises:
        OgmiosConnectionError, SendError, ReceiveError: Transport failures.
        DecodingError: The reply is not a valid response envelope.
    """
    transport = transport or WebsocketsTransport()
    reply = await transport.exchange(endpoint.url, request.decode("utf-8"))
    return decode(reply, result_type)
