"""
Error taxonomy for the Ogmios client.

Only failures to *get an answer* are raised: the connection could not be
opened, a frame could not be written or read, or the bytes that came back
are not a valid response envelope. A node-side rejection is not an error;
it arrives as a decoded ``Fault`` inside the response envelope.

Codes:
    - CONNECTION_FAILED: address resolution, refusal, bad URI, handshake
    - SEND_FAILED: writing the request frame failed
    - RECEIVE_FAILED: reading the reply failed or the peer closed first
    - DECODING_FAILED: reply is not JSON or not a response envelope
    - ENCODING_FAILED: request could not be serialized
"""

from __future__ import annotations


class OgmiosError(RuntimeError):
    """Base class for every error raised by this package."""

    code = "OGMIOS_ERROR"


class OgmiosConnectionError(OgmiosError, ConnectionError):
    """The WebSocket connection could not be established.

    Also a built-in ``ConnectionError`` so generic handlers still match.
    """

    code = "CONNECTION_FAILED"


class SendError(OgmiosError):
    """The request frame could not be written."""

    code = "SEND_FAILED"


class ReceiveError(OgmiosError):
    """No reply frame could be read."""

    code = "RECEIVE_FAILED"


class DecodingError(OgmiosError):
    """Received bytes are not a well-formed envelope.

    Attributes:
        detail: Validator message when the JSON parsed but its shape did
            not match. None for plain syntax errors.
    """

    code = "DECODING_FAILED"

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.detail = detail


class EncodingError(OgmiosError):
    code = "ENCODING_FAILED"
