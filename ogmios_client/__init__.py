"""
ogmios-client: Ogmios local transaction submission over JSON-WSP.

Public API:

    Client:
        - ``OgmiosClient``: evaluate_tx / submit_tx against one endpoint.
        - ``LocalTxSubmission``: protocol the client implements.

    Envelope codec (pure, no I/O):
        - ``build_evaluate_request()``, ``build_submit_request()``
        - ``encode()``, ``decode()``, ``decode_request()``, ``encode_response()``
        - ``AdditionalUTxO``, ``RequestEnvelope``, ``ResponseEnvelope``,
          ``Fault``, ``EvaluationResult``, ``SubmitSuccess``

    Transport:
        - ``call()``: one request/reply exchange.
        - ``Endpoint``, ``MessageTransport``, ``WebsocketsTransport``

    Errors:
        - ``OgmiosError`` and its subclasses. Node faults are values,
          not errors.
"""

__version__ = "0.1.0"

from ogmios_client.client import LocalTxSubmission, OgmiosClient
from ogmios_client.envelope import (
    EVALUATE_TX,
    PROTOCOL_VERSION,
    REQUEST_TYPE,
    RESPONSE_TYPE,
    SERVICE_NAME,
    SUBMIT_TX,
    AdditionalUTxO,
    EvaluateArgs,
    EvaluationResult,
    Fault,
    RequestEnvelope,
    ResponseEnvelope,
    SubmitArgs,
    SubmitSuccess,
    build_evaluate_request,
    build_submit_request,
    decode,
    decode_request,
    encode,
    encode_response,
)
from ogmios_client.errors import (
    DecodingError,
    EncodingError,
    OgmiosConnectionError,
    OgmiosError,
    ReceiveError,
    SendError,
)
from ogmios_client.transport import Endpoint, MessageTransport, WebsocketsTransport, call

__all__ = [
    "EVALUATE_TX",
    "PROTOCOL_VERSION",
    "REQUEST_TYPE",
    "RESPONSE_TYPE",
    "SERVICE_NAME",
    "SUBMIT_TX",
    "AdditionalUTxO",
    "DecodingError",
    "EncodingError",
    "Endpoint",
    "EvaluateArgs",
    "EvaluationResult",
    "Fault",
    "LocalTxSubmission",
    "MessageTransport",
    "OgmiosClient",
    "OgmiosConnectionError",
    "OgmiosError",
    "ReceiveError",
    "RequestEnvelope",
    "ResponseEnvelope",
    "SendError",
    "SubmitArgs",
    "SubmitSuccess",
    "WebsocketsTransport",
    "build_evaluate_request",
    "build_submit_request",
    "call",
    "decode",
    "decode_request",
    "encode",
    "encode_response",
]
