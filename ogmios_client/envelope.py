"""
JSON-WSP envelope codec for the Ogmios local transaction submission protocol.

Request shapes:
    {
      "type":        "jsonwsp/request",
      "version":     "1.0",
      "servicename": "ogmios",
      "methodname":  "EvaluateTx" | "SubmitTx",
      "args":        {...},          // shape implied by methodname
      "mirror":      <any>           // optional, echoed back as "reflection"
    }

    EvaluateTx args: {"evaluate": "<hex>", "additionalUtxoSet": [{"transaction_id": "<hex>", "index": 0}]}
    SubmitTx args:   {"submit": "<hex>"}

Response shape:
    {
      "type":        "jsonwsp/response",
      "version":     "1.0",
      "servicename": "ogmios",
      "methodname":  "<name>",       // may be absent on faults
      "result":      <T>,            // present on success
      "fault":       {"code": "...", "string": "..."},
      "reflection":  <any>
    }

Rules:
    - The args payload carries no discriminator. Internally it is one
      dataclass per method; each emits only its own fields.
    - result and fault are independent optionals. Either, neither or both
      may be present; the decoder does not enforce exclusivity.
    - The result type is chosen by the caller (who knows which method was
      called), never sniffed from content.
    - JSON null is treated as absent for methodname, result and fault.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Generic, Iterable, Protocol, TypeVar, Union

from ogmios_client.errors import DecodingError, EncodingError
from ogmios_client.schema import REQUEST_SCHEMA, RESPONSE_SCHEMA, validate, validate_outgoing

REQUEST_TYPE = "jsonwsp/request"
RESPONSE_TYPE = "jsonwsp/response"
PROTOCOL_VERSION = "1.0"
SERVICE_NAME = "ogmios"

EVALUATE_TX = "EvaluateTx"
SUBMIT_TX = "SubmitTx"


# =========================================================================
# Request side
# =========================================================================


@dataclass(frozen=True)
class AdditionalUTxO:
    """Reference to an output the node should treat as unspent during evaluation.

    Attributes:
        transaction_id: Hex transaction identifier.
        index: Output index within that transaction (non-negative).
    """

    transaction_id: str
    index: int

    def to_dict(self) -> dict[str, Any]:
        return {"transaction_id": self.transaction_id, "index": self.index}


@dataclass(frozen=True)
class EvaluateArgs:
    evaluate: str
    additional_utxo_set: tuple[AdditionalUTxO, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "evaluate": self.evaluate,
            "additionalUtxoSet": [u.to_dict() for u in self.additional_utxo_set],
        }


@dataclass(frozen=True)
class SubmitArgs:
    submit: str

    def to_dict(self) -> dict[str, Any]:
        return {"submit": self.submit}


MessageArgs = Union[EvaluateArgs, SubmitArgs]


@dataclass(frozen=True)
class RequestEnvelope:
    """A single request, built fresh per call and discarded after encoding.

    Protocol marker, version and service name are fixed by the wire
    contract and not settable.
    """

    method_name: str
    args: MessageArgs
    mirror: Any = None
    message_type: str = field(default=REQUEST_TYPE, init=False)
    version: str = field(default=PROTOCOL_VERSION, init=False)
    service_name: str = field(default=SERVICE_NAME, init=False)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": self.message_type,
            "version": self.version,
            "servicename": self.service_name,
            "methodname": self.method_name,
            "args": self.args.to_dict(),
        }
        if self.mirror is not None:
            payload["mirror"] = self.mirror
        return payload


def build_evaluate_request(
    tx_hex: str,
    utxos: Iterable[AdditionalUTxO] = (),
    mirror: Any = None,
) -> RequestEnvelope:
    """Build an ``EvaluateTx`` request.

    The transaction hex is passed through untouched; whether it decodes
    to a valid transaction is for the node to decide. UTxO order is kept.
    """
    return RequestEnvelope(
        method_name=EVALUATE_TX,
        args=EvaluateArgs(evaluate=tx_hex, additional_utxo_set=tuple(utxos)),
        mirror=mirror,
    )


def build_submit_request(tx_hex: str, mirror: Any = None) -> RequestEnvelope:
    """Build a ``SubmitTx`` request."""
    return RequestEnvelope(
        method_name=SUBMIT_TX,
        args=SubmitArgs(submit=tx_hex),
        mirror=mirror,
    )


# =========================================================================
# Response side
# =========================================================================


@dataclass(frozen=True)
class Fault:
    """A protocol- or ledger-level rejection returned by the node.

    Attributes:
        code: Fault category as sent by the node (e.g. "client", "server").
        string: Human-readable description.
    """

    code: str
    string: str

    @property
    def message(self) -> str:
        return self.string

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "string": self.string}


@dataclass(frozen=True)
class EvaluationResult:
    """Execution-unit report for an evaluated transaction.

    Kept as the raw JSON value; its internal layout (keyed by script
    purpose) is not interpreted here.
    """

    value: Any

    @classmethod
    def from_wire(cls, value: Any) -> EvaluationResult:
        return cls(value)

    def to_wire(self) -> Any:
        return self.value


@dataclass(frozen=True)
class SubmitSuccess:
    """Successful submission, wire form ``{"SubmitSuccess": {"txId": "<hex>"}}``."""

    tx_id: str

    @classmethod
    def from_wire(cls, value: Any) -> SubmitSuccess:
        inner = value.get("SubmitSuccess") if isinstance(value, dict) else None
        tx_id = inner.get("txId") if isinstance(inner, dict) else None
        if not isinstance(tx_id, str):
            raise DecodingError(
                "result is not a SubmitSuccess",
                f"expected {{'SubmitSuccess': {{'txId': str}}}}, got {value!r}",
            )
        return cls(tx_id)

    def to_wire(self) -> dict[str, Any]:
        return {"SubmitSuccess": {"txId": self.tx_id}}


class WireResult(Protocol):
    """What a result type must offer to be decoded from a response."""

    @classmethod
    def from_wire(cls: type[R], value: Any) -> R: ...

    def to_wire(self) -> Any: ...


R = TypeVar("R", bound="WireResult")
T = TypeVar("T")


@dataclass(frozen=True)
class ResponseEnvelope(Generic[T]):
    """Decoded response. Check both ``result`` and ``fault``.

    A populated fault is an ordinary value, not an error: the exchange
    succeeded, the node said no.
    """

    message_type: str
    version: str
    service_name: str
    method_name: str | None = None
    result: T | None = None
    fault: Fault | None = None
    reflection: Any = None

    @property
    def is_fault(self) -> bool:
        return self.fault is not None


# =========================================================================
# Codec (pure functions, no I/O)
# =========================================================================


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _dumps(obj: Any) -> bytes:
    try:
        text = json.dumps(obj, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError, RecursionError) as exc:
        raise EncodingError(f"cannot serialize envelope: {exc}") from exc
    return text.encode("utf-8")


def _loads(raw: bytes | str) -> Any:
    try:
        text = raw.decode("utf-8") if isinstance(raw, (bytes, bytearray)) else raw
        return json.loads(text, parse_constant=_reject_constant)
    except (UnicodeDecodeError, ValueError, RecursionError) as exc:
        raise DecodingError(f"reply is not valid JSON: {exc}") from exc


def encode(request: RequestEnvelope) -> bytes:
    """Serialize a request envelope to UTF-8 JSON text.

    Raises:
        EncodingError: A UTxO index is not a non-negative int, or
            ``mirror`` is not JSON-serializable.
    """
    payload = request.to_dict()
    validate_outgoing(payload, REQUEST_SCHEMA)
    return _dumps(payload)


def decode(raw: bytes | str, result_type: type[R]) -> ResponseEnvelope[R]:
    """Parse a response frame into a typed envelope.

    Args:
        raw: The frame as received (text or bytes).
        result_type: Class used to decode ``result`` when it is present.

    Raises:
        DecodingError: Not JSON, a required envelope field is missing or
            mistyped, or the result does not fit ``result_type``.
    """
    obj = _loads(raw)
    validate(obj, RESPONSE_SCHEMA)

    result_value = obj.get("result")
    fault_value = obj.get("fault")
    return ResponseEnvelope(
        message_type=obj["type"],
        version=obj["version"],
        service_name=obj["servicename"],
        method_name=obj.get("methodname"),
        result=result_type.from_wire(result_value) if result_value is not None else None,
        fault=Fault(fault_value["code"], fault_value["string"]) if fault_value is not None else None,
        reflection=obj.get("reflection"),
    )


def decode_request(raw: bytes | str) -> RequestEnvelope:
    """Parse a request frame back into a ``RequestEnvelope``.

    The args variant is picked from the field names present, since the
    wire carries no tag. Payloads matching neither or both variants are
    rejected.
    """
    obj = _loads(raw)
    validate(obj, REQUEST_SCHEMA)

    args = obj["args"]
    parsed: MessageArgs
    if "submit" in args:
        parsed = SubmitArgs(submit=args["submit"])
    else:
        parsed = EvaluateArgs(
            evaluate=args["evaluate"],
            additional_utxo_set=tuple(
                AdditionalUTxO(u["transaction_id"], int(u["index"]))
                for u in args["additionalUtxoSet"]
            ),
        )
    return RequestEnvelope(method_name=obj["methodname"], args=parsed, mirror=obj.get("mirror"))


def encode_response(response: ResponseEnvelope[Any]) -> bytes:
    """Serialize a response envelope as the node would send it.

    Absent optional fields are written as ``null``.
    """
    return _dumps(
        {
            "type": response.message_type,
            "version": response.version,
            "servicename": response.service_name,
            "methodname": response.method_name,
            "result": response.result.to_wire() if response.result is not None else None,
            "fault": response.fault.to_dict() if response.fault is not None else None,
            "reflection": response.reflection,
        }
    )
