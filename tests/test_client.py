"""
Tests for OgmiosClient: canned JSON-WSP replies, no network.

Uses a FakeTransport that records frames and returns a pre-built reply,
exercising the client → codec → transport → codec path.

Test plan:
- Submit: hex-encodes tx, SubmitTx frame sent to ws://host:port,
  success parsed, fault returned as value (not raised)
- Evaluate: EvaluateTx frame carries utxos, result opaque, fault as value
- Mirror: forwarded in request, reflection surfaced
- Errors: transport exceptions propagate, bad reply → DecodingError
- Concurrency: parallel calls do not see each other's frames
"""

import asyncio
import json
from typing import Any

import pytest

from ogmios_client.client import LocalTxSubmission, OgmiosClient
from ogmios_client.envelope import AdditionalUTxO, EvaluationResult, Fault, SubmitSuccess
from ogmios_client.errors import DecodingError, OgmiosConnectionError

TX_ID = "b8a4628216237d47bb5bb095e79c9f91ccf043d15f55e87bf9df5a0d920022c2"

# ---------------------------------------------------------------------------
# Fake transport
# ---------------------------------------------------------------------------


class FakeTransport:
    """Returns a canned reply frame for testing."""

    def __init__(self, reply: dict[str, Any] | str) -> None:
        self._reply = reply if isinstance(reply, str) else json.dumps(reply)
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def exchange(self, url: str, frame: str) -> str:
        self.calls.append((url, json.loads(frame)))
        return self._reply


class ErrorTransport:
    """Raises on exchange to simulate transport failures."""

    def __init__(self, exc: Exception) -> None:
        self._exc = exc

    async def exchange(self, url: str, frame: str) -> str:
        raise self._exc


class EchoTransport:
    """Replies with a SubmitSuccess whose txId is the submitted hex."""

    async def exchange(self, url: str, frame: str) -> str:
        request = json.loads(frame)
        await asyncio.sleep(0)
        return json.dumps(
            {
                "type": "jsonwsp/response",
                "version": "1.0",
                "servicename": "ogmios",
                "methodname": "SubmitTx",
                "result": {"SubmitSuccess": {"txId": request["args"]["submit"]}},
                "reflection": request.get("mirror"),
            }
        )


# ---------------------------------------------------------------------------
# Canned replies
# ---------------------------------------------------------------------------

SUBMIT_SUCCESS = {
    "type": "jsonwsp/response",
    "version": "1.0",
    "servicename": "ogmios",
    "methodname": "SubmitTx",
    "result": {"SubmitSuccess": {"txId": TX_ID}},
    "fault": None,
    "reflection": None,
}

CLIENT_FAULT = {
    "type": "jsonwsp/response",
    "version": "1.0",
    "servicename": "ogmios",
    "fault": {"code": "client", "string": "Invalid request: failed to decode payload."},
    "reflection": None,
}

EVALUATE_SUCCESS = {
    "type": "jsonwsp/response",
    "version": "1.0",
    "servicename": "ogmios",
    "methodname": "EvaluateTx",
    "result": {"EvaluationResult": {"spend:0": {"memory": 1700, "steps": 476468}}},
    "reflection": None,
}


# ---------------------------------------------------------------------------
# Submit
# ---------------------------------------------------------------------------


class TestSubmitTx:
    @pytest.mark.asyncio
    async def test_tx_id_parsed(self) -> None:
        client = OgmiosClient("192.168.0.143", "1337", FakeTransport(SUBMIT_SUCCESS))
        response = await client.submit_tx(b"\x01\x02")
        assert response.result == SubmitSuccess(TX_ID)
        assert response.fault is None

    @pytest.mark.asyncio
    async def test_sends_hex_payload(self) -> None:
        transport = FakeTransport(SUBMIT_SUCCESS)
        client = OgmiosClient("localhost", 1337, transport)
        await client.submit_tx(bytes([1, 2, 3, 4]))
        assert len(transport.calls) == 1
        _, payload = transport.calls[0]
        assert payload["methodname"] == "SubmitTx"
        assert payload["type"] == "jsonwsp/request"
        assert payload["args"] == {"submit": "01020304"}

    @pytest.mark.asyncio
    async def test_sends_to_endpoint_url(self) -> None:
        transport = FakeTransport(SUBMIT_SUCCESS)
        client = OgmiosClient("192.168.0.143", "1337", transport)
        await client.submit_tx(b"\x00")
        url, _ = transport.calls[0]
        assert url == "ws://192.168.0.143:1337"

    @pytest.mark.asyncio
    async def test_fault_returned_not_raised(self) -> None:
        client = OgmiosClient("localhost", 1337, FakeTransport(CLIENT_FAULT))
        response = await client.submit_tx(b"\x01\x02\x03\x04")
        assert response.result is None
        assert response.fault == Fault("client", "Invalid request: failed to decode payload.")


# ---------------------------------------------------------------------------
# Evaluate
# ---------------------------------------------------------------------------


class TestEvaluateTx:
    @pytest.mark.asyncio
    async def test_result_opaque(self) -> None:
        client = OgmiosClient("localhost", 1337, FakeTransport(EVALUATE_SUCCESS))
        response = await client.evaluate_tx(b"\x84\xa5")
        assert response.result == EvaluationResult(EVALUATE_SUCCESS["result"])
        assert response.method_name == "EvaluateTx"

    @pytest.mark.asyncio
    async def test_sends_additional_utxos(self) -> None:
        transport = FakeTransport(EVALUATE_SUCCESS)
        client = OgmiosClient("localhost", 1337, transport)
        utxos = [AdditionalUTxO("aa" * 32, 1), AdditionalUTxO("bb" * 32, 0)]
        await client.evaluate_tx(b"\x84\xa5", utxos)
        _, payload = transport.calls[0]
        assert payload["methodname"] == "EvaluateTx"
        assert payload["args"] == {
            "evaluate": "84a5",
            "additionalUtxoSet": [
                {"transaction_id": "aa" * 32, "index": 1},
                {"transaction_id": "bb" * 32, "index": 0},
            ],
        }

    @pytest.mark.asyncio
    async def test_default_empty_utxo_set(self) -> None:
        transport = FakeTransport(EVALUATE_SUCCESS)
        client = OgmiosClient("localhost", 1337, transport)
        await client.evaluate_tx(b"\x00")
        _, payload = transport.calls[0]
        assert payload["args"]["additionalUtxoSet"] == []

    @pytest.mark.asyncio
    async def test_fault_returned_not_raised(self) -> None:
        client = OgmiosClient("localhost", 1337, FakeTransport(CLIENT_FAULT))
        response = await client.evaluate_tx(b"\x01\x02\x03\x04")
        assert response.is_fault is True
        assert response.result is None


# ---------------------------------------------------------------------------
# Mirror / reflection
# ---------------------------------------------------------------------------


class TestMirror:
    @pytest.mark.asyncio
    async def test_mirror_sent_and_reflected(self) -> None:
        client = OgmiosClient("localhost", 1337, EchoTransport())
        response = await client.submit_tx(b"\xab", mirror={"id": "req-1"})
        assert response.reflection == {"id": "req-1"}

    @pytest.mark.asyncio
    async def test_mirror_omitted_by_default(self) -> None:
        transport = FakeTransport(SUBMIT_SUCCESS)
        client = OgmiosClient("localhost", 1337, transport)
        await client.submit_tx(b"\xab")
        _, payload = transport.calls[0]
        assert "mirror" not in payload


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestErrors:
    @pytest.mark.asyncio
    async def test_transport_exception_propagates(self) -> None:
        client = OgmiosClient(
            "localhost", 1337, ErrorTransport(OgmiosConnectionError("refused"))
        )
        with pytest.raises(OgmiosConnectionError, match="refused"):
            await client.submit_tx(b"\x00")

    @pytest.mark.asyncio
    async def test_malformed_reply_raises(self) -> None:
        client = OgmiosClient("localhost", 1337, FakeTransport('{"type": "jsonwsp/response"}'))
        with pytest.raises(DecodingError):
            await client.evaluate_tx(b"\x00")

    @pytest.mark.asyncio
    async def test_evaluation_reply_to_submit_raises(self) -> None:
        client = OgmiosClient("localhost", 1337, FakeTransport(EVALUATE_SUCCESS))
        with pytest.raises(DecodingError):
            await client.submit_tx(b"\x00")


# ---------------------------------------------------------------------------
# Surface
# ---------------------------------------------------------------------------


class TestClientSurface:
    def test_implements_protocol(self) -> None:
        assert isinstance(OgmiosClient("localhost", 1337), LocalTxSubmission)

    def test_endpoint_fixed(self) -> None:
        client = OgmiosClient("node", "1337")
        assert client.endpoint.url == "ws://node:1337"
        with pytest.raises(Exception):  # FrozenInstanceError
            client.endpoint.host = "other"  # type: ignore[misc]

    @pytest.mark.asyncio
    async def test_concurrent_calls_isolated(self) -> None:
        client = OgmiosClient("localhost", 1337, EchoTransport())
        txs = [bytes([i]) * 4 for i in range(8)]
        responses = await asyncio.gather(*(client.submit_tx(tx) for tx in txs))
        assert [r.result.tx_id for r in responses if r.result] == [tx.hex() for tx in txs]
