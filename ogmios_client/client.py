"""
Ogmios local transaction submission client.

The protocol has exactly two methods:
    - evaluate_tx(tx, additional_utxo_set) → ResponseEnvelope[EvaluationResult]
    - submit_tx(tx) → ResponseEnvelope[SubmitSuccess]

Both return the decoded envelope as-is. A node rejection shows up in
``envelope.fault`` and is never raised; only transport and decoding
failures raise (see ogmios_client.errors).
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Protocol, runtime_checkable

from ogmios_client.envelope import (
    AdditionalUTxO,
    EvaluationResult,
    ResponseEnvelope,
    SubmitSuccess,
    build_evaluate_request,
    build_submit_request,
    encode,
)
from ogmios_client.transport import Endpoint, MessageTransport, WebsocketsTransport, call

logger = logging.getLogger(__name__)


@runtime_checkable
class LocalTxSubmission(Protocol):
    """Interface for the node's local transaction submission methods."""

    async def evaluate_tx(
        self,
        tx: bytes,
        additional_utxo_set: Iterable[AdditionalUTxO] = (),
        *,
        mirror: Any = None,
    ) -> ResponseEnvelope[EvaluationResult]:
        """Ask the node for the execution units the transaction's scripts need.

        Args:
            tx: Serialized transaction bytes.
            additional_utxo_set: Outputs to treat as unspent in addition
                to the node's ledger state.
            mirror: Optional value echoed back as ``reflection``.
        """
        ...

    async def submit_tx(
        self,
        tx: bytes,
        *,
        mirror: Any = None,
    ) -> ResponseEnvelope[SubmitSuccess]:
        """Submit a signed transaction for inclusion."""
        ...


class OgmiosClient:
    """Ogmios client implementing the LocalTxSubmission protocol.

    Every method opens its own connection; instances hold no state beyond
    the endpoint and are safe to share between tasks.

    Args:
        host: Node host name or address.
        port: Node WebSocket port.
        transport: Injectable transport. Defaults to WebsocketsTransport.
            Pass a FakeTransport for testing.
    """

    def __init__(
        self,
        host: str,
        port: str | int,
        transport: MessageTransport | None = None,
    ) -> None:
        self._endpoint = Endpoint(host, port)
        self._transport = transport or WebsocketsTransport()

    @property
    def endpoint(self) -> Endpoint:
        return self._endpoint

    async def evaluate_tx(
        self,
        tx: bytes,
        additional_utxo_set: Iterable[AdditionalUTxO] = (),
        *,
        mirror: Any = None,
    ) -> ResponseEnvelope[EvaluationResult]:
        utxos = tuple(additional_utxo_set)
        request = build_evaluate_request(tx.hex(), utxos, mirror=mirror)
        logger.debug("EvaluateTx: %d tx bytes, %d additional utxos", len(tx), len(utxos))
        return await call(self._endpoint, encode(request), EvaluationResult, transport=self._transport)

    async def submit_tx(
        self,
        tx: bytes,
        *,
        mirror: Any = None,
    ) -> ResponseEnvelope[SubmitSuccess]:
        request = build_submit_request(tx.hex(), mirror=mirror)
        logger.debug("SubmitTx: %d tx bytes", len(tx))
        return await call(self._endpoint, encode(request), SubmitSuccess, transport=self._transport)
