"""
Submission client.

Drives one submission run against the batcher:

    CONNECTING -> CONNECTED -> SENDING -> AWAITING_RESPONSES -> COMPLETED
    (FAILED reachable from any state)

All messages are signed before the connection is opened, then written back
to back while a reader task collects BatchInclusionData. Responses are
correlated by leaf content: a response belongs to the earliest unmatched
submission whose leaf digest verifies against the response's root, index and
proof. Arrival order is never relied upon.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Sequence

from aligned_sdk.core.commitment import commit
from aligned_sdk.core.signing import ClientSigner
from aligned_sdk.merkle.backend import VerificationCommitmentBatch
from aligned_sdk.merkle.tree import verify_leaf_hash
from aligned_sdk.protocol.enums import SubmissionState
from aligned_sdk.protocol.errors import AlignedError
from aligned_sdk.protocol.models import (
    AlignedVerificationData,
    BatchInclusionData,
    ClientMessage,
    SubmissionResult,
    VerificationData,
    VerificationDataCommitment,
)
from aligned_sdk.transport.websocket import BatcherConnection

logger = logging.getLogger(__name__)

ConnectionFactory = Callable[[str], Awaitable[BatcherConnection]]


@dataclass
class _InFlight:
    position: int
    message: ClientMessage
    commitment: VerificationDataCommitment
    leaf_hash: bytes
    inclusion: Optional[BatchInclusionData] = None


class SubmissionClient:
    """
    Submits signed verification data to the batcher and collects inclusion data.

    Usage:
        client = SubmissionClient(ClientSigner.from_private_key(key))
        result = await client.submit("ws://localhost:8080", [vd] * 3)
        for avd in result.aligned_verification_data:
            ...

    No timeout is enforced here; wrap submit() in asyncio.wait_for() for
    bounded latency. Cancellation closes the connection and stops the reader.
    """

    def __init__(
        self,
        signer: ClientSigner,
        *,
        connection_factory: ConnectionFactory = BatcherConnection.connect,
    ) -> None:
        self._signer = signer
        self._connect = connection_factory
        self._backend = VerificationCommitmentBatch()
        self._state: Optional[SubmissionState] = None

    @property
    def state(self) -> Optional[SubmissionState]:
        return self._state

    def _transition(self, state: SubmissionState) -> None:
        logger.debug("Submission state: %s -> %s", self._state, state)
        self._state = state

    def _prepare(self, verification_data: Sequence[VerificationData]) -> List[_InFlight]:
        in_flight: List[_InFlight] = []
        for position, vd in enumerate(verification_data):
            commitment = commit(vd)
            in_flight.append(
                _InFlight(
                    position=position,
                    message=self._signer.sign(vd),
                    commitment=commitment,
                    leaf_hash=self._backend.hash_data(commitment),
                )
            )
        return in_flight

    async def submit(
        self, batcher_url: str, verification_data: Sequence[VerificationData]
    ) -> SubmissionResult:
        """
        Run one submission.

        Raises:
            ValueError: If verification_data is empty
            BatcherConnectionError: If connecting or sending fails
        """
        if not verification_data:
            raise ValueError("Nothing to submit")

        in_flight = self._prepare(verification_data)

        self._transition(SubmissionState.CONNECTING)
        try:
            conn = await self._connect(batcher_url)
        except BaseException:
            self._transition(SubmissionState.FAILED)
            raise
        self._transition(SubmissionState.CONNECTED)

        reader = asyncio.create_task(self._collect(conn, in_flight))
        try:
            self._transition(SubmissionState.SENDING)
            for item in in_flight:
                await conn.send(item.message)

            self._transition(SubmissionState.AWAITING_RESPONSES)
            unmatched = await reader
        except (AlignedError, asyncio.CancelledError):
            self._transition(SubmissionState.FAILED)
            raise
        finally:
            if not reader.done():
                reader.cancel()
                await asyncio.gather(reader, return_exceptions=True)
            await conn.close()

        result = self._build_result(in_flight, unmatched)
        self._transition(SubmissionState.COMPLETED)
        return result

    async def _collect(self, conn: BatcherConnection, in_flight: List[_InFlight]) -> int:
        """Match inbound responses; returns how many matched nothing."""
        remaining = len(in_flight)
        unmatched = 0
        async for inclusion in conn.responses():
            item = self._match(in_flight, inclusion)
            if item is None:
                unmatched += 1
                logger.warning(
                    "Batch inclusion data for index %d matches no in-flight submission",
                    inclusion.index_in_batch,
                )
                continue

            item.inclusion = inclusion
            remaining -= 1
            logger.info(
                "Submission %d included in batch %s at index %d",
                item.position,
                inclusion.batch_merkle_root.hex()[:8],
                inclusion.index_in_batch,
            )
            if remaining == 0:
                break
        return unmatched

    def _match(
        self, in_flight: List[_InFlight], inclusion: BatchInclusionData
    ) -> Optional[_InFlight]:
        for item in in_flight:
            if item.inclusion is not None:
                continue
            if verify_leaf_hash(
                self._backend,
                inclusion.batch_merkle_root,
                item.leaf_hash,
                inclusion.index_in_batch,
                inclusion.batch_inclusion_proof,
            ):
                return item
        return None

    def _build_result(self, in_flight: List[_InFlight], unmatched: int) -> SubmissionResult:
        result = SubmissionResult(unmatched_responses=unmatched)
        for item in in_flight:
            if item.inclusion is None:
                result.omitted.append(item.position)
                continue
            result.aligned_verification_data.append(
                AlignedVerificationData.from_inclusion(item.commitment, item.inclusion)
            )

        if result.omitted:
            logger.warning(
                "%d of %d submissions received no batch inclusion data",
                len(result.omitted),
                len(in_flight),
            )
        return result


async def submit(
    batcher_url: str,
    verification_data: Sequence[VerificationData],
    signer: ClientSigner,
) -> SubmissionResult:
    return await SubmissionClient(signer).submit(batcher_url, verification_data)
