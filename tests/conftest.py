import asyncio
import json
import socket
from typing import Iterable, List, Optional

import pytest
import websockets

from aligned_sdk.core.commitment import commit
from aligned_sdk.core.signing import ClientSigner
from aligned_sdk.merkle.backend import VerificationCommitmentBatch
from aligned_sdk.merkle.tree import MerkleTree
from aligned_sdk.protocol.enums import ProvingSystemId
from aligned_sdk.protocol.models import BatchInclusionData, ClientMessage, VerificationData

ANVIL_ADDRESS = bytes.fromhex("f39fd6e51aad88f6f4ce6ab8827279cfffb92266")


class FakeBatcher:
    """
    In-process stand-in for the batcher.

    Collects ``batch_size`` client messages, recovers their signers, builds
    the batch tree and answers with BatchInclusionData for ``respond_to``
    (all positions by default), optionally in reverse order.
    """

    def __init__(
        self,
        batch_size: int,
        *,
        respond_to: Optional[Iterable[int]] = None,
        reverse: bool = False,
        extra_frames: Iterable[str] = (),
    ):
        self.batch_size = batch_size
        self.respond_to = respond_to
        self.reverse = reverse
        self.extra_frames = list(extra_frames)
        self.messages: List[ClientMessage] = []
        self.recovered: List[bytes] = []
        self.tree: Optional[MerkleTree] = None

    async def handler(self, ws):
        async for raw in ws:
            message = ClientMessage.from_dict(json.loads(raw))
            self.recovered.append(message.verify_signature())
            self.messages.append(message)
            if len(self.messages) == self.batch_size:
                break

        self.tree = MerkleTree(
            VerificationCommitmentBatch(),
            [commit(m.verification_data) for m in self.messages],
        )
        indices = list(range(self.batch_size) if self.respond_to is None else self.respond_to)
        if self.reverse:
            indices.reverse()

        for frame in self.extra_frames:
            await ws.send(frame)
        for index in indices:
            await ws.send(json.dumps(BatchInclusionData.from_tree(self.tree, index).to_dict()))

    def run(self, client_coro_factory):
        """Serve on a free local port and run ``client_coro_factory(url)`` against it."""

        async def main():
            async with websockets.serve(self.handler, "127.0.0.1", 0) as server:
                port = server.sockets[0].getsockname()[1]
                return await client_coro_factory(f"ws://127.0.0.1:{port}")

        return asyncio.run(main())


class SilentBatcher(FakeBatcher):
    """Accepts messages and never answers until the client hangs up."""

    async def handler(self, ws):
        async for raw in ws:
            self.messages.append(ClientMessage.from_dict(json.loads(raw)))
            if len(self.messages) == self.batch_size:
                break
        await ws.wait_closed()


class ClosingBatcher(FakeBatcher):
    """Accepts messages and closes the stream without answering."""

    async def handler(self, ws):
        async for raw in ws:
            self.messages.append(ClientMessage.from_dict(json.loads(raw)))
            if len(self.messages) == self.batch_size:
                break


def make_sp1(proof: bytes = b"\x01\x02\x03", program: bytes = b"\x09\x09") -> VerificationData:
    return VerificationData(
        proving_system=ProvingSystemId.SP1,
        proof=proof,
        vm_program_code=program,
        proof_generator_addr=bytes(20),
    )


def make_groth16(proof: bytes = b"groth16-proof") -> VerificationData:
    return VerificationData(
        proving_system=ProvingSystemId.GROTH16_BN254,
        proof=proof,
        pub_input=b"public-input",
        verification_key=b"verification-key",
        proof_generator_addr=ANVIL_ADDRESS,
    )


def free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture
def sp1_data() -> VerificationData:
    return make_sp1()


@pytest.fixture
def groth16_data() -> VerificationData:
    return make_groth16()


@pytest.fixture
def signer() -> ClientSigner:
    return ClientSigner.generate()
