"""
On-chain batch inclusion check.

Replays a persisted AlignedVerificationData against the service manager
contract's read-only verifyBatchInclusion function. The Merkle check itself
happens on-chain; this module only assembles the call arguments in the exact
order and width the contract expects.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from eth_utils import to_checksum_address
from web3 import AsyncHTTPProvider, AsyncWeb3

from aligned_sdk.core.settings import SERVICE_MANAGER_ADDRESSES
from aligned_sdk.protocol.enums import Chain
from aligned_sdk.protocol.errors import OnchainCallError
from aligned_sdk.protocol.models import AlignedVerificationData

logger = logging.getLogger(__name__)

VERIFY_BATCH_INCLUSION_ABI = [
    {
        "type": "function",
        "name": "verifyBatchInclusion",
        "stateMutability": "view",
        "inputs": [
            {"name": "proofCommitment", "type": "bytes32"},
            {"name": "pubInputCommitment", "type": "bytes32"},
            {"name": "provingSystemAuxDataCommitment", "type": "bytes32"},
            {"name": "proofGeneratorAddr", "type": "bytes20"},
            {"name": "batchMerkleRoot", "type": "bytes32"},
            {"name": "merkleProof", "type": "bytes"},
            {"name": "verificationDataBatchIndex", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
    }
]


@dataclass(frozen=True)
class BatchInclusionCall:
    """Arguments of verifyBatchInclusion, in contract order."""
    proof_commitment: bytes
    pub_input_commitment: bytes
    proving_system_aux_data_commitment: bytes
    proof_generator_addr: bytes
    batch_merkle_root: bytes
    merkle_proof: bytes
    index_in_batch: int

    def as_args(self) -> Tuple[bytes, bytes, bytes, bytes, bytes, bytes, int]:
        return (
            self.proof_commitment,
            self.pub_input_commitment,
            self.proving_system_aux_data_commitment,
            self.proof_generator_addr,
            self.batch_merkle_root,
            self.merkle_proof,
            self.index_in_batch,
        )

    @classmethod
    def from_aligned_verification_data(cls, data: AlignedVerificationData) -> "BatchInclusionCall":
        commitment = data.verification_data_commitment
        return cls(
            proof_commitment=commitment.proof_commitment,
            pub_input_commitment=commitment.pub_input_commitment,
            proving_system_aux_data_commitment=commitment.proving_system_aux_data_commitment,
            proof_generator_addr=commitment.proof_generator_addr,
            batch_merkle_root=data.batch_merkle_root,
            # All the elements of the merkle path concatenated
            merkle_proof=data.batch_inclusion_proof.flatten(),
            index_in_batch=data.index_in_batch,
        )


def service_manager_address(chain: Chain) -> str:
    return SERVICE_MANAGER_ADDRESSES[chain]


async def verify_proof_onchain(
    data: AlignedVerificationData,
    chain: Chain,
    eth_rpc_url: str,
    *,
    w3: Optional[AsyncWeb3] = None,
) -> bool:
    """
    Ask the service manager whether ``data`` is included in an anchored batch.

    Raises:
        OnchainCallError: If the RPC call fails
    """
    if w3 is None:
        w3 = AsyncWeb3(AsyncHTTPProvider(eth_rpc_url))

    contract = w3.eth.contract(
        address=to_checksum_address(service_manager_address(chain)),
        abi=VERIFY_BATCH_INCLUSION_ABI,
    )
    call = BatchInclusionCall.from_aligned_verification_data(data)

    try:
        included = await contract.functions.verifyBatchInclusion(*call.as_args()).call()
    except Exception as e:
        logger.error("Error while reading batch inclusion verification: %s", e)
        raise OnchainCallError(f"verifyBatchInclusion call failed: {e}") from e

    return bool(included)
