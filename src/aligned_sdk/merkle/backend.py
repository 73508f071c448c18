"""
Keccak-256 Merkle backend for batches of verification data commitments.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from eth_utils import keccak

if TYPE_CHECKING:
    from aligned_sdk.protocol.models import VerificationDataCommitment


class VerificationCommitmentBatch:
    """
    Backend used by the batcher and the on-chain verifier.

    Leaf:   keccak(proof ‖ pub_input ‖ aux_data ‖ proof_generator_addr)
    Parent: keccak(left ‖ right)
    """

    def hash_data(self, leaf: VerificationDataCommitment) -> bytes:
        return keccak(
            leaf.proof_commitment
            + leaf.pub_input_commitment
            + leaf.proving_system_aux_data_commitment
            + leaf.proof_generator_addr
        )

    def hash_new_parent(self, left: bytes, right: bytes) -> bytes:
        return keccak(left + right)


def hash_leaf(commitment: VerificationDataCommitment) -> bytes:
    """Leaf digest of a commitment; this is also the digest clients sign."""
    return VerificationCommitmentBatch().hash_data(commitment)
