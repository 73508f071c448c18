"""
Merkle batch trees.

- Generic array-backed tree with pluggable hash backend
- Keccak-256 backend over verification data commitments
"""

from aligned_sdk.merkle.tree import (
    MerkleBackend,
    MerkleProof,
    MerkleTree,
    compute_root_from_proof,
    verify_leaf_hash,
    verify_merkle_proof,
)
from aligned_sdk.merkle.backend import VerificationCommitmentBatch, hash_leaf

__all__ = [
    "MerkleBackend",
    "MerkleProof",
    "MerkleTree",
    "compute_root_from_proof",
    "verify_leaf_hash",
    "verify_merkle_proof",
    "VerificationCommitmentBatch",
    "hash_leaf",
]
