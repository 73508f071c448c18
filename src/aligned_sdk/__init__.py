from .core.commitment import commit, get_verification_key_commitment
from .core.signing import ClientSigner, sign, verify_signature
from .core.client import SubmissionClient, submit
from .chain.verifier import verify_proof_onchain
from .merkle import MerkleTree, MerkleProof, VerificationCommitmentBatch, verify_merkle_proof
from .protocol.enums import Chain, ProvingSystemId, SubmissionState, SubmissionStatus
from .protocol.models import (
    AlignedVerificationData,
    BatchInclusionData,
    ClientMessage,
    SubmissionResult,
    VerificationData,
    VerificationDataCommitment,
)

__all__ = [
    "commit",
    "get_verification_key_commitment",
    "ClientSigner",
    "sign",
    "verify_signature",
    "SubmissionClient",
    "submit",
    "verify_proof_onchain",
    "MerkleTree",
    "MerkleProof",
    "VerificationCommitmentBatch",
    "verify_merkle_proof",
    "Chain",
    "ProvingSystemId",
    "SubmissionState",
    "SubmissionStatus",
    "AlignedVerificationData",
    "BatchInclusionData",
    "ClientMessage",
    "SubmissionResult",
    "VerificationData",
    "VerificationDataCommitment",
]
