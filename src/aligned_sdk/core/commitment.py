"""
Commitment engine.

Reduces a VerificationData record to fixed-size Keccak-256 digests. Each
field is hashed on its own; absent optional fields commit to 32 zero bytes
(not to the hash of an empty sequence).
"""

from __future__ import annotations

from typing import Optional

from eth_utils import keccak

from aligned_sdk.protocol.errors import VerificationDataError
from aligned_sdk.protocol.models import VerificationData, VerificationDataCommitment

ZERO_DIGEST = bytes(32)


def _commit_optional(data: Optional[bytes]) -> bytes:
    return keccak(data) if data is not None else ZERO_DIGEST


def commit(verification_data: VerificationData) -> VerificationDataCommitment:
    vm_program_code = verification_data.vm_program_code
    verification_key = verification_data.verification_key

    if vm_program_code is not None and verification_key is not None:
        raise VerificationDataError(
            "vm_program_code and verification_key are mutually exclusive"
        )

    # SP1 commits to the program image, every other system to its verification key
    aux_source = vm_program_code if vm_program_code is not None else verification_key

    return VerificationDataCommitment(
        proof_commitment=keccak(verification_data.proof),
        pub_input_commitment=_commit_optional(verification_data.pub_input),
        proving_system_aux_data_commitment=_commit_optional(aux_source),
        proof_generator_addr=bytes(verification_data.proof_generator_addr),
    )


def get_verification_key_commitment(content: bytes) -> str:
    """Hex Keccak-256 commitment of a verification key or program file."""
    return keccak(content).hex()
