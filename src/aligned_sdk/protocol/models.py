# FILE: src/aligned_sdk/protocol/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from aligned_sdk.merkle.tree import MerkleProof, MerkleTree
from aligned_sdk.utils.encoding import (
    address_from_str,
    address_to_json,
    bytes_from_json,
    bytes_to_json,
    optional_bytes_from_json,
    optional_bytes_to_json,
    quantity_from_json,
    quantity_to_json,
)

from .enums import ProvingSystemId, SubmissionStatus
from .errors import SerializationError
from .validators import validate_verification_fields

DIGEST_LENGTH = 32
SIGNATURE_LENGTH = 65


def _require(data: Any, key: str) -> Any:
    if not isinstance(data, dict):
        raise SerializationError(f"Expected a JSON object, got {type(data).__name__}")
    try:
        return data[key]
    except KeyError:
        raise SerializationError(f"Missing field '{key}'") from None


def _proof_from_json(data: Any) -> MerkleProof:
    path = _require(data, "merkle_path")
    if not isinstance(path, list):
        raise SerializationError("Field 'merkle_path' must be a list")
    return MerkleProof(
        merkle_path=[bytes_from_json(node, name="merkle_path", length=DIGEST_LENGTH) for node in path]
    )


def _index_from_json(data: Any) -> int:
    index = _require(data, "index_in_batch")
    if not isinstance(index, int) or isinstance(index, bool) or index < 0:
        raise SerializationError("Field 'index_in_batch' must be an unsigned integer")
    return index


# -------------------------
# VERIFICATION DATA
# -------------------------

@dataclass(frozen=True)
class VerificationData:
    """
    A proof plus the auxiliary artifacts its proving system needs.

    Field presence is checked at construction time; see
    validate_verification_fields.
    """
    proving_system: ProvingSystemId
    proof: bytes
    pub_input: Optional[bytes] = None
    verification_key: Optional[bytes] = None
    vm_program_code: Optional[bytes] = None
    proof_generator_addr: bytes = bytes(20)

    def __post_init__(self) -> None:
        validate_verification_fields(
            self.proving_system,
            self.pub_input,
            self.verification_key,
            self.vm_program_code,
            self.proof_generator_addr,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "proving_system": self.proving_system.value,
            "proof": bytes_to_json(self.proof),
            "pub_input": optional_bytes_to_json(self.pub_input),
            "verification_key": optional_bytes_to_json(self.verification_key),
            "vm_program_code": optional_bytes_to_json(self.vm_program_code),
            "proof_generator_addr": address_to_json(self.proof_generator_addr),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VerificationData":
        raw_system = _require(data, "proving_system")
        try:
            proving_system = ProvingSystemId(raw_system)
        except ValueError:
            raise SerializationError(f"Unknown proving system: {raw_system}") from None

        addr = _require(data, "proof_generator_addr")
        if not isinstance(addr, str):
            raise SerializationError("Field 'proof_generator_addr' must be a hex string")

        return cls(
            proving_system=proving_system,
            proof=bytes_from_json(_require(data, "proof"), name="proof"),
            pub_input=optional_bytes_from_json(data.get("pub_input"), name="pub_input"),
            verification_key=optional_bytes_from_json(
                data.get("verification_key"), name="verification_key"
            ),
            vm_program_code=optional_bytes_from_json(
                data.get("vm_program_code"), name="vm_program_code"
            ),
            proof_generator_addr=address_from_str(addr),
        )


@dataclass(frozen=True)
class VerificationDataCommitment:
    proof_commitment: bytes = bytes(32)
    pub_input_commitment: bytes = bytes(32)
    # Either the VM program code or the verification key, depending on the
    # proving system.
    proving_system_aux_data_commitment: bytes = bytes(32)
    proof_generator_addr: bytes = bytes(20)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "proof_commitment": bytes_to_json(self.proof_commitment),
            "pub_input_commitment": bytes_to_json(self.pub_input_commitment),
            "proving_system_aux_data_commitment": bytes_to_json(
                self.proving_system_aux_data_commitment
            ),
            "proof_generator_addr": bytes_to_json(self.proof_generator_addr),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VerificationDataCommitment":
        return cls(
            proof_commitment=bytes_from_json(
                _require(data, "proof_commitment"), name="proof_commitment", length=32
            ),
            pub_input_commitment=bytes_from_json(
                _require(data, "pub_input_commitment"), name="pub_input_commitment", length=32
            ),
            proving_system_aux_data_commitment=bytes_from_json(
                _require(data, "proving_system_aux_data_commitment"),
                name="proving_system_aux_data_commitment",
                length=32,
            ),
            proof_generator_addr=bytes_from_json(
                _require(data, "proof_generator_addr"), name="proof_generator_addr", length=20
            ),
        )


# -------------------------
# CLIENT MESSAGE
# -------------------------

@dataclass(frozen=True)
class Signature:
    """Recoverable secp256k1 signature (r, s, v with v in {27, 28})."""
    r: int
    s: int
    v: int

    def to_bytes(self) -> bytes:
        return self.r.to_bytes(32, "big") + self.s.to_bytes(32, "big") + bytes([self.v])

    @classmethod
    def from_bytes(cls, raw: bytes) -> "Signature":
        if len(raw) != SIGNATURE_LENGTH:
            raise SerializationError(
                f"Signature must be {SIGNATURE_LENGTH} bytes, got {len(raw)}"
            )
        return cls(
            r=int.from_bytes(raw[:32], "big"),
            s=int.from_bytes(raw[32:64], "big"),
            v=raw[64],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"r": quantity_to_json(self.r), "s": quantity_to_json(self.s), "v": self.v}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Signature":
        r = quantity_from_json(_require(data, "r"), name="r")
        s = quantity_from_json(_require(data, "s"), name="s")
        v = quantity_from_json(_require(data, "v"), name="v")
        if not 0 <= r < 1 << 256 or not 0 <= s < 1 << 256 or not 0 <= v <= 255:
            raise SerializationError("Signature component out of range")
        return cls(r=r, s=s, v=v)


@dataclass(frozen=True)
class ClientMessage:
    """
    Verification data wrapped with a signature over its leaf digest.

    The signed digest is hash_data(commit(verification_data)), the same
    value that becomes the batch Merkle leaf.
    """
    verification_data: VerificationData
    signature: Signature

    def verify_signature(self) -> bytes:
        """Recover the signer address. Raises SignatureError on failure."""
        from aligned_sdk.core.signing import verify_signature

        return verify_signature(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "verification_data": self.verification_data.to_dict(),
            "signature": self.signature.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClientMessage":
        return cls(
            verification_data=VerificationData.from_dict(_require(data, "verification_data")),
            signature=Signature.from_dict(_require(data, "signature")),
        )


# -------------------------
# BATCH INCLUSION
# -------------------------

@dataclass
class BatchInclusionData:
    """
    What the batcher returns to a client once its submission has been
    placed in a batch.
    """
    batch_merkle_root: bytes
    batch_inclusion_proof: MerkleProof
    index_in_batch: int

    @classmethod
    def from_tree(cls, tree: MerkleTree[Any], index_in_batch: int) -> "BatchInclusionData":
        return cls(
            batch_merkle_root=tree.root,
            batch_inclusion_proof=tree.get_proof_by_pos(index_in_batch),
            index_in_batch=index_in_batch,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "batch_merkle_root": bytes_to_json(self.batch_merkle_root),
            "batch_inclusion_proof": self.batch_inclusion_proof.to_dict(),
            "index_in_batch": self.index_in_batch,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BatchInclusionData":
        return cls(
            batch_merkle_root=bytes_from_json(
                _require(data, "batch_merkle_root"), name="batch_merkle_root", length=DIGEST_LENGTH
            ),
            batch_inclusion_proof=_proof_from_json(_require(data, "batch_inclusion_proof")),
            index_in_batch=_index_from_json(data),
        )


@dataclass
class AlignedVerificationData:
    """
    A commitment joined with the batch inclusion data the batcher returned
    for it. This is the unit persisted to disk and replayed on-chain.
    """
    verification_data_commitment: VerificationDataCommitment
    batch_merkle_root: bytes
    batch_inclusion_proof: MerkleProof
    index_in_batch: int

    @classmethod
    def from_inclusion(
        cls,
        commitment: VerificationDataCommitment,
        inclusion: BatchInclusionData,
    ) -> "AlignedVerificationData":
        return cls(
            verification_data_commitment=commitment,
            batch_merkle_root=inclusion.batch_merkle_root,
            batch_inclusion_proof=inclusion.batch_inclusion_proof,
            index_in_batch=inclusion.index_in_batch,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "verification_data_commitment": self.verification_data_commitment.to_dict(),
            "batch_merkle_root": bytes_to_json(self.batch_merkle_root),
            "batch_inclusion_proof": self.batch_inclusion_proof.to_dict(),
            "index_in_batch": self.index_in_batch,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AlignedVerificationData":
        return cls(
            verification_data_commitment=VerificationDataCommitment.from_dict(
                _require(data, "verification_data_commitment")
            ),
            batch_merkle_root=bytes_from_json(
                _require(data, "batch_merkle_root"), name="batch_merkle_root", length=DIGEST_LENGTH
            ),
            batch_inclusion_proof=_proof_from_json(_require(data, "batch_inclusion_proof")),
            index_in_batch=_index_from_json(data),
        )


# -------------------------
# SUBMISSION RESULT
# -------------------------

@dataclass
class SubmissionResult:
    """
    Outcome of one submission run.

    aligned_verification_data is in submission order; omitted holds the
    positions of submissions that never received a response.
    """
    aligned_verification_data: List[AlignedVerificationData] = field(default_factory=list)
    omitted: List[int] = field(default_factory=list)
    unmatched_responses: int = 0

    @property
    def status(self) -> SubmissionStatus:
        if not self.aligned_verification_data:
            return SubmissionStatus.NO_RESPONSE
        if self.omitted:
            return SubmissionStatus.PARTIAL
        return SubmissionStatus.COMPLETE
