from enum import Enum


class ErrorCode(str, Enum):
    CONNECTION_ERROR = "connection_error"
    INVALID_PROVING_SYSTEM = "invalid_proving_system"
    MISSING_PARAMETER = "missing_parameter"
    INVALID_VERIFICATION_DATA = "invalid_verification_data"
    IO_ERROR = "io_error"
    SERIALIZATION_ERROR = "serialization_error"
    SIGNATURE_ERROR = "signature_error"
    ONCHAIN_ERROR = "onchain_error"
    INTERNAL_ERROR = "internal_error"


class ProvingSystemId(str, Enum):
    """
    Closed set of proving systems accepted by the batcher.

    SP1 proofs carry the VM program image as auxiliary data; every other
    system carries a verification key and public input.
    """

    GNARK_PLONK_BLS12_381 = "GnarkPlonkBls12_381"
    GNARK_PLONK_BN254 = "GnarkPlonkBn254"
    GROTH16_BN254 = "Groth16Bn254"
    SP1 = "SP1"
    HALO2_KZG = "Halo2KZG"
    HALO2_IPA = "Halo2IPA"

    @classmethod
    def default(cls) -> "ProvingSystemId":
        return cls.SP1

    @property
    def requires_vm_program_code(self) -> bool:
        return self is ProvingSystemId.SP1


class SubmissionState(str, Enum):
    """
    Submission lifecycle states.

    Legal transitions:
        CONNECTING -> CONNECTED -> SENDING -> AWAITING_RESPONSES -> COMPLETED
        any state  -> FAILED
    """

    CONNECTING = "connecting"
    CONNECTED = "connected"
    SENDING = "sending"
    AWAITING_RESPONSES = "awaiting_responses"
    COMPLETED = "completed"
    FAILED = "failed"


class SubmissionStatus(str, Enum):
    """Outcome of a completed submission run."""

    COMPLETE = "complete"
    PARTIAL = "partial"
    NO_RESPONSE = "no_response"


class Chain(str, Enum):
    DEVNET = "devnet"
    HOLESKY = "holesky"
