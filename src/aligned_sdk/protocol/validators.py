from __future__ import annotations

from typing import Optional

from .enums import ProvingSystemId
from .errors import InvalidProvingSystemError, VerificationDataError

ADDRESS_LENGTH = 20


def parse_proving_system(proving_system: str) -> ProvingSystemId:
    try:
        return ProvingSystemId(proving_system)
    except ValueError:
        raise InvalidProvingSystemError(proving_system) from None


def validate_verification_fields(
    proving_system: ProvingSystemId,
    pub_input: Optional[bytes],
    verification_key: Optional[bytes],
    vm_program_code: Optional[bytes],
    proof_generator_addr: bytes,
) -> None:
    """
    Enforce the per-proving-system field presence rule.

    SP1 carries vm_program_code and never a verification key. Every other
    system carries verification_key and pub_input and never program code.
    """
    if len(proof_generator_addr) != ADDRESS_LENGTH:
        raise VerificationDataError(
            f"proof_generator_addr must be {ADDRESS_LENGTH} bytes, got {len(proof_generator_addr)}"
        )

    if proving_system.requires_vm_program_code:
        if vm_program_code is None:
            raise VerificationDataError(f"{proving_system.value} requires vm_program_code")
        if verification_key is not None:
            raise VerificationDataError(
                f"{proving_system.value} does not accept a verification_key"
            )
        return

    if vm_program_code is not None:
        raise VerificationDataError(
            f"vm_program_code is only valid for {ProvingSystemId.SP1.value}"
        )
    if verification_key is None:
        raise VerificationDataError(f"{proving_system.value} requires verification_key")
    if pub_input is None:
        raise VerificationDataError(f"{proving_system.value} requires pub_input")
