"""
Build VerificationData from proof artifact files.

Everything here runs before any network activity, so a wrong proving system
name or a missing auxiliary file is reported without contacting the batcher.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from aligned_sdk.core.storage import read_file
from aligned_sdk.protocol.errors import MissingParameterError
from aligned_sdk.protocol.models import VerificationData
from aligned_sdk.protocol.validators import parse_proving_system
from aligned_sdk.utils.encoding import address_from_str

PathLike = Union[str, Path]


def _read_required(param_name: str, path: Optional[PathLike]) -> bytes:
    if path is None:
        raise MissingParameterError(param_name)
    return read_file(path)


def verification_data_from_files(
    proving_system: str,
    proof_file: PathLike,
    proof_generator_addr: str,
    *,
    pub_input_file: Optional[PathLike] = None,
    verification_key_file: Optional[PathLike] = None,
    vm_program_code_file: Optional[PathLike] = None,
) -> VerificationData:
    """
    Raises:
        InvalidProvingSystemError: Unknown proving system name
        MissingParameterError: A file required by the proving system was not given
        AlignedIOError: A file could not be read
        SerializationError: The generator address is not a valid address
    """
    system = parse_proving_system(proving_system)
    addr = address_from_str(proof_generator_addr)
    proof = read_file(proof_file)

    if system.requires_vm_program_code:
        return VerificationData(
            proving_system=system,
            proof=proof,
            vm_program_code=_read_required("--vm_program", vm_program_code_file),
            proof_generator_addr=addr,
        )

    return VerificationData(
        proving_system=system,
        proof=proof,
        verification_key=_read_required("--vk", verification_key_file),
        pub_input=_read_required("--public_input", pub_input_file),
        proof_generator_addr=addr,
    )
