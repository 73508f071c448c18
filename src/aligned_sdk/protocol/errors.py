from typing import Optional, Union
from pathlib import Path

from .enums import ErrorCode, ProvingSystemId


class AlignedError(Exception):
    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, code: Optional[ErrorCode] = None):
        super().__init__(message)
        if code is not None:
            self.code = code


class BatcherConnectionError(AlignedError):
    """Raised when the batcher stream cannot be opened or drops while sending."""

    code = ErrorCode.CONNECTION_ERROR


class InvalidProvingSystemError(AlignedError):
    code = ErrorCode.INVALID_PROVING_SYSTEM

    def __init__(self, proving_system: str):
        available = ", ".join(p.value for p in ProvingSystemId)
        super().__init__(
            f"Invalid proving system: {proving_system}, "
            f"Available proving systems are: [{available}]"
        )
        self.proving_system = proving_system


class MissingParameterError(AlignedError):
    code = ErrorCode.MISSING_PARAMETER

    def __init__(self, param_name: str):
        super().__init__(f"Missing parameter: {param_name}")
        self.param_name = param_name


class VerificationDataError(AlignedError):
    """Raised when verification data violates the proving-system field rules."""

    code = ErrorCode.INVALID_VERIFICATION_DATA


class AlignedIOError(AlignedError):
    code = ErrorCode.IO_ERROR

    def __init__(self, path: Union[str, Path], cause: Optional[BaseException] = None):
        message = f"I/O error on {path}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.path = Path(path)
        self.cause = cause


class SerializationError(AlignedError):
    code = ErrorCode.SERIALIZATION_ERROR


class SignatureError(AlignedError):
    code = ErrorCode.SIGNATURE_ERROR


class OnchainCallError(AlignedError):
    code = ErrorCode.ONCHAIN_ERROR
