from .enums import (
    Chain,
    ErrorCode,
    ProvingSystemId,
    SubmissionState,
    SubmissionStatus,
)
from .errors import (
    AlignedError,
    AlignedIOError,
    BatcherConnectionError,
    InvalidProvingSystemError,
    MissingParameterError,
    OnchainCallError,
    SerializationError,
    SignatureError,
    VerificationDataError,
)

__all__ = [
    "Chain",
    "ErrorCode",
    "ProvingSystemId",
    "SubmissionState",
    "SubmissionStatus",
    "AlignedError",
    "AlignedIOError",
    "BatcherConnectionError",
    "InvalidProvingSystemError",
    "MissingParameterError",
    "OnchainCallError",
    "SerializationError",
    "SignatureError",
    "VerificationDataError",
]
