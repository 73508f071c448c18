"""
Client message signing.

Signatures are recoverable secp256k1 ECDSA over the batch leaf digest of
the verification data, using the Ethereum signed-message prefix (EIP-191).

REQUIREMENTS:
- The signed digest is hash_data(commit(verification_data))
- Recovery needs no public key; the signer address is derived from (r, s, v)
- Verification is offline and never raises anything but SignatureError
"""

from __future__ import annotations

import logging
from typing import Union

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_account.signers.local import LocalAccount
from eth_keys.exceptions import ValidationError as EthKeysValidationError

from aligned_sdk.core.commitment import commit
from aligned_sdk.merkle.backend import hash_leaf
from aligned_sdk.protocol.errors import SignatureError
from aligned_sdk.protocol.models import ClientMessage, Signature, VerificationData

logger = logging.getLogger(__name__)


def signed_digest(verification_data: VerificationData) -> bytes:
    """The 32-byte digest a client signs for this verification data."""
    return hash_leaf(commit(verification_data))


class ClientSigner:
    """
    secp256k1 signer for client messages.

    Usage:
        # From a hex private key
        signer = ClientSigner.from_private_key("0xac09...")

        # Generate new key (for testing only)
        signer = ClientSigner.generate()

        message = signer.sign(verification_data)
    """

    def __init__(self, account: LocalAccount):
        self._account = account

    @property
    def address(self) -> bytes:
        """Raw 20-byte address of the signing key."""
        return bytes.fromhex(self._account.address[2:])

    @property
    def checksum_address(self) -> str:
        return self._account.address

    def sign(self, verification_data: VerificationData) -> ClientMessage:
        signed = self._account.sign_message(
            encode_defunct(primitive=signed_digest(verification_data))
        )
        return ClientMessage(
            verification_data=verification_data,
            signature=Signature(r=signed.r, s=signed.s, v=signed.v),
        )

    @classmethod
    def generate(cls) -> "ClientSigner":
        """
        Generate a new random key.

        WARNING: Use only for testing.
        """
        return cls(Account.create())

    @classmethod
    def from_private_key(cls, key: Union[str, bytes]) -> "ClientSigner":
        try:
            return cls(Account.from_key(key))
        except (ValueError, TypeError, EthKeysValidationError) as e:
            raise SignatureError(f"Invalid private key: {e}") from e


def sign(verification_data: VerificationData, signer: ClientSigner) -> ClientMessage:
    return signer.sign(verification_data)


def verify_signature(message: ClientMessage) -> bytes:
    """
    Recover the address that signed ``message``.

    Returns:
        Raw 20-byte signer address

    Raises:
        SignatureError: If the signature is malformed or recovery fails
    """
    signature = message.signature
    if signature.v not in (27, 28):
        raise SignatureError(f"Invalid recovery id: {signature.v}")

    digest = signed_digest(message.verification_data)
    try:
        recovered = Account.recover_message(
            encode_defunct(primitive=digest),
            vrs=(signature.v, signature.r, signature.s),
        )
    except Exception as e:  # untrusted input; every recovery failure is a SignatureError
        logger.debug("Signature recovery failed: %s", e)
        raise SignatureError(f"Signature recovery failed: {e}") from e

    return bytes.fromhex(recovered[2:])
