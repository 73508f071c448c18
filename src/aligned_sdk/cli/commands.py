"""
CLI commands for the aligned client.

Commands:
    aligned submit ...                       Submit proofs to the batcher
    aligned verify-proof-onchain ...         Check batch inclusion on Ethereum
    aligned get-vk-commitment --input FILE   Keccak commitment of a key/program file
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from aligned_sdk.core.settings import get_settings

logger = logging.getLogger(__name__)


def cmd_submit(args) -> None:
    """Submit proof(s) to the batcher and persist the returned inclusion data."""
    from aligned_sdk.core.client import SubmissionClient
    from aligned_sdk.core.inputs import verification_data_from_files
    from aligned_sdk.core.signing import ClientSigner
    from aligned_sdk.core.storage import ensure_output_dir, save_aligned_verification_data
    from aligned_sdk.protocol.enums import SubmissionStatus

    settings = get_settings()

    output_dir = ensure_output_dir(args.aligned_verification_data_path or settings.output_dir)

    verification_data = verification_data_from_files(
        args.proving_system,
        args.proof,
        args.proof_generator_addr or settings.proof_generator_addr,
        pub_input_file=args.public_input,
        verification_key_file=args.vk,
        vm_program_code_file=args.vm_program,
    )
    signer = ClientSigner.from_private_key(settings.private_key)

    client = SubmissionClient(signer)
    result = asyncio.run(
        client.submit(args.conn or settings.batcher_url, [verification_data] * args.repetitions)
    )

    if result.status is SubmissionStatus.NO_RESPONSE:
        logger.error("No batch inclusion data was received from the batcher")
        return

    for aligned_verification_data in result.aligned_verification_data:
        save_aligned_verification_data(output_dir, aligned_verification_data)

    if result.omitted:
        logger.error(
            "No batch inclusion data received for submissions %s",
            ", ".join(str(i) for i in result.omitted),
        )


def cmd_verify_proof_onchain(args) -> None:
    """Verify the proof was included in a verified batch on Ethereum."""
    from aligned_sdk.chain.verifier import verify_proof_onchain
    from aligned_sdk.core.storage import load_aligned_verification_data
    from aligned_sdk.protocol.enums import Chain

    settings = get_settings()

    data = load_aligned_verification_data(args.aligned_verification_data)
    chain = Chain(args.chain) if args.chain else settings.chain
    included = asyncio.run(verify_proof_onchain(data, chain, args.rpc or settings.eth_rpc_url))

    if included:
        logger.info("Your proof was verified in Aligned and included in the batch!")
    else:
        logger.info("Your proof was not included in the batch.")


def cmd_get_vk_commitment(args) -> None:
    """Print (and optionally write) the commitment of a verification key file."""
    from aligned_sdk.core.commitment import get_verification_key_commitment
    from aligned_sdk.core.storage import read_file
    from aligned_sdk.protocol.errors import AlignedIOError

    commitment = get_verification_key_commitment(read_file(args.input))
    logger.info("Commitment: %s", commitment)

    if args.output:
        output = Path(args.output)
        try:
            output.write_text(commitment, encoding="utf-8")
        except OSError as e:
            raise AlignedIOError(output, e) from e
