# aligned_sdk/cli/main.py

"""
Aligned CLI Tool
----------------

Provides:
  - Submitting proofs to the batcher
  - Checking batch inclusion on-chain
  - Computing verification key commitments
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from aligned_sdk.cli.commands import cmd_get_vk_commitment, cmd_submit, cmd_verify_proof_onchain
from aligned_sdk.core.settings import get_settings
from aligned_sdk.protocol.enums import Chain
from aligned_sdk.protocol.errors import AlignedError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="aligned", description="Aligned batcher client")
    sub = parser.add_subparsers(dest="command", required=True)

    submit = sub.add_parser("submit", help="Submit proof to the batcher")
    submit.add_argument("--conn", default=None, help="Batcher address (default ws://localhost:8080)")
    submit.add_argument("--proving_system", required=True, help="Proving system")
    submit.add_argument("--proof", required=True, help="Proof file path")
    submit.add_argument("--public_input", default=None, help="Public input file name")
    submit.add_argument("--vk", default=None, help="Verification key file name")
    submit.add_argument("--vm_program", default=None, help="VM program code file name")
    submit.add_argument("--repetitions", type=int, default=1, help="Number of repetitions")
    submit.add_argument("--proof_generator_addr", default=None, help="Proof generator address")
    submit.add_argument(
        "--aligned_verification_data_path",
        default=None,
        help="Aligned verification data directory path",
    )
    submit.set_defaults(func=cmd_submit)

    verify = sub.add_parser(
        "verify-proof-onchain",
        help="Verify the proof was included in a verified batch on Ethereum",
    )
    verify.add_argument(
        "--aligned-verification-data",
        dest="aligned_verification_data",
        required=True,
        help="Aligned verification data file",
    )
    verify.add_argument("--rpc", default=None, help="Ethereum RPC provider address")
    verify.add_argument(
        "--chain",
        choices=[c.value for c in Chain],
        default=None,
        help="The Ethereum network's name",
    )
    verify.set_defaults(func=cmd_verify_proof_onchain)

    vk = sub.add_parser("get-vk-commitment", help="Create verification key commitment")
    vk.add_argument("--input", required=True, help="File name")
    vk.add_argument("--output", default=None, help="Output file")
    vk.set_defaults(func=cmd_get_vk_commitment)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    if getattr(args, "repetitions", 1) < 1:
        print("Error: --repetitions must be at least 1", file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(
        level=get_settings().log_level,
        format="[%(asctime)s %(levelname)s %(name)s] %(message)s",
    )

    try:
        args.func(args)
    except AlignedError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
