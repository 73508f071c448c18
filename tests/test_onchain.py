"""
Tests for the on-chain batch inclusion call.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from eth_utils import to_checksum_address

from aligned_sdk.chain.verifier import BatchInclusionCall, service_manager_address, verify_proof_onchain
from aligned_sdk.core.commitment import commit
from aligned_sdk.merkle.backend import VerificationCommitmentBatch
from aligned_sdk.merkle.tree import MerkleTree
from aligned_sdk.protocol.enums import Chain
from aligned_sdk.protocol.errors import OnchainCallError
from aligned_sdk.protocol.models import AlignedVerificationData, BatchInclusionData

from conftest import make_groth16, make_sp1


@pytest.fixture
def artifact():
    commitments = [commit(make_sp1(proof=bytes([i]))) for i in range(4)] + [commit(make_groth16())]
    tree = MerkleTree(VerificationCommitmentBatch(), commitments)
    return AlignedVerificationData.from_inclusion(commitments[4], BatchInclusionData.from_tree(tree, 4))


def _mock_w3(result=None, error=None):
    w3 = MagicMock()
    fn = w3.eth.contract.return_value.functions.verifyBatchInclusion
    fn.return_value.call = AsyncMock(return_value=result, side_effect=error)
    return w3, fn


class TestBatchInclusionCall:
    def test_argument_order(self, artifact):
        args = BatchInclusionCall.from_aligned_verification_data(artifact).as_args()
        c = artifact.verification_data_commitment

        assert args == (
            c.proof_commitment,
            c.pub_input_commitment,
            c.proving_system_aux_data_commitment,
            c.proof_generator_addr,
            artifact.batch_merkle_root,
            b"".join(artifact.batch_inclusion_proof.merkle_path),
            4,
        )

    def test_flattened_proof_width(self, artifact):
        call = BatchInclusionCall.from_aligned_verification_data(artifact)
        assert len(call.merkle_proof) == 32 * 3
        assert call.merkle_proof[:32] == artifact.batch_inclusion_proof.merkle_path[0]


class TestVerifyProofOnchain:
    def test_included(self, artifact):
        w3, fn = _mock_w3(result=True)

        assert asyncio.run(verify_proof_onchain(artifact, Chain.DEVNET, "http://unused", w3=w3))
        fn.assert_called_once_with(*BatchInclusionCall.from_aligned_verification_data(artifact).as_args())
        assert w3.eth.contract.call_args.kwargs["address"] == to_checksum_address(
            service_manager_address(Chain.DEVNET)
        )

    def test_not_included(self, artifact):
        w3, _ = _mock_w3(result=False)
        assert not asyncio.run(verify_proof_onchain(artifact, Chain.HOLESKY, "http://unused", w3=w3))

    def test_rpc_failure(self, artifact):
        w3, _ = _mock_w3(error=ConnectionError("refused"))
        with pytest.raises(OnchainCallError):
            asyncio.run(verify_proof_onchain(artifact, Chain.DEVNET, "http://unused", w3=w3))

    def test_contract_addresses(self):
        assert service_manager_address(Chain.DEVNET) == "0x1613beB3B2C4f22Ee086B2b38C1476A3cE7f78E8"
        assert service_manager_address(Chain.HOLESKY) == "0x58F280BeBE9B34c9939C3C39e0890C81f163B623"
