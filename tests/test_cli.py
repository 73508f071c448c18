"""
Tests for the aligned CLI.
"""

import logging

import pytest
from eth_utils import keccak

from aligned_sdk.cli.main import main
from aligned_sdk.core import client as client_module
from aligned_sdk.chain import verifier as verifier_module
from aligned_sdk.core.commitment import commit
from aligned_sdk.core.storage import artifact_file_name, save_aligned_verification_data
from aligned_sdk.merkle.backend import VerificationCommitmentBatch
from aligned_sdk.merkle.tree import MerkleTree
from aligned_sdk.protocol.models import AlignedVerificationData, BatchInclusionData, SubmissionResult

from conftest import make_sp1


def _artifact(vd, index=0, size=2):
    commitments = [commit(vd)] * size
    tree = MerkleTree(VerificationCommitmentBatch(), commitments)
    return AlignedVerificationData.from_inclusion(commit(vd), BatchInclusionData.from_tree(tree, index))


@pytest.fixture
def proof_files(tmp_path):
    proof = tmp_path / "proof.bin"
    proof.write_bytes(b"\x01\x02\x03")
    elf = tmp_path / "program.elf"
    elf.write_bytes(b"\x09\x09")
    return proof, elf


@pytest.fixture
def no_network(monkeypatch):
    async def fail(self, url, verification_data):
        raise AssertionError("batcher must not be contacted")

    monkeypatch.setattr(client_module.SubmissionClient, "submit", fail)


class TestGetVkCommitment:
    def test_writes_hex_commitment(self, tmp_path):
        vk = tmp_path / "vk.bin"
        vk.write_bytes(b"key material")
        out = tmp_path / "vk.commitment"

        main(["get-vk-commitment", "--input", str(vk), "--output", str(out)])

        assert out.read_text() == keccak(b"key material").hex()

    def test_missing_input(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            main(["get-vk-commitment", "--input", str(tmp_path / "absent")])
        assert exc.value.code == 1


class TestSubmitValidation:
    def test_sp1_without_program(self, tmp_path, proof_files, no_network):
        proof, _ = proof_files
        with pytest.raises(SystemExit) as exc:
            main([
                "submit",
                "--proving_system", "SP1",
                "--proof", str(proof),
                "--aligned_verification_data_path", str(tmp_path / "out"),
            ])
        assert exc.value.code == 1

    def test_invalid_proving_system(self, tmp_path, proof_files, no_network):
        proof, _ = proof_files
        with pytest.raises(SystemExit) as exc:
            main([
                "submit",
                "--proving_system", "Plonky3",
                "--proof", str(proof),
                "--aligned_verification_data_path", str(tmp_path / "out"),
            ])
        assert exc.value.code == 1

    def test_zero_repetitions(self, proof_files, no_network):
        proof, elf = proof_files
        with pytest.raises(SystemExit) as exc:
            main([
                "submit",
                "--proving_system", "SP1",
                "--proof", str(proof),
                "--vm_program", str(elf),
                "--repetitions", "0",
            ])
        assert exc.value.code == 1


class TestSubmit:
    def test_writes_one_file_per_response(self, tmp_path, proof_files, monkeypatch):
        proof, elf = proof_files
        seen = {}

        async def fake_submit(self, url, verification_data):
            seen["url"] = url
            seen["count"] = len(verification_data)
            seen["vd"] = verification_data[0]
            return SubmissionResult(
                aligned_verification_data=[
                    _artifact(verification_data[0], 0),
                    _artifact(verification_data[1], 1),
                ]
            )

        monkeypatch.setattr(client_module.SubmissionClient, "submit", fake_submit)
        out = tmp_path / "out"

        main([
            "submit",
            "--conn", "ws://batcher:9000",
            "--proving_system", "SP1",
            "--proof", str(proof),
            "--vm_program", str(elf),
            "--repetitions", "2",
            "--aligned_verification_data_path", str(out),
        ])

        assert seen["url"] == "ws://batcher:9000"
        assert seen["count"] == 2
        written = sorted(p.name for p in out.iterdir())
        vd = seen["vd"]
        assert written == sorted([artifact_file_name(_artifact(vd, 0)), artifact_file_name(_artifact(vd, 1))])

    def test_no_response_writes_nothing(self, tmp_path, proof_files, monkeypatch, caplog):
        proof, elf = proof_files

        async def fake_submit(self, url, verification_data):
            return SubmissionResult(omitted=[0])

        monkeypatch.setattr(client_module.SubmissionClient, "submit", fake_submit)
        out = tmp_path / "out"

        with caplog.at_level(logging.ERROR):
            main([
                "submit",
                "--proving_system", "SP1",
                "--proof", str(proof),
                "--vm_program", str(elf),
                "--aligned_verification_data_path", str(out),
            ])

        assert list(out.iterdir()) == []
        assert "No batch inclusion data was received" in caplog.text


class TestVerifyProofOnchain:
    def test_reports_inclusion(self, tmp_path, monkeypatch, caplog):
        path = save_aligned_verification_data(tmp_path, _artifact(make_sp1()))
        calls = {}

        async def fake_verify(data, chain, eth_rpc_url, **kwargs):
            calls["chain"] = chain.value
            calls["rpc"] = eth_rpc_url
            return True

        monkeypatch.setattr(verifier_module, "verify_proof_onchain", fake_verify)

        with caplog.at_level(logging.INFO):
            main([
                "verify-proof-onchain",
                "--aligned-verification-data", str(path),
                "--rpc", "http://node:8545",
                "--chain", "holesky",
            ])

        assert calls == {"chain": "holesky", "rpc": "http://node:8545"}
        assert "included in the batch!" in caplog.text

    def test_missing_artifact(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            main(["verify-proof-onchain", "--aligned-verification-data", str(tmp_path / "x.json")])
        assert exc.value.code == 1
