"""
Merkle Tree Implementation

Array-backed binary Merkle tree, generic over the leaf/parent hash backend.

Key features:
- Pluggable backend (hash_data / hash_new_parent)
- Deterministic padding: leaf digests are padded to the next power of two
  by repeating the last leaf digest
- Sibling-path inclusion proofs ordered from leaf to root
- Index-bit verification (bit k of the index selects the ordering at level k)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Protocol, Sequence, TypeVar

T = TypeVar("T")
T_contra = TypeVar("T_contra", contravariant=True)


# ===========================================================================
# Backend Protocol
# ===========================================================================


class MerkleBackend(Protocol[T_contra]):
    """
    Hashing capability for a Merkle tree.

    Implementations MUST be pure: the same input always produces the same
    32-byte node.
    """

    def hash_data(self, leaf: T_contra) -> bytes:
        """Hash a leaf payload into a node."""
        ...

    def hash_new_parent(self, left: bytes, right: bytes) -> bytes:
        """Hash two child nodes into their parent."""
        ...


# ===========================================================================
# Merkle Proof
# ===========================================================================


@dataclass
class MerkleProof:
    """
    Inclusion proof for a leaf in a Merkle tree.

    Attributes:
        merkle_path: Sibling nodes, one per level, from leaf to root
    """
    merkle_path: List[bytes] = field(default_factory=list)

    def flatten(self) -> bytes:
        """All sibling nodes concatenated in path order."""
        return b"".join(self.merkle_path)

    def to_dict(self) -> Dict[str, Any]:
        return {"merkle_path": [list(node) for node in self.merkle_path]}


# ===========================================================================
# Merkle Tree
# ===========================================================================


def _next_power_of_two(n: int) -> int:
    size = 1
    while size < n:
        size *= 2
    return size


class MerkleTree(Generic[T]):
    """
    Merkle tree built once from an ordered sequence of leaves.

    The tree is immutable after construction. ``levels[0]`` holds the padded
    leaf digests and ``levels[-1]`` holds the root.

    Usage:
        tree = MerkleTree(backend, commitments)
        proof = tree.get_proof_by_pos(3)
        assert verify_merkle_proof(backend, tree.root, commitments[3], 3, proof)
    """

    def __init__(self, backend: MerkleBackend[T], leaves: Sequence[T]):
        if len(leaves) == 0:
            raise ValueError("Cannot build tree with no leaves")

        self._backend = backend
        self._leaf_count = len(leaves)

        hashed = [backend.hash_data(leaf) for leaf in leaves]
        # Pad with the last leaf digest up to a power of two
        hashed.extend([hashed[-1]] * (_next_power_of_two(len(hashed)) - len(hashed)))

        self._levels: List[List[bytes]] = [hashed]
        current = hashed
        while len(current) > 1:
            current = [
                backend.hash_new_parent(current[i], current[i + 1])
                for i in range(0, len(current), 2)
            ]
            self._levels.append(current)

    @property
    def root(self) -> bytes:
        return self._levels[-1][0]

    @property
    def leaf_count(self) -> int:
        return self._leaf_count

    @property
    def depth(self) -> int:
        return len(self._levels) - 1

    def get_leaf_hash(self, index: int) -> bytes:
        self._check_index(index)
        return self._levels[0][index]

    def get_proof_by_pos(self, index: int) -> MerkleProof:
        """
        Get the inclusion proof for the leaf at ``index``.

        Raises:
            IndexError: If index is out of range
        """
        self._check_index(index)

        path: List[bytes] = []
        pos = index
        for level in self._levels[:-1]:
            path.append(level[pos ^ 1])
            pos //= 2

        return MerkleProof(merkle_path=path)

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= self._leaf_count:
            raise IndexError(f"Invalid leaf index: {index}")


# ===========================================================================
# Verification Functions
# ===========================================================================


def compute_root_from_proof(
    backend: MerkleBackend[Any], leaf_hash: bytes, index: int, proof: MerkleProof
) -> bytes:
    """Walk a leaf digest up to the root using the sibling path."""
    current = leaf_hash
    pos = index
    for sibling in proof.merkle_path:
        if pos % 2 == 0:
            current = backend.hash_new_parent(current, sibling)
        else:
            current = backend.hash_new_parent(sibling, current)
        pos //= 2
    return current


def verify_merkle_proof(
    backend: MerkleBackend[T], root: bytes, leaf: T, index: int, proof: MerkleProof
) -> bool:
    """
    Verify that ``leaf`` sits at ``index`` under ``root``.

    Returns:
        True if the recomputed root equals ``root``
    """
    return verify_leaf_hash(backend, root, backend.hash_data(leaf), index, proof)


def verify_leaf_hash(
    backend: MerkleBackend[Any], root: bytes, leaf_hash: bytes, index: int, proof: MerkleProof
) -> bool:
    """Same as verify_merkle_proof, for an already hashed leaf."""
    if index < 0 or index >= (1 << len(proof.merkle_path)):
        return False
    return compute_root_from_proof(backend, leaf_hash, index, proof) == root
