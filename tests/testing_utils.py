"""Testing utilities for deterministic dna checks.

Registries in tests draw randomness from a fixed seed, so the exact bytes
every call produces can be recomputed here and compared.

Usage:
    from tests.testing_utils import TEST_SEED, expected_random, selector_bits_hold

    registry = KittyRegistry(storage, RandomnessSource.fixed(TEST_SEED))
    registry.create("alice")
    assert registry.kitty(0).dna == expected_random("alice", 0)
"""

from __future__ import annotations

from kitty_registry.kitties.kitty import DNA_LENGTH
from kitty_registry.kitties.randomness import encode_seed_material, random_value

TEST_SEED = bytes(range(32))


def expected_random(caller: str, nonce: int, seed: bytes = TEST_SEED) -> bytes:
    """The 16 bytes a RandomnessSource yields for caller at nonce."""
    return random_value(encode_seed_material(seed, caller, nonce))


def selector_bits_hold(
    child: bytes,
    dna_a: bytes,
    dna_b: bytes,
    selector: bytes,
    parent_b_index: int | None = None,
) -> bool:
    """True if every child bit comes from A where selector is 1, else from B.

    parent_b_index pins parent B to one byte, as the legacy rule does.
    """
    for i in range(DNA_LENGTH):
        b = dna_b[i if parent_b_index is None else parent_b_index]
        if child[i] & selector[i] != dna_a[i] & selector[i]:
            return False
        if child[i] & ~selector[i] & 0xFF != b & ~selector[i] & 0xFF:
            return False
    return True
