"""Deterministic randomness for dna derivation.

A random value is the 16-byte blake2b digest of the seed material:

    seed (per-block seed bytes) || caller (u32 LE length + UTF-8) || nonce (u32 LE)

random_value() is pure, so a replay with the same seed material produces
the same bytes. Unpredictability comes from the seed, which the host
derives per block; uniqueness per call comes from the nonce, which the
host must never repeat within one seed.
"""

from __future__ import annotations

import hashlib
import itertools
import struct
from typing import Callable

from .kitty import DNA_LENGTH

SEED_LENGTH = 32
MAX_NONCE = 0xFFFF_FFFF


def encode_seed_material(seed: bytes, caller: str, nonce: int) -> bytes:
    """Concatenate seed, caller identity and nonce into hashable bytes."""
    if not 0 <= nonce <= MAX_NONCE:
        raise ValueError(f"nonce must fit in u32, got {nonce}")
    caller_bytes = caller.encode("utf-8")
    return (
        seed
        + struct.pack("<I", len(caller_bytes))
        + caller_bytes
        + struct.pack("<I", nonce)
    )


def random_value(seed_material: bytes) -> bytes:
    """Pure 16-byte digest of the seed material."""
    return hashlib.blake2b(seed_material, digest_size=DNA_LENGTH).digest()


def block_seed(global_seed: bytes, block_number: int) -> bytes:
    """Per-block seed: blake2b-256 of the global seed and the block number."""
    return hashlib.blake2b(
        global_seed + struct.pack("<Q", block_number), digest_size=SEED_LENGTH
    ).digest()


class SequentialNonce:
    """Nonce provider that never repeats: 0, 1, 2, ... per instance."""

    def __init__(self, start: int = 0) -> None:
        self._counter = itertools.count(start)

    def __call__(self) -> int:
        return next(self._counter)


class RandomnessSource:
    """Binds random_value() to a host's seed and nonce.

    Args:
        seed_provider: Returns the current seed bytes
        nonce_provider: Returns the nonce for the call in progress. Defaults
            to a SequentialNonce so standalone use never reuses a nonce.
    """

    def __init__(
        self,
        seed_provider: Callable[[], bytes],
        nonce_provider: Callable[[], int] | None = None,
    ) -> None:
        self._seed_provider = seed_provider
        self._nonce_provider = nonce_provider or SequentialNonce()

    @classmethod
    def fixed(cls, seed: bytes, nonce_provider: Callable[[], int] | None = None) -> "RandomnessSource":
        """Source with a constant seed; handy for tests and replays."""
        return cls(lambda: seed, nonce_provider)

    def random_value(self, caller: str) -> bytes:
        """Draw 16 bytes for this caller at the current seed and nonce."""
        material = encode_seed_material(self._seed_provider(), caller, self._nonce_provider())
        return random_value(material)
