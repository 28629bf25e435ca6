"""Kitty record and dna combination rules"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

KittyId = int
AccountId = str

DNA_LENGTH = 16

# Byte of the second parent that the historical breeding rule reads for
# every child byte.
LEGACY_PARENT_B_INDEX = 2


@dataclass(frozen=True)
class Kitty:
    """A kitty's genetic code. Immutable once created."""

    dna: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.dna, (bytes, bytearray)):
            raise TypeError(f"dna must be bytes, got {type(self.dna).__name__}")
        if len(self.dna) != DNA_LENGTH:
            raise ValueError(f"dna must be {DNA_LENGTH} bytes, got {len(self.dna)}")
        object.__setattr__(self, "dna", bytes(self.dna))

    def to_dict(self) -> dict[str, Any]:
        return {"dna": self.dna.hex()}


def combine_dna(dna_a: int, dna_b: int, selector: int) -> int:
    """Take each bit from dna_a where selector has a 1, else from dna_b."""
    return ((selector & dna_a) | (~selector & dna_b)) & 0xFF


def breed_dna(
    dna_a: bytes,
    dna_b: bytes,
    selector: bytes,
    legacy_parent_b_index: bool = False,
) -> bytes:
    """Combine two parents' dna byte by byte under a selector.

    With legacy_parent_b_index, every child byte reads parent B at
    LEGACY_PARENT_B_INDEX instead of at its own position. This keeps
    replays of historical breeding traces byte-identical.
    """
    if not len(dna_a) == len(dna_b) == len(selector) == DNA_LENGTH:
        raise ValueError(f"parents and selector must all be {DNA_LENGTH} bytes")

    child = bytearray(DNA_LENGTH)
    for i in range(DNA_LENGTH):
        b_index = LEGACY_PARENT_B_INDEX if legacy_parent_b_index else i
        child[i] = combine_dna(dna_a[i], dna_b[b_index], selector[i])
    return bytes(child)
