"""Kitty id allocation.

Ids are handed out as 0, 1, 2, ... from the KittiesCount storage value.
The counter never wraps: once it equals the id type's maximum value,
every allocation fails with CountOverflow. That maximum itself is never
assigned, matching an unsigned counter that must still be able to hold
"next id" after the last allocation.

Usage:
    counter = KittyIdCounter(storage.kitties_count, max_kitty_id=2**32 - 1)
    kitty_id = counter.next_id()   # raises CountOverflow at the ceiling
    ...                            # write the kitty
    counter.advance(kitty_id)      # counter is now kitty_id + 1
"""

from __future__ import annotations

from .errors import CountOverflow
from .kitty import KittyId
from .storage import StorageValue

DEFAULT_ID_BITS = 32


class KittyIdCounter:
    """Monotonic id source over a storage value.

    Thread-safety: This class is NOT thread-safe. Concurrent access should
    be synchronized externally.
    """

    def __init__(
        self,
        count: StorageValue[KittyId],
        max_kitty_id: int = (1 << DEFAULT_ID_BITS) - 1,
    ) -> None:
        if max_kitty_id < 0:
            raise ValueError(f"max_kitty_id must be non-negative, got {max_kitty_id}")
        self._count = count
        self.max_kitty_id = max_kitty_id

    def current(self) -> KittyId:
        """The next unassigned id, which is also the number of kitties so far."""
        return self._count.get()

    def next_id(self) -> KittyId:
        """Return the id the next kitty will get, without reserving it.

        Raises:
            CountOverflow: If the counter is already at max_kitty_id
        """
        kitty_id = self.current()
        if kitty_id >= self.max_kitty_id:
            raise CountOverflow(self.max_kitty_id)
        return kitty_id

    def advance(self, kitty_id: KittyId) -> None:
        """Record that kitty_id is now taken."""
        if kitty_id != self.current():
            raise ValueError(
                f"Counter is at {self.current()}, cannot advance past {kitty_id}"
            )
        self._count.put(kitty_id + 1)
