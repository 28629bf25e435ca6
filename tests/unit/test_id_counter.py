"""Tests for kitty id allocation."""

import pytest

from kitty_registry.kitties.errors import CountOverflow
from kitty_registry.kitties.id_counter import KittyIdCounter
from kitty_registry.kitties.storage import KittyStorage


def _counter(max_kitty_id: int = 3) -> KittyIdCounter:
    return KittyIdCounter(KittyStorage.create().kitties_count, max_kitty_id)


class TestKittyIdCounter:
    """Tests for id allocation and overflow."""

    def test_starts_at_zero(self) -> None:
        """Verify a fresh counter is at 0."""
        assert _counter().current() == 0

    def test_next_id_does_not_reserve(self) -> None:
        """Verify next_id alone does not move the counter."""
        counter = _counter()
        assert counter.next_id() == 0
        assert counter.next_id() == 0

    def test_ids_are_sequential(self) -> None:
        """Verify advance hands out 0, 1, 2 in order."""
        counter = _counter()
        ids = []
        for _ in range(3):
            kitty_id = counter.next_id()
            counter.advance(kitty_id)
            ids.append(kitty_id)
        assert ids == [0, 1, 2]
        assert counter.current() == 3

    def test_overflow_at_max(self) -> None:
        """Verify the max value itself is never handed out."""
        counter = _counter(max_kitty_id=1)
        counter.advance(counter.next_id())
        with pytest.raises(CountOverflow):
            counter.next_id()
        assert counter.current() == 1

    def test_advance_must_match_current(self) -> None:
        """Verify advancing with a stale id is refused."""
        counter = _counter()
        with pytest.raises(ValueError):
            counter.advance(5)

    def test_default_max_is_u32(self) -> None:
        """Verify the default ceiling is the u32 maximum."""
        counter = KittyIdCounter(KittyStorage.create().kitties_count)
        assert counter.max_kitty_id == 2**32 - 1

    def test_negative_max_rejected(self) -> None:
        """Verify a negative ceiling is refused."""
        with pytest.raises(ValueError):
            _counter(max_kitty_id=-1)
