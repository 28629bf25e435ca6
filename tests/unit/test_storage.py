"""Tests for the keyed storage substrate and its transactions."""

import pytest

from kitty_registry.kitties.storage import (
    InMemoryStorage,
    KittyStorage,
    StorageDoubleMap,
    StorageMap,
    StorageValue,
)


@pytest.fixture
def backend() -> InMemoryStorage:
    return InMemoryStorage()


class TestPointOperations:
    """Tests for get, insert, remove and prefix iteration."""

    def test_get_missing_returns_default(self, backend: InMemoryStorage) -> None:
        """Verify missing keys return the supplied default."""
        assert backend.get(("X", 1)) is None
        assert backend.get(("X", 1), "d") == "d"

    def test_insert_get_remove(self, backend: InMemoryStorage) -> None:
        """Verify an inserted key can be removed again."""
        backend.insert(("X", 1), "a")
        assert backend.contains(("X", 1))
        backend.remove(("X", 1))
        assert not backend.contains(("X", 1))

    def test_remove_missing_is_noop(self, backend: InMemoryStorage) -> None:
        """Verify removing an absent key does nothing."""
        backend.remove(("X", 1))
        assert len(backend) == 0

    def test_iter_prefix(self, backend: InMemoryStorage) -> None:
        """Verify prefix iteration only yields keys under that prefix."""
        backend.insert(("D", "alice", 1), True)
        backend.insert(("D", "alice", 2), True)
        backend.insert(("D", "bob", 3), True)
        keys = sorted(k for k, _ in backend.iter_prefix(("D", "alice")))
        assert keys == [("D", "alice", 1), ("D", "alice", 2)]


class TestTransactions:
    """Tests for all-or-nothing transaction blocks."""

    def test_commit_applies_writes(self, backend: InMemoryStorage) -> None:
        """Verify writes are visible inside and kept after a clean exit."""
        with backend.transaction():
            backend.insert(("X", 1), "a")
            assert backend.get(("X", 1)) == "a"
        assert backend.get(("X", 1)) == "a"
        assert not backend.in_transaction

    def test_exception_discards_writes(self, backend: InMemoryStorage) -> None:
        """Verify an exception rolls back every write in the block."""
        backend.insert(("X", 1), "before")
        with pytest.raises(RuntimeError):
            with backend.transaction():
                backend.insert(("X", 1), "during")
                backend.insert(("X", 2), "new")
                raise RuntimeError("boom")
        assert backend.get(("X", 1)) == "before"
        assert not backend.contains(("X", 2))

    def test_removal_inside_transaction_is_visible(self, backend: InMemoryStorage) -> None:
        """Verify a removal hides the key from reads and prefix scans."""
        backend.insert(("X", 1), "a")
        with backend.transaction():
            backend.remove(("X", 1))
            assert not backend.contains(("X", 1))
            assert list(backend.iter_prefix(("X",))) == []
        assert not backend.contains(("X", 1))

    def test_inner_rollback_keeps_outer_writes(self, backend: InMemoryStorage) -> None:
        """Verify a failed nested block leaves the outer block's writes."""
        with backend.transaction():
            backend.insert(("X", 1), "outer")
            with pytest.raises(ValueError):
                with backend.transaction():
                    backend.insert(("X", 2), "inner")
                    raise ValueError
            assert not backend.contains(("X", 2))
        assert backend.get(("X", 1)) == "outer"
        assert not backend.contains(("X", 2))

    def test_inner_commit_rolled_back_by_outer(self, backend: InMemoryStorage) -> None:
        """Verify a committed nested block is undone by its parent failing."""
        with pytest.raises(ValueError):
            with backend.transaction():
                with backend.transaction():
                    backend.insert(("X", 1), "inner")
                raise ValueError
        assert not backend.contains(("X", 1))


class TestTypedViews:
    """Tests for StorageValue, StorageMap and StorageDoubleMap."""

    def test_value_default(self, backend: InMemoryStorage) -> None:
        """Verify a StorageValue starts at its default."""
        count = StorageValue(backend, "Count", 0)
        assert count.get() == 0
        count.put(5)
        assert count.get() == 5

    def test_map_items(self, backend: InMemoryStorage) -> None:
        """Test StorageMap.items lists every entry."""
        owners: StorageMap[int, str] = StorageMap(backend, "Owners")
        owners.insert(1, "alice")
        owners.insert(2, "bob")
        assert sorted(owners.items()) == [(1, "alice"), (2, "bob")]

    def test_double_map_prefix(self, backend: InMemoryStorage) -> None:
        """Verify double-map prefix iteration returns second keys."""
        index: StorageDoubleMap[str, int, bool] = StorageDoubleMap(backend, "Index")
        index.insert("alice", 1, True)
        index.insert("alice", 4, True)
        index.insert("bob", 2, True)
        assert sorted(k for k, _ in index.iter_prefix("alice")) == [1, 4]
        index.remove("alice", 1)
        assert not index.contains("alice", 1)

    def test_structures_do_not_collide(self) -> None:
        """Verify the seven structures keep separate key spaces."""
        storage = KittyStorage.create()
        storage.kitties_children.insert(0, 1, True)
        assert not storage.kitties_breed.contains(0, 1)
        assert storage.kitties_count.get() == 0
