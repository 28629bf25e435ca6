"""Keyed storage substrate with atomic, nestable transactions.

InMemoryStorage is a flat key/value store. Keys are (item_name, *key_parts)
tuples so every structure shares one namespace, and typed views
(StorageValue, StorageMap, StorageDoubleMap) give each structure its own
get/insert/remove surface.

transaction() opens an overlay: writes land in the overlay, reads see it
(read-your-writes), and the overlay is merged down only when the block
exits without an exception. Anything raised inside discards the overlay.

Thread-safety: NOT thread-safe. The registry applies operations one at a
time, and concurrent callers must synchronize externally.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Generic, Hashable, Iterator, TypeVar

from .kitty import AccountId, Kitty, KittyId

V = TypeVar("V")
K = TypeVar("K", bound=Hashable)
K2 = TypeVar("K2", bound=Hashable)

StorageKey = tuple[Hashable, ...]


class _Removed:
    """Tombstone for a key removed inside an open transaction."""

    def __repr__(self) -> str:
        return "<removed>"


_REMOVED = _Removed()

# Marker stored for set-like double maps ("present").
PRESENT = True


class InMemoryStorage:
    """Point get/insert/remove over a dict, with overlay transactions."""

    _base: dict[StorageKey, Any]
    _overlays: list[dict[StorageKey, Any]]

    def __init__(self) -> None:
        self._base = {}
        self._overlays = []

    # ===== POINT OPERATIONS =====

    def get(self, key: StorageKey, default: Any = None) -> Any:
        for layer in reversed(self._overlays):
            if key in layer:
                value = layer[key]
                return default if value is _REMOVED else value
        return self._base.get(key, default)

    def contains(self, key: StorageKey) -> bool:
        return self.get(key, _REMOVED) is not _REMOVED

    def insert(self, key: StorageKey, value: Any) -> None:
        if self._overlays:
            self._overlays[-1][key] = value
        else:
            self._base[key] = value

    def remove(self, key: StorageKey) -> None:
        if self._overlays:
            self._overlays[-1][key] = _REMOVED
        else:
            self._base.pop(key, None)

    def iter_prefix(self, prefix: StorageKey) -> Iterator[tuple[StorageKey, Any]]:
        """Yield (key, value) for every live key starting with prefix."""
        merged: dict[StorageKey, Any] = {
            k: v for k, v in self._base.items() if k[: len(prefix)] == prefix
        }
        for layer in self._overlays:
            for k, v in layer.items():
                if k[: len(prefix)] == prefix:
                    merged[k] = v
        for k, v in merged.items():
            if v is not _REMOVED:
                yield k, v

    # ===== TRANSACTIONS =====

    @property
    def in_transaction(self) -> bool:
        return bool(self._overlays)

    @contextmanager
    def transaction(self) -> Iterator["InMemoryStorage"]:
        """All-or-nothing block. Nested blocks commit into their parent."""
        self._overlays.append({})
        try:
            yield self
        except BaseException:
            self._overlays.pop()
            raise
        layer = self._overlays.pop()
        for key, value in layer.items():
            if self._overlays:
                self._overlays[-1][key] = value
            elif value is _REMOVED:
                self._base.pop(key, None)
            else:
                self._base[key] = value

    def __len__(self) -> int:
        return sum(1 for _ in self.iter_prefix(()))


class StorageValue(Generic[V]):
    """A single value with a default (e.g., the id counter)."""

    def __init__(self, storage: InMemoryStorage, name: str, default: V) -> None:
        self._storage = storage
        self._key: StorageKey = (name,)
        self._default = default

    def get(self) -> V:
        return self._storage.get(self._key, self._default)

    def put(self, value: V) -> None:
        self._storage.insert(self._key, value)


class StorageMap(Generic[K, V]):
    """key -> value; absent key means no record."""

    def __init__(self, storage: InMemoryStorage, name: str) -> None:
        self._storage = storage
        self._name = name

    def get(self, key: K) -> V | None:
        return self._storage.get((self._name, key))

    def contains(self, key: K) -> bool:
        return self._storage.contains((self._name, key))

    def insert(self, key: K, value: V) -> None:
        self._storage.insert((self._name, key), value)

    def remove(self, key: K) -> None:
        self._storage.remove((self._name, key))

    def items(self) -> list[tuple[K, V]]:
        return [(k[1], v) for k, v in self._storage.iter_prefix((self._name,))]


class StorageDoubleMap(Generic[K, K2, V]):
    """(key1, key2) -> value, enumerable by key1."""

    def __init__(self, storage: InMemoryStorage, name: str) -> None:
        self._storage = storage
        self._name = name

    def get(self, key1: K, key2: K2) -> V | None:
        return self._storage.get((self._name, key1, key2))

    def contains(self, key1: K, key2: K2) -> bool:
        return self._storage.contains((self._name, key1, key2))

    def insert(self, key1: K, key2: K2, value: V) -> None:
        self._storage.insert((self._name, key1, key2), value)

    def remove(self, key1: K, key2: K2) -> None:
        self._storage.remove((self._name, key1, key2))

    def iter_prefix(self, key1: K) -> list[tuple[K2, V]]:
        return [(k[2], v) for k, v in self._storage.iter_prefix((self._name, key1))]


@dataclass
class KittyStorage:
    """The registry's keyed structures, all backed by one storage instance."""

    backend: InMemoryStorage
    kitties: StorageMap[KittyId, Kitty]
    kitties_count: StorageValue[KittyId]
    kitties_owners: StorageMap[KittyId, AccountId]
    owner_kitties: StorageDoubleMap[AccountId, KittyId, bool]
    kitties_parents: StorageMap[KittyId, tuple[KittyId, KittyId]]
    kitties_children: StorageDoubleMap[KittyId, KittyId, bool]
    kitties_breed: StorageDoubleMap[KittyId, KittyId, bool]

    @classmethod
    def create(cls, backend: InMemoryStorage | None = None) -> "KittyStorage":
        backend = backend if backend is not None else InMemoryStorage()
        return cls(
            backend=backend,
            kitties=StorageMap(backend, "Kitties"),
            kitties_count=StorageValue(backend, "KittiesCount", 0),
            kitties_owners=StorageMap(backend, "KittiesOwners"),
            owner_kitties=StorageDoubleMap(backend, "OwnerKitties"),
            kitties_parents=StorageMap(backend, "KittiesParents"),
            kitties_children=StorageDoubleMap(backend, "KittiesChildren"),
            kitties_breed=StorageDoubleMap(backend, "KittiesBreed"),
        )
