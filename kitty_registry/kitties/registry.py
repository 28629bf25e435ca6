"""Kitty registry - creation, ownership and breeding

All kitty state lives in KittyStorage and is written only from here.
Paired structures are updated together by private helpers, inside one
storage transaction per operation:

- _insert_kitty: kitty record + counter + ownership map + owner index
- _set_owner: ownership map + both owner index entries
- _record_breeding: parentage + children index + breed-pair index

Every precondition is checked before the first write, and the transaction
discards any write if something still raises, so a failed call never
leaves half-updated indices.
"""

from __future__ import annotations

import logging

from .errors import InvalidKittyId, NotOwner, RequireDifferentParents
from .events import Bred, Created, EventSink, MemoryEventSink, Transferred
from .id_counter import KittyIdCounter
from .kitty import AccountId, Kitty, KittyId, breed_dna
from .randomness import RandomnessSource
from .storage import PRESENT, KittyStorage

logger = logging.getLogger(__name__)


class KittyRegistry:
    """Creates, transfers and breeds kitties.

    Args:
        storage: The registry's keyed structures
        randomness: Source of 16-byte random values per caller
        events: Receives Created/Transferred/Bred notifications
        max_kitty_id: Ceiling of the id type; see KittyIdCounter
        legacy_parent_b_index: Reproduce the historical breeding rule that
            reads parent B at byte 2 for every child byte
        require_parent_ownership: Only let owners of both parents breed

    Thread-safety: NOT thread-safe. Operations must be applied one at a time.
    """

    def __init__(
        self,
        storage: KittyStorage,
        randomness: RandomnessSource,
        events: EventSink | None = None,
        max_kitty_id: int = (1 << 32) - 1,
        legacy_parent_b_index: bool = False,
        require_parent_ownership: bool = False,
    ) -> None:
        self._storage = storage
        self._randomness = randomness
        self._events: EventSink = events if events is not None else MemoryEventSink()
        self._counter = KittyIdCounter(storage.kitties_count, max_kitty_id)
        self.legacy_parent_b_index = legacy_parent_b_index
        self.require_parent_ownership = require_parent_ownership

    @property
    def max_kitty_id(self) -> int:
        return self._counter.max_kitty_id

    # ===== OPERATIONS =====

    def create(self, caller: AccountId) -> KittyId:
        """Create a kitty with random dna, owned by caller.

        Raises:
            CountOverflow: If the id space is exhausted
        """
        with self._storage.backend.transaction():
            kitty_id = self._counter.next_id()
            dna = self._randomness.random_value(caller)
            self._insert_kitty(caller, kitty_id, Kitty(dna))
            self._events.deposit(Created(caller, kitty_id))
        logger.debug("%s created kitty %d", caller, kitty_id)
        return kitty_id

    def transfer(self, caller: AccountId, to: AccountId, kitty_id: KittyId) -> None:
        """Give caller's kitty to another account.

        Raises:
            InvalidKittyId: If the kitty does not exist
            NotOwner: If caller is not the kitty's owner
        """
        owner = self._storage.kitties_owners.get(kitty_id)
        if owner is None:
            raise InvalidKittyId(kitty_id)
        if owner != caller:
            raise NotOwner(caller, kitty_id)

        with self._storage.backend.transaction():
            self._set_owner(kitty_id, caller, to)
            self._events.deposit(Transferred(caller, to, kitty_id))
        logger.debug("%s transferred kitty %d to %s", caller, kitty_id, to)

    def breed(self, caller: AccountId, kitty_id_a: KittyId, kitty_id_b: KittyId) -> KittyId:
        """Create a child of two existing kitties, owned by caller.

        Raises:
            InvalidKittyId: If either parent does not exist
            RequireDifferentParents: If both ids are the same
            NotOwner: If require_parent_ownership is set and caller
                does not own both parents
            CountOverflow: If the id space is exhausted
        """
        kitty_a = self._storage.kitties.get(kitty_id_a)
        if kitty_a is None:
            raise InvalidKittyId(kitty_id_a)
        kitty_b = self._storage.kitties.get(kitty_id_b)
        if kitty_b is None:
            raise InvalidKittyId(kitty_id_b)
        if kitty_id_a == kitty_id_b:
            raise RequireDifferentParents(kitty_id_a)
        if self.require_parent_ownership:
            for parent_id in (kitty_id_a, kitty_id_b):
                if self._storage.kitties_owners.get(parent_id) != caller:
                    raise NotOwner(caller, parent_id)

        with self._storage.backend.transaction():
            kitty_id = self._counter.next_id()
            selector = self._randomness.random_value(caller)
            dna = breed_dna(
                kitty_a.dna,
                kitty_b.dna,
                selector,
                legacy_parent_b_index=self.legacy_parent_b_index,
            )
            self._insert_kitty(caller, kitty_id, Kitty(dna))
            self._record_breeding(kitty_id, kitty_id_a, kitty_id_b)
            self._events.deposit(Bred(caller, kitty_id, kitty_id_a, kitty_id_b))
        logger.debug(
            "%s bred kitty %d from %d and %d", caller, kitty_id, kitty_id_a, kitty_id_b
        )
        return kitty_id

    # ===== QUERIES =====

    def kitty(self, kitty_id: KittyId) -> Kitty | None:
        return self._storage.kitties.get(kitty_id)

    def kitties_count(self) -> int:
        """Number of kitties ever created; also the next id to assign."""
        return self._counter.current()

    def owner_of(self, kitty_id: KittyId) -> AccountId | None:
        return self._storage.kitties_owners.get(kitty_id)

    def owns(self, owner: AccountId, kitty_id: KittyId) -> bool:
        """Owner index lookup."""
        return self._storage.owner_kitties.contains(owner, kitty_id)

    def kitties_of(self, owner: AccountId) -> list[KittyId]:
        return sorted(k for k, _ in self._storage.owner_kitties.iter_prefix(owner))

    def parents_of(self, kitty_id: KittyId) -> tuple[KittyId, KittyId] | None:
        return self._storage.kitties_parents.get(kitty_id)

    def children_of(self, kitty_id: KittyId) -> list[KittyId]:
        return sorted(k for k, _ in self._storage.kitties_children.iter_prefix(kitty_id))

    def is_child_of(self, parent_id: KittyId, child_id: KittyId) -> bool:
        return self._storage.kitties_children.contains(parent_id, child_id)

    def bred_together(self, kitty_id_a: KittyId, kitty_id_b: KittyId) -> bool:
        return self._storage.kitties_breed.contains(kitty_id_a, kitty_id_b)

    def breeding_partners(self, kitty_id: KittyId) -> list[KittyId]:
        return sorted(k for k, _ in self._storage.kitties_breed.iter_prefix(kitty_id))

    # ===== PAIRED WRITES =====

    def _insert_kitty(self, owner: AccountId, kitty_id: KittyId, kitty: Kitty) -> None:
        self._storage.kitties.insert(kitty_id, kitty)
        self._counter.advance(kitty_id)
        self._storage.kitties_owners.insert(kitty_id, owner)
        self._storage.owner_kitties.insert(owner, kitty_id, PRESENT)

    def _set_owner(self, kitty_id: KittyId, from_id: AccountId, to_id: AccountId) -> None:
        # Remove before insert so a self-transfer keeps its single entry.
        self._storage.kitties_owners.insert(kitty_id, to_id)
        self._storage.owner_kitties.remove(from_id, kitty_id)
        self._storage.owner_kitties.insert(to_id, kitty_id, PRESENT)

    def _record_breeding(self, child_id: KittyId, parent_a: KittyId, parent_b: KittyId) -> None:
        self._storage.kitties_parents.insert(child_id, (parent_a, parent_b))
        self._storage.kitties_children.insert(parent_a, child_id, PRESENT)
        self._storage.kitties_children.insert(parent_b, child_id, PRESENT)
        self._storage.kitties_breed.insert(parent_a, parent_b, PRESENT)
        self._storage.kitties_breed.insert(parent_b, parent_a, PRESENT)


class RegistryView:
    """Query-only window onto a KittyRegistry.

    Hosts hand this out instead of the registry itself, so every mutation
    goes through the host and draws a fresh nonce.
    """

    __slots__ = ("_registry",)

    def __init__(self, registry: KittyRegistry) -> None:
        self._registry = registry

    @property
    def max_kitty_id(self) -> int:
        return self._registry.max_kitty_id

    def kitty(self, kitty_id: KittyId) -> Kitty | None:
        return self._registry.kitty(kitty_id)

    def kitties_count(self) -> int:
        return self._registry.kitties_count()

    def owner_of(self, kitty_id: KittyId) -> AccountId | None:
        return self._registry.owner_of(kitty_id)

    def owns(self, owner: AccountId, kitty_id: KittyId) -> bool:
        return self._registry.owns(owner, kitty_id)

    def kitties_of(self, owner: AccountId) -> list[KittyId]:
        return self._registry.kitties_of(owner)

    def parents_of(self, kitty_id: KittyId) -> tuple[KittyId, KittyId] | None:
        return self._registry.parents_of(kitty_id)

    def children_of(self, kitty_id: KittyId) -> list[KittyId]:
        return self._registry.children_of(kitty_id)

    def is_child_of(self, parent_id: KittyId, child_id: KittyId) -> bool:
        return self._registry.is_child_of(parent_id, child_id)

    def bred_together(self, kitty_id_a: KittyId, kitty_id_b: KittyId) -> bool:
        return self._registry.bred_together(kitty_id_a, kitty_id_b)

    def breeding_partners(self, kitty_id: KittyId) -> list[KittyId]:
        return self._registry.breeding_partners(kitty_id)
