"""Runtime host - applies calls to the registry one at a time

The runtime stands in for the ledger host around the registry. It tracks
a block number and the index of the current call within the block,
derives the per-block random seed, and applies each call as one storage
transaction. A rejected call is rolled back, its buffered events are
dropped, and the failure comes back as a DispatchResult rather than an
exception.

The call index is the randomness nonce, so the registry itself stays
private: mutations go through dispatch(), and the registry property is
a query-only RegistryView.
"""

from __future__ import annotations

__all__ = [
    "Runtime",
    "DispatchResult",
    "EventRecord",
]

import logging
from dataclasses import dataclass
from typing import Any

from ..config import get_validated_config
from ..config_schema import AppConfig
from .calls import BreedCall, Call, CreateCall, TransferCall
from .errors import KittyError
from .events import BufferedEventSink, Event, EventSink
from .logger import EventLogger, configure_logging
from .randomness import RandomnessSource, block_seed
from .registry import KittyRegistry, RegistryView
from .storage import KittyStorage

logger = logging.getLogger(__name__)


@dataclass
class DispatchResult:
    """Outcome of one call.

    Error fields for structured error handling:
    - error_code: Machine-readable error code (e.g., "not_owner")
    - error_category: Error category (e.g., "permission")
    - retriable: Always False for registry errors
    - error_details: Additional context for programmatic handling
    """

    success: bool
    message: str
    data: dict[str, Any] | None = None
    error_code: str | None = None
    error_category: str | None = None
    retriable: bool = False
    error_details: dict[str, Any] | None = None

    @classmethod
    def from_error(cls, error: KittyError) -> "DispatchResult":
        response = error.to_response()
        return cls(
            success=False,
            message=response.error,
            error_code=response.code,
            error_category=response.category,
            retriable=response.retriable,
            error_details=response.details,
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"success": self.success, "message": self.message, "data": self.data}
        if self.error_code is not None:
            result["error_code"] = self.error_code
            result["error_category"] = self.error_category
            result["retriable"] = self.retriable
        if self.error_details is not None:
            result["error_details"] = self.error_details
        return result


@dataclass(frozen=True)
class EventRecord:
    """An emitted event with where it happened."""

    block_number: int
    extrinsic_index: int
    sequence: int
    event: Event

    def to_dict(self) -> dict[str, Any]:
        return {
            "block_number": self.block_number,
            "extrinsic_index": self.extrinsic_index,
            "sequence": self.sequence,
            **self.event.to_dict(),
        }


class Runtime:
    """Sequential host for one KittyRegistry.

    Args:
        config: Validated config (default: loaded from config file)
        event_sink: Optional extra sink (e.g., EventLogger) that receives
            every committed event
        block_number: Starting block
    """

    block_number: int
    extrinsic_index: int

    def __init__(
        self,
        config: AppConfig | None = None,
        event_sink: EventSink | None = None,
        block_number: int = 0,
    ) -> None:
        self.config = config if config is not None else get_validated_config()
        self.block_number = block_number
        self.extrinsic_index = 0
        self._global_seed = self.config.randomness.global_seed_bytes
        self._seed = block_seed(self._global_seed, block_number)
        self._records: list[EventRecord] = []
        self._sequence = 0
        self._external_sink = event_sink
        self._buffer = BufferedEventSink(self)

        self._storage = KittyStorage.create()
        self._randomness = RandomnessSource(
            seed_provider=lambda: self._seed,
            nonce_provider=lambda: self.extrinsic_index,
        )
        self._registry = KittyRegistry(
            self._storage,
            self._randomness,
            events=self._buffer,
            max_kitty_id=self.config.registry.max_kitty_id,
            legacy_parent_b_index=self.config.breeding.legacy_parent_b_index,
            require_parent_ownership=self.config.breeding.require_parent_ownership,
        )
        self._view = RegistryView(self._registry)

    @classmethod
    def from_config(
        cls, config: AppConfig | None = None, block_number: int = 0
    ) -> "Runtime":
        """Build a runtime with logging set up from config.

        Applies logging.level to the kitty_registry loggers and, when
        logging.output_file is set, attaches an EventLogger writing there.
        """
        config = config if config is not None else get_validated_config()
        configure_logging(config.logging.level)
        event_sink: EventSink | None = None
        if config.logging.output_file:
            event_sink = EventLogger(config.logging.output_file)
        return cls(config, event_sink=event_sink, block_number=block_number)

    @property
    def registry(self) -> RegistryView:
        return self._view

    @property
    def random_seed(self) -> bytes:
        return self._seed

    # ===== BLOCKS =====

    def next_block(self) -> None:
        """Start a new block: fresh seed, call index back to 0."""
        self.block_number += 1
        self.extrinsic_index = 0
        self._seed = block_seed(self._global_seed, self.block_number)

    def run_to_block(self, n: int) -> None:
        while self.block_number < n:
            self.next_block()

    # ===== DISPATCH =====

    def dispatch(self, call: Call) -> DispatchResult:
        """Apply one call atomically; never raises for registry errors."""
        try:
            with self._storage.backend.transaction():
                data = self._apply(call)
        except KittyError as e:
            self._buffer.discard()
            logger.info(
                "Rejected %s from %s: %s", call.call_type.value, call.caller, e.message
            )
            result = DispatchResult.from_error(e)
        except Exception:
            self._buffer.discard()
            raise
        else:
            self._buffer.flush()
            result = DispatchResult(success=True, message=f"{call.call_type.value} ok", data=data)
        finally:
            self.extrinsic_index += 1
        return result

    def _apply(self, call: Call) -> dict[str, Any]:
        if isinstance(call, CreateCall):
            kitty_id = self._registry.create(call.caller)
            return {"kitty_id": kitty_id}
        if isinstance(call, TransferCall):
            self._registry.transfer(call.caller, call.to, call.kitty_id)
            return {"kitty_id": call.kitty_id, "to": call.to}
        if isinstance(call, BreedCall):
            kitty_id = self._registry.breed(call.caller, call.kitty_id_a, call.kitty_id_b)
            return {"kitty_id": kitty_id}
        raise TypeError(f"Unsupported call: {type(call).__name__}")

    def create(self, caller: str) -> DispatchResult:
        return self.dispatch(CreateCall(caller))

    def transfer(self, caller: str, to: str, kitty_id: int) -> DispatchResult:
        return self.dispatch(TransferCall(caller, to, kitty_id))

    def breed(self, caller: str, kitty_id_a: int, kitty_id_b: int) -> DispatchResult:
        return self.dispatch(BreedCall(caller, kitty_id_a, kitty_id_b))

    # ===== EVENTS =====

    def deposit(self, event: Event) -> None:
        """Receives committed events from the buffer."""
        self._sequence += 1
        record = EventRecord(self.block_number, self.extrinsic_index, self._sequence, event)
        self._records.append(record)
        if self._external_sink is not None:
            self._external_sink.deposit(event)

    def events(self) -> list[EventRecord]:
        return list(self._records)

    def reset_events(self) -> None:
        self._records.clear()
