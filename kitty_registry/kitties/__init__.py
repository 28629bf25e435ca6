# Kitty registry core
from .kitty import Kitty, KittyId, AccountId, DNA_LENGTH, combine_dna, breed_dna
from .errors import (
    ErrorCategory, ErrorCode, ErrorResponse,
    KittyError, CountOverflow, InvalidKittyId, NotOwner, RequireDifferentParents,
)
from .events import (
    Event, EventType, Created, Transferred, Bred,
    EventSink, MemoryEventSink, BufferedEventSink,
)
from .storage import InMemoryStorage, KittyStorage
from .id_counter import KittyIdCounter
from .randomness import RandomnessSource, random_value, encode_seed_material, block_seed
from .registry import KittyRegistry, RegistryView
from .calls import Call, CallType, CreateCall, TransferCall, BreedCall, parse_call, parse_call_from_json
from .logger import EventLogger
from .runtime import Runtime, DispatchResult, EventRecord

__all__ = [
    "Kitty", "KittyId", "AccountId", "DNA_LENGTH", "combine_dna", "breed_dna",
    "ErrorCategory", "ErrorCode", "ErrorResponse",
    "KittyError", "CountOverflow", "InvalidKittyId", "NotOwner", "RequireDifferentParents",
    "Event", "EventType", "Created", "Transferred", "Bred",
    "EventSink", "MemoryEventSink", "BufferedEventSink",
    "InMemoryStorage", "KittyStorage",
    "KittyIdCounter",
    "RandomnessSource", "random_value", "encode_seed_material", "block_seed",
    "KittyRegistry", "RegistryView",
    "Call", "CallType", "CreateCall", "TransferCall", "BreedCall", "parse_call", "parse_call_from_json",
    "EventLogger",
    "Runtime", "DispatchResult", "EventRecord",
]
