"""Call definitions - what a caller asks the registry to do"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .kitty import AccountId, KittyId


class CallType(str, Enum):
    """The three registry verbs"""

    CREATE = "create"
    TRANSFER = "transfer"
    BREED = "breed"


@dataclass
class Call:
    """Base class for calls. caller is an already-authenticated account."""

    call_type: CallType
    caller: AccountId

    def to_dict(self) -> dict[str, Any]:
        return {
            "call_type": self.call_type.value,
            "caller": self.caller,
        }


@dataclass
class CreateCall(Call):
    """Create a kitty for the caller"""

    def __init__(self, caller: AccountId) -> None:
        super().__init__(CallType.CREATE, caller)


@dataclass
class TransferCall(Call):
    """Give one of the caller's kitties to another account"""

    to: AccountId
    kitty_id: KittyId

    def __init__(self, caller: AccountId, to: AccountId, kitty_id: KittyId) -> None:
        super().__init__(CallType.TRANSFER, caller)
        self.to = to
        self.kitty_id = kitty_id

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        d["to"] = self.to
        d["kitty_id"] = self.kitty_id
        return d


@dataclass
class BreedCall(Call):
    """Breed two existing kitties into a new one for the caller"""

    kitty_id_a: KittyId
    kitty_id_b: KittyId

    def __init__(self, caller: AccountId, kitty_id_a: KittyId, kitty_id_b: KittyId) -> None:
        super().__init__(CallType.BREED, caller)
        self.kitty_id_a = kitty_id_a
        self.kitty_id_b = kitty_id_b

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        d["kitty_id_a"] = self.kitty_id_a
        d["kitty_id_b"] = self.kitty_id_b
        return d


def _kitty_id(data: dict[str, Any], key: str) -> KittyId | str:
    value = data.get(key)
    # bool is an int subclass; reject it explicitly
    if not isinstance(value, int) or isinstance(value, bool):
        return f"'{key}' must be an integer kitty id"
    if value < 0:
        return f"'{key}' must be non-negative"
    return value


def parse_call(caller: AccountId, data: dict[str, Any]) -> Call | str:
    """
    Build a Call from a plain dict.
    Returns the call if valid, or an error string if invalid.
    """
    raw_call_type = data.get("call_type", "")
    call_type = raw_call_type.lower() if isinstance(raw_call_type, str) else ""

    if call_type == CallType.CREATE.value:
        return CreateCall(caller)

    elif call_type == CallType.TRANSFER.value:
        to = data.get("to")
        if not to or not isinstance(to, str):
            return "transfer requires 'to' (account id string)"
        kitty_id = _kitty_id(data, "kitty_id")
        if isinstance(kitty_id, str):
            return kitty_id
        return TransferCall(caller, to, kitty_id)

    elif call_type == CallType.BREED.value:
        kitty_id_a = _kitty_id(data, "kitty_id_a")
        if isinstance(kitty_id_a, str):
            return kitty_id_a
        kitty_id_b = _kitty_id(data, "kitty_id_b")
        if isinstance(kitty_id_b, str):
            return kitty_id_b
        return BreedCall(caller, kitty_id_a, kitty_id_b)

    return f"Unknown call_type: {raw_call_type!r}"


def parse_call_from_json(caller: AccountId, json_str: str) -> Call | str:
    """Parse a Call from a JSON object string; error string if invalid."""
    try:
        data: Any = json.loads(json_str)
    except json.JSONDecodeError as e:
        return f"Invalid JSON: {e}"
    if not isinstance(data, dict):
        return "Call must be a JSON object"
    return parse_call(caller, data)
