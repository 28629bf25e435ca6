"""Tests for call intents and parsing."""

import pytest

from kitty_registry.kitties.calls import (
    BreedCall,
    CallType,
    CreateCall,
    TransferCall,
    parse_call,
    parse_call_from_json,
)


class TestCallIntents:
    """Tests for call construction and to_dict."""

    def test_create_call(self) -> None:
        """Verify CreateCall type and dict form."""
        call = CreateCall("alice")
        assert call.call_type == CallType.CREATE
        assert call.to_dict() == {"call_type": "create", "caller": "alice"}

    def test_transfer_call(self) -> None:
        """Verify TransferCall dict form."""
        call = TransferCall("alice", "bob", 3)
        assert call.to_dict() == {
            "call_type": "transfer",
            "caller": "alice",
            "to": "bob",
            "kitty_id": 3,
        }

    def test_breed_call(self) -> None:
        """Verify BreedCall carries both parent ids."""
        call = BreedCall("alice", 0, 1)
        assert call.to_dict()["kitty_id_a"] == 0
        assert call.to_dict()["kitty_id_b"] == 1


class TestParseCall:
    """Tests for parse_call and parse_call_from_json."""

    def test_create(self) -> None:
        """Verify a create dict parses to CreateCall."""
        call = parse_call("alice", {"call_type": "create"})
        assert isinstance(call, CreateCall)
        assert call.caller == "alice"

    def test_call_type_is_case_insensitive(self) -> None:
        """Verify call_type matching ignores case."""
        assert isinstance(parse_call("alice", {"call_type": "CREATE"}), CreateCall)

    def test_transfer(self) -> None:
        """Verify a transfer dict parses with recipient and id."""
        call = parse_call("alice", {"call_type": "transfer", "to": "bob", "kitty_id": 2})
        assert isinstance(call, TransferCall)
        assert (call.to, call.kitty_id) == ("bob", 2)

    def test_breed(self) -> None:
        """Verify a breed dict parses with both parent ids."""
        call = parse_call("alice", {"call_type": "breed", "kitty_id_a": 0, "kitty_id_b": 1})
        assert isinstance(call, BreedCall)
        assert (call.kitty_id_a, call.kitty_id_b) == (0, 1)

    @pytest.mark.parametrize(
        "data",
        [
            {"call_type": "transfer", "kitty_id": 1},
            {"call_type": "transfer", "to": "bob"},
            {"call_type": "transfer", "to": "bob", "kitty_id": "1"},
            {"call_type": "transfer", "to": "bob", "kitty_id": True},
            {"call_type": "breed", "kitty_id_a": 0},
            {"call_type": "breed", "kitty_id_a": -1, "kitty_id_b": 1},
            {"call_type": "burn", "kitty_id": 0},
            {},
        ],
    )
    def test_invalid_returns_error_string(self, data: dict) -> None:
        """Verify malformed calls return an error string, not raise."""
        assert isinstance(parse_call("alice", data), str)

    def test_from_json(self) -> None:
        """Verify a JSON object parses to a call."""
        call = parse_call_from_json("alice", '{"call_type": "breed", "kitty_id_a": 4, "kitty_id_b": 5}')
        assert isinstance(call, BreedCall)

    def test_from_json_bad_json(self) -> None:
        """Verify unparseable JSON returns an Invalid JSON message."""
        result = parse_call_from_json("alice", "{not json")
        assert isinstance(result, str)
        assert result.startswith("Invalid JSON")

    def test_from_json_not_an_object(self) -> None:
        """Verify a JSON array is rejected."""
        assert parse_call_from_json("alice", "[1, 2]") == "Call must be a JSON object"
