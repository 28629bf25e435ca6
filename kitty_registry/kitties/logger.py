"""JSONL event logger - append-only record of registry activity"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..config import get
from .events import Event


def configure_logging(level: str | None = None) -> None:
    """Set the level of the kitty_registry logger hierarchy from config."""
    resolved = level or get("logging.level") or "INFO"
    logging.getLogger("kitty_registry").setLevel(resolved)


class EventLogger:
    """Append-only JSONL event log; also usable as an event sink.

    Every line carries a monotonic 'sequence' field for ordering, a UTC
    timestamp, the event_type and the event's own fields.
    """

    output_path: Path
    _sequence: int

    def __init__(self, output_file: str | None = None) -> None:
        """Initialize the event logger.

        Args:
            output_file: JSONL file path (default: logging.output_file from config)
        """
        resolved_file = output_file or get("logging.output_file") or "events.jsonl"
        if not isinstance(resolved_file, str):
            resolved_file = "events.jsonl"
        self.output_path = Path(resolved_file)
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        # Clear existing log on init (new run)
        self.output_path.write_text("")
        self._sequence = 0

    def log(self, event_type: str, data: dict[str, Any]) -> None:
        """Log an event to the JSONL file."""
        self._sequence += 1
        event: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "sequence": self._sequence,
            "event_type": event_type,
            **data,
        }
        with open(self.output_path, "a") as f:
            f.write(json.dumps(event) + "\n")

    def deposit(self, event: Event) -> None:
        """EventSink hook: one line per registry event."""
        data = event.to_dict()
        event_type = data.pop("event_type")
        self.log(event_type, data)

    def read_recent(self, n: int | None = None) -> list[dict[str, Any]]:
        """Read the last N events from the log.

        N defaults to logging.default_recent from config.
        """
        if n is None:
            default_recent = get("logging.default_recent")
            if isinstance(default_recent, int):
                n = default_recent
            else:
                n = 50
        if not self.output_path.exists():
            return []
        lines = self.output_path.read_text().strip().split("\n")
        lines = [line for line in lines if line]  # filter empty
        recent = lines[-n:] if len(lines) > n else lines
        return [json.loads(line) for line in recent]

    @property
    def sequence(self) -> int:
        return self._sequence
