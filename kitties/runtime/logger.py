"""JSONL event logger - append-only record of committed kitty calls"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


class EventLogger:
    """Append-only JSONL event log.

    Supports two modes:
    1. File mode (output_file): one JSON object per line, file cleared on init
    2. Memory mode (no output_file): events kept in a list, for tests and
       the scenario runner

    Every event carries a monotonic 'sequence' and a UTC timestamp. Only
    committed calls are logged as kitty events; rejected calls are logged
    as 'call_failed'.
    """

    output_path: Path | None
    events: list[dict[str, Any]]
    default_recent: int
    _sequence: int

    def __init__(self, output_file: str | None = None, default_recent: int = 50) -> None:
        """Initialize the event logger.

        Args:
            output_file: JSONL file to write; None keeps events in memory
            default_recent: Number of events read_recent() returns by default
        """
        self.output_path = Path(output_file) if output_file else None
        self.events = []
        self.default_recent = default_recent
        self._sequence = 0
        if self.output_path is not None:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)
            # Clear existing log on init (new run)
            self.output_path.write_text("")

    def log(self, event_type: str, data: dict[str, Any]) -> None:
        """Log an event."""
        self._sequence += 1
        event: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "sequence": self._sequence,
            "event_type": event_type,
            **data,
        }
        if self.output_path is None:
            self.events.append(event)
            return
        with open(self.output_path, "a") as f:
            f.write(json.dumps(event) + "\n")

    # ========== Kitty event helpers ==========

    def log_kitty_created(self, kitty_id: int, owner: str, dna: bytes, block_number: int) -> None:
        self.log("kitty_created", {
            "kitty_id": kitty_id,
            "owner": owner,
            "dna": dna.hex(),
            "block_number": block_number,
        })

    def log_kitty_bred(
        self,
        kitty_id: int,
        owner: str,
        parents: tuple[int, int],
        dna: bytes,
        block_number: int,
    ) -> None:
        self.log("kitty_bred", {
            "kitty_id": kitty_id,
            "owner": owner,
            "parents": list(parents),
            "dna": dna.hex(),
            "block_number": block_number,
        })

    def log_kitty_transferred(self, kitty_id: int, from_id: str, to_id: str) -> None:
        self.log("kitty_transferred", {"kitty_id": kitty_id, "from": from_id, "to": to_id})

    def log_kitty_sold(self, kitty_id: int, seller: str, buyer: str, price: int) -> None:
        self.log("kitty_sold", {
            "kitty_id": kitty_id,
            "seller": seller,
            "buyer": buyer,
            "price": price,
        })

    def log_price_set(self, kitty_id: int, owner: str, price: int) -> None:
        self.log("price_set", {"kitty_id": kitty_id, "owner": owner, "price": price})

    def log_call_failed(self, call: str, sender: str | None, code: str, error: str) -> None:
        self.log("call_failed", {"call": call, "sender": sender, "code": code, "error": error})

    def read_recent(self, n: int | None = None) -> list[dict[str, Any]]:
        """Read the last N events (default_recent when N is None)."""
        if n is None:
            n = self.default_recent
        if self.output_path is None:
            return list(self.events[-n:]) if n > 0 else []
        if not self.output_path.exists():
            return []
        lines = self.output_path.read_text().strip().split("\n")
        lines = [line for line in lines if line]  # filter empty
        recent = lines[-n:] if len(lines) > n else lines
        return [json.loads(line) for line in recent]
