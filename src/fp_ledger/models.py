"""Domain models for fp_ledger — pure dataclasses describing ledger traffic."""

import base64
import json
from dataclasses import dataclass, field
from typing import Any


@dataclass
class UnsignedTransaction:
    """Transaction body before the wallet adds payer, proposal key and signatures."""

    script: str
    arguments: list[dict[str, Any]]   # JSON-Cadence, already validated
    reference_block_id: str
    gas_limit: int

    def to_body(self) -> dict[str, Any]:
        """Access-node REST encoding: script and each argument base64'd."""
        return {
            "script": base64.b64encode(self.script.encode()).decode(),
            "arguments": [
                base64.b64encode(json.dumps(arg).encode()).decode() for arg in self.arguments
            ],
            "reference_block_id": self.reference_block_id,
            "gas_limit": str(self.gas_limit),
        }


@dataclass
class LedgerEvent:
    type: str
    fields: dict[str, Any]
    event_index: int = 0

    @property
    def name(self) -> str:
        """'A.f8d6e0586b0a20c7.FlowPonder.PonderCreated' -> 'PonderCreated'."""
        return self.type.rsplit(".", 1)[-1]


@dataclass
class SealedResult:
    transaction_id: str
    status: str
    block_id: str | None = None
    events: list[LedgerEvent] = field(default_factory=list)

    def find_event(self, name: str) -> LedgerEvent | None:
        return next((e for e in self.events if e.name == name), None)
