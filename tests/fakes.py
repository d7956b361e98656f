"""In-memory stand-ins for the host wallet and the remote ledger."""

import itertools
from collections.abc import Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from src.fp_common.errors import ExecutionRevertedError, QueryFailedError
from src.fp_ledger.cadence import CadenceArg, encode_argument
from src.fp_ledger.models import LedgerEvent, SealedResult, UnsignedTransaction
from src.fp_ledger.templates import ScriptTemplate
from src.fp_ledger.wallet import WalletAccount, WalletDeclinedError

ALICE = "0x01cf0e2f2f715450"
BOB = "0x179b6b1cb6755e31"


class FakeSigner:
    def __init__(self, address: str, decline: bool = False) -> None:
        self.address = address
        self.decline = decline
        self.signed: list[UnsignedTransaction] = []

    async def sign(self, transaction: UnsignedTransaction) -> dict[str, Any]:
        if self.decline:
            raise WalletDeclinedError("user closed the approval dialog")
        self.signed.append(transaction)
        body = transaction.to_body()
        body.update(
            payer=self.address[2:],
            proposal_key={"address": self.address[2:], "key_index": "0", "sequence_number": "0"},
            authorizers=[self.address[2:]],
            payload_signatures=[],
            envelope_signatures=[
                {"address": self.address[2:], "key_index": "0", "signature": "c2ln"}
            ],
        )
        return body


class FakeWallet:
    def __init__(self, address: str = ALICE, decline: bool = False) -> None:
        self.address = address
        self.decline = decline
        self.logged_in = False
        self.fail_revoke = False
        self.signer = FakeSigner(address)

    async def authenticate(self) -> WalletAccount:
        if self.decline:
            raise WalletDeclinedError("user rejected")
        self.logged_in = True
        return WalletAccount(self.address, self.signer)

    async def unauthenticate(self) -> None:
        if self.fail_revoke:
            raise RuntimeError("wallet service unreachable")
        self.logged_in = False

    async def current_account(self) -> WalletAccount | None:
        return WalletAccount(self.address, self.signer) if self.logged_in else None


def ponder_struct(**overrides: Any) -> dict[str, Any]:
    """Decoded FlowPonder.Ponder struct, as the gateway's query() returns it."""
    struct: dict[str, Any] = {
        "id": 1,
        "question": "Will it rain in Lisbon tomorrow?",
        "description": "",
        "options": ["Yes", "No"],
        "category": "Science",
        "createdAt": Decimal("1700000000.00000000"),
        "endTime": Decimal("1700086400.00000000"),
        "minBet": Decimal("0.50000000"),
        "maxBet": Decimal("100.00000000"),
        "voteCounts": [0, 0],
        "totalPool": Decimal("0.00000000"),
        "juiceAmount": Decimal("0.00000000"),
        "isJuiced": False,
        "creator": ALICE,
    }
    struct.update(overrides)
    return struct


@dataclass
class FakeLedger:
    """Ledger gateway double that applies transactions to in-memory state.

    Submissions are recorded in `submissions` before anything else happens,
    so tests can assert that invalid input never got this far.
    """

    now: float = 1_700_000_000
    wallet: FakeWallet = field(default_factory=FakeWallet)
    balances: dict[str, Decimal] = field(default_factory=dict)
    ponders: dict[int, dict[str, Any]] = field(default_factory=dict)
    votes: list[dict[str, Any]] = field(default_factory=list)
    stats: dict[str, dict[str, Any]] = field(default_factory=dict)
    submissions: list[tuple[str, list[Any]]] = field(default_factory=list)
    queries: list[str] = field(default_factory=list)
    revert_reason: str | None = None
    _pending: dict[str, SealedResult] = field(default_factory=dict)
    _ids: Any = field(default_factory=lambda: itertools.count(1))

    async def authenticate(self) -> WalletAccount:
        return await self.wallet.authenticate()

    async def unauthenticate(self) -> None:
        await self.wallet.unauthenticate()

    async def current_account(self) -> WalletAccount | None:
        return await self.wallet.current_account()

    async def get_balance(self, address: str) -> Decimal:
        return self.balances.get(address, Decimal("0"))

    async def submit_transaction(
        self, template: ScriptTemplate, args: Sequence[CadenceArg], signer: WalletAccount | None
    ) -> str:
        values = [encode_argument(a)["value"] for a in args]
        self.submissions.append((template.name, values))
        tx_id = f"tx{len(self.submissions)}"
        events: list[LedgerEvent] = []
        if self.revert_reason is None:
            events = self._apply(template.name, [a.value for a in args], signer.address)
        self._pending[tx_id] = SealedResult(tx_id, "Sealed", "block1", events)
        return tx_id

    async def await_finality(
        self, transaction_id: str, timeout: float | None = None
    ) -> SealedResult:
        if self.revert_reason is not None:
            raise ExecutionRevertedError(self.revert_reason)
        return self._pending.pop(transaction_id)

    async def query(self, template: ScriptTemplate, args: Sequence[CadenceArg] = ()) -> Any:
        self.queries.append(template.name)
        values = [a.value for a in args]
        if template.name == "get_ponder":
            return self.ponders.get(values[0])
        if template.name == "get_active_ponders":
            return [p for p in self.ponders.values() if p["endTime"] > self.now]
        if template.name == "get_user_votes":
            return [v for v in self.votes if v["voter"] == values[0]]
        if template.name == "get_user_stats":
            return self.stats.get(values[0])
        if template.name == "get_leaderboard":
            return list(self.stats)
        if template.name == "get_flow_balance":
            return self.balances.get(values[0], Decimal("0"))
        raise QueryFailedError(f"unknown script {template.name}")

    def _apply(self, name: str, values: list[Any], voter: str) -> list[LedgerEvent]:
        if name == "create_ponder":
            question, description, options, hours, min_bet, max_bet, category = values
            ponder_id = next(self._ids)
            self.balances[voter] -= Decimal("1.0")
            self.ponders[ponder_id] = ponder_struct(
                id=ponder_id,
                question=question,
                description=description,
                options=list(options),
                category=category,
                createdAt=Decimal(self.now),
                endTime=Decimal(self.now) + Decimal(hours) * 3600,
                minBet=Decimal(min_bet),
                maxBet=Decimal(max_bet),
                voteCounts=[0] * len(options),
                creator=voter,
            )
            return [LedgerEvent("A.f8d6e0586b0a20c7.FlowPonder.PonderCreated", {"id": ponder_id})]
        if name in ("place_vote", "place_free_vote"):
            ponder_id, option = values[0], values[1]
            amount = Decimal(values[2]) if name == "place_vote" else Decimal("0")
            ponder = self.ponders[ponder_id]
            ponder["voteCounts"][option] += 1
            ponder["totalPool"] += amount
            self.balances[voter] -= amount
            self.votes.append({
                "ponderId": ponder_id, "option": option, "isFreeVote": amount == 0,
                "amount": amount, "timestamp": Decimal(self.now), "voter": voter,
            })
            return []
        if name == "withdraw_winnings":
            self.balances[voter] += self.ponders[values[0]]["totalPool"]
            return []
        raise AssertionError(f"unexpected transaction {name}")
