# src/fp_market/infrastructure/persistence.py
"""LedgerPonderRepository — PonderRepositoryProtocol backed by the ledger gateway.

Reads run FlowPonder scripts and parse the decoded structs through the
ledger schemas; a payload that does not fit the schema is a QueryFailedError.
Writes only encode arguments and submit; awaiting finality is left to the
orchestrator.
"""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from src.fp_common.errors import QueryFailedError
from src.fp_ledger import cadence, templates
from src.fp_ledger.gateway import LedgerGatewayProtocol
from src.fp_ledger.wallet import WalletAccount
from src.fp_market.domain.models import Ponder, PonderDraft, UserStats, Vote
from src.fp_market.infrastructure.ledger_schemas import (
    PonderRecord,
    UserStatsRecord,
    VoteRecord,
)


def _parse(model: type[BaseModel], raw: Any, what: str) -> Any:
    try:
        return model.model_validate(raw)
    except SchemaError as exc:
        raise QueryFailedError(f"malformed {what}: {exc.error_count()} schema error(s)") from exc


def _expect_list(raw: Any, what: str) -> list[Any]:
    if not isinstance(raw, list):
        raise QueryFailedError(f"expected a list of {what}, got {type(raw).__name__}")
    return raw


class LedgerPonderRepository:
    def __init__(self, gateway: LedgerGatewayProtocol) -> None:
        self._gateway = gateway

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_active_ponders(self) -> list[Ponder]:
        raw = await self._gateway.query(templates.GET_ACTIVE_PONDERS)
        return [
            _parse(PonderRecord, item, "ponder").to_domain()
            for item in _expect_list(raw, "ponders")
        ]

    async def get_ponder(self, ponder_id: int) -> Ponder | None:
        raw = await self._gateway.query(templates.GET_PONDER, [cadence.uint64(ponder_id)])
        if raw is None:
            return None
        return _parse(PonderRecord, raw, f"ponder {ponder_id}").to_domain()

    async def get_user_stats(self, address: str) -> UserStats | None:
        raw = await self._gateway.query(templates.GET_USER_STATS, [cadence.address(address)])
        if raw is None:
            return None
        return _parse(UserStatsRecord, raw, f"stats for {address}").to_domain()

    async def get_user_votes(self, address: str) -> list[Vote]:
        raw = await self._gateway.query(templates.GET_USER_VOTES, [cadence.address(address)])
        return [
            _parse(VoteRecord, item, "vote").to_domain() for item in _expect_list(raw, "votes")
        ]

    async def get_leaderboard_addresses(self) -> list[str]:
        raw = await self._gateway.query(templates.GET_LEADERBOARD)
        addresses = _expect_list(raw, "addresses")
        if not all(isinstance(a, str) for a in addresses):
            raise QueryFailedError("leaderboard returned non-address entries")
        return addresses

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def submit_create_ponder(self, draft: PonderDraft, signer: WalletAccount) -> str:
        args = [
            cadence.string(draft.question),
            cadence.string(draft.description),
            cadence.array(cadence.STRING, draft.options),
            cadence.ufix64(draft.duration_hours),
            cadence.ufix64(draft.min_bet),
            cadence.ufix64(draft.max_bet),
            cadence.string(draft.category),
        ]
        return await self._gateway.submit_transaction(templates.CREATE_PONDER, args, signer)

    async def submit_vote(
        self,
        ponder_id: int,
        option: int,
        amount: Decimal | None,
        signer: WalletAccount,
    ) -> str:
        if amount is None:
            return await self._gateway.submit_transaction(
                templates.PLACE_FREE_VOTE,
                [cadence.uint64(ponder_id), cadence.uint8(option)],
                signer,
            )
        return await self._gateway.submit_transaction(
            templates.PLACE_VOTE,
            [cadence.uint64(ponder_id), cadence.uint8(option), cadence.ufix64(amount)],
            signer,
        )

    async def submit_withdrawal(self, ponder_id: int, signer: WalletAccount) -> str:
        return await self._gateway.submit_transaction(
            templates.WITHDRAW_WINNINGS, [cadence.uint64(ponder_id)], signer
        )
