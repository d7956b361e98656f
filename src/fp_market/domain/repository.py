# src/fp_market/domain/repository.py
"""Repository Protocol — typed access to ponder state held by the ledger.

Unit tests inject a mock that conforms to this Protocol.
The infrastructure layer provides the ledger-backed implementation.
"""

from decimal import Decimal
from typing import Protocol

from src.fp_ledger.wallet import WalletAccount
from src.fp_market.domain.models import Ponder, PonderDraft, UserStats, Vote


class PonderRepositoryProtocol(Protocol):
    async def list_active_ponders(self) -> list[Ponder]: ...

    async def get_ponder(self, ponder_id: int) -> Ponder | None: ...

    async def get_user_stats(self, address: str) -> UserStats | None: ...

    async def get_user_votes(self, address: str) -> list[Vote]: ...

    async def get_leaderboard_addresses(self) -> list[str]: ...

    async def submit_create_ponder(self, draft: PonderDraft, signer: WalletAccount) -> str: ...

    async def submit_vote(
        self,
        ponder_id: int,
        option: int,
        amount: Decimal | None,
        signer: WalletAccount,
    ) -> str: ...

    async def submit_withdrawal(self, ponder_id: int, signer: WalletAccount) -> str: ...
