"""MarketOrchestrator — create-ponder, place-vote and withdraw-winnings workflows.

Every mutation runs validate -> submit -> confirm:

  validate  client rules, no network writes (ValidationError / guard errors)
  submit    one transaction through the gateway, never retried here
  confirm   await_finality; on success reconcile balance and ponder state

Local state is never updated optimistically: balance and ponder snapshots
only change after the ledger reports them. A finality timeout is not a
failure verdict, so it triggers reconciliation reads and is re-raised.
"""

import asyncio
import logging
from collections.abc import Callable
from decimal import Decimal

from src.fp_auth.service import AuthService
from src.fp_common.datetime_utils import unix_now
from src.fp_common.enums import AuthFailure, OperationKind, OperationPhase
from src.fp_common.errors import (
    AppError,
    AuthError,
    ExecutionRevertedError,
    FinalityTimeoutError,
    InternalError,
    PonderNotFoundError,
)
from src.fp_ledger.gateway import LedgerGatewayProtocol
from src.fp_ledger.models import SealedResult
from src.fp_ledger.wallet import WalletAccount
from src.fp_market.application.guard import InFlightGuard
from src.fp_market.domain.models import (
    CreatePonderReceipt,
    PendingOperation,
    Ponder,
    VoteReceipt,
    WithdrawReceipt,
)
from src.fp_market.domain.repository import PonderRepositoryProtocol
from src.fp_market.domain.validation import (
    CREATION_FEE,
    MIN_BET_FLOOR,
    parse_amount,
    validate_create_ponder,
    validate_vote,
    validate_withdrawal,
)
from src.fp_market.infrastructure.persistence import LedgerPonderRepository

logger = logging.getLogger(__name__)

PONDER_CREATED_EVENT = "PonderCreated"


def created_ponder_id(sealed: SealedResult) -> int:
    event = sealed.find_event(PONDER_CREATED_EVENT)
    if event is not None:
        for name in ("id", "ponderId"):
            if name in event.fields:
                return int(event.fields[name])
    raise InternalError(
        f"Transaction {sealed.transaction_id} sealed without a {PONDER_CREATED_EVENT} event"
    )


class MarketOrchestrator:
    def __init__(
        self,
        gateway: LedgerGatewayProtocol,
        auth: AuthService,
        repo: PonderRepositoryProtocol | None = None,
        guard: InFlightGuard | None = None,
        clock: Callable[[], float] = unix_now,
        creation_fee: Decimal = CREATION_FEE,
        min_bet_floor: Decimal = MIN_BET_FLOOR,
    ) -> None:
        self._gateway = gateway
        self._auth = auth
        self._repo: PonderRepositoryProtocol = repo or LedgerPonderRepository(gateway)
        self._guard = guard or InFlightGuard()
        self._clock = clock
        self._creation_fee = creation_fee
        self._min_bet_floor = min_bet_floor

    # ------------------------------------------------------------------
    # Pending-state view
    # ------------------------------------------------------------------

    def pending(self, ponder_id: int | None) -> PendingOperation | None:
        """In-flight mutation of the signed-in user on `ponder_id` (None: creation)."""
        address = self._auth.session.address
        if address is None:
            return None
        return self._guard.get(address, ponder_id)

    def pending_operations(self) -> list[PendingOperation]:
        address = self._auth.session.address
        return [] if address is None else self._guard.for_address(address)

    # ------------------------------------------------------------------
    # Workflows
    # ------------------------------------------------------------------

    async def create_ponder(
        self,
        question: str,
        description: str,
        options: list[str],
        duration_hours: object,
        min_bet: object,
        max_bet: object,
        category: str,
    ) -> CreatePonderReceipt:
        account = self._require_account()
        with self._guard.hold(OperationKind.CREATE_PONDER, account.address, None) as op:
            draft = validate_create_ponder(
                question,
                description,
                options,
                duration_hours,
                min_bet,
                max_bet,
                category,
                balance=self._auth.session.balance,
                creation_fee=self._creation_fee,
                min_bet_floor=self._min_bet_floor,
            )
            transaction_id = await self._repo.submit_create_ponder(draft, account)
            self._mark_submitted(op, transaction_id)
            sealed = await self._confirm(transaction_id, ponder_id=None)
            try:
                ponder_id = created_ponder_id(sealed)
            except InternalError:
                # Sealed, so the creation fee has already been charged
                await self._refresh_balance()
                raise

        logger.info("Ponder %d created by %s (tx=%s)", ponder_id, account.address, transaction_id)
        await self._refresh_balance()
        return CreatePonderReceipt(ponder_id=ponder_id, transaction_id=transaction_id)

    async def place_vote(
        self,
        ponder_id: int,
        option_index: int,
        amount: object | None = None,
    ) -> VoteReceipt:
        """Cast a vote; `amount=None` is a free vote, anything else a stake."""
        account = self._require_account()
        with self._guard.hold(OperationKind.PLACE_VOTE, account.address, ponder_id) as op:
            ponder = await self._load_ponder(ponder_id)
            stake = None if amount is None else parse_amount("amount", amount)
            validate_vote(ponder, option_index, stake, self._auth.session.balance, self._clock())
            transaction_id = await self._repo.submit_vote(ponder_id, option_index, stake, account)
            self._mark_submitted(op, transaction_id)
            await self._confirm(transaction_id, ponder_id=ponder_id)

        logger.info(
            "Vote on ponder %d option %d by %s (%s, tx=%s)",
            ponder_id, option_index, account.address,
            "free" if stake is None else f"stake {stake}", transaction_id,
        )
        refreshed, balance = await self._reconcile(ponder_id)
        return VoteReceipt(
            transaction_id=transaction_id,
            ponder_id=ponder_id,
            option=option_index,
            is_free_vote=stake is None,
            amount=stake if stake is not None else Decimal("0"),
            ponder=refreshed,
            balance=balance,
        )

    async def withdraw_winnings(self, ponder_id: int) -> WithdrawReceipt:
        account = self._require_account()
        with self._guard.hold(OperationKind.WITHDRAW_WINNINGS, account.address, ponder_id) as op:
            ponder = await self._load_ponder(ponder_id)
            validate_withdrawal(ponder)
            transaction_id = await self._repo.submit_withdrawal(ponder_id, account)
            self._mark_submitted(op, transaction_id)
            await self._confirm(transaction_id, ponder_id=ponder_id)

        logger.info("Winnings withdrawn from ponder %d by %s", ponder_id, account.address)
        balance = await self._refresh_balance()
        return WithdrawReceipt(transaction_id=transaction_id, ponder_id=ponder_id, balance=balance)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_account(self) -> WalletAccount:
        account = self._auth.account
        if account is None:
            raise AuthError(AuthFailure.NOT_SIGNED_IN)
        return account

    async def _load_ponder(self, ponder_id: int) -> Ponder:
        ponder = await self._repo.get_ponder(ponder_id)
        if ponder is None:
            raise PonderNotFoundError(ponder_id)
        return ponder

    @staticmethod
    def _mark_submitted(op: PendingOperation, transaction_id: str) -> None:
        op.phase = OperationPhase.SUBMITTED
        op.transaction_id = transaction_id

    async def _confirm(self, transaction_id: str, ponder_id: int | None) -> SealedResult:
        try:
            return await self._gateway.await_finality(transaction_id)
        except FinalityTimeoutError:
            # Outcome unknown: look at the ledger instead of resubmitting
            logger.warning("tx=%s outcome unknown; reconciling", transaction_id)
            await self._reconcile(ponder_id)
            raise
        except ExecutionRevertedError as exc:
            logger.warning("tx=%s reverted by ledger: %s", transaction_id, exc.reason)
            raise

    async def _refresh_balance(self) -> Decimal | None:
        try:
            return await self._auth.refresh_balance()
        except AppError as exc:
            logger.warning("Balance refresh failed: %s", exc)
            return None

    async def _reconcile(self, ponder_id: int | None) -> tuple[Ponder | None, Decimal | None]:
        """Refresh balance and re-query the ponder; the two may finish in any order."""
        if ponder_id is None:
            return None, await self._refresh_balance()
        balance, ponder = await asyncio.gather(
            self._refresh_balance(),
            self._repo.get_ponder(ponder_id),
            return_exceptions=True,
        )
        if isinstance(ponder, BaseException):
            logger.warning("Re-query of ponder %d failed: %s", ponder_id, ponder)
            ponder = None
        return ponder, balance  # type: ignore[return-value]
