"""Ledger Gateway — the only component that talks to the remote ledger.

Three primitive operations, all single-attempt (callers own retry policy):

  submit_transaction  validate + encode args, ask the signer to sign, post
  await_finality      poll the result until Sealed, bounded by a timeout
  query               run a read-only script, decode JSON-Cadence

Every failure leaves this module as a LedgerError subclass. Argument
problems are caught while encoding, before any HTTP request is made.
"""

import asyncio
import base64
import json
import logging
from collections.abc import Sequence
from decimal import Decimal
from typing import Any, Protocol

import httpx

from src.fp_common.enums import TransactionStatus
from src.fp_common.errors import (
    AuthorizationMissingError,
    ExecutionRevertedError,
    FinalityTimeoutError,
    NetworkUnavailableError,
    QueryFailedError,
    SubmissionRejectedError,
)
from src.fp_ledger import cadence, templates
from src.fp_ledger.access_client import AccessNodeClient, AccessNodeError
from src.fp_ledger.cadence import CadenceArg, decode_value, encode_argument
from src.fp_ledger.models import LedgerEvent, SealedResult, UnsignedTransaction
from src.fp_ledger.templates import ScriptTemplate
from src.fp_ledger.wallet import WalletAccount, WalletDeclinedError, WalletProtocol

logger = logging.getLogger(__name__)


class LedgerGatewayProtocol(Protocol):
    async def submit_transaction(
        self,
        template: ScriptTemplate,
        args: Sequence[CadenceArg],
        signer: WalletAccount | None,
    ) -> str: ...

    async def await_finality(
        self, transaction_id: str, timeout: float | None = None
    ) -> SealedResult: ...

    async def query(self, template: ScriptTemplate, args: Sequence[CadenceArg] = ()) -> Any: ...

    async def get_balance(self, address: str) -> Decimal: ...

    async def authenticate(self) -> WalletAccount: ...

    async def unauthenticate(self) -> None: ...

    async def current_account(self) -> WalletAccount | None: ...


def _decode_event(raw: dict[str, Any]) -> LedgerEvent:
    try:
        payload = json.loads(base64.b64decode(raw["payload"]))
        return LedgerEvent(
            type=raw["type"],
            fields=decode_value(payload),
            event_index=int(raw.get("event_index", 0)),
        )
    except (KeyError, TypeError, AttributeError, ValueError) as exc:
        raise ValueError(f"Malformed event {raw!r}: {exc}") from exc


def _read_result(transaction_id: str, raw: Any) -> SealedResult | None:
    """Sealed result, or None while the transaction is still in flight.

    Failed or expired transactions raise ExecutionRevertedError; a body that
    does not parse raises ValueError.
    """
    if not isinstance(raw, dict):
        raise ValueError(f"transaction result is not an object: {raw!r}")
    status = raw.get("status", TransactionStatus.UNKNOWN.value)
    error_message = raw.get("error_message") or ""
    try:
        status_code = int(raw.get("status_code") or 0)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"bad status_code {raw.get('status_code')!r}") from exc
    if error_message or status_code != 0:
        logger.warning("tx=%s reverted: %s", transaction_id, error_message)
        raise ExecutionRevertedError(error_message or f"status code {status_code}")
    if status == TransactionStatus.EXPIRED.value:
        raise ExecutionRevertedError("transaction expired")
    if status != TransactionStatus.SEALED.value:
        return None
    events = raw.get("events") or []
    if not isinstance(events, list):
        raise ValueError(f"events is not a list: {events!r}")
    return SealedResult(
        transaction_id=transaction_id,
        status=status,
        block_id=raw.get("block_id"),
        events=[_decode_event(e) for e in events],
    )


class FlowLedgerGateway:
    def __init__(
        self,
        client: AccessNodeClient,
        wallet: WalletProtocol,
        contract_addresses: dict[str, str],
        gas_limit: int = 9999,
        finality_timeout: float = 30.0,
        poll_interval: float = 1.0,
    ) -> None:
        self._client = client
        self._wallet = wallet
        self._addresses = contract_addresses
        self._gas_limit = gas_limit
        self._finality_timeout = finality_timeout
        self._poll_interval = poll_interval

    # ------------------------------------------------------------------
    # Wallet delegation
    # ------------------------------------------------------------------

    async def authenticate(self) -> WalletAccount:
        """Run the host wallet's approval flow. WalletDeclinedError propagates."""
        account = await self._wallet.authenticate()
        return WalletAccount(cadence.normalize_address(account.address), account.signer)

    async def unauthenticate(self) -> None:
        await self._wallet.unauthenticate()

    async def current_account(self) -> WalletAccount | None:
        account = await self._wallet.current_account()
        if account is None:
            return None
        return WalletAccount(cadence.normalize_address(account.address), account.signer)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    async def submit_transaction(
        self,
        template: ScriptTemplate,
        args: Sequence[CadenceArg],
        signer: WalletAccount | None,
    ) -> str:
        if signer is None:
            raise AuthorizationMissingError(f"{template.name} needs a signed-in wallet")
        try:
            encoded = [encode_argument(a) for a in args]
        except ValueError as exc:
            raise SubmissionRejectedError(f"{template.name}: {exc}") from exc

        try:
            block_id = await self._client.get_sealed_block_id()
        except (httpx.TransportError, AccessNodeError) as exc:
            raise NetworkUnavailableError(f"reference block: {exc}") from exc

        unsigned = UnsignedTransaction(
            script=template.render(self._addresses),
            arguments=encoded,
            reference_block_id=block_id,
            gas_limit=self._gas_limit,
        )
        try:
            body = await signer.signer.sign(unsigned)
        except WalletDeclinedError as exc:
            raise SubmissionRejectedError(f"signature declined: {exc}") from exc

        try:
            transaction_id = await self._client.send_transaction(body)
        except httpx.TransportError as exc:
            raise NetworkUnavailableError(str(exc)) from exc
        except AccessNodeError as exc:
            if exc.status_code >= 500:
                raise NetworkUnavailableError(exc.message) from exc
            raise SubmissionRejectedError(exc.message) from exc

        logger.info("Submitted %s from %s: tx=%s", template.name, signer.address, transaction_id)
        return transaction_id

    async def await_finality(
        self, transaction_id: str, timeout: float | None = None
    ) -> SealedResult:
        limit = self._finality_timeout if timeout is None else timeout
        try:
            result = await asyncio.wait_for(self._poll_until_sealed(transaction_id), limit)
        except asyncio.TimeoutError:
            logger.warning("tx=%s not sealed within %.1fs", transaction_id, limit)
            raise FinalityTimeoutError(transaction_id, limit) from None
        logger.info("tx=%s sealed in block %s", transaction_id, result.block_id)
        return result

    async def _poll_until_sealed(self, transaction_id: str) -> SealedResult:
        while True:
            try:
                raw = await self._client.get_transaction_result(transaction_id)
            except httpx.TransportError as exc:
                raise NetworkUnavailableError(str(exc)) from exc
            except AccessNodeError as exc:
                # 404: node has not indexed the transaction yet
                if exc.status_code == 404:
                    raw = {"status": TransactionStatus.UNKNOWN.value}
                elif exc.status_code >= 500:
                    raise NetworkUnavailableError(exc.message) from exc
                else:
                    raise QueryFailedError(exc.message) from exc

            try:
                sealed = _read_result(transaction_id, raw)
            except ValueError as exc:
                logger.warning("tx=%s result unreadable: %s", transaction_id, exc)
                raise QueryFailedError(f"tx={transaction_id}: {exc}") from exc
            if sealed is not None:
                return sealed
            await asyncio.sleep(self._poll_interval)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def query(self, template: ScriptTemplate, args: Sequence[CadenceArg] = ()) -> Any:
        try:
            encoded = [encode_argument(a) for a in args]
        except ValueError as exc:
            raise QueryFailedError(f"{template.name}: {exc}") from exc
        try:
            raw = await self._client.execute_script(template.render(self._addresses), encoded)
            return decode_value(raw)
        except (httpx.TransportError, AccessNodeError, ValueError, KeyError, TypeError) as exc:
            logger.warning("Query %s failed: %s", template.name, exc)
            raise QueryFailedError(f"{template.name}: {exc}") from exc

    async def get_balance(self, address: str) -> Decimal:
        value = await self.query(templates.GET_FLOW_BALANCE, [cadence.address(address)])
        if not isinstance(value, Decimal):
            raise QueryFailedError(f"balance for {address} is not a UFix64: {value!r}")
        return value
