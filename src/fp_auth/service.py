"""AuthService — sign-in/sign-out state machine and balance refresh.

    SIGNED_OUT -> AUTHENTICATING -> SIGNED_IN -> SIGNING_OUT -> SIGNED_OUT

Sign-in delegates approval to the wallet through the ledger gateway and is
bounded by `auth_timeout`. Sign-out always clears the local session, even
when the wallet's revoke call fails. The balance is only ever replaced with
a value the ledger reported.
"""

import asyncio
import logging
from decimal import Decimal

from src.fp_auth.session import Session, SessionStore
from src.fp_common.enums import AuthFailure, SessionState
from src.fp_common.errors import AuthError, ConcurrentOperationError, LedgerError
from src.fp_ledger.gateway import LedgerGatewayProtocol
from src.fp_ledger.wallet import WalletAccount, WalletDeclinedError

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(
        self,
        gateway: LedgerGatewayProtocol,
        store: SessionStore,
        auth_timeout: float = 120.0,
    ) -> None:
        self._gateway = gateway
        self._store = store
        self._auth_timeout = auth_timeout
        self._account: WalletAccount | None = None
        # Bumped by every sign-in and sign-out; a stale approval is dropped
        self._attempt = 0

    @property
    def session(self) -> Session:
        return self._store.current

    @property
    def account(self) -> WalletAccount | None:
        """Signer capability for the signed-in address, or None."""
        return self._account if self._store.current.authenticated else None

    async def restore(self) -> Session:
        """Adopt a wallet session that survived an app restart, if any."""
        if self._store.current.state != SessionState.SIGNED_OUT:
            return self._store.current
        attempt = self._attempt
        try:
            account = await self._gateway.current_account()
        except Exception:
            logger.exception("Could not read existing wallet session")
            return self._store.current
        if (
            account is not None
            and attempt == self._attempt
            and self._store.current.state == SessionState.SIGNED_OUT
        ):
            await self._enter_signed_in(account)
        return self._store.current

    async def sign_in(self) -> Session:
        state = self._store.current.state
        if state == SessionState.SIGNED_IN:
            return self._store.current
        if state != SessionState.SIGNED_OUT:
            raise ConcurrentOperationError("sign-in/sign-out")

        self._attempt += 1
        attempt = self._attempt
        self._store._replace(state=SessionState.AUTHENTICATING)
        try:
            account = await asyncio.wait_for(self._gateway.authenticate(), self._auth_timeout)
        except WalletDeclinedError as exc:
            self._abandon(attempt)
            logger.info("Sign-in rejected by wallet: %s", exc)
            raise AuthError(AuthFailure.USER_REJECTED, str(exc) or None) from exc
        except asyncio.TimeoutError:
            self._abandon(attempt)
            logger.info("Sign-in timed out after %.0fs", self._auth_timeout)
            raise AuthError(AuthFailure.TIMEOUT) from None
        except BaseException:
            self._abandon(attempt)
            raise

        if attempt != self._attempt:
            # Signed out while the wallet was still approving
            logger.info("Dropping wallet approval for %s after sign-out", account.address)
            if self._store.current.state == SessionState.SIGNED_OUT:
                try:
                    await self._gateway.unauthenticate()
                except Exception:
                    logger.exception("Wallet revoke failed for %s", account.address)
            raise AuthError(AuthFailure.USER_REJECTED, "signed out before approval completed")

        await self._enter_signed_in(account)
        return self._store.current

    def _abandon(self, attempt: int) -> None:
        if attempt == self._attempt:
            self._store._reset()

    async def _enter_signed_in(self, account: WalletAccount) -> None:
        self._account = account
        self._store._replace(
            address=account.address, state=SessionState.SIGNED_IN, balance=Decimal("0")
        )
        logger.info("Signed in as %s", account.address)
        try:
            await self.refresh_balance()
        except LedgerError as exc:
            logger.warning("Balance refresh after sign-in failed: %s", exc.message)

    async def sign_out(self) -> Session:
        if self._store.current.state == SessionState.SIGNED_OUT:
            return self._store.current
        self._attempt += 1
        address = self._store.current.address
        self._store._replace(state=SessionState.SIGNING_OUT)
        try:
            await self._gateway.unauthenticate()
        except Exception:
            logger.exception("Wallet revoke failed for %s; clearing local session anyway", address)
        finally:
            self._account = None
            self._store._reset()
        logger.info("Signed out %s", address)
        return self._store.current

    async def refresh_balance(self) -> Decimal:
        """Replace Session.balance with the ledger's value.

        On failure the stored balance is left untouched and the LedgerError
        propagates to the caller.
        """
        session = self._store.current
        if not session.authenticated:
            raise AuthError(AuthFailure.NOT_SIGNED_IN)
        balance = await self._gateway.get_balance(session.address)  # type: ignore[arg-type]
        # Session may have changed while the query was in flight
        if self._store.current.address == session.address and self._store.current.authenticated:
            self._store._replace(balance=balance)
        return balance
