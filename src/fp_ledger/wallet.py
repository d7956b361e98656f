# src/fp_ledger/wallet.py
"""Wallet Protocol — the host-provided approval flow.

The client never touches key material. A wallet hands back the account
address plus a signer that turns an unsigned transaction into a complete,
signed access-node request body (payer, proposal key, authorizers,
signatures). Hosts and tests inject their own implementation.
"""

from dataclasses import dataclass
from typing import Any, Protocol

from src.fp_ledger.models import UnsignedTransaction


class WalletDeclinedError(Exception):
    """Raised by a wallet when the user refuses to approve a request."""


class SignerProtocol(Protocol):
    async def sign(self, transaction: UnsignedTransaction) -> dict[str, Any]: ...


@dataclass(frozen=True)
class WalletAccount:
    address: str
    signer: SignerProtocol


class WalletProtocol(Protocol):
    async def authenticate(self) -> WalletAccount: ...

    async def unauthenticate(self) -> None: ...

    async def current_account(self) -> WalletAccount | None: ...
