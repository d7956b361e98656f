"""Object graph: settings -> access client -> gateway -> session/auth -> orchestrator.

The wallet is the only piece the host must supply; everything else is built
from Settings. Tests pass an httpx transport to keep traffic in-process.
"""

from dataclasses import dataclass

import httpx

from config.settings import Settings, settings
from src.fp_auth.service import AuthService
from src.fp_auth.session import SessionStore
from src.fp_ledger.access_client import AccessNodeClient
from src.fp_ledger.gateway import FlowLedgerGateway
from src.fp_ledger.wallet import WalletProtocol
from src.fp_market.application.queries import MarketReadService
from src.fp_market.application.service import MarketOrchestrator
from src.fp_market.infrastructure.persistence import LedgerPonderRepository


@dataclass
class Container:
    settings: Settings
    client: AccessNodeClient
    gateway: FlowLedgerGateway
    session_store: SessionStore
    auth: AuthService
    orchestrator: MarketOrchestrator
    reads: MarketReadService

    async def aclose(self) -> None:
        await self.client.aclose()


def contract_addresses(cfg: Settings) -> dict[str, str]:
    return {
        "0xFlowPonder": cfg.PONDER_CONTRACT_ADDRESS,
        "0xFlowToken": cfg.FLOW_TOKEN_ADDRESS,
        "0xFungibleToken": cfg.FUNGIBLE_TOKEN_ADDRESS,
    }


def build_container(
    wallet: WalletProtocol,
    cfg: Settings = settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Container:
    client = AccessNodeClient(cfg.ACCESS_NODE_URL, cfg.HTTP_TIMEOUT_SECONDS, transport=transport)
    gateway = FlowLedgerGateway(
        client,
        wallet,
        contract_addresses(cfg),
        gas_limit=cfg.GAS_LIMIT,
        finality_timeout=cfg.FINALITY_TIMEOUT_SECONDS,
        poll_interval=cfg.FINALITY_POLL_INTERVAL_SECONDS,
    )
    store = SessionStore()
    auth = AuthService(gateway, store, auth_timeout=cfg.AUTH_TIMEOUT_SECONDS)
    repo = LedgerPonderRepository(gateway)
    orchestrator = MarketOrchestrator(
        gateway,
        auth,
        repo=repo,
        creation_fee=cfg.CREATION_FEE,
        min_bet_floor=cfg.MIN_BET_FLOOR,
    )
    return Container(
        settings=cfg,
        client=client,
        gateway=gateway,
        session_store=store,
        auth=auth,
        orchestrator=orchestrator,
        reads=MarketReadService(repo),
    )
