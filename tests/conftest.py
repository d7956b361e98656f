"""Shared test fixtures."""

from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient

from config.settings import Settings
from src.bootstrap import Container
from src.fp_auth.service import AuthService
from src.fp_auth.session import SessionStore
from src.fp_common.datetime_utils import unix_now
from src.fp_ledger.access_client import AccessNodeClient
from src.fp_market.application.queries import MarketReadService
from src.fp_market.application.service import MarketOrchestrator
from src.fp_market.infrastructure.persistence import LedgerPonderRepository
from src.main import create_app
from tests.fakes import ALICE, FakeLedger


@pytest.fixture
def ledger() -> FakeLedger:
    """In-memory ledger on the wall clock; ALICE starts with 10 FLOW."""
    fake = FakeLedger(now=unix_now())
    fake.balances[ALICE] = Decimal("10")
    return fake


@pytest.fixture
def container(ledger: FakeLedger) -> Container:
    """Real services wired over the in-memory ledger instead of an access node."""
    cfg = Settings(FLOW_NETWORK="local")
    store = SessionStore()
    auth = AuthService(ledger, store, auth_timeout=cfg.AUTH_TIMEOUT_SECONDS)
    repo = LedgerPonderRepository(ledger)
    return Container(
        settings=cfg,
        client=AccessNodeClient(cfg.ACCESS_NODE_URL),
        gateway=ledger,  # type: ignore[arg-type]
        session_store=store,
        auth=auth,
        orchestrator=MarketOrchestrator(ledger, auth, repo=repo),
        reads=MarketReadService(repo),
    )


@pytest.fixture
async def client(container: Container) -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=create_app(container))
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    await container.aclose()
