"""Unit tests for FlowLedgerGateway against an in-process access node.

The access node is an httpx.MockTransport; the wallet is the in-memory fake.
"""

import base64
import json
from decimal import Decimal
from typing import Any

import httpx
import pytest

from src.fp_common.errors import (
    AuthorizationMissingError,
    ExecutionRevertedError,
    FinalityTimeoutError,
    NetworkUnavailableError,
    QueryFailedError,
    SubmissionRejectedError,
)
from src.fp_ledger import cadence, templates
from src.fp_ledger.access_client import AccessNodeClient
from src.fp_ledger.gateway import FlowLedgerGateway
from src.fp_ledger.wallet import WalletAccount
from tests.fakes import ALICE, FakeSigner, FakeWallet

ADDRESSES = {
    "0xFlowPonder": "0xf8d6e0586b0a20c7",
    "0xFlowToken": "0x0ae53cb6e3f42a79",
    "0xFungibleToken": "0xee82856bf20e2aa6",
}


def _b64_json(value: Any) -> str:
    return base64.b64encode(json.dumps(value).encode()).decode()


class FakeAccessNode:
    """Routes Flow Access API requests to canned responses."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.block_status = 200
        self.send_status = 200
        self.results: list[tuple[int, dict[str, Any]]] = []
        self.script_result: Any = {"type": "UFix64", "value": "12.50000000"}
        self.script_status = 200
        self.fail_transport = False

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_transport:
            raise httpx.ConnectError("connection refused", request=request)
        path = request.url.path
        if path == "/v1/blocks":
            if self.block_status != 200:
                return httpx.Response(self.block_status, json={"message": "unavailable"})
            return httpx.Response(200, json=[{"header": {"id": "blk1", "height": "10"}}])
        if path == "/v1/transactions":
            if self.send_status != 200:
                return httpx.Response(self.send_status, json={"message": "invalid signature"})
            return httpx.Response(201, json={"id": "tx1"})
        if path.startswith("/v1/transaction_results/"):
            status, body = self.results.pop(0) if len(self.results) > 1 else self.results[0]
            return httpx.Response(status, json=body)
        if path == "/v1/scripts":
            if self.script_status != 200:
                return httpx.Response(self.script_status, json={"message": "cadence panic"})
            return httpx.Response(200, json=_b64_json(self.script_result))
        return httpx.Response(404, json={"message": "not found"})

    def bodies(self, path: str) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests if r.url.path == path]


def _make_gateway(
    node: FakeAccessNode, wallet: FakeWallet | None = None, timeout: float = 1.0
) -> FlowLedgerGateway:
    client = AccessNodeClient("http://access.test", transport=httpx.MockTransport(node.handler))
    return FlowLedgerGateway(
        client,
        wallet or FakeWallet(),
        ADDRESSES,
        gas_limit=9999,
        finality_timeout=timeout,
        poll_interval=0.01,
    )


def _signer(decline: bool = False) -> WalletAccount:
    return WalletAccount(ALICE, FakeSigner(ALICE, decline=decline))


def _sealed(events: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    return {
        "block_id": "blk2",
        "status": "Sealed",
        "status_code": 0,
        "error_message": "",
        "events": events or [],
    }


class TestSubmitTransaction:
    async def test_posts_signed_body(self) -> None:
        node = FakeAccessNode()
        gw = _make_gateway(node)

        tx_id = await gw.submit_transaction(
            templates.PLACE_VOTE,
            [cadence.uint64(3), cadence.uint8(0), cadence.ufix64("2.0")],
            _signer(),
        )

        assert tx_id == "tx1"
        [body] = node.bodies("/v1/transactions")
        assert body["reference_block_id"] == "blk1"
        assert body["gas_limit"] == "9999"
        script = base64.b64decode(body["script"]).decode()
        assert "import FlowPonder from 0xf8d6e0586b0a20c7" in script
        args = [json.loads(base64.b64decode(a)) for a in body["arguments"]]
        assert args == [
            {"type": "UInt64", "value": "3"},
            {"type": "UInt8", "value": "0"},
            {"type": "UFix64", "value": "2.00000000"},
        ]
        assert body["payer"] == ALICE[2:]

    async def test_no_signer(self) -> None:
        node = FakeAccessNode()
        gw = _make_gateway(node)
        with pytest.raises(AuthorizationMissingError):
            await gw.submit_transaction(templates.WITHDRAW_WINNINGS, [cadence.uint64(1)], None)
        assert node.requests == []

    async def test_bad_argument_rejected_before_network(self) -> None:
        node = FakeAccessNode()
        gw = _make_gateway(node)
        with pytest.raises(SubmissionRejectedError):
            await gw.submit_transaction(
                templates.PLACE_VOTE,
                [cadence.uint64(3), cadence.uint8(0), cadence.ufix64("-1")],
                _signer(),
            )
        assert node.requests == []

    async def test_wallet_declines_signature(self) -> None:
        node = FakeAccessNode()
        gw = _make_gateway(node)
        with pytest.raises(SubmissionRejectedError, match="declined"):
            await gw.submit_transaction(
                templates.WITHDRAW_WINNINGS, [cadence.uint64(1)], _signer(decline=True)
            )
        assert node.bodies("/v1/transactions") == []

    async def test_node_rejects(self) -> None:
        node = FakeAccessNode()
        node.send_status = 400
        gw = _make_gateway(node)
        with pytest.raises(SubmissionRejectedError, match="invalid signature"):
            await gw.submit_transaction(templates.WITHDRAW_WINNINGS, [cadence.uint64(1)], _signer())

    async def test_node_down(self) -> None:
        node = FakeAccessNode()
        node.send_status = 503
        gw = _make_gateway(node)
        with pytest.raises(NetworkUnavailableError):
            await gw.submit_transaction(templates.WITHDRAW_WINNINGS, [cadence.uint64(1)], _signer())

    async def test_unreachable(self) -> None:
        node = FakeAccessNode()
        node.fail_transport = True
        gw = _make_gateway(node)
        with pytest.raises(NetworkUnavailableError) as exc_info:
            await gw.submit_transaction(templates.WITHDRAW_WINNINGS, [cadence.uint64(1)], _signer())
        assert exc_info.value.retryable


class TestAwaitFinality:
    async def test_sealed_with_event(self) -> None:
        node = FakeAccessNode()
        payload = {
            "type": "Event",
            "value": {
                "id": "A.f8d6e0586b0a20c7.FlowPonder.PonderCreated",
                "fields": [{"name": "id", "value": {"type": "UInt64", "value": "5"}}],
            },
        }
        node.results = [
            (200, {"status": "Pending", "status_code": 0, "events": []}),
            (200, _sealed([{
                "type": "A.f8d6e0586b0a20c7.FlowPonder.PonderCreated",
                "event_index": "0",
                "payload": _b64_json(payload),
            }])),
        ]
        gw = _make_gateway(node)

        result = await gw.await_finality("tx1")

        assert result.status == "Sealed"
        assert result.block_id == "blk2"
        assert result.find_event("PonderCreated").fields == {"id": 5}

    async def test_not_indexed_yet_keeps_polling(self) -> None:
        node = FakeAccessNode()
        node.results = [(404, {"message": "not found"}), (200, _sealed())]
        gw = _make_gateway(node)
        result = await gw.await_finality("tx1")
        assert result.status == "Sealed"

    async def test_reverted(self) -> None:
        node = FakeAccessNode()
        node.results = [(200, {
            "status": "Sealed",
            "status_code": 1,
            "error_message": "panic: Ponder has ended",
            "events": [],
        })]
        gw = _make_gateway(node)
        with pytest.raises(ExecutionRevertedError) as exc_info:
            await gw.await_finality("tx1")
        assert "Ponder has ended" in exc_info.value.reason

    async def test_expired(self) -> None:
        node = FakeAccessNode()
        node.results = [(200, {"status": "Expired", "status_code": 0, "events": []})]
        gw = _make_gateway(node)
        with pytest.raises(ExecutionRevertedError, match="expired"):
            await gw.await_finality("tx1")

    async def test_timeout(self) -> None:
        node = FakeAccessNode()
        node.results = [(200, {"status": "Pending", "status_code": 0, "events": []})]
        gw = _make_gateway(node)
        with pytest.raises(FinalityTimeoutError) as exc_info:
            await gw.await_finality("tx1", timeout=0.05)
        assert exc_info.value.transaction_id == "tx1"

    async def test_node_error(self) -> None:
        node = FakeAccessNode()
        node.results = [(500, {"message": "boom"})]
        gw = _make_gateway(node)
        with pytest.raises(NetworkUnavailableError):
            await gw.await_finality("tx1")

    async def test_malformed_event_payload(self) -> None:
        node = FakeAccessNode()
        node.results = [(200, _sealed([{
            "type": "A.f8d6e0586b0a20c7.FlowPonder.PonderCreated",
            "payload": _b64_json({"type": "UInt64", "value": None}),
        }]))]
        gw = _make_gateway(node)
        with pytest.raises(QueryFailedError, match="tx1"):
            await gw.await_finality("tx1")

    async def test_result_body_not_an_object(self) -> None:
        node = FakeAccessNode()
        node.results = [(200, ["Sealed"])]  # type: ignore[list-item]
        gw = _make_gateway(node)
        with pytest.raises(QueryFailedError):
            await gw.await_finality("tx1")


class TestQuery:
    async def test_decodes_result(self) -> None:
        node = FakeAccessNode()
        node.script_result = {
            "type": "Array",
            "value": [{"type": "Address", "value": ALICE}],
        }
        gw = _make_gateway(node)

        result = await gw.query(templates.GET_LEADERBOARD)

        assert result == [ALICE]
        [body] = node.bodies("/v1/scripts")
        assert body["arguments"] == []
        [request] = [r for r in node.requests if r.url.path == "/v1/scripts"]
        assert request.url.params["block_height"] == "sealed"

    async def test_script_failure(self) -> None:
        node = FakeAccessNode()
        node.script_status = 400
        gw = _make_gateway(node)
        with pytest.raises(QueryFailedError, match="cadence panic"):
            await gw.query(templates.GET_PONDER, [cadence.uint64(1)])

    async def test_unreachable(self) -> None:
        node = FakeAccessNode()
        node.fail_transport = True
        gw = _make_gateway(node)
        with pytest.raises(QueryFailedError):
            await gw.query(templates.GET_LEADERBOARD)

    async def test_get_balance(self) -> None:
        node = FakeAccessNode()
        gw = _make_gateway(node)
        assert await gw.get_balance(ALICE) == Decimal("12.5")

    async def test_get_balance_wrong_type(self) -> None:
        node = FakeAccessNode()
        node.script_result = {"type": "String", "value": "lots"}
        gw = _make_gateway(node)
        with pytest.raises(QueryFailedError):
            await gw.get_balance(ALICE)

    @pytest.mark.parametrize(
        "payload",
        [
            {"type": "UFix64", "value": "garbage"},
            {"type": "UInt64", "value": None},
            {"type": "Struct", "value": ["not", "a", "composite"]},
            {"type": "Array", "value": [{"type": "Int", "value": {}}]},
            "not json-cadence",
        ],
    )
    async def test_malformed_payload(self, payload: Any) -> None:
        node = FakeAccessNode()
        node.script_result = payload
        gw = _make_gateway(node)
        with pytest.raises(QueryFailedError, match="get_leaderboard"):
            await gw.query(templates.GET_LEADERBOARD)


class TestWalletDelegation:
    async def test_authenticate_normalizes_address(self) -> None:
        wallet = FakeWallet(address="01CF0E2F2F715450")
        gw = _make_gateway(FakeAccessNode(), wallet=wallet)
        account = await gw.authenticate()
        assert account.address == "0x01cf0e2f2f715450"

    async def test_current_account_when_signed_out(self) -> None:
        gw = _make_gateway(FakeAccessNode())
        assert await gw.current_account() is None
