"""AccessNodeClient — thin httpx wrapper over the Flow Access REST API.

Only transport concerns live here: URLs, base64 framing and HTTP status
handling. Mapping failures onto the LedgerError vocabulary is the gateway's job,
so this layer raises AccessNodeError (HTTP status known) or lets
httpx.TransportError (no response at all) propagate.
"""

import base64
import json
import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class AccessNodeError(Exception):
    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"HTTP {status_code}: {message}")


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        return str(body.get("message") or body)
    return str(body)


class AccessNodeClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._http = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        response = await self._http.request(method, url, **kwargs)
        if response.is_error:
            message = _error_message(response)
            logger.debug("[%s] %s -> %d %s", method, url, response.status_code, message)
            raise AccessNodeError(response.status_code, message)
        return response.json()

    async def get_sealed_block_id(self) -> str:
        blocks = await self._request("GET", "/v1/blocks", params={"height": "sealed"})
        return blocks[0]["header"]["id"]

    async def send_transaction(self, body: dict[str, Any]) -> str:
        result = await self._request("POST", "/v1/transactions", json=body)
        return result["id"]

    async def get_transaction_result(self, transaction_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/v1/transaction_results/{transaction_id}")

    async def execute_script(self, script: str, arguments: list[dict[str, Any]]) -> dict[str, Any]:
        """Run a read-only script against the latest sealed block.

        The node answers with a JSON string holding base64'd JSON-Cadence.
        """
        payload = {
            "script": base64.b64encode(script.encode()).decode(),
            "arguments": [base64.b64encode(json.dumps(a).encode()).decode() for a in arguments],
        }
        encoded = await self._request(
            "POST", "/v1/scripts", params={"block_height": "sealed"}, json=payload
        )
        return json.loads(base64.b64decode(encoded))
