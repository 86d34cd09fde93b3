"""Sui JSON-RPC chain client."""

from __future__ import annotations

import base64
import itertools
from typing import TYPE_CHECKING, Any

import httpx
import structlog

from sealbot.core.errors import ChainRpcError
from sealbot.core.models.chain import MoveCall, TransactionReceipt

if TYPE_CHECKING:
    from sealbot.core.wallet.keys import SigningIdentity

logger = structlog.get_logger(__name__)

EXECUTE_OPTIONS = {
    "showEffects": True,
    "showObjectChanges": True,
    "showEvents": True,
}
REQUEST_TYPE = "WaitForLocalExecution"


class SuiJsonRpcClient:
    """
    Minimal Sui full node client.

    Transactions are built by the node (``unsafe_moveCall``), signed locally
    and submitted with ``sui_executeTransactionBlock``.
    """

    def __init__(
        self,
        rpc_url: str,
        *,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            rpc_url: Full node JSON-RPC URL
            timeout: Request timeout in seconds
            client: Optional preconfigured HTTP client
        """
        self.rpc_url = rpc_url
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._ids = itertools.count(1)

    async def __aenter__(self) -> SuiJsonRpcClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def call(self, method: str, params: list[Any]) -> Any:
        """Issue one JSON-RPC request and return its ``result``."""
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }
        logger.debug("RPC request", method=method)
        response = await self._client.post(self.rpc_url, json=payload)
        response.raise_for_status()
        body = response.json()
        if "error" in body:
            error = body["error"] or {}
            raise ChainRpcError(method, error.get("message", "unknown error"), error.get("code"))
        return body.get("result")

    async def execute_move_call(
        self,
        identity: SigningIdentity,
        call: MoveCall,
    ) -> TransactionReceipt:
        """Build, sign and submit a Move call."""
        built = await self.call(
            "unsafe_moveCall",
            [
                identity.address,
                call.package_id,
                call.module,
                call.function,
                list(call.type_arguments),
                list(call.arguments),
                None,
                str(call.gas_budget) if call.gas_budget is not None else None,
            ],
        )
        tx_bytes = built["txBytes"]
        signature = identity.sign_transaction(base64.b64decode(tx_bytes))
        result = await self.call(
            "sui_executeTransactionBlock",
            [tx_bytes, [signature], EXECUTE_OPTIONS, REQUEST_TYPE],
        )
        return TransactionReceipt.from_rpc(result or {})

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
