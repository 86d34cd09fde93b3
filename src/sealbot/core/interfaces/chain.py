"""Chain client interface definitions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sealbot.core.models.chain import MoveCall, TransactionReceipt
    from sealbot.core.wallet.keys import SigningIdentity


@runtime_checkable
class IChainClient(Protocol):
    """Contract for chain clients used by the transaction executor."""

    async def execute_move_call(
        self,
        identity: SigningIdentity,
        call: MoveCall,
    ) -> TransactionReceipt:
        """
        Build, sign and submit a Move call, waiting for local execution.

        Args:
            identity: Signing identity that pays for and authorizes the call
            call: The Move call, carrying its gas budget

        Returns:
            Receipt with effects status and object changes

        Raises:
            ChainRpcError: If the node rejects the request
        """
        ...

    async def close(self) -> None:
        """Release client resources."""
        ...
