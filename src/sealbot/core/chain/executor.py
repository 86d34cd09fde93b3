"""Transaction execution with success classification."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from sealbot.core.errors import TransactionFailed

if TYPE_CHECKING:
    from sealbot.core.events.bus import EventBus
    from sealbot.core.interfaces.chain import IChainClient
    from sealbot.core.models.chain import MoveCall, TransactionReceipt
    from sealbot.core.wallet.keys import SigningIdentity

logger = structlog.get_logger(__name__)

DEFAULT_GAS_BUDGET = 10_000_000


class TransactionExecutor:
    """Submits Move calls and turns anything but explicit success into an error.

    There is no retry here: a failed transaction aborts the current workflow
    repetition.
    """

    def __init__(
        self,
        client: IChainClient,
        events: EventBus,
        gas_budget: int = DEFAULT_GAS_BUDGET,
    ) -> None:
        self._client = client
        self._events = events
        self.gas_budget = gas_budget

    async def execute(
        self,
        identity: SigningIdentity,
        call: MoveCall,
        label: str,
    ) -> TransactionReceipt:
        """
        Execute a Move call and wait for it to be finalized.

        Args:
            identity: Signing identity for the transaction
            call: Move call to submit
            label: Human readable action name for reporting

        Returns:
            The receipt of a successful transaction

        Raises:
            TransactionFailed: If submission fails or the status is not success
        """
        call = call.with_gas_budget(self.gas_budget)
        self._events.info(f"Executing transaction: {label}", target=call.target)

        try:
            receipt = await self._client.execute_move_call(identity, call)
        except Exception as e:
            self._events.error(f"Transaction failed: {label}", e, target=call.target)
            raise TransactionFailed(label, str(e)) from e

        if not receipt.succeeded:
            reason = receipt.error or (
                f"status {receipt.status}" if receipt.status else "Unknown error"
            )
            self._events.error(
                f"Transaction failed: {label} | Digest: {receipt.short_digest}",
                reason,
                digest=receipt.digest,
            )
            raise TransactionFailed(label, reason, digest=receipt.digest)

        logger.debug("Transaction confirmed", label=label, digest=receipt.digest)
        self._events.success(
            f"Transaction successful: {label} | Digest: {receipt.short_digest}",
            digest=receipt.digest,
        )
        return receipt
