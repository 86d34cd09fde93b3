"""Wallet task orchestrator - runs a workflow for every wallet, N times each."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import TYPE_CHECKING

import structlog

from sealbot.core.errors import SealBotError
from sealbot.core.models.workflow import OrchestratorState, RunSummary, WorkflowKind
from sealbot.core.wallet.keys import SigningIdentity, resolve_identity

if TYPE_CHECKING:
    from sealbot.core.engine.workflow import WorkflowEngine
    from sealbot.core.events.bus import EventBus

logger = structlog.get_logger(__name__)

DEFAULT_REPEAT_DELAY = 10.0


class WalletTaskOrchestrator:
    """
    Processes wallets strictly one after another.

    For each wallet a fresh signing identity is derived and the configured
    workflow is repeated ``repetitions`` times, sleeping ``repeat_delay``
    seconds between repetitions. A failed repetition is reported and the next
    one still runs, unless the error aborts the wallet. A failed wallet never
    stops the following wallets.
    """

    def __init__(
        self,
        credentials: Sequence[str],
        engine: WorkflowEngine,
        events: EventBus,
        *,
        workflow: WorkflowKind = WorkflowKind.ALLOWLIST,
        repetitions: int = 1,
        repeat_delay: float = DEFAULT_REPEAT_DELAY,
        identity_resolver: Callable[[str], SigningIdentity] = resolve_identity,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            credentials: Wallet credentials, processed in order
            engine: Workflow engine
            events: Event bus for log and status reporting
            workflow: Workflow to run for every repetition
            repetitions: Repetitions per wallet
            repeat_delay: Seconds to wait between repetitions of one wallet
            identity_resolver: Turns a credential into a signing identity
            sleep: Coroutine used for the inter-repetition delay
        """
        if repetitions < 1:
            raise ValueError("repetitions must be at least 1")
        if repeat_delay < 0:
            raise ValueError("repeat_delay must not be negative")

        self._credentials = list(credentials)
        self._engine = engine
        self._events = events
        self.workflow = workflow
        self.repetitions = repetitions
        self.repeat_delay = repeat_delay
        self._resolve_identity = identity_resolver
        self._sleep = sleep
        self._state = OrchestratorState.IDLE

    @property
    def state(self) -> OrchestratorState:
        """Current lifecycle state."""
        return self._state

    @property
    def total_wallets(self) -> int:
        return len(self._credentials)

    async def run(self) -> RunSummary:
        """
        Process every wallet.

        Returns:
            Summary of succeeded and failed repetitions

        Raises:
            RuntimeError: If the orchestrator has already run
            asyncio.CancelledError: If the run is interrupted
        """
        if self._state != OrchestratorState.IDLE:
            raise RuntimeError(f"Orchestrator cannot run from state {self._state.value}")

        total = self.total_wallets
        summary = RunSummary(total_wallets=total, repetitions_per_wallet=self.repetitions)
        self._state = OrchestratorState.RUNNING
        self._set_overall_status("Running")
        self._events.publish_status(
            total_wallets=total,
            total_repetitions=self.repetitions,
            active_bots=total,
        )
        self._events.info(f"Starting {self.workflow.value} workflow for {total} wallet(s)...")
        self._events.info(f"Tasks per wallet: {self.repetitions} repetition(s)")
        if self.repeat_delay > 0 and self.repetitions > 1:
            self._events.info(f"Delay between repetitions: {self.repeat_delay:g} seconds")

        try:
            for index, credential in enumerate(self._credentials):
                await self._process_wallet(index, credential, summary)
        except asyncio.CancelledError:
            self._state = OrchestratorState.CANCELLED
            self._events.warn("Run cancelled, stopping wallet processing.")
            self._set_overall_status("Cancelled")
            raise
        except SealBotError as e:
            self._state = OrchestratorState.FAILED
            self._events.error("Run halted", e)
            self._set_overall_status("Halted")
            raise

        self._state = OrchestratorState.COMPLETED
        self._events.success("--- All Wallet Processing Finished ---")
        self._set_overall_status("Completed")
        logger.info("Run completed", **summary.to_dict())
        return summary

    async def _process_wallet(self, index: int, credential: str, summary: RunSummary) -> None:
        total = self.total_wallets
        prefix = f"Wallet {index + 1}/{total}"
        self._events.info(f"--- Processing {prefix} ---")

        try:
            try:
                identity = self._resolve_identity(credential)
            except SealBotError as e:
                self._events.error(f"Failed to initialize {prefix}", e, wallet_index=index + 1)
                summary.failed_wallets.append(index + 1)
                return

            masked = identity.masked_address
            self._events.info(
                f"Wallet {index + 1}/{total} loaded: {masked}",
                address=identity.address,
                wallet_index=index + 1,
            )
            self._events.publish_status(loaded_wallet=masked, wallet_index=index + 1, repetition=0)
            self._set_overall_status(f"Processing {prefix}")

            for repetition in range(1, self.repetitions + 1):
                aborted = await self._run_repetition(identity, prefix, repetition, summary)
                if aborted:
                    summary.failed_wallets.append(index + 1)
                    break
                if repetition < self.repetitions and self.repeat_delay > 0:
                    self._events.wait(
                        f"Waiting {self.repeat_delay:g}s before next repetition for {prefix}..."
                    )
                    await self._sleep(self.repeat_delay)
        finally:
            self._events.info(f"--- Finished Processing {prefix} ---")
            self._events.publish_status(active_bots=total - (index + 1))

    async def _run_repetition(
        self,
        identity: SigningIdentity,
        prefix: str,
        repetition: int,
        summary: RunSummary,
    ) -> bool:
        """Run one repetition; returns True if the wallet must be abandoned."""
        task_prefix = f"Task Repetition {repetition}/{self.repetitions}"
        self._events.publish_status(repetition=repetition)
        self._events.info(f"Starting {task_prefix} for {prefix}")

        try:
            result = await self._engine.run(self.workflow, identity)
        except SealBotError as e:
            summary.failed += 1
            self._events.error(f"{task_prefix} failed for {prefix}", e, repetition=repetition)
            if e.aborts_run:
                raise
            return e.aborts_wallet
        except Exception as e:
            summary.failed += 1
            logger.exception("Unexpected repetition error", repetition=repetition)
            self._events.error(f"{task_prefix} failed for {prefix}", e, repetition=repetition)
            return False

        summary.succeeded += 1
        summary.results.append(result)
        self._events.success(f"{task_prefix} completed for {prefix}")
        return False

    def _set_overall_status(self, status: str) -> None:
        self._events.publish_status(overall_status=status)
        self._events.info(f"Overall status changed: {status}")
