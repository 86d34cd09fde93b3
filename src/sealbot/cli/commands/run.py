"""Run command implementation."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog
from rich.console import Console

from sealbot.cli.console import ConsoleReporter
from sealbot.core.chain.executor import TransactionExecutor
from sealbot.core.chain.sui_client import SuiJsonRpcClient
from sealbot.core.engine.orchestrator import WalletTaskOrchestrator
from sealbot.core.engine.workflow import WorkflowEngine, WorkflowSettings
from sealbot.core.errors import NoPublishersConfigured, NoWalletsLoaded
from sealbot.core.events.bus import EventBus
from sealbot.core.events.handlers import StructlogHandler
from sealbot.core.storage.content import ContentResolver
from sealbot.core.storage.uploader import BackoffPolicy, BlobUploadManager
from sealbot.core.wallet.loader import load_wallets
from sealbot.logging_config import configure_logging
from sealbot.plugins.proxies import ProxyRotator

if TYPE_CHECKING:
    from sealbot.core.models.config import Config
    from sealbot.core.models.workflow import RunSummary

logger = structlog.get_logger(__name__)

console = Console()

REPETITIONS_PROMPT = "How many times do you want to repeat the tasks per wallet?"


def parse_repetitions(raw: str | None) -> tuple[int, str | None]:
    """
    Parse the repetition count entered by the operator.

    Returns:
        ``(count, warning)``: ``warning`` is set when the input was blank or
        invalid and the default of 1 was used instead
    """
    value = (raw or "").strip()
    if not value:
        return 1, "No repetition count given, defaulting to 1."
    try:
        count = int(value)
    except ValueError:
        return 1, f"Invalid repetition count '{value}', defaulting to 1."
    if count < 1:
        return 1, f"Repetition count must be positive (got {count}), defaulting to 1."
    return count, None


def prompt_repetitions() -> int:
    """Ask the operator for the repetition count."""
    raw = console.input(f"[bold]{REPETITIONS_PROMPT}[/bold] ")
    count, warning = parse_repetitions(raw)
    if warning:
        console.print(f"[yellow]{warning}[/yellow]")
    return count


async def run_bot(cfg: Config) -> RunSummary:
    """
    Build the full stack from configuration and process every wallet.

    Raises:
        NoWalletsLoaded: If the wallet file yields no credentials
        NoPublishersConfigured: If no publisher URL is configured
    """
    events = EventBus(history_size=cfg.log.history_size)
    ConsoleReporter(console, show_debug=cfg.log.level == "DEBUG").attach(events)
    if cfg.log.structured or cfg.log.file:
        StructlogHandler().attach(events)

    credentials = load_wallets(cfg.files.wallets)
    events.success(f"Loaded {len(credentials)} wallets from {cfg.files.wallets}")

    proxies = ProxyRotator.from_file(cfg.files.proxies, events)

    publisher = cfg.publisher
    uploader = BlobUploadManager(
        publisher.urls,
        events,
        proxies=proxies,
        max_retries=publisher.max_retries,
        backoff=BackoffPolicy(
            initial=publisher.retry_delay,
            multiplier=publisher.retry_multiplier,
            maximum=publisher.retry_delay_max,
        ),
        timeout=publisher.request_timeout,
    )
    resolver = ContentResolver(
        events,
        proxies=proxies,
        timeout=publisher.request_timeout,
    )
    settings = WorkflowSettings(
        package_id=cfg.chain.package_id,
        content_source=cfg.workflow.content_source,
        epochs=publisher.epochs,
        additional_addresses=cfg.workflow.additional_addresses,
        subscription_amount=cfg.workflow.subscription_amount,
        subscription_duration=cfg.workflow.subscription_duration,
    )

    async with SuiJsonRpcClient(cfg.chain.rpc_url, timeout=cfg.chain.request_timeout) as client:
        executor = TransactionExecutor(client, events, gas_budget=cfg.chain.gas_budget)
        engine = WorkflowEngine(executor, uploader, resolver, events, settings)
        orchestrator = WalletTaskOrchestrator(
            credentials,
            engine,
            events,
            workflow=cfg.workflow.kind,
            repetitions=cfg.workflow.repetitions,
            repeat_delay=cfg.workflow.repeat_delay,
        )
        return await orchestrator.run()


def execute_run(cfg: Config) -> int:
    """Run the bot to completion and return the process exit code."""
    configure_logging(cfg.log.level, structured=cfg.log.structured, file=cfg.log.file)
    logger.debug("Starting run", workflow=cfg.workflow.kind.value)

    try:
        summary = asyncio.run(run_bot(cfg))
    except (NoWalletsLoaded, NoPublishersConfigured) as e:
        console.print(f"[red]{e}[/red]")
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted, shutting down.[/yellow]")
        return 130

    console.print()
    console.print(
        f"[bold]Run finished:[/bold] {summary.succeeded} succeeded, "
        f"{summary.failed} failed across {summary.total_wallets} wallets"
    )
    if summary.failed_wallets:
        indexes = ", ".join(str(i) for i in summary.failed_wallets)
        console.print(f"[red]Wallets that failed to initialise: {indexes}[/red]")
    return 0
