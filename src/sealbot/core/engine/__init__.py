"""Engine layer - workflows and wallet orchestration."""

from sealbot.core.engine.orchestrator import WalletTaskOrchestrator
from sealbot.core.engine.workflow import WorkflowEngine, WorkflowSettings, resolve_created_ids

__all__ = [
    "WalletTaskOrchestrator",
    "WorkflowEngine",
    "WorkflowSettings",
    "resolve_created_ids",
]
