"""Workflow data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class WorkflowKind(str, Enum):
    """Supported multi-step workflows."""

    ALLOWLIST = "allowlist"
    SUBSCRIPTION = "subscription"


class OrchestratorState(str, Enum):
    """Lifecycle of a wallet orchestration run."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class AllowlistResult:
    """Identifiers produced by a successful allowlist workflow."""

    allowlist_id: str
    entry_object_id: str
    blob_id: str

    kind = WorkflowKind.ALLOWLIST

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "allowlist_id": self.allowlist_id,
            "entry_object_id": self.entry_object_id,
            "blob_id": self.blob_id,
        }


@dataclass(frozen=True)
class SubscriptionResult:
    """Identifiers produced by a successful subscription workflow."""

    shared_object_id: str
    service_entry_id: str
    blob_id: str

    kind = WorkflowKind.SUBSCRIPTION

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "shared_object_id": self.shared_object_id,
            "service_entry_id": self.service_entry_id,
            "blob_id": self.blob_id,
        }


WorkflowResult = AllowlistResult | SubscriptionResult


@dataclass
class RunSummary:
    """Outcome of a full orchestration run."""

    total_wallets: int
    repetitions_per_wallet: int
    succeeded: int = 0
    failed: int = 0
    failed_wallets: list[int] = field(default_factory=list)
    results: list[WorkflowResult] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total_wallets": self.total_wallets,
            "repetitions_per_wallet": self.repetitions_per_wallet,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "failed_wallets": list(self.failed_wallets),
            "results": [r.to_dict() for r in self.results],
        }
