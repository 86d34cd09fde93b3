"""Data models."""

from sealbot.core.models.chain import MoveCall, ObjectChange, TransactionReceipt
from sealbot.core.models.config import Config
from sealbot.core.models.proxy import Proxy, ProxyType
from sealbot.core.models.workflow import (
    AllowlistResult,
    OrchestratorState,
    RunSummary,
    SubscriptionResult,
    WorkflowKind,
    WorkflowResult,
)

__all__ = [
    "AllowlistResult",
    "Config",
    "MoveCall",
    "ObjectChange",
    "OrchestratorState",
    "Proxy",
    "ProxyType",
    "RunSummary",
    "SubscriptionResult",
    "TransactionReceipt",
    "WorkflowKind",
    "WorkflowResult",
]
