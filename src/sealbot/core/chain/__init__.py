"""Chain layer - transaction submission."""

from sealbot.core.chain.executor import TransactionExecutor
from sealbot.core.chain.sui_client import SuiJsonRpcClient

__all__ = ["SuiJsonRpcClient", "TransactionExecutor"]
