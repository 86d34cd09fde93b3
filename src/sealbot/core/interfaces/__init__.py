"""Interface definitions for external collaborators."""

from sealbot.core.interfaces.chain import IChainClient

__all__ = ["IChainClient"]
