"""Sealbot - batch automation of Seal allowlist/subscription workflows on Sui."""

__version__ = "0.1.0"
