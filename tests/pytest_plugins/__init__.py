"""Shared test doubles for sealbot tests."""
