"""Pluggable providers."""
