"""Wallet credentials and signing identities."""

from sealbot.core.wallet.keys import SigningIdentity, mask_address, mask_secret, resolve_identity
from sealbot.core.wallet.loader import load_proxies, load_wallets, read_list_file

__all__ = [
    "SigningIdentity",
    "load_proxies",
    "load_wallets",
    "mask_address",
    "mask_secret",
    "read_list_file",
    "resolve_identity",
]
