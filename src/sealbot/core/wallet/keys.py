"""Key material: turn a wallet credential string into a Sui signing identity.

Resolution order, first match wins:

1. ``suiprivkey...`` Bech32 private key
2. 44-character base64 token decoding to a 32-byte key
3. 64-character hex key, optionally ``0x``-prefixed
4. BIP-39 mnemonic, derived along ``m/44'/784'/0'/0'/0'``
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import re
from collections.abc import Callable
from dataclasses import dataclass, field

import nacl.signing
from bech32 import bech32_decode, convertbits
from mnemonic import Mnemonic

from sealbot.core.errors import InvalidCredentialFormat

PRIVATE_KEY_SIZE = 32
ED25519_FLAG = 0x00
SUI_PRIVATE_KEY_PREFIX = "suiprivkey"
DEFAULT_DERIVATION_PATH = "m/44'/784'/0'/0'/0'"

# Intent prefix for transaction data: scope, version, app id
TRANSACTION_INTENT = bytes([0, 0, 0])

_BASE64_PATTERN = re.compile(r"^[A-Za-z0-9+/=]+$")
_HEX_PATTERN = re.compile(r"^[0-9a-fA-F]{64}$")
_HARDENED_OFFSET = 0x80000000


@dataclass(frozen=True, repr=False)
class SigningIdentity:
    """An Ed25519 keypair together with its derived Sui address."""

    signing_key: nacl.signing.SigningKey = field(compare=False)
    address: str

    @classmethod
    def from_private_key(cls, private_key: bytes) -> SigningIdentity:
        """Build an identity from a raw 32-byte Ed25519 private key."""
        if len(private_key) != PRIVATE_KEY_SIZE:
            raise ValueError(
                f"Expected a {PRIVATE_KEY_SIZE}-byte private key, got {len(private_key)} bytes"
            )
        signing_key = nacl.signing.SigningKey(private_key)
        return cls(signing_key=signing_key, address=derive_address(bytes(signing_key.verify_key)))

    @property
    def public_key(self) -> bytes:
        """Raw Ed25519 public key."""
        return bytes(self.signing_key.verify_key)

    @property
    def masked_address(self) -> str:
        """Address shortened to a prefix and suffix for display."""
        return mask_address(self.address)

    def sign_transaction(self, tx_bytes: bytes) -> str:
        """
        Sign BCS transaction bytes with the transaction intent.

        Returns:
            Base64 serialized signature ``flag || signature || public key``
        """
        digest = hashlib.blake2b(TRANSACTION_INTENT + tx_bytes, digest_size=32).digest()
        signature = self.signing_key.sign(digest).signature
        return base64.b64encode(bytes([ED25519_FLAG]) + signature + self.public_key).decode()

    def __repr__(self) -> str:
        return f"SigningIdentity(address={self.masked_address!r})"


def derive_address(public_key: bytes) -> str:
    """Sui address of an Ed25519 public key."""
    digest = hashlib.blake2b(bytes([ED25519_FLAG]) + public_key, digest_size=32)
    return "0x" + digest.hexdigest()


def mask_address(address: str) -> str:
    """Shorten an address to ``0x1234...abcd``."""
    if len(address) <= 10:
        return address
    return f"{address[:6]}...{address[-4:]}"


def mask_secret(secret: str) -> str:
    """Mask a credential so that only a short prefix and suffix remain."""
    secret = secret.strip()
    if len(secret) <= 12:
        return "***"
    return f"{secret[:4]}...{secret[-4:]}"


# ============================================================================
# CREDENTIAL DECODERS
# ============================================================================


def _is_bech32_key(value: str) -> bool:
    return value.startswith(SUI_PRIVATE_KEY_PREFIX)


def _decode_bech32_key(value: str) -> bytes:
    hrp, data = bech32_decode(value)
    if hrp != SUI_PRIVATE_KEY_PREFIX or data is None:
        raise ValueError("malformed suiprivkey encoding")
    raw = convertbits(data, 5, 8, False)
    if raw is None or len(raw) != PRIVATE_KEY_SIZE + 1:
        raise ValueError("suiprivkey payload has an unexpected length")
    if raw[0] != ED25519_FLAG:
        raise ValueError(f"unsupported key scheme flag {raw[0]:#04x}, only Ed25519 is supported")
    return bytes(raw[1:])


def _is_base64_key(value: str) -> bool:
    if len(value) != 44 or not _BASE64_PATTERN.match(value):
        return False
    try:
        return len(base64.b64decode(value, validate=True)) == PRIVATE_KEY_SIZE
    except (binascii.Error, ValueError):
        return False


def _decode_base64_key(value: str) -> bytes:
    return base64.b64decode(value, validate=True)


def _strip_hex_prefix(value: str) -> str:
    return value[2:] if value.startswith("0x") else value


def _is_hex_key(value: str) -> bool:
    return bool(_HEX_PATTERN.match(_strip_hex_prefix(value)))


def _decode_hex_key(value: str) -> bytes:
    return bytes.fromhex(_strip_hex_prefix(value))


def _is_mnemonic(value: str) -> bool:
    return True


def _decode_mnemonic(value: str) -> bytes:
    phrase = " ".join(value.split())
    mnemo = Mnemonic("english")
    if not mnemo.check(phrase):
        raise ValueError("not a valid BIP-39 mnemonic phrase")
    return derive_ed25519_key(Mnemonic.to_seed(phrase), DEFAULT_DERIVATION_PATH)


def derive_ed25519_key(seed: bytes, path: str) -> bytes:
    """SLIP-0010 Ed25519 private key derivation along a hardened path."""
    digest = hmac.new(b"ed25519 seed", seed, hashlib.sha512).digest()
    key, chain_code = digest[:32], digest[32:]
    for index in _parse_hardened_path(path):
        data = b"\x00" + key + index.to_bytes(4, "big")
        digest = hmac.new(chain_code, data, hashlib.sha512).digest()
        key, chain_code = digest[:32], digest[32:]
    return key


def _parse_hardened_path(path: str) -> list[int]:
    segments = path.split("/")
    if not segments or segments[0] != "m":
        raise ValueError(f"Invalid derivation path: {path}")
    indexes = []
    for segment in segments[1:]:
        # Ed25519 only supports hardened derivation
        if not segment.endswith("'") or not segment[:-1].isdigit():
            raise ValueError(f"Invalid hardened path segment: {segment}")
        indexes.append(int(segment[:-1]) + _HARDENED_OFFSET)
    return indexes


@dataclass(frozen=True)
class CredentialDecoder:
    """One entry of the credential auto-detection chain."""

    name: str
    matches: Callable[[str], bool]
    decode: Callable[[str], bytes]


CREDENTIAL_DECODERS: tuple[CredentialDecoder, ...] = (
    CredentialDecoder("suiprivkey", _is_bech32_key, _decode_bech32_key),
    CredentialDecoder("base64", _is_base64_key, _decode_base64_key),
    CredentialDecoder("hex", _is_hex_key, _decode_hex_key),
    CredentialDecoder("mnemonic", _is_mnemonic, _decode_mnemonic),
)


def detect_format(credential: str) -> CredentialDecoder:
    """Return the first decoder whose predicate accepts the credential."""
    for decoder in CREDENTIAL_DECODERS:
        if decoder.matches(credential):
            return decoder
    raise InvalidCredentialFormat(mask_secret(credential))


def resolve_identity(credential: str) -> SigningIdentity:
    """
    Resolve a wallet credential into a signing identity.

    Raises:
        InvalidCredentialFormat: If decoding or derivation fails at any stage
    """
    credential = credential.strip()
    decoder = detect_format(credential)
    try:
        private_key = decoder.decode(credential)
        return SigningIdentity.from_private_key(private_key)
    except Exception as e:
        raise InvalidCredentialFormat(f"{decoder.name} {mask_secret(credential)}", e) from e
