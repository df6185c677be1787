"""Bech32 addresses and the process-wide prefix table."""

import threading
from dataclasses import dataclass
from typing import Optional, Tuple

import bech32

from .errors import BadRequest, ConfigInvalid


def bech32_decode(address: str) -> Tuple[str, bytes]:
    """Return ``(hrp, payload)`` or raise ``ValueError``."""
    hrp, data = bech32.bech32_decode(address)
    if hrp is None:
        raise ValueError("invalid bech32 string")
    payload = bech32.convertbits(data, 5, 8, False)
    if payload is None:
        raise ValueError("invalid padding")
    return hrp, bytes(payload)


def bech32_encode(hrp: str, payload: bytes) -> str:
    return bech32.bech32_encode(hrp, bech32.convertbits(payload, 8, 5))


@dataclass(frozen=True)
class AddressPrefixes:
    account: str
    account_pubkey: str
    validator: str
    validator_pubkey: str
    consensus_node: str
    consensus_node_pubkey: str

    @classmethod
    def from_base(cls, prefix: str) -> "AddressPrefixes":
        return cls(
            account=prefix,
            account_pubkey=prefix + "pub",
            validator=prefix + "valoper",
            validator_pubkey=prefix + "valoperpub",
            consensus_node=prefix + "valcons",
            consensus_node_pubkey=prefix + "valconspub",
        )


_prefixes: Optional[AddressPrefixes] = None
_lock = threading.Lock()


def configure_prefixes(prefixes: AddressPrefixes) -> None:
    """Install the prefix table. It can be set once per process."""
    global _prefixes
    with _lock:
        if _prefixes is not None:
            raise ConfigInvalid("address prefixes are already sealed")
        _prefixes = prefixes


def prefixes() -> AddressPrefixes:
    if _prefixes is None:
        raise ConfigInvalid("address prefixes are not configured")
    return _prefixes


def _decode_with_prefix(address: str, expected: str, kind: str) -> bytes:
    if not address:
        raise BadRequest(f"empty {kind} address")
    try:
        hrp, payload = bech32_decode(address)
    except ValueError as e:
        raise BadRequest(f"could not decode {kind} address {address!r}: {e}") from e
    if hrp != expected:
        raise BadRequest(f"invalid {kind} address prefix: expected {expected!r}, got {hrp!r}")
    return payload


def decode_account(address: str) -> bytes:
    return _decode_with_prefix(address, prefixes().account, "account")


def decode_validator(address: str) -> bytes:
    return _decode_with_prefix(address, prefixes().validator, "validator")


def encode_consensus(payload: bytes) -> str:
    return bech32_encode(prefixes().consensus_node, payload)


def consensus_address_bytes(address: str) -> Optional[bytes]:
    """Raw bytes of a consensus address given as Bech32 or hex, else None."""
    if not address:
        return None
    try:
        return bech32_decode(address)[1]
    except ValueError:
        pass
    try:
        return bytes.fromhex(address)
    except ValueError:
        return None
