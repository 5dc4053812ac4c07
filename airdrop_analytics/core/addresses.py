"""Wallet address normalization.

Trimmed, lowercased text is the canonical identity of an address; both
ingestion and lookup go through ``normalize_address``.
"""

import re

WALLET_ADDRESS_PATTERN = re.compile(r"^0x[0-9a-f]{40}$")


def normalize_address(raw_address: str) -> str:
    """Trim whitespace and lowercase an address."""
    return raw_address.strip().lower()


def is_wallet_address(address: str) -> bool:
    """Check for the ``0x`` + 40 hex characters shape (after normalization)."""
    return bool(WALLET_ADDRESS_PATTERN.match(normalize_address(address)))
