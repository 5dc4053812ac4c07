"""Point lookup of a single wallet's allocation."""

from typing import Mapping

from ..core.addresses import normalize_address


def lookup(table: Mapping[str, int], raw_address: str) -> int | None:
    """
    Find the allocation for an address.

    The address is normalized the same way ingestion normalizes it, so
    ``"  0xABC  "`` and ``"0xabc"`` resolve to the same entry.

    Returns:
        The allocated amount, or None if the address is not in the table
    """
    return table.get(normalize_address(raw_address))
