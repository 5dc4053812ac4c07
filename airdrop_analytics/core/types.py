"""Type definitions and enums for the airdrop analytics tool."""

from enum import Enum
from typing import Literal


class DataSource(str, Enum):
    """Where the allocation text came from."""

    REMOTE_CSV = "remote_csv"
    LOCAL_FILE = "local_file"
    INLINE = "inline"
    UNKNOWN = "unknown"


class SkipReason(str, Enum):
    """Why a CSV data line was dropped during ingestion."""

    MISSING_FIELD = "missing_field"          # No comma, or empty address/amount
    INVALID_AMOUNT = "invalid_amount"        # Amount is not a numeric literal
    NEGATIVE_AMOUNT = "negative_amount"      # Amount parsed but below zero
    INVALID_ADDRESS = "invalid_address"      # Strict mode only

    @property
    def display_name(self) -> str:
        """Human-readable display name."""
        names = {
            SkipReason.MISSING_FIELD: "Missing field",
            SkipReason.INVALID_AMOUNT: "Invalid amount",
            SkipReason.NEGATIVE_AMOUNT: "Negative amount",
            SkipReason.INVALID_ADDRESS: "Invalid address",
        }
        return names.get(self, self.value)


class AmountRange(str, Enum):
    """Leaderboard amount filters."""

    ALL = "all"
    UNDER_5K = "0-5k"
    FROM_5K_TO_10K = "5k-10k"
    FROM_10K_TO_50K = "10k-50k"
    FROM_50K_TO_100K = "50k-100k"
    OVER_100K = "100k+"

    @property
    def bounds(self) -> tuple[int | None, int | None]:
        """Half-open (lower, upper) bounds; None means unbounded."""
        bounds = {
            AmountRange.ALL: (None, None),
            AmountRange.UNDER_5K: (None, 5_000),
            AmountRange.FROM_5K_TO_10K: (5_000, 10_000),
            AmountRange.FROM_10K_TO_50K: (10_000, 50_000),
            AmountRange.FROM_50K_TO_100K: (50_000, 100_000),
            AmountRange.OVER_100K: (100_000, None),
        }
        return bounds[self]

    @property
    def display_name(self) -> str:
        """Human-readable display name."""
        names = {
            AmountRange.ALL: "All Amounts",
            AmountRange.UNDER_5K: "0 - 5K",
            AmountRange.FROM_5K_TO_10K: "5K - 10K",
            AmountRange.FROM_10K_TO_50K: "10K - 50K",
            AmountRange.FROM_50K_TO_100K: "50K - 100K",
            AmountRange.OVER_100K: "100K+",
        }
        return names[self]

    def contains(self, amount: int) -> bool:
        """Check whether an amount falls inside this range."""
        lower, upper = self.bounds
        if lower is not None and amount < lower:
            return False
        if upper is not None and amount >= upper:
            return False
        return True


# Type aliases for common patterns
Address = str      # Normalized (trimmed, lowercase) wallet address
TokenAmount = int  # Whole-token allocation amount

# Literal types for specific fields
Severity = Literal["info", "warning", "error"]
