"""Airdrop Allocation Analytics.

Fetches a public CSV of airdrop allocations and turns it into summary
statistics, a bucketed distribution, a ranked leaderboard, and a
per-wallet lookup table.
"""

__version__ = "0.1.0"
