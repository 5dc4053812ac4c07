"""Allocation aggregator - turns parsed records into summary statistics.

This module implements the core computation that transforms a sequence of
allocation records into totals, a bucketed distribution, a ranked
leaderboard and a lookup table. Duplicated addresses are resolved first
(last occurrence wins) and every statistic is taken from the deduplicated
table.
"""

import logging
from bisect import bisect_right
from pathlib import Path
from typing import Iterable, Sequence

from ..core.models import AggregateSummary, AllocationRecord, BucketSpec, DistributionBucket
from .buckets import DEFAULT_BUCKETS, load_buckets_config, validate_buckets

logger = logging.getLogger(__name__)


class AllocationAggregator:
    """Computes an AggregateSummary for a fixed bucket scheme."""

    def __init__(
        self,
        buckets: Sequence[BucketSpec] | None = None,
        config_path: Path | str | None = None,
    ):
        """
        Initialize aggregator.

        Args:
            buckets: Ordered bucket scheme. Takes precedence over config_path.
            config_path: Path to YAML file with a ``buckets`` list.
                If neither is given, uses the default 7 buckets.
        """
        if buckets is not None:
            self.buckets = validate_buckets(buckets)
        elif config_path:
            self.buckets = load_buckets_config(config_path)
        else:
            self.buckets = DEFAULT_BUCKETS

        self._lower_bounds = [bucket.lower_bound for bucket in self.buckets]

    def bucket_index(self, amount: int) -> int:
        """Index of the bucket whose ``[lower, upper)`` range holds amount."""
        return bisect_right(self._lower_bounds, amount) - 1

    def aggregate(self, records: Iterable[AllocationRecord]) -> AggregateSummary:
        """
        Aggregate allocation records.

        This method:
        1. Deduplicates by address, keeping the last amount seen
        2. Ranks wallets by amount, descending and stable
        3. Computes total, average and the floor(n/2) median
        4. Counts wallets and amounts per bucket

        Args:
            records: Records in input order

        Returns:
            AggregateSummary. An empty input gives zero totals, empty
            buckets, and None for average and median.
        """
        latest: dict[str, AllocationRecord] = {}
        record_count = 0
        for record in records:
            # Overwriting keeps the key's first insertion position
            latest[record.address] = record
            record_count += 1

        # sorted() is stable with reverse=True: equal amounts keep table order
        ranked = sorted(latest.values(), key=lambda r: r.amount, reverse=True)
        table = {address: record.amount for address, record in latest.items()}

        wallet_count = len(ranked)
        total_amount = sum(table.values())

        if wallet_count:
            average_allocation: float | None = total_amount / wallet_count
            median_allocation: int | None = ranked[wallet_count // 2].amount
        else:
            average_allocation = None
            median_allocation = None

        counts = [0] * len(self.buckets)
        totals = [0] * len(self.buckets)
        for record in ranked:
            index = self.bucket_index(record.amount)
            counts[index] += 1
            totals[index] += record.amount

        distribution = [
            DistributionBucket(
                lower_bound=bucket.lower_bound,
                upper_bound=bucket.upper_bound,
                label=bucket.label,
                count=count,
                total_amount=total,
            )
            for bucket, count, total in zip(self.buckets, counts, totals)
        ]

        duplicate_count = record_count - wallet_count
        if duplicate_count:
            logger.info(
                f"{duplicate_count} duplicate address rows overwritten (last occurrence wins)"
            )

        logger.debug(
            f"Aggregated {wallet_count} wallets, total {total_amount}, "
            f"{len(distribution)} buckets"
        )

        return AggregateSummary(
            total_amount=total_amount,
            wallet_count=wallet_count,
            average_allocation=average_allocation,
            median_allocation=median_allocation,
            distribution=distribution,
            table=table,
            ranked=ranked,
            record_count=record_count,
            duplicate_count=duplicate_count,
        )


def aggregate(
    records: Iterable[AllocationRecord],
    buckets: Sequence[BucketSpec] | None = None,
) -> AggregateSummary:
    """Aggregate records with the given (or default) bucket scheme."""
    return AllocationAggregator(buckets=buckets).aggregate(records)
