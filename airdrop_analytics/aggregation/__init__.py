"""Aggregation module - statistics, distribution, ranking and lookup."""

from .aggregator import AllocationAggregator, aggregate
from .buckets import DEFAULT_BUCKETS, load_buckets_config, validate_buckets
from .lookup import lookup

__all__ = [
    "AllocationAggregator",
    "aggregate",
    "DEFAULT_BUCKETS",
    "load_buckets_config",
    "validate_buckets",
    "lookup",
]
