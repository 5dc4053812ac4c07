"""Distribution bucket schemes.

A scheme is an ordered list of half-open ``[lower_bound, upper_bound)``
ranges that must partition ``[0, inf)``: starting at zero, contiguous,
and ending in a single unbounded bucket. Every non-negative amount then
lands in exactly one bucket.
"""

import logging
from pathlib import Path
from typing import Any, Sequence

import yaml
from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import ConfigurationError
from ..core.models import BucketSpec

logger = logging.getLogger(__name__)


DEFAULT_BUCKETS: tuple[BucketSpec, ...] = (
    BucketSpec(lower_bound=0, upper_bound=5_000, label="0-5K"),
    BucketSpec(lower_bound=5_000, upper_bound=10_000, label="5K-10K"),
    BucketSpec(lower_bound=10_000, upper_bound=20_000, label="10K-20K"),
    BucketSpec(lower_bound=20_000, upper_bound=50_000, label="20K-50K"),
    BucketSpec(lower_bound=50_000, upper_bound=100_000, label="50K-100K"),
    BucketSpec(lower_bound=100_000, upper_bound=500_000, label="100K-500K"),
    BucketSpec(lower_bound=500_000, upper_bound=None, label="500K+"),
)


def validate_buckets(buckets: Sequence[BucketSpec]) -> tuple[BucketSpec, ...]:
    """
    Check that a bucket scheme partitions the non-negative amounts.

    Args:
        buckets: Ordered bucket specs

    Returns:
        The scheme as a tuple

    Raises:
        ConfigurationError: If the scheme has gaps, overlaps, duplicate
            labels, does not start at zero, or does not end unbounded
    """
    if not buckets:
        raise ConfigurationError("buckets", "at least one bucket is required")

    if buckets[0].lower_bound != 0:
        raise ConfigurationError(
            "buckets",
            f"first bucket must start at 0, got {buckets[0].lower_bound}",
        )

    for current, following in zip(buckets, buckets[1:]):
        if current.is_unbounded:
            raise ConfigurationError(
                "buckets",
                f"only the last bucket may be unbounded, '{current.label}' is not last",
            )
        if current.upper_bound != following.lower_bound:
            raise ConfigurationError(
                "buckets",
                f"'{current.label}' ends at {current.upper_bound} but "
                f"'{following.label}' starts at {following.lower_bound}",
            )

    if not buckets[-1].is_unbounded:
        raise ConfigurationError(
            "buckets",
            f"last bucket '{buckets[-1].label}' must be unbounded",
        )

    labels = [bucket.label for bucket in buckets]
    if len(set(labels)) != len(labels):
        raise ConfigurationError("buckets", f"bucket labels must be unique: {labels}")

    return tuple(buckets)


def buckets_from_dicts(items: list[dict[str, Any]]) -> tuple[BucketSpec, ...]:
    """Build and validate a scheme from plain dictionaries."""
    try:
        buckets = [BucketSpec(**item) for item in items]
    except (PydanticValidationError, TypeError) as e:
        raise ConfigurationError("buckets", f"invalid bucket definition: {e}")
    return validate_buckets(buckets)


def load_buckets_config(config_path: Path | str) -> tuple[BucketSpec, ...]:
    """
    Load a bucket scheme from a YAML file.

    The file holds a ``buckets`` list; each item has ``label``,
    ``lower_bound`` and ``upper_bound`` (``null`` for unbounded).

    Args:
        config_path: Path to the YAML file

    Returns:
        Validated bucket scheme. Falls back to the defaults when the file
        has no ``buckets`` key.
    """
    config_path = Path(config_path)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise ConfigurationError(str(config_path), "bucket config file not found")
    except yaml.YAMLError as e:
        raise ConfigurationError(str(config_path), f"invalid YAML: {e}")

    if not isinstance(config, dict) or "buckets" not in config:
        logger.warning(f"No 'buckets' in {config_path}, using defaults")
        return DEFAULT_BUCKETS

    buckets = buckets_from_dicts(config["buckets"] or [])
    logger.info(f"Loaded {len(buckets)} buckets from {config_path}")
    return buckets
