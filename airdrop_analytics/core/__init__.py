"""Core module - data models, types, and exceptions."""

from .addresses import is_wallet_address, normalize_address
from .models import (
    AllocationRecord,
    SkippedRow,
    ParseResult,
    BucketSpec,
    DistributionBucket,
    AggregateSummary,
    AuditEntry,
    DataQualityFlag,
    AnalysisResult,
)
from .types import (
    AmountRange,
    DataSource,
    SkipReason,
)
from .exceptions import (
    AirdropAnalyticsError,
    DataSourceError,
    SourceUnavailableError,
    ValidationError,
    ConfigurationError,
)

__all__ = [
    # Addresses
    "is_wallet_address",
    "normalize_address",
    # Models
    "AllocationRecord",
    "SkippedRow",
    "ParseResult",
    "BucketSpec",
    "DistributionBucket",
    "AggregateSummary",
    "AuditEntry",
    "DataQualityFlag",
    "AnalysisResult",
    # Types
    "AmountRange",
    "DataSource",
    "SkipReason",
    # Exceptions
    "AirdropAnalyticsError",
    "DataSourceError",
    "SourceUnavailableError",
    "ValidationError",
    "ConfigurationError",
]
