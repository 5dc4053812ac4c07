"""Pydantic data models for the airdrop analytics tool.

All data structures are immutable (frozen) after creation; a summary is
computed once per load and then only read.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator, model_validator

from .addresses import normalize_address
from .types import Address, DataSource, Severity, SkipReason, TokenAmount


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AllocationRecord(BaseModel):
    """One eligible wallet and its allocation."""

    address: str
    amount: TokenAmount = Field(ge=0)

    model_config = {"frozen": True}

    @field_validator("address")
    @classmethod
    def normalize(cls, v: str) -> str:
        return normalize_address(v)


class SkippedRow(BaseModel):
    """A CSV data line that was dropped during ingestion."""

    line_number: int  # 1-based, counting the header line
    raw_line: str
    reason: SkipReason

    model_config = {"frozen": True}


class ParseResult(BaseModel):
    """Outcome of parsing the raw CSV text."""

    records: list[AllocationRecord] = Field(default_factory=list)
    skipped_rows: list[SkippedRow] = Field(default_factory=list)
    blank_lines: int = 0

    model_config = {"frozen": True}

    @property
    def skipped_count(self) -> int:
        return len(self.skipped_rows)

    @property
    def data_line_count(self) -> int:
        """Non-blank lines after the header."""
        return len(self.records) + len(self.skipped_rows)


class BucketSpec(BaseModel):
    """A half-open amount range ``[lower_bound, upper_bound)``."""

    lower_bound: int = Field(ge=0)
    upper_bound: int | None = None  # None = unbounded
    label: str

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_bounds(self) -> "BucketSpec":
        if self.upper_bound is not None and self.upper_bound <= self.lower_bound:
            raise ValueError(
                f"upper_bound must exceed lower_bound, got "
                f"[{self.lower_bound}, {self.upper_bound})"
            )
        return self

    @property
    def is_unbounded(self) -> bool:
        return self.upper_bound is None


class DistributionBucket(BaseModel):
    """Histogram bar: how many wallets, and how much, fall in a range."""

    lower_bound: int
    upper_bound: int | None = None
    label: str
    count: int = 0
    total_amount: TokenAmount = 0

    model_config = {"frozen": True}


class AggregateSummary(BaseModel):
    """Statistics over the deduplicated allocation table."""

    total_amount: TokenAmount = 0
    wallet_count: int = 0
    average_allocation: float | None = None  # None when wallet_count == 0
    median_allocation: TokenAmount | None = None  # None when wallet_count == 0
    distribution: list[DistributionBucket] = Field(default_factory=list)
    table: dict[Address, TokenAmount] = Field(default_factory=dict)
    ranked: list[AllocationRecord] = Field(default_factory=list)

    # Input rows before dedup, and how many of them were overwritten
    record_count: int = 0
    duplicate_count: int = 0

    model_config = {"frozen": True}

    @property
    def is_empty(self) -> bool:
        return self.wallet_count == 0

    def lookup(self, raw_address: str) -> TokenAmount | None:
        """Amount allocated to an address, or None if not eligible."""
        from ..aggregation.lookup import lookup

        return lookup(self.table, raw_address)


class AuditEntry(BaseModel):
    """Audit trail entry for a fetch or processing step."""

    timestamp: datetime = Field(default_factory=_utcnow)
    source: DataSource
    action: str  # "fetch", "read", "parse", "aggregate"
    endpoint: str | None = None
    success: bool = True
    error_message: str | None = None
    duration_ms: int | None = None
    notes: str | None = None

    model_config = {"frozen": True}


class DataQualityFlag(BaseModel):
    """Flag indicating a data quality issue."""

    field: str
    issue: str
    severity: Severity = "warning"
    suggestion: str | None = None

    model_config = {"frozen": True}


class AnalysisResult(BaseModel):
    """Complete result of one fetch-parse-aggregate run."""

    source: str
    summary: AggregateSummary

    # Ingestion diagnostics
    skipped_rows: list[SkippedRow] = Field(default_factory=list)
    blank_lines: int = 0

    # Settings that produced this result
    buckets: list[BucketSpec] = Field(default_factory=list)
    strict_addresses: bool = False

    # Audit trail
    audit_trail: list[AuditEntry] = Field(default_factory=list)
    quality_flags: list[DataQualityFlag] = Field(default_factory=list)

    # Metadata
    analysis_timestamp: datetime = Field(default_factory=_utcnow)
    tool_version: str = "0.1.0"

    model_config = {"frozen": True}

    @property
    def skipped_count(self) -> int:
        return len(self.skipped_rows)
