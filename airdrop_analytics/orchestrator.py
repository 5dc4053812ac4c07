"""Main orchestrator for the airdrop analytics pipeline.

Coordinates the CSV provider, parser and aggregator to produce a complete
AnalysisResult from a source URL or file.
"""

import logging
import time
from pathlib import Path
from typing import Any, Sequence

import httpx

from . import __version__
from .aggregation.aggregator import AllocationAggregator
from .core.config import get_config
from .core.exceptions import SourceUnavailableError
from .core.models import (
    AnalysisResult,
    AuditEntry,
    BucketSpec,
    DataQualityFlag,
)
from .core.types import DataSource, Severity
from .ingestion.csv_parser import parse_allocations
from .providers.csv_source import AirdropCSVProvider

logger = logging.getLogger(__name__)


class AirdropAnalyticsOrchestrator:
    """Orchestrates fetch, parse and aggregation of an allocation CSV."""

    def __init__(
        self,
        source_url: str | None = None,
        buckets: Sequence[BucketSpec] | None = None,
        buckets_config_path: Path | str | None = None,
        strict_addresses: bool | None = None,
        timeout_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            source_url: CSV URL or path (uses AIRDROP_CSV_URL if not provided)
            buckets: Explicit bucket scheme
            buckets_config_path: YAML bucket scheme (uses AIRDROP_BUCKETS_CONFIG
                if neither this nor buckets is provided)
            strict_addresses: Skip rows with non-wallet-shaped addresses
            timeout_seconds: HTTP timeout for the single fetch
            transport: Optional httpx transport, mainly for tests
        """
        config = get_config()

        self.source_url = source_url or config.source_url
        self.strict_addresses = (
            config.strict_addresses if strict_addresses is None else strict_addresses
        )

        if buckets is None and buckets_config_path is None:
            buckets_config_path = config.buckets_config_path

        self.csv_provider = AirdropCSVProvider(
            source_url=self.source_url,
            timeout_seconds=timeout_seconds or config.fetch_timeout_seconds,
            transport=transport,
        )
        self.aggregator = AllocationAggregator(
            buckets=buckets,
            config_path=buckets_config_path,
        )

        # Audit trail
        self._audit_entries: list[AuditEntry] = []
        self._quality_flags: list[DataQualityFlag] = []

    def _add_audit(
        self,
        source: DataSource,
        action: str,
        endpoint: str | None = None,
        success: bool = True,
        duration_ms: int | None = None,
        notes: str | None = None,
    ) -> None:
        """Add an audit entry."""
        self._audit_entries.append(
            AuditEntry(
                source=source,
                action=action,
                endpoint=endpoint,
                success=success,
                duration_ms=duration_ms,
                notes=notes,
            )
        )

    def _add_quality_flag(
        self,
        field: str,
        issue: str,
        severity: Severity = "warning",
        suggestion: str | None = None,
    ) -> None:
        """Add a data quality flag."""
        self._quality_flags.append(
            DataQualityFlag(field=field, issue=issue, severity=severity, suggestion=suggestion)
        )

    def analyze(self, source: str | Path | None = None) -> AnalysisResult:
        """
        Fetch, parse and aggregate an allocation CSV.

        Args:
            source: URL or local path. Defaults to the configured source.

        Returns:
            AnalysisResult with the summary and data quality information

        Raises:
            SourceUnavailableError: If the CSV text cannot be obtained
        """
        target = str(source) if source is not None else self.source_url
        logger.info(f"Starting analysis for: {target}")

        self.csv_provider.clear_audit_trail()
        try:
            raw_text = self.csv_provider.fetch_text(target)
        except SourceUnavailableError as e:
            logger.error(f"Failed to load allocation data: {e}")
            raise

        source_type = self.csv_provider.get_audit_trail()[-1].source
        return self._run(raw_text, target, source_type, self.csv_provider.get_audit_trail())

    def analyze_text(self, raw_text: str, source_label: str = "inline") -> AnalysisResult:
        """
        Parse and aggregate CSV text that is already in memory.

        Args:
            raw_text: Complete CSV text, header included
            source_label: Name recorded as the result's source

        Returns:
            AnalysisResult
        """
        return self._run(raw_text, source_label, DataSource.INLINE, [])

    def _run(
        self,
        raw_text: str,
        source_label: str,
        source_type: DataSource,
        fetch_audit: list[AuditEntry],
    ) -> AnalysisResult:
        # Reset audit trail
        self._audit_entries = list(fetch_audit)
        self._quality_flags = []

        # Step 1: Parse
        logger.info("Step 1: Parsing CSV rows...")
        start_time = time.time()
        parsed = parse_allocations(raw_text, strict_addresses=self.strict_addresses)
        self._add_audit(
            source_type,
            "parse",
            endpoint=source_label,
            duration_ms=int((time.time() - start_time) * 1000),
            notes=(
                f"{len(parsed.records)} rows accepted, {parsed.skipped_count} skipped, "
                f"{parsed.blank_lines} blank"
            ),
        )

        if parsed.skipped_rows:
            reasons: dict[str, int] = {}
            for row in parsed.skipped_rows:
                reasons[row.reason.value] = reasons.get(row.reason.value, 0) + 1
            breakdown = ", ".join(f"{k}={v}" for k, v in sorted(reasons.items()))
            self._add_quality_flag(
                "skipped_rows",
                f"{parsed.skipped_count} malformed rows were skipped ({breakdown})",
                severity="warning",
            )

        # Step 2: Aggregate
        logger.info("Step 2: Aggregating allocations...")
        start_time = time.time()
        summary = self.aggregator.aggregate(parsed.records)
        self._add_audit(
            source_type,
            "aggregate",
            endpoint=source_label,
            duration_ms=int((time.time() - start_time) * 1000),
            notes=f"{summary.wallet_count} wallets in {len(summary.distribution)} buckets",
        )

        if summary.duplicate_count:
            self._add_quality_flag(
                "duplicate_addresses",
                f"{summary.duplicate_count} rows repeat an earlier address; "
                "the last occurrence was kept",
                severity="info",
            )

        if summary.is_empty:
            logger.warning(f"No valid allocation rows in {source_label}")
            self._add_quality_flag(
                "empty_dataset",
                "No valid allocation rows; average and median are undefined",
                severity="warning",
                suggestion="Check that the source has a header line followed by address,amount rows",
            )

        result = AnalysisResult(
            source=source_label,
            summary=summary,
            skipped_rows=parsed.skipped_rows,
            blank_lines=parsed.blank_lines,
            buckets=list(self.aggregator.buckets),
            strict_addresses=self.strict_addresses,
            audit_trail=self._audit_entries,
            quality_flags=self._quality_flags,
            tool_version=__version__,
        )

        logger.info(f"Analysis complete: {summary.wallet_count} wallets")
        return result

    def describe(self) -> dict[str, Any]:
        """Settings in effect, for display."""
        return {
            "source": self.source_url,
            "strict_addresses": self.strict_addresses,
            "buckets": [bucket.label for bucket in self.aggregator.buckets],
        }
