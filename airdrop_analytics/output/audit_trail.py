"""Audit trail formatter for transparency and reproducibility.

Generates audit documentation showing:
- Where the allocation CSV was read from and whether it succeeded
- How many rows were accepted, skipped, or overwritten as duplicates
- Whether the distribution reconciles with the headline totals
- How to rerun the same analysis
"""

import logging
from collections import Counter

from ..core.models import AnalysisResult, AuditEntry

logger = logging.getLogger(__name__)

RULE = "=" * 70
SUBRULE = "-" * 40


def _step_line(entry: AuditEntry) -> list[str]:
    status = "OK" if entry.success else "FAILED"
    duration = f"{entry.duration_ms}ms" if entry.duration_ms is not None else "N/A"
    lines = [
        f"  [{entry.timestamp.strftime('%H:%M:%S')}] {entry.source.value} {entry.action}",
        f"    Endpoint: {entry.endpoint or 'N/A'}",
        f"    Status: {status}, Duration: {duration}",
    ]
    if entry.error_message:
        lines.append(f"    Error: {entry.error_message}")
    if entry.notes:
        lines.append(f"    Notes: {entry.notes}")
    return lines


class AuditTrailFormatter:
    """Formats audit trail information for transparency."""

    def __init__(self, max_skipped_rows: int = 20):
        """
        Initialize audit trail formatter.

        Args:
            max_skipped_rows: How many skipped rows to list individually
        """
        self.max_skipped_rows = max_skipped_rows

    def format_summary(self, result: AnalysisResult) -> str:
        """
        Format a summary of the audit trail.

        Args:
            result: AnalysisResult with audit data

        Returns:
            Formatted string summary
        """
        summary = result.summary
        lines = [RULE, "AUDIT TRAIL SUMMARY", RULE, ""]

        lines.append(f"Analysis Timestamp: {result.analysis_timestamp.isoformat()}")
        lines.append(f"Tool Version: {result.tool_version}")
        lines.append(f"Source: {result.source}")
        lines.append("")

        # Where the text came from; inline runs have no load step
        loads = [e for e in result.audit_trail if e.action in ("fetch", "read")]
        lines.append("DATA SOURCES CONSULTED")
        lines.append(SUBRULE)
        if loads:
            for entry in loads:
                status = "OK" if entry.success else "FAILED"
                lines.append(f"  {entry.source.value}: {status}")
                lines.append(f"    - Endpoint: {entry.endpoint or 'N/A'}")
        else:
            lines.append("  inline text (no fetch)")
        lines.append("")

        lines.append("INGESTION")
        lines.append(SUBRULE)
        lines.append(f"  Rows accepted: {summary.record_count}")
        lines.append(f"  Rows skipped: {result.skipped_count}")
        lines.append(f"  Blank lines: {result.blank_lines}")
        lines.append(f"  Duplicate addresses overwritten: {summary.duplicate_count}")
        lines.append(f"  Unique wallets: {summary.wallet_count}")

        if result.skipped_rows:
            reasons = Counter(row.reason.display_name for row in result.skipped_rows)
            lines.append("")
            lines.append("  SKIP REASONS:")
            for reason, count in reasons.most_common():
                lines.append(f"    {reason}: {count}")

            lines.append("")
            lines.append("  SKIPPED ROWS:")
            for row in result.skipped_rows[: self.max_skipped_rows]:
                lines.append(f"    - line {row.line_number} [{row.reason.display_name}]: {row.raw_line!r}")
            remaining = result.skipped_count - self.max_skipped_rows
            if remaining > 0:
                lines.append(f"    ... and {remaining} more")
        lines.append("")

        if result.quality_flags:
            lines.append("DATA QUALITY FLAGS")
            lines.append(SUBRULE)
            for flag in result.quality_flags:
                lines.append(f"  [{flag.severity.upper()}] {flag.field}")
                lines.append(f"    Issue: {flag.issue}")
                if flag.suggestion:
                    lines.append(f"    Suggestion: {flag.suggestion}")
            lines.append("")

        lines.append("DETAILED STEPS")
        lines.append(SUBRULE)
        for entry in result.audit_trail:
            lines.extend(_step_line(entry))
        lines.append("")

        lines.extend([RULE, "END OF AUDIT TRAIL", RULE])
        return "\n".join(lines)

    def format_reconciliation(self, result: AnalysisResult) -> str:
        """
        Cross-check the distribution and ranking against the headline totals.

        Every wallet lands in exactly one bucket, so bucket counts and
        amounts must add up to the wallet count and total amount.
        """
        summary = result.summary
        bucket_wallets = sum(b.count for b in summary.distribution)
        bucket_amount = sum(b.total_amount for b in summary.distribution)

        checks = [
            ("Bucket wallets == wallet count", bucket_wallets, summary.wallet_count),
            ("Bucket amounts == total amount", bucket_amount, summary.total_amount),
            ("Ranked entries == wallet count", len(summary.ranked), summary.wallet_count),
            (
                "Rows accepted - duplicates == wallet count",
                summary.record_count - summary.duplicate_count,
                summary.wallet_count,
            ),
        ]

        lines = ["RECONCILIATION", "=" * 50]
        for label, actual, expected in checks:
            status = "OK" if actual == expected else "MISMATCH"
            lines.append(f"  {label}: {status} ({actual:,} / {expected:,})")
            if status != "OK":
                logger.warning(f"Reconciliation failed: {label} ({actual} != {expected})")

        return "\n".join(lines)

    def generate_reproducibility_script(self, result: AnalysisResult) -> str:
        """
        Python script that reruns the analysis against the same source.

        The bucket scheme and address mode recorded on the result are passed
        explicitly, so the rerun does not depend on the environment.
        """
        bucket_lines = [
            f"    BucketSpec(lower_bound={b.lower_bound}, upper_bound={b.upper_bound}, label={b.label!r}),"
            for b in result.buckets
        ]

        return "\n".join([
            '"""',
            f"Reproducibility script for {result.source}",
            f"Generated: {result.analysis_timestamp.isoformat()}",
            f"Tool Version: {result.tool_version}",
            '"""',
            "",
            "from airdrop_analytics.core.models import BucketSpec",
            "from airdrop_analytics.orchestrator import AirdropAnalyticsOrchestrator",
            "from airdrop_analytics.output import TableFormatter",
            "",
            "buckets = [",
            *bucket_lines,
            "]",
            "",
            "orchestrator = AirdropAnalyticsOrchestrator(",
            "    buckets=buckets or None,",
            f"    strict_addresses={result.strict_addresses!r},",
            ")",
            f"result = orchestrator.analyze({result.source!r})",
            "print(TableFormatter().format(result))",
        ])

    def format_to_file(self, result: AnalysisResult, filepath: str) -> None:
        """Write audit trail and reconciliation to a file."""
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(self.format_summary(result))
            f.write("\n\n")
            f.write(self.format_reconciliation(result))
