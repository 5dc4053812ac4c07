"""Output formatters for airdrop analysis results.

Provides multiple output formats:
- JSON: Machine-readable, complete data
- CSV: Spreadsheet-compatible, section per table
- Table: Human-readable CLI output
"""

import csv
import io
import json
import logging
from abc import ABC, abstractmethod

from ..core.models import AnalysisResult
from ..leaderboard import LeaderboardPage, shorten_address

logger = logging.getLogger(__name__)


def format_compact(value: float, decimals: int = 1) -> str:
    """
    Abbreviate large numbers for chart axes and headline figures.

    Example:
        ```python
        format_compact(3_950_000_000)     # "4.0B"
        format_compact(3_950_000_000, 2)  # "3.95B"
        format_compact(12_500_000)        # "12.5M"
        format_compact(4200)              # "4,200"
        ```
    """
    if abs(value) >= 1_000_000_000:
        return f"{value / 1_000_000_000:.{decimals}f}B"
    if abs(value) >= 1_000_000:
        return f"{value / 1_000_000:.{decimals}f}M"
    return f"{value:,.0f}"


def format_optional(value: float | None, fmt: str = ",.0f", missing: str = "N/A") -> str:
    """Format a number that may be undefined (empty dataset)."""
    return missing if value is None else format(value, fmt)


class OutputFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def format(self, result: AnalysisResult) -> str:
        """Format the result as a string."""
        pass

    def format_to_file(self, result: AnalysisResult, filepath: str) -> None:
        """Write formatted result to a file."""
        with open(filepath, "w", encoding="utf-8", newline="") as f:
            f.write(self.format(result))


class JSONFormatter(OutputFormatter):
    """Formats results as JSON."""

    def __init__(self, indent: int = 2, include_table: bool = False):
        """
        Initialize JSON formatter.

        Args:
            indent: JSON indentation level
            include_table: Also emit the address lookup table (the ranked
                list already carries the same pairs)
        """
        self.indent = indent
        self.include_table = include_table

    def format(self, result: AnalysisResult) -> str:
        """Format result as JSON string."""
        data = result.model_dump(mode="json")

        if not self.include_table:
            data["summary"].pop("table", None)

        return json.dumps(data, indent=self.indent)


class CSVFormatter(OutputFormatter):
    """Formats summary, distribution and leaderboard as CSV sections."""

    def __init__(self, delimiter: str = ",", top_n: int | None = None):
        """
        Initialize CSV formatter.

        Args:
            delimiter: CSV delimiter
            top_n: Limit the leaderboard section to the first N wallets
                (None for all)
        """
        self.delimiter = delimiter
        self.top_n = top_n

    def format(self, result: AnalysisResult) -> str:
        """Format result as CSV string."""
        output = io.StringIO()
        writer = csv.writer(output, delimiter=self.delimiter, lineterminator="\n")
        summary = result.summary

        # 1. Summary Section
        writer.writerow(["# Summary"])
        writer.writerow(["Field", "Value"])
        writer.writerow(["Source", result.source])
        writer.writerow(["Total Amount", summary.total_amount])
        writer.writerow(["Wallet Count", summary.wallet_count])
        writer.writerow(["Average Allocation", format_optional(summary.average_allocation, ".2f", "")])
        writer.writerow(["Median Allocation", format_optional(summary.median_allocation, "d", "")])
        writer.writerow(["Duplicate Rows", summary.duplicate_count])
        writer.writerow(["Skipped Rows", result.skipped_count])
        writer.writerow([])

        # 2. Distribution Section
        writer.writerow(["# Distribution"])
        writer.writerow(["Range", "Lower Bound", "Upper Bound", "Wallets", "Total Amount"])
        for bucket in summary.distribution:
            writer.writerow([
                bucket.label,
                bucket.lower_bound,
                "" if bucket.upper_bound is None else bucket.upper_bound,
                bucket.count,
                bucket.total_amount,
            ])
        writer.writerow([])

        # 3. Leaderboard Section
        writer.writerow(["# Leaderboard"])
        writer.writerow(["Rank", "Address", "Amount"])
        ranked = summary.ranked if self.top_n is None else summary.ranked[: self.top_n]
        for rank, record in enumerate(ranked, start=1):
            writer.writerow([rank, record.address, record.amount])

        # 4. Skipped Rows
        if result.skipped_rows:
            writer.writerow([])
            writer.writerow(["# Skipped Rows"])
            writer.writerow(["Line", "Reason", "Content"])
            for row in result.skipped_rows:
                writer.writerow([row.line_number, row.reason.value, row.raw_line])

        # 5. Data Quality Flags
        if result.quality_flags:
            writer.writerow([])
            writer.writerow(["# Data Quality Flags"])
            writer.writerow(["Field", "Issue", "Severity"])
            for flag in result.quality_flags:
                writer.writerow([flag.field, flag.issue, flag.severity])

        return output.getvalue()


class TableFormatter(OutputFormatter):
    """Formats results as human-readable tables for CLI output."""

    def __init__(
        self,
        use_rich: bool = True,
        width: int = 100,
        top_n: int = 10,
        token_symbol: str = "MON",
    ):
        """
        Initialize table formatter.

        Args:
            use_rich: Use rich library for colored output
            width: Maximum table width
            top_n: Number of leaderboard rows in the overview
            token_symbol: Unit shown next to amounts
        """
        self.use_rich = use_rich
        self.width = width
        self.top_n = top_n
        self.token_symbol = token_symbol

    def format(self, result: AnalysisResult) -> str:
        """Format result as readable tables."""
        if self.use_rich:
            return self._format_rich(result)
        return self._format_plain(result)

    def _format_plain(self, result: AnalysisResult) -> str:
        """Plain text formatting without colors."""
        lines = []
        sep = "=" * 60
        summary = result.summary

        # Header
        lines.append(sep)
        lines.append(f"  AIRDROP ALLOCATION ANALYSIS ({self.token_symbol})")
        lines.append(f"  {result.source}")
        lines.append(sep)
        lines.append("")

        # Headline stats
        lines.append("SUMMARY")
        lines.append("-" * 40)
        lines.append(f"  Total Allocated:  {summary.total_amount:>18,} {self.token_symbol}")
        lines.append(f"  Eligible Wallets: {summary.wallet_count:>18,}")
        lines.append(f"  Average:          {format_optional(summary.average_allocation):>18}")
        lines.append(f"  Median:           {format_optional(summary.median_allocation):>18}")
        lines.append("")

        # Distribution
        lines.append("DISTRIBUTION")
        lines.append("-" * 40)
        lines.append(f"  {'Range':<12} {'Wallets':>10}  {'Total':>18}")
        for bucket in summary.distribution:
            lines.append(f"  {bucket.label:<12} {bucket.count:>10,}  {bucket.total_amount:>18,}")
        lines.append("")

        # Leaderboard
        lines.append(f"TOP {self.top_n} WALLETS")
        lines.append("-" * 40)
        if summary.ranked:
            for rank, record in enumerate(summary.ranked[: self.top_n], start=1):
                lines.append(f"  {rank:>4}  {shorten_address(record.address):<24} {record.amount:>15,}")
        else:
            lines.append("  No allocation data available")
        lines.append("")

        # Quality Flags
        if result.quality_flags:
            lines.append("DATA QUALITY FLAGS")
            lines.append("-" * 40)
            for flag in result.quality_flags:
                lines.append(f"  [{flag.severity.upper()}] {flag.field}: {flag.issue}")
            lines.append("")

        # Footer
        lines.append(sep)
        lines.append(f"  Analysis timestamp: {result.analysis_timestamp.strftime('%Y-%m-%d %H:%M UTC')}")
        lines.append(sep)

        return "\n".join(lines)

    def _format_rich(self, result: AnalysisResult) -> str:
        """Rich library formatting with colors."""
        from rich.console import Console
        from rich.markup import escape
        from rich.panel import Panel
        from rich.table import Table

        output = io.StringIO()
        console = Console(file=output, force_terminal=True, width=self.width)
        summary = result.summary

        # Title
        console.print(Panel(
            f"[bold cyan]{self.token_symbol} Airdrop[/] - Allocation Analytics\n"
            f"[dim]{escape(result.source)}[/]",
            title="Airdrop Analysis",
            expand=False,
        ))

        # Stats Table
        stats_table = Table(title="Summary", show_header=False)
        stats_table.add_column("Metric", style="cyan")
        stats_table.add_column("Value", style="green", justify="right")
        stats_table.add_column("Detail", style="dim")
        stats_table.add_row(
            f"Total {self.token_symbol} Allocated",
            f"{format_compact(summary.total_amount, 2)}",
            f"{summary.total_amount:,} {self.token_symbol}",
        )
        stats_table.add_row("Eligible Wallets", f"{summary.wallet_count:,}", "Unique addresses")
        stats_table.add_row(
            "Average Allocation",
            format_optional(summary.average_allocation),
            f"{self.token_symbol} per wallet",
        )
        stats_table.add_row(
            "Median Allocation",
            format_optional(summary.median_allocation),
            "Middle value",
        )
        console.print(stats_table)

        # Distribution Table
        dist_table = Table(title="Allocation Distribution")
        dist_table.add_column("Range", style="cyan")
        dist_table.add_column("Wallets", justify="right", style="green")
        dist_table.add_column("Share", justify="right", style="dim")
        dist_table.add_column(f"Total {self.token_symbol}", justify="right", style="green")

        for bucket in summary.distribution:
            share = (
                f"{bucket.count / summary.wallet_count * 100:.1f}%"
                if summary.wallet_count else "-"
            )
            dist_table.add_row(
                bucket.label,
                f"{bucket.count:,}",
                share,
                format_compact(bucket.total_amount),
            )
        console.print(dist_table)

        # Leaderboard
        if summary.ranked:
            top_table = Table(title=f"Top {self.top_n} Wallets")
            top_table.add_column("Rank", justify="right", style="yellow")
            top_table.add_column("Address", style="magenta")
            top_table.add_column(f"Amount ({self.token_symbol})", justify="right", style="green")
            for rank, record in enumerate(summary.ranked[: self.top_n], start=1):
                top_table.add_row(str(rank), record.address, f"{record.amount:,}")
            console.print(top_table)

        # Quality flags
        if result.quality_flags:
            console.print("\n[bold yellow]Data Quality Flags:[/]")
            for flag in result.quality_flags:
                icon = "!" if flag.severity != "info" else "i"
                console.print(f"  {icon} {flag.field}: {escape(flag.issue)}")

        return output.getvalue()

    def format_leaderboard(self, page: LeaderboardPage) -> str:
        """Format one leaderboard page."""
        lines = [f"  {'Rank':>6}  {'Address':<44} {'Amount (' + self.token_symbol + ')':>18}"]
        lines.append("  " + "-" * 70)
        for entry in page.entries:
            lines.append(f"  {entry.rank:>6}  {entry.address:<44} {entry.amount:>18,}")

        if page.total_items:
            lines.append("")
            lines.append(
                f"  Showing {page.start_index + 1}-{page.end_index} of {page.total_items:,} "
                f"(page {page.page}/{page.total_pages})"
            )
        else:
            lines.append("  No wallets match")

        return "\n".join(lines)

    def format_to_file(self, result: AnalysisResult, filepath: str) -> None:
        """Write formatted output to file."""
        # For file output, use plain format (no ANSI codes)
        old_rich = self.use_rich
        self.use_rich = False
        content = self.format(result)
        self.use_rich = old_rich

        with open(filepath, "w", encoding="utf-8") as f:
            f.write(content)
