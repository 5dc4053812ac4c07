"""CLI entry point for the Airdrop Allocation Analytics tool.

Usage:
    airdrop-analytics analyze
    airdrop-analytics analyze data/airdrop.csv --output json --save results/airdrop.json
    airdrop-analytics leaderboard --page 2 --range 10k-50k
    airdrop-analytics lookup 0xAbC...
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.text import Text

from .core.config import get_config
from .core.exceptions import AirdropAnalyticsError
from .core.models import AnalysisResult
from .leaderboard import filter_allocations, paginate
from .orchestrator import AirdropAnalyticsOrchestrator
from .output.audit_trail import AuditTrailFormatter
from .output.formatters import CSVFormatter, JSONFormatter, TableFormatter

# Initialize app
app = typer.Typer(
    name="airdrop-analytics",
    help="Airdrop allocation statistics, distribution, leaderboard and wallet lookup",
    add_completion=False,
)

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
    )


def _run_analysis(
    source: Optional[str],
    buckets: Optional[Path] = None,
    strict_addresses: bool = False,
    verbose: bool = False,
) -> AnalysisResult:
    """Run the pipeline, turning tool errors into a clean exit."""
    try:
        orchestrator = AirdropAnalyticsOrchestrator(
            buckets_config_path=buckets,
            strict_addresses=strict_addresses or None,
        )
        return orchestrator.analyze(source)
    except AirdropAnalyticsError as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)


@app.command()
def analyze(
    source: Optional[str] = typer.Argument(
        None, help="CSV URL or file path (default: AIRDROP_CSV_URL)"
    ),
    output: str = typer.Option(
        "table",
        "--output", "-o",
        help="Output format: table, json, csv",
    ),
    save: Optional[Path] = typer.Option(
        None,
        "--save", "-s",
        help="Save output to file",
    ),
    buckets: Optional[Path] = typer.Option(
        None,
        "--buckets", "-b",
        help="Path to YAML bucket scheme",
    ),
    strict_addresses: bool = typer.Option(
        False,
        "--strict-addresses",
        help="Skip rows whose address is not 0x + 40 hex characters",
    ),
    top: int = typer.Option(
        10,
        "--top", "-t",
        help="Leaderboard rows to show in table output",
    ),
    audit: bool = typer.Option(
        False,
        "--audit", "-a",
        help="Include detailed audit trail in output",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """
    Compute summary statistics and the distribution for an allocation CSV.

    Examples:
        airdrop-analytics analyze
        airdrop-analytics analyze allocations.csv --output json
        airdrop-analytics analyze --buckets buckets.yaml --audit
    """
    setup_logging(verbose)

    output_lower = output.lower()
    if output_lower not in ("table", "json", "csv"):
        console.print(f"[red]Invalid output format: {output}[/]")
        console.print("Valid formats: table, json, csv")
        raise typer.Exit(1)

    result = _run_analysis(source, buckets, strict_addresses, verbose)

    # Format output
    if output_lower == "json":
        formatter = JSONFormatter()
    elif output_lower == "csv":
        formatter = CSVFormatter()
    else:
        formatter = TableFormatter(top_n=top, token_symbol=get_config().token_symbol)

    formatted = formatter.format(result)

    # Display
    if output_lower == "table":
        console.print(Text.from_ansi(formatted))
    else:
        print(formatted)

    # Show audit trail if requested
    audit_formatter = AuditTrailFormatter()
    if audit:
        console.print("\n")
        console.print(audit_formatter.format_summary(result), markup=False, highlight=False)

    # Save if requested
    if save:
        save.parent.mkdir(parents=True, exist_ok=True)

        if output_lower == "json":
            save_path = save.with_suffix(".json")
        elif output_lower == "csv":
            save_path = save.with_suffix(".csv")
        else:
            save_path = save.with_suffix(".txt")

        formatter.format_to_file(result, str(save_path))
        console.print(f"[green]Saved to {save_path}[/]")

        # Also save audit trail
        if audit:
            audit_path = save_path.with_name(f"{save_path.stem}_audit.txt")
            audit_formatter.format_to_file(result, str(audit_path))
            console.print(f"[green]Audit trail saved to {audit_path}[/]")

            script_path = save_path.with_name(f"{save_path.stem}_reproduce.py")
            script_path.write_text(
                audit_formatter.generate_reproducibility_script(result), encoding="utf-8"
            )
            console.print(f"[green]Reproducibility script saved to {script_path}[/]")


@app.command()
def leaderboard(
    source: Optional[str] = typer.Argument(
        None, help="CSV URL or file path (default: AIRDROP_CSV_URL)"
    ),
    page: int = typer.Option(1, "--page", "-p", help="Page number (1-based)"),
    per_page: Optional[int] = typer.Option(
        None, "--per-page", "-n", help="Rows per page (default: AIRDROP_PAGE_SIZE)"
    ),
    search: str = typer.Option("", "--search", "-q", help="Address substring"),
    amount_range: str = typer.Option(
        "all",
        "--range", "-r",
        help="Amount filter: all, 0-5k, 5k-10k, 10k-50k, 50k-100k, 100k+",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """Show one page of the ranked allocation list."""
    setup_logging(verbose)
    config = get_config()

    result = _run_analysis(source, verbose=verbose)

    try:
        entries = filter_allocations(result.summary.ranked, search, amount_range)
        leaderboard_page = paginate(entries, page=page, per_page=per_page or config.page_size)
    except AirdropAnalyticsError as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)

    console.print(f"[bold]Leaderboard[/] ({leaderboard_page.total_items:,} wallets)")
    formatter = TableFormatter(token_symbol=config.token_symbol)
    console.print(formatter.format_leaderboard(leaderboard_page), highlight=False)


@app.command()
def lookup(
    address: str = typer.Argument(..., help="Wallet address (case-insensitive)"),
    source: Optional[str] = typer.Option(
        None,
        "--source",
        help="CSV URL or file path (default: AIRDROP_CSV_URL)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """Check a single wallet's allocation. Exits 1 if not eligible."""
    setup_logging(verbose)
    symbol = get_config().token_symbol

    result = _run_analysis(source, verbose=verbose)
    amount = result.summary.lookup(address)

    if amount is None:
        console.print("[red]Not Eligible[/]")
        console.print("This address is not in the airdrop list")
        raise typer.Exit(1)

    console.print("[green]Allocation Found[/]")
    console.print(f"{amount:,} {symbol}", highlight=False)


@app.command()
def version() -> None:
    """Show version information."""
    from . import __version__
    console.print(f"Airdrop Analytics v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
