"""CLI module for comparing table and column sets across databases.

Usage:
    db-table-diff compare
    db-table-diff compare --config dbdiff.toml --baseline prod --format html > diff.html
    db-table-diff compare --tables-only -v
    db-table-diff databases

Commands:
    compare    - Compare every configured database against the baseline
    databases  - List configured databases and the baseline

Exit codes:
    0 - no differences
    1 - differences found
    2 - configuration, connection, or query error
"""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from db_table_diff.cli.render import render_html, render_rich, render_text
from db_table_diff.config.loader import load_diff_config
from db_table_diff.errors import TableDiffError
from db_table_diff.pipeline import generate_report
from db_table_diff.registry import ConnectionRegistry

console = Console()
err_console = Console(stderr=True)

EXIT_OK = 0
EXIT_DIFFERENCES = 1
EXIT_ERROR = 2


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _load_registry(args: argparse.Namespace) -> tuple[ConnectionRegistry, bool]:
    """Load config and validate every database (no connections yet).

    Returns:
        Tuple of (registry, include_columns from config)
    """
    config_path = Path(args.config) if args.config else None
    config = load_diff_config(config_path)
    registry = ConnectionRegistry.from_config(config)
    baseline = getattr(args, "baseline", None)
    if baseline:
        registry.designate_baseline(baseline)
    return registry, config.include_columns


# ============================================================================
# Commands
# ============================================================================


def cmd_compare(args: argparse.Namespace) -> int:
    """Compare every configured database against the baseline.

    Args:
        args: Parsed arguments with config, baseline, format, tables_only.

    Returns:
        0 if no differences, 1 if differences found, 2 on error.
    """
    try:
        registry, include_columns = _load_registry(args)
        if args.tables_only:
            include_columns = False

        if args.format == "rich":
            console.print(
                f"Comparing against baseline: "
                f"[bold cyan]{escape(registry.baseline.label)}[/bold cyan]",
                style="dim",
            )

        report = generate_report(registry, include_columns=include_columns)
    except (TableDiffError, FileNotFoundError) as e:
        err_console.print(f"[bold red]x[/bold red] {escape(str(e))}", highlight=False)
        return EXIT_ERROR

    if args.format == "text":
        sys.stdout.write(render_text(report))
    elif args.format == "html":
        sys.stdout.write(render_html(report))
    else:
        render_rich(report, console)
        console.print()
        if report.has_differences:
            console.print("[bold yellow]![/bold yellow] Differences found")
        else:
            console.print("[bold green]v[/bold green] No differences")

    return EXIT_DIFFERENCES if report.has_differences else EXIT_OK


def cmd_databases(args: argparse.Namespace) -> int:
    """List configured databases.

    Args:
        args: Parsed arguments with config.

    Returns:
        0 on success, 2 on configuration error.
    """
    try:
        registry, _ = _load_registry(args)
    except (TableDiffError, FileNotFoundError) as e:
        err_console.print(f"[bold red]x[/bold red] {escape(str(e))}", highlight=False)
        return EXIT_ERROR

    baseline_label = registry.baseline.label

    table = Table(title="Configured Databases", show_header=True, header_style="bold")
    table.add_column("Label", style="cyan")
    table.add_column("Driver")
    table.add_column("Connection", style="dim")
    table.add_column("Baseline")

    for handle in registry.handles:
        table.add_row(
            escape(handle.label),
            handle.engine.value,
            escape(handle.display_url()),
            "[bold green]*[/bold green]" if handle.label == baseline_label else "",
        )

    console.print(table)
    return EXIT_OK


# ============================================================================
# Main entry point
# ============================================================================


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Parses command line arguments and dispatches to appropriate handler.

    Returns:
        Exit code (0 for success, non-zero for differences or errors).
    """
    parser = argparse.ArgumentParser(
        prog="db-table-diff",
        description="Compare table and column sets across databases",
    )
    parser.add_argument(
        "--config",
        "-c",
        default=None,
        help="Path to dbdiff.toml (default: ./dbdiff.toml)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log connections and queries to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # compare command
    p_compare = subparsers.add_parser(
        "compare",
        help="Compare every configured database against the baseline",
    )
    p_compare.add_argument(
        "--baseline",
        "-b",
        default=None,
        help="Database label to compare against (default: first configured)",
    )
    p_compare.add_argument(
        "--format",
        "-f",
        choices=["rich", "text", "html"],
        default="rich",
        help="Output format",
    )
    p_compare.add_argument(
        "--tables-only",
        action="store_true",
        help="Compare table sets only, skip column comparison",
    )
    p_compare.set_defaults(func=cmd_compare)

    # databases command
    p_databases = subparsers.add_parser(
        "databases",
        help="List configured databases",
    )
    p_databases.set_defaults(func=cmd_databases)

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
