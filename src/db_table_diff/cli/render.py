"""Report renderers: plain text, HTML, and rich console tables.

Baseline-only names are prefixed ``-`` (shown dark red), other-only names
``+`` (shown dark green).  When columns were compared, every table common to
both databases is listed, with ``no difference`` for identical tables.
"""

from html import escape

from rich.console import Console
from rich.markup import escape as markup_escape
from rich.table import Table

from db_table_diff.schema.models import ComparisonReport

NO_DIFFERENCE = "no difference"


# ============================================================================
# Plain text
# ============================================================================


def render_text(report: ComparisonReport) -> str:
    """Render *report* as plain text."""
    blocks: list[str] = []

    for entry in report.entries:
        other, baseline = entry.other_label, report.baseline_label
        diff = entry.table_diff
        lines = [f"'{other}' tables compared to '{baseline}' tables"]
        lines.extend(f"- {name}" for name in diff.only_in_baseline)
        lines.extend(f"+ {name}" for name in diff.only_in_other)
        if not diff.has_differences:
            lines.append(f"  ({NO_DIFFERENCE})")

        if report.columns_compared:
            lines.append("")
            lines.append(f"'{other}' columns compared to '{baseline}' columns")
            if not entry.common_tables:
                lines.append("  (no common tables)")
            for table_name in entry.common_tables:
                column_diff = entry.column_diff_for(table_name)
                if column_diff is None:
                    lines.append(f"  {table_name}: {NO_DIFFERENCE}")
                    continue
                lines.append(f"  {table_name}:")
                lines.extend(f"    - {name}" for name in column_diff.only_in_baseline)
                lines.extend(f"    + {name}" for name in column_diff.only_in_other)

        blocks.append("\n".join(lines))

    return "\n\n".join(blocks) + ("\n" if blocks else "")


# ============================================================================
# HTML
# ============================================================================


def _html_names(names: tuple[str, ...], sign: str, color: str) -> str:
    if not names:
        return ""
    body = "<br>".join(f"{sign} {escape(name)}" for name in names)
    return f'<div style="color: {color}">{body}</div>'


def render_html(report: ComparisonReport) -> str:
    """Render *report* as an HTML fragment."""
    parts: list[str] = []

    for entry in report.entries:
        other, baseline = escape(entry.other_label), escape(report.baseline_label)
        diff = entry.table_diff
        parts.append(
            f'<h3 style="font-weight: normal"><strong>{other}</strong> tables '
            f"compared to <strong>{baseline}</strong> tables</h3>"
        )
        if diff.has_differences:
            parts.append(_html_names(diff.only_in_baseline, "-", "darkred"))
            parts.append(_html_names(diff.only_in_other, "+", "darkgreen"))
        else:
            parts.append(f"<div><em>{NO_DIFFERENCE}</em></div>")

        if report.columns_compared:
            parts.append(
                f'<h4 style="font-weight: normal"><strong>{other}</strong> columns '
                f"compared to <strong>{baseline}</strong> columns</h4>"
            )
            parts.append("<ul>")
            for table_name in entry.common_tables:
                column_diff = entry.column_diff_for(table_name)
                if column_diff is None:
                    parts.append(
                        f"<li>{escape(table_name)}: <em>{NO_DIFFERENCE}</em></li>"
                    )
                    continue
                parts.append(
                    f"<li>{escape(table_name)}"
                    f"{_html_names(column_diff.only_in_baseline, '-', 'darkred')}"
                    f"{_html_names(column_diff.only_in_other, '+', 'darkgreen')}</li>"
                )
            parts.append("</ul>")

        parts.append("<br>")

    return "\n".join(part for part in parts if part) + "\n"


# ============================================================================
# Rich console
# ============================================================================


def render_rich(report: ComparisonReport, console: Console) -> None:
    """Print *report* to *console* as one table per compared database."""
    for entry in report.entries:
        other = markup_escape(entry.other_label)
        baseline = markup_escape(report.baseline_label)
        diff = entry.table_diff

        table = Table(
            title=f"[bold cyan]{other}[/bold cyan] vs [bold]{baseline}[/bold]",
            show_header=True,
            header_style="bold",
        )
        table.add_column("Table", style="dim")
        table.add_column("Column")
        table.add_column("Change")

        for name in diff.only_in_baseline:
            table.add_row(markup_escape(name), "", f"[red]- only in {baseline}[/red]")
        for name in diff.only_in_other:
            table.add_row(markup_escape(name), "", f"[green]+ only in {other}[/green]")

        if report.columns_compared:
            for table_name in entry.common_tables:
                column_diff = entry.column_diff_for(table_name)
                if column_diff is None:
                    table.add_row(
                        markup_escape(table_name), "", f"[dim]{NO_DIFFERENCE}[/dim]"
                    )
                    continue
                for name in column_diff.only_in_baseline:
                    table.add_row(
                        markup_escape(table_name),
                        markup_escape(name),
                        f"[red]- only in {baseline}[/red]",
                    )
                for name in column_diff.only_in_other:
                    table.add_row(
                        markup_escape(table_name),
                        markup_escape(name),
                        f"[green]+ only in {other}[/green]",
                    )

        if table.row_count == 0:
            table.add_row("", "", f"[dim]{NO_DIFFERENCE}[/dim]")

        console.print()
        console.print(table)
