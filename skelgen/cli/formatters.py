"""Rich formatters for CLI output."""

from collections import Counter

from rich.console import Console
from rich.table import Table

from skelgen.generator.models import GenerationResult


def format_result_line(result: GenerationResult, console: Console) -> None:
    """Print one generated or skipped file.

    Args:
        result: Outcome of one generated file
        console: Rich console instance
    """
    line = f"{_style_status(result.status.value)} {result.path}"
    if result.message:
        line = f"{line} [dim]({result.message})[/dim]"
    console.print(line)


def format_results_table(results: list[GenerationResult], console: Console) -> None:
    """Display project run results in a Rich table.

    Args:
        results: Outcomes in processing order
        console: Rich console instance
    """
    if not results:
        console.print("[yellow]No PHP classes found.[/yellow]")
        return

    table = Table(title="Generated Tests")
    table.add_column("Status", style="bold")
    table.add_column("Class", style="cyan")
    table.add_column("Test File", style="dim")
    table.add_column("Note", style="dim")

    for result in results:
        table.add_row(
            _style_status(result.status.value),
            result.class_name or "-",
            str(result.path),
            result.message,
        )

    console.print(table)

    counts = Counter(result.status.value for result in results)
    summary = ", ".join(f"{counts[status]} {status}" for status in ("created", "exists", "skipped"))
    console.print(f"\n[bold]Summary:[/bold] {summary}")


def _style_status(status: str) -> str:
    """Apply Rich styling to status string."""
    status_colors = {
        "created": "[green]created[/green]",
        "exists": "[yellow]exists[/yellow]",
        "skipped": "[dim]skipped[/dim]",
    }
    return status_colors.get(status.lower(), status)


__all__ = ["format_result_line", "format_results_table"]
