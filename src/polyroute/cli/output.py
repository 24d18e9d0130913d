"""Rich console output for the polyroute command.

Everything the CLI prints goes through the shared ``console`` so that the
quiet mode and the test runner see a single stream.
"""

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text

from polyroute.utils.logging import ProcessingStats

console = Console()

SYM_STEP = "▸"
SYM_OK = "✓"
SYM_ERR = "✗"
SYM_DOT = "·"
SYM_ARROW = "→"

# Longest id list printed before the rest is summarized
MAX_LISTED_IDS = 20


def routing_progress() -> Progress:
    """Progress bar counting routed connectors."""
    return Progress(
        TextColumn("  [progress.description]{task.description}"),
        BarColumn(bar_width=32, complete_style="cyan", finished_style="green"),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
    )


def print_header(version: str) -> None:
    console.print(f"\n[bold]Polyroute[/bold] v{version}")
    console.rule(style="dim")


def print_step(message: str) -> None:
    console.print(f"\n{SYM_STEP} {message}")


def print_document_info(document_path: str, connector_count: int, obstacle_count: int) -> None:
    """Print what was loaded from the routing document.

    Args:
        document_path: Path to the document
        connector_count: Number of connectors in the document
        obstacle_count: Number of obstacles in the document
    """
    # Text keeps brackets in file names from being read as markup
    console.print(Text(f"  {document_path}"))
    console.print(f"  {connector_count:,} connectors {SYM_DOT} {obstacle_count:,} obstacles")


def print_conflicts_found(count: int, connector_ids: list[str], verbose: bool) -> None:
    """Print how many connectors cross obstacles.

    Args:
        count: Number of connectors crossing at least one obstacle
        connector_ids: Identifiers of those connectors
        verbose: Whether to list the identifiers
    """
    style = "yellow" if count else "green"
    console.print(f"  [{style}]{count}[/{style}] connectors cross obstacles")
    if verbose and connector_ids:
        listed = ", ".join(connector_ids[:MAX_LISTED_IDS])
        hidden = len(connector_ids) - MAX_LISTED_IDS
        if hidden > 0:
            listed += f" (+{hidden} more)"
        console.print(f"  {listed}")


def print_connector_table(rows: list[tuple[str, int, str | None, str | None]]) -> None:
    """Print connectors as a table.

    Args:
        rows: Tuples of (id, point count, source, target)
    """
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Connector")
    table.add_column("Points", justify="right")
    table.add_column("Ends")
    for connector_id, point_count, source, target in rows:
        table.add_row(
            connector_id,
            str(point_count),
            f"{source or '?'} {SYM_ARROW} {target or '?'}",
        )
    console.print(table)


def print_routing_plan(workers: int, auto_workers: bool, buffer: int) -> None:
    """Print how the routing run is set up.

    Args:
        workers: Number of worker processes
        auto_workers: Whether the worker count came from the CPU count
        buffer: Clearance kept around obstacles
    """
    source = "auto" if auto_workers else "set"
    console.print(
        f"  {workers} workers ({source}) {SYM_DOT} buffer {buffer} {SYM_DOT} Ctrl+C to cancel"
    )


def _duration(seconds: float) -> str:
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    minutes, seconds = divmod(seconds, 60)
    if minutes:
        return f"{int(minutes)}m {seconds:.1f}s"
    return f"{seconds:.1f}s"


def print_summary(stats: ProcessingStats, output_path: Path) -> None:
    """Print the result of a routing run.

    Args:
        stats: Statistics collected by the processor
        output_path: Where the routed document was written
    """
    console.print(
        f"\n[bold green]{SYM_OK} Routed[/bold green] in {_duration(stats.duration_seconds)}"
    )
    console.print(Text(f"  {output_path}", style="bold"))

    grid = Table.grid(padding=(0, 2))
    grid.add_column(style="dim")
    grid.add_column(justify="right")
    grid.add_row("  connectors", str(stats.processed_count))
    grid.add_row("  skipped", str(stats.skipped_count))
    grid.add_row("  detours", str(stats.detours_added))
    errors = f"[red]{stats.error_count}[/red]" if stats.error_count else "0"
    grid.add_row("  errors", errors)
    if stats.connector_timings_ms:
        grid.add_row(
            "  per connector",
            f"{stats.avg_connector_ms:.1f}ms avg "
            f"({stats.min_connector_ms:.1f}-{stats.max_connector_ms:.1f}ms)",
        )
    console.print(grid)

    for connector_id, message in stats.errors[:MAX_LISTED_IDS]:
        console.print(Text.assemble((f"  {SYM_ERR} ", "red"), f"{connector_id}: {message}"))


def print_error(message: str, details: str | None = None) -> None:
    # Validation messages carry [type=...] fragments that are not markup
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {escape(message)}")
    if details:
        console.print(f"  {escape(details)}")


def print_cancelled(completed: int, pending: int) -> None:
    """Report an interrupted run.

    Args:
        completed: Connectors routed before the interrupt
        pending: Connectors that were never routed
    """
    console.print(f"\n{SYM_DOT} [bold]Cancelled[/bold]")
    console.print(f"  {completed} connectors routed {SYM_DOT} {pending} not started")
    console.print("  Input left unchanged, no output written")
