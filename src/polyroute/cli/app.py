"""CLI application entry point for polyroute.

This module provides the main CLI interface using Typer.
"""

import os
from pathlib import Path
from typing import Annotated

import typer

from polyroute import __version__
from polyroute.cli.output import (
    SYM_OK,
    console,
    print_cancelled,
    print_conflicts_found,
    print_connector_table,
    print_document_info,
    print_error,
    print_header,
    print_routing_plan,
    print_step,
    print_summary,
    routing_progress,
)
from polyroute.config import (
    LoggingConfig,
    NormalizeConfig,
    PolyrouteSettings,
    ProcessingConfig,
    RoutingConfig,
    SmoothingConfig,
)
from polyroute.core import PathProcessor, find_conflicts
from polyroute.domain import RoutingDocument
from polyroute.exceptions import (
    DocumentLoadError,
    DocumentSaveError,
    PolyrouteError,
    ProcessingCancelledError,
)
from polyroute.io import PathReader, PathWriter

# Create the Typer app
app = typer.Typer(
    name="polyroute",
    help="Route diagram connectors around the nodes and labels they cross.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Polyroute[/bold blue] v{__version__}")
        raise typer.Exit()


@app.command()
def route(
    input_document: Annotated[
        Path,
        typer.Argument(
            help="Path to input JSON routing document",
            show_default=False,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path (default: {name}-routed.json)",
        ),
    ] = None,
    buffer: Annotated[
        int,
        typer.Option(
            "--buffer",
            "-b",
            help="Clearance kept between detours and obstacles",
            min=0,
            max=500,
        ),
    ] = 0,
    smooth: Annotated[
        int,
        typer.Option(
            "--smooth",
            "-s",
            help="Curve detour corners by this percentage (0-100)",
            min=0,
            max=100,
        ),
    ] = 0,
    tolerance: Annotated[
        int,
        typer.Option(
            "--tolerance",
            "-t",
            help="Straight-line tolerance used when normalizing paths",
            min=0,
            max=50,
        ),
    ] = 0,
    longest: Annotated[
        bool,
        typer.Option(
            "--longest",
            help="Take the longer way around polygon obstacles",
        ),
    ] = False,
    keep_intersections: Annotated[
        bool,
        typer.Option(
            "--keep-intersections",
            help="Keep every boundary point of each detour",
        ),
    ] = False,
    curve_smooth: Annotated[
        int,
        typer.Option(
            "--curve-smooth",
            help="Smooth each whole routed path by this percentage (0 = off)",
            min=0,
            max=100,
        ),
    ] = 0,
    steps: Annotated[
        int,
        typer.Option(
            "--steps",
            help="Line segments per curve when smoothing (1-32)",
            min=1,
            max=32,
        ),
    ] = 16,
    workers: Annotated[
        int | None,
        typer.Option(
            "--workers",
            "-j",
            help="Number of parallel workers (default: auto)",
            min=1,
        ),
    ] = None,
    list_connectors: Annotated[
        bool,
        typer.Option(
            "--list-connectors",
            help="List all connectors and exit",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Show which connectors would be routed without writing output",
        ),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose console output",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Route the connectors of a diagram around the obstacles they cross.

    Each connector is cleaned up, then bent around every rectangle, polygon
    and point obstacle it crosses, except the nodes it is attached to.

    Example:
        polyroute diagram.json --buffer 10

    This will create diagram-routed.json with every crossing connector
    routed around the obstacles in its way.
    """
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    if not input_document.exists():
        print_error(
            f"Input file not found: {input_document}",
            details=f"The file '{input_document}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    if not input_document.is_file():
        print_error(
            f"Input path is not a file: {input_document}",
            details="Please provide a path to a JSON routing document.",
        )
        raise typer.Exit(code=1)

    if not quiet:
        print_header(__version__)

    settings = PolyrouteSettings(
        normalize=NormalizeConfig(tolerance=tolerance),
        routing=RoutingConfig(
            smooth_factor=smooth,
            buffer=buffer,
            shortest_distance=not longest,
            include_intersection_points=keep_intersections,
        ),
        smoothing=SmoothingConfig(
            smooth_factor=curve_smooth,
            bezier_steps=steps,
        ),
        processing=ProcessingConfig(
            max_workers=workers,
        ),
        logging=LoggingConfig(
            log_file=log_file,
            log_level=log_level if not quiet else "WARNING",
        ),
    )

    try:
        if not quiet:
            print_step("Loading document")

        with PathReader(input_document) as reader:
            document = reader.document

        if not quiet:
            print_document_info(
                document_path=str(input_document),
                connector_count=len(document.connectors),
                obstacle_count=len(document.obstacles),
            )

        if list_connectors:
            _handle_list_connectors(document, quiet)
            raise typer.Exit(code=0)

        if not quiet:
            print_step("Checking connectors")

        conflicting = _conflicting_connectors(document, settings)

        if dry_run:
            _handle_dry_run(document, conflicting, settings, quiet, verbose)
            raise typer.Exit(code=0)

        if not quiet:
            print_conflicts_found(
                count=len(conflicting),
                connector_ids=list(conflicting),
                verbose=verbose,
            )

        if not conflicting and curve_smooth == 0:
            if not quiet:
                console.print("\nNo connectors cross obstacles. Nothing to route.")
            raise typer.Exit(code=0)

        if not quiet:
            actual_workers = workers if workers else os.cpu_count() or 1
            print_step("Routing")
            print_routing_plan(actual_workers, auto_workers=workers is None, buffer=buffer)

        actual_output_path = output or PathWriter.get_routed_path(input_document)
        processor = PathProcessor(settings)

        try:
            if not quiet:
                with routing_progress() as progress:
                    task_id = progress.add_task(
                        "Routing",
                        total=len(document.connectors),
                    )

                    def update_progress(completed: int, *_: object) -> None:
                        progress.update(task_id, completed=completed)

                    stats = processor.process(
                        input_path=input_document,
                        output_path=actual_output_path,
                        max_workers=workers,
                        progress_callback=update_progress,
                    )
            else:
                stats = processor.process(
                    input_path=input_document,
                    output_path=actual_output_path,
                    max_workers=workers,
                )
        except ProcessingCancelledError as e:
            if not quiet:
                print_cancelled(completed=e.processed_count, pending=e.pending_count)
            raise typer.Exit(code=130) from None  # Standard Unix SIGINT exit code

        if not quiet:
            print_summary(stats, actual_output_path)

    except DocumentLoadError as e:
        print_error(f"Could not load document: {e.reason}")
        raise typer.Exit(code=1)
    except DocumentSaveError as e:
        print_error(f"Could not save document: {e.reason}")
        raise typer.Exit(code=1)
    except PolyrouteError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)


def _conflicting_connectors(
    document: RoutingDocument, settings: PolyrouteSettings
) -> dict[str, list[str]]:
    """Map each crossing connector to the obstacles it crosses.

    Args:
        document: The loaded document
        settings: Settings used for the check

    Returns:
        Connector id to obstacle ids (unnamed obstacles shown as "#index")
    """
    names = {id(o): o.id or f"#{index}" for index, o in enumerate(document.obstacles)}
    conflicting: dict[str, list[str]] = {}
    for connector in document.connectors:
        if connector.is_degenerate():
            continue
        crossed = find_conflicts(connector, document.obstacles, settings)
        if crossed:
            conflicting[connector.id] = [names[id(o)] for o in crossed]
    return conflicting


def _handle_list_connectors(document: RoutingDocument, quiet: bool) -> None:
    """Handle --list-connectors mode.

    Args:
        document: The loaded document
        quiet: Suppress output
    """
    if not quiet:
        console.print(f"\n[bold]{len(document.connectors)} connectors[/bold]\n")

    print_connector_table(
        [(c.id, len(c.points), c.source, c.target) for c in document.connectors]
    )


def _handle_dry_run(
    document: RoutingDocument,
    conflicting: dict[str, list[str]],
    settings: PolyrouteSettings,
    quiet: bool,
    verbose: bool,
) -> None:
    """Handle --dry-run mode.

    Args:
        document: The loaded document
        conflicting: Crossing connectors and the obstacles they cross
        settings: Polyroute settings
        quiet: Suppress output
        verbose: Show verbose output
    """
    if quiet:
        return

    total_crossings = sum(len(crossed) for crossed in conflicting.values())
    console.print("\n[bold]Analysis[/bold]\n")
    console.print(f"  Connectors            {len(document.connectors)}")
    console.print(f"  Crossing obstacles    {len(conflicting)}")
    console.print(f"  Estimated detours     {total_crossings}")
    console.print(f"  Buffer                {settings.routing.buffer}")

    if verbose and conflicting:
        console.print("\n[bold]Connectors[/bold]")
        items = list(conflicting.items())
        for connector_id, crossed in items[:20]:
            console.print(f"  {connector_id}: {', '.join(crossed)}")
        if len(items) > 20:
            console.print(f"  ... +{len(items) - 20} more")

    console.print(f"\n[bold green]{SYM_OK} Dry run complete[/bold green] - no changes made")


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
