"""Parallel processing orchestration for the routing pipeline.

This module routes every connector of a document around the document's
obstacles, with parallel processing of individual connectors using
ProcessPoolExecutor.

Key components:
- route_connector: Route one connector around a list of obstacles
- process_connector: Top-level picklable function for parallel execution
- PathProcessor: Main orchestrator class for document processing
"""

import time
import traceback
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from polyroute.config import PolyrouteSettings
from polyroute.core.normalizer import normalize_segments
from polyroute.core.router import route_around
from polyroute.core.smoother import calc_smooth_polyline
from polyroute.domain import Connector, Obstacle, RoutingDocument, obstacle_from_dict
from polyroute.exceptions import ConnectorProcessingError, ProcessingCancelledError
from polyroute.io import PathReader, PathWriter
from polyroute.utils import ProcessingLogger, ProcessingStats, configure_logging


@dataclass(frozen=True)
class Detour:
    """A change made to a connector to avoid one obstacle."""

    obstacle_id: str | None
    points_before: int
    points_after: int

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "obstacle_id": self.obstacle_id,
            "points_before": self.points_before,
            "points_after": self.points_after,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Detour":
        """Deserialize from dictionary."""
        return cls(data["obstacle_id"], data["points_before"], data["points_after"])


def _obstacles_for(
    connector: Connector, obstacles: Sequence[Obstacle], settings: PolyrouteSettings
) -> list[Obstacle]:
    if not settings.processing.skip_end_obstacles:
        return list(obstacles)
    ends = connector.end_ids
    return [o for o in obstacles if o.id is None or o.id not in ends]


def route_connector(
    connector: Connector,
    obstacles: Sequence[Obstacle],
    settings: PolyrouteSettings,
) -> tuple[Connector, list[Detour]]:
    """Route a connector around every obstacle in turn.

    The path is normalized first, then routed around each obstacle in order
    (each detour feeding the next), then optionally smoothed as a whole.

    Args:
        connector: The connector to route
        obstacles: Obstacles to avoid, in routing order
        settings: Normalization, routing, smoothing and processing settings

    Returns:
        Tuple (routed connector, detours made)
    """
    points = list(connector.points)
    if settings.normalize.enabled:
        normalize_segments(points, settings.normalize.tolerance)

    detours: list[Detour] = []
    for obstacle in _obstacles_for(connector, obstacles, settings):
        routed = route_around(points, obstacle, settings.routing)
        if routed is None:
            continue
        detours.append(Detour(obstacle.id, len(points), len(routed)))
        points = routed

    if settings.smoothing.smooth_factor > 0:
        smoothed = calc_smooth_polyline(
            points, settings.smoothing.smooth_factor, settings.smoothing.bezier_steps
        )
        if smoothed is not None:
            points = smoothed

    routed_connector = Connector(
        id=connector.id,
        points=points,
        source=connector.source,
        target=connector.target,
    )
    return routed_connector, detours


def find_conflicts(
    connector: Connector,
    obstacles: Sequence[Obstacle],
    settings: PolyrouteSettings,
) -> list[Obstacle]:
    """List the obstacles a connector would have to be routed around.

    Each obstacle is tested against the connector's own path, without
    applying earlier detours.
    """
    points = list(connector.points)
    if settings.normalize.enabled:
        normalize_segments(points, settings.normalize.tolerance)
    return [
        o
        for o in _obstacles_for(connector, obstacles, settings)
        if route_around(points, o, settings.routing) is not None
    ]


def process_connector(
    connector_dict: dict[str, Any],
    obstacle_dicts: list[dict[str, Any]],
    settings_dict: dict[str, Any],
) -> dict[str, Any]:
    """Route a single connector.

    Top-level function designed to be picklable for use with ProcessPoolExecutor.
    Deserializes the connector, routes it, and returns the result.

    Args:
        connector_dict: Serialized connector (from Connector.to_dict())
        obstacle_dicts: Serialized obstacles
        settings_dict: Serialized settings (from PolyrouteSettings.model_dump())

    Returns:
        Dictionary containing either:
        - Success: {"connector": connector_dict, "detours": [detour_dict], "duration_ms": float}
        - Error: {"error": str, "connector_id": str, "traceback": str, "duration_ms": float}
    """
    start_time = time.time()

    try:
        connector = Connector.from_dict(connector_dict)
        obstacles = [obstacle_from_dict(o) for o in obstacle_dicts]
        settings = PolyrouteSettings.model_validate(settings_dict)

        routed, detours = route_connector(connector, obstacles, settings)

        duration_ms = (time.time() - start_time) * 1000
        return {
            "connector": routed.to_dict(),
            "detours": [d.to_dict() for d in detours],
            "duration_ms": duration_ms,
        }

    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        return {
            "error": str(e),
            "connector_id": connector_dict.get("id", "unknown"),
            "traceback": traceback.format_exc(),
            "duration_ms": duration_ms,
        }


class PathProcessor:
    """Orchestrates parallel connector routing.

    Manages the complete workflow:
    1. Load routing document
    2. Filter connectors that can be routed
    3. Route connectors in parallel using worker processes
    4. Collect results and update statistics
    5. Save routed document

    Example:
        settings = PolyrouteSettings()
        processor = PathProcessor(settings)
        stats = processor.process(
            input_path=Path("diagram.json"),
            output_path=Path("diagram-routed.json"),
            max_workers=4
        )
    """

    def __init__(self, config: PolyrouteSettings) -> None:
        """Initialize path processor with configuration.

        Args:
            config: Polyroute settings
        """
        self.config = config
        self.logger = configure_logging(
            log_file=config.logging.log_file,
            console_level=config.logging.log_level,
            file_level=config.logging.file_log_level,
            quiet=False,
        )
        self.processing_logger = ProcessingLogger(self.logger)

    def process(
        self,
        input_path: Path,
        output_path: Path | None = None,
        max_workers: int | None = None,
        progress_callback: Callable[[int, int, str, bool], None] | None = None,
    ) -> ProcessingStats:
        """Route every connector of a document.

        Args:
            input_path: Path to input routing document
            output_path: Path for output document (auto-generated if None)
            max_workers: Maximum worker processes (None = auto-detect,
                1 = route in this process)
            progress_callback: Optional callback(completed, total, connector_id, success)
                for progress updates

        Returns:
            ProcessingStats with counts, timing, and error details

        Raises:
            FileNotFoundError: If the document does not exist
            DocumentLoadError: If the document cannot be read
            DocumentSaveError: If the routed document cannot be written
            ProcessingCancelledError: If processing is cancelled by user
        """
        stats = ProcessingStats()
        stats.start_time = time.time()

        if max_workers is None:
            max_workers = self.config.processing.max_workers

        if output_path is None:
            output_path = PathWriter.get_routed_path(input_path)

        self.logger.info(
            "Starting document processing",
            input=str(input_path),
            output=str(output_path),
            max_workers=max_workers,
        )

        with PathReader(input_path) as reader:
            document = reader.document

            self.logger.info(
                "Document loaded",
                connectors=len(document.connectors),
                obstacles=len(document.obstacles),
            )

            to_process: list[Connector] = []
            for connector in reader.iter_connectors():
                if connector.is_degenerate():
                    stats.skipped_count += 1
                    self.processing_logger.log_connector_skipped(
                        connector.id, "fewer than 2 points"
                    )
                    continue
                to_process.append(connector)

            routed: dict[str, Connector] = {}
            if to_process:
                routed = self._route_connectors(
                    connectors=to_process,
                    document=document,
                    max_workers=max_workers,
                    stats=stats,
                    progress_callback=progress_callback,
                )
            else:
                self.logger.info("No connectors to route")

            self._save_document(document, output_path, routed)

        stats.end_time = time.time()

        self.logger.info(
            "Processing complete",
            processed=stats.processed_count,
            skipped=stats.skipped_count,
            errors=stats.error_count,
            detours_added=stats.detours_added,
            duration_seconds=round(stats.duration_seconds, 2),
        )

        return stats

    def _handle_result(
        self,
        connector_id: str,
        result: dict[str, Any],
        stats: ProcessingStats,
        routed: dict[str, Connector],
    ) -> bool:
        if "error" in result:
            error = ConnectorProcessingError(result["connector_id"], result["error"])
            self.processing_logger.log_connector_error(
                connector_id=result["connector_id"],
                error=error,
                traceback=result.get("traceback"),
            )
            stats.error_count += 1
            stats.errors.append((connector_id, result["error"]))
            return False

        routed[connector_id] = Connector.from_dict(result["connector"])
        detours = [Detour.from_dict(d) for d in result["detours"]]
        for detour in detours:
            self.processing_logger.log_detour(
                connector_id, detour.obstacle_id, detour.points_before, detour.points_after
            )

        stats.processed_count += 1
        stats.detours_added += len(detours)

        duration_ms = result.get("duration_ms", 0.0)
        self.processing_logger.log_connector_complete(
            connector_id=connector_id,
            detours_added=len(detours),
            duration_ms=duration_ms,
        )
        stats.connector_timings_ms.append(duration_ms)
        return True

    def _route_connectors(
        self,
        connectors: list[Connector],
        document: RoutingDocument,
        max_workers: int | None,
        stats: ProcessingStats,
        progress_callback: Callable[[int, int, str, bool], None] | None = None,
    ) -> dict[str, Connector]:
        """Route connectors, in worker processes unless max_workers is 1.

        Args:
            connectors: Connectors to route
            document: Document holding the obstacles
            max_workers: Maximum worker processes
            stats: Statistics object to update
            progress_callback: Optional callback(completed, total, connector_id, success)
                for progress updates

        Returns:
            Dictionary mapping connector ids to routed connectors
        """
        routed: dict[str, Connector] = {}

        # Serialize configuration and obstacles once for all workers
        settings_dict = self.config.model_dump()
        obstacle_dicts = [o.to_dict() for o in document.obstacles]
        tasks = {c.id: c.to_dict() for c in connectors}

        total = len(tasks)
        completed = 0

        if max_workers == 1:
            self.logger.info("Routing in process", connector_count=total)
            try:
                for connector_id, connector_dict in tasks.items():
                    self.processing_logger.log_connector_start(
                        connector_id, len(connector_dict["points"])
                    )
                    result = process_connector(connector_dict, obstacle_dicts, settings_dict)
                    success = self._handle_result(connector_id, result, stats, routed)
                    completed += 1
                    if progress_callback is not None:
                        progress_callback(completed, total, connector_id, success)
            except KeyboardInterrupt as e:
                self.logger.info("Cancellation requested by user")
                stats.was_cancelled = True
                stats.cancelled_count = total - completed
                raise ProcessingCancelledError(completed, total - completed) from e
            return routed

        self.logger.info(
            "Starting parallel processing",
            connector_count=total,
            max_workers=max_workers,
        )

        pending_futures: dict[Future[dict[str, Any]], str] = {}

        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            for connector_id, connector_dict in tasks.items():
                future = executor.submit(
                    process_connector,
                    connector_dict,
                    obstacle_dicts,
                    settings_dict,
                )
                pending_futures[future] = connector_id

            try:
                for future in as_completed(pending_futures):
                    connector_id = pending_futures.pop(future)
                    success = False

                    try:
                        result = future.result()
                        success = self._handle_result(connector_id, result, stats, routed)
                    except Exception as e:
                        # Executor-level error
                        self.processing_logger.log_connector_error(
                            connector_id=connector_id,
                            error=e,
                            traceback=traceback.format_exc(),
                        )
                        stats.error_count += 1
                        stats.errors.append((connector_id, str(e)))

                    completed += 1
                    if progress_callback is not None:
                        progress_callback(completed, total, connector_id, success)

            except KeyboardInterrupt as e:
                self.logger.info("Cancellation requested by user")
                for f in pending_futures:
                    f.cancel()

                stats.was_cancelled = True
                stats.cancelled_count = len(pending_futures)

                executor.shutdown(wait=True, cancel_futures=True)
                raise ProcessingCancelledError(completed, len(pending_futures)) from e

        return routed

    def _save_document(
        self,
        document: RoutingDocument,
        output_path: Path,
        routed: dict[str, Connector],
    ) -> None:
        """Save the routed document to output path.

        Args:
            document: The loaded document
            output_path: Path to save the routed document
            routed: Routed connectors by id
        """
        writer = PathWriter(document, output_path)

        for connector_id, connector in routed.items():
            try:
                writer.update_connector(connector)
            except ValueError as e:
                self.logger.error(
                    "Failed to update connector in document",
                    connector=connector_id,
                    error=str(e),
                )

        writer.save()

        self.logger.info(
            "Document saved",
            output=str(output_path),
            updated_connectors=len(routed),
        )
