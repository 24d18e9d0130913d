"""Configuration settings for Polyroute."""

from pathlib import Path

from pydantic import BaseModel, Field


class NormalizeConfig(BaseModel):
    """Configuration for polyline normalization."""

    enabled: bool = Field(
        default=True,
        description="Normalize connector paths before routing",
    )
    tolerance: int = Field(
        default=0,
        ge=0,
        le=50,
        description="Distance within which points are merged or flattened",
    )


class RoutingConfig(BaseModel):
    """Configuration for routing connectors around obstacles."""

    smooth_factor: int = Field(
        default=0,
        ge=0,
        le=100,
        description="Curve the detour by this percentage of each segment (0 = sharp corners)",
    )
    buffer: int = Field(
        default=0,
        ge=0,
        le=500,
        description="Clearance kept between the detour and the obstacle boundary",
    )
    shortest_distance: bool = Field(
        default=True,
        description="Take the shorter way around polygon obstacles",
    )
    include_intersection_points: bool = Field(
        default=False,
        description="Keep every boundary corner instead of pruning redundant ones",
    )


class SmoothingConfig(BaseModel):
    """Configuration for whole-path bezier smoothing after routing."""

    smooth_factor: int = Field(
        default=0,
        ge=0,
        le=100,
        description="Smoothing applied to the final path (0 = disabled)",
    )
    bezier_steps: int = Field(
        default=16,
        ge=1,
        le=32,
        description="Line segments used to approximate each curve",
    )


class ProcessingConfig(BaseModel):
    """Configuration for batch processing."""

    max_workers: int | None = Field(
        default=None,
        description="Max worker processes (None = auto)",
    )
    skip_end_obstacles: bool = Field(
        default=True,
        description="Do not route a connector around its own source and target obstacles",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class PolyrouteSettings(BaseModel):
    """Main application settings."""

    normalize: NormalizeConfig = Field(default_factory=NormalizeConfig)
    routing: RoutingConfig = Field(default_factory=RoutingConfig)
    smoothing: SmoothingConfig = Field(default_factory=SmoothingConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> PolyrouteSettings:
    """Get default application settings."""
    return PolyrouteSettings()
