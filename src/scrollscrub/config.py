"""
ScrollScrub Configuration
=========================

This module handles configuration loading for the scrub service.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    SCRUB_ASSETS_BACKEND   -> assets.backend
    SCRUB_ASSETS_ROOT      -> assets.root_dir
    SCRUB_ASSETS_BASE_URL  -> assets.base_url
    SCRUB_FRAME_COUNT      -> assets.frame_count
    SCRUB_PRIORITY_COUNT   -> assets.priority_count
    SCRUB_MAX_CONCURRENCY  -> assets.max_concurrency
    SCRUB_TICK_RATE_HZ     -> motion.tick_rate_hz
    SCRUB_CLAMP_SCROLL     -> scroll.clamp_to_extent
    SCRUB_PORT             -> server.port
    SCRUB_LOG_LEVEL        -> logging.level
    PORT                   -> server.port (Cloud Run)

Example:
    from scrollscrub.config import settings

    print(settings.assets.root_dir)
    print(settings.motion.frame_alpha)
"""

import os
import logging
from pathlib import Path
from typing import List, Optional, Tuple

import yaml
from pydantic import BaseModel, Field, field_validator

from scrollscrub.models.frames import PRIORITY_FRAMES, TOTAL_FRAMES
from scrollscrub.sections.quantizer import SECTION_BREAKPOINTS, validate_breakpoints


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class AppConfig(BaseModel):
    """Service identification."""

    name: str = Field(default="scrollscrub", description="Service name")
    version: str = Field(default="0.1.0", description="Service version")


class AssetsConfig(BaseModel):
    """Frame asset source configuration."""

    backend: str = Field(
        default="directory",
        description="Frame source backend: 'directory' or 'http'",
    )
    root_dir: str = Field(
        default="./public",
        description="Root directory that mirrors the static asset layout",
    )
    base_url: str = Field(
        default="http://localhost:3000",
        description="Base URL for the http backend",
    )
    path_template: str = Field(
        default="/frames/{index:03d}.gif",
        description="Asset path of frame i",
    )
    frame_count: int = Field(default=TOTAL_FRAMES, ge=1, description="Frames in the sequence")
    priority_count: int = Field(
        default=PRIORITY_FRAMES,
        ge=0,
        description="Lowest indices loaded before the scene is ready",
    )
    max_concurrency: int = Field(default=16, ge=1, description="Loads in flight at once")
    request_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Per-request timeout for the http backend",
    )


class MotionConfig(BaseModel):
    """Smoothing and tick cadence."""

    scroll_alpha: float = Field(
        default=0.08,
        gt=0,
        le=1.0,
        description="EMA factor for scroll position (0, 1]",
    )
    frame_alpha: float = Field(
        default=0.12,
        gt=0,
        le=1.0,
        description="EMA factor for frame index (0, 1]",
    )
    tick_rate_hz: float = Field(default=60.0, gt=0, description="Motion loop ticks per second")
    log_every_n_ticks: int = Field(default=600, ge=0, description="Summary log cadence (0 = off)")


class SectionsConfig(BaseModel):
    """Progress quantization."""

    breakpoints: List[float] = Field(
        default_factory=lambda: list(SECTION_BREAKPOINTS),
        description="Ascending progress thresholds in (0, 1]",
    )

    @field_validator("breakpoints")
    @classmethod
    def breakpoints_ascending(cls, v: List[float]) -> List[float]:
        return list(validate_breakpoints(v))


class SurfaceConfig(BaseModel):
    """Drawing surface sizing."""

    width_fraction: float = Field(default=0.5, gt=0, description="Share of viewport width")
    height_fraction: float = Field(default=0.55, gt=0, description="Share of viewport height")
    max_size: float = Field(default=500.0, ge=0, description="Logical size cap")
    background_color: Tuple[int, int, int] = Field(
        default=(0, 0, 0),
        description="RGB fill painted behind each frame",
    )


class ViewportConfig(BaseModel):
    """Initial headless viewport."""

    width: int = Field(default=1440, gt=0, description="Viewport width")
    height: int = Field(default=900, gt=0, description="Viewport height")
    device_pixel_ratio: float = Field(default=1.0, gt=0, description="Device pixel ratio")
    scroll_track_viewports: float = Field(
        default=6.0,
        ge=1.0,
        description="Document height as a multiple of the viewport height",
    )


class ScrollConfig(BaseModel):
    """Scroll input policy."""

    clamp_to_extent: bool = Field(
        default=True,
        description="Clamp scroll offsets to [0, max_scroll] before deriving targets",
    )


class StreamConfig(BaseModel):
    """State websocket configuration."""

    push_interval_seconds: float = Field(
        default=0.1,
        gt=0,
        description="Interval between snapshot pushes on /ws/state",
    )


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=8002, ge=1, le=65535, description="Bind port")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="json", description="Log format: json or text")


class Settings(BaseModel):
    """Root configuration model."""

    app: AppConfig = Field(default_factory=AppConfig)
    assets: AssetsConfig = Field(default_factory=AssetsConfig)
    motion: MotionConfig = Field(default_factory=MotionConfig)
    sections: SectionsConfig = Field(default_factory=SectionsConfig)
    surface: SurfaceConfig = Field(default_factory=SurfaceConfig)
    viewport: ViewportConfig = Field(default_factory=ViewportConfig)
    scroll: ScrollConfig = Field(default_factory=ScrollConfig)
    stream: StreamConfig = Field(default_factory=StreamConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, searches common locations.

    Returns:
        Settings: Loaded configuration
    """
    if config_path is None:
        search_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path("/app/config.yaml"),
            Path(__file__).parent.parent.parent / "config.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.warning("No config file found, using defaults and environment variables")

    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Asset settings
    if env_backend := os.environ.get("SCRUB_ASSETS_BACKEND"):
        config_data.setdefault("assets", {})["backend"] = env_backend
    if env_root := os.environ.get("SCRUB_ASSETS_ROOT"):
        config_data.setdefault("assets", {})["root_dir"] = env_root
    if env_url := os.environ.get("SCRUB_ASSETS_BASE_URL"):
        config_data.setdefault("assets", {})["base_url"] = env_url
    if env_count := os.environ.get("SCRUB_FRAME_COUNT"):
        config_data.setdefault("assets", {})["frame_count"] = int(env_count)
    if env_priority := os.environ.get("SCRUB_PRIORITY_COUNT"):
        config_data.setdefault("assets", {})["priority_count"] = int(env_priority)
    if env_conc := os.environ.get("SCRUB_MAX_CONCURRENCY"):
        config_data.setdefault("assets", {})["max_concurrency"] = int(env_conc)

    # Motion settings
    if env_rate := os.environ.get("SCRUB_TICK_RATE_HZ"):
        config_data.setdefault("motion", {})["tick_rate_hz"] = float(env_rate)

    # Scroll policy
    if env_clamp := os.environ.get("SCRUB_CLAMP_SCROLL"):
        config_data.setdefault("scroll", {})["clamp_to_extent"] = _parse_bool(env_clamp)

    # Server settings (Cloud Run uses PORT env var)
    if env_port := os.environ.get("PORT"):
        config_data.setdefault("server", {})["port"] = int(env_port)
    elif env_port := os.environ.get("SCRUB_PORT"):
        config_data.setdefault("server", {})["port"] = int(env_port)

    # Logging settings
    if env_log := os.environ.get("SCRUB_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


# =============================================================================
# Global Settings Instance
# =============================================================================

# Global settings instance - loaded on import
settings = load_config()
setup_logging(settings)
