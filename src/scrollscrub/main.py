"""
ScrollScrub Main Application
============================

FastAPI entry point hosting one headless scroll-scrubbed scene.

The presentation layer is remote: clients post scroll and resize events,
read derived state, and fetch the rendered frame.

Endpoints:
    GET  /           - Service information
    GET  /health     - Liveness probe (is process alive?)
    GET  /ready      - Readiness probe (priority frames loaded + surface attached?)
    GET  /state      - Full scene snapshot
    GET  /frame.png  - Current backing buffer as PNG
    GET  /metrics    - Loader, compositor and controller metrics
    POST /scroll     - Set the viewport scroll offset
    POST /resize     - Resize the viewport
    WS   /ws/state   - Real-time snapshot stream
"""

import asyncio
import logging
import os
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse, Response

from scrollscrub.config import settings
from scrollscrub.assets import DirectoryFrameSource, FrameSource, HttpFrameSource
from scrollscrub.models import ResizeEvent, SceneSnapshot, ScrollEvent, Viewport
from scrollscrub.render import RasterSurface
from scrollscrub.scene import ScrubScene


logger = logging.getLogger(__name__)


# =============================================================================
# Global State
# =============================================================================

_viewport: Optional[Viewport] = None
_surface: Optional[RasterSurface] = None
_source: Optional[FrameSource] = None
_scene: Optional[ScrubScene] = None
_startup_task: Optional[asyncio.Task] = None
_startup_time: float = 0.0
_startup_error: Optional[str] = None


# =============================================================================
# Getters
# =============================================================================

def get_scene() -> Optional[ScrubScene]:
    return _scene


def get_surface() -> Optional[RasterSurface]:
    return _surface


def is_ready() -> bool:
    return _scene is not None and _scene.images_ready.value and _scene.attached


# =============================================================================
# Factories
# =============================================================================

def create_frame_source() -> FrameSource:
    """
    Create frame source based on config.

    Fails fast on an unknown backend.
    """
    backend = settings.assets.backend

    if backend == "directory":
        logger.info(f"Using DirectoryFrameSource: root={settings.assets.root_dir}")
        return DirectoryFrameSource(
            root=settings.assets.root_dir,
            path_template=settings.assets.path_template,
        )
    elif backend == "http":
        logger.info(f"Using HttpFrameSource: base_url={settings.assets.base_url}")
        return HttpFrameSource(
            base_url=settings.assets.base_url,
            path_template=settings.assets.path_template,
            timeout=settings.assets.request_timeout_seconds,
        )
    else:
        raise ValueError(f"Unknown assets backend: {backend}")


def create_viewport() -> Viewport:
    height = settings.viewport.height
    return Viewport(
        width=settings.viewport.width,
        height=height,
        device_pixel_ratio=settings.viewport.device_pixel_ratio,
        document_height=height * settings.viewport.scroll_track_viewports,
    )


def create_scene(viewport: Viewport, source: FrameSource) -> ScrubScene:
    return ScrubScene(
        viewport,
        source,
        frame_count=settings.assets.frame_count,
        priority_count=settings.assets.priority_count,
        max_concurrency=settings.assets.max_concurrency,
        scroll_alpha=settings.motion.scroll_alpha,
        frame_alpha=settings.motion.frame_alpha,
        tick_rate_hz=settings.motion.tick_rate_hz,
        breakpoints=settings.sections.breakpoints,
        width_fraction=settings.surface.width_fraction,
        height_fraction=settings.surface.height_fraction,
        max_size=settings.surface.max_size,
        background=tuple(settings.surface.background_color),
        clamp_scroll=settings.scroll.clamp_to_extent,
    )


# =============================================================================
# Startup Pipeline
# =============================================================================

async def start_scene() -> None:
    """Load the priority batch, then attach the surface."""
    global _startup_error

    try:
        await _scene.load_assets()
        await _scene.attach(_surface)
        logger.info(
            f"Scene ready: progress={_scene.loading_progress.value}%, "
            f"resolved={_scene.frames.resolved_count}/{len(_scene.frames)}"
        )
    except asyncio.CancelledError:
        logger.info("Scene startup cancelled")
        raise
    except Exception as e:
        _startup_error = str(e)
        logger.error(f"Scene startup failed: {e}")


# =============================================================================
# Lifespan Management
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager with graceful shutdown."""
    global _viewport, _surface, _source, _scene, _startup_task, _startup_time

    _startup_time = time.time()
    logger.info(f"Starting {settings.app.name} {settings.app.version}")

    port = int(os.environ.get("PORT", settings.server.port))
    logger.info(f"Configured port: {port}")

    _viewport = create_viewport()
    _surface = RasterSurface()
    _source = create_frame_source()
    _scene = create_scene(_viewport, _source)

    _startup_task = asyncio.create_task(start_scene(), name="scene_startup")

    logger.info("All components started")

    yield

    logger.info("Shutting down gracefully...")

    if _startup_task and not _startup_task.done():
        _startup_task.cancel()
        try:
            await _startup_task
        except asyncio.CancelledError:
            pass

    if _scene:
        await _scene.close()

    if isinstance(_source, HttpFrameSource):
        _source.close()

    logger.info("Shutdown complete")


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="ScrollScrub",
    description="Scroll-driven frame sequence scrubbing engine",
    version=settings.app.version,
    lifespan=lifespan,
)


# =============================================================================
# HTTP Endpoints
# =============================================================================

@app.get("/")
async def root() -> JSONResponse:
    """Service information endpoint."""
    return JSONResponse({
        "service": "ScrollScrub",
        "version": settings.app.version,
        "name": settings.app.name,
        "status": "running",
        "assets_backend": settings.assets.backend,
        "frame_count": settings.assets.frame_count,
    })


@app.get("/health")
async def health() -> JSONResponse:
    """
    Liveness probe - is the process alive?

    Always returns 200 if the service is running.
    """
    return JSONResponse({
        "status": "healthy",
        "uptime_seconds": round(time.time() - _startup_time, 1),
    })


@app.get("/ready")
async def ready() -> JSONResponse:
    """
    Readiness probe - can the scene serve frames?

    Returns 200 once the priority batch settled and the surface is attached.
    Returns 503 otherwise.
    """
    scene = get_scene()
    images_ready = scene.images_ready.value if scene else False
    loading_progress = scene.loading_progress.value if scene else 0

    if is_ready():
        return JSONResponse({
            "status": "ready",
            "images_ready": images_ready,
            "loading_progress": loading_progress,
        })
    return JSONResponse(
        {
            "status": "not_ready",
            "images_ready": images_ready,
            "loading_progress": loading_progress,
            "error": _startup_error,
        },
        status_code=503,
    )


@app.get("/state", response_model=SceneSnapshot)
async def state() -> JSONResponse:
    """Get the full scene snapshot."""
    scene = get_scene()
    if scene is None:
        return JSONResponse({"error": "Scene not initialized"}, status_code=503)
    return JSONResponse(scene.snapshot().model_dump(mode="json"))


@app.get("/frame.png")
async def frame_png() -> Response:
    """Current backing buffer, PNG-encoded."""
    scene = get_scene()
    surface = get_surface()
    if (
        scene is None
        or surface is None
        or not scene.attached
        or scene.compositor.paint_count == 0
        or surface.width == 0
    ):
        return JSONResponse({"error": "No frame painted yet"}, status_code=503)

    data = await asyncio.to_thread(surface.encode_png)
    return Response(content=data, media_type="image/png")


@app.get("/metrics")
async def metrics() -> JSONResponse:
    """Detailed metrics for observability."""
    scene = get_scene()
    scene_metrics = scene.get_metrics() if scene else {}

    return JSONResponse({
        "uptime_seconds": round(time.time() - _startup_time, 1),
        "assets_backend": settings.assets.backend,
        "startup_error": _startup_error,
        **scene_metrics,
    })


@app.post("/scroll")
async def scroll(event: ScrollEvent) -> JSONResponse:
    """Move the viewport scroll offset."""
    if _viewport is None:
        return JSONResponse({"error": "Viewport not initialized"}, status_code=503)

    _viewport.scroll_to(event.scroll_y)
    return JSONResponse({
        "scroll_y": _viewport.scroll_y,
        "max_scroll": _viewport.max_scroll,
    })


@app.post("/resize")
async def resize(event: ResizeEvent) -> JSONResponse:
    """Resize the viewport."""
    if _viewport is None:
        return JSONResponse({"error": "Viewport not initialized"}, status_code=503)

    document_height = event.document_height
    if document_height is None:
        document_height = event.height * settings.viewport.scroll_track_viewports

    _viewport.resize(
        event.width,
        event.height,
        device_pixel_ratio=event.device_pixel_ratio,
        document_height=document_height,
    )
    surface = get_surface()
    return JSONResponse({
        "viewport": _viewport.to_dict(),
        "surface": {
            "width": surface.width if surface else 0,
            "height": surface.height if surface else 0,
        },
    })


# =============================================================================
# WebSocket Endpoints
# =============================================================================

@app.websocket("/ws/state")
async def state_stream(websocket: WebSocket) -> None:
    """WebSocket endpoint for real-time scene snapshots."""
    await websocket.accept()
    logger.info("Client connected to /ws/state")

    try:
        while True:
            scene = get_scene()
            if scene is not None:
                await websocket.send_json(scene.snapshot().model_dump(mode="json"))
            # Client messages are ignored; a disconnect ends the stream
            try:
                await asyncio.wait_for(
                    websocket.receive_text(),
                    timeout=settings.stream.push_interval_seconds,
                )
            except asyncio.TimeoutError:
                pass
    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.warning(f"WebSocket error: {e}")
    finally:
        logger.info("Client disconnected from /ws/state")


# =============================================================================
# Main Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    # Cloud Run uses PORT env var
    port = int(os.environ.get("PORT", settings.server.port))

    uvicorn.run(
        "scrollscrub.main:app",
        host=settings.server.host,
        port=port,
        reload=False,
    )
