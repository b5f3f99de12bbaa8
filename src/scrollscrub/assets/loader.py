"""
Asset Loader
============

Priority-ordered, asynchronous preloading of the frame sequence.

This loader:
    - Launches one independent load task per frame
    - Admits the lowest `priority_count` indices first (priority batch)
    - Signals ready once, when every priority load has settled
    - Keeps loading the background batch after ready
    - Updates progress after every settlement, success or failure

Design Rules:
    - A failed fetch or decode leaves its slot empty; no retry
    - No single failure stops the batch or progress reporting
    - Each task yields an (index, result) outcome; one aggregator applies it
    - Completion order is whatever the network/decoder produce
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from scrollscrub.assets.decoder import ImageDecodeError, decode_frame
from scrollscrub.assets.source import FrameFetchError, FrameSource
from scrollscrub.models.frames import (
    PRIORITY_FRAMES,
    DecodedFrame,
    FrameSequence,
    round_half_up,
)
from scrollscrub.observability.observable import ObservableValue


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LoadOutcome:
    """
    Result of one frame load.

    Attributes:
        index: Frame index the load was for
        frame: Decoded frame, or None if the load failed
        error: Failure description when frame is None
    """

    index: int
    frame: Optional[DecodedFrame]
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.frame is not None


class LoaderMetrics:
    """Metrics for AssetLoader observability."""

    __slots__ = (
        "loaded",
        "failed",
        "settled",
        "priority_settled",
        "background_settled",
    )

    def __init__(self) -> None:
        self.loaded: int = 0
        self.failed: int = 0
        self.settled: int = 0
        self.priority_settled: int = 0
        self.background_settled: int = 0

    def to_dict(self) -> dict:
        """Export metrics as dict."""
        return {
            "loaded": self.loaded,
            "failed": self.failed,
            "settled": self.settled,
            "priority_settled": self.priority_settled,
            "background_settled": self.background_settled,
        }


class AssetLoader:
    """
    Loads every frame of a FrameSequence from a FrameSource.

    Attributes:
        source: Where encoded frame bytes come from
        frames: Frame store populated as loads settle
        priority_count: Number of lowest indices loaded first
        loading_progress: Observable settled percentage (0..100)
        images_ready: Observable flag, True once the priority batch settled

    Example:
        frames = FrameSequence(128)
        loader = AssetLoader(DirectoryFrameSource("./public"), frames)

        await loader.load()            # returns when frames 0..9 settled
        print(loader.loading_progress.value)
        await loader.wait_complete()   # background batch done
    """

    def __init__(
        self,
        source: FrameSource,
        frames: FrameSequence,
        priority_count: int = PRIORITY_FRAMES,
        max_concurrency: int = 16,
    ) -> None:
        """
        Initialize asset loader.

        Args:
            source: Frame byte source
            frames: Frame store to populate
            priority_count: Size of the priority batch (capped at len(frames))
            max_concurrency: Maximum loads in flight at once
        """
        if priority_count < 0:
            raise ValueError("priority_count must be >= 0")
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")

        self.source = source
        self.frames = frames
        self.priority_count = min(priority_count, len(frames))
        self.max_concurrency = max_concurrency

        self.loading_progress: ObservableValue[int] = ObservableValue("loading_progress", 0)
        self.images_ready: ObservableValue[bool] = ObservableValue("images_ready", False)
        self.metrics = LoaderMetrics()

        self._semaphore: Optional[asyncio.Semaphore] = None
        self._ready_event = asyncio.Event()
        self._tasks: List[asyncio.Task] = []
        self._background_task: Optional[asyncio.Task] = None
        self._started: bool = False

        logger.info(
            f"AssetLoader initialized: frames={len(frames)}, "
            f"priority={self.priority_count}, max_concurrency={max_concurrency}"
        )

    @property
    def total(self) -> int:
        return len(self.frames)

    @property
    def progress(self) -> float:
        """Settled loads as a ratio of the total (0.0..1.0)."""
        return self.metrics.settled / self.total

    @property
    def pending_count(self) -> int:
        return self.total - self.metrics.settled if self._started else 0

    @property
    def ready(self) -> bool:
        return self._ready_event.is_set()

    async def load(self) -> None:
        """
        Start loading every frame.

        Both batches are launched immediately; the concurrency limit admits
        the priority batch first. Returns once the priority batch has
        settled. The background batch keeps running afterwards.
        """
        if self._started:
            raise RuntimeError("AssetLoader.load() may only be called once")
        self._started = True
        self._semaphore = asyncio.Semaphore(self.max_concurrency)

        priority_indices = range(self.priority_count)
        background_indices = range(self.priority_count, self.total)

        priority_tasks = self._spawn(priority_indices)
        background_tasks = self._spawn(background_indices)

        logger.info(
            f"Loading {self.total} frames "
            f"({len(priority_tasks)} priority, {len(background_tasks)} background)"
        )

        self._background_task = asyncio.create_task(
            self._aggregate(background_tasks, priority=False),
            name="asset_loader_background",
        )
        await self._aggregate(priority_tasks, priority=True)
        self._mark_ready()

    async def wait_ready(self) -> None:
        await self._ready_event.wait()

    async def wait_complete(self) -> None:
        """Wait until every load (both batches) has settled."""
        await self.wait_ready()
        if self._background_task is not None:
            await self._background_task

    async def cancel(self) -> None:
        """Cancel outstanding loads. Settled frames stay in the store."""
        pending = [t for t in self._tasks if not t.done()]
        if self._background_task is not None and not self._background_task.done():
            pending.append(self._background_task)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            logger.info(f"AssetLoader cancelled with {self.pending_count} loads unsettled")

    def _spawn(self, indices: Iterable[int]) -> List[asyncio.Task]:
        tasks = [
            asyncio.create_task(self._load_one(index), name=f"load_frame_{index:03d}")
            for index in indices
        ]
        self._tasks.extend(tasks)
        return tasks

    async def _load_one(self, index: int) -> LoadOutcome:
        """Fetch and decode one frame. Never raises for load failures."""
        async with self._semaphore:
            try:
                data = await self.source.fetch(index)
                frame = await asyncio.to_thread(decode_frame, index, data)
            except (FrameFetchError, ImageDecodeError) as e:
                return LoadOutcome(index=index, frame=None, error=str(e))
            except Exception as e:
                logger.error(f"Unexpected error loading frame {index}: {e}")
                return LoadOutcome(index=index, frame=None, error=repr(e))
        return LoadOutcome(index=index, frame=frame)

    async def _aggregate(self, tasks: List[asyncio.Task], priority: bool) -> None:
        """Apply outcomes in completion order."""
        for next_done in asyncio.as_completed(tasks):
            outcome = await next_done
            self._settle(outcome, priority)
        if not priority and tasks:
            logger.info(
                f"Background batch settled: loaded={self.metrics.loaded}, "
                f"failed={self.metrics.failed}"
            )

    def _settle(self, outcome: LoadOutcome, priority: bool) -> None:
        if outcome.ok:
            self.frames.resolve(outcome.index, outcome.frame)
            self.metrics.loaded += 1
        else:
            self.metrics.failed += 1
            logger.warning(f"Frame {outcome.index} left empty: {outcome.error}")

        self.metrics.settled += 1
        if priority:
            self.metrics.priority_settled += 1
        else:
            self.metrics.background_settled += 1

        self.loading_progress.publish(round_half_up(self.metrics.settled * 100 / self.total))

    def _mark_ready(self) -> None:
        if self._ready_event.is_set():
            return
        self._ready_event.set()
        self.images_ready.publish(True)
        logger.info(
            f"Priority batch settled: {self.metrics.priority_settled} frames, "
            f"progress={self.loading_progress.value}%"
        )

    def get_metrics(self) -> dict:
        """Get loader metrics for observability."""
        return {
            "total": self.total,
            "ready": self.ready,
            "loading_progress": self.loading_progress.value,
            "pending": self.pending_count,
            **self.metrics.to_dict(),
        }
