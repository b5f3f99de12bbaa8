#!/usr/bin/env python3
"""
Scroll Session Script
=====================

Drives a running ScrollScrub service through one full scroll sweep.

This script:
    1. Waits for the service to report ready
    2. Subscribes to /ws/state for live snapshots
    3. Sweeps the scroll offset from top to bottom (and optionally back)
    4. Logs every section change it observes
    5. Reports a final summary

Prerequisites:
    - The service must be running (python -m scrollscrub.main)

Usage:
    python scripts/scroll_session.py --steps 60 --dwell 0.05
    python scripts/scroll_session.py --url http://localhost:8002 --round-trip
"""

import argparse
import asyncio
import json
import logging
import os
import sys
import time
from typing import List, Optional

import requests
import websockets
from websockets.exceptions import ConnectionClosed


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger(__name__)


class SessionObserver:
    """Collects section changes from the state stream."""

    def __init__(self) -> None:
        self.snapshots_received: int = 0
        self.section_changes: List[int] = []
        self.last_section: Optional[int] = None
        self.last_snapshot: Optional[dict] = None

    def observe(self, snapshot: dict) -> None:
        self.snapshots_received += 1
        self.last_snapshot = snapshot

        section = snapshot.get("active_section")
        if section != self.last_section:
            logger.info(
                f"Section {self.last_section} -> {section} "
                f"(progress={snapshot.get('scroll_progress', 0.0):.3f}, "
                f"frame={snapshot.get('frame', {}).get('last_drawn')})"
            )
            self.section_changes.append(section)
            self.last_section = section


def wait_ready(session: requests.Session, base_url: str, timeout: float) -> bool:
    """Poll /ready until it returns 200 or the timeout passes."""
    deadline = time.time() + timeout
    while time.time() < deadline:
        try:
            response = session.get(f"{base_url}/ready", timeout=5.0)
            if response.status_code == 200:
                return True
            logger.info(f"Not ready yet: loading_progress={response.json().get('loading_progress')}%")
        except requests.RequestException as e:
            logger.warning(f"Ready check failed: {e}")
        time.sleep(1.0)
    return False


async def watch_state(ws_url: str, observer: SessionObserver, stop: asyncio.Event) -> None:
    """Consume /ws/state until stop is set or the server closes."""
    async with websockets.connect(ws_url, ping_interval=20, ping_timeout=10, close_timeout=5) as ws:
        logger.info(f"Connected to {ws_url}")
        while not stop.is_set():
            try:
                message = await asyncio.wait_for(ws.recv(), timeout=1.0)
            except asyncio.TimeoutError:
                continue
            except ConnectionClosed as e:
                logger.warning(f"State stream closed: {e}")
                return
            observer.observe(json.loads(message))


async def sweep(
    session: requests.Session,
    base_url: str,
    steps: int,
    dwell: float,
    round_trip: bool,
) -> float:
    """Post scroll offsets from 0 to max_scroll; returns max_scroll."""
    response = await asyncio.to_thread(
        session.post, f"{base_url}/scroll", json={"scroll_y": 0.0}, timeout=5.0
    )
    response.raise_for_status()
    max_scroll = response.json()["max_scroll"]

    positions = [max_scroll * i / steps for i in range(steps + 1)]
    if round_trip:
        positions += list(reversed(positions[:-1]))

    for y in positions:
        response = await asyncio.to_thread(
            session.post, f"{base_url}/scroll", json={"scroll_y": y}, timeout=5.0
        )
        response.raise_for_status()
        await asyncio.sleep(dwell)

    return max_scroll


async def run_session(
    base_url: str,
    steps: int,
    dwell: float,
    settle: float,
    round_trip: bool,
    ready_timeout: float,
) -> dict:
    """
    Run one scroll session.

    Args:
        base_url: HTTP base URL of the service
        steps: Number of scroll increments from top to bottom
        dwell: Seconds between scroll posts
        settle: Seconds to keep watching after the sweep
        round_trip: Scroll back to the top after reaching the bottom
        ready_timeout: Seconds to wait for /ready

    Returns:
        Final summary dict
    """
    logger.info("=" * 60)
    logger.info("Scroll Session")
    logger.info("=" * 60)
    logger.info(f"Service URL: {base_url}")
    logger.info(f"Steps: {steps}, dwell: {dwell}s, round trip: {round_trip}")
    logger.info("=" * 60)

    session = requests.Session()
    observer = SessionObserver()
    start_time = time.time()

    if not await asyncio.to_thread(wait_ready, session, base_url, ready_timeout):
        logger.error(f"Service not ready after {ready_timeout}s")
        session.close()
        return {"ready": False, "section_changes": [], "snapshots": 0}

    ws_url = base_url.replace("http://", "ws://").replace("https://", "wss://") + "/ws/state"
    stop = asyncio.Event()
    watcher = asyncio.create_task(watch_state(ws_url, observer, stop), name="state_watcher")

    try:
        max_scroll = await sweep(session, base_url, steps, dwell, round_trip)
        await asyncio.sleep(settle)
    finally:
        stop.set()
        try:
            await asyncio.wait_for(watcher, timeout=5.0)
        except asyncio.TimeoutError:
            watcher.cancel()
            try:
                await watcher
            except asyncio.CancelledError:
                pass
        session.close()

    total_time = time.time() - start_time
    last = observer.last_snapshot or {}

    logger.info("=" * 60)
    logger.info("FINAL SUMMARY")
    logger.info("=" * 60)
    logger.info(f"Total runtime: {total_time:.1f} seconds")
    logger.info(f"Max scroll: {max_scroll}")
    logger.info(f"Snapshots received: {observer.snapshots_received}")
    logger.info(f"Section sequence: {observer.section_changes}")
    logger.info(f"Final progress: {last.get('scroll_progress')}")
    logger.info(f"Final frame: {last.get('frame', {}).get('last_drawn')}")
    logger.info(f"Paint count: {last.get('frame', {}).get('paint_count')}")
    logger.info("=" * 60)

    return {
        "ready": True,
        "duration": total_time,
        "snapshots": observer.snapshots_received,
        "section_changes": observer.section_changes,
        "final_section": observer.last_section,
    }


def main():
    parser = argparse.ArgumentParser(
        description="Drive a ScrollScrub service through a scroll sweep"
    )
    parser.add_argument(
        "--url",
        type=str,
        default=os.environ.get("SCRUB_SERVICE_URL", "http://localhost:8002"),
        help="HTTP base URL of the service",
    )
    parser.add_argument(
        "--steps",
        type=int,
        default=60,
        help="Scroll increments from top to bottom (default: 60)",
    )
    parser.add_argument(
        "--dwell",
        type=float,
        default=0.05,
        help="Seconds between scroll posts (default: 0.05)",
    )
    parser.add_argument(
        "--settle",
        type=float,
        default=3.0,
        help="Seconds to keep watching after the sweep (default: 3.0)",
    )
    parser.add_argument(
        "--round-trip",
        action="store_true",
        help="Scroll back to the top after reaching the bottom",
    )
    parser.add_argument(
        "--ready-timeout",
        type=float,
        default=60.0,
        help="Seconds to wait for the service to become ready (default: 60)",
    )

    args = parser.parse_args()

    result = asyncio.run(run_session(
        base_url=args.url.rstrip("/"),
        steps=args.steps,
        dwell=args.dwell,
        settle=args.settle,
        round_trip=args.round_trip,
        ready_timeout=args.ready_timeout,
    ))

    sys.exit(0 if result["ready"] and result["section_changes"] else 1)


if __name__ == "__main__":
    main()
