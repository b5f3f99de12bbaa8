"""
Frame Sources
=============

Where encoded frame bytes come from.

Frame i resolves to the path template with a zero-padded index, by
default `/frames/{index:03d}.gif` (so frame 7 is `/frames/007.gif`).

Sources:
    - DirectoryFrameSource: static files under a local root
    - HttpFrameSource: static files served over HTTP (requests)

Both raise FrameFetchError for anything that prevents returning bytes.
Blocking I/O runs in a worker thread so the event loop keeps ticking.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional, Protocol

import requests


logger = logging.getLogger(__name__)


DEFAULT_PATH_TEMPLATE = "/frames/{index:03d}.gif"


class FrameFetchError(Exception):
    """Raised when a frame's bytes cannot be fetched."""
    pass


def frame_path(index: int, template: str = DEFAULT_PATH_TEMPLATE) -> str:
    """Static asset path of frame `index`."""
    return template.format(index=index)


class FrameSource(Protocol):
    """
    Protocol for frame byte sources.

    Implementations must provide an async `fetch` that returns the encoded
    bytes of one frame or raises FrameFetchError.
    """

    async def fetch(self, index: int) -> bytes:
        ...


class DirectoryFrameSource:
    """
    Reads frames from a directory that mirrors the static asset layout.

    Example:
        source = DirectoryFrameSource("./public")
        data = await source.fetch(7)   # reads ./public/frames/007.gif
    """

    def __init__(self, root: str, path_template: str = DEFAULT_PATH_TEMPLATE) -> None:
        self.root = Path(root)
        self.path_template = path_template
        logger.info(f"DirectoryFrameSource initialized: root={self.root}, template={path_template}")

    def path_for(self, index: int) -> Path:
        return self.root / frame_path(index, self.path_template).lstrip("/")

    async def fetch(self, index: int) -> bytes:
        path = self.path_for(index)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            raise FrameFetchError(f"Cannot read frame {index} from {path}: {e}")


class HttpFrameSource:
    """
    Fetches frames over HTTP with a shared requests.Session.

    Example:
        source = HttpFrameSource("http://localhost:3000")
        data = await source.fetch(7)   # GET http://localhost:3000/frames/007.gif
    """

    def __init__(
        self,
        base_url: str,
        path_template: str = DEFAULT_PATH_TEMPLATE,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.path_template = path_template
        self.timeout = timeout
        self._session = session or requests.Session()
        logger.info(f"HttpFrameSource initialized: base_url={self.base_url}, timeout={timeout}s")

    def url_for(self, index: int) -> str:
        return self.base_url + frame_path(index, self.path_template)

    def _get(self, url: str) -> bytes:
        response = self._session.get(url, timeout=self.timeout)
        response.raise_for_status()
        return response.content

    async def fetch(self, index: int) -> bytes:
        url = self.url_for(index)
        try:
            return await asyncio.to_thread(self._get, url)
        except requests.RequestException as e:
            raise FrameFetchError(f"Cannot fetch frame {index} from {url}: {e}")

    def close(self) -> None:
        self._session.close()
