"""In-memory registry of encoded rasters addressed by URL."""

from __future__ import annotations

import logging
import threading
import uuid

logger = logging.getLogger(__name__)

URL_SCHEME = "raster://"


class RasterStore:
    """Holds encoded raster bytes until their handle is released."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._rasters: dict[str, bytes] = {}

    def register(self, data: bytes) -> str:
        url = f"{URL_SCHEME}{uuid.uuid4().hex}"
        with self._lock:
            self._rasters[url] = data
        logger.debug("Registered %s (%s bytes)", url, len(data))
        return url

    def get(self, url: str) -> bytes:
        with self._lock:
            try:
                return self._rasters[url]
            except KeyError:
                raise KeyError(f"Unknown or released raster: {url}") from None

    def release(self, url: str) -> bool:
        """Drop a handle; releasing twice is a no-op."""

        with self._lock:
            removed = self._rasters.pop(url, None)
        if removed is not None:
            logger.debug("Released %s", url)
        return removed is not None

    def clear(self) -> None:
        with self._lock:
            self._rasters.clear()

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._rasters

    def __len__(self) -> int:
        with self._lock:
            return len(self._rasters)


def url_for_token(token: str) -> str:
    return f"{URL_SCHEME}{token}"


def token_from_url(url: str) -> str:
    if not url.startswith(URL_SCHEME):
        raise ValueError(f"Not a raster URL: {url}")
    return url[len(URL_SCHEME):]


default_store = RasterStore()
