"""
Rendered-page cache keyed by request path.

Each entry expires after the page's revalidation window. Entries carry the
cache tags of the page so a whole entity or type can be evicted at once.
"""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from cachetools import TLRUCache

import constants
from fleet_hub.performance.isr_config import ISRMetricsTracker

logger = logging.getLogger(__name__)


@dataclass
class CachedPage:
    body: str
    cache_control: str
    tags: list[str]
    ttl_seconds: int


def _page_expiry(_path: str, page: CachedPage, now: float) -> float:
    return now + page.ttl_seconds


class PageCache:
    def __init__(
        self,
        metrics: ISRMetricsTracker | None = None,
        *,
        maxsize: int = constants.PAGE_CACHE_MAXSIZE,
        timer: Callable[[], float] = time.time,
    ):
        self._lock = threading.Lock()
        self._pages: TLRUCache = TLRUCache(maxsize=maxsize, ttu=_page_expiry, timer=timer)
        self.metrics = metrics or ISRMetricsTracker()

    def get(self, path: str) -> CachedPage | None:
        with self._lock:
            page = self._pages.get(path)
        self.metrics.record_cache_hit(page is not None)
        return page

    def set(self, path: str, body: str, *, ttl_seconds: int, cache_control: str, tags: list[str] | None = None) -> None:
        page = CachedPage(
            body=body,
            cache_control=cache_control,
            tags=list(tags or []),
            ttl_seconds=ttl_seconds,
        )
        with self._lock:
            self._pages[path] = page

    def revalidate_path(self, path: str) -> None:
        """Evict ``path`` so the next request renders it again."""
        with self._lock:
            self._pages.pop(path, None)
        self.metrics.record_revalidation()
        logger.debug("Revalidated path=%s", path)

    def revalidate_tag(self, tag: str) -> list[str]:
        """Evict every live page carrying ``tag``; returns the evicted paths."""
        with self._lock:
            self._pages.expire()
            paths = [p for p, page in self._pages.items() if tag in page.tags]
            for path in paths:
                del self._pages[path]
        for _ in paths:
            self.metrics.record_revalidation()
        if paths:
            logger.debug("Revalidated tag=%s paths=%d", tag, len(paths))
        return paths

    def clear(self) -> None:
        with self._lock:
            self._pages.clear()

    def __len__(self) -> int:
        with self._lock:
            self._pages.expire()
            return len(self._pages)

    def __contains__(self, path: str) -> bool:
        with self._lock:
            return path in self._pages


page_cache = PageCache()
