# Security Command Center Inventory MCP Server
# File: pager.py
# Version: v1

"""Lazy iteration over paginated ListAssets responses."""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Callable, Deque, Dict, Iterator, Optional

from .models import ListAssetsResult

logger = logging.getLogger(__name__)

PageFetcher = Callable[[Optional[str]], Dict[str, Any]]


class AssetIterator(Iterator[ListAssetsResult]):
    """Iterator of ListAssetsResult that follows ``nextPageToken``.

    ``fetch_page(page_token)`` must return one decoded ListAssets response
    page. Nothing is fetched until the first ``next()``. The iterator is
    single-pass: once exhausted it stays exhausted, and once a fetch has
    failed every further ``next()`` raises the same error.
    """

    def __init__(self, fetch_page: PageFetcher) -> None:
        self._fetch_page = fetch_page
        self._buffer: Deque[ListAssetsResult] = deque()
        self._next_token: Optional[str] = None
        self._done = False
        self._error: Optional[Exception] = None

        self.pages_fetched = 0
        self.read_time: Optional[str] = None
        self.total_size: Optional[int] = None

    def __iter__(self) -> "AssetIterator":
        return self

    def __next__(self) -> ListAssetsResult:
        if self._error is not None:
            raise self._error

        while not self._buffer:
            if self._done:
                raise StopIteration
            self._fetch_next_page()

        return self._buffer.popleft()

    def _fetch_next_page(self) -> None:
        try:
            page = self._fetch_page(self._next_token)
        except Exception as exc:
            self._error = exc
            raise

        self.pages_fetched += 1
        if not isinstance(page, dict):
            page = {}

        raw_results = page.get("listAssetsResults")
        if isinstance(raw_results, list):
            for item in raw_results:
                if isinstance(item, dict):
                    self._buffer.append(ListAssetsResult.from_api(item))

        if page.get("readTime"):
            self.read_time = page["readTime"]
        total = page.get("totalSize")
        if total is not None:
            try:
                self.total_size = int(total)
            except (TypeError, ValueError):
                pass

        self._next_token = page.get("nextPageToken") or None
        if self._next_token is None:
            self._done = True

        logger.debug(
            "Fetched ListAssets page %d (%d results, more=%s)",
            self.pages_fetched,
            len(self._buffer),
            not self._done,
        )
