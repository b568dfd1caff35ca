"""Bounded-concurrency thumbnail fetching for a batch of article links."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import AsyncContextManager, List, Optional, Sequence, Union

from .config import ThumbnailConfig
from .models import ArticleLink, ThumbnailResult
from .navigator import ChromiumSessionFactory, SessionFactory, fetch_thumbnail

logger = logging.getLogger("newsthumb")

LinkLike = Union[str, ArticleLink]


def _as_url(link: LinkLike) -> str:
    return link.url if isinstance(link, ArticleLink) else link


async def fetch_all(
    links: Sequence[LinkLike],
    sessions: SessionFactory,
    config: ThumbnailConfig,
    limiter: Optional[AsyncContextManager] = None,
) -> List[ThumbnailResult]:
    """Fetch one thumbnail per link, at most ``config.concurrency`` at a time.

    Results come back in input order. A failed lookup yields a None thumbnail
    for that link only; lookups are never retried.
    """
    if limiter is None:
        limiter = asyncio.Semaphore(config.concurrency)

    async def _one(url: str) -> ThumbnailResult:
        async with limiter:
            try:
                thumbnail = await fetch_thumbnail(url, sessions, config)
            except Exception:  # pylint: disable=broad-except
                logger.exception("Unexpected error fetching thumbnail for %s", url)
                thumbnail = None
        logger.debug("Thumbnail for %s: %s", url, thumbnail)
        return ThumbnailResult(url=url, thumbnail=thumbnail)

    urls = [_as_url(link) for link in links]
    start = time.perf_counter()
    results = await asyncio.gather(*(_one(url) for url in urls))
    found = sum(1 for result in results if result.thumbnail)
    logger.info(
        "Fetched thumbnails for %d/%d articles in %.2fs",
        found,
        len(urls),
        time.perf_counter() - start,
    )
    return list(results)


async def run_thumbnails(
    links: Sequence[LinkLike],
    config: ThumbnailConfig,
) -> List[ThumbnailResult]:
    """Launch Playwright, fetch thumbnails for ``links`` and shut the browser down."""
    if not links:
        return []
    async with ChromiumSessionFactory(config) as sessions:
        return await fetch_all(links, sessions, config)
