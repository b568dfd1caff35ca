"""Feed-to-article enrichment: fetch the feed, find thumbnails, merge."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from .config import FeedConfig, ThumbnailConfig
from .crawler import fetch_all, run_thumbnails
from .feeds import fetch_feed
from .models import Article, FeedEntry, ThumbnailResult
from .navigator import SessionFactory

logger = logging.getLogger("newsthumb")


def merge_thumbnails(
    entries: List[FeedEntry],
    results: List[ThumbnailResult],
) -> List[Article]:
    """Attach thumbnails to feed entries by link and assign 1-based ranks."""
    by_link = {result.url: result.thumbnail for result in results}
    return [
        Article(
            rank=index,
            title=entry.title,
            source=entry.source,
            published=entry.published,
            description=entry.description,
            link=entry.link,
            thumbnail=by_link.get(entry.link) if entry.link else None,
        )
        for index, entry in enumerate(entries, start=1)
    ]


async def scrape_news(
    country: str = "US",
    category: str = "top",
    limit: int = 20,
    feed_config: Optional[FeedConfig] = None,
    thumb_config: Optional[ThumbnailConfig] = None,
    sessions: Optional[SessionFactory] = None,
) -> List[Article]:
    """Fetch a feed and enrich each entry with a thumbnail.

    Feed failures propagate as FeedFetchError; thumbnail failures only leave
    the affected article without a thumbnail.
    """
    thumb_config = thumb_config or ThumbnailConfig()
    entries = await asyncio.to_thread(fetch_feed, country, category, feed_config, limit)
    links = [entry.link for entry in entries if entry.link]
    logger.info("Enriching %d articles (%s/%s)", len(links), country, category)

    if sessions is None:
        results = await run_thumbnails(links, thumb_config)
    else:
        results = await fetch_all(links, sessions, thumb_config)
    return merge_thumbnails(entries, results)
