"""Google News feed retrieval and entry normalization."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import feedparser
import requests
from bs4 import BeautifulSoup

from .config import FeedConfig
from .exceptions import FeedFetchError, UnknownCategoryError
from .models import FeedEntry

logger = logging.getLogger("newsthumb")

CATEGORIES: Dict[str, str] = {
    "top": "",
    "world": "CAAqJggKIiBDQkFTRWdvSUwyMHZNRGx1YlY4U0FtVnVHZ0pWVXlnQVAB",
    "local": "CAAqHAgKIhZDQklTQ2pvSWJHOWpZV3hmZGpJb0FBUAE",
    "business": "CAAqJggKIiBDQkFTRWdvSUwyMHZNRGx6TVdZU0FtVnVHZ0pWVXlnQVAB",
    "technology": "CAAqJggKIiBDQkFTRWdvSUwyMHZNRGRqTVhZU0FtVnVHZ0pWVXlnQVAB",
    "entertainment": "CAAqJggKIiBDQkFTRWdvSUwyMHZNREpxYW5RU0FtVnVHZ0pWVXlnQVAB",
    "sports": "CAAqJggKIiBDQkFTRWdvSUwyMHZNRFp1ZEdvU0FtVnVHZ0pWVXlnQVAB",
    "science": "CAAqJggKIiBDQkFTRWdvSUwyMHZNRFp0Y1RjU0FtVnVHZ0pWVXlnQVAB",
    "health": "CAAqIQgKIhtDQkFTRGdvSUwyMHZNR3QwTlRFU0FtVnVLQUFQAQ",
}

_FEED_ROOT = "https://news.google.com/rss"


def build_feed_url(country: str, category: str) -> str:
    """Return the RSS URL for a country/category pair."""
    if category not in CATEGORIES:
        raise UnknownCategoryError(f"Unknown category: {category}")
    country = country.upper()
    params = f"hl=en-{country}&gl={country}&ceid={country}:en"
    code = CATEGORIES[category]
    if code:
        return f"{_FEED_ROOT}/topics/{code}?{params}"
    return f"{_FEED_ROOT}?{params}"


def _split_title(raw: str) -> Tuple[str, str]:
    # Aggregator titles read "Headline - Publisher".
    if " - " in raw:
        title, source = raw.rsplit(" - ", 1)
        return title.strip(), source.strip() or "Unknown"
    return raw.strip(), "Unknown"


def _clean_description(raw: Optional[str], max_chars: int) -> str:
    if not raw:
        return "N/A"
    text = BeautifulSoup(raw, "html.parser").get_text(" ", strip=True)
    if not text:
        return "N/A"
    return text[:max_chars]


def parse_feed_entries(
    entries: List[Dict[str, Any]],
    max_description_chars: int = 200,
) -> List[FeedEntry]:
    """Map raw feedparser entries to FeedEntry records."""
    parsed: List[FeedEntry] = []
    for entry in entries:
        title, source = _split_title(entry.get("title") or "")
        link = (entry.get("link") or "").strip() or None
        parsed.append(
            FeedEntry(
                title=title,
                source=source,
                published=entry.get("published") or "N/A",
                description=_clean_description(
                    entry.get("summary") or entry.get("description"),
                    max_description_chars,
                ),
                link=link,
            )
        )
    return parsed


def parse_feed(data: bytes, url: str = "<feed>") -> List[Dict[str, Any]]:
    """Parse an RSS document; raises FeedFetchError when it is unusable."""
    feed = feedparser.parse(data)
    entries = getattr(feed, "entries", None)
    if getattr(feed, "bozo", 0) and not entries:
        exc = getattr(feed, "bozo_exception", None)
        msg = f"Invalid RSS feed: {url}"
        if exc:
            msg += f" ({exc})"
        raise FeedFetchError(msg)
    if not isinstance(entries, list):
        raise FeedFetchError(f"Feed has no entries: {url}")
    return entries


def fetch_feed(
    country: str,
    category: str,
    config: Optional[FeedConfig] = None,
    limit: Optional[int] = None,
    session: Optional[requests.Session] = None,
) -> List[FeedEntry]:
    """Download the feed for ``country``/``category`` and return up to ``limit`` entries."""
    config = config or FeedConfig()
    limit = config.limit if limit is None else limit
    url = build_feed_url(country, category)
    http = session or requests
    logger.info("Fetching feed %s", url)
    try:
        resp = http.get(
            url,
            headers={"User-Agent": config.user_agent},
            timeout=config.request_timeout,
        )
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise FeedFetchError(f"Failed to fetch feed: {url} ({exc})") from exc

    entries = parse_feed(resp.content, url)
    logger.debug("Feed %s returned %d entries", url, len(entries))
    return parse_feed_entries(entries[: max(limit, 0)], config.max_description_chars)
