"""MCP server exposing news and thumbnail tools."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from mcp.server.fastmcp import FastMCP

from .config import MAX_ARTICLES, ThumbnailConfig
from .crawler import run_thumbnails
from .feeds import CATEGORIES
from .pipeline import scrape_news

logger = logging.getLogger("newsthumb.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="newsthumb")


@mcp.tool()
async def news(
    country: str = "US",
    category: str = "top",
    limit: int = 10,
) -> List[Dict[str, Any]]:
    """Fetch Google News headlines for a country/category, each with a thumbnail URL."""
    category = category.lower()
    if category not in CATEGORIES:
        raise ValueError(
            f"Invalid category {category!r}; choose from {', '.join(CATEGORIES)}"
        )
    articles = await scrape_news(
        country.upper(),
        category,
        max(1, min(limit, MAX_ARTICLES)),
        thumb_config=ThumbnailConfig.from_env(),
    )
    return [article.to_dict() for article in articles]


@mcp.tool()
async def thumbnail(url: str) -> Optional[str]:
    """Render an article page and return its representative image URL, if any."""
    results = await run_thumbnails([url], ThumbnailConfig.from_env())
    return results[0].thumbnail


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
