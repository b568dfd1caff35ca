"""HTTP API serving enriched news articles."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, List, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import MAX_ARTICLES, FeedConfig, ThumbnailConfig
from .exceptions import FeedFetchError, UnknownCategoryError
from .feeds import CATEGORIES
from .models import Article
from .pipeline import scrape_news

logger = logging.getLogger("newsthumb.api")

Scraper = Callable[..., Awaitable[List[Article]]]


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def create_app(
    feed_config: Optional[FeedConfig] = None,
    thumb_config: Optional[ThumbnailConfig] = None,
    scraper: Scraper = scrape_news,
) -> FastAPI:
    """Build the FastAPI application around ``scraper``."""
    feed_config = feed_config or FeedConfig()
    thumb_config = thumb_config or ThumbnailConfig()

    app = FastAPI(title="Google News Scraper API")
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=".*",
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.get("/")
    def read_root():
        return {
            "message": "Google News Scraper API",
            "endpoints": {
                "/api/news": "Get news",
                "/api/categories": "List categories",
            },
        }

    @app.get("/api/categories")
    def list_categories():
        return {"success": True, "categories": list(CATEGORIES)}

    @app.get("/api/news")
    async def get_news(
        country: str = feed_config.country,
        category: str = feed_config.category,
        limit: str = str(feed_config.limit),
    ):
        country = country.upper()
        category = category.lower()

        if category not in CATEGORIES:
            return _error(400, "Invalid category")
        try:
            count = max(1, min(int(limit), MAX_ARTICLES))
        except ValueError:
            return _error(400, "Invalid limit")

        try:
            articles = await scraper(
                country,
                category,
                count,
                feed_config=feed_config,
                thumb_config=thumb_config,
            )
        except UnknownCategoryError:
            return _error(400, "Invalid category")
        except FeedFetchError as exc:
            logger.error("Feed fetch failed for %s/%s: %s", country, category, exc)
            return _error(502, str(exc))
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("Unexpected error serving %s/%s", country, category)
            return _error(500, str(exc))

        return {
            "success": True,
            "country": country,
            "category": category,
            "total_articles": len(articles),
            "articles": [article.to_dict() for article in articles],
        }

    return app


app = create_app(thumb_config=ThumbnailConfig.from_env())
