"""Command-line entry point for the news thumbnail scraper."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .config import HEADLESS_MODES, MAX_ARTICLES, ThumbnailConfig
from .crawler import run_thumbnails
from .exceptions import FeedFetchError, UnknownCategoryError
from .feeds import CATEGORIES
from .models import Article
from .pipeline import scrape_news

logger = logging.getLogger("newsthumb.cli")

DEFAULT_PORT = 5005


def _ensure_command_prefix(argv: Sequence[str], commands: Iterable[str]) -> Sequence[str]:
    if not argv:
        return ("serve",)
    first = argv[0]
    if first in commands or first in {"-h", "--help"}:
        return argv
    return ("serve", *argv)


def _add_browser_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Maximum number of pages rendered at once (default: 5)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Navigation timeout in seconds (default: 20)",
    )
    parser.add_argument(
        "--settle-delay",
        type=float,
        default=None,
        help="Seconds to wait after a redirected page loads (default: 2.5)",
    )
    parser.add_argument(
        "--headless",
        choices=HEADLESS_MODES,
        default=None,
        help="Chromium headless mode (default: new)",
    )
    parser.add_argument(
        "--browser-per-task",
        action="store_true",
        default=None,
        help="Launch a separate browser for every article",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Fetch Google News headlines and enrich them with article thumbnails.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    serve_parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="Port to listen on")
    _add_browser_arguments(serve_parser)

    fetch_parser = subparsers.add_parser(
        "fetch", help="Scrape a feed once and save the articles as JSON"
    )
    fetch_parser.add_argument("--country", default="US", help="Two-letter country code")
    fetch_parser.add_argument(
        "--category", default="top", choices=list(CATEGORIES), help="News category"
    )
    fetch_parser.add_argument("--limit", type=int, default=20, help="Number of articles")
    fetch_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="JSON file to write (default: google_news_<COUNTRY>_<category>.json)",
    )
    fetch_parser.add_argument(
        "--interactive",
        action="store_true",
        help="Prompt for country, category and limit",
    )
    _add_browser_arguments(fetch_parser)

    thumbs_parser = subparsers.add_parser(
        "thumbnails", help="Find thumbnails for the given article URLs"
    )
    thumbs_parser.add_argument("urls", nargs="+", help="One or more article URLs")
    _add_browser_arguments(thumbs_parser)

    argv = list(sys.argv[1:] if argv is None else argv)
    argv = list(_ensure_command_prefix(argv, subparsers.choices.keys()))
    return parser.parse_args(argv)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def _thumb_config(args: argparse.Namespace) -> ThumbnailConfig:
    return ThumbnailConfig.from_env(
        concurrency=args.concurrency,
        navigation_timeout=args.timeout,
        settle_delay=args.settle_delay,
        headless_mode=args.headless,
        browser_per_task=args.browser_per_task,
    )


def _prompt(message: str, default: str) -> str:
    answer = input(f"{message} [{default}]: ").strip()
    return answer or default


def _prompt_fetch_options(args: argparse.Namespace) -> None:
    args.country = _prompt("Country", args.country)
    categories = list(CATEGORIES)
    while True:
        category = _prompt(f"Category ({', '.join(categories)})", args.category).lower()
        if category in CATEGORIES:
            args.category = category
            break
        sys.stdout.write(f"Unknown category: {category}\n")
    while True:
        raw = _prompt("Articles", str(args.limit))
        try:
            args.limit = int(raw)
            break
        except ValueError:
            sys.stdout.write(f"Not a number: {raw}\n")


def format_listing(articles: List[Article]) -> str:
    lines = ["", "--- NEWS ---", ""]
    for article in articles:
        lines.append(f"{article.rank}. {article.title}")
        lines.append(f"   {article.source} | {article.published}")
        lines.append(f"   {article.link}")
        lines.append(f"   Thumbnail: {article.thumbnail}")
        lines.append("")
    return "\n".join(lines) + "\n"


def write_articles(articles: List[Article], path: Path) -> None:
    payload = [article.to_dict() for article in articles]
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


def _run_fetch(args: argparse.Namespace) -> int:
    if args.interactive:
        _prompt_fetch_options(args)
    country = args.country.upper()
    limit = max(1, min(args.limit, MAX_ARTICLES))
    config = args.thumb_config

    try:
        articles = asyncio.run(
            scrape_news(country, args.category, limit, thumb_config=config)
        )
    except (FeedFetchError, UnknownCategoryError) as exc:
        logger.error("%s", exc)
        return 1

    sys.stdout.write(format_listing(articles))
    output = args.output or Path(f"google_news_{country}_{args.category}.json")
    write_articles(articles, output)
    logger.info("Saved to %s", output)
    return 0


def _run_thumbnails(args: argparse.Namespace) -> int:
    config = args.thumb_config
    results = asyncio.run(run_thumbnails(args.urls, config))
    sys.stdout.write(json.dumps([r.to_dict() for r in results], indent=2) + "\n")
    sys.stdout.flush()
    return 0


def _run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from .api import create_app

    app = create_app(thumb_config=args.thumb_config)
    logger.info("API running at http://%s:%d", args.host, args.port)
    uvicorn.run(app, host=args.host, port=args.port)
    return 0


def main(argv: Sequence[str] | None = None) -> Optional[int]:
    args = parse_args(argv)
    _configure_logging(args.verbose)
    try:
        args.thumb_config = _thumb_config(args)
    except ValueError as exc:
        logger.error("Invalid browser option: %s", exc)
        return 2
    if args.command == "fetch":
        return _run_fetch(args)
    if args.command == "thumbnails":
        return _run_thumbnails(args)
    return _run_serve(args)


if __name__ == "__main__":
    sys.exit(main())
