"""Data models used throughout the enrichment pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterator, Optional, Tuple


@dataclass(frozen=True)
class ArticleLink:
    """A candidate article URL handed to the thumbnail fetcher."""

    url: str


@dataclass(frozen=True)
class ThumbnailResult:
    """Outcome of a thumbnail lookup; ``thumbnail`` is None when nothing qualified."""

    url: str
    thumbnail: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PageSnapshot:
    """Image references extracted from a rendered page, grouped by source tier.

    Tiers are listed from the most to the least trusted source.
    """

    og_image: Optional[str] = None
    twitter_image: Optional[str] = None
    picture_sources: Tuple[str, ...] = field(default_factory=tuple)
    container_images: Tuple[str, ...] = field(default_factory=tuple)
    article_images: Tuple[str, ...] = field(default_factory=tuple)
    page_images: Tuple[str, ...] = field(default_factory=tuple)

    def candidates(self) -> Iterator[Optional[str]]:
        """Yield raw candidate strings in priority order."""
        yield self.og_image
        yield self.twitter_image
        yield from self.picture_sources
        yield from self.container_images
        yield from self.article_images
        yield from self.page_images


@dataclass(frozen=True)
class FeedEntry:
    """A parsed item from the aggregator feed."""

    title: str
    source: str
    published: str
    description: str
    link: Optional[str]


@dataclass(frozen=True)
class Article:
    """Feed entry merged with its thumbnail, as served by the API and CLI."""

    rank: int
    title: str
    source: str
    published: str
    description: str
    link: Optional[str]
    thumbnail: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
