"""HTML parsing helpers that turn rendered markup into a PageSnapshot."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from .config import DEFAULT_CONTAINER_SELECTORS
from .models import PageSnapshot

ARTICLE_IMAGE_SELECTOR = "article img, .article img"


def _meta_content(soup: BeautifulSoup, selector: str) -> Optional[str]:
    tag = soup.select_one(selector)
    if tag and tag.get("content"):
        return tag["content"].strip()
    return None


def _image_sources(soup: BeautifulSoup, selector: str, base_url: str) -> List[str]:
    sources: List[str] = []
    for img in soup.select(selector):
        src = img.get("src")
        if not src or src.startswith("data:"):
            continue
        sources.append(urljoin(base_url, src) if base_url else src)
    return sources


def _as_tuple(values: Optional[Iterable[Optional[str]]]) -> Optional[Tuple[str, ...]]:
    if values is None:
        return None
    return tuple(v for v in values if v)


def snapshot_from_html(
    html: str,
    base_url: str = "",
    *,
    container_selectors: Sequence[str] = DEFAULT_CONTAINER_SELECTORS,
    container_images: Optional[Iterable[Optional[str]]] = None,
    article_images: Optional[Iterable[Optional[str]]] = None,
    page_images: Optional[Iterable[Optional[str]]] = None,
) -> PageSnapshot:
    """Extract candidate image references from HTML.

    Image tiers may be supplied directly when the caller has better data than the
    markup, e.g. the resolved ``currentSrc`` of lazy-loaded images read from a live
    browser page. Tiers left as None are read from the ``src`` attributes in ``html``.
    """
    soup = BeautifulSoup(html, "html.parser")

    picture_sources = tuple(
        source["srcset"]
        for source in soup.select("picture source[srcset]")
        if source.get("srcset")
    )

    containers = _as_tuple(container_images)
    if containers is None:
        containers = tuple(
            src
            for selector in container_selectors
            for src in _image_sources(soup, selector, base_url)
        )

    articles = _as_tuple(article_images)
    if articles is None:
        articles = tuple(_image_sources(soup, ARTICLE_IMAGE_SELECTOR, base_url))

    images = _as_tuple(page_images)
    if images is None:
        images = tuple(_image_sources(soup, "img", base_url))

    return PageSnapshot(
        og_image=_meta_content(soup, 'meta[property="og:image"]'),
        twitter_image=_meta_content(soup, 'meta[name="twitter:image"]'),
        picture_sources=picture_sources,
        container_images=containers,
        article_images=articles,
        page_images=images,
    )
