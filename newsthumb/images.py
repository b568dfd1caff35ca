"""Thumbnail selection heuristics over a page snapshot."""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlsplit

from .models import PageSnapshot

logger = logging.getLogger("newsthumb")

BLOCKED_MARKERS = ("spacer", "1x1", "logo", "icon", "hamburger", "menu", "header")
ALLOWED_IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp")


def first_url_token(value: Optional[str]) -> Optional[str]:
    """Reduce a srcset-style list ("a.jpg 1x, b.jpg 2x") to its first URL."""
    if not value:
        return None
    first = value.split(",")[0].strip()
    if not first:
        return None
    return first.split()[0]


def is_valid_candidate(url: Optional[str]) -> bool:
    """Return True when a URL looks like a real content image."""
    if not url:
        return False
    lowered = url.lower()
    if any(marker in lowered for marker in BLOCKED_MARKERS):
        return False
    try:
        path = urlsplit(lowered).path
    except ValueError:
        return False
    return path.endswith(ALLOWED_IMAGE_EXTENSIONS)


def evaluate(snapshot: PageSnapshot) -> Optional[str]:
    """Pick the first qualifying image from the snapshot, highest-trust tier first."""
    for raw in snapshot.candidates():
        candidate = first_url_token(raw)
        if is_valid_candidate(candidate):
            logger.debug("Selected thumbnail candidate %s", candidate)
            return candidate
    return None
