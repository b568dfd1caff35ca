"""Configuration objects and constants for feed fetching and thumbnail enrichment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Tuple

logger = logging.getLogger("newsthumb")

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 Chrome/120"
)
DEFAULT_LAUNCH_ARGS = ("--no-sandbox", "--disable-setuid-sandbox")
DEFAULT_CONTAINER_SELECTORS = (".elementor-widget-container img", ".wJnIp img")
HEADLESS_MODES = ("new", "legacy", "off")
MAX_ARTICLES = 100


@dataclass
class ThumbnailConfig:
    """Settings that control browser navigation and batch fan-out."""

    concurrency: int = 5
    navigation_timeout: float = 20.0
    settle_delay: float = 2.5
    user_agent: str = DEFAULT_USER_AGENT
    headless_mode: str = "new"
    launch_args: Tuple[str, ...] = DEFAULT_LAUNCH_ARGS
    browser_per_task: bool = False
    container_selectors: Tuple[str, ...] = DEFAULT_CONTAINER_SELECTORS

    def __post_init__(self) -> None:
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {self.concurrency}")
        if not self.navigation_timeout > 0:
            raise ValueError(
                f"navigation_timeout must be positive, got {self.navigation_timeout}"
            )
        if not self.settle_delay >= 0:
            raise ValueError(f"settle_delay must not be negative, got {self.settle_delay}")
        if self.headless_mode not in HEADLESS_MODES:
            raise ValueError(
                f"headless_mode must be one of {', '.join(HEADLESS_MODES)}, "
                f"got {self.headless_mode!r}"
            )

    @classmethod
    def from_env(cls, **overrides) -> "ThumbnailConfig":
        """Build a config from NEWSTHUMB_* environment variables, then apply overrides.

        Unusable environment values are logged and replaced by the default;
        explicit overrides are validated as usual and may raise ValueError.
        """
        concurrency = _env_int("NEWSTHUMB_CONCURRENCY", cls.concurrency)
        if concurrency < 1:
            logger.warning("Ignoring NEWSTHUMB_CONCURRENCY=%r: must be at least 1", concurrency)
            concurrency = cls.concurrency
        timeout = _env_float("NEWSTHUMB_TIMEOUT", cls.navigation_timeout)
        if not timeout > 0:
            logger.warning("Ignoring NEWSTHUMB_TIMEOUT=%r: must be positive", timeout)
            timeout = cls.navigation_timeout
        settle = _env_float("NEWSTHUMB_SETTLE_DELAY", cls.settle_delay)
        if not settle >= 0:
            logger.warning("Ignoring NEWSTHUMB_SETTLE_DELAY=%r: must not be negative", settle)
            settle = cls.settle_delay
        headless = os.getenv("NEWSTHUMB_HEADLESS", "").strip().lower() or cls.headless_mode
        if headless not in HEADLESS_MODES:
            logger.warning(
                "Ignoring NEWSTHUMB_HEADLESS=%r: expected one of %s",
                headless,
                ", ".join(HEADLESS_MODES),
            )
            headless = cls.headless_mode

        config = cls(
            concurrency=concurrency,
            navigation_timeout=timeout,
            settle_delay=settle,
            headless_mode=headless,
            browser_per_task=_env_bool("NEWSTHUMB_BROWSER_PER_TASK", cls.browser_per_task),
        )
        overrides = {key: value for key, value in overrides.items() if value is not None}
        return replace(config, **overrides) if overrides else config


@dataclass
class FeedConfig:
    """Settings for retrieving the aggregator feed."""

    country: str = "US"
    category: str = "top"
    limit: int = 20
    request_timeout: float = 15.0
    user_agent: str = "Mozilla/5.0"
    max_description_chars: int = 200


def _env_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", key, raw)
        return default


def _env_float(key: str, default: float) -> float:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number", key, raw)
        return default


def _env_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}
