"""Browser sessions and the two-phase thumbnail lookup for a single article."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Protocol

from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from .config import ThumbnailConfig
from .content import ARTICLE_IMAGE_SELECTOR, snapshot_from_html
from .images import evaluate
from .models import PageSnapshot

logger = logging.getLogger("newsthumb")

_RESOLVED_SRC_JS = "imgs => imgs.map(i => i.currentSrc || i.src || '')"
_DECLARED_SRC_JS = "imgs => imgs.map(i => i.src || '')"


class Session(Protocol):
    """One isolated page, exclusive to a single lookup."""

    @property
    def url(self) -> str: ...

    async def goto(self, url: str, *, wait_until: str, timeout: float) -> None: ...

    async def settle(self, seconds: float) -> None: ...

    async def snapshot(self) -> PageSnapshot: ...

    async def close(self) -> None: ...


class SessionFactory(Protocol):
    async def open(self) -> Session: ...


class BrowserSession:
    """A Playwright page inside its own browser context."""

    def __init__(
        self,
        page: Page,
        context: BrowserContext,
        config: ThumbnailConfig,
        browser: Optional[Browser] = None,
    ) -> None:
        self._page = page
        self._context = context
        self._config = config
        # Set only when the browser belongs to this session alone.
        self._browser = browser

    @property
    def url(self) -> str:
        return self._page.url

    async def goto(self, url: str, *, wait_until: str, timeout: float) -> None:
        await self._page.goto(url, wait_until=wait_until, timeout=timeout * 1000)

    async def settle(self, seconds: float) -> None:
        await self._page.wait_for_timeout(int(seconds * 1000))

    async def snapshot(self) -> PageSnapshot:
        html = await self._page.content()
        containers: List[str] = []
        for selector in self._config.container_selectors:
            containers.extend(
                await self._page.eval_on_selector_all(selector, _DECLARED_SRC_JS)
            )
        articles = await self._page.eval_on_selector_all(
            ARTICLE_IMAGE_SELECTOR, _RESOLVED_SRC_JS
        )
        images = await self._page.eval_on_selector_all("img", _RESOLVED_SRC_JS)
        return snapshot_from_html(
            html,
            self._page.url,
            container_images=containers,
            article_images=articles,
            page_images=images,
        )

    async def close(self) -> None:
        try:
            await self._context.close()
        finally:
            if self._browser is not None:
                await self._browser.close()


class ChromiumSessionFactory:
    """Launches Chromium through Playwright and hands out isolated sessions.

    Use as an async context manager. With ``browser_per_task`` disabled a single
    browser is launched on first use and shared; every session still gets a fresh
    context, so cookies and storage never leak between articles.
    """

    def __init__(self, config: ThumbnailConfig) -> None:
        self.config = config
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._lock = asyncio.Lock()
        self._launch_lock = asyncio.Lock()

    async def __aenter__(self) -> "ChromiumSessionFactory":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        try:
            if self._browser is not None:
                await self._browser.close()
                self._browser = None
        finally:
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None

    async def _driver(self) -> Playwright:
        # Started on first use so a missing driver fails single lookups, not the batch.
        async with self._lock:
            if self._playwright is None:
                self._playwright = await async_playwright().start()
            return self._playwright

    async def _launch(self) -> Browser:
        playwright = await self._driver()
        mode = self.config.headless_mode
        kwargs = {
            "headless": mode != "off",
            "args": list(self.config.launch_args),
        }
        if mode == "new":
            kwargs["channel"] = "chromium"
        logger.debug("Launching Chromium (headless=%s)", mode)
        return await playwright.chromium.launch(**kwargs)

    async def _shared_browser(self) -> Browser:
        async with self._launch_lock:
            if self._browser is None or not self._browser.is_connected():
                self._browser = await self._launch()
            return self._browser

    async def open(self) -> BrowserSession:
        owned: Optional[Browser] = None
        if self.config.browser_per_task:
            owned = browser = await self._launch()
        else:
            browser = await self._shared_browser()
        context: Optional[BrowserContext] = None
        try:
            context = await browser.new_context(user_agent=self.config.user_agent)
            page = await context.new_page()
        except BaseException:
            if context is not None:
                await context.close()
            if owned is not None:
                await owned.close()
            raise
        return BrowserSession(page, context, self.config, browser=owned)


async def fetch_thumbnail(
    url: str,
    sessions: SessionFactory,
    config: ThumbnailConfig,
) -> Optional[str]:
    """Find a thumbnail for ``url``; returns None instead of raising on failure."""
    try:
        session = await sessions.open()
    except Exception as exc:  # pylint: disable=broad-except
        logger.warning("Could not open browser session for %s: %s", url, exc)
        return None

    try:
        await session.goto(
            url, wait_until="domcontentloaded", timeout=config.navigation_timeout
        )
        image = evaluate(await session.snapshot())
        if image:
            return image

        final_url = session.url
        if final_url == url:
            logger.debug("No thumbnail on %s and no redirect", url)
            return None

        logger.debug("Following redirect %s -> %s", url, final_url)
        await session.goto(final_url, wait_until="load", timeout=config.navigation_timeout)
        await session.settle(config.settle_delay)
        return evaluate(await session.snapshot())
    except PlaywrightTimeoutError as exc:
        logger.warning("Timeout while loading %s: %s", url, exc)
        return None
    except Exception as exc:  # pylint: disable=broad-except
        logger.warning("Thumbnail lookup failed for %s: %s", url, exc)
        return None
    finally:
        try:
            await session.close()
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Failed to close browser session for %s: %s", url, exc)
