from __future__ import annotations

import asyncio
from typing import Dict, List, Optional, Tuple

import pytest

from newsthumb.config import ThumbnailConfig
from newsthumb.models import PageSnapshot


class FakeSite:
    """In-memory web: snapshots per URL plus optional redirects, errors and delays."""

    def __init__(
        self,
        pages: Optional[Dict[str, PageSnapshot]] = None,
        redirects: Optional[Dict[str, str]] = None,
        errors: Optional[Dict[str, BaseException]] = None,
        delays: Optional[Dict[str, float]] = None,
        early: Optional[Dict[str, PageSnapshot]] = None,
    ) -> None:
        # ``early`` is what a page shows at DOMContentLoaded, before images render.
        self.early = early or {}
        self.pages = pages or {}
        self.redirects = redirects or {}
        self.errors = errors or {}
        self.delays = delays or {}


class FakeSession:
    def __init__(self, factory: "FakeSessionFactory") -> None:
        self._factory = factory
        self._url = "about:blank"
        self.navigations: List[Tuple[str, str]] = []
        self.settled: List[float] = []
        self.snapshots: List[str] = []
        self.close_calls = 0

    @property
    def url(self) -> str:
        return self._url

    async def goto(self, url: str, *, wait_until: str, timeout: float) -> None:
        site = self._factory.site
        self.navigations.append((url, wait_until))
        delay = site.delays.get(url, 0)
        if delay:
            await asyncio.sleep(delay)
        if url in site.errors:
            raise site.errors[url]
        self._url = site.redirects.get(url, url)

    async def settle(self, seconds: float) -> None:
        self.settled.append(seconds)

    async def snapshot(self) -> PageSnapshot:
        site = self._factory.site
        self.snapshots.append(self._url)
        last_wait = self.navigations[-1][1] if self.navigations else None
        if last_wait == "domcontentloaded" and self._url in site.early:
            return site.early[self._url]
        return site.pages.get(self._url, PageSnapshot())

    async def close(self) -> None:
        self.close_calls += 1
        self._factory.in_flight -= 1


class FakeSessionFactory:
    def __init__(self, site: FakeSite, fail_open: bool = False) -> None:
        self.site = site
        self.fail_open = fail_open
        self.sessions: List[FakeSession] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def open(self) -> FakeSession:
        if self.fail_open:
            raise RuntimeError("browser launch failed")
        session = FakeSession(self)
        self.sessions.append(session)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        return session


@pytest.fixture
def config() -> ThumbnailConfig:
    return ThumbnailConfig(settle_delay=0.0, navigation_timeout=1.0)


@pytest.fixture
def make_factory():
    def _make(fail_open: bool = False, **site_kwargs) -> FakeSessionFactory:
        return FakeSessionFactory(FakeSite(**site_kwargs), fail_open=fail_open)

    return _make
