# === FILE: sitemapper/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import logging
import time
import warnings
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Callable, FrozenSet, List, Optional

from aiohttp import ClientSession
from sitemapper.config import SiteMapperConfig
from sitemapper.crawler.fetcher import Fetcher
from sitemapper.crawler.models import FetchFailure, FetchOutcome, ShapeKind, SitesData
from sitemapper.logger import LOGGER_NAME

__all__ = ("SiteMapper",)

SitesCallback = Callable[[Optional[BaseException], List[str]], Any]


@dataclass(slots=True)
class _CrawlRun:
    """State owned by one top-level crawl and shared by all of its branches."""

    fetcher: Fetcher
    timeout: int
    limiter: Optional[asyncio.Semaphore] = None
    failures: List[FetchFailure] = field(default_factory=list)

    async def fetch(self, url: str) -> FetchOutcome:
        if self.limiter is None:
            return await self.fetcher.fetch_one(url, self.timeout)
        # the permit covers the request only, never the wait on child branches
        async with self.limiter:
            return await self.fetcher.fetch_one(url, self.timeout)


class SiteMapper:
    """Recursive sitemap crawler: flattens a sitemap (index) tree into one list of page URLs.

    Can be used as an async context manager to share one HTTP session across
    several fetches; otherwise every call opens and closes its own session.
    """

    def __init__(self, config: Optional[SiteMapperConfig] = None, **overrides: Any) -> None:
        self.config = (config or SiteMapperConfig()).with_overrides(**overrides)
        self.session: Optional[ClientSession] = None
        self.logger = logging.getLogger(LOGGER_NAME)

    async def __aenter__(self) -> SiteMapper:
        self.session = ClientSession(auto_decompress=True)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None

    @asynccontextmanager
    async def _run(self) -> AsyncIterator[_CrawlRun]:
        limiter = asyncio.Semaphore(self.config.concurrency) if self.config.concurrency else None
        if self.session is not None and not self.session.closed:
            yield _CrawlRun(Fetcher(self.session, self.config), self.config.timeout, limiter)
            return
        async with ClientSession(auto_decompress=True) as session:
            yield _CrawlRun(Fetcher(session, self.config), self.config.timeout, limiter)

    async def fetch(self, url: Optional[str] = None) -> SitesData:
        """Crawl *url* (default: ``config.url``) and return every page URL found under it.

        Per-URL failures only shrink the result; they are listed in ``errors``.
        Raises ValueError only when there is no URL to crawl at all.
        """
        url = url if url is not None else self.config.url
        if not url:
            raise ValueError("No sitemap URL given and none configured")

        self.logger.info("Crawl started: %s", url)
        start = time.monotonic()
        async with self._run() as run:
            sites = await self._crawl(run, url, frozenset())
        duration = time.monotonic() - start
        self.logger.info(
            "Crawl finished: %d URLs from %s in %.2f s (%d failed sitemaps)",
            len(sites), url, duration, len(run.failures),
        )
        return SitesData(url=url, sites=sites, errors=run.failures)

    async def crawl(self, url: str) -> List[str]:
        """Return the flattened page URLs under *url*; an empty list on any failure."""
        async with self._run() as run:
            return await self._crawl(run, url, frozenset())

    async def _crawl(self, run: _CrawlRun, url: str, ancestors: FrozenSet[str]) -> List[str]:
        outcome = await run.fetch(url)
        if not outcome.ok:
            # fail silently
            run.failures.append(FetchFailure(url, outcome.error or ""))
            return []

        shape = outcome.shape
        assert shape is not None
        if shape.kind is ShapeKind.URLSET:
            return list(shape.locs)
        if shape.kind is ShapeKind.SITEMAPINDEX:
            path = ancestors | {url}
            branches = []
            for child in shape.locs:
                if child in path:
                    self.logger.debug("Skipping cyclic sitemap reference %s -> %s", url, child)
                    continue
                branches.append(self._crawl(run, child, path))
            results = await asyncio.gather(*branches)
            return [site for result in results for site in result]

        self.logger.debug("Unrecognized sitemap document: %s", url)
        return []

    async def get_sites(
        self, url: Optional[str] = None, callback: Optional[SitesCallback] = None
    ) -> List[str]:
        """Deprecated callback-style wrapper around :meth:`fetch`."""
        warnings.warn(
            "get_sites() is deprecated, please use fetch()", DeprecationWarning, stacklevel=2
        )
        error: Optional[BaseException] = None
        sites: List[str] = []
        try:
            sites = (await self.fetch(url)).sites
        except Exception as exc:  # noqa: BLE001
            error = exc
        if callback is not None:
            callback(error, sites)
        return sites
