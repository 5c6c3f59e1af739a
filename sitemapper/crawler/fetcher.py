# sitemapper/crawler/fetcher.py
"""
Fetcher module: one HTTP GET per sitemap URL, raced against a per-request timer.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional

from aiohttp import ClientError, ClientSession
from sitemapper.config import SiteMapperConfig
from sitemapper.crawler.models import CrawlRequest, FetchOutcome
from sitemapper.logger import LOGGER_NAME
from sitemapper.parser.sitemap_parser import SitemapParseError, classify_shape, parse_document


class Fetcher:
    """Fetches and classifies single sitemap documents; never raises for per-URL failures."""

    def __init__(self, session: ClientSession, config: SiteMapperConfig) -> None:
        self.session = session
        self.config = config
        self.logger = logging.getLogger(LOGGER_NAME)
        self._timers: Dict[CrawlRequest, asyncio.TimerHandle] = {}

    @property
    def pending_timers(self) -> int:
        """Number of timers for requests that are still in flight."""
        return len(self._timers)

    async def fetch_one(self, url: str, timeout: Optional[int] = None) -> FetchOutcome:
        """
        Fetch *url* and classify the document.

        *timeout* is in milliseconds and defaults to ``config.timeout``. When
        the timer fires first the request is cancelled without waiting for it
        and a failed outcome is returned instead of an exception.
        """
        request = CrawlRequest(url, timeout or self.config.timeout)
        loop = asyncio.get_running_loop()
        task = asyncio.ensure_future(self._request(request))
        expired = loop.create_future()
        self._timers[request] = loop.call_later(request.timeout / 1000, _set_if_pending, expired)
        try:
            await asyncio.wait((task, expired), return_when=asyncio.FIRST_COMPLETED)
            if task.done():
                return task.result()
            task.cancel()
            self.logger.warning("Timed out after %d ms: %s", request.timeout, url)
            return FetchOutcome.failed(
                url, f"request timed out after {request.timeout} milliseconds"
            )
        finally:
            self._timers.pop(request).cancel()
            if not task.done():
                task.cancel()
            if not expired.done():
                expired.cancel()

    async def _request(self, request: CrawlRequest) -> FetchOutcome:
        url = request.url
        headers = {"User-Agent": self.config.user_agent, "Accept-Encoding": "gzip, deflate"}
        try:
            async with self.session.get(url, headers=headers, raise_for_status=False) as resp:
                if resp.status != 200:
                    reason = f"HTTP {resp.status} {resp.reason or ''}".rstrip()
                    self.logger.warning("Failed %s: %s", url, reason)
                    return FetchOutcome.failed(url, reason)
                body = await resp.read()
            shape = classify_shape(parse_document(body, url))
        except (ClientError, asyncio.TimeoutError, SitemapParseError) as exc:
            reason = str(exc) or type(exc).__name__
            self.logger.warning("Failed %s: %s", url, reason)
            return FetchOutcome.failed(url, reason)
        except Exception as exc:  # noqa: BLE001
            self.logger.error("Unexpected error for %s: %r", url, exc)
            return FetchOutcome.failed(url, repr(exc))
        self.logger.debug("%s is %s with %d entries", url, shape.kind.value, len(shape.locs))
        return FetchOutcome.parsed(url, shape)


def _set_if_pending(fut: asyncio.Future) -> None:
    if not fut.done():
        fut.set_result(None)
