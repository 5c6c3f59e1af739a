# File: tests/conftest.py
from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any, Dict

import pytest
import pytest_asyncio
from aiohttp import web

from sitemapper.config import SiteMapperConfig
from sitemapper.logger import configure

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"

#: placeholder replaced by the test server's own base URL at request time
BASE = "{base}"


def _document(root: str, entry: str, locs) -> str:
    entries = "".join(f"<{entry}><loc>{loc}</loc></{entry}>" for loc in locs)
    return f'<?xml version="1.0" encoding="UTF-8"?><{root} xmlns="{SITEMAP_NS}">{entries}</{root}>'


def xml_response(body: str, request: web.Request) -> web.Response:
    text = body.replace(BASE, f"http://{request.host}")
    return web.Response(text=text, content_type="application/xml")


def _handler(body: str, delay: float = 0.0) -> Callable[[web.Request], Awaitable[web.Response]]:
    async def handler(request: web.Request) -> web.Response:
        if delay:
            await asyncio.sleep(delay)
        return xml_response(body, request)

    return handler


@pytest.fixture()
def make_urlset() -> Callable[..., str]:
    """Build a ``urlset`` document from loc values."""
    return lambda *locs: _document("urlset", "url", locs)


@pytest.fixture()
def make_index() -> Callable[..., str]:
    """Build a ``sitemapindex`` document; ``{base}`` in a loc becomes the server URL."""
    return lambda *locs: _document("sitemapindex", "sitemap", locs)


@pytest.fixture()
def delayed() -> Callable[[str, float], Callable[[web.Request], Awaitable[web.Response]]]:
    """Build a handler that serves an XML body after a delay (seconds)."""
    return _handler


@pytest_asyncio.fixture
async def serve() -> AsyncIterator[Callable[[Dict[str, Any]], Awaitable[str]]]:
    """
    Start an aiohttp app on a free port and return its base URL.

    *routes* maps a path to an XML string (served with status 200) or to an
    aiohttp handler. All apps are cleaned up after the test.
    """
    runners: list[web.AppRunner] = []

    async def _start(routes: Dict[str, Any]) -> str:
        app = web.Application()
        for path, target in routes.items():
            if callable(target):
                app.router.add_get(path, target)
            else:
                app.router.add_get(path, _handler(target))
        runner = web.AppRunner(app)
        await runner.setup()
        site = web.TCPSite(runner, "127.0.0.1", 0)
        await site.start()
        runners.append(runner)
        host, port = runner.addresses[0][:2]
        return f"http://{host}:{port}"

    yield _start
    for runner in runners:
        await runner.cleanup()


@pytest.fixture()
def fast_config() -> SiteMapperConfig:
    """Config with a short per-request timeout for local servers."""
    return SiteMapperConfig(timeout=2000, user_agent="TestAgent/1.0")


@pytest.fixture(autouse=True)
def _reset_logger():
    """CLI tests rebind the log handler to CliRunner streams; restore it afterwards."""
    yield
    configure(level="WARNING")
