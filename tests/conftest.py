import asyncio
import json
import os
from xml.sax.saxutils import escape

import pytest

from subfeed.models import Subscription

FIXTURES = os.path.join(os.path.dirname(__file__), "fixtures")

FACEBOOK_FEED_URL = "https://facebook.github.io/react/feed.xml"
KONKLE_FEED_URL = "https://konkle.example.com/feed.json"


def load_fixture(name: str):
    with open(os.path.join(FIXTURES, name), "r", encoding="utf-8") as f:
        return json.load(f)


def build_rss(raw_posts) -> bytes:
    """Render raw RSS post dicts back into an RSS 2.0 document."""
    items = []
    for p in raw_posts:
        parts = [
            "<item>",
            f"<title>{escape(p['title'])}</title>",
            f"<link>{escape(p['link'])}</link>",
            f'<guid isPermaLink="false">{escape(p["id"])}</guid>',
            f"<pubDate>{p['published']}</pubDate>",
            f"<description>{escape(p['summary'])}</description>",
            "</item>",
        ]
        items.append("".join(parts))
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0"><channel>'
        "<title>React</title>"
        "<link>https://facebook.github.io/react</link>"
        "<description>A JavaScript library for building user interfaces</description>"
        + "".join(items)
        + "</channel></rss>"
    ).encode("utf-8")


class FakeResponse:
    def __init__(self, status: int, body):
        self.status = status
        self._body = body.encode("utf-8") if isinstance(body, str) else body

    async def read(self):
        return self._body

    async def text(self):
        return self._body.decode("utf-8")

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    """Stands in for aiohttp.ClientSession; routes GETs by exact URL."""

    def __init__(self, routes):
        self.routes = routes
        self.requests = []
        self.closed = False

    def _respond(self, url):
        route = self.routes.get(url)
        if isinstance(route, BaseException):
            raise route
        if route is None:
            return FakeResponse(404, "not found")
        status, body = route
        return FakeResponse(status, body)

    def get(self, url, **kwargs):
        self.requests.append(url)
        return self._respond(url)

    async def close(self):
        self.closed = True


class GatedResponse(FakeResponse):
    def __init__(self, status, body, gate: asyncio.Event):
        super().__init__(status, body)
        self.gate = gate

    async def __aenter__(self):
        await self.gate.wait()
        return self


class GatedSession(FakeSession):
    """Holds every response until all `expected` URLs have been requested.

    A fetcher that awaits one feed before asking for the next never opens
    the gate and hangs.
    """

    def __init__(self, routes, expected):
        super().__init__(routes)
        self.expected = set(expected)
        self.gate = asyncio.Event()

    def get(self, url, **kwargs):
        self.requests.append(url)
        if self.expected <= set(self.requests):
            self.gate.set()
        resp = self._respond(url)
        return GatedResponse(resp.status, resp._body, self.gate)


@pytest.fixture
def subscriptions():
    return [Subscription.from_dict(d) for d in load_fixture("subscriptions.json")]


@pytest.fixture
def facebook_posts():
    return load_fixture("facebook_posts.json")


@pytest.fixture
def konkle_feed():
    return load_fixture("konkle_feed.json")


@pytest.fixture
def konkle_posts(konkle_feed):
    return konkle_feed["items"]


@pytest.fixture
def feed_routes(facebook_posts, konkle_feed):
    return {
        FACEBOOK_FEED_URL: (200, build_rss(facebook_posts)),
        KONKLE_FEED_URL: (200, json.dumps(konkle_feed)),
    }


@pytest.fixture
def fake_session(feed_routes):
    return FakeSession(feed_routes)
