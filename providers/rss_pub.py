import io
import logging
from typing import Any, Dict, List

import feedparser

from providers.base import Provider
from subfeed.errors import FeedUnavailableError
from subfeed.models import Post

log = logging.getLogger("subfeed.provider.rss")


def _entry_html(entry: Any) -> str:
    content = entry.get("content")
    if content and isinstance(content, list):
        v = content[0].get("value")
        if v:
            return str(v)
    return str(entry.get("description", "") or entry.get("summary", "") or "")


def _entry_to_raw(entry: Any) -> Dict[str, Any]:
    # Plain str/None values only, so the list survives a JSON round trip.
    return {
        "title": entry.get("title"),
        "link": entry.get("link"),
        "author": entry.get("author"),
        "published": entry.get("published") or entry.get("updated"),
        "id": entry.get("id"),
        "summary": _entry_html(entry) or None,
    }


class RssProvider(Provider):
    """RSS 2.0 / Atom feeds, decoded with feedparser."""

    name = "rss"
    default_feed_path = "feed.xml"
    accept = "application/rss+xml, application/atom+xml, application/xml;q=0.9, */*;q=0.8"

    def parse_response(self, body: bytes, url: str) -> List[Dict[str, Any]]:
        # a stream, so feedparser never treats the body as a path or URL
        feed = feedparser.parse(io.BytesIO(body))
        entries = feed.get("entries") or []
        if feed.get("bozo") and not entries:
            raise FeedUnavailableError(
                f"Malformed feed at {url}: {feed.get('bozo_exception')}", url=url
            )
        if feed.get("bozo"):
            log.warning("Feed %s parsed with errors: %s", url, feed.get("bozo_exception"))
        return [_entry_to_raw(e) for e in entries]

    def transform(self, raw_post: Dict[str, Any]) -> Post:
        return self._build_post(
            title=raw_post.get("title"),
            link=raw_post.get("link"),
            author=raw_post.get("author"),
            date=raw_post.get("published") or raw_post.get("updated"),
            guid=raw_post.get("id") or raw_post.get("guid"),
            body_html=raw_post.get("summary") or raw_post.get("description"),
        )


class FacebookProvider(RssProvider):
    """Facebook engineering blogs (React, etc.) publish a plain RSS 2.0 feed."""

    name = "facebook"
