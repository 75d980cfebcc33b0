import html
import json
from typing import Any, Dict, List, Optional

from providers.base import Provider
from subfeed.errors import FeedUnavailableError
from subfeed.models import Post


def _author_name(item: Dict[str, Any]) -> Optional[str]:
    authors = item.get("authors")
    if isinstance(authors, list) and authors and isinstance(authors[0], dict):
        return authors[0].get("name")
    author = item.get("author")
    if isinstance(author, dict):
        return author.get("name")
    return None


class JsonFeedProvider(Provider):
    """JSON Feed 1.x (https://jsonfeed.org/version/1.1)."""

    name = "jsonfeed"
    default_feed_path = "feed.json"
    accept = "application/feed+json, application/json;q=0.9"

    def parse_response(self, body: bytes, url: str) -> List[Dict[str, Any]]:
        try:
            data = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise FeedUnavailableError(f"Invalid JSON from {url}: {e}", url=url) from e
        if not isinstance(data, dict) or not isinstance(data.get("items"), list):
            raise FeedUnavailableError(f"No 'items' list in JSON feed at {url}", url=url)
        return [item for item in data["items"] if isinstance(item, dict)]

    def transform(self, raw_post: Dict[str, Any]) -> Post:
        body = raw_post.get("content_html")
        if not body:
            text = raw_post.get("summary") or raw_post.get("content_text")
            body = html.escape(text, quote=False) if text else ""
        return self._build_post(
            title=raw_post.get("title"),
            link=raw_post.get("url") or raw_post.get("external_url"),
            author=_author_name(raw_post),
            date=raw_post.get("date_published") or raw_post.get("date_modified"),
            guid=raw_post.get("id"),
            body_html=body,
        )


class KonkleProvider(JsonFeedProvider):
    name = "konkle"
