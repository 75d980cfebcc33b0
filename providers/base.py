from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from subfeed.errors import MalformedPostError
from subfeed.models import Post, Subscription
from subfeed.utils import format_timestamp, join_feed_url, parse_timestamp, truncate_html

DEFAULT_DESCRIPTION_MAX = 0  # no cap


class Provider(ABC):
    """Maps one feed format onto the canonical Post shape."""

    name: str
    default_feed_path: str = ""
    accept: str = "*/*"

    def __init__(self, description_max: int = DEFAULT_DESCRIPTION_MAX):
        self.description_max = description_max

    def request_url(self, subscription: Subscription) -> str:
        feed_path = subscription.metadata.get("feed_path", self.default_feed_path)
        return join_feed_url(subscription.url, str(feed_path or ""))

    @abstractmethod
    def parse_response(self, body: bytes, url: str) -> List[Dict[str, Any]]:
        """Decode a response body into raw posts. Raises FeedUnavailableError."""
        ...

    @abstractmethod
    def transform(self, raw_post: Dict[str, Any]) -> Post:
        ...

    # helpers shared by the concrete providers

    def _build_post(self, *, title: Any, link: Any, author: Any, date: Any,
                    guid: Any, body_html: Any) -> Post:
        link = str(link or "").strip()
        if not link:
            raise MalformedPostError(f"{self.name}: post has no link", field="link")
        pub_date = _normalize_date(date, self.name)
        author = str(author).strip() if author else None
        return Post(
            title=str(title or "").strip(),
            link=link,
            author=author or None,
            pub_date=pub_date,
            guid=str(guid or link),
            description=truncate_html(str(body_html or ""), self.description_max),
        )


def _normalize_date(value: Optional[Any], provider: str) -> str:
    if not value:
        raise MalformedPostError(f"{provider}: post has no date", field="date")
    try:
        return format_timestamp(parse_timestamp(str(value)))
    except ValueError as e:
        raise MalformedPostError(f"{provider}: {e}", field="date") from e
