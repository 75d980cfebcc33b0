from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from subfeed.utils import parse_timestamp

SUBSCRIPTION_KEYS = ("url", "type", "name")


@dataclass(frozen=True)
class Subscription:
    url: str
    type: str
    name: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict, hash=False)  # provider keys (feed_path, ...)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Subscription":
        url = str(data.get("url") or "").strip()
        kind = str(data.get("type") or "").strip().lower()
        if not url or not kind:
            raise ValueError("subscription needs both 'url' and 'type'")
        extra = {k: v for k, v in data.items() if k not in SUBSCRIPTION_KEYS}
        return cls(url=url, type=kind, name=str(data.get("name") or url), metadata=extra)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"url": self.url, "type": self.type, "name": self.name}
        out.update(self.metadata)
        return out


@dataclass(frozen=True)
class Post:
    title: str
    link: str
    author: Optional[str]
    pub_date: str  # ISO-8601 UTC, e.g. 2015-09-02T07:00:00.000Z
    guid: str
    description: str
    subscription: Optional[Subscription] = None

    @property
    def published_at(self) -> datetime:
        return parse_timestamp(self.pub_date)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "link": self.link,
            "author": self.author,
            "pubDate": self.pub_date,
            "guid": self.guid,
            "description": self.description,
            "subscription": self.subscription.to_dict() if self.subscription else None,
        }


@dataclass(frozen=True)
class FeedResult:
    """One subscription's normalized posts, ready to be combined."""
    subscription: Optional[Subscription]
    posts: List[Post]


@dataclass(frozen=True)
class FeedFailure:
    subscription: Subscription
    error: Exception


@dataclass
class AggregationResult:
    posts: List[Post] = field(default_factory=list)
    failures: List[FeedFailure] = field(default_factory=list)
    skipped: List[Subscription] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures
