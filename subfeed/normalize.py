"""Raw provider records -> canonical posts."""

from typing import Any, Dict, List, Optional

from providers.base import Provider
from providers.registry import get_provider
from subfeed.models import Post


def transform_post(raw_post: Dict[str, Any], post_type: str,
                   providers: Optional[Dict[str, Provider]] = None) -> Post:
    """Normalize one raw post using the provider registered for `post_type`.

    The returned Post carries no subscription; combine_feeds attaches it.
    Raises MalformedPostError when the link or date is missing or unparseable.
    """
    return get_provider(post_type, providers).transform(raw_post)


def transform_posts(raw_posts: List[Dict[str, Any]], post_type: str,
                    providers: Optional[Dict[str, Provider]] = None) -> List[Post]:
    provider = get_provider(post_type, providers)
    return [provider.transform(raw) for raw in raw_posts]
