from dataclasses import replace
from typing import List, Sequence

from subfeed.models import FeedResult, Post


def _sort_key(post: Post):
    return post.published_at


def annotate_posts(feed: FeedResult) -> List[Post]:
    return [replace(post, subscription=feed.subscription) for post in feed.posts]


def combine_feeds(existing_posts: Sequence[Post], feed: FeedResult) -> List[Post]:
    """Merge a feed's posts into an existing collection, newest first.

    New posts are tagged with the feed's subscription; existing posts are
    left untouched. The sort is stable, so posts with the same pub_date keep
    their relative order and existing posts stay ahead of new ones. Duplicates
    are not removed.
    """
    merged = list(existing_posts)
    merged.extend(annotate_posts(feed))
    # reverse=True keeps equal keys in input order
    merged.sort(key=_sort_key, reverse=True)
    return merged
