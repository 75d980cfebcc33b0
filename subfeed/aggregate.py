"""Fan out one fetch per subscription, then normalize and combine."""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence

from providers.base import Provider
from subfeed.combine import combine_feeds
from subfeed.errors import FeedError
from subfeed.fetch import FeedFetcher
from subfeed.models import AggregationResult, FeedFailure, FeedResult, Post, Subscription
from subfeed.monitoring import HealthMonitor
from subfeed.normalize import transform_posts

log = logging.getLogger("subfeed.aggregate")


class SubscriptionAggregator:
    def __init__(self, subscriptions: Sequence[Subscription], fetcher: FeedFetcher,
                 providers: Optional[Dict[str, Provider]] = None,
                 monitor: Optional[HealthMonitor] = None):
        self.subscriptions = tuple(subscriptions)
        self.fetcher = fetcher
        self.providers = providers
        self.monitor = monitor

    async def get_subscription_feed(self) -> List[Post]:
        """All posts from every subscription, newest first.

        Fails with the first error (in subscription order) if any single
        subscription cannot be fetched or normalized.
        """
        result = await self.aggregate(partial=False)
        return result.posts

    async def aggregate(self, partial: bool = False) -> AggregationResult:
        result = AggregationResult()
        active: List[Subscription] = []
        for sub in self.subscriptions:
            if partial and self.monitor and self.monitor.is_in_cooldown(sub.url):
                result.skipped.append(sub)
            else:
                active.append(sub)

        # join barrier: every fetch settles before anything is combined
        fetched = await asyncio.gather(
            *(self.fetcher.request_posts(sub) for sub in active),
            return_exceptions=True,
        )

        posts: List[Post] = []
        first_error: Optional[FeedError] = None
        for sub, outcome in zip(active, fetched):
            try:
                feed = self._normalize(sub, outcome)
            except FeedError as e:
                self._record(sub, ok=False)
                log.warning("Subscription %s (%s) failed: %s", sub.name, sub.url, e)
                if first_error is None:
                    first_error = e
                result.failures.append(FeedFailure(subscription=sub, error=e))
                continue
            self._record(sub, ok=True)
            posts = combine_feeds(posts, feed)

        # every outcome is recorded before strict mode gives up
        if first_error is not None and not partial:
            raise first_error

        result.posts = posts
        log.info(
            "Aggregated %d post(s) from %d subscription(s); %d failed, %d skipped.",
            len(posts), len(active) - len(result.failures),
            len(result.failures), len(result.skipped),
        )
        return result

    def _normalize(self, sub: Subscription, outcome: Any) -> FeedResult:
        if isinstance(outcome, BaseException):
            raise outcome
        return FeedResult(subscription=sub, posts=transform_posts(outcome, sub.type, self.providers))

    def _record(self, sub: Subscription, ok: bool) -> None:
        if self.monitor is None:
            return
        if ok:
            self.monitor.record_success(sub.url)
        else:
            self.monitor.record_failure(sub.url)


async def get_subscription_feed(subscriptions: Sequence[Subscription], fetcher: FeedFetcher,
                                providers: Optional[Dict[str, Provider]] = None) -> List[Post]:
    return await SubscriptionAggregator(subscriptions, fetcher, providers).get_subscription_feed()
