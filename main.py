import sys
import json
import asyncio
import logging

from subfeed import config
from providers.registry import build_providers
from subfeed.aggregate import SubscriptionAggregator
from subfeed.errors import FeedError
from subfeed.fetch import FeedFetcher
from subfeed.monitoring import HealthMonitor
from subfeed.output import feed_to_json, write_feed


logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(message)s")
log = logging.getLogger("subfeed")


def export(posts) -> None:
    if config.OUTPUT_FILE:
        write_feed(config.OUTPUT_FILE, posts)
        log.info("Wrote %d post(s) to %s.", len(posts), config.OUTPUT_FILE)
    else:
        json.dump(feed_to_json(posts), sys.stdout, ensure_ascii=False, indent=2)
        sys.stdout.write("\n")


async def run_once(aggregator: SubscriptionAggregator) -> None:
    result = await aggregator.aggregate(partial=config.PARTIAL_RESULTS)
    for failure in result.failures:
        log.warning("Feed %s omitted: %s", failure.subscription.url, failure.error)
    export(result.posts)


async def main() -> int:
    subscriptions = config.load_subscriptions()
    if not subscriptions:
        log.error("No subscriptions configured (%s).", config.SUBSCRIPTIONS_FILE)
        return 1

    providers = build_providers(description_max=config.DESCRIPTION_MAX)
    monitor = HealthMonitor(
        alert_threshold=config.FAILURE_ALERT_THRESHOLD,
        cooldown_max_minutes=config.FAILURE_COOLDOWN_MAX_MINUTES,
    )

    async with FeedFetcher(timeout=config.FEED_FETCH_TIMEOUT,
                           user_agent=config.USER_AGENT,
                           providers=providers) as fetcher:
        aggregator = SubscriptionAggregator(subscriptions, fetcher, providers, monitor)

        if config.FEED_POLL_MINUTES <= 0:
            try:
                await run_once(aggregator)
            except FeedError as e:
                log.error("Aggregation failed: %s", e)
                return 1
            return 0

        log.info("Polling %d subscription(s) every %s min.", len(subscriptions), config.FEED_POLL_MINUTES)
        while True:
            try:
                await run_once(aggregator)
            except FeedError as e:
                log.error("Aggregation failed, retrying next tick: %s", e)
            await asyncio.sleep(config.FEED_POLL_MINUTES * 60)


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
