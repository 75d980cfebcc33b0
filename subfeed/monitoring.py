"""Per-subscription health tracking across aggregation runs."""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

log = logging.getLogger("subfeed.monitoring")


@dataclass
class FeedHealth:
    failures: int = 0
    alerted: bool = False
    last_failure: Optional[float] = None


class HealthMonitor:
    """Counts consecutive fetch failures per feed URL.

    Crossing `alert_threshold` logs one alert. From then on the feed is held
    back for a cooldown that grows by two minutes per failure, capped at
    `cooldown_max_minutes`.
    """

    def __init__(self, alert_threshold: int = 5, cooldown_max_minutes: float = 60,
                 clock: Callable[[], float] = time.monotonic):
        self.alert_threshold = alert_threshold
        self.cooldown_max_minutes = cooldown_max_minutes
        self._clock = clock
        self._feeds: Dict[str, FeedHealth] = {}

    def record_success(self, feed_url: str) -> None:
        health = self._feeds.get(feed_url)
        if health and health.failures:
            log.info("%s: recovered after %d consecutive failure(s).", feed_url, health.failures)
        self._feeds[feed_url] = FeedHealth()

    def record_failure(self, feed_url: str) -> bool:
        """Record a failure. Returns True if the alert threshold was just crossed."""
        health = self._feeds.setdefault(feed_url, FeedHealth())
        health.failures += 1
        health.last_failure = self._clock()
        log.warning("%s: consecutive failure #%d.", feed_url, health.failures)

        if health.failures >= self.alert_threshold and not health.alerted:
            health.alerted = True
            log.error("ALERT: feed %s failed %d times in a row.", feed_url, health.failures)
            return True
        return False

    def cooldown_remaining(self, feed_url: str) -> float:
        """Seconds left before the feed may be fetched again (0 when allowed)."""
        health = self._feeds.get(feed_url)
        if not health or health.failures < self.alert_threshold or health.last_failure is None:
            return 0.0
        cooldown = min(health.failures * 120, self.cooldown_max_minutes * 60)
        return max(0.0, cooldown - (self._clock() - health.last_failure))

    def is_in_cooldown(self, feed_url: str) -> bool:
        remaining = self.cooldown_remaining(feed_url)
        if remaining > 0:
            log.info("%s: cooldown active (%.0f min left). Skip.", feed_url, remaining / 60)
            return True
        return False

    def get_failures(self, feed_url: str) -> int:
        health = self._feeds.get(feed_url)
        return health.failures if health else 0

    def get_status(self) -> Dict[str, int]:
        return {url: h.failures for url, h in self._feeds.items() if h.failures}
