"""Centralized configuration for subfeed."""

import os
import json
import logging
from typing import List

from subfeed.models import Subscription

log = logging.getLogger("subfeed.config")

# =========================
# File paths
# =========================
SUBSCRIPTIONS_FILE: str = os.getenv("SUBSCRIPTIONS_FILE", "config/subscriptions.json")
OUTPUT_FILE: str = os.getenv("OUTPUT_FILE", "")

# =========================
# Fetching
# =========================
FEED_FETCH_TIMEOUT: float = float(os.getenv("FEED_FETCH_TIMEOUT", "30"))
FEED_POLL_MINUTES: float = float(os.getenv("FEED_POLL_MINUTES", "0"))
USER_AGENT: str = os.getenv("USER_AGENT", "Subfeed/1.0")

# =========================
# Normalization
# =========================
DESCRIPTION_MAX: int = int(os.getenv("DESCRIPTION_MAX", "0"))

# =========================
# Aggregation / monitoring
# =========================
PARTIAL_RESULTS: bool = os.getenv("PARTIAL_RESULTS", "0").lower() in ("1", "true", "yes")
FAILURE_ALERT_THRESHOLD: int = int(os.getenv("FAILURE_ALERT_THRESHOLD", "5"))
FAILURE_COOLDOWN_MAX_MINUTES: float = float(os.getenv("FAILURE_COOLDOWN_MAX_MINUTES", "60"))

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


def load_subscriptions(path: str = "") -> List[Subscription]:
    """Load the subscription list. Invalid entries are logged and skipped."""
    path = path or SUBSCRIPTIONS_FILE
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        log.warning("File %s not found, no subscriptions.", path)
        return []
    except (json.JSONDecodeError, OSError) as e:
        log.error("Error reading %s: %s", path, e)
        return []

    if not isinstance(data, list):
        log.error("%s must contain a JSON list of subscriptions.", path)
        return []

    subs: List[Subscription] = []
    for i, entry in enumerate(data):
        if not isinstance(entry, dict):
            log.warning("Invalid subscription #%d in %s: %r", i, path, entry)
            continue
        try:
            subs.append(Subscription.from_dict(entry))
        except ValueError as e:
            log.warning("Invalid subscription #%d in %s: %s", i, path, e)
    return subs
