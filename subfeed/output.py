import os
import json
from typing import Any, Dict, List, Sequence

from subfeed.models import Post


def feed_to_json(posts: Sequence[Post]) -> List[Dict[str, Any]]:
    return [p.to_dict() for p in posts]


def write_feed(path: str, posts: Sequence[Post]) -> None:
    """Atomic write of the combined feed as a JSON list."""
    tmp = f"{path}.tmp"
    with open(tmp, "w", encoding="utf-8") as f:
        json.dump(feed_to_json(posts), f, ensure_ascii=False, indent=2)
    os.replace(tmp, path)
