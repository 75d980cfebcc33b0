import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Comment


def preview_text(text: str, limit: int) -> str:
    """Shorten text to at most `limit` chars, cutting on a word boundary."""
    text = text or ""
    if len(text) <= limit:
        return text
    if limit <= 3:
        return text[: max(0, limit)]
    cut = text[: limit - 3]
    if not text[len(cut)].isspace():
        m = re.match(r"(.*)\s", cut, flags=re.S)
        if m:
            cut = m.group(1)
    return cut.rstrip() + "..."


def truncate_html(raw_html: str, limit: int) -> str:
    """Cap the visible text of an HTML body at `limit` chars, keeping its markup.

    Bodies within the limit, or any body when limit <= 0, come back untouched.
    Everything after the cut point is dropped.
    """
    raw_html = raw_html or ""
    if limit <= 0:
        return raw_html
    soup = BeautifulSoup(raw_html, "html.parser")
    strings = [s for s in soup.find_all(string=True) if not isinstance(s, Comment)]
    if sum(len(s) for s in strings) <= limit:
        return raw_html

    used = 0
    for s in strings:
        if used + len(s) <= limit:
            used += len(s)
            continue
        later = list(s.find_all_next(string=True)) + list(s.find_all_next())
        for el in later:
            el.extract()
        s.replace_with(preview_text(str(s), limit - used))
        break
    return str(soup)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 / RFC 3339 or RFC 822 date into an aware UTC datetime.

    Naive values are taken as UTC. Raises ValueError when nothing parses.
    """
    value = (value or "").strip()
    if not value:
        raise ValueError("empty timestamp")
    iso = value[:-1] + "+00:00" if value[-1] in "Zz" else value
    try:
        dt = datetime.fromisoformat(iso)
    except ValueError:
        try:
            dt = parsedate_to_datetime(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"unparseable timestamp: {value!r}") from e
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_timestamp(dt: datetime) -> str:
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S") + f".{dt.microsecond // 1000:03d}Z"


def join_feed_url(base_url: str, feed_path: str) -> str:
    """Resolve a feed path against a site URL; absolute paths win."""
    if not feed_path:
        return base_url
    return urljoin(base_url.rstrip("/") + "/", feed_path)
