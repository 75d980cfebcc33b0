import asyncio
import logging
from typing import Any, Dict, List, Optional

import aiohttp

from providers.base import Provider
from providers.registry import get_provider
from subfeed.errors import FeedUnavailableError
from subfeed.models import Subscription

log = logging.getLogger("subfeed.fetch")

DEFAULT_USER_AGENT = "Subfeed/1.0"


class FeedFetcher:
    """Retrieves the raw posts of one subscription per call over HTTP."""

    def __init__(self, timeout: float = 30, user_agent: str = DEFAULT_USER_AGENT,
                 session: Optional[aiohttp.ClientSession] = None,
                 providers: Optional[Dict[str, Provider]] = None):
        self.timeout = timeout
        self.user_agent = user_agent
        self.providers = providers
        self._session = session
        self._owns_session = session is None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers={"User-Agent": self.user_agent},
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "FeedFetcher":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    async def request_posts(self, subscription: Subscription) -> List[Dict[str, Any]]:
        """Fetch one feed and return its raw posts in provider order.

        Raises FeedUnavailableError on network errors, non-200 responses and
        bodies the provider cannot decode.
        """
        provider = get_provider(subscription.type, self.providers)
        url = provider.request_url(subscription)
        sess = await self._ensure_session()

        try:
            async with sess.get(url, headers={"Accept": provider.accept}) as resp:
                body = await resp.read()
                if resp.status != 200:
                    log.warning("Feed %s -> HTTP %s body=%s", url, resp.status,
                                body[:200].decode("utf-8", "replace"))
                    raise FeedUnavailableError(
                        f"{url} returned HTTP {resp.status}", url=url, status=resp.status
                    )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            log.warning("Feed %s unreachable: %s", url, e)
            raise FeedUnavailableError(f"{url} unreachable: {e}", url=url) from e

        posts = provider.parse_response(body, url)
        log.debug("Feed %s: %d post(s).", url, len(posts))
        return posts
