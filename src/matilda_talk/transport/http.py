"""HTTP delivery of transcript events.

Each event is POSTed as a form body ``text=<payload>`` to the endpoint of its
channel. Delivery is best effort: failures are logged and reported as False,
never retried and never raised.
"""

import asyncio
import logging

import aiohttp

from ..streaming.types import Channel

logger = logging.getLogger(__name__)


class HttpTransport:
    """POST transcript text to the final and partial endpoints."""

    def __init__(self, final_url: str, partial_url: str, timeout_s: float = 5.0):
        self.urls = {Channel.FINAL: final_url, Channel.PARTIAL: partial_url}
        self.timeout = aiohttp.ClientTimeout(total=timeout_s)
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def post(self, text: str, channel: Channel) -> bool:
        url = self.urls[channel]
        try:
            session = await self._get_session()
            async with session.post(url, data={"text": text}) as response:
                if response.status >= 400:
                    logger.warning(f"POST to {url} failed with HTTP {response.status}")
                    return False
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"POST to {url} failed: {e}")
            return False

        logger.debug(f"Sent {channel.value} text={text!r} to {url}")
        return True

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
