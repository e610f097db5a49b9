"""Output dispatcher.

Routes finalized sentences to the final channel and novel partial text to the
partial channel. Events are awaited one at a time, so each channel sees them in
detection order.
"""

import logging
from typing import TYPE_CHECKING

from .types import Channel

if TYPE_CHECKING:
    from ..transport import Transport

logger = logging.getLogger(__name__)


class OutputDispatcher:
    """Send transcript events through a transport and count failed posts."""

    def __init__(self, transport: "Transport"):
        self.transport = transport
        self.failed_posts = 0
        self._last_partial: str | None = None

    async def dispatch_final(self, sentences: list[str]) -> int:
        """Send every sentence in order; returns how many were delivered."""
        delivered = 0
        for sentence in sentences:
            if await self._send(sentence, Channel.FINAL):
                delivered += 1
        # A new utterance may legitimately repeat the previous partial text
        self._last_partial = None
        return delivered

    async def dispatch_partial(self, text: str) -> bool:
        if text == self._last_partial:
            logger.debug(f"Suppressed repeated partial: {text!r}")
            return False
        self._last_partial = text
        return await self._send(text, Channel.PARTIAL)

    async def _send(self, text: str, channel: Channel) -> bool:
        ok = await self.transport.post(text, channel)
        if not ok:
            self.failed_posts += 1
        return ok

    async def close(self) -> None:
        await self.transport.close()
