"""Transports deliver transcript text to the final and partial channels."""

import logging
from typing import Protocol, Sequence

from ..streaming.types import Channel
from .console import ConsoleTransport

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Best-effort delivery; post() returns False instead of raising."""

    async def post(self, text: str, channel: Channel) -> bool: ...

    async def close(self) -> None: ...


class FanoutTransport:
    """Deliver every event to several transports in order."""

    def __init__(self, transports: Sequence[Transport]):
        self.transports = list(transports)

    async def post(self, text: str, channel: Channel) -> bool:
        delivered = True
        for transport in self.transports:
            if not await transport.post(text, channel):
                delivered = False
        return delivered

    async def close(self) -> None:
        for transport in self.transports:
            try:
                await transport.close()
            except Exception as e:
                logger.warning(f"Failed to close {type(transport).__name__}: {e}")


def __getattr__(name):
    # aiohttp is only imported when HTTP delivery is actually used
    if name == "HttpTransport":
        from .http import HttpTransport

        globals()[name] = HttpTransport
        return HttpTransport
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["ConsoleTransport", "FanoutTransport", "HttpTransport", "Transport"]
