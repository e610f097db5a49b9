"""Unit tests for HttpTransport.

The aiohttp session is replaced with a fake so no server is needed.
"""

import asyncio

import aiohttp
import pytest

from matilda_talk.streaming.types import Channel
from matilda_talk.transport.http import HttpTransport


class FakeResponse:
    def __init__(self, status):
        self.status = status

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False


class FakeSession:
    def __init__(self, status=200, error=None):
        self.status = status
        self.error = error
        self.calls = []
        self.closed = False

    def post(self, url, data=None):
        self.calls.append((url, data))
        if self.error is not None:
            raise self.error
        return FakeResponse(self.status)

    async def close(self):
        self.closed = True


@pytest.fixture
def transport():
    return HttpTransport("http://localhost:8888/speech", "http://localhost:8888/partial", timeout_s=1.0)


class TestHttpTransport:
    @pytest.mark.asyncio
    async def test_final_goes_to_final_url(self, transport):
        session = FakeSession()
        transport._session = session

        assert await transport.post("Hello world.", Channel.FINAL)
        assert session.calls == [("http://localhost:8888/speech", {"text": "Hello world."})]

    @pytest.mark.asyncio
    async def test_partial_goes_to_partial_url(self, transport):
        session = FakeSession()
        transport._session = session

        await transport.post("hello", Channel.PARTIAL)

        assert session.calls == [("http://localhost:8888/partial", {"text": "hello"})]

    @pytest.mark.asyncio
    async def test_http_error_status(self, transport):
        transport._session = FakeSession(status=500)

        assert not await transport.post("Hello.", Channel.FINAL)

    @pytest.mark.asyncio
    async def test_connection_error_is_not_raised(self, transport):
        transport._session = FakeSession(error=aiohttp.ClientConnectionError("refused"))

        assert not await transport.post("Hello.", Channel.FINAL)

    @pytest.mark.asyncio
    async def test_timeout_is_not_raised(self, transport):
        transport._session = FakeSession(error=asyncio.TimeoutError())

        assert not await transport.post("Hello.", Channel.FINAL)

    @pytest.mark.asyncio
    async def test_close(self, transport):
        session = FakeSession()
        transport._session = session

        await transport.close()

        assert session.closed
        assert transport._session is None

    @pytest.mark.asyncio
    async def test_close_without_session(self, transport):
        await transport.close()
