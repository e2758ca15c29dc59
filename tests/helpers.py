from __future__ import annotations

import httpx
from redis.exceptions import ConnectionError as RedisConnectionError

from app.services.vcard.photo import PhotoClient, PhotoEmbedder

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + bytes(range(256)) * 4


class FakeRedis:
    """Just enough of redis.asyncio.Redis for ProfileStore."""

    def __init__(self, data: dict[str, str] | None = None, fail: bool = False):
        self.data = dict(data or {})
        self.fail = fail
        self.closed = False

    def _check(self):
        if self.fail:
            raise RedisConnectionError("redis is down")

    async def get(self, key):
        self._check()
        return self.data.get(key)

    async def set(self, key, value):
        self._check()
        self.data[key] = value
        return True

    async def ping(self):
        self._check()
        return True

    async def aclose(self):
        self.closed = True


def make_embedder(handler, **kwargs) -> PhotoEmbedder:
    client = PhotoClient(max_retries=1, transport=httpx.MockTransport(handler))
    return PhotoEmbedder(client, **kwargs)
