from __future__ import annotations

import os
import sys
from pathlib import Path

import httpx
import pytest

# Ensure project root is on sys.path for absolute imports like 'app.services.vcard'
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
os.environ.setdefault("APP_ENV", "test")

from tests.helpers import PNG_BYTES, FakeRedis, make_embedder  # noqa: E402


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def png_embedder():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=PNG_BYTES, headers={"content-type": "image/png"})

    return make_embedder(handler)


@pytest.fixture
def failing_embedder():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, content=b"not found")

    return make_embedder(handler)
