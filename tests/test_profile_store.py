from __future__ import annotations

import asyncio
import json

import pytest

from app.core.errors import ProfileStoreError
from app.models.vcard import VCardDocument
from app.services.profile_store import ProfileStore
from tests.helpers import FakeRedis


def test_missing_card_returns_none(fake_redis):
    store = ProfileStore(client=fake_redis)
    assert asyncio.run(store.get_card("nope")) is None
    assert asyncio.run(store.get_social_links("nope")) == []
    assert asyncio.run(store.get_additional_contacts("nope")) == []


def test_save_and_read_card(fake_redis):
    store = ProfileStore(client=fake_redis)
    links = [{"kind": "instagram", "value": "https://instagram.com/ana"}]
    contacts = [{"kind": "email", "label": "Work", "value": "ana@acme.com"}]
    asyncio.run(store.save_card("42", {"first_name": "Ana"}, links, contacts))

    assert asyncio.run(store.get_card("42")) == {"first_name": "Ana", "id": "42"}
    assert asyncio.run(store.get_social_links("42")) == links
    assert asyncio.run(store.get_additional_contacts("42")) == contacts
    assert "cardex:card:42" in fake_redis.data


def test_reads_always_reflect_current_storage(fake_redis):
    store = ProfileStore(client=fake_redis)
    asyncio.run(store.save_card("42", {"first_name": "Ana"}))
    fake_redis.data["cardex:card:42"] = json.dumps({"id": "42", "first_name": "Anna"})
    assert asyncio.run(store.get_card("42"))["first_name"] == "Anna"


def test_unreadable_json_raises_store_error():
    store = ProfileStore(client=FakeRedis({"cardex:card:42": "{not json"}))
    with pytest.raises(ProfileStoreError):
        asyncio.run(store.get_card("42"))


def test_unexpected_shapes_raise_store_error():
    store = ProfileStore(client=FakeRedis({"cardex:card:1": "[1, 2]", "cardex:card_links:1": '{"a": 1}'}))
    with pytest.raises(ProfileStoreError):
        asyncio.run(store.get_card("1"))
    with pytest.raises(ProfileStoreError):
        asyncio.run(store.get_social_links("1"))


def test_redis_outage_raises_store_error():
    store = ProfileStore(client=FakeRedis(fail=True))
    with pytest.raises(ProfileStoreError):
        asyncio.run(store.get_card("42"))
    with pytest.raises(ProfileStoreError):
        asyncio.run(store.save_card("42", {}))
    assert asyncio.run(store.ping()) is False


def test_close_releases_client(fake_redis):
    store = ProfileStore(client=fake_redis)
    assert asyncio.run(store.ping()) is True
    asyncio.run(store.close())
    assert fake_redis.closed


def test_save_vcard_records_url_on_card(fake_redis):
    store = ProfileStore(client=fake_redis)
    asyncio.run(store.save_card("42", {"first_name": "Ana"}))
    document = VCardDocument(text="BEGIN:VCARD\r\nEND:VCARD\r\n", filename="Ana.vcf")
    asyncio.run(store.save_vcard("42", document, "/files/cards/42/Ana.vcf"))

    assert asyncio.run(store.get_vcard("42")) == document
    assert asyncio.run(store.get_vcard_url("42")) == "/files/cards/42/Ana.vcf"
    assert asyncio.run(store.get_card("42"))["first_name"] == "Ana"


def test_missing_vcard_and_url(fake_redis):
    store = ProfileStore(client=fake_redis)
    assert asyncio.run(store.get_vcard("42")) is None
    assert asyncio.run(store.get_vcard_url("42")) is None
    asyncio.run(store.save_card("42", {"first_name": "Ana"}))
    assert asyncio.run(store.get_vcard_url("42")) is None


def test_malformed_stored_vcard_raises_store_error():
    store = ProfileStore(client=FakeRedis({"cardex:card_vcard:42": '{"text": 1}'}))
    with pytest.raises(ProfileStoreError):
        asyncio.run(store.get_vcard("42"))
