from __future__ import annotations

import asyncio

import pytest

from app.core.errors import InputError, NotFoundError, ProfileStoreError
from app.services.profile_store import ProfileStore
from app.services.vcard_service import VCardService
from app.services import vcard_service as vcard_service_module
from tests.helpers import FakeRedis

CARD = {
    "first_name": "Ana",
    "last_name": "Cruz",
    "full_name": "Ana Cruz",
    "email": "ana@x.com",
    "phone": "+1 555 0100",
    "avatar_url": "https://cdn.example.com/ana.png",
    "is_published": True,
}


def _service(embedder, card=CARD, fail=False) -> VCardService:
    store = ProfileStore(client=FakeRedis(fail=fail))
    if card is not None and not fail:
        asyncio.run(
            store.save_card("42", card, links=[{"kind": "instagram", "value": "https://instagram.com/ana"}])
        )
    return VCardService(store=store, embedder=embedder)


def test_generate_returns_complete_document(png_embedder):
    document = asyncio.run(_service(png_embedder).generate("42"))
    text = document.text
    assert text.startswith("BEGIN:VCARD\r\nVERSION:3.0\r\n")
    assert text.endswith("END:VCARD\r\n")
    assert "UID:cardex-42\r\n" in text
    assert "PHOTO;ENCODING=b;TYPE=PNG:" in text
    assert "X-SOCIALPROFILE;type=instagram:https://instagram.com/ana" in text
    assert document.filename == "Ana-Cruz.vcf"


def test_generate_without_photo_skips_fetch(png_embedder):
    document = asyncio.run(_service(png_embedder).generate("42", include_photo=False))
    assert "PHOTO" not in document.text


def test_photo_failure_is_not_caller_visible(failing_embedder):
    document = asyncio.run(_service(failing_embedder).generate("42"))
    assert "PHOTO" not in document.text
    assert document.text.endswith("END:VCARD\r\n")


@pytest.mark.parametrize("card_id", [None, "", "   ", "a b", "4*", True, 4.2])
def test_invalid_identifiers_raise_input_error(png_embedder, card_id):
    with pytest.raises(InputError):
        asyncio.run(_service(png_embedder).generate(card_id))


def test_integer_identifiers_are_accepted(png_embedder):
    document = asyncio.run(_service(png_embedder).generate(42, include_photo=False))
    assert "UID:cardex-42" in document.text


def test_unknown_card_raises_not_found(png_embedder):
    with pytest.raises(NotFoundError):
        asyncio.run(_service(png_embedder).generate("999"))


def test_unpublished_card_is_hidden_when_required(monkeypatch, png_embedder):
    monkeypatch.setattr(vcard_service_module.settings, "REQUIRE_PUBLISHED", True)
    service = _service(png_embedder, card={**CARD, "is_published": False})
    with pytest.raises(NotFoundError):
        asyncio.run(service.generate("42"))


def test_storage_outage_raises_store_error(png_embedder):
    with pytest.raises(ProfileStoreError):
        asyncio.run(_service(png_embedder, fail=True).generate("42"))


@pytest.mark.parametrize(("full_name", "expected"), [("   ", "Ana-Cruz.vcf"), (None, "Ana-Cruz.vcf"), (7, "7.vcf")])
def test_filename_falls_back_to_formatted_name(png_embedder, full_name, expected):
    service = _service(png_embedder, card={**CARD, "full_name": full_name})
    document = asyncio.run(service.generate("42", include_photo=False))
    assert document.filename == expected


def test_publish_stores_document_and_records_url(monkeypatch, png_embedder):
    monkeypatch.setattr(vcard_service_module.settings, "PUBLIC_BASE_URL", "https://cards.example.com/")
    service = _service(png_embedder)

    url = asyncio.run(service.publish("42", include_photo=False))
    assert url == "https://cards.example.com/files/cards/42/Ana-Cruz.vcf"
    assert asyncio.run(service.store.get_vcard_url("42")) == url

    stored = asyncio.run(service.get_published("42", "Ana-Cruz.vcf"))
    assert stored.text.startswith("BEGIN:VCARD\r\n")
    assert "PHOTO" not in stored.text


def test_publish_overwrites_previous_file(png_embedder):
    service = _service(png_embedder)
    asyncio.run(service.publish("42", include_photo=False))
    asyncio.run(service.store.save_card("42", {**CARD, "title": "CTO"}))
    asyncio.run(service.publish("42", include_photo=False))
    assert "TITLE:CTO" in asyncio.run(service.get_published("42", "Ana-Cruz.vcf")).text


def test_unpublished_or_renamed_file_is_not_found(png_embedder):
    service = _service(png_embedder)
    with pytest.raises(NotFoundError):
        asyncio.run(service.get_published("42", "Ana-Cruz.vcf"))
    asyncio.run(service.publish("42", include_photo=False))
    with pytest.raises(NotFoundError):
        asyncio.run(service.get_published("42", "Someone-Else.vcf"))


def test_publish_unknown_card_raises_not_found(png_embedder):
    with pytest.raises(NotFoundError):
        asyncio.run(_service(png_embedder).publish("999"))
