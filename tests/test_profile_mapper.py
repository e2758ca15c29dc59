from __future__ import annotations

from app.models.profile import ChannelType, PhoneType
from app.services.profile_mapper import card_to_profile, map_social_links, split_additional_contacts

CARD = {
    "id": "42",
    "prefix": "",
    "first_name": "Ana",
    "middle_name": None,
    "last_name": "Cruz",
    "company": "Acme",
    "title": "  ",
    "email": "ana@x.com",
    "phone": "+1 555 0100",
    "website": "https://ana.dev",
    "location": "Springfield, IL",
    "bio": "Hello",
    "avatar_url": "https://cdn.example.com/ana.jpg",
    "full_name": "Ana Cruz",
}


def test_social_links_map_to_known_platforms():
    links = [
        {"kind": "Instagram", "value": "https://instagram.com/ana"},
        {"kind": "x", "value": "https://x.com/ana"},
        {"kind": "myspace", "value": "https://myspace.com/ana"},
        {"kind": "facebook", "value": ""},
        {"kind": None, "value": "https://example.com"},
    ]
    assert map_social_links(links) == {
        "instagram": "https://instagram.com/ana",
        "twitter": "https://x.com/ana",
    }
    assert map_social_links(None) == {}


def test_additional_contacts_are_split_by_kind():
    emails, phones, websites, addresses = split_additional_contacts(
        [
            {"kind": "email", "label": "Work", "value": "ana@acme.com"},
            {"kind": "phone", "label": "Desk", "value": "+1 555 0199"},
            {"kind": "url", "label": "Portfolio", "value": "https://ana.art"},
            {"kind": "custom", "label": "Studio", "value": "12 Art Lane"},
            {"kind": "email", "label": "Empty", "value": "  "},
            {"kind": "pager", "label": "Old", "value": "123"},
        ]
    )
    assert [(e.value, e.type, e.label) for e in emails] == [("ana@acme.com", ChannelType.OTHER, "Work")]
    assert [(p.value, p.type) for p in phones] == [("+1 555 0199", PhoneType.OTHER)]
    assert [(w.value, w.label) for w in websites] == [("https://ana.art", "Portfolio")]
    assert [(a.street, a.type, a.label) for a in addresses] == [("12 Art Lane", ChannelType.OTHER, "Studio")]


def test_card_to_profile_maps_columns():
    profile = card_to_profile(CARD, [{"kind": "linkedin", "value": "https://linkedin.com/in/ana"}])
    assert profile.prefix is None
    assert profile.first_name == "Ana"
    assert profile.last_name == "Cruz"
    assert profile.org == "Acme"
    assert profile.title is None
    assert profile.email == "ana@x.com"
    assert [(p.value, p.type) for p in profile.phones] == [("+1 555 0100", PhoneType.CELL)]
    assert profile.website == "https://ana.dev"
    assert profile.address.street == "Springfield, IL"
    assert profile.address.type == ChannelType.WORK
    assert profile.notes == "Hello"
    assert profile.photo_url == "https://cdn.example.com/ana.jpg"
    assert dict(profile.socials) == {"linkedin": "https://linkedin.com/in/ana"}
    assert profile.uid == "cardex-42"


def test_card_phone_comes_before_additional_phones():
    profile = card_to_profile(CARD, contacts=[{"kind": "phone", "label": "Desk", "value": "+1 555 0199"}])
    assert [p.value for p in profile.phones] == ["+1 555 0100", "+1 555 0199"]


def test_photo_is_dropped_when_excluded():
    assert card_to_profile(CARD, include_photo=False).photo_url is None


def test_uid_is_stable_for_the_same_card():
    assert card_to_profile(CARD).sync_uid == card_to_profile(dict(CARD)).sync_uid
