from typing import Any

from loguru import logger

from app.core.config import settings
from app.core.constants import SOCIAL_KIND_ALIASES, SOCIAL_PLATFORMS
from app.models.profile import (
    AddressEntry,
    ChannelType,
    EmailEntry,
    PhoneEntry,
    PhoneType,
    ProfileRecord,
    UrlEntry,
)

KNOWN_PLATFORMS = {key for key, _ in SOCIAL_PLATFORMS}


def clean_text(value: Any) -> str | None:
    """Stringify and strip a stored value; blanks collapse to None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def map_social_links(links: list[dict[str, Any]] | None) -> dict[str, str]:
    """Map stored ``{kind, value}`` rows to platform keys; unknown kinds are dropped."""
    socials: dict[str, str] = {}
    for link in links or []:
        kind = str(link.get("kind") or "").strip().lower()
        kind = SOCIAL_KIND_ALIASES.get(kind, kind)
        value = clean_text(link.get("value"))
        if kind in KNOWN_PLATFORMS and value:
            socials[kind] = value
        elif value:
            logger.debug(f"Ignoring social link of unknown kind '{kind}'")
    return socials


def split_additional_contacts(
    contacts: list[dict[str, Any]] | None,
) -> tuple[list[EmailEntry], list[PhoneEntry], list[UrlEntry], list[AddressEntry]]:
    """Sort extra contact rows into emails, phones, URLs and free-form addresses."""
    emails: list[EmailEntry] = []
    phones: list[PhoneEntry] = []
    websites: list[UrlEntry] = []
    addresses: list[AddressEntry] = []

    for contact in contacts or []:
        value = clean_text(contact.get("value"))
        if not value:
            continue
        kind = str(contact.get("kind") or "").strip().lower()
        label = clean_text(contact.get("label"))
        if kind == "email":
            emails.append(EmailEntry(value=value, type=ChannelType.OTHER, label=label))
        elif kind == "phone":
            phones.append(PhoneEntry(value=value, type=PhoneType.OTHER))
        elif kind == "url":
            websites.append(UrlEntry(value=value, type=ChannelType.OTHER, label=label))
        elif kind == "custom":
            addresses.append(AddressEntry(street=value, type=ChannelType.OTHER, label=label))
        else:
            logger.debug(f"Ignoring additional contact of unknown kind '{kind}'")

    return emails, phones, websites, addresses


def card_to_profile(
    card: dict[str, Any],
    links: list[dict[str, Any]] | None = None,
    contacts: list[dict[str, Any]] | None = None,
    include_photo: bool = True,
) -> ProfileRecord:
    """
    Build a ProfileRecord from a stored card row.

    The card's own phone is the mobile number and goes first; its location is
    a single-line work address. The UID is derived from the card id so it stays
    stable across regenerations.
    """
    emails, extra_phones, websites, addresses = split_additional_contacts(contacts)

    phones: list[PhoneEntry] = []
    phone = clean_text(card.get("phone"))
    if phone:
        phones.append(PhoneEntry(value=phone, type=PhoneType.CELL))
    phones.extend(extra_phones)

    location = clean_text(card.get("location"))
    address = AddressEntry(street=location, type=ChannelType.WORK) if location else None

    card_id = clean_text(card.get("id"))
    return ProfileRecord(
        prefix=clean_text(card.get("prefix")),
        first_name=clean_text(card.get("first_name")) or "",
        middle_name=clean_text(card.get("middle_name")),
        last_name=clean_text(card.get("last_name")) or "",
        suffix=clean_text(card.get("suffix")),
        org=clean_text(card.get("company")),
        title=clean_text(card.get("title")),
        email=clean_text(card.get("email")),
        emails=tuple(emails),
        phones=tuple(phones),
        website=clean_text(card.get("website")),
        websites=tuple(websites),
        address=address,
        addresses=tuple(addresses),
        socials=map_social_links(links),
        notes=clean_text(card.get("bio")),
        photo_url=clean_text(card.get("avatar_url")) if include_photo else None,
        uid=f"{settings.UID_PREFIX}{card_id}" if card_id else None,
    )
