from datetime import datetime, timezone

from app.core.config import settings
from app.core.constants import (
    DEFAULT_PHONE_TYPE_PARAM,
    GENERATIONAL_SUFFIXES,
    PHONE_ORDER,
    PHONE_TYPE_PARAMS,
    VCARD_VERSION,
)
from app.models.profile import AddressEntry, ChannelType, PhoneEntry, ProfileRecord
from app.services.vcard.escaping import escape_param, escape_text


def _enum_value(value) -> str:
    return getattr(value, "value", value) or ""


def is_generational_suffix(suffix: str | None) -> bool:
    """True for Jr./Sr./II/III/IV in any case, with or without a trailing dot."""
    if not suffix:
        return False
    return suffix.strip().rstrip(".").lower() in GENERATIONAL_SUFFIXES


def format_name(profile: ProfileRecord) -> str:
    """
    Build the display name from the name parts.

    Non-empty parts are joined with spaces; a generational suffix is attached
    with a comma instead ("John Smith, Jr.").
    """
    prefix, first, middle, last, suffix = (part.strip() for part in profile.name_parts())
    base = " ".join(part for part in (prefix, first, middle, last) if part)
    if not suffix:
        return base
    if not base:
        return suffix
    separator = ", " if is_generational_suffix(suffix) else " "
    return f"{base}{separator}{suffix}"


def format_revision(now: datetime | None = None) -> str:
    """UTC timestamp with seconds precision, e.g. 2025-11-12T18:47:17Z."""
    moment = now or datetime.now(timezone.utc)
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%SZ")


def header_lines() -> list[str]:
    return ["BEGIN:VCARD", f"VERSION:{VCARD_VERSION}"]


def footer_lines() -> list[str]:
    return ["END:VCARD"]


def sync_lines(profile: ProfileRecord, now: datetime | None = None) -> list[str]:
    lines = []
    if settings.VCARD_PRODID:
        lines.append(f"PRODID:{escape_text(settings.VCARD_PRODID)}")
    lines.append(f"UID:{escape_text(profile.sync_uid)}")
    lines.append(f"REV:{format_revision(now)}")
    return lines


def name_lines(profile: ProfileRecord) -> list[str]:
    components = (
        profile.last_name,
        profile.first_name,
        profile.middle_name,
        profile.prefix,
        profile.suffix,
    )
    return ["N:" + ";".join(escape_text(component) for component in components)]


def formatted_name_lines(profile: ProfileRecord) -> list[str]:
    return [f"FN:{escape_text(format_name(profile))}"]


def organization_lines(profile: ProfileRecord) -> list[str]:
    lines = []
    if profile.org:
        lines.append(f"ORG:{escape_text(profile.org)}")
    if profile.title:
        lines.append(f"TITLE:{escape_text(profile.title)}")
    return lines


def _phone_rank(phone: PhoneEntry) -> int:
    phone_type = _enum_value(phone.type)
    return PHONE_ORDER.index(phone_type) if phone_type in PHONE_ORDER else len(PHONE_ORDER)


def phone_lines(profile: ProfileRecord) -> list[str]:
    lines = []
    for phone in sorted(profile.phones, key=_phone_rank):
        if not phone.value:
            continue
        type_param = PHONE_TYPE_PARAMS.get(_enum_value(phone.type), DEFAULT_PHONE_TYPE_PARAM)
        lines.append(f"TEL;TYPE={type_param}:{escape_text(phone.value)}")
    return lines


def email_lines(profile: ProfileRecord) -> list[str]:
    lines = []
    if profile.email:
        lines.append(f"EMAIL;TYPE=INTERNET,PREF:{escape_text(profile.email.strip().lower())}")
    for entry in profile.emails:
        if not entry.value:
            continue
        sub_type = _enum_value(entry.type) or ChannelType.OTHER.value
        lines.append(f"EMAIL;TYPE=INTERNET,{sub_type}:{escape_text(entry.value.strip().lower())}")
    return lines


def url_lines(profile: ProfileRecord) -> list[str]:
    lines = []
    if profile.website:
        lines.append(f"URL;TYPE=Homepage:{escape_text(profile.website)}")
    for entry in profile.websites:
        if not entry.value:
            continue
        label = escape_param(entry.label) or _enum_value(entry.type) or ChannelType.OTHER.value
        lines.append(f"URL;TYPE={label}:{escape_text(entry.value)}")
    return lines


def _address_line(address: AddressEntry, default_type: ChannelType) -> str:
    sub_type = _enum_value(address.type) or default_type.value
    components = (address.street, address.city, address.region, address.postcode, address.country)
    # PO box and extended address stay empty
    return f"ADR;TYPE={sub_type}:;;" + ";".join(escape_text(component) for component in components)


def address_lines(profile: ProfileRecord) -> list[str]:
    lines = []
    if profile.address and not profile.address.is_empty():
        lines.append(_address_line(profile.address, ChannelType.HOME))
    for address in profile.addresses:
        if address.is_empty():
            continue
        lines.append(_address_line(address, ChannelType.OTHER))
    return lines


def note_lines(profile: ProfileRecord) -> list[str]:
    if not profile.notes:
        return []
    return [f"NOTE:{escape_text(profile.notes)}"]
