import re
from collections.abc import Callable
from datetime import datetime

from loguru import logger

from app.core.config import settings
from app.core.constants import CRLF, VCARD_EXTENSION
from app.models.profile import ProfileRecord
from app.models.vcard import PhotoResult, VCardDocument
from app.services.vcard import fields
from app.services.vcard.folding import fold_document, verify_document
from app.services.vcard.photo import PhotoEmbedder, photo_lines
from app.services.vcard.socials import CompatibilityTriple, social_policy

ProfileRule = Callable[[ProfileRecord], list[str]]

# Emission order between the sync identifiers and the photo
CONTACT_RULES: tuple[ProfileRule, ...] = (
    fields.name_lines,
    fields.formatted_name_lines,
    fields.organization_lines,
    fields.phone_lines,
    fields.email_lines,
    fields.url_lines,
    fields.address_lines,
)


def vcard_filename(name: str | None) -> str:
    """Attachment filename: whitespace runs become '-', falling back to 'contact'."""
    stem = re.sub(r"\s+", "-", str(name or "").strip())
    stem = re.sub(r'[\\/:*?"<>|]', "", stem)
    return f"{stem or 'contact'}{VCARD_EXTENSION}"


def compose_lines(
    profile: ProfileRecord,
    photo: PhotoResult = None,
    *,
    photo_url: str | None = None,
    now: datetime | None = None,
    policy: CompatibilityTriple = social_policy,
) -> list[str]:
    """Logical (unfolded) content lines in their fixed emission order."""
    lines = fields.header_lines()
    lines.extend(fields.sync_lines(profile, now))
    for rule in CONTACT_RULES:
        lines.extend(rule(profile))
    lines.extend(
        photo_lines(
            photo,
            photo_url=photo_url,
            photo_type=profile.photo_type,
            uri_fallback=settings.PHOTO_URI_FALLBACK,
        )
    )
    lines.extend(policy.lines(profile.socials))
    lines.extend(fields.note_lines(profile))
    lines.extend(fields.footer_lines())
    return lines


def render_vcard(
    profile: ProfileRecord,
    photo: PhotoResult = None,
    *,
    photo_url: str | None = None,
    now: datetime | None = None,
    filename_hint: str | None = None,
) -> VCardDocument:
    """
    Render a ProfileRecord and an already fetched photo into a vCard.

    Pure apart from the REV timestamp (pass ``now`` to pin it). The folded
    output is verified before it is returned; a grammar violation raises
    EncodingInvariantViolation instead of producing a malformed document.
    """
    logical = CRLF.join(compose_lines(profile, photo, photo_url=photo_url, now=now)) + CRLF
    text = fold_document(logical)
    verify_document(text)
    return VCardDocument(text=text, filename=vcard_filename(filename_hint or fields.format_name(profile)))


async def build_vcard(
    profile: ProfileRecord,
    embedder: PhotoEmbedder | None = None,
    *,
    include_photo: bool = True,
    timeout: float | None = None,
    now: datetime | None = None,
    filename_hint: str | None = None,
) -> VCardDocument:
    """Fetch the photo (the only suspension point) and render the document."""
    photo_url = profile.photo_url if include_photo else None
    photo: PhotoResult = None
    if photo_url and embedder is not None:
        photo = await embedder.fetch(photo_url, timeout=timeout)
    elif photo_url:
        logger.debug("No photo embedder configured, skipping PHOTO")

    return render_vcard(profile, photo, photo_url=photo_url, now=now, filename_hint=filename_hint)
