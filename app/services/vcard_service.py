from urllib.parse import quote

from loguru import logger

from app.core.config import settings
from app.core.constants import VCARD_FILE_PATH
from app.core.errors import InputError, NotFoundError
from app.core.security import redact_identifier
from app.models.vcard import VCardDocument
from app.services.profile_mapper import card_to_profile, clean_text
from app.services.profile_store import ProfileStore, profile_store
from app.services.vcard import PhotoEmbedder, build_vcard


class VCardService:
    """Generates the vCard for a stored card."""

    def __init__(self, store: ProfileStore | None = None, embedder: PhotoEmbedder | None = None):
        self.store = store or profile_store
        self.embedder = embedder or PhotoEmbedder()

    @staticmethod
    def _validate_card_id(card_id: str | None) -> str:
        if isinstance(card_id, bool) or not isinstance(card_id, (str, int)):
            raise InputError("card_id is required")
        cleaned = str(card_id).strip()
        if not cleaned:
            raise InputError("card_id is required")
        if any(char.isspace() or char in "*?[]" for char in cleaned):
            raise InputError("card_id is malformed")
        return cleaned

    async def generate(
        self, card_id: str | None, include_photo: bool = True, timeout: float | None = None
    ) -> VCardDocument:
        """
        Generate the vCard for ``card_id``.

        Raises InputError for a missing/malformed id and NotFoundError when the
        card does not exist. Photo failures never raise; the PHOTO property is
        simply left out.
        """
        card_id = self._validate_card_id(card_id)
        logger.info(f"[{redact_identifier(card_id)}] Generating vCard (include_photo={include_photo})")

        card = await self.store.get_card(card_id)
        if not card:
            raise NotFoundError("Card not found")
        if settings.REQUIRE_PUBLISHED and not card.get("is_published", False):
            logger.info(f"[{redact_identifier(card_id)}] Refusing vCard for unpublished card")
            raise NotFoundError("Card not found")

        links = await self.store.get_social_links(card_id)
        contacts = await self.store.get_additional_contacts(card_id)
        profile = card_to_profile({**card, "id": card_id}, links, contacts, include_photo=include_photo)

        document = await build_vcard(
            profile,
            self.embedder,
            include_photo=include_photo,
            timeout=timeout,
            filename_hint=clean_text(card.get("full_name")),
        )
        logger.info(f"[{redact_identifier(card_id)}] vCard generated ({len(document.content)} bytes)")
        return document

    @staticmethod
    def vcard_url(card_id: str, filename: str) -> str:
        path = VCARD_FILE_PATH.format(card_id=quote(card_id, safe=""), filename=quote(filename))
        base_url = settings.PUBLIC_BASE_URL.rstrip("/")
        return f"{base_url}/{path}"

    async def publish(self, card_id: str | None, include_photo: bool = True, timeout: float | None = None) -> str:
        """
        Generate the vCard, store it and record its permanent ``vcard_url`` on the card.

        Returns the URL. Every call regenerates, so the stored file always
        reflects the latest card data.
        """
        document = await self.generate(card_id, include_photo=include_photo, timeout=timeout)
        card_id = self._validate_card_id(card_id)
        vcard_url = self.vcard_url(card_id, document.filename)
        await self.store.save_vcard(card_id, document, vcard_url)
        logger.info(f"[{redact_identifier(card_id)}] vCard published at {vcard_url}")
        return vcard_url

    async def get_published(self, card_id: str | None, filename: str) -> VCardDocument:
        """Return the stored vCard for ``card_id``; NotFoundError unless it was published under ``filename``."""
        card_id = self._validate_card_id(card_id)
        document = await self.store.get_vcard(card_id)
        if document is None or document.filename != filename:
            raise NotFoundError("vCard not found")
        return document

    async def close(self) -> None:
        await self.embedder.close()


vcard_service = VCardService()
