import json
from typing import Any

import redis.asyncio as redis
from loguru import logger
from pydantic import ValidationError

from app.core.config import settings
from app.core.constants import CARD_CONTACTS_KEY, CARD_KEY, CARD_LINKS_KEY, CARD_VCARD_KEY
from app.core.errors import ProfileStoreError
from app.core.security import redact_identifier
from app.models.vcard import VCardDocument


class ProfileStore:
    """Redis-backed store for card rows, their social links and additional contacts.

    Every read goes to Redis: a profile is always built from the current state
    of storage, never from a cached copy.
    """

    KEY_PREFIX = settings.REDIS_PROFILE_KEY

    def __init__(self, client: redis.Redis | None = None) -> None:
        self._client: redis.Redis | None = client
        if client is None and not settings.REDIS_URL:
            logger.warning("REDIS_URL is not set. Profile lookups will fail until a Redis instance is configured.")

    async def _get_client(self) -> redis.Redis:
        if self._client is None:
            logger.info("Creating shared Redis client for ProfileStore")
            self._client = redis.from_url(
                settings.REDIS_URL,
                decode_responses=True,
                encoding="utf-8",
                socket_connect_timeout=5,
                socket_timeout=5,
                max_connections=getattr(settings, "REDIS_MAX_CONNECTIONS", 100),
                health_check_interval=30,
                socket_keepalive=True,
            )
        return self._client

    async def close(self) -> None:
        """Close the shared Redis client (call on shutdown)."""
        if self._client is None:
            return
        try:
            logger.info("Closing ProfileStore Redis client")
            await self._client.aclose()
        except Exception as e:
            logger.warning(f"Failed to close ProfileStore Redis client: {e}")
        finally:
            self._client = None

    def _card_key(self, card_id: str) -> str:
        return CARD_KEY.format(prefix=self.KEY_PREFIX, card_id=card_id)

    def _links_key(self, card_id: str) -> str:
        return CARD_LINKS_KEY.format(prefix=self.KEY_PREFIX, card_id=card_id)

    def _contacts_key(self, card_id: str) -> str:
        return CARD_CONTACTS_KEY.format(prefix=self.KEY_PREFIX, card_id=card_id)

    def _vcard_key(self, card_id: str) -> str:
        return CARD_VCARD_KEY.format(prefix=self.KEY_PREFIX, card_id=card_id)

    async def _read_json(self, key: str) -> Any:
        try:
            client = await self._get_client()
            raw = await client.get(key)
        except (redis.RedisError, OSError) as exc:
            logger.error(f"Failed to read '{key}' from Redis: {exc}")
            raise ProfileStoreError("Profile storage is unavailable") from exc

        if not raw:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.error(f"Stored value under '{key}' is not valid JSON: {exc}")
            raise ProfileStoreError("Stored profile is unreadable") from exc

    async def get_card(self, card_id: str) -> dict[str, Any] | None:
        """Return the card row, or None when the card does not exist."""
        logger.debug(f"[REDIS] Fetching card {redact_identifier(card_id)}")
        card = await self._read_json(self._card_key(card_id))
        if card is None:
            return None
        if not isinstance(card, dict):
            raise ProfileStoreError("Stored card has an unexpected shape")
        return card

    async def _get_list(self, key: str) -> list[dict[str, Any]]:
        data = await self._read_json(key)
        if not data:
            return []
        if not isinstance(data, list):
            raise ProfileStoreError("Stored card relation has an unexpected shape")
        return [item for item in data if isinstance(item, dict)]

    async def get_social_links(self, card_id: str) -> list[dict[str, Any]]:
        """Social links as ``{"kind": ..., "value": ...}`` rows."""
        return await self._get_list(self._links_key(card_id))

    async def get_additional_contacts(self, card_id: str) -> list[dict[str, Any]]:
        """Extra contacts as ``{"kind": ..., "label": ..., "value": ...}`` rows."""
        return await self._get_list(self._contacts_key(card_id))

    async def save_card(
        self,
        card_id: str,
        card: dict[str, Any],
        links: list[dict[str, Any]] | None = None,
        contacts: list[dict[str, Any]] | None = None,
    ) -> None:
        """Store a card with its relations, replacing whatever was there."""
        try:
            client = await self._get_client()
            await client.set(self._card_key(card_id), json.dumps({**card, "id": card_id}))
            await client.set(self._links_key(card_id), json.dumps(links or []))
            await client.set(self._contacts_key(card_id), json.dumps(contacts or []))
        except (redis.RedisError, OSError) as exc:
            logger.error(f"Failed to store card {redact_identifier(card_id)}: {exc}")
            raise ProfileStoreError("Profile storage is unavailable") from exc
        logger.info(f"Stored card {redact_identifier(card_id)}")

    async def save_vcard(self, card_id: str, document: VCardDocument, vcard_url: str) -> None:
        """Store the rendered document and record its permanent URL on the card.

        Upserts: a later generation always replaces the stored file.
        """
        card = await self.get_card(card_id)
        try:
            client = await self._get_client()
            await client.set(self._vcard_key(card_id), document.model_dump_json())
            if card is not None:
                await client.set(self._card_key(card_id), json.dumps({**card, "vcard_url": vcard_url}))
        except (redis.RedisError, OSError) as exc:
            logger.error(f"Failed to store vCard for card {redact_identifier(card_id)}: {exc}")
            raise ProfileStoreError("Profile storage is unavailable") from exc
        logger.info(f"Stored vCard for card {redact_identifier(card_id)}")

    async def get_vcard(self, card_id: str) -> VCardDocument | None:
        data = await self._read_json(self._vcard_key(card_id))
        if data is None:
            return None
        try:
            return VCardDocument.model_validate(data)
        except ValidationError as exc:
            logger.error(f"Stored vCard for card {redact_identifier(card_id)} is malformed: {exc}")
            raise ProfileStoreError("Stored vCard is unreadable") from exc

    async def get_vcard_url(self, card_id: str) -> str | None:
        card = await self.get_card(card_id)
        if not card:
            return None
        return card.get("vcard_url") or None

    async def ping(self) -> bool:
        try:
            client = await self._get_client()
            return bool(await client.ping())
        except (redis.RedisError, OSError) as exc:
            logger.warning(f"Redis ping failed: {exc}")
            return False


profile_store = ProfileStore()
