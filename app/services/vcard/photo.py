import asyncio
import base64
from urllib.parse import urlparse

import httpx
from loguru import logger

from app.core.base_client import BaseClient
from app.core.config import settings
from app.core.constants import DEFAULT_PHOTO_TYPE, PHOTO_CONTENT_TYPES, PHOTO_SUFFIX_TYPES
from app.core.errors import PhotoFetchError
from app.models.vcard import FetchedPhoto, PhotoResult


class PhotoClient(BaseClient):
    """
    HTTP client used to download profile photos.
    """

    def __init__(
        self,
        timeout: float | None = None,
        max_retries: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(
            timeout=settings.PHOTO_FETCH_TIMEOUT_SECONDS if timeout is None else timeout,
            max_retries=settings.PHOTO_FETCH_MAX_RETRIES if max_retries is None else max_retries,
            transport=transport,
        )


def infer_photo_type(url: str | None, explicit: str | None = None, content_type: str | None = None) -> str:
    """Pick the TYPE parameter: explicit override, URL suffix, response type, then JPEG."""
    if explicit:
        return getattr(explicit, "value", explicit)
    path = urlparse(url or "").path.lower()
    for suffix, photo_type in PHOTO_SUFFIX_TYPES.items():
        if path.endswith(suffix):
            return photo_type
    if content_type:
        mime = content_type.split(";", 1)[0].strip().lower()
        if mime in PHOTO_CONTENT_TYPES:
            return PHOTO_CONTENT_TYPES[mime]
    return DEFAULT_PHOTO_TYPE


class PhotoEmbedder:
    """
    Downloads a photo and turns it into an inline PHOTO property.

    Every fetch failure (network error, non-2xx status, empty or oversize body,
    deadline expiry) is absorbed and reported as None. Cancellation is
    never absorbed.
    """

    def __init__(self, client: PhotoClient | None = None, max_bytes: int | None = None):
        self.client = client or PhotoClient()
        self.max_bytes = settings.PHOTO_MAX_BYTES if max_bytes is None else max_bytes

    async def close(self) -> None:
        await self.client.close()

    async def _download(self, url: str) -> FetchedPhoto:
        try:
            response = await self.client.get_raw(url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise PhotoFetchError(f"Photo request failed: {exc}") from exc

        data = response.content
        if not data:
            raise PhotoFetchError("Photo response body is empty")
        if len(data) > self.max_bytes:
            raise PhotoFetchError(f"Photo is {len(data)} bytes, limit is {self.max_bytes}")
        return FetchedPhoto(data=data, content_type=response.headers.get("content-type"))

    async def fetch(self, url: str | None, timeout: float | None = None) -> PhotoResult:
        if not url:
            return None
        deadline = timeout if timeout is not None else settings.PHOTO_FETCH_TIMEOUT_SECONDS
        try:
            return await asyncio.wait_for(self._download(url), timeout=deadline)
        except asyncio.TimeoutError:
            logger.warning(f"Photo fetch timed out after {deadline}s, omitting PHOTO: {url}")
        except PhotoFetchError as exc:
            logger.warning(f"Omitting PHOTO: {exc}")
        return None


def photo_lines(
    photo: PhotoResult,
    photo_url: str | None = None,
    photo_type: str | None = None,
    uri_fallback: bool = False,
) -> list[str]:
    if isinstance(photo, FetchedPhoto):
        encoded = base64.b64encode(photo.data).decode("ascii")
        image_type = infer_photo_type(photo_url, photo_type, photo.content_type)
        return [f"PHOTO;ENCODING=b;TYPE={image_type}:{encoded}"]
    if uri_fallback and photo_url:
        # Raw URI value with whitespace stripped
        uri = "".join(photo_url.split())
        return [f"PHOTO;VALUE=uri:{uri}"]
    return []
