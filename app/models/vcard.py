from pydantic import BaseModel, ConfigDict

from app.core.constants import VCARD_MEDIA_TYPE


class FetchedPhoto(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: bytes
    content_type: str | None = None


# None means the photo was not requested or could not be fetched
PhotoResult = FetchedPhoto | None


class VCardDocument(BaseModel):
    """A complete, folded vCard ready for delivery."""

    model_config = ConfigDict(frozen=True)

    text: str
    filename: str
    media_type: str = VCARD_MEDIA_TYPE

    @property
    def content(self) -> bytes:
        return self.text.encode("utf-8")
