from collections.abc import Mapping
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from app.core.config import settings


class PhoneType(str, Enum):
    CELL = "CELL"
    WORK = "WORK"
    HOME = "HOME"
    MAIN = "MAIN"
    FAX = "FAX"
    OTHER = "OTHER"


class ChannelType(str, Enum):
    """Sub-type shared by emails, URLs and addresses."""

    WORK = "WORK"
    HOME = "HOME"
    OTHER = "OTHER"


class PhotoType(str, Enum):
    JPEG = "JPEG"
    PNG = "PNG"
    GIF = "GIF"


# Channel names used by profile editors that differ from the vCard TYPE token
PHONE_TYPE_ALIASES: dict[str, str] = {"MOBILE": "CELL"}


def _generate_uid() -> str:
    return f"{settings.UID_PREFIX}{uuid4().hex}"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)

    @field_validator("type", mode="before", check_fields=False)
    @classmethod
    def normalize_type(cls, value):
        return value.strip().upper() if isinstance(value, str) else value


class PhoneEntry(_Frozen):
    value: str
    type: PhoneType = PhoneType.OTHER

    @field_validator("type", mode="before")
    @classmethod
    def normalize_phone_type(cls, value):
        if isinstance(value, str):
            value = value.strip().upper()
            return PHONE_TYPE_ALIASES.get(value, value)
        return value


class EmailEntry(_Frozen):
    value: str
    type: ChannelType = ChannelType.OTHER
    label: str | None = None


class UrlEntry(_Frozen):
    value: str
    type: ChannelType = ChannelType.OTHER
    label: str | None = None


class AddressEntry(_Frozen):
    street: str | None = None
    city: str | None = None
    region: str | None = None
    postcode: str | None = None
    country: str | None = None
    type: ChannelType | None = None
    label: str | None = None

    def is_empty(self) -> bool:
        return not any((self.street, self.city, self.region, self.postcode, self.country))


class ProfileRecord(_Frozen):
    """
    Fully populated contact profile, built fresh per request and never mutated.
    """

    prefix: str | None = None
    first_name: str = ""
    middle_name: str | None = None
    last_name: str = ""
    suffix: str | None = None

    org: str | None = None
    title: str | None = None

    email: str | None = Field(default=None, description="Primary email, always marked preferred")
    emails: tuple[EmailEntry, ...] = ()
    phones: tuple[PhoneEntry, ...] = ()
    website: str | None = Field(default=None, description="Primary URL")
    websites: tuple[UrlEntry, ...] = ()
    address: AddressEntry | None = None
    addresses: tuple[AddressEntry, ...] = ()

    socials: tuple[tuple[str, str], ...] = Field(default=(), description="(platform key, URL) pairs")
    notes: str | None = None

    photo_url: str | None = None
    photo_type: PhotoType | None = None
    uid: str | None = None

    _fallback_uid: str = PrivateAttr(default_factory=_generate_uid)

    @field_validator("socials", mode="before")
    @classmethod
    def freeze_socials(cls, value):
        if isinstance(value, Mapping):
            return tuple(value.items())
        return value

    @property
    def sync_uid(self) -> str:
        """The supplied UID, or one generated once for this record."""
        return self.uid or self._fallback_uid

    def name_parts(self) -> list[str]:
        """Name parts in display order: prefix, first, middle, last, suffix."""
        return [
            self.prefix or "",
            self.first_name or "",
            self.middle_name or "",
            self.last_name or "",
            self.suffix or "",
        ]
